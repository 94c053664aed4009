import random
import re

from credgen.charsets import ALPHANUMERIC, CHARSETS, SYMBOLS, LengthSpec, PASSWORD_LENGTH, USERNAME_LENGTH
from credgen.generator import generate, generate_password, generate_username


def test_length_matches_request():
    for n in (1, 10, 16):
        assert len(generate(n, "alphanumeric")) == n
    for n in (PASSWORD_LENGTH.min, 20, PASSWORD_LENGTH.max):
        assert len(generate(n, "full")) == n


def test_alphanumeric_only_letters_and_digits():
    pw = generate(200, "alphanumeric")
    assert re.fullmatch(r"[A-Za-z0-9]+", pw)


def test_full_charset_includes_symbols():
    pw = generate(500, "full")
    assert any(c in SYMBOLS for c in pw)
    assert any(c.isdigit() for c in pw)
    assert any(c.isalpha() for c in pw)
    assert set(pw) <= set(CHARSETS["full"])


def test_calls_are_independent():
    assert generate(20, "full") != generate(20, "full")


def test_charset_sizes():
    assert len(CHARSETS["alphanumeric"]) == 62
    assert len(CHARSETS["full"]) == 94
    assert len(set(CHARSETS["full"])) == 94
    assert CHARSETS["full"].startswith(ALPHANUMERIC)


def test_charsets_are_read_only():
    try:
        CHARSETS["hex"] = "0123456789abcdef"
        raised = False
    except TypeError:
        raised = True
    assert raised


def test_injected_rng_is_reproducible():
    a = generate(32, "full", random.Random(42))
    b = generate(32, "full", random.Random(42))
    assert a == b
    assert len(a) == 32


def test_wrappers_use_expected_charsets():
    assert re.fullmatch(r"[A-Za-z0-9]+", generate_username(USERNAME_LENGTH.max))
    assert set(generate_password(PASSWORD_LENGTH.max)) <= set(CHARSETS["full"])


def test_bad_preconditions_raise():
    for length, charset in ((0, "full"), (-3, "full"), (5, "hex"), (True, "full"), ("8", "full")):
        try:
            generate(length, charset)
            raised = False
        except ValueError:
            raised = True
        assert raised, (length, charset)


def test_length_spec_rejects_inconsistent_bounds():
    for args in ((0, 10, 5), (8, 4, 6), (4, 8, 9), (4, 8, 3)):
        try:
            LengthSpec(*args)
            raised = False
        except ValueError:
            raised = True
        assert raised, args
