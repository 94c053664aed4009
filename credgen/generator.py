"""
credgen.generator
Secure random string generator using Python's secrets module.
"""

from secrets import SystemRandom
from typing import Optional, Protocol, Sequence

from .charsets import CHARSETS


class RandomSource(Protocol):
    def choice(self, seq: Sequence[str]) -> str: ...


# SystemRandom reads from os.urandom and keeps no state, so one instance is
# safe to share between request threads.
_sysrand = SystemRandom()


def generate(length: int, charset: str, rng: Optional[RandomSource] = None) -> str:
    """
    Return ``length`` characters drawn independently and uniformly from the
    named charset.

    ``rng`` defaults to the OS-backed SystemRandom; tests may pass a seeded
    ``random.Random`` for reproducible output.
    """
    if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
        raise ValueError("length must be a positive integer")
    try:
        chars = CHARSETS[charset]
    except KeyError:
        raise ValueError(f"unknown charset: {charset!r}") from None

    source = rng or _sysrand
    return "".join(source.choice(chars) for _ in range(length))


def generate_password(length: int, rng: Optional[RandomSource] = None) -> str:
    return generate(length, "full", rng)


def generate_username(length: int, rng: Optional[RandomSource] = None) -> str:
    return generate(length, "alphanumeric", rng)
