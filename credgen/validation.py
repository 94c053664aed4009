"""
credgen.validation
Parse and bounds-check user supplied lengths.

Bad input is routine here, so failures come back as values instead of
exceptions: ``validate_length`` returns ``None`` and ``check_length`` returns
a ``LengthError`` describing the rejected parameter.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from .charsets import LengthSpec

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def validate_length(raw: Optional[str], min_len: int, max_len: int, default: int) -> Optional[int]:
    """
    Return the requested length, ``default`` when nothing was supplied,
    or None when ``raw`` is not a base-10 integer inside [min_len, max_len].
    """
    if raw is None or raw == "":
        return default
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw
    elif isinstance(raw, str) and _INTEGER_RE.fullmatch(raw):
        # longer than any in-range literal; int() also refuses huge digit strings
        if len(raw) > len(str(max_len)) + 1:
            return None
        value = int(raw)
    else:
        return None
    if value < min_len or value > max_len:
        return None
    return value


@dataclass(frozen=True)
class LengthError:
    """A length parameter that was out of range or not an integer."""

    param: str
    spec: LengthSpec

    @property
    def message(self) -> str:
        return f"{self.param} must be an integer between {self.spec.min} and {self.spec.max}"


def check_length(param: str, raw: Optional[str], spec: LengthSpec) -> Union[int, LengthError]:
    value = validate_length(raw, spec.min, spec.max, spec.default)
    if value is None:
        return LengthError(param, spec)
    return value
