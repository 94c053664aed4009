"""
credgen.charsets
Character sets and length bounds shared by the generator, the API and the CLI.
"""

import string
from dataclasses import dataclass
from types import MappingProxyType

SYMBOLS = string.punctuation

ALPHANUMERIC = string.ascii_uppercase + string.ascii_lowercase + string.digits

CHARSETS = MappingProxyType({
    "alphanumeric": ALPHANUMERIC,
    "full": ALPHANUMERIC + SYMBOLS,
})


@dataclass(frozen=True)
class LengthSpec:
    """Inclusive bounds and default for a generated string's length."""

    min: int
    max: int
    default: int

    def __post_init__(self):
        if not 0 < self.min <= self.default <= self.max:
            raise ValueError(
                f"invalid length bounds: min={self.min} default={self.default} max={self.max}"
            )


PASSWORD_LENGTH = LengthSpec(min=8, max=128, default=20)
USERNAME_LENGTH = LengthSpec(min=4, max=64, default=10)
