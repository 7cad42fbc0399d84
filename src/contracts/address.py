"""Bus group address — three-level ``main.middle.sub`` value object."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Component ranges of a three-level group address (5 / 3 / 8 bits).
MAIN_MAX = 31
MIDDLE_MAX = 7
SUB_MAX = 255

_SEP = re.compile(r"[./]")


class AddressError(ValueError):
    """Raised when an address token cannot be turned into an Address."""


@dataclass(frozen=True, slots=True, order=True)
class Address:
    """One group address on the automation bus."""

    main: int
    middle: int
    sub: int

    def __post_init__(self) -> None:
        for label, value, upper in (
            ("main", self.main, MAIN_MAX),
            ("middle", self.middle, MIDDLE_MAX),
            ("sub", self.sub, SUB_MAX),
        ):
            if not 0 <= value <= upper:
                raise AddressError(f"{label} group {value} out of range 0..{upper}")

    def __str__(self) -> str:
        return f"{self.main}.{self.middle}.{self.sub}"

    @property
    def raw(self) -> int:
        """16-bit wire encoding (``main << 11 | middle << 8 | sub``)."""
        return (self.main << 11) | (self.middle << 8) | self.sub

    @classmethod
    def from_raw(cls, raw: int) -> Address:
        if not 0 <= raw <= 0xFFFF:
            raise AddressError(f"raw address {raw} out of range 0..65535")
        return cls((raw >> 11) & 0x1F, (raw >> 8) & 0x07, raw & 0xFF)

    @classmethod
    def parse(cls, token: str) -> Address:
        """Parse ``1.2.3`` (or ``1/2/3``) into an Address.

        Raises:
            AddressError: wrong arity, non-numeric or out-of-range component.
        """
        text = token.strip()
        parts = _SEP.split(text)
        if len(parts) != 3:
            raise AddressError(
                f"address '{text}' must have 3 components, got {len(parts)}"
            )
        values: list[int] = []
        for part in parts:
            if not (part.isascii() and part.isdigit()):
                raise AddressError(f"address '{text}': component '{part}' is not a number")
            values.append(int(part))
        return cls(*values)
