"""
memprobe.size
AUTHOR: carter-vin

Memory size codec
- parse human notation ("2G", "512M", "1.5GB", "1024") into bytes
- format bytes for operators
- pure, no I/O
"""

from __future__ import annotations

import math

from memprobe.errors import InvalidFormatError

KB = 1024
MB = KB * 1024
GB = MB * 1024
TB = GB * 1024

# Ceiling for parsed and validated sizes (1024 TB)
MAX_MEMORY_SIZE = 1024 * TB

UNIT_MULTIPLIERS: dict[str, int] = {
    "": 1,
    "B": 1,
    "K": KB,
    "KB": KB,
    "M": MB,
    "MB": MB,
    "G": GB,
    "GB": GB,
    "T": TB,
    "TB": TB,
}

_DIGITS = "0123456789"


def is_decimal_integer(value: str) -> bool:
    """
    True for an optionally signed run of ASCII digits ("1_000" and non-ASCII digits excluded)
    """
    digits = value[1:] if value[:1] in ("+", "-") else value
    return bool(digits) and all(ch in _DIGITS for ch in digits)


def _split_number_and_unit(value: str) -> tuple[str, str]:
    """
    Split leading digits/dots from the unit suffix
    """
    for index, ch in enumerate(value):
        if ch not in _DIGITS and ch != ".":
            return value[:index], value[index:]
    return value, ""


class MemorySizeParser:
    """
    Stateless parser/formatter for memory sizes

    Units are case-insensitive powers of 1024: B, K/KB, M/MB, G/GB, T/TB
    """

    def parse(self, value: str) -> int:
        """
        Parse a memory string to bytes

        Raises InvalidFormatError on empty, non-numeric, negative,
        unknown-unit or oversized input
        """
        normalized = value.strip().upper()
        if not normalized:
            raise InvalidFormatError(value, "empty memory string")

        if is_decimal_integer(normalized):
            return self._checked(int(normalized), value)

        number, unit = _split_number_and_unit(normalized)
        if not number:
            raise InvalidFormatError(value, "no numeric value found")

        try:
            amount = float(number)
        except ValueError:
            raise InvalidFormatError(value, f"invalid numeric value: {number}") from None

        if amount < 0:
            raise InvalidFormatError(value, "negative memory size not allowed")

        multiplier = UNIT_MULTIPLIERS.get(unit)
        if multiplier is None:
            raise InvalidFormatError(value, f"unsupported unit: {unit}")

        # digit runs past float range parse as inf
        product = amount * multiplier
        if not math.isfinite(product) or product > MAX_MEMORY_SIZE:
            raise InvalidFormatError(value, "memory size exceeds maximum supported size")

        # int() truncates toward zero
        return self._checked(int(product), value)

    def format(self, value: int) -> str:
        """
        Human-readable size; "Unknown" for the 0 sentinel and negatives
        """
        if value <= 0:
            return "Unknown"
        if value >= GB:
            return f"{value / GB:.2f} GB"
        if value >= MB:
            return f"{value / MB:.0f} MB"
        if value >= KB:
            return f"{value / KB:.0f} KB"
        return f"{value} B"

    def validate(self, value: int) -> None:
        self._checked(value, str(value))

    def _checked(self, value: int, original: str) -> int:
        if value < 0:
            raise InvalidFormatError(original, "negative memory size not allowed")
        if value > MAX_MEMORY_SIZE:
            raise InvalidFormatError(original, "memory size exceeds maximum supported size")
        return value


_PARSER = MemorySizeParser()


def parse_memory_string(value: str) -> int:
    return _PARSER.parse(value)


def format_memory(value: int) -> str:
    return _PARSER.format(value)


def validate_memory_size(value: int) -> None:
    """
    Bounds check for byte counts computed elsewhere

    Raises InvalidFormatError when value < 0 or value > MAX_MEMORY_SIZE
    """
    _PARSER.validate(value)
