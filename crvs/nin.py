from __future__ import annotations

import re

NIN_LENGTH = 15

_NIN_RE = re.compile(r"^\d{15}$")
_NON_DIGIT_RE = re.compile(r"\D")


def is_valid_nin(value: str | None) -> bool:
    if not value:
        return False
    return bool(_NIN_RE.match(value))


def clean_nin_input(value: str | None) -> str:
    """Keep only digits, at most 15 of them (search box normalisation)."""

    if not value:
        return ""
    return _NON_DIGIT_RE.sub("", value)[:NIN_LENGTH]


def format_nin(value: str | None) -> str | None:
    """Group a NIN as ``123456-789012-345`` for display.

    Anything that is not exactly 15 characters long is returned unchanged.
    """

    if not value or len(value) != NIN_LENGTH:
        return value
    return f"{value[:6]}-{value[6:12]}-{value[12:]}"
