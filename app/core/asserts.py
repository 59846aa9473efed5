"""Argument checks that raise InvalidArgument before any repository call."""
from typing import Any, Optional

from app.core.exceptions import InvalidArgument


def not_none(value: Any, message: str) -> None:
    if value is None:
        raise InvalidArgument(message)


def has_text(value: Optional[str], message: str) -> None:
    if value is None or not value.strip():
        raise InvalidArgument(message)


def is_true(expression: bool, message: str) -> None:
    if not expression:
        raise InvalidArgument(message)


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()
