"""Domain-level error types raised before any transport I/O happens."""

from __future__ import annotations

from typing import Any


class InvalidInputError(ValueError):
    """Caller supplied a malformed argument (e.g. a CIDR block that does not parse)."""

    def __init__(self, field: str, value: Any, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.value = value
        self.message = message


__all__ = ["InvalidInputError"]
