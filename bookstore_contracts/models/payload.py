# bookstore_contracts/models/payload.py
"""
Tagged categories of generated input.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class PayloadClass(Enum):
    VALID = "valid"
    EMPTY = "empty"
    OVERSIZED = "oversized"
    SQL_INJECTION = "sql-injection"
    XSS = "xss"
    UNICODE = "unicode"
    NULL_LIKE = "null-like"
    NUMERIC_EDGE = "numeric-edge"
    SPECIAL_CHARACTERS = "special-characters"
    BOOLEAN = "boolean"
    INVALID_USERNAME = "invalid-username"
    INVALID_PASSWORD = "invalid-password"
    INVALID_ISBN = "invalid-isbn"


@dataclass(frozen=True)
class Payload:
    """One generated input value and the class it was drawn from"""
    payload_class: PayloadClass
    value: Any
    label: str = ""

    def __str__(self) -> str:
        shown = repr(self.value)
        if len(shown) > 40:
            shown = shown[:37] + "..."
        return f"{self.payload_class.value}:{self.label or shown}"
