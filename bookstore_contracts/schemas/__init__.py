# bookstore_contracts/schemas/__init__.py
"""
Declarative schemas and the validator that checks response bodies against them.
"""

from .validator import (
    Array,
    Boolean,
    ErrorKind,
    FieldError,
    Integer,
    Nullable,
    Number,
    Object,
    OptionalField,
    String,
    ValidationResult,
    compile_schema,
    validate,
    validate_or_raise,
)
from .contracts import (
    ACCOUNT_SCHEMA,
    AUTHORIZED_SCHEMA,
    BOOK_LIST_SCHEMA,
    BOOK_SCHEMA,
    CREATED_ACCOUNT_SCHEMA,
    ISBN_LIST_SCHEMA,
    TOKEN_SCHEMA,
)

__all__ = [
    # Nodes
    "Array",
    "Boolean",
    "Integer",
    "Nullable",
    "Number",
    "Object",
    "OptionalField",
    "String",

    # Validation
    "ErrorKind",
    "FieldError",
    "ValidationResult",
    "compile_schema",
    "validate",
    "validate_or_raise",

    # Endpoint contracts
    "ACCOUNT_SCHEMA",
    "AUTHORIZED_SCHEMA",
    "BOOK_LIST_SCHEMA",
    "BOOK_SCHEMA",
    "CREATED_ACCOUNT_SCHEMA",
    "ISBN_LIST_SCHEMA",
    "TOKEN_SCHEMA"
]
