# bookstore_contracts/schemas/contracts.py
"""
Response shapes of the account and book-store endpoints, as JSON Schema
(draft 7) documents compiled from node trees.
"""

from .validator import (
    Array,
    Boolean,
    Integer,
    Nullable,
    Object,
    OptionalField,
    String,
    compile_schema,
)

BOOK_SCHEMA = compile_schema(Object(
    {
        "isbn": String(min_length=5),
        "title": String(),
        "subTitle": OptionalField(String()),
        "author": String(),
        "publish_date": String(),
        "publisher": String(),
        "pages": Integer(minimum=0),
        "description": String(),
        "website": String(),
    },
    name="Book",
))

BOOK_LIST_SCHEMA = compile_schema(Object(
    {"books": Array(BOOK_SCHEMA, min_items=1)},
    name="BookList",
))

ISBN_LIST_SCHEMA = compile_schema(Object(
    {"books": Array(Object({"isbn": String(min_length=1)}))},
    name="IsbnList",
))

TOKEN_SCHEMA = compile_schema(Object(
    {
        "token": Nullable(String()),
        "expires": OptionalField(Nullable(String())),
        "status": String(min_length=1),
        "result": String(),
    },
    name="TokenResult",
))

CREATED_ACCOUNT_SCHEMA = compile_schema(Object(
    {
        "userID": String(min_length=1),
        "username": String(),
        "books": Array(Object({})),
    },
    name="CreatedAccount",
))

ACCOUNT_SCHEMA = compile_schema(Object(
    {
        "userId": String(min_length=1),
        "username": String(),
        "books": Array(BOOK_SCHEMA),
    },
    name="Account",
))

AUTHORIZED_SCHEMA = compile_schema(Boolean())
