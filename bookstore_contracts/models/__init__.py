# bookstore_contracts/models/__init__.py
"""
Data models for the book-store contract suite.
"""

from .book import Book, BookCollection, IsbnList
from .account import AccountView, AuthToken, CreatedAccount, Credentials, TokenStatus
from .payload import Payload, PayloadClass

__all__ = [
    "Book",
    "BookCollection",
    "IsbnList",
    "AccountView",
    "AuthToken",
    "CreatedAccount",
    "Credentials",
    "TokenStatus",
    "Payload",
    "PayloadClass"
]
