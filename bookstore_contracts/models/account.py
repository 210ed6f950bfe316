# bookstore_contracts/models/account.py
"""
Data models for accounts, credentials and bearer tokens.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .book import Book


class TokenStatus(Enum):
    SUCCESS = "Success"
    FAILED = "Failed"


@dataclass
class Credentials:
    """Username/password pair, created per test and discarded after use"""
    username: str
    password: str

    def to_payload(self) -> Dict[str, str]:
        return {"userName": self.username, "password": self.password}


@dataclass
class AuthToken:
    """
    Result of a token request.

    The remote side answers 200 even when the credentials are wrong and
    reports the logical outcome in `status`, so a failed token is a value,
    not an exception.
    """
    status: TokenStatus
    result: str
    token: Optional[str] = None
    expires: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status is TokenStatus.SUCCESS and bool(self.token)

    @classmethod
    def from_dict(cls, data: Dict) -> "AuthToken":
        return cls(
            status=TokenStatus(data["status"]),
            result=data.get("result") or "",
            token=data.get("token"),
            expires=data.get("expires"),
        )


@dataclass
class CreatedAccount:
    user_id: str
    username: str
    books: List[Dict] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "CreatedAccount":
        return cls(
            user_id=data["userID"],
            username=data["username"],
            books=list(data.get("books", [])),
        )


@dataclass
class AccountView:
    """An account as seen through an authorized read"""
    user_id: str
    username: str
    books: List[Book] = field(default_factory=list)

    @property
    def isbns(self) -> List[str]:
        return [book.isbn for book in self.books]

    def count_isbn(self, isbn: str) -> int:
        return self.isbns.count(isbn)

    @classmethod
    def from_dict(cls, data: Dict) -> "AccountView":
        return cls(
            user_id=data["userId"],
            username=data["username"],
            books=[Book.from_dict(book) for book in data.get("books", [])],
        )
