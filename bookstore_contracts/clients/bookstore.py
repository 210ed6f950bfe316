# bookstore_contracts/clients/bookstore.py
"""
Book-store API client: catalog reads and per-user collection changes.
"""

from typing import List, Optional

from ..exceptions import Conflict, ContractViolation, NotFound, Unauthorized
from ..models import AccountView, Book, BookCollection, IsbnList
from ..schemas import (
    ACCOUNT_SCHEMA,
    BOOK_LIST_SCHEMA,
    BOOK_SCHEMA,
    ISBN_LIST_SCHEMA,
    validate_or_raise,
)
from .base import BaseDomainClient, Contract

LIST_CATALOG = Contract("list_catalog", success=frozenset({200}))
FETCH_BOOK = Contract(
    "fetch_book",
    success=frozenset({200}),
    failures={400: NotFound, 404: NotFound},
)
ADD_BOOKS = Contract(
    "add_books",
    success=frozenset({201}),
    failures={400: ContractViolation, 401: Unauthorized, 404: NotFound, 409: Conflict},
)
REPLACE_BOOK = Contract(
    "replace_book",
    success=frozenset({200}),
    failures={400: ContractViolation, 401: Unauthorized, 404: NotFound},
)
REMOVE_BOOK = Contract(
    "remove_book",
    success=frozenset({200, 204}),
    failures={400: ContractViolation, 401: Unauthorized, 404: NotFound},
)
REMOVE_ALL_BOOKS = Contract(
    "remove_all_books",
    success=frozenset({200, 204}),
    failures={400: ContractViolation, 401: Unauthorized, 404: NotFound},
)


class BookStoreClient(BaseDomainClient):
    """Client for /BookStore/v1"""

    def list_catalog(self) -> BookCollection:
        result = self._call(LIST_CATALOG, "GET", "/BookStore/v1/Books")
        body = validate_or_raise(BOOK_LIST_SCHEMA, result.body, LIST_CATALOG.operation)
        return BookCollection([Book.from_dict(book) for book in body["books"]])

    def fetch_book(self, isbn: str) -> Book:
        result = self._call(FETCH_BOOK, "GET", "/BookStore/v1/Book", params={"ISBN": isbn})
        body = validate_or_raise(BOOK_SCHEMA, result.body, FETCH_BOOK.operation)
        return Book.from_dict(body)

    def add_books(self, user_id: str, token: Optional[str], isbns: List[str]) -> IsbnList:
        """
        Add ISBNs to a user's collection.

        Raises:
            Conflict: an ISBN is already in the collection
            NotFound: an ISBN is not in the catalog, or the user is unknown
            Unauthorized: missing or invalid token
        """
        payload = {
            "userId": user_id,
            "collectionOfIsbns": [{"isbn": isbn} for isbn in isbns],
        }
        result = self._call(ADD_BOOKS, "POST", "/BookStore/v1/Books", token=token, json=payload)
        body = validate_or_raise(ISBN_LIST_SCHEMA, result.body, ADD_BOOKS.operation)
        added = IsbnList.from_dict(body)
        self.logger.info(f"Added {len(added.isbns)} books to {user_id}")
        return added

    def replace_book(self, user_id: str, token: Optional[str], old_isbn: str, new_isbn: str) -> AccountView:
        payload = {"userId": user_id, "isbn": new_isbn}
        result = self._call(
            REPLACE_BOOK, "PUT", f"/BookStore/v1/Books/{old_isbn}", token=token, json=payload
        )
        body = validate_or_raise(ACCOUNT_SCHEMA, result.body, REPLACE_BOOK.operation)
        return AccountView.from_dict(body)

    def remove_book(self, user_id: str, token: Optional[str], isbn: str) -> None:
        payload = {"userId": user_id, "isbn": isbn}
        self._call(REMOVE_BOOK, "DELETE", "/BookStore/v1/Book", token=token, json=payload)
        self.logger.info(f"Removed {isbn} from {user_id}")

    def remove_all_books(self, user_id: str, token: Optional[str]) -> None:
        """Empty a user's collection; emptying an empty collection is a no-op"""
        self._call(
            REMOVE_ALL_BOOKS, "DELETE", "/BookStore/v1/Books", token=token, params={"UserId": user_id}
        )
        self.logger.info(f"Removed all books from {user_id}")
