# bookstore_contracts/models/book.py
"""
Data models for the book-store catalog and user collections.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional


@dataclass
class Book:
    """Standardized book structure as served by the catalog"""
    isbn: str
    title: str
    author: str
    publisher: str
    publish_date: str
    pages: int
    description: str
    website: str
    sub_title: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "Book":
        """Build a Book from the wire representation (camelCase keys)"""
        return cls(
            isbn=data["isbn"],
            title=data["title"],
            author=data["author"],
            publisher=data["publisher"],
            publish_date=data["publish_date"],
            pages=data["pages"],
            description=data["description"],
            website=data["website"],
            sub_title=data.get("subTitle"),
        )

    def to_dict(self) -> Dict:
        data = {
            "isbn": self.isbn,
            "title": self.title,
            "author": self.author,
            "publisher": self.publisher,
            "publish_date": self.publish_date,
            "pages": self.pages,
            "description": self.description,
            "website": self.website,
        }
        if self.sub_title is not None:
            data["subTitle"] = self.sub_title
        return data


@dataclass
class BookCollection:
    """
    Ordered list of books, either the whole catalog or one user's shelf.
    """
    books: List[Book] = field(default_factory=list)

    @property
    def isbns(self) -> List[str]:
        return [book.isbn for book in self.books]

    def contains(self, isbn: str) -> bool:
        return isbn in self.isbns

    def first(self) -> Book:
        if not self.books:
            raise IndexError("Collection is empty")
        return self.books[0]

    def __len__(self) -> int:
        return len(self.books)

    def __iter__(self) -> Iterator[Book]:
        return iter(self.books)


@dataclass
class IsbnList:
    """ISBNs echoed back by an add-books call"""
    isbns: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "IsbnList":
        return cls(isbns=[entry["isbn"] for entry in data.get("books", [])])
