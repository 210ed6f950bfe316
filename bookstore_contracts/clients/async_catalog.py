# bookstore_contracts/clients/async_catalog.py
"""
Concurrent catalog sweep over aiohttp.

Fetches many books at once with a bounded number of requests in flight and
checks each body against the Book schema.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import List, Optional

import aiohttp

from ..config import DEFAULT_BASE_URL
from ..deadline import within_async
from ..exceptions import ClientError, TransportError
from ..models import Book
from ..schemas import BOOK_SCHEMA, validate_or_raise
from .base import classify
from .bookstore import FETCH_BOOK


@dataclass
class CatalogCheck:
    """Outcome of fetching and validating one ISBN"""
    isbn: str
    book: Optional[Book] = None
    error: Optional[ClientError] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None and self.book is not None


class AsyncCatalogClient:
    """
    Async book fetcher with a semaphore-bounded worker pool.

    Use as an async context manager so the aiohttp session is closed:

        async with AsyncCatalogClient(base_url) as catalog:
            checks = await catalog.fetch_books(isbns)
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, max_concurrent: int = 4, timeout: float = 10.0):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
        self.base_url = base_url.rstrip("/")
        self.max_concurrent = max_concurrent
        self.timeout = timeout
        self.semaphore = asyncio.Semaphore(max_concurrent)
        self.session = None
        self.logger = logging.getLogger(self.__class__.__name__)

    async def __aenter__(self):
        """Async context manager entry"""
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            connector=aiohttp.TCPConnector(limit=self.max_concurrent),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        if self.session:
            await self.session.close()

    async def fetch_books(self, isbns: List[str]) -> List[CatalogCheck]:
        """
        Fetch every ISBN concurrently.

        Results come back in the order of `isbns`; per-ISBN failures are
        recorded on the CatalogCheck rather than raised.
        """
        self.logger.info(f"Fetching {len(isbns)} books, concurrency {self.max_concurrent}")
        start_time = time.time()

        checks = await asyncio.gather(*(self.fetch_book(isbn) for isbn in isbns))

        failed = [check for check in checks if not check.ok]
        elapsed = time.time() - start_time
        self.logger.info(f"Catalog sweep done in {elapsed:.1f}s: {len(checks) - len(failed)} ok, {len(failed)} failed")
        return list(checks)

    async def fetch_book(self, isbn: str) -> CatalogCheck:
        async with self.semaphore:
            start_time = time.time()
            try:
                book = await within_async(self._get_book(isbn), self.timeout, operation="fetch_book")
                return CatalogCheck(isbn=isbn, book=book, elapsed=time.time() - start_time)
            except aiohttp.ClientError as e:
                error = TransportError(f"fetch_book {isbn} failed: {e}", operation="fetch_book")
                self.logger.warning(str(error))
                return CatalogCheck(isbn=isbn, error=error, elapsed=time.time() - start_time)
            except ClientError as e:
                self.logger.warning(f"fetch_book {isbn}: {e}")
                return CatalogCheck(isbn=isbn, error=e, elapsed=time.time() - start_time)

    async def _get_book(self, isbn: str) -> Book:
        url = f"{self.base_url}/BookStore/v1/Book"
        async with self.session.get(url, params={"ISBN": isbn}) as response:
            status = response.status
            text = await response.text()

        try:
            body = json.loads(text) if text else None
        except ValueError:
            body = None

        error = classify(FETCH_BOOK, status, body, text)
        if error is not None:
            raise error
        return Book.from_dict(validate_or_raise(BOOK_SCHEMA, body, FETCH_BOOK.operation))
