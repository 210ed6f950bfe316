# bookstore_contracts/clients/demoqa.py
"""
One object bundling the account and book-store clients over a shared caller.
"""

from typing import Optional

from ..api_caller import APICaller
from ..config import Settings
from .account import AccountClient
from .async_catalog import AsyncCatalogClient
from .bookstore import BookStoreClient


class DemoqaClient:
    """
    Entry point for scenarios.

    Both sub-clients share one APICaller, so the rate limit applies to the
    remote host as a whole. `max_concurrent` bounds the async catalog sweep.
    """

    def __init__(self, base_url: str, api_caller: Optional[APICaller] = None, max_concurrent: int = 4):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
        self.base_url = base_url.rstrip("/")
        self.api_caller = api_caller or APICaller()
        self.max_concurrent = max_concurrent
        self.accounts = AccountClient(self.base_url, self.api_caller)
        self.books = BookStoreClient(self.base_url, self.api_caller)

    @classmethod
    def from_settings(cls, settings: Settings) -> "DemoqaClient":
        caller = APICaller(rate_limit=settings.rate_limit, timeout=settings.timeout)
        return cls(settings.base_url, caller, max_concurrent=settings.max_concurrent)

    def catalog(self) -> AsyncCatalogClient:
        """Async catalog client sharing this client's host, timeout and concurrency bound"""
        return AsyncCatalogClient(self.base_url, max_concurrent=self.max_concurrent, timeout=self.api_caller.timeout)
