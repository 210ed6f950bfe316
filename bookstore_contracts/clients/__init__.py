# bookstore_contracts/clients/__init__.py
"""
Domain clients for the account and book-store APIs.
"""

from .base import BaseDomainClient, Contract, classify
from .account import AccountClient
from .bookstore import BookStoreClient
from .demoqa import DemoqaClient
from .async_catalog import AsyncCatalogClient, CatalogCheck

__all__ = [
    "BaseDomainClient",
    "Contract",
    "classify",
    "AccountClient",
    "BookStoreClient",
    "DemoqaClient",
    "AsyncCatalogClient",
    "CatalogCheck"
]
