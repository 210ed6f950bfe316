# bookstore_contracts/__init__.py
"""
Contract test suite for the demo book-store REST API.

Primary interfaces:
- PayloadGenerator: valid and adversarial inputs
- validate / validate_or_raise: declarative schema checks
- DemoqaClient: account and book-store clients with typed failures
- ScenarioRunner: runs the registered scenarios and reports pass/fail
"""

from .config import Settings, configure_logging
from .exceptions import (
    ClientError,
    Conflict,
    ContractViolation,
    NotFound,
    Timeout,
    TransportError,
    Unauthorized,
    ValidationError,
)
from .models import (
    AccountView,
    AuthToken,
    Book,
    BookCollection,
    CreatedAccount,
    Credentials,
    IsbnList,
    Payload,
    PayloadClass,
    TokenStatus,
)
from .payloads import PayloadGenerator
from .api_caller import APICaller, ApiResult
from .deadline import within, within_async
from .schemas import validate, validate_or_raise
from .clients import AccountClient, AsyncCatalogClient, BookStoreClient, DemoqaClient
from .scenarios import DEFAULT_REGISTRY, ScenarioContext, ScenarioRunner

__all__ = [
    # Primary interface
    "PayloadGenerator",
    "DemoqaClient",
    "ScenarioRunner",
    "ScenarioContext",
    "DEFAULT_REGISTRY",
    "validate",
    "validate_or_raise",

    # Clients and transport
    "AccountClient",
    "BookStoreClient",
    "AsyncCatalogClient",
    "APICaller",
    "ApiResult",
    "within",
    "within_async",

    # Models
    "AccountView",
    "AuthToken",
    "Book",
    "BookCollection",
    "CreatedAccount",
    "Credentials",
    "IsbnList",
    "Payload",
    "PayloadClass",
    "TokenStatus",

    # Errors
    "ClientError",
    "Conflict",
    "ContractViolation",
    "NotFound",
    "Timeout",
    "TransportError",
    "Unauthorized",
    "ValidationError",

    # Configuration
    "Settings",
    "configure_logging"
]
