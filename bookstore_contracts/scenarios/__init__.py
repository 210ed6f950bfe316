# bookstore_contracts/scenarios/__init__.py
"""
Scenario layer: named checks composing payloads, clients and schemas.

Importing this package registers the account and book-store scenarios in
DEFAULT_REGISTRY.
"""

from .assertions import ExpectationFailed, ensure, expect_failure, expect_status, retry_with_backoff
from .context import CleanupLedger, OwnedAccount, ScenarioContext
from .registry import DEFAULT_REGISTRY, Scenario, ScenarioRegistry, scenario
from .runner import ScenarioResult, ScenarioRunner
from . import account, bookstore  # noqa: F401  (registration side effect)

__all__ = [
    "ExpectationFailed",
    "ensure",
    "expect_failure",
    "expect_status",
    "retry_with_backoff",
    "CleanupLedger",
    "OwnedAccount",
    "ScenarioContext",
    "DEFAULT_REGISTRY",
    "Scenario",
    "ScenarioRegistry",
    "scenario",
    "ScenarioResult",
    "ScenarioRunner"
]
