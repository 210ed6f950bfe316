# bookstore_contracts/scenarios/context.py
"""
Per-scenario fixture object.

Each scenario gets a fresh ScenarioContext instead of sharing user ids and
tokens through module-level variables, so the outcome of one scenario never
depends on which scenarios ran before it.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..api_caller import ApiResult
from ..clients import DemoqaClient
from ..exceptions import ClientError, ContractViolation, NotFound, Unauthorized
from ..models import CreatedAccount, Credentials
from ..payloads import PayloadGenerator


class CleanupLedger:
    """
    Counts best-effort cleanup attempts, the ones that failed, and the ones
    skipped because the account could no longer be reached with its token.
    """

    def __init__(self):
        self.attempted = 0
        self.failures: List[Dict[str, Any]] = []
        self.skips: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def skipped(self) -> int:
        return len(self.skips)

    def record_attempt(self) -> None:
        with self._lock:
            self.attempted += 1

    def record_failure(self, user_id: str, error: ClientError) -> None:
        with self._lock:
            entry = error.to_dict()
            entry["user_id"] = user_id
            self.failures.append(entry)

    def record_skip(self, user_id: str, error: ClientError) -> None:
        with self._lock:
            entry = error.to_dict()
            entry["user_id"] = user_id
            self.skips.append(entry)


@dataclass
class OwnedAccount:
    """An account created during a scenario that teardown must remove"""
    user_id: str
    credentials: Credentials
    token: Optional[str] = None


class ScenarioContext:
    """
    Fixture for one scenario: a client, a payload generator, and the
    accounts the scenario created.

    `provision()` sets up the primary identity (account + token). Every
    account created through `new_account()` is removed again by
    `teardown()`, whose failures are logged and counted but never raised.
    """

    def __init__(
        self,
        client: DemoqaClient,
        generator: Optional[PayloadGenerator] = None,
        ledger: Optional[CleanupLedger] = None,
    ):
        self.client = client
        self.generator = generator or PayloadGenerator()
        self.ledger = ledger or CleanupLedger()
        self.credentials: Optional[Credentials] = None
        self.user_id: Optional[str] = None
        self.token: Optional[str] = None
        self.owned: List[OwnedAccount] = []
        self.logger = logging.getLogger(self.__class__.__name__)

    def __enter__(self) -> "ScenarioContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.teardown()

    # ===== Setup =====

    def provision(self) -> "ScenarioContext":
        """Create the primary account and obtain its token"""
        credentials = self.generator.unique_credentials()
        account = self.new_account(credentials)
        self.credentials = credentials
        self.user_id = account.user_id
        self.token = self.login(credentials)
        return self

    def new_account(self, credentials: Optional[Credentials] = None) -> CreatedAccount:
        """Create an account that will be cleaned up after the scenario"""
        credentials = credentials or self.generator.unique_credentials()
        account = self.client.accounts.create_account(credentials)
        self.owned.append(OwnedAccount(account.user_id, credentials))
        return account

    def login(self, credentials: Credentials) -> str:
        """Issue a token and remember it for teardown"""
        token = self.client.accounts.issue_token(credentials)
        if not token.is_success:
            raise ContractViolation(
                f"issue_token refused fresh credentials: {token.result}",
                operation="issue_token",
                status_code=200,
                body=token.result,
            )
        for owned in self.owned:
            if owned.credentials == credentials:
                owned.token = token.token
        return token.token

    def forget(self, user_id: str) -> None:
        """Drop an account the scenario already deleted itself"""
        self.owned = [owned for owned in self.owned if owned.user_id != user_id]

    def raw(self, method: str, path: str, **kwargs: Any) -> ApiResult:
        """Send a request without any contract enforcement"""
        return self.client.api_caller.request(method, f"{self.client.base_url}{path}", **kwargs)

    # ===== Teardown =====

    def teardown(self) -> None:
        """Best-effort removal of every owned account"""
        for owned in reversed(self.owned):
            self.ledger.record_attempt()
            try:
                self._remove(owned)
            except NotFound as e:
                # Already gone; nothing left to clean
                self.logger.debug(f"Cleanup of {owned.user_id} skipped: {e}")
            except Unauthorized as e:
                # Token went stale; the account may still exist
                self.logger.info(f"Cleanup of {owned.user_id} skipped, token refused: {e}")
                self.ledger.record_skip(owned.user_id, e)
            except ClientError as e:
                self.logger.warning(f"Cleanup of {owned.user_id} failed: {e}")
                self.ledger.record_failure(owned.user_id, e)
        self.owned = []

    def _remove(self, owned: OwnedAccount) -> None:
        if owned.token is None:
            token = self.client.accounts.issue_token(owned.credentials)
            if not token.is_success:
                raise NotFound(f"No token for {owned.user_id}: {token.result}", operation="teardown")
            owned.token = token.token
        self.client.books.remove_all_books(owned.user_id, owned.token)
        self.client.accounts.delete_account(owned.user_id, owned.token)
