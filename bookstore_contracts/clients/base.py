# bookstore_contracts/clients/base.py
"""
Shared request building and response classification for the domain clients.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Type

from ..api_caller import APICaller, ApiResult
from ..config import DEFAULT_BASE_URL
from ..exceptions import ClientError, Conflict, ContractViolation, NotFound, Unauthorized

# Error codes the demo API puts in its {"code", "message"} envelope
ERROR_CODE_CLASSES: Dict[str, Type[ClientError]] = {
    "1204": Conflict,   # User exists!
    "1210": Conflict,   # ISBN already present in the User's Collection!
    "1205": NotFound,   # ISBN supplied is not available in Books Collection!
    "1206": NotFound,   # ISBN supplied is not available in User's Collection!
    "1207": NotFound,   # User not found! / User Id not correct!
}


@dataclass(frozen=True)
class Contract:
    """
    Documented status-code set of one remote operation.

    `failures` maps documented failure statuses to the error they raise.
    Any status outside `success` and `failures` is a ContractViolation.
    """
    operation: str
    success: FrozenSet[int]
    failures: Dict[int, Type[ClientError]] = field(default_factory=dict)


def error_envelope(body: Any) -> Optional[Dict[str, str]]:
    """The {"code", "message"} error envelope, if `body` is one"""
    if isinstance(body, dict) and "code" in body and "message" in body:
        return {"code": str(body["code"]), "message": str(body["message"])}
    return None


def _refine(error_class: Type[ClientError], envelope: Optional[Dict[str, str]]) -> Type[ClientError]:
    """
    Narrow a documented failure class by the envelope code.

    A catch-all 400 takes whatever class the code names. A 401 only turns
    into NotFound when the code says the user or ISBN does not resolve;
    1200 (not authorized) stays Unauthorized.
    """
    if not envelope or envelope["code"] not in ERROR_CODE_CLASSES:
        return error_class
    refined = ERROR_CODE_CLASSES[envelope["code"]]
    if error_class is ContractViolation:
        return refined
    if error_class is Unauthorized and refined is NotFound:
        return refined
    return error_class


def classify(contract: Contract, status: int, body: Any, text: str = "") -> Optional[ClientError]:
    """
    The failure a response represents under `contract`, or None on success.

    Shared by the sync clients and the async catalog sweep.
    """
    if status in contract.success:
        return None

    envelope = error_envelope(body)
    detail = envelope["message"] if envelope else text[:200]
    payload = body if body is not None else text

    error_class = contract.failures.get(status)
    if error_class is None:
        return ContractViolation(
            f"{contract.operation}: expected {sorted(contract.success)}, got {status}: {detail}",
            operation=contract.operation,
            status_code=status,
            body=payload,
        )

    error_class = _refine(error_class, envelope)
    return error_class(
        f"{contract.operation}: {status}: {detail}",
        operation=contract.operation,
        status_code=status,
        body=payload,
    )


class BaseDomainClient:
    """
    Base class for the account and book-store clients.

    Subclasses declare one Contract per operation and call `_call`; the base
    builds URLs and headers and turns every non-success response into a
    typed failure.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, api_caller: Optional[APICaller] = None):
        self.base_url = base_url.rstrip("/")
        self.api_caller = api_caller or APICaller()
        self.logger = logging.getLogger(self.__class__.__name__)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _headers(self, token: Optional[str] = None) -> Dict[str, str]:
        """JSON headers, plus the bearer header only when a token is given"""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _call(
        self,
        contract: Contract,
        method: str,
        path: str,
        token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> ApiResult:
        result = self.api_caller.request(
            method,
            self._url(path),
            operation=contract.operation,
            headers=self._headers(token),
            params=params,
            json=json,
        )
        self._enforce(contract, result)
        return result

    def _enforce(self, contract: Contract, result: ApiResult) -> None:
        error = classify(contract, result.status_code, result.body, result.text)
        if error is None:
            return
        if contract.failures.get(result.status_code) is None:
            self.logger.warning(f"{contract.operation}: undocumented status {result.status_code}")
        else:
            self.logger.info(f"{contract.operation}: {result.status_code} -> {error.__class__.__name__}")
        raise error
