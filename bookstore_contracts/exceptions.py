# bookstore_contracts/exceptions.py
"""
Failure taxonomy surfaced by the domain clients and the schema validator.
"""

from typing import Any, Dict, List, Optional


class ClientError(Exception):
    """Base class for every classified failure of a remote operation"""

    def __init__(
        self,
        message: str,
        operation: str = "",
        status_code: Optional[int] = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        self.body = body

    def snippet(self, limit: int = 200) -> str:
        """First `limit` characters of the response body, for reports"""
        if self.body is None:
            return ""
        text = self.body if isinstance(self.body, str) else repr(self.body)
        return text[:limit]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": str(self),
            "operation": self.operation,
            "status_code": self.status_code,
            "body_snippet": self.snippet(),
        }


class ContractViolation(ClientError):
    """Observed status or shape differs from the documented contract"""


class Unauthorized(ClientError):
    """Missing, invalid or foreign bearer token"""


class NotFound(ClientError):
    """The identifier does not resolve on the remote side"""


class Conflict(ClientError):
    """The resource already exists"""


class Timeout(ClientError):
    """The call did not complete within its deadline"""


class TransportError(ClientError):
    """Connection-level failure before any response was received"""


class ValidationError(ContractViolation):
    """
    A response body does not match its declared schema.

    Carries every field mismatch found, not just the first.
    """

    def __init__(self, errors: List[Any], operation: str = "", body: Any = None):
        self.errors = list(errors)
        summary = "; ".join(str(error) for error in self.errors[:5])
        if len(self.errors) > 5:
            summary += f"; ... and {len(self.errors) - 5} more"
        super().__init__(
            f"Schema validation failed ({len(self.errors)} errors): {summary}",
            operation=operation,
            body=body,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = [str(error) for error in self.errors]
        return data
