# bookstore_contracts/scenarios/assertions.py
"""
Assertion and resilience helpers for scenarios.
"""

import logging
import time
from typing import Any, Callable, Iterable, Optional, Tuple, Type, TypeVar, Union

from ..api_caller import ApiResult
from ..exceptions import ClientError, Timeout

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ExpectationFailed(AssertionError):
    """A scenario expectation did not hold; keeps the observed status and body"""

    def __init__(self, message: str, status_code: Optional[int] = None, body_snippet: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body_snippet = body_snippet


def expect_status(outcome: Union[ApiResult, ClientError], allowed: Iterable[int]) -> None:
    """Assert that a raw result or a classified failure carries an allowed status"""
    allowed = set(allowed)
    status = outcome.status_code
    if status not in allowed:
        raise ExpectationFailed(
            f"expected status in {sorted(allowed)}, got {status}",
            status_code=status,
            body_snippet=outcome.snippet(),
        )


def expect_failure(
    func: Callable[..., Any],
    *error_types: Type[ClientError],
    statuses: Optional[Iterable[int]] = None,
) -> ClientError:
    """
    Call `func` and require it to raise one of `error_types`.

    Returns the error so the scenario can inspect its body. When `statuses`
    is given the error's status code must be one of them as well.
    """
    error_types = error_types or (ClientError,)
    try:
        outcome = func()
    except error_types as e:
        if statuses is not None:
            expect_status(e, statuses)
        return e
    except ClientError as e:
        raise ExpectationFailed(
            f"expected {[t.__name__ for t in error_types]}, got {e.__class__.__name__}: {e}",
            status_code=e.status_code,
            body_snippet=e.snippet(),
        ) from e
    raise ExpectationFailed(
        f"expected {[t.__name__ for t in error_types]}, call succeeded with {outcome!r}"[:300]
    )


def ensure(condition: bool, message: str) -> None:
    if not condition:
        raise ExpectationFailed(message)


def retry_with_backoff(
    func: Callable[[], T],
    attempts: int = 3,
    base_delay: float = 1.0,
    retry_on: Tuple[Type[BaseException], ...] = (Timeout,),
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Opt-in resilience for a scenario step that tolerates transient failure.

    Nothing in the clients retries on its own; a scenario wraps a call here
    when it explicitly accepts that risk.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be at least 1, got {attempts}")
    for attempt in range(attempts):
        try:
            return func()
        except retry_on as e:
            if attempt == attempts - 1:
                raise
            sleep_time = base_delay * (2 ** attempt)  # 1s, 2s, 4s, ...
            logger.info(f"Attempt {attempt + 1} failed ({e}); backing off for {sleep_time}s")
            sleep(sleep_time)
    raise AssertionError("unreachable")
