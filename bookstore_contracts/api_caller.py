# bookstore_contracts/api_caller.py
"""
Single-shot API caller with rate limiting and bounded waits.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from .deadline import within
from .exceptions import Timeout, TransportError


class RateLimiter:
    """Simple rate limiter"""

    def __init__(self, calls_per_second: float = 1.0):
        self.min_interval = 1.0 / calls_per_second if calls_per_second > 0 else 0.0
        self.last_called = 0.0

    def wait(self):
        elapsed = time.time() - self.last_called
        if elapsed < self.min_interval:
            time.sleep(self.min_interval - elapsed)
        self.last_called = time.time()


@dataclass
class ApiResult:
    """Raw outcome of one HTTP exchange"""
    method: str
    url: str
    status_code: int
    body: Any = None
    text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    elapsed: float = 0.0

    @property
    def content_type(self) -> str:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value
        return ""

    def snippet(self, limit: int = 200) -> str:
        return self.text[:limit]


class APICaller:
    """
    Issues one HTTP request per call and reports what came back.

    There is no retry here: a failed or slow call is surfaced to the caller
    as it happened. Each request carries a socket timeout and runs under a
    hard wall-clock deadline of `timeout` + `deadline_slack` seconds.
    """

    def __init__(self, rate_limit: float = 5.0, timeout: float = 10.0, deadline_slack: float = 2.0):
        self.rate_limiter = RateLimiter(rate_limit)
        self.timeout = timeout
        self.deadline_slack = deadline_slack
        self.logger = logging.getLogger(self.__class__.__name__)

    def request(
        self,
        method: str,
        url: str,
        operation: str = "",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        data: Any = None,
        timeout: Optional[float] = None,
    ) -> ApiResult:
        """
        Make one HTTP request with timing.

        Raises:
            Timeout: the socket timeout or the hard deadline expired
            TransportError: the connection failed before a response arrived
        """
        timeout = timeout or self.timeout
        self.rate_limiter.wait()
        start_time = time.time()

        try:
            response = within(
                requests.request,
                timeout + self.deadline_slack,
                method,
                url,
                headers=headers,
                params=params,
                json=json,
                data=data,
                timeout=timeout,
                operation=operation,
            )
        except requests.exceptions.Timeout:
            self.logger.warning(f"Timeout after {timeout}s for {method} {url}")
            raise Timeout(f"{method} {url} timed out after {timeout}s", operation=operation) from None
        except Timeout:
            self.logger.warning(f"Deadline exceeded for {method} {url}")
            raise
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Request failed for {method} {url}: {e}")
            raise TransportError(f"{method} {url} failed: {e}", operation=operation) from e

        elapsed = time.time() - start_time
        result = ApiResult(
            method=method,
            url=url,
            status_code=response.status_code,
            body=self._decode(response),
            text=response.text or "",
            headers=dict(response.headers),
            elapsed=elapsed,
        )
        self.logger.debug(f"{method} {url} -> {result.status_code} in {elapsed:.2f}s")
        return result

    def _decode(self, response: requests.Response) -> Any:
        """JSON body, or None when the body is empty or not JSON"""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            self.logger.debug(f"Non-JSON response body from {response.url}")
            return None
