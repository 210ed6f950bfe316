# bookstore_contracts/deadline.py
"""
Bounded waits around blocking and async calls.

Every network call goes through one of these so a stuck remote side turns
into a Timeout instead of a hung test run.
"""

import asyncio
import concurrent.futures
from typing import Any, Awaitable, Callable, TypeVar

from .exceptions import Timeout

T = TypeVar("T")


def within(func: Callable[..., T], seconds: float, *args: Any, operation: str = "", **kwargs: Any) -> T:
    """
    Run `func(*args, **kwargs)` and give up after `seconds`.

    The call runs on a worker thread; on expiry the thread is abandoned and
    Timeout is raised to the caller.
    """
    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
    future = executor.submit(func, *args, **kwargs)
    try:
        return future.result(timeout=seconds)
    except concurrent.futures.TimeoutError:
        future.cancel()
        raise Timeout(f"Timeout > {seconds:.1f}s", operation=operation) from None
    finally:
        executor.shutdown(wait=False)


async def within_async(awaitable: Awaitable[T], seconds: float, operation: str = "") -> T:
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError:
        raise Timeout(f"Timeout > {seconds:.1f}s", operation=operation) from None
