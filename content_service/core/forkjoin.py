"""Fork-join execution of independent backend operations.

Every branch runs as its own task and is always driven to a terminal state
before the call returns; a failing branch never cancels its siblings. When
one or more branches fail, the first failure in completion order is raised.

Examples:
    >>> results = await gather_settled(
    ...     {
    ...         "blob.put": store.put(key, payload),
    ...         "index.upsert": index.upsert(document),
    ...     },
    ...     timeout=30.0,
    ... )

Tests:
    - tests/unit/test_core/test_forkjoin.py
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Mapping

from content_service.errors import BackendError, ContentServiceError

logger = logging.getLogger(__name__)


async def run_branch(operation: str, awaitable: Awaitable[Any], timeout: float | None = None) -> Any:
    """Await one branch, normalizing its failure into a ContentServiceError.

    Args:
        operation: Name of the operation (``blob.put``, ``index.delete``, ...).
        awaitable: The backend call.
        timeout: Deadline in seconds, or None for no deadline.

    Returns:
        The branch result.

    Raises:
        ContentServiceError: Raised by the backend, passed through unchanged.
        BackendError: For timeouts and any other exception.
    """
    try:
        if timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError:
        raise BackendError(f"timed out after {timeout}s", operation=operation) from None
    except ContentServiceError:
        raise
    except Exception as e:
        raise BackendError(f"{type(e).__name__}: {e}", operation=operation) from e


async def gather_settled(
    branches: Mapping[str, Awaitable[Any]],
    timeout: float | None = None,
) -> dict[str, Any]:
    """Run branches concurrently and wait for all of them to settle.

    Args:
        branches: Operation name -> awaitable, in a stable order.
        timeout: Per-branch deadline in seconds (None disables).

    Returns:
        Operation name -> result, in branch order.

    Raises:
        ContentServiceError: The first branch failure in completion order.
    """
    order = list(branches)
    tasks = {
        asyncio.ensure_future(run_branch(operation, awaitable, timeout)): operation
        for operation, awaitable in branches.items()
    }

    results: dict[str, Any] = {}
    failures: list[tuple[str, BaseException]] = []
    pending = set(tasks)

    try:
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            for task in sorted(done, key=lambda t: order.index(tasks[t])):
                operation = tasks[task]
                error = task.exception()
                if error is None:
                    results[operation] = task.result()
                else:
                    failures.append((operation, error))
    finally:
        # Only non-empty when the caller itself was cancelled
        for task in pending:
            task.cancel()

    if failures:
        succeeded = [operation for operation in order if operation in results]
        for operation, error in failures:
            logger.error(f"Branch [{operation}] failed: {error}")
        if succeeded:
            logger.warning(
                f"Partial completion: {succeeded} succeeded, "
                f"{[operation for operation, _ in failures]} failed; nothing rolled back"
            )
        raise failures[0][1]

    return {operation: results[operation] for operation in order}
