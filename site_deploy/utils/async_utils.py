# site_deploy/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
import logging
from typing import Any, Callable, Coroutine, List, Optional, Sequence, TypeVar

T = TypeVar('T')
R = TypeVar('R')

logger = logging.getLogger(__name__)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    loop = None
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop
        pass

    if loop and loop.is_running():
        # Already in async context, create new thread
        import threading

        result = None
        exception = None

        def run_in_thread():
            nonlocal result, exception
            try:
                result = asyncio.run(coro)
            except Exception as e:
                exception = e

        thread = threading.Thread(target=run_in_thread)
        thread.start()
        thread.join()

        if exception:
            raise exception
        return result
    else:
        return asyncio.run(coro)


async def retry_async(coro_func: Callable[..., Coroutine[Any, Any, T]],
                      *args,
                      max_attempts: int = 3,
                      delay: float = 1.0,
                      backoff: float = 1.0,
                      exceptions: tuple = (Exception,),
                      **kwargs) -> T:
    """
    Retry async operation

    Args:
        coro_func: Coroutine function
        *args: Function arguments
        max_attempts: Maximum attempts, including the first one
        delay: Delay between attempts
        backoff: Delay multiplier; 1.0 keeps the delay fixed
        exceptions: Exceptions that trigger another attempt
        **kwargs: Function keyword arguments

    Returns:
        Function result

    Raises:
        Last exception if all attempts fail
    """
    current_delay = delay

    for attempt in range(1, max_attempts + 1):
        try:
            return await coro_func(*args, **kwargs)
        except exceptions as e:
            if attempt == max_attempts:
                raise
            logger.warning(f"Attempt {attempt} failed: {e}. Retrying in {current_delay:.1f}s...")
            await asyncio.sleep(current_delay)
            current_delay *= backoff


async def run_in_batches(items: Sequence[T],
                         processor: Callable[[T], Coroutine[Any, Any, R]],
                         batch_size: int = 5,
                         max_attempts: int = 3,
                         retry_delay: float = 1.0,
                         retry_on: tuple = (Exception,),
                         on_batch: Optional[Callable[[int, int], None]] = None) -> List[R]:
    """
    Process items in sequential batches of concurrent, retried calls

    Items within a batch run concurrently; the next batch starts only
    after every call of the current one has finished. Each call gets
    ``max_attempts`` tries with a fixed ``retry_delay`` in between.

    Args:
        items: Items to process
        processor: Async processor function
        batch_size: Number of items to process concurrently
        max_attempts: Attempts per item
        retry_delay: Fixed delay between attempts
        retry_on: Exceptions that trigger a retry
        on_batch: Callback(completed, total) after each batch

    Returns:
        Results in item order

    Raises:
        The first failure of a batch, after the whole batch has settled
    """
    results: List[R] = []
    total = len(items)

    for start in range(0, total, batch_size):
        chunk = items[start:start + batch_size]
        chunk_results = await asyncio.gather(
            *[
                retry_async(
                    processor, item,
                    max_attempts=max_attempts,
                    delay=retry_delay,
                    exceptions=retry_on,
                )
                for item in chunk
            ],
            return_exceptions=True,
        )

        for outcome in chunk_results:
            if isinstance(outcome, BaseException):
                raise outcome

        results.extend(chunk_results)
        if on_batch:
            on_batch(len(results), total)

    return results
