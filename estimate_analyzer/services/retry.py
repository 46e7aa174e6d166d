import asyncio
from typing import Any, Awaitable, Callable
from loguru import logger

BASE_DELAY = 1.0
MAX_DELAY = 30.0
BACKOFF_FACTOR = 2


async def with_retry(
    operation: Callable[[], Awaitable[Any]],
    max_retries: int = 3,
    operation_name: str = "operation",
    base_delay: float = BASE_DELAY,
    sleep_func: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Any:
    """
    Await an operation with exponential backoff retry.

    Args:
        operation: Zero-argument coroutine factory (should raise on failure)
        max_retries: Retries after the first attempt
        operation_name: Name for logging purposes
        base_delay: Delay before the first retry, in seconds
        sleep_func: Sleep coroutine (injectable for testing)

    Returns:
        The operation's result. The last error is re-raised once retries run out.
    """
    for attempt in range(max_retries + 1):
        try:
            return await operation()
        except Exception as e:
            if attempt >= max_retries:
                logger.error(f"{operation_name} failed after {attempt + 1} attempts: {e}")
                raise

            delay = min(base_delay * BACKOFF_FACTOR ** attempt, MAX_DELAY)
            logger.warning(
                f"{operation_name} failed (attempt {attempt + 1}/{max_retries + 1}), retrying",
                delay=delay,
                error=str(e)
            )
            await sleep_func(delay)
