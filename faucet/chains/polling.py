"""
Timeout and polling helpers for node RPC calls.

- with_timeout: bound a single round trip
- wait_for_receipt: cancellable fixed-interval receipt polling
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from loguru import logger

from faucet.config.constants import CONFIRMATION_POLL_INTERVAL
from faucet.utils.security import mask_tx_hash

from .exceptions import ConfirmationCancelledError, ConfirmationTimeoutError

T = TypeVar("T")


async def with_timeout(
    coro: Awaitable[T],
    timeout: float | None,
    operation_name: str = "RPC call",
) -> T:
    """
    Execute a coroutine with an optional timeout.

    Args:
        coro: Coroutine to execute
        timeout: Timeout in seconds, None waits indefinitely
        operation_name: Operation name for logging

    Returns:
        Result of the coroutine

    Raises:
        TimeoutError: If the operation times out
    """
    if timeout is None:
        return await coro
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError as e:
        error_msg = f"{operation_name} timed out after {timeout}s"
        logger.error(error_msg)
        raise TimeoutError(error_msg) from e


async def _cancelled_within(cancel_event: asyncio.Event, seconds: float) -> bool:
    """Sleep up to `seconds`, returning True as soon as the event is set."""
    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return False
    return True


async def wait_for_receipt(
    fetch_receipt: Callable[[], Awaitable[Any]],
    tx_hash: str,
    *,
    chain: str | None = None,
    interval: float = CONFIRMATION_POLL_INTERVAL,
    cancel_event: asyncio.Event | None = None,
    timeout: float | None = None,
) -> Any:
    """
    Poll for a transaction receipt on a fixed interval.

    Every tick first waits `interval` seconds (or until the cancel event
    fires), then performs one lookup. Lookup errors are treated as
    transient and retried on the next tick with no backoff growth.

    Args:
        fetch_receipt: Coroutine factory performing a single lookup
        tx_hash: Transaction hash (for errors and logs)
        chain: Chain name (for errors)
        interval: Seconds between lookups
        cancel_event: Set by the caller to abandon the wait
        timeout: Optional overall deadline in seconds

    Returns:
        First non-empty receipt

    Raises:
        ConfirmationCancelledError: If cancel_event was set
        ConfirmationTimeoutError: If the deadline passed without a receipt
    """
    if cancel_event is None:
        cancel_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout if timeout is not None else None
    attempt = 0

    while True:
        wait = interval
        if deadline is not None:
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise ConfirmationTimeoutError(tx_hash, timeout, chain)
            wait = min(interval, remaining)

        if cancel_event.is_set() or await _cancelled_within(cancel_event, wait):
            logger.info(f"Confirmation wait cancelled: {mask_tx_hash(tx_hash)}")
            raise ConfirmationCancelledError(tx_hash, chain)

        if deadline is not None and loop.time() >= deadline:
            raise ConfirmationTimeoutError(tx_hash, timeout, chain)

        attempt += 1
        try:
            receipt = await fetch_receipt()
        except Exception as e:
            logger.debug(
                f"Receipt lookup {attempt} for {mask_tx_hash(tx_hash)} failed, "
                f"retrying in {interval}s: {e}"
            )
            continue

        if receipt is not None:
            logger.debug(f"Receipt for {mask_tx_hash(tx_hash)} found after {attempt} lookups")
            return receipt
