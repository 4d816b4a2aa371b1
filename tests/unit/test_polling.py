"""Unit tests for timeout and receipt polling helpers."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from faucet.chains.exceptions import ConfirmationCancelledError, ConfirmationTimeoutError
from faucet.chains.polling import wait_for_receipt, with_timeout

TX_HASH = "0x" + "ab" * 32


class TestWithTimeout:
    @pytest.mark.asyncio
    async def test_returns_result(self):
        async def op():
            return 42

        assert await with_timeout(op(), 1.0, "op") == 42

    @pytest.mark.asyncio
    async def test_none_waits_indefinitely(self):
        async def op():
            await asyncio.sleep(0.01)
            return "done"

        assert await with_timeout(op(), None) == "done"

    @pytest.mark.asyncio
    async def test_timeout_raises(self):
        with pytest.raises(TimeoutError, match="slow op timed out"):
            await with_timeout(asyncio.sleep(1), 0.01, "slow op")


class TestWaitForReceipt:
    """Tests for cancellable fixed-interval polling."""

    @pytest.mark.asyncio
    async def test_first_receipt_returned(self):
        fetch = AsyncMock(side_effect=[None, None, {"ok": True}])

        receipt = await wait_for_receipt(fetch, TX_HASH, interval=0.01)

        assert receipt == {"ok": True}
        assert fetch.await_count == 3

    @pytest.mark.asyncio
    async def test_errors_are_transient(self):
        fetch = AsyncMock(side_effect=[ConnectionError("reset"), RuntimeError("boom"), "receipt"])

        assert await wait_for_receipt(fetch, TX_HASH, interval=0.01) == "receipt"

    @pytest.mark.asyncio
    async def test_pre_set_event_skips_lookup(self):
        fetch = AsyncMock()
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(ConfirmationCancelledError) as exc_info:
            await wait_for_receipt(fetch, TX_HASH, chain="starknet", cancel_event=cancel)

        fetch.assert_not_awaited()
        assert exc_info.value.tx_hash == TX_HASH
        assert exc_info.value.chain == "starknet"

    @pytest.mark.asyncio
    async def test_cancel_during_wait(self):
        """Setting the event mid-interval stops the wait without waiting out the tick."""
        fetch = AsyncMock(return_value=None)
        cancel = asyncio.Event()
        asyncio.get_running_loop().call_later(0.05, cancel.set)

        with pytest.raises(ConfirmationCancelledError):
            await asyncio.wait_for(
                wait_for_receipt(fetch, TX_HASH, interval=10, cancel_event=cancel),
                timeout=2,
            )

        fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deadline(self):
        fetch = AsyncMock(return_value=None)

        with pytest.raises(ConfirmationTimeoutError) as exc_info:
            await wait_for_receipt(fetch, TX_HASH, interval=0.01, timeout=0.05)

        assert isinstance(exc_info.value, ConfirmationCancelledError)
        assert exc_info.value.timeout == 0.05

    @pytest.mark.asyncio
    async def test_task_cancellation_propagates(self):
        fetch = AsyncMock(return_value=None)
        task = asyncio.create_task(wait_for_receipt(fetch, TX_HASH, interval=10))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
