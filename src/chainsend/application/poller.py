"""Bounded polling for a remote transfer state."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..domain.entities import Transfer, TransferStateReceipt
from ..domain.errors import TransferStateTimeoutError, WaitCancelledError
from ..domain.shared import LedgerClientProtocol

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

DEFAULT_ATTEMPTS = 5
DEFAULT_INTERVAL = 1.0


class CancellationToken:
    """Lets a caller abort a pending wait early."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


class TransferStatePoller:
    """Fixed-count, fixed-interval wait for a transfer to reach a state.

    No backoff and no jitter: at most ``attempts`` observations, with
    ``interval`` seconds of sleep after every unsuccessful one except the last.
    """

    def __init__(
        self,
        ledger: LedgerClientProtocol,
        attempts: int = DEFAULT_ATTEMPTS,
        interval: float = DEFAULT_INTERVAL,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        if interval < 0:
            raise ValueError("interval must not be negative")
        self.ledger = ledger
        self.attempts = attempts
        self.interval = interval
        self._sleep = sleep

    async def _pause(
        self, transfer: Transfer, target_state: str, token: Optional[CancellationToken]
    ) -> None:
        if token is None:
            await self._sleep(self.interval)
            return
        sleeper = asyncio.ensure_future(self._sleep(self.interval))
        canceller = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait(
                {sleeper, canceller}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (sleeper, canceller):
                task.cancel()
            await asyncio.gather(sleeper, canceller, return_exceptions=True)
        if token.cancelled:
            raise WaitCancelledError(transfer.id, target_state)

    async def wait_for_transfer_state(
        self,
        transfer: Transfer,
        target_state: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> TransferStateReceipt:
        """Return the first receipt showing ``target_state``.

        Raises:
            TransferStateTimeoutError: After ``attempts`` mismatching observations.
            WaitCancelledError: If ``cancel_token`` is cancelled first.
        """
        for attempt in range(1, self.attempts + 1):
            if cancel_token is not None and cancel_token.cancelled:
                raise WaitCancelledError(transfer.id, target_state)
            receipt = await self.ledger.get_transfer_state(transfer)
            if receipt.message.state == target_state:
                return receipt
            logger.debug(
                "Transfer %s is %s, waiting for %s (attempt %d/%d)",
                transfer.id,
                receipt.message.state,
                target_state,
                attempt,
                self.attempts,
            )
            # No pause after the final miss.
            if attempt < self.attempts:
                await self._pause(transfer, target_state, cancel_token)

        logger.warning(
            "Transfer %s did not reach %s after %d attempts",
            transfer.id,
            target_state,
            self.attempts,
        )
        raise TransferStateTimeoutError(transfer.id, target_state, self.attempts)


async def wait_for_transfer_state(
    ledger: LedgerClientProtocol,
    transfer: Transfer,
    target_state: str,
    cancel_token: Optional[CancellationToken] = None,
) -> TransferStateReceipt:
    """Wait with the default policy of 5 attempts one second apart."""
    poller = TransferStatePoller(ledger)
    return await poller.wait_for_transfer_state(transfer, target_state, cancel_token)
