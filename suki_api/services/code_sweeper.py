"""
==============================================================================
Expired Code Sweeper Module
==============================================================================

Background task that drops expired short codes from the pending store.

Redemption already rejects expired codes on lookup; the sweeper only keeps
codes nobody ever redeems from piling up in memory.

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from suki_api.config import get_settings
from suki_api.services.transaction_code_service import (
    Clock,
    PendingTransactionStore,
    get_pending_store,
    utc_now,
)


# Module logger
logger = logging.getLogger(__name__)


class CodeSweepTaskManager:
    """
    Manager for the expired-code sweep task.

    Example:
        >>> manager = CodeSweepTaskManager()
        >>> manager.start()  # inside a running event loop
        >>> manager.stop()
    """

    def __init__(
        self,
        store: Optional[PendingTransactionStore] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._settings = get_settings()
        self._store = store if store is not None else get_pending_store()
        self._clock = clock or utc_now
        self._task: Optional[asyncio.Task] = None
        self._running = False

    def sweep(self) -> List[str]:
        """Purge expired codes once and return them."""
        purged = self._store.purge_expired(self._clock())
        if purged:
            logger.info(f"🗑️ Purged {len(purged)} expired codes, {len(self._store)} still pending")
        return purged

    async def _sweep_loop(self) -> None:
        """Background sweep loop."""
        logger.info("🔄 Code sweep task started")

        while self._running:
            try:
                await asyncio.sleep(self._settings.code_sweep_interval_seconds)
                self.sweep()
            except asyncio.CancelledError:
                logger.info("🛑 Code sweep task cancelled")
                break
            except Exception as e:
                logger.error(f"Code sweep task error: {e}")

    def start(self) -> asyncio.Task:
        """
        Start the background sweep task.

        Returns:
            The asyncio Task object
        """
        if self._task is None or self._task.done():
            self._running = True
            self._task = asyncio.create_task(self._sweep_loop())
            logger.info("✅ Code sweep task started")
        return self._task

    def stop(self) -> None:
        """Stop the background sweep task."""
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            logger.info("🛑 Code sweep task stopped")

    @property
    def is_running(self) -> bool:
        return self._running and self._task is not None and not self._task.done()
