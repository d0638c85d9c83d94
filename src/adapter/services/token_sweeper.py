"""
Token Sweeper

Background task that purges expired remember-me tokens on a fixed interval.
"""

import asyncio
import logging
from typing import Callable, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.sessions import DEFAULT_RETENTION_DAYS, SessionLifecycleManager

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 86400


class TokenSweeper:
    """
    Runs SessionLifecycleManager.purge_expired_tokens periodically.

    Each run gets its own database session. A failed run is logged and the
    next run happens after the usual interval.
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        interval_seconds: int = DEFAULT_INTERVAL_SECONDS,
        retention_days: int = DEFAULT_RETENTION_DAYS,
    ):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.retention_days = retention_days
        self._task: Optional[asyncio.Task] = None

    async def run_once(self) -> int:
        """Purge expired tokens once. Returns the number of deleted tokens."""
        async with self.session_factory() as session:
            manager = SessionLifecycleManager(
                SqlAlchemyUnitOfWork(session), retention_days=self.retention_days
            )
            result = await manager.purge_expired_tokens()

        if result.is_err():
            logger.error(f"Token sweep failed: {result.error.code}")
            return 0
        return result.value

    async def _run(self):
        while True:
            try:
                deleted = await self.run_once()
                if deleted > 0:
                    logger.info(f"Token sweep completed: {deleted} expired token(s) removed")
                await asyncio.sleep(self.interval_seconds)
            except asyncio.CancelledError:
                logger.info("Token sweep task cancelled")
                break
            except Exception as e:
                logger.error(f"Error in token sweep task: {e}")
                await asyncio.sleep(self.interval_seconds)

    def start(self):
        """Start the periodic sweep in the running event loop"""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())
            logger.debug("Started token sweep task")

    async def stop(self):
        """Cancel the periodic sweep and wait for the task to finish"""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            logger.debug("Stopped token sweep task")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
