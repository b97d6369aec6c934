"""Background task removing timed-out and expired uploads."""

import asyncio
from typing import Optional

from common.logging_config import get_logger
from server import config
from server.services.upload_service import UploadService

logger = get_logger(__name__)


class SessionReaper:
    """
    Background task that periodically discards idle pending uploads and expired files.
    """
    
    def __init__(self, interval_seconds: Optional[int] = None, service: Optional[UploadService] = None):
        """
        Initialize reaper task.
        
        Args:
            interval_seconds: Time between sweeps (defaults to REAPER_INTERVAL)
            service: UploadService performing the sweep
        """
        self.interval_seconds = interval_seconds or config.REAPER_INTERVAL
        self.service = service
        self._running = False
        self._task = None
    
    async def start(self) -> None:
        """Start the background sweep task."""
        if self._running:
            logger.warning("Reaper task already running")
            return
        
        self._running = True
        self._task = asyncio.create_task(self._run())
        logger.info(f"Started session reaper (interval: {self.interval_seconds}s)")
    
    async def stop(self) -> None:
        """Stop the background sweep task."""
        if not self._running:
            return
        
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        
        logger.info("Stopped session reaper")
    
    async def _run(self) -> None:
        """Main loop for the reaper task."""
        while self._running:
            try:
                await asyncio.sleep(self.interval_seconds)
                
                if not self._running:
                    break
                
                await asyncio.to_thread(self.sweep)
                
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in reaper task: {e}", exc_info=True)

    def sweep(self) -> int:
        """Execute one sweep and return the number of uploads removed."""
        service = self.service or UploadService()
        removed = service.reap()
        if removed:
            logger.info(f"Reaper removed {removed} upload(s)")
        return removed
