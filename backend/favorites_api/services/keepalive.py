"""
Favorites API Backend: Keep-Alive Job
======================================

What:  Periodic GET against the service's own public URL.
Why:   Free-tier hosts put idle instances to sleep after ~15 minutes; a ping
       every 14 minutes keeps the API warm for the mobile client.
When:  Started by the bootstrap only in production, once the server listens;
       stopped on shutdown.

A failed ping is logged and the loop carries on; the job never affects
request handling.
"""

import asyncio
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class KeepAliveJob:
    """
    Background asyncio task issuing `GET url` every `interval_seconds`.

    Args:
        url: Target URL (usually the deployed /api/health)
        interval_seconds: Pause between pings
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        url: str,
        interval_seconds: float = 840,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.interval_seconds = interval_seconds
        self.timeout = timeout
        self._transport = transport
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the loop on the running event loop (no-op if already running)."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name="keepalive-job"
        )
        logger.info(
            "Keep-alive job started: GET %s every %ss", self.url, self.interval_seconds
        )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("Keep-alive job had already failed: %s (%s)", str(e), type(e).__name__)
        self._task = None
        logger.info("Keep-alive job stopped")

    async def run_once(self, client: httpx.AsyncClient) -> bool:
        """Send one ping. Returns True on HTTP 200."""
        try:
            response = await client.get(self.url)
        except httpx.HTTPError as e:
            logger.error("Error while sending keep-alive request: %s", str(e))
            return False

        if response.status_code == 200:
            logger.info("Keep-alive request sent successfully")
            return True
        logger.warning("Keep-alive request failed: %d", response.status_code)
        return False

    async def _run(self) -> None:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            while True:
                await asyncio.sleep(self.interval_seconds)
                try:
                    await self.run_once(client)
                except Exception as e:
                    # One bad tick must not end the schedule
                    logger.error(
                        "Unexpected error in keep-alive loop: %s (%s)",
                        str(e), type(e).__name__, exc_info=True,
                    )
