"""
Keep-alive for the hub: the front-end pings /api/heartbeat every few seconds
while the tab is open. Once the pings stop for longer than the timeout the
process exits, so closing the browser also closes the server.
"""
import asyncio
import logging
import os
import time

logger = logging.getLogger("hub.heartbeat")

DEFAULT_TIMEOUT = 10.0
DEFAULT_INTERVAL = 5.0


class Heartbeat:
    def __init__(self, timeout: float = DEFAULT_TIMEOUT, clock=time.monotonic):
        self.timeout = timeout
        self.clock = clock
        self.last_beat = clock()

    def beat(self) -> None:
        self.last_beat = self.clock()

    def elapsed(self) -> float:
        return self.clock() - self.last_beat

    def expired(self) -> bool:
        return self.elapsed() > self.timeout


def shutdown() -> None:
    # Skips uvicorn's graceful shutdown; in-flight requests are dropped.
    os._exit(0)


def log_shutdown_banner() -> None:
    logger.warning("========================================")
    logger.warning("  Pagina fechada - Encerrando servidor")
    logger.warning("========================================")


async def watch(heartbeat: Heartbeat, interval: float = DEFAULT_INTERVAL, on_timeout=shutdown) -> None:
    """Check the heartbeat every `interval` seconds; call `on_timeout` once it expires."""
    while True:
        await asyncio.sleep(interval)
        if heartbeat.expired():
            logger.info("no heartbeat for %.1fs (timeout %.1fs)", heartbeat.elapsed(), heartbeat.timeout)
            log_shutdown_banner()
            on_timeout()
            return
