# ============================================================================
# HEARTBEAT SERVER
# ============================================================================
# STATUS: Infrastructure - Standalone heartbeat listener
# PURPOSE: FastAPI app factory and background publish/shutdown lifecycle
# CREATED: 17 OCT 2026
# ============================================================================
"""
Heartbeat Server

For services that do not run FastAPI themselves, HeartbeatServer serves
the heartbeat endpoint on its own port from a background thread.

Usage:
    config = HeartbeatConfig(service_name="orders", port=8181, dependencies=deps)
    server = HeartbeatServer(config)
    server.publish()
    ...
    server.shutdown()

Services that already run FastAPI mount the router instead:
    app.include_router(create_heartbeat_router(config))
"""

import logging
import threading
import time
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI

from heartbeat.__version__ import __version__
from heartbeat.config import HeartbeatConfig
from heartbeat.router import create_heartbeat_router

logger = logging.getLogger(__name__)


def create_app(
    config: HeartbeatConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build a FastAPI application serving only the heartbeat endpoint."""
    config.validate()
    app = FastAPI(
        title=f"{config.service_name} heartbeat",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )
    app.include_router(create_heartbeat_router(config, transport=transport))
    return app


class HeartbeatServer:
    """Runs the heartbeat app with uvicorn in a daemon thread."""

    def __init__(
        self,
        config: HeartbeatConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config.validate()
        self.app = create_app(config, transport=transport)
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def started(self) -> bool:
        return self._server is not None and self._server.started

    def publish(self, startup_timeout: float = 5.0) -> None:
        """
        Start serving in the background.

        Raises:
            RuntimeError: If already published or startup does not finish
        """
        if self._thread is not None:
            raise RuntimeError("heartbeat server already published")

        self._server = uvicorn.Server(
            uvicorn.Config(
                self.app,
                host=self.config.host,
                port=self.config.port,
                log_level=self.config.log_level.lower(),
                access_log=False,
            )
        )
        self._thread = threading.Thread(
            target=self._server.run,
            name=f"heartbeat-{self.config.service_name}",
            daemon=True,
        )
        self._thread.start()

        deadline = time.monotonic() + startup_timeout
        while not self._server.started:
            if not self._thread.is_alive() or time.monotonic() >= deadline:
                self.shutdown()
                raise RuntimeError(
                    f"heartbeat server failed to start on {self.config.host}:{self.config.port}"
                )
            time.sleep(0.05)

        logger.info(
            f"Heartbeat for {self.config.service_name} published at "
            f"http://{self.config.host}:{self.config.port}{self.config.path}"
        )

    def shutdown(self, timeout: float = 10.0) -> None:
        """Stop serving and wait for the listener thread to exit."""
        if self._server is None or self._thread is None:
            return
        self._server.should_exit = True
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning(f"Heartbeat server did not stop within {timeout}s")
        self._server = None
        self._thread = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "create_app",
    "HeartbeatServer",
]
