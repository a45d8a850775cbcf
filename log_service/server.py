"""
Runs the Log Service in a background thread and reports when it is listening.
"""

import logging
import threading
import time
from typing import Optional

import uvicorn
from fastapi import FastAPI

LOG = logging.getLogger("devlog.service")


class ServerStartError(RuntimeError):
    """The listener never became ready (bind failure or startup timeout)."""


class BackgroundServer:
    """uvicorn server on a daemon thread with an explicit readiness wait"""

    def __init__(self, app: FastAPI, host: str = "0.0.0.0", port: int = 8080, log_level: str = "warning"):
        self.host = host
        self.port = port
        config = uvicorn.Config(app, host=host, port=port, log_level=log_level)
        self._server = uvicorn.Server(config)
        self._thread: Optional[threading.Thread] = None
        self._error: Optional[BaseException] = None

    def _serve(self):
        try:
            self._server.run()
        except BaseException as e:
            # uvicorn exits the thread with SystemExit when it cannot bind
            self._error = e

    @property
    def started(self) -> bool:
        return bool(self._server.started)

    @property
    def bound_port(self) -> int:
        """Port actually bound; differs from the configured one when port 0 was requested."""
        if not self.started:
            raise ServerStartError("server is not running")
        for server in self._server.servers:
            for sock in server.sockets:
                return sock.getsockname()[1]
        return self.port

    def start(self, timeout: float = 10.0, poll_interval: float = 0.05) -> 'BackgroundServer':
        """Start the server thread and block until the listening socket is bound."""
        LOG.info(f"🌐 Starting Log Service on {self.host}:{self.port}...")
        self._thread = threading.Thread(target=self._serve, name="devlog-server", daemon=True)
        self._thread.start()

        deadline = time.monotonic() + timeout
        while not self.started:
            if not self._thread.is_alive():
                raise ServerStartError(f"Log Service failed to start on {self.host}:{self.port}: {self._error!r}")
            if time.monotonic() > deadline:
                self.stop()
                raise ServerStartError(f"Log Service not ready after {timeout}s")
            time.sleep(poll_interval)

        LOG.info(f"✅ Log Service listening on port {self.bound_port}")
        return self

    def stop(self, timeout: float = 5.0) -> None:
        self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout)

    def __enter__(self):
        return self.start()

    def __exit__(self, *exc):
        self.stop()
