# log_service/main.py
from __future__ import annotations

import json
import time
import logging
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, Request
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse, PlainTextResponse, Response

from .errors import InvalidPayloadError, LogStoreError
from .models import DeviceRecord
from .store import LogStore

EMPTY_LOG_MESSAGE = "Log file is empty or does not exist"
WRITE_OK_MESSAGE = "Data written successfully"
CLEAR_OK_MESSAGE = "Log file cleared"

# --------------------------------------------------------------------------------------
# Logging
# --------------------------------------------------------------------------------------

LOG = logging.getLogger("devlog.service")
LOG.setLevel(logging.INFO)
if not LOG.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("%(asctime)s - DEVLOG - %(message)s"))
    LOG.addHandler(_handler)

ACCESS_LOG = logging.getLogger("devlog.service.access")
ACCESS_LOG.propagate = False
if not ACCESS_LOG.handlers:
    _access_handler = logging.StreamHandler()
    _access_handler.setFormatter(logging.Formatter("%(message)s"))
    ACCESS_LOG.addHandler(_access_handler)


def create_app(store: LogStore) -> FastAPI:
    """Build the HTTP app around one LogStore; every handler shares its file and lock."""
    app = FastAPI(title="Device Log Service")
    app.state.store = store

    # ----------------------------------------------------------------------------------
    # Observability middleware (correlation id + timing)
    # ----------------------------------------------------------------------------------
    @app.middleware("http")
    async def observability(request: Request, call_next):
        cid = request.headers.get("x-correlation-id") or str(uuid4())
        started = time.time()

        response: Optional[Response] = None
        try:
            response = await call_next(request)
        finally:
            dur_ms = int((time.time() - started) * 1000)
            ACCESS_LOG.info(json.dumps({
                "ts": time.time(),
                "cid": cid,
                "method": request.method,
                "path": request.url.path,
                "status": getattr(response, "status_code", 500),
                "dur_ms": dur_ms,
            }))
        response.headers["x-correlation-id"] = cid
        return response

    # ----------------------------------------------------------------------------------
    # Errors are reported as plain text, like the success bodies
    # ----------------------------------------------------------------------------------
    @app.exception_handler(LogStoreError)
    async def store_error(request: Request, exc: LogStoreError):
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(InvalidPayloadError)
    async def payload_error(request: Request, exc: InvalidPayloadError):
        LOG.warning(f"⚠️ Rejected payload: {exc}")
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    # ----------------------------------------------------------------------------------
    # Health
    # ----------------------------------------------------------------------------------
    @app.get("/healthz")
    def healthz():
        return JSONResponse({"ok": True})

    # ----------------------------------------------------------------------------------
    # Device log
    # ----------------------------------------------------------------------------------
    @app.get("/")
    def read_log():
        """Return the whole log file, or a fixed message when nothing was logged yet"""
        content = store.read()
        if not content:
            # absent and truncated files read the same to callers
            return PlainTextResponse(EMPTY_LOG_MESSAGE)
        return Response(content=content, media_type="text/plain; charset=utf-8")

    @app.post("/")
    async def append_record(request: Request):
        """Decode a device record and append it as one line"""
        record = DeviceRecord.from_json(await request.body())
        line = await run_in_threadpool(store.append, record)
        LOG.info(f"📝 {line.rstrip()}")
        return PlainTextResponse(WRITE_OK_MESSAGE)

    @app.delete("/")
    def clear_log():
        """Truncate the log file"""
        store.clear()
        LOG.info(f"🧹 Cleared {store.path}")
        return PlainTextResponse(CLEAR_OK_MESSAGE)

    return app
