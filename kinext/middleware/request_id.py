"""Request ID and access log middleware.

Forwards a client X-Request-ID when it is safe to log, otherwise generates
one. The id is stored in scope["state"] (request.state.request_id), echoed
on the response and written on a single access log line per request.
Raw ASGI so streaming responses are not buffered.
"""

import logging
import re
import time
import uuid
from typing import Callable

logger = logging.getLogger("kinext.access")

REQUEST_ID_MAX_LENGTH = 64
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9_-]{1,%d}$" % REQUEST_ID_MAX_LENGTH)


def _header(scope: dict, name: bytes) -> str | None:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("latin-1")
    return None


def request_id_from(raw: str | None) -> str:
    """Return the client's id if it is short and safe, else a fresh uuid4 hex."""
    if raw:
        raw = raw.strip()
        if _SAFE_REQUEST_ID.fullmatch(raw):
            return raw
    return uuid.uuid4().hex


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    header_key = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = request_id_from(_header(scope, header_key))
        scope.setdefault("state", {})["request_id"] = request_id
        started = time.perf_counter()
        status_code = 500

        async def send_with_id(message: dict) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                message["headers"] = [
                    *message.get("headers", []),
                    (header_key, request_id.encode()),
                ]
            await send(message)

        try:
            await app(scope, receive, send_with_id)
        finally:
            logger.info(
                "%s %s %s %.1fms request_id=%s",
                scope.get("method"),
                scope.get("path"),
                status_code,
                (time.perf_counter() - started) * 1000,
                request_id,
            )

    return asgi_app
