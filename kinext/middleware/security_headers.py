"""Security headers middleware for a JSON API.

Responses are never framed, sniffed or cached by shared caches. Headers
already set by a route are left alone. Raw ASGI.
"""

from typing import Callable

API_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}


def SecurityHeadersMiddleware(
    app: Callable,
    headers: dict[str, str] | None = None,
    hsts: bool = False,
) -> Callable:
    extra = dict(API_HEADERS if headers is None else headers)
    if hsts:
        extra["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    encoded = [(k.lower().encode(), v.encode()) for k, v in extra.items()]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        async def send_with_headers(message: dict) -> None:
            if message["type"] == "http.response.start":
                current = list(message.get("headers", []))
                present = {name.lower() for name, _ in current}
                current.extend(h for h in encoded if h[0] not in present)
                message["headers"] = current
            await send(message)

        await app(scope, receive, send_with_headers)

    return asgi_app
