"""Raw ASGI middleware."""

from kinext.middleware.request_id import RequestIDMiddleware
from kinext.middleware.security_headers import SecurityHeadersMiddleware

__all__ = ["RequestIDMiddleware", "SecurityHeadersMiddleware"]
