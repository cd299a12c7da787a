"""Rate limiter instance for SlowAPI.

Shared so main (app.state.limiter) and the route modules use the same
instance without circular imports. Limit strings live here only.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

REGISTER_LIMIT = "5/minute"
LOGIN_LIMIT = "10/minute"
WRITE_ENDPOINT_LIMIT = "120/minute"

limit_register = limiter.limit(REGISTER_LIMIT)
limit_auth = limiter.limit(LOGIN_LIMIT)
limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
