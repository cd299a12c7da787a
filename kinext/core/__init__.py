"""Core: configuration, lifespan, exception handlers, rate limits."""

from kinext.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
