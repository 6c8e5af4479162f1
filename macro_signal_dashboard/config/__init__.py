"""Configuration."""

from .settings import Settings, SIGNAL_SERIES, ALLOWED_SERIES

__all__ = ["Settings", "SIGNAL_SERIES", "ALLOWED_SERIES"]
