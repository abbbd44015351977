"""Utility modules for shared functionality."""

from .retry import retry_on_rate_limit

__all__ = [
    "retry_on_rate_limit",
]
