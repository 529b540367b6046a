"""
Core module for cross-cutting concerns.

This module provides:
- Structured logging configuration
- Request tracing middleware
- HTTP Basic authentication
"""

from core.logging import configure_logging, get_logger
from core.auth import require_auth, verify_credentials, BasicUser

__all__ = [
    "configure_logging",
    "get_logger",
    "require_auth",
    "verify_credentials",
    "BasicUser",
]
