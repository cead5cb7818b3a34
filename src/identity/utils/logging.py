"""Logging helpers for the Identity context.

Process-wide configuration lives in ``ordering.utils.logging``; the app calls
it once at startup.
"""

import structlog


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
