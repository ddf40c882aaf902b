"""Utility modules for Akshara."""

from .errors import AksharaError, ContentError, SessionStateError, UnknownModuleError

__all__ = [
    "AksharaError",
    "ContentError",
    "SessionStateError",
    "UnknownModuleError",
]
