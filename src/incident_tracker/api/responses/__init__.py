"""
API Response Module

Exception handlers translating application errors into the API's JSON
error bodies.
"""

from .handlers import INTERNAL_ERROR_MESSAGE, format_validation_errors, register_exception_handlers

__all__ = [
    "INTERNAL_ERROR_MESSAGE",
    "format_validation_errors",
    "register_exception_handlers",
]
