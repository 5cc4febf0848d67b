"""Shared utilities for the equipment rental backend.

This package contains reusable utilities that are shared across
multiple route files to reduce code duplication.
"""

from app.utils.auth import token_required, token_optional
from app.utils.responses import error_response

__all__ = [
    'token_required',
    'token_optional',
    'error_response',
]
