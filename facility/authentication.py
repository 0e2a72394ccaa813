"""
Token authentication for the management API.

Kept separate from any view definitions so Django REST framework can
import it from settings without circular imports.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """DRF token authentication using the ``Token`` keyword.

    Exists to provide a stable import path for the project's
    configuration.
    """

    keyword = 'Token'
