"""Auth module exceptions."""

from __future__ import annotations


class InvalidCredentials(Exception):
    """Email or password is blank, or the login response is unusable."""
