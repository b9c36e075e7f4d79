"""Order domain exceptions.

Raised by the Service Layer before anything is sent to the backend.
Transport and server failures use ``modules.core.exceptions``.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist on the server."""


class ActionNotAllowed(Exception):
    """The action is not offered for this order, role and assignment."""


class ActionValidationError(Exception):
    """A request is incomplete, e.g. a required reason is blank."""
