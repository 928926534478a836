"""
Domain errors shared by every service.

Repositories and storage clients raise these; routers translate them into
HTTP envelopes, and the handlers registered in ``main.py`` catch whatever a
router leaves uncaught.
"""


class DoodleAlleyError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotFound(DoodleAlleyError):
    """A direct lookup found no record for the given id."""


class InvalidCredentials(DoodleAlleyError):
    """Admin login attempt did not match the stored credentials."""


class StorageError(DoodleAlleyError):
    """The key-value store or the object storage failed."""
