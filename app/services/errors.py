"""Error types shared by the service layer.

Route handlers translate these into JSON error responses:
ValidationError -> 400, NotFoundError -> 404, PersistenceError -> 500.
"""


class ValidationError(ValueError):
    """Input cannot be normalized into a valid record."""


class NotFoundError(LookupError):
    """Requested record does not exist."""


class PersistenceError(RuntimeError):
    """Database write or read failed."""
