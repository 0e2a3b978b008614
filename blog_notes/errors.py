"""Error types raised by blog_notes.

Every error carries a short human-readable message suitable for showing
to the user as-is.
"""


class BlogNotesError(Exception):
    """Base class for all expected blog_notes failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BlogNotesError):
    """Input is missing or malformed (empty excerpt, missing credentials, ...)."""


class NotFoundError(BlogNotesError):
    """A referenced blog, article or note session does not exist."""


class ConfigurationError(BlogNotesError):
    """Required user setup is missing, e.g. no profile saved for ranking."""


class PersistenceError(BlogNotesError):
    """A record store call failed.

    Attributes:
        code: Short machine-readable failure kind
        message: Human-readable description
    """

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code

    def __str__(self) -> str:
        return f"{self.message} ({self.code})"
