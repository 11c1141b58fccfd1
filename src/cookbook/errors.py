"""Error taxonomy for the suggestion engine.

AI failures (`AIClientError` and subclasses) are recoverable: the suggestion
path degrades to an empty list. `PersistenceError` and `DraftValidationError`
carry a title and message so the UI can show them as alerts.
"""

from typing import Optional


class CookbookError(Exception):
    """Base class for all errors raised by this package."""


class AIClientError(CookbookError):
    """Base class for failures of the generative-AI client."""


class ConfigError(AIClientError):
    """No API key is configured; the call was not attempted."""


class TransportError(AIClientError):
    """Network or URL failure before a response was received."""


class APIError(AIClientError):
    """The backend answered with a non-success status.

    Attributes:
        code: Machine code from the error envelope, or the HTTP status.
        message: Human message from the envelope, or the raw body text.
        status: Optional symbolic status from the envelope (e.g. "INVALID_ARGUMENT").
    """

    def __init__(self, code: int, message: str, status: Optional[str] = None) -> None:
        super().__init__(f"[{code}] {message}")
        self.code = code
        self.message = message
        self.status = status

    @property
    def is_transient(self) -> bool:
        """Rate limiting and server-side failures are worth retrying."""
        return self.code == 429 or 500 <= self.code < 600


class EmptyResponseError(AIClientError):
    """A success response carried no usable text candidate."""


class ParseError(CookbookError):
    """AI output could not be decoded. Never escapes the suggestion parser."""


class ImageError(CookbookError):
    """An image could not be prepared for a multimodal request."""


class AlertError(CookbookError):
    """Failure that is shown to the user as an alert with a title and message."""

    def __init__(self, title: str, message: str) -> None:
        super().__init__(f"{title}: {message}")
        self.title = title
        self.message = message


class PersistenceError(AlertError):
    """The external document store rejected or failed a read or write."""


class DraftValidationError(AlertError):
    """A recipe draft does not satisfy the creation rules."""
