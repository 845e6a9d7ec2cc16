"""
Scrydex exception types
"""

from typing import Optional


class ScrydexError(Exception):
    """Base for every error raised by the card database store."""


class InvalidPathError(ScrydexError, ValueError):
    """Raised when a path points at the wrong kind of filesystem entry."""


class NotFoundError(ScrydexError, FileNotFoundError):
    """Raised when a required file does not exist."""


class MetadataMissingError(ScrydexError):
    """Raised when a card database file has no `meta` object."""

    def __init__(self, filepath: str):
        self.filepath = filepath
        super().__init__(f"Could not load meta data for {filepath}")


class MetadataValidationError(ScrydexError, ValueError):
    """Raised when the `meta` object of a card database is invalid."""

    def __init__(self, filepath: str, message: str, details: Optional[str] = None):
        self.filepath = filepath
        self.details = details
        text = f"Meta data failed validation for {filepath}: {message}"
        if details:
            text = f"{text}\n{details}"
        super().__init__(text)


class CardDBSaveError(ScrydexError, ValueError):
    """Raised when a card database cannot be written."""


class FilterConfigError(ScrydexError, ValueError):
    """Raised when raw filter options cannot be parsed."""


class CardStreamError(ScrydexError, ValueError):
    """Raised when the cards of a card database cannot be parsed."""

    def __init__(self, filepath: str, details: str):
        self.filepath = filepath
        self.details = details
        super().__init__(f"Card data is corrupt in {filepath}: {details}")
