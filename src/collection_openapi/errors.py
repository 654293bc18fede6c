"""Exceptions raised by collection-openapi."""


class ConversionError(Exception):
    """Base class for all collection-openapi errors."""


class CollectionRequiredError(ConversionError, ValueError):
    """Raised when the converter is called without a collection."""

    def __init__(self, message: str = "Collection is required"):
        super().__init__(message)


class CollectionFileError(ConversionError):
    """A collection file could not be read, parsed or recognized."""
