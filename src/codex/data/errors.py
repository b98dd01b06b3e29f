"""Custom exceptions for document loading and validation."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when story files are missing or cannot be parsed."""


class DataValidationError(DataError):
    """Raised when document content fails structural validation."""
