class IngestionError(Exception):
    """Base exception for upload-related errors."""


class UnsupportedFileTypeError(IngestionError):
    """Raised when a file is not declared as a PDF."""


class FileTooLargeError(IngestionError):
    """Raised when a file exceeds the configured upload size."""
