class ExtractionError(Exception):
    """Raised when a document cannot be processed for extraction."""


class ExtractionEmptyResponseError(ExtractionError):
    """Raised when the AI provider answered without any content."""


class ExtractionValidationError(ExtractionError):
    """Raised when the AI response does not describe a usable invoice."""


class ExtractionNetworkError(ExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
