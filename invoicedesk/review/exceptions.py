class ReviewError(Exception):
    """Base exception for record review transitions."""


class InvalidTransitionError(ReviewError):
    """Raised when a transition is requested from the wrong review state."""


class QuickApproveUnavailableError(ReviewError):
    """Raised when a record must go through the full edit form first."""


class ReviewValidationError(ReviewError):
    """Raised when edited fields cannot be saved."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors
