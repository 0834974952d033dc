class AuthError(Exception):
    """Raised when sign-in, sign-up or sign-out fails. Message is user-facing."""
