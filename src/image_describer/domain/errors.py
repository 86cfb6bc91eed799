"""Domain errors raised by services and mapped to HTTP responses."""


class NoImageToDescribeError(Exception):
    """Raised when a description is requested before any image is known."""


class UserNotFoundError(Exception):
    """Raised when no user matches the given email."""


class UsernameTakenError(Exception):
    """Raised when registering a username that already exists."""


class InvalidCredentialsError(Exception):
    """Raised when a username/password pair does not match."""


class InvalidOtpError(Exception):
    """Raised when a reset OTP is wrong, missing or expired."""


class MailDeliveryError(Exception):
    """Raised when an outgoing email cannot be delivered."""
