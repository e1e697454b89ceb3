"""
Error types for the waitlist subscription flow
"""

from typing import Optional


class SubscribeError(Exception):
    """Base error carrying the HTTP status and the user-facing message"""

    status_code = 500
    message = "Something went wrong on our end."

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class MethodNotAllowed(SubscribeError):
    status_code = 405
    message = "Method Not Allowed"


class MalformedRequest(SubscribeError):
    status_code = 400
    message = "Invalid request format."


class ValidationError(SubscribeError):
    status_code = 400
    message = "Please enter a valid email address."


class StoreFailure(SubscribeError):
    """Raised when the key-value store write does not succeed"""

    status_code = 500


class NetworkFailure(Exception):
    """Client side: the subscribe request never completed"""
