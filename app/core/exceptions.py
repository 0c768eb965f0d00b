"""
Domain exceptions.

Routes and services raise these; app/main.py turns them into JSON responses.
Gateway errors never reach the interview/resume user: the controller and the
resume service catch them and switch to their fallbacks.
"""


class PlacementError(Exception):
    """Base class for errors the API knows how to report."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(PlacementError):
    """Input rejected locally. No state was changed."""

    status_code = 400


class NotFound(PlacementError):
    status_code = 404


class SessionStateError(PlacementError):
    """Operation not allowed in the session's current state."""

    status_code = 409


class GatewayError(PlacementError):
    """The LLM gateway call failed or returned something unusable."""

    status_code = 502


class GatewayConfigError(GatewayError):
    """Gateway is not configured (missing API key)."""

    status_code = 500
