"""
Error types raised by the workout coach.

Library code raises these; only the Streamlit page catches them.
"""


class CoachError(Exception):
    """Base class for every error raised by the workout coach."""


class ConfigError(CoachError):
    """Configuration file or API credential is missing."""


class InvalidSelectionError(CoachError, ValueError):
    """The form submission cannot be turned into a prompt."""


class PlanGenerationError(CoachError):
    """The plan exchange with the model failed."""


class TransportError(PlanGenerationError):
    """The API call itself failed (network, auth, rate limit, server error)."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(PlanGenerationError):
    """The model response was empty or not valid JSON."""

    def __init__(self, message, raw_text=""):
        super().__init__(message)
        self.raw_text = raw_text


class ShapeError(PlanGenerationError):
    """The response parsed as JSON but is not a valid workout plan."""

    def __init__(self, message, violations=None):
        super().__init__(message)
        self.violations = list(violations or [])
