"""Standardized exception hierarchy for the fare engine."""

from typing import Any


class FareEngineError(Exception):
    """Base exception for all fare engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PermanentError(FareEngineError):
    """Errors that will not succeed on retry.

    Every pricing failure is terminal for the quote that raised it.
    """

    pass


class NoApplicableRuleError(PermanentError):
    """No active pricing rule matches the vehicle, service and date."""

    pass


class ConfigurationError(PermanentError):
    """A pricing rule is internally inconsistent."""

    pass


class InvalidLocationError(PermanentError):
    """Missing or invalid coordinates for a required leg."""

    pass


class InvalidRequestError(PermanentError):
    """Fare request is missing a field its service type requires."""

    pass
