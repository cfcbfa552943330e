from .exceptions import (
    ConfigurationError,
    FareEngineError,
    InvalidLocationError,
    InvalidRequestError,
    NoApplicableRuleError,
    PermanentError,
)

__all__ = [
    "FareEngineError",
    "PermanentError",
    "NoApplicableRuleError",
    "ConfigurationError",
    "InvalidLocationError",
    "InvalidRequestError",
]
