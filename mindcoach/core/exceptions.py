"""
Custom exception hierarchy for the coaching engine.

All application exceptions inherit from MindCoachError.
"""


class MindCoachError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(MindCoachError):
    """Invalid or missing configuration."""

    pass


# =============================================================================
# Serialization Errors
# =============================================================================


class SerializationError(MindCoachError):
    """Base for event encode/decode errors."""

    pass


class MalformedEventError(SerializationError):
    """Serialized event is missing a required field or has an invalid value.

    Raised instead of silently defaulting (e.g. a missing timestamp is never
    replaced with "now").
    """

    pass


class UnknownEnumValueError(SerializationError):
    """Serialized event carries a phase or outcome this version does not know."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Unknown {field} value: {value!r}")
