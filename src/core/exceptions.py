"""
Custom exceptions for the ECS logging core.

These exceptions separate internal consistency failures from expected
outcomes. Non-applicable mapper input and schema violations are never
raised; they come back as a boolean or as validation details.
"""


class EcsLoggingError(Exception):
    """Base exception for ECS logging failures."""
    pass


class ConfigurationError(EcsLoggingError):
    """Raised when configuration is invalid or missing."""
    pass


class SpecError(EcsLoggingError):
    """Raised when a spec document cannot be loaded or holds unknown attributes."""
    pass
