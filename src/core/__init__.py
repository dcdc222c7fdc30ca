"""
Core module: Configuration, logging, and exception handling.
"""

from .config import Config, FormatterOptions, ServiceFields, config
from .exceptions import (
    ConfigurationError,
    EcsLoggingError,
    SpecError,
)

__all__ = [
    "Config",
    "FormatterOptions",
    "ServiceFields",
    "config",
    "EcsLoggingError",
    "ConfigurationError",
    "SpecError",
]
