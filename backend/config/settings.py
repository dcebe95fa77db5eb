"""
Application settings and configuration.

This module contains application-specific configuration and pipeline defaults.
For algorithmic constants, see core.constants module.
"""

import os
import logging
from typing import Dict, Any

# Import algorithmic constants from core module
from core.constants import (
    DEFAULT_PROFILE_RANGE,
    DEFAULT_PROFILE_JOIN,
    DEFAULT_DEPTH_SOURCES,
    MAX_UPLOAD_MB
)
from core.validation import (
    ConfigurationError, ValidationError, parse_bool_option, validate_parameter_ranges
)

# App information
APP_NAME = "Glider Profiles"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Identify casts in glider depth and pressure series"


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return parse_bool_option(value, name)
    except ValidationError as e:
        raise ConfigurationError(f"Environment variable {name} must be a boolean, got {value!r}") from e


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        number = float(value)
        validate_parameter_ranges(profile_range=number)
    except (ValueError, ValidationError) as e:
        raise ConfigurationError(
            f"Environment variable {name} must be a number >= 0, got {value!r}") from e
    return number


# Pipeline defaults for the profile stage (environment overrides read at import)
DEFAULT_RANGE = _env_float("GLIDER_PROFILE_RANGE", DEFAULT_PROFILE_RANGE)
DEFAULT_JOIN = _env_bool("GLIDER_PROFILE_JOIN", DEFAULT_PROFILE_JOIN)

# UI/API ranges for the range option (same units as depth)
RANGE_LIMITS = {"min": 0, "max": 100, "step": 0.5}

# File parameters
DEFAULT_MAX_UPLOAD_MB = MAX_UPLOAD_MB  # Maximum size of an uploaded navigation table

# Logging configuration
LOGGING_CONFIG = {
    "level": logging.INFO,
    "format": '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
}


# =============== Configuration Classes ===============
# These classes provide typed access to configuration sections

class ProfileConfig:
    """Configuration parameters for profile identification."""
    RANGE = DEFAULT_RANGE
    JOIN = DEFAULT_JOIN
    DEPTH_SOURCES = list(DEFAULT_DEPTH_SOURCES)  # Preference order

    @classmethod
    def as_dict(cls) -> Dict[str, Any]:
        """Get profile configuration as a dictionary."""
        return {
            'range': cls.RANGE,
            'join': cls.JOIN,
            'depth_sources': list(cls.DEPTH_SOURCES),
        }
