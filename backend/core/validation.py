"""
Input validation utilities for core functions.

This module provides the validation functions and the exception hierarchy
used to reject bad configuration and malformed input at the boundary of the
segmentation engine. Data-driven edge cases (empty series, missing samples,
no turning points) are not errors and are handled by the engine itself.
"""

import math
import numbers
import numpy as np
import pandas as pd
import logging
from collections.abc import Mapping
from typing import Optional, Any, Sequence
from pathlib import Path

from core.constants import (
    PROFILE_OPTION_KEYS, DEFAULT_DEPTH_SOURCES, MAX_UPLOAD_MB, TRUE_STRINGS, FALSE_STRINGS
)
from core.models.options import ProfileOptions

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


class InvalidOptionsError(ValidationError):
    """Options are neither key-value pairs nor an options record."""
    pass


class InvalidOptionError(ValidationError):
    """Option key is not recognised."""
    pass


class ConfigurationError(ValidationError):
    """Configuration value (e.g. an environment override) is malformed."""
    pass


def parse_profile_options(*args: Any, **kwargs: Any) -> ProfileOptions:
    """
    Parse segmentation options given in any accepted call signature.

    Options may be given as:
      - nothing (defaults are used),
      - a single options record (ProfileOptions or a mapping),
      - flat key-value pairs: ('range', 2, 'join', True),
      - keyword arguments: range=2, join=True.

    Keys are matched case-insensitively. Keyword arguments are applied
    after positional ones.

    Returns:
        ProfileOptions with defaults overwritten by the given values

    Raises:
        InvalidOptionsError: If the positional arguments cannot be read as
            key-value pairs or a record
        InvalidOptionError: If an option key is not recognised
        ValidationError: If an option value is out of range
    """
    if len(args) == 1 and isinstance(args[0], ProfileOptions):
        pairs = list(args[0].as_dict().items())
    elif len(args) == 1 and isinstance(args[0], Mapping):
        pairs = list(args[0].items())
    elif len(args) % 2 == 0:
        pairs = list(zip(args[0::2], args[1::2]))
    else:
        raise InvalidOptionsError(
            "Invalid optional arguments (neither key-value pairs nor options record)")

    pairs.extend(kwargs.items())

    values = ProfileOptions().as_dict()
    for key, value in pairs:
        if not isinstance(key, str):
            raise InvalidOptionsError(f"Option keys must be strings, got {key!r}")
        option = key.lower()
        if option not in PROFILE_OPTION_KEYS:
            raise InvalidOptionError(f"Invalid option: {option}")
        values[option] = value

    validate_parameter_ranges(profile_range=values['range'])

    options = ProfileOptions(
        range=float(values['range']),
        join=parse_bool_option(values['join'], 'join')
    )
    logger.debug(f"Parsed profile options: {options}")
    return options


def validate_parameter_ranges(profile_range: Optional[Any] = None) -> None:
    """
    Validate parameter ranges for profile identification.

    Args:
        profile_range: Minimum cast depth excursion

    Raises:
        ValidationError: If any parameter is out of valid range
    """
    if profile_range is not None:
        if isinstance(profile_range, bool) or not isinstance(profile_range, numbers.Real):
            raise ValidationError(f"Profile range must be a number, got {profile_range!r}")
        if math.isnan(profile_range) or profile_range < 0:
            raise ValidationError(f"Profile range must be >= 0, got {profile_range}")


def parse_bool_option(value: Any, name: str) -> bool:
    """
    Read a boolean option given as a bool, 0/1 or one of the accepted words.

    Raises:
        ValidationError: If the value is not a recognisable boolean
    """
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, numbers.Integral) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
    raise ValidationError(f"Option {name} must be a boolean, got {value!r}")


def validate_depth_sequence(depth: Any, context: str = "Depth series") -> np.ndarray:
    """
    Validate a depth (or pressure) sequence and convert it to a float array.

    Missing values may be given as None or NaN and are returned as NaN.

    Args:
        depth: Sequence of numbers, numpy array or pandas Series
        context: Context description for error messages

    Returns:
        1-D float numpy array

    Raises:
        ValidationError: If the sequence is not one-dimensional or not numeric
    """
    if depth is None:
        raise ValidationError(f"{context}: sequence is None")

    try:
        if isinstance(depth, pd.Series):
            values = pd.to_numeric(depth, errors='raise').to_numpy(dtype=float, na_value=np.nan)
        elif isinstance(depth, np.ndarray) and depth.dtype != object:
            values = np.asarray(depth, dtype=float)
        else:
            values = np.array([np.nan if v is None else v for v in depth], dtype=float)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{context}: values must be numeric") from e

    if values.ndim != 1:
        raise ValidationError(f"{context}: must be one-dimensional, got shape {values.shape}")

    if np.isinf(values).any():
        inf_count = int(np.isinf(values).sum())
        logger.warning(f"{context}: {inf_count} infinite values treated as missing")
        values = np.where(np.isinf(values), np.nan, values)

    logger.debug(f"{context}: Validation passed for {len(values)} samples")
    return values


def validate_navigation_dataframe(df: pd.DataFrame,
                                  context: str = "Navigation data",
                                  depth_sources: Sequence[str] = DEFAULT_DEPTH_SOURCES) -> pd.DataFrame:
    """
    Validate a navigation DataFrame has a vertical coordinate column.

    Args:
        df: DataFrame to validate
        context: Context description for error messages
        depth_sources: Accepted vertical coordinate column names

    Returns:
        Validated DataFrame

    Raises:
        ValidationError: If validation fails
    """
    if df is None:
        raise ValidationError(f"{context}: DataFrame is None")

    if not isinstance(df, pd.DataFrame):
        raise ValidationError(f"{context}: expected a DataFrame, got {type(df).__name__}")

    duplicated = sorted(set(df.columns[df.columns.duplicated()]) & set(depth_sources))
    if duplicated:
        raise ValidationError(f"{context}: Duplicate vertical coordinate columns {duplicated}")

    available = [col for col in depth_sources if col in df.columns]
    if not available:
        raise ValidationError(
            f"{context}: Missing vertical coordinate, expected one of {list(depth_sources)}")

    for col in available:
        if df[col].isna().any():
            nan_count = df[col].isna().sum()
            logger.warning(f"{context}: {nan_count} NaN values in {col} column")

    logger.debug(f"{context}: Validation passed for {len(df)} samples")
    return df


def validate_file_upload(uploaded_file: Any) -> None:
    """
    Validate uploaded file before processing.

    Args:
        uploaded_file: File-like object with optional name and size

    Raises:
        ValidationError: If file validation fails
    """
    if uploaded_file is None:
        raise ValidationError("No file uploaded")

    max_size = MAX_UPLOAD_MB * 1024 * 1024
    if hasattr(uploaded_file, 'size') and uploaded_file.size > max_size:
        raise ValidationError(f"File too large: {uploaded_file.size / 1024 / 1024:.1f}MB (max {MAX_UPLOAD_MB}MB)")

    name = getattr(uploaded_file, 'name', None)
    if isinstance(name, str):
        file_path = Path(name)
        if file_path.suffix.lower() != '.csv':
            raise ValidationError(f"Invalid file type: {file_path.suffix} (expected .csv)")

    logger.debug(f"File validation passed: {getattr(uploaded_file, 'name', 'unknown')}")
