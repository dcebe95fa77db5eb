"""
Navigation table loading.

This module loads decimated navigation data (time and vertical coordinate
columns) exported as CSV by the raw data loader.
"""

import os
import pandas as pd
import logging
from typing import Tuple, Dict, Any, Optional, Sequence

from core.constants import DEFAULT_DEPTH_SOURCES, TIME_COLUMN
from core.validation import validate_file_upload, validate_navigation_dataframe, ValidationError

logger = logging.getLogger(__name__)


def load_navigation_csv(csv_file,
                        time_column: str = TIME_COLUMN,
                        depth_sources: Optional[Sequence[str]] = None) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    Load a navigation CSV file into a pandas DataFrame with validation.

    Args:
        csv_file: A file-like object or path containing CSV data
        time_column: Name of the timestamp column, parsed if present
        depth_sources: Accepted vertical coordinate columns

    Returns:
        tuple: (DataFrame with navigation data, dict with metadata)

    Raises:
        ValidationError: If file validation or parsing fails
    """
    try:
        validate_file_upload(csv_file)
        df = pd.read_csv(csv_file)
    except pd.errors.EmptyDataError as e:
        raise ValidationError("CSV file is empty") from e
    except pd.errors.ParserError as e:
        raise ValidationError(f"Invalid CSV file format: {str(e)}") from e

    metadata = {
        'name': None,
        'columns': list(df.columns),
        'time_start': None,
        'time_end': None,
    }

    name = getattr(csv_file, 'name', csv_file if isinstance(csv_file, str) else None)
    if isinstance(name, str):
        metadata['name'] = os.path.splitext(os.path.basename(name))[0]

    if time_column in df.columns:
        df[time_column] = pd.to_datetime(df[time_column], errors='coerce')
        if df[time_column].notna().any():
            metadata['time_start'] = df[time_column].min()
            metadata['time_end'] = df[time_column].max()

    validated_df = validate_navigation_dataframe(
        df,
        f"Navigation file {metadata.get('name') or 'unknown'}",
        depth_sources or DEFAULT_DEPTH_SOURCES
    )

    logger.info(f"Successfully loaded navigation file with {len(validated_df)} samples")
    return validated_df, metadata


def load_navigation_from_path(file_path: str) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    Load a navigation CSV file from disk path.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Navigation file not found: {file_path}")

    with open(file_path, 'r') as f:
        return load_navigation_csv(f)
