"""
Cast data models.

This module defines the data structures for the casts (profiles) identified
in a glider depth series.
"""

from dataclasses import dataclass
from typing import Optional, List, Dict, Any
import pandas as pd

from core.constants import PROFILE_DIRECTION_DOWN, PROFILE_DIRECTION_UP, DIRECTION_NAMES


@dataclass
class Cast:
    """
    Represents a candidate or identified cast.

    A cast is a stretch of the depth series between two boundary samples
    (turning points or series ends) where the glider moves in one vertical
    direction. Only valid casts receive a profile number.
    """
    # Boundary samples in the original index space (missing samples included)
    start_idx: int
    end_idx: int

    # Depth at the boundaries
    start_depth: float
    end_depth: float

    # Vertical characteristics
    excursion: float  # end_depth - start_depth
    direction: int  # Sign of excursion (1 down, -1 up, 0 flat)

    # Set by the validity filter and by numbering
    valid: bool = False
    number: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert cast to dictionary for DataFrame creation."""
        return {
            'number': self.number,
            'start_idx': self.start_idx,
            'end_idx': self.end_idx,
            'start_depth': self.start_depth,
            'end_depth': self.end_depth,
            'excursion': self.excursion,
            'direction': self.direction,
            'direction_name': DIRECTION_NAMES.get(self.direction),
            'sample_count': self.sample_count,
            'valid': self.valid,
        }

    @property
    def is_downcast(self) -> bool:
        return self.direction == PROFILE_DIRECTION_DOWN

    @property
    def is_upcast(self) -> bool:
        return self.direction == PROFILE_DIRECTION_UP

    @property
    def sample_count(self) -> int:
        """Samples spanned by the cast, boundaries and missing samples included."""
        return self.end_idx - self.start_idx + 1

    @property
    def depth_range(self) -> float:
        """Absolute depth excursion."""
        return abs(self.excursion)


def casts_to_dataframe(casts: List[Cast]) -> pd.DataFrame:
    """
    Convert a list of casts to a pandas DataFrame.

    Args:
        casts: List of Cast objects

    Returns:
        pandas DataFrame with cast data
    """
    if not casts:
        return pd.DataFrame()

    data = [cast.to_dict() for cast in casts]
    return pd.DataFrame(data)


def dataframe_to_casts(df: pd.DataFrame) -> List[Cast]:
    """
    Convert a pandas DataFrame to a list of Cast objects.

    Args:
        df: DataFrame with cast columns

    Returns:
        List of Cast objects
    """
    casts = []

    for _, row in df.iterrows():
        number = row.get('number')
        cast = Cast(
            start_idx=int(row['start_idx']),
            end_idx=int(row['end_idx']),
            start_depth=float(row['start_depth']),
            end_depth=float(row['end_depth']),
            excursion=float(row['excursion']),
            direction=int(row['direction']),
            valid=bool(row.get('valid', False)),
            number=None if pd.isna(number) else int(number)
        )
        casts.append(cast)

    return casts
