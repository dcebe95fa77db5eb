"""
Shared profile analysis service.

This module provides the per-deployment profile stage: it picks the vertical
coordinate of a navigation table, identifies the casts and attaches the
profile index and direction columns consumed by per-profile processing.
"""

import pandas as pd
import logging
from typing import Dict, Any, Optional, Sequence, Iterator, Tuple, List

from core.constants import (
    MIN_VALID_SAMPLES, PROFILE_INDEX_COLUMN, PROFILE_DIRECTION_COLUMN, TIME_COLUMN
)
from core.models.cast import casts_to_dataframe
from core.models.options import ProfileOptions
from core.profiles import segment_profiles
from core.validation import (
    ValidationError, parse_profile_options, validate_depth_sequence,
    validate_navigation_dataframe
)
from config.settings import ProfileConfig

logger = logging.getLogger(__name__)


class ProfileAnalysisResult:
    """Container for profile analysis results."""

    def __init__(self,
                 data: pd.DataFrame,
                 casts: pd.DataFrame,
                 options: ProfileOptions,
                 depth_source: str,
                 name: str = "deployment"):
        self.data = data
        self.casts = casts
        self.options = options
        self.depth_source = depth_source
        self.name = name

        # Calculate derived metrics
        self._calculate_summary_metrics()

    def _calculate_summary_metrics(self) -> None:
        """Calculate summary metrics from casts."""
        depth = self.data[self.depth_source] if self.depth_source in self.data.columns else pd.Series(dtype=float)
        self.max_depth = float(depth.max()) if depth.notna().any() else None

        if self.casts.empty:
            self.profile_count = 0
            self.downcast_count = 0
            self.upcast_count = 0
            self.mean_excursion = None
            return

        self.profile_count = len(self.casts)
        self.downcast_count = int((self.casts['direction'] > 0).sum())
        self.upcast_count = int((self.casts['direction'] < 0).sum())
        self.mean_excursion = float(self.casts['excursion'].abs().mean())

    def summary(self) -> Dict[str, Any]:
        """Summary metrics as a plain dictionary."""
        return {
            'name': self.name,
            'depth_source': self.depth_source,
            'sample_count': len(self.data),
            'profile_count': self.profile_count,
            'downcast_count': self.downcast_count,
            'upcast_count': self.upcast_count,
            'mean_excursion': self.mean_excursion,
            'max_depth': self.max_depth,
            'options': self.options.as_dict(),
        }


def select_depth_source(data: pd.DataFrame, sources: Optional[Sequence[str]] = None) -> str:
    """
    Select the vertical coordinate column to segment.

    Args:
        data: Navigation DataFrame
        sources: Candidate column names in order of preference

    Returns:
        Name of the first candidate column with at least two valid values

    Raises:
        ValidationError: If no candidate column is usable
    """
    if sources is None:
        sources = ProfileConfig.DEPTH_SOURCES

    for source in sources:
        if source in data.columns and data[source].notna().sum() >= MIN_VALID_SAMPLES:
            logger.debug(f"Selected depth source: {source}")
            return source

    raise ValidationError(f"No usable vertical coordinate among {list(sources)}")


def analyze_profile_data(data: pd.DataFrame,
                         profile_range: Optional[float] = None,
                         join: Optional[bool] = None,
                         depth_sources: Optional[Sequence[str]] = None,
                         name: str = "deployment") -> ProfileAnalysisResult:
    """
    Identify the profiles of a navigation table that's already loaded into a DataFrame.

    Args:
        data: DataFrame containing navigation data
        profile_range: Minimum cast depth excursion (ProfileConfig.RANGE if None)
        join: Join same-direction casts (ProfileConfig.JOIN if None)
        depth_sources: Vertical coordinate preference (ProfileConfig.DEPTH_SOURCES if None)
        name: Name for the deployment (for display purposes)

    Returns:
        ProfileAnalysisResult: Complete analysis results

    Raises:
        ValidationError: If the table or the options are invalid
    """
    if depth_sources is None:
        depth_sources = ProfileConfig.DEPTH_SOURCES

    try:
        validate_navigation_dataframe(data, f"Navigation data {name}", depth_sources)
        logger.info(f"Analyzing profiles for {name} with {len(data)} samples")

        options = parse_profile_options(
            range=ProfileConfig.RANGE if profile_range is None else profile_range,
            join=ProfileConfig.JOIN if join is None else join
        )

        # Step 1: Pick the vertical coordinate
        depth_source = select_depth_source(data, depth_sources)
        depth = validate_depth_sequence(data[depth_source], f"{name} {depth_source}")

        # Step 2: Segment
        profile_index, profile_direction, casts = segment_profiles(depth, options)

        # Step 3: Attach labels to a copy of the table
        result_data = data.copy()
        result_data[PROFILE_INDEX_COLUMN] = profile_index
        result_data[PROFILE_DIRECTION_COLUMN] = profile_direction

        casts_df = casts_to_dataframe(casts)
        if not casts_df.empty and TIME_COLUMN in data.columns:
            casts_df['start_time'] = data[TIME_COLUMN].iloc[casts_df['start_idx'].to_numpy()].to_numpy()
            casts_df['end_time'] = data[TIME_COLUMN].iloc[casts_df['end_idx'].to_numpy()].to_numpy()

        logger.info(f"Successfully analyzed {name}: {len(casts)} profiles from {depth_source}")

        return ProfileAnalysisResult(
            data=result_data,
            casts=casts_df,
            options=options,
            depth_source=depth_source,
            name=name
        )

    except Exception as e:
        logger.error(f"Error analyzing {name}: {e}")
        raise


def iter_profiles(data: pd.DataFrame,
                  include_transitions: bool = False) -> Iterator[Tuple[float, pd.DataFrame]]:
    """
    Iterate over the profiles of a labelled navigation table.

    Args:
        data: DataFrame with a profile_index column
        include_transitions: Also yield the half-integer transition groups

    Yields:
        (profile_index value, samples of that profile) in series order
    """
    if PROFILE_INDEX_COLUMN not in data.columns:
        raise ValidationError(f"Data missing {PROFILE_INDEX_COLUMN} column")

    labels = data[PROFILE_INDEX_COLUMN]
    for value, group in data.groupby(labels, sort=True):
        if not include_transitions and not float(value).is_integer():
            continue
        yield value, group


def analyze_deployments(deployments: Dict[str, pd.DataFrame],
                        **kwargs: Any) -> Dict[str, ProfileAnalysisResult]:
    """
    Run the profile stage for several independent deployments.

    A deployment that fails is logged and skipped; the others are processed.

    Args:
        deployments: Navigation tables keyed by deployment name
        **kwargs: Passed on to analyze_profile_data

    Returns:
        Results keyed by deployment name, for the deployments that succeeded
    """
    results = {}
    failed: List[str] = []

    for name, data in deployments.items():
        try:
            results[name] = analyze_profile_data(data, name=name, **kwargs)
        except Exception as e:
            logger.error(f"Deployment {name} processing aborted: {e}")
            failed.append(name)

    if failed:
        logger.warning(f"{len(failed)} of {len(deployments)} deployments failed: {failed}")
    return results
