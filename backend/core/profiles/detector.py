"""
Profile (cast) detection algorithms.

This module splits a glider depth or pressure series into casts: intervals of
monotonic depth delimited by turning points. Each function has a single
responsibility and can be tested independently.

Positions inside the valid subsequence (missing samples removed) are called
"positions"; indices into the original series are called "indices".
"""

import numpy as np
import pandas as pd
import logging
from typing import List, Tuple, Dict, Any

from core.constants import (
    PROFILE_DIRECTION_FLAT, TRANSITION_OFFSET, FIRST_TRANSITION_INDEX, MIN_VALID_SAMPLES
)
from core.models.cast import Cast
from core.models.options import ProfileOptions
from core.validation import parse_profile_options, validate_depth_sequence

logger = logging.getLogger(__name__)


def calculate_vertical_signs(depth_valid: np.ndarray) -> np.ndarray:
    """
    Calculate the sign of the forward difference between consecutive valid samples.

    Args:
        depth_valid: Depth values with missing samples removed

    Returns:
        Integer array of length len(depth_valid) - 1 with values 1, -1 or 0
    """
    if len(depth_valid) < MIN_VALID_SAMPLES:
        return np.array([], dtype=int)

    return np.sign(np.diff(depth_valid)).astype(int)


def detect_peaks(signs: np.ndarray) -> List[int]:
    """
    Detect turning points where the vertical direction reverses.

    Flat gaps (zero sign) are skipped without forgetting the last nonzero
    sign, so a flat stretch between two runs of the same direction is not
    a turning point. At a flat turn-around the peak is the last flat sample.

    Args:
        signs: Signs of the forward differences of the valid samples

    Returns:
        Positions (in the valid subsequence) of the turning point samples
    """
    peaks = []
    previous_sign = PROFILE_DIRECTION_FLAT

    for position, sign in enumerate(signs):
        if sign == PROFILE_DIRECTION_FLAT:
            continue
        if previous_sign != PROFILE_DIRECTION_FLAT and sign != previous_sign:
            peaks.append(position)
        previous_sign = sign

    logger.debug(f"Detected {len(peaks)} turning points")
    return peaks


def find_cast_boundaries(signs: np.ndarray, peaks: List[int]) -> List[int]:
    """
    Build the list of candidate cast boundaries.

    The first boundary is the start of the first nonzero-sign run, so a flat
    lead-in is left out of every cast. The last boundary is the last valid
    sample.

    Args:
        signs: Signs of the forward differences of the valid samples
        peaks: Turning point positions from detect_peaks

    Returns:
        Strictly increasing boundary positions, empty if depth never changes
    """
    moving = np.flatnonzero(signs)
    if len(moving) == 0:
        return []

    return [int(moving[0])] + [int(p) for p in peaks] + [len(signs)]


def build_casts(depth_valid: np.ndarray,
                valid_ind: np.ndarray,
                boundaries: List[int]) -> List[Cast]:
    """
    Build candidate Cast objects between consecutive boundaries.

    Args:
        depth_valid: Depth values with missing samples removed
        valid_ind: Indices of the valid samples in the original series
        boundaries: Boundary positions from find_cast_boundaries

    Returns:
        List of candidate casts (before filtering)
    """
    casts = []

    for start, end in zip(boundaries[:-1], boundaries[1:]):
        start_depth = float(depth_valid[start])
        end_depth = float(depth_valid[end])
        excursion = end_depth - start_depth

        casts.append(Cast(
            start_idx=int(valid_ind[start]),
            end_idx=int(valid_ind[end]),
            start_depth=start_depth,
            end_depth=end_depth,
            excursion=excursion,
            direction=int(np.sign(excursion))
        ))

    logger.debug(f"Built {len(casts)} candidate casts from {len(boundaries)} boundaries")
    return casts


def filter_valid_casts(casts: List[Cast], profile_range: float) -> List[Cast]:
    """
    Mark and keep the casts spanning at least the given depth range.

    A cast with zero excursion is never valid, whatever the range.

    Args:
        casts: Candidate casts
        profile_range: Minimum absolute depth excursion

    Returns:
        List of valid casts, in order
    """
    valid_casts = []

    for cast in casts:
        cast.valid = cast.excursion != 0 and cast.depth_range >= profile_range
        if cast.valid:
            valid_casts.append(cast)

    logger.debug(f"Filtered to {len(valid_casts)} valid casts "
                 f"(from {len(casts)} candidates) using range={profile_range}")
    return valid_casts


def join_casts(casts: List[Cast]) -> List[Cast]:
    """
    Merge consecutive valid casts with the same direction.

    Invalid casts between them are absorbed into the merged cast, which
    spans from the start of the first to the end of the last.

    Args:
        casts: Valid casts, in order

    Returns:
        List of merged casts
    """
    joined = []
    current = None

    for cast in casts:
        if current is not None and cast.direction == current.direction:
            current = Cast(
                start_idx=current.start_idx,
                end_idx=cast.end_idx,
                start_depth=current.start_depth,
                end_depth=cast.end_depth,
                excursion=cast.end_depth - current.start_depth,
                direction=current.direction,
                valid=True
            )
            continue
        if current is not None:
            joined.append(current)
        current = cast

    if current is not None:
        joined.append(current)

    logger.debug(f"Joined {len(casts)} valid casts into {len(joined)}")
    return joined


def number_casts(casts: List[Cast]) -> List[Cast]:
    """Assign profile numbers 1, 2, 3... in order of occurrence."""
    for number, cast in enumerate(casts, start=1):
        cast.number = number
    return casts


def assign_profile_index(size: int, valid_ind: np.ndarray, casts: List[Cast]) -> np.ndarray:
    """
    Compute the profile index of every sample.

    Each cast opens at the valid sample following its start boundary and
    closes at its end boundary, each event adding half a unit. Samples inside
    a cast get its whole number, samples between casts the number minus 0.5.
    Missing samples take the label of the previous valid sample; leading
    missing samples belong to the lead-in transition.

    Args:
        size: Length of the original series
        valid_ind: Indices of the valid samples in the original series
        casts: Numbered casts

    Returns:
        Float array of length size with whole and half-integer labels
    """
    steps = np.zeros(len(valid_ind))

    for cast in casts:
        head = int(np.searchsorted(valid_ind, cast.start_idx)) + 1
        tail = int(np.searchsorted(valid_ind, cast.end_idx))
        steps[head] += TRANSITION_OFFSET
        steps[tail] += TRANSITION_OFFSET

    profile_index = pd.Series(np.nan, index=range(size))
    profile_index.iloc[valid_ind] = FIRST_TRANSITION_INDEX + np.cumsum(steps)
    return profile_index.ffill().fillna(FIRST_TRANSITION_INDEX).to_numpy()


def assign_profile_direction(size: int, valid_ind: np.ndarray, signs: np.ndarray) -> np.ndarray:
    """
    Compute the vertical direction of every sample.

    A sample takes the sign of the difference to the next valid sample.
    Flat gaps take the direction of the preceding movement, and stay flat
    until the first movement. The last valid sample and missing samples take
    the direction of the previous sample.

    Args:
        size: Length of the original series
        valid_ind: Indices of the valid samples in the original series
        signs: Signs of the forward differences of the valid samples

    Returns:
        Float array of length size with values 1, -1 or 0
    """
    moving = pd.Series(signs, dtype=float).replace(PROFILE_DIRECTION_FLAT, np.nan)
    gap_direction = moving.ffill().fillna(PROFILE_DIRECTION_FLAT).to_numpy()

    profile_direction = pd.Series(np.nan, index=range(size))
    profile_direction.iloc[valid_ind] = np.append(gap_direction, gap_direction[-1])
    return profile_direction.ffill().fillna(PROFILE_DIRECTION_FLAT).to_numpy()


def segment_profiles(depth: np.ndarray,
                     options: ProfileOptions) -> Tuple[np.ndarray, np.ndarray, List[Cast]]:
    """
    Run the full segmentation on a validated depth array.

    Args:
        depth: Float depth array, NaN marking missing samples
        options: Parsed segmentation options

    Returns:
        tuple: (profile_index, profile_direction, numbered casts)
    """
    size = len(depth)
    valid_ind = np.flatnonzero(~np.isnan(depth))

    if len(valid_ind) < MIN_VALID_SAMPLES:
        logger.warning(f"Not enough valid samples to identify profiles "
                       f"({len(valid_ind)} of {size})")
        return np.full(size, np.nan), np.full(size, np.nan), []

    depth_valid = depth[valid_ind]

    # Step 1: Direction of each gap between valid samples
    signs = calculate_vertical_signs(depth_valid)

    # Step 2: Turning points and candidate casts
    peaks = detect_peaks(signs)
    boundaries = find_cast_boundaries(signs, peaks)
    candidates = build_casts(depth_valid, valid_ind, boundaries)

    # Step 3: Drop casts spanning less than the range, then optionally join
    casts = filter_valid_casts(candidates, options.range)
    if options.join:
        casts = join_casts(casts)
    casts = number_casts(casts)

    # Step 4: Per-sample labels
    profile_index = assign_profile_index(size, valid_ind, casts)
    profile_direction = assign_profile_direction(size, valid_ind, signs)

    logger.info(f"Identified {len(casts)} profiles in {size} samples "
                f"(range={options.range}, join={options.join})")
    return profile_index, profile_direction, casts


def find_profiles(depth: Any, *args: Any, **kwargs: Any) -> Tuple[np.ndarray, np.ndarray]:
    """
    Identify profiles and compute the vertical direction of a depth series.

    This is the main entry point for profile identification. Options are
    'range' (minimum depth excursion of a valid cast, default 0) and 'join'
    (merge same-direction valid casts across shorter inversions, default
    False), given as key-value pairs, an options record or keyword arguments.

    Args:
        depth: Depth or pressure sequence, None or NaN for missing samples
        *args: Options as key-value pairs or a single options record
        **kwargs: Options as keyword arguments

    Returns:
        tuple: (profile_index, profile_direction), float arrays of the same
        length as depth. Both are all NaN when fewer than two valid samples
        are available.

    Raises:
        InvalidOptionsError: If the options cannot be parsed
        InvalidOptionError: If an option key is not recognised
    """
    options = parse_profile_options(*args, **kwargs)
    depth = validate_depth_sequence(depth)

    profile_index, profile_direction, _ = segment_profiles(depth, options)
    return profile_index, profile_direction


def find_casts(depth: Any, *args: Any, **kwargs: Any) -> List[Cast]:
    """
    Identify the numbered casts of a depth series.

    Accepts the same options as find_profiles.

    Returns:
        List of valid (and, if requested, joined) casts with profile numbers
    """
    options = parse_profile_options(*args, **kwargs)
    depth = validate_depth_sequence(depth)

    _, _, casts = segment_profiles(depth, options)
    return casts


def analyze_cast_distribution(casts: List[Cast]) -> Dict[str, Any]:
    """
    Analyze the distribution of identified casts.

    This provides useful statistics about the casts for debugging
    and quality assessment.

    Args:
        casts: List of identified casts

    Returns:
        Dictionary with distribution statistics
    """
    if not casts:
        return {}

    ranges = [c.depth_range for c in casts]
    samples = [c.sample_count for c in casts]

    stats = {
        'count': len(casts),
        'downcast_count': sum(1 for c in casts if c.is_downcast),
        'upcast_count': sum(1 for c in casts if c.is_upcast),
        'avg_depth_range': float(np.mean(ranges)),
        'depth_range_range': (min(ranges), max(ranges)),
        'avg_sample_count': float(np.mean(samples)),
    }

    return stats
