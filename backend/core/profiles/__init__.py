"""
Profiles package.

This package contains functionality for identifying casts (profiles) in a
glider depth series and labelling every sample with its profile index and
vertical direction.
"""

# Core profile detection functions
from .detector import (
    find_profiles,
    find_casts,
    segment_profiles,
    calculate_vertical_signs,
    detect_peaks,
    find_cast_boundaries,
    build_casts,
    filter_valid_casts,
    join_casts,
    number_casts,
    assign_profile_index,
    assign_profile_direction,
    analyze_cast_distribution
)

# Cast models
from core.models.cast import Cast, casts_to_dataframe, dataframe_to_casts
from core.models.options import ProfileOptions

__all__ = [
    # Main detection functions
    'find_profiles',
    'find_casts',
    'segment_profiles',

    # Modular detection functions
    'calculate_vertical_signs',
    'detect_peaks',
    'find_cast_boundaries',
    'build_casts',
    'filter_valid_casts',
    'join_casts',
    'number_casts',
    'assign_profile_index',
    'assign_profile_direction',
    'analyze_cast_distribution',

    # Models
    'Cast',
    'casts_to_dataframe',
    'dataframe_to_casts',
    'ProfileOptions',
]
