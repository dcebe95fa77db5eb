"""
Constants for the glider profile segmentation engine.

This module contains the label values, defaults and algorithmic constants
used throughout the codebase. Constants are grouped by their purpose
and documented with their units where applicable.
"""

# =============================================================================
# DIRECTION LABELS
# =============================================================================

# Vertical direction of a sample, from the sign of the forward depth difference
PROFILE_DIRECTION_DOWN = 1  # Depth increasing (diving)
PROFILE_DIRECTION_UP = -1  # Depth decreasing (climbing)
PROFILE_DIRECTION_FLAT = 0  # No depth change, or no direction seen yet

DIRECTION_NAMES = {
    PROFILE_DIRECTION_DOWN: 'Down',
    PROFILE_DIRECTION_UP: 'Up',
    PROFILE_DIRECTION_FLAT: 'Flat',
}

# =============================================================================
# PROFILE INDEX LABELS
# =============================================================================

# Samples between casts are labelled with the cast number minus this offset
TRANSITION_OFFSET = 0.5

# Label of the lead-in before the first cast
FIRST_TRANSITION_INDEX = TRANSITION_OFFSET

# =============================================================================
# SEGMENTATION OPTIONS
# =============================================================================

# Minimum absolute depth excursion of a valid cast (same units as depth)
DEFAULT_PROFILE_RANGE = 0.0

# Merge same-direction valid casts across sub-range inversions
DEFAULT_PROFILE_JOIN = False

# Recognised option keys (matched case-insensitively)
PROFILE_OPTION_KEYS = ('range', 'join')

# Fewer valid samples than this yields indeterminate output
MIN_VALID_SAMPLES = 2

# =============================================================================
# DEPTH SOURCES
# =============================================================================

# Vertical coordinate columns, in order of preference
DEFAULT_DEPTH_SOURCES = ('depth', 'depth_ctd', 'pressure')

# Column names written by the profile stage
PROFILE_INDEX_COLUMN = 'profile_index'
PROFILE_DIRECTION_COLUMN = 'profile_direction'
TIME_COLUMN = 'time'

# =============================================================================
# FILE LIMITS
# =============================================================================

# Maximum size of an uploaded navigation table (MB)
MAX_UPLOAD_MB = 50

# Accepted spellings of a boolean option given as text
TRUE_STRINGS = ('1', 'true', 'yes', 'on')
FALSE_STRINGS = ('0', 'false', 'no', 'off')
