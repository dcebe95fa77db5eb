"""
Services package.

Provides business logic layer between API and core algorithms.

Modules:
    profile_service: Profile identification stage for navigation tables
"""

from services.profile_service import (
    analyze_profile_data,
    analyze_deployments,
    iter_profiles,
    select_depth_source,
    ProfileAnalysisResult,
)

__all__ = [
    'analyze_profile_data',
    'analyze_deployments',
    'iter_profiles',
    'select_depth_source',
    'ProfileAnalysisResult',
]
