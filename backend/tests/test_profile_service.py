"""
Tests for the profile analysis service.
"""

import pytest
import numpy as np
import pandas as pd
from datetime import datetime, timedelta

from config.settings import ProfileConfig
from core.validation import ValidationError
from services.profile_service import (
    analyze_profile_data,
    analyze_deployments,
    iter_profiles,
    select_depth_source,
)

DEPTH = [3, 3, 2, 1, 2, 3, 3, 4, 5, 5, 5, 4, 3, 3, 4, 2, 1, 1, 0, 3, 3]


def make_navigation(depth, column='depth'):
    base_time = datetime(2024, 3, 1, 12, 0, 0)
    return pd.DataFrame({
        'time': [base_time + timedelta(seconds=10 * i) for i in range(len(depth))],
        column: depth,
    })


class TestSelectDepthSource:
    """Tests for select_depth_source."""

    def test_prefers_first_source(self):
        """The first usable column in the preference list wins."""
        df = pd.DataFrame({'pressure': [0.0, 1.0], 'depth': [0.0, 1.0]})
        assert select_depth_source(df, ['depth', 'pressure']) == 'depth'

    def test_falls_back_when_column_is_empty(self):
        """A column without two valid values is skipped."""
        df = pd.DataFrame({'depth': [np.nan, 1.0], 'pressure': [0.0, 1.0]})
        assert select_depth_source(df, ['depth', 'pressure']) == 'pressure'

    def test_no_usable_source(self):
        """No usable column raises a validation error."""
        df = pd.DataFrame({'depth': [np.nan, np.nan]})
        with pytest.raises(ValidationError):
            select_depth_source(df, ['depth'])


class TestAnalyzeProfileData:
    """Tests for analyze_profile_data."""

    def test_adds_label_columns(self):
        """The result table carries profile index and direction."""
        data = make_navigation(DEPTH)
        result = analyze_profile_data(data)
        assert 'profile_index' in result.data.columns
        assert 'profile_direction' in result.data.columns
        assert 'profile_index' not in data.columns  # input untouched
        assert result.profile_count == 6
        assert result.depth_source == 'depth'

    def test_casts_carry_times(self):
        """Cast boundaries are reported with their timestamps."""
        data = make_navigation(DEPTH)
        result = analyze_profile_data(data, profile_range=2, join=True)
        assert result.profile_count == 4
        first = result.casts.iloc[0]
        assert first['start_time'] == data['time'].iloc[first['start_idx']]
        assert first['end_time'] == data['time'].iloc[first['end_idx']]

    def test_summary_metrics(self):
        """Summary counts downcasts and upcasts."""
        result = analyze_profile_data(make_navigation(DEPTH), profile_range=2)
        summary = result.summary()
        assert summary['profile_count'] == 5
        assert summary['downcast_count'] == 2
        assert summary['upcast_count'] == 3
        assert summary['max_depth'] == 5.0
        assert summary['options'] == {'range': 2.0, 'join': False}

    def test_uses_configured_defaults(self, monkeypatch):
        """Options left out come from ProfileConfig."""
        monkeypatch.setattr(ProfileConfig, 'RANGE', 2.0)
        monkeypatch.setattr(ProfileConfig, 'JOIN', True)
        result = analyze_profile_data(make_navigation(DEPTH))
        assert result.profile_count == 4

    def test_pressure_column(self):
        """Pressure is used when depth is not available."""
        result = analyze_profile_data(make_navigation(DEPTH, column='pressure'))
        assert result.depth_source == 'pressure'
        assert result.profile_count == 6

    def test_no_casts(self):
        """A flat series gives an empty casts table."""
        result = analyze_profile_data(make_navigation([1.0, 1.0, 1.0]))
        assert result.profile_count == 0
        assert result.casts.empty
        assert result.mean_excursion is None

    def test_missing_depth_column(self):
        """A table without a vertical coordinate is rejected."""
        data = pd.DataFrame({'latitude': [40.0, 40.1]})
        with pytest.raises(ValidationError):
            analyze_profile_data(data)

    def test_invalid_range(self):
        """A negative range is rejected."""
        with pytest.raises(ValidationError):
            analyze_profile_data(make_navigation(DEPTH), profile_range=-1)


class TestIterProfiles:
    """Tests for iter_profiles."""

    def test_yields_whole_profiles(self):
        """Only integer-labelled groups are yielded by default."""
        result = analyze_profile_data(make_navigation(DEPTH), profile_range=2)
        numbers = [number for number, _ in iter_profiles(result.data)]
        assert numbers == [1, 2, 3, 4, 5]

    def test_profile_samples(self):
        """Each group holds the samples of its cast interior."""
        result = analyze_profile_data(make_navigation(DEPTH), profile_range=2)
        groups = dict(iter_profiles(result.data))
        assert list(groups[2].index) == [4, 5, 6, 7, 8, 9]

    def test_include_transitions(self):
        """Transition groups can be requested too."""
        result = analyze_profile_data(make_navigation(DEPTH), profile_range=2)
        labels = [label for label, _ in iter_profiles(result.data, include_transitions=True)]
        assert labels[0] == 0.5
        assert labels == sorted(labels)

    def test_requires_profile_index(self):
        """Unlabelled data is rejected."""
        with pytest.raises(ValidationError):
            list(iter_profiles(make_navigation(DEPTH)))


class TestAnalyzeDeployments:
    """Tests for analyze_deployments."""

    def test_failed_deployment_is_skipped(self):
        """One bad deployment does not stop the others."""
        deployments = {
            'good': make_navigation(DEPTH),
            'bad': pd.DataFrame({'latitude': [40.0, 40.1]}),
        }
        results = analyze_deployments(deployments, profile_range=2)
        assert list(results) == ['good']
        assert results['good'].name == 'good'
        assert results['good'].profile_count == 5

    def test_malformed_deployments_are_skipped(self):
        """A plain dict and a table with two depth columns sit beside a good table."""
        deployments = {
            'mapping': {'depth': [0, 1, 2]},
            'duplicated': pd.DataFrame([[0.0, 1.0], [1.0, 2.0]], columns=['depth', 'depth']),
            'good': make_navigation(DEPTH),
        }
        results = analyze_deployments(deployments, profile_range=2)
        assert list(results) == ['good']
        assert results['good'].profile_count == 5

    def test_unexpected_error_is_skipped(self, monkeypatch):
        """Errors other than ValidationError also only skip their deployment."""
        import services.profile_service as profile_service

        original = profile_service.segment_profiles

        def failing_segment(depth, options):
            if len(depth) == 3:
                raise RuntimeError("segmentation failed")
            return original(depth, options)

        monkeypatch.setattr(profile_service, 'segment_profiles', failing_segment)
        deployments = {
            'broken': make_navigation([0, 1, 2]),
            'good': make_navigation(DEPTH),
        }
        results = analyze_deployments(deployments)
        assert list(results) == ['good']
