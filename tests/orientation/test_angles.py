"""Property and example tests for heading angle arithmetic."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from bearing.orientation.angles import (cardinal_direction, normalize_degrees,
                                        shortest_angular_difference,
                                        smooth_angle)

_headings = st.floats(min_value=0.0, max_value=360.0, exclude_max=True)
_reals = st.floats(allow_nan=False, allow_infinity=False, min_value=-1e12, max_value=1e12)
_factors = st.floats(min_value=0.0, max_value=1.0, exclude_min=True)


class TestNormalizeDegrees:
    """Keep every heading inside [0, 360) so downstream math never sees 360 or negatives."""

    @given(value=_reals)
    def test_result_is_in_range(self, value: float) -> None:
        """Confirm normalization lands in [0, 360) for arbitrary real input."""

        assert 0.0 <= normalize_degrees(value) < 360.0

    @given(value=_reals)
    def test_normalization_is_idempotent(self, value: float) -> None:
        """Verify normalizing twice changes nothing so repeated wraps stay stable."""

        once = normalize_degrees(value)
        assert normalize_degrees(once) == once

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.0, 0.0), (360.0, 0.0), (-90.0, 270.0), (725.0, 5.0), (-1e-20, 0.0)],
    )
    def test_known_values(self, value: float, expected: float) -> None:
        """Check representative wraps including the tiny-negative rounding edge."""

        assert normalize_degrees(value) == pytest.approx(expected)


class TestSmoothAngle:
    """Circular smoothing must take the short way around north."""

    @given(current=_headings, target=_headings, factor=_factors)
    def test_output_stays_in_range(self, current: float, target: float, factor: float) -> None:
        """Ensure smoothing output is always a valid heading."""

        assert 0.0 <= smooth_angle(current, target, factor) < 360.0

    @given(current=_headings, target=_headings)
    def test_full_factor_reaches_target(self, current: float, target: float) -> None:
        """Confirm a factor of 1.0 lands on the target heading."""

        result = smooth_angle(current, target, 1.0)
        assert abs(shortest_angular_difference(result, target)) < 1e-9

    def test_wraparound_takes_short_path(self) -> None:
        """Verify 350° to 10° moves +20° rather than sweeping through south."""

        assert smooth_angle(350.0, 10.0, 1.0) == pytest.approx(10.0)
        assert smooth_angle(350.0, 10.0, 0.5) == pytest.approx(0.0)
        assert smooth_angle(10.0, 350.0, 0.5) == pytest.approx(0.0)

    def test_partial_factor_from_north(self) -> None:
        """Check one smoothing step from 0° towards 90° with the default factor."""

        assert smooth_angle(0.0, 90.0, 0.15) == pytest.approx(13.5)

    @pytest.mark.parametrize("factor", [0.0, -0.1, 1.5])
    def test_rejects_out_of_range_factor(self, factor: float) -> None:
        """Ensure invalid smoothing factors are reported instead of silently misbehaving."""

        with pytest.raises(ValueError):
            smooth_angle(0.0, 90.0, factor)


class TestShortestAngularDifference:
    @given(current=_headings, target=_headings)
    def test_difference_is_bounded(self, current: float, target: float) -> None:
        """Confirm the signed difference never exceeds half a turn."""

        assert -180.0 <= shortest_angular_difference(current, target) <= 180.0

    def test_signs(self) -> None:
        assert shortest_angular_difference(350.0, 10.0) == pytest.approx(20.0)
        assert shortest_angular_difference(10.0, 350.0) == pytest.approx(-20.0)


class TestCardinalDirection:
    @pytest.mark.parametrize(
        ("heading", "label"),
        [
            (0.0, "N"),
            (22.0, "N"),
            (22.5, "NE"),
            (44.0, "NE"),
            (46.0, "NE"),
            (90.0, "E"),
            (135.0, "SE"),
            (180.0, "S"),
            (225.0, "SW"),
            (270.0, "W"),
            (315.0, "NW"),
            (337.4, "NW"),
            (359.0, "N"),
        ],
    )
    def test_eight_point_labels(self, heading: float, label: str) -> None:
        """Verify headings map to the nearest of eight compass points, rounding halves up."""

        assert cardinal_direction(heading) == label
