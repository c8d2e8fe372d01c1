"""
Geometry primitive tests — vectors, projections, reflections, folding.
"""

import sys
import os
import math
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from errors import DegenerateGeometry
from geometry import (
    EPSILON, X_AXIS, Y_AXIS, angle_between, distance, fold_into_range,
    line_intersection_with_axis, normalize, point_on_circle, points_equal,
    project_onto_segment, reflect_across_line, rotate, vec,
)


class TestVectors:

    def test_distance_345(self):
        assert distance((0, 0), (3, 4)) == pytest.approx(5.0)

    def test_normalize_unit_length(self):
        v = normalize((10.0, -7.5))
        assert np.linalg.norm(v) == pytest.approx(1.0)

    def test_normalize_zero_vector_raises(self):
        with pytest.raises(DegenerateGeometry):
            normalize((0.0, 0.0))

    def test_normalize_below_epsilon_raises(self):
        with pytest.raises(DegenerateGeometry):
            normalize((EPSILON / 10, 0.0))

    def test_rotate_quarter_turn(self):
        np.testing.assert_allclose(rotate((1.0, 0.0), 90.0), [0.0, 1.0], atol=1e-12)

    def test_vec_rejects_3d(self):
        with pytest.raises(ValueError):
            vec((1.0, 2.0, 3.0))

    def test_angle_between_range(self):
        assert angle_between((1, 0), (1, 0)) == pytest.approx(0.0)
        assert angle_between((1, 0), (0, 1)) == pytest.approx(90.0)
        assert angle_between((1, 0), (-1, 0)) == pytest.approx(180.0)


class TestEquality:

    def test_points_within_epsilon_are_equal(self):
        assert points_equal((5.0, 5.0), (5.0 + 1e-7, 5.0))

    def test_points_beyond_epsilon_differ(self):
        assert not points_equal((5.0, 5.0), (5.0 + 1e-5, 5.0))

    def test_point_on_circle(self):
        assert point_on_circle((3.0, 4.0), (0.0, 0.0), 5.0)
        assert not point_on_circle((3.0, 4.1), (0.0, 0.0), 5.0)


class TestProjection:

    def test_projection_parameter_and_foot(self):
        t, foot = project_onto_segment((5.0, 3.0), (0.0, 0.0), (10.0, 0.0))
        assert t == pytest.approx(0.5)
        np.testing.assert_allclose(foot, [5.0, 0.0])

    def test_projection_beyond_end_is_unclamped(self):
        t, _ = project_onto_segment((15.0, 1.0), (0.0, 0.0), (10.0, 0.0))
        assert t == pytest.approx(1.5)

    def test_degenerate_segment_raises(self):
        with pytest.raises(DegenerateGeometry):
            project_onto_segment((1.0, 1.0), (2.0, 2.0), (2.0, 2.0))


class TestReflection:

    def test_reflect_across_horizontal_line(self):
        np.testing.assert_allclose(reflect_across_line((50.0, 20.0), Y_AXIS, 48.875),
                                   [50.0, 77.75])

    def test_reflect_across_vertical_line(self):
        np.testing.assert_allclose(reflect_across_line((10.0, 20.0), X_AXIS, 0.0),
                                   [-10.0, 20.0])

    def test_line_crossing(self):
        p = line_intersection_with_axis((0.0, 0.0), (10.0, 10.0), Y_AXIS, 4.0)
        np.testing.assert_allclose(p, [4.0, 4.0])

    def test_parallel_line_raises(self):
        with pytest.raises(DegenerateGeometry):
            line_intersection_with_axis((0.0, 5.0), (10.0, 5.0), Y_AXIS, 1.0)


class TestFold:

    @pytest.mark.parametrize("value,expected", [
        (5.0, 5.0),      # inside
        (12.0, 8.0),     # one bounce off the high side
        (-3.0, 3.0),     # one bounce off the low side
        (22.0, 2.0),     # two bounces
    ])
    def test_fold(self, value, expected):
        assert fold_into_range(value, 0.0, 10.0) == pytest.approx(expected)

    def test_fold_stays_in_range(self):
        for v in np.linspace(-250.0, 250.0, 101):
            f = fold_into_range(float(v), 1.125, 48.875)
            assert 1.125 - 1e-9 <= f <= 48.875 + 1e-9
            assert not math.isnan(f)
