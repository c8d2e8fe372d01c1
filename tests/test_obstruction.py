"""
Path / obstruction checker.
"""

import sys
import os
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from obstruction import check_path
from table import BALL_RADIUS, Ball

R = BALL_RADIUS
A = (10.0, 25.0)
B = (90.0, 25.0)


def balls(**positions):
    """balls(b1=(x, y), b2=...) → list of Ball keyed by the integer in the name."""
    return [Ball(int(name[1:]), position=pos) for name, pos in positions.items()]


class TestCorridor:

    def test_empty_table_is_clear(self):
        result = check_path(A, B, [], R)
        assert not result.blocked
        assert result.blocker is None
        assert result.blockers == []

    def test_ball_inside_corridor_blocks(self):
        result = check_path(A, B, balls(b3=(50.0, 26.5)), R)
        assert result.blocked
        assert result.blocker == 3

    def test_moving_off_corridor_clears(self):
        assert check_path(A, B, balls(b3=(50.0, 26.5)), R).blocked
        assert not check_path(A, B, balls(b3=(50.0, 28.0)), R).blocked

    def test_exactly_two_radii_does_not_block(self):
        assert not check_path(A, B, balls(b3=(50.0, 25.0 + 2 * R)), R).blocked

    def test_ball_beyond_segment_end_is_ignored(self):
        # on the infinite line, but past B
        assert not check_path(A, B, balls(b3=(95.0, 25.0)), R).blocked

    def test_ball_before_segment_start_is_ignored(self):
        assert not check_path(A, B, balls(b3=(5.0, 25.5)), R).blocked


class TestEndpointsAndExclusion:

    def test_balls_at_endpoints_never_block(self):
        result = check_path(A, B, balls(b1=A, b2=B), R)
        assert not result.blocked

    def test_excluded_ids_never_block(self):
        result = check_path(A, B, balls(b3=(50.0, 25.0)), R, exclude=(3,))
        assert not result.blocked

    def test_cue_ball_can_block(self):
        result = check_path(A, B, [Ball("cue", position=(40.0, 25.0))], R)
        assert result.blocked
        assert result.blocker == "cue"


class TestOrdering:

    def test_nearest_obstruction_reported_first(self):
        result = check_path(A, B, balls(b7=(70.0, 25.0), b4=(30.0, 25.5)), R)
        assert result.blocker == 4
        assert result.blockers == [4, 7]

    def test_order_independent_of_input_order(self):
        first = check_path(A, B, balls(b7=(70.0, 25.0), b4=(30.0, 25.5)), R)
        second = check_path(A, B, balls(b4=(30.0, 25.5), b7=(70.0, 25.0)), R)
        assert first.blockers == second.blockers

    def test_reverse_direction_reverses_blame(self):
        result = check_path(B, A, balls(b7=(70.0, 25.0), b4=(30.0, 25.5)), R)
        assert result.blocker == 7

    @pytest.mark.parametrize("y", [20.0, 21.5, 22.0, 25.0, 28.0, 30.0])
    def test_diagonal_segment(self, y):
        # distance from (50, y) to the line y = x - 25
        a, b = (30.0, 5.0), (70.0, 45.0)
        d = abs(50.0 - y - 25.0) / 2 ** 0.5
        result = check_path(a, b, balls(b5=(50.0, y)), R)
        assert result.blocked == (d < 2 * R)


class TestEmptyEndpoint:

    def test_ball_on_empty_end_spot_blocks(self):
        # e.g. a ball parked on the ghost-ball position
        assert not check_path(A, B, balls(b2=B), R).blocked
        result = check_path(A, B, balls(b2=B), R, end_is_ball=False)
        assert result.blocked and result.blocker == 2

    def test_start_ball_still_skipped(self):
        assert not check_path(A, B, balls(b1=A), R, end_is_ball=False).blocked

    def test_zero_length_segment_is_clear(self):
        result = check_path(A, A, balls(b3=(10.5, 25.0), b4=(30.0, 25.0)), R)
        assert not result.blocked
