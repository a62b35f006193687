import pytest

from errors import InvalidConfiguration
from grid import Direction
from intersection import create_intersections
from signals import (allocate_green_times, apply_preemption, clear_preemption,
                     pick_green_direction, preempted_allocation, round_half_up)


N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST


def as_list(times):
    return [times[d] for d in Direction]


def test_idle_intersection_remainder_goes_north(make_intersection):
    times = allocate_green_times(make_intersection(), 30)

    assert as_list(times) == [9, 7, 7, 7]


@pytest.mark.parametrize('cycle_seconds, expected', [
    (0, [0, 0, 0, 0]),
    (3, [3, 0, 0, 0]),
    (4, [1, 1, 1, 1]),
    (33, [9, 8, 8, 8]),
])
def test_idle_intersection_even_split(make_intersection, cycle_seconds, expected):
    assert as_list(allocate_green_times(make_intersection(), cycle_seconds)) == expected


def test_single_busy_lane_keeps_one_second_elsewhere(make_intersection):
    times = allocate_green_times(make_intersection(north=10), 30)

    assert as_list(times) == [27, 1, 1, 1]


def test_overshoot_trimmed_from_first_of_equal_smallest_queues(make_intersection):
    # 4/10, 3/10, 3/10 of 10s round to 4, 3, 3 plus the 1s minimum for West
    times = allocate_green_times(make_intersection(north=4, south=3, east=3), 10)

    assert as_list(times) == [4, 2, 3, 1]


def test_equal_queues_trim_north_first(make_intersection):
    # 7.5s each rounds up to 8 - two seconds over, both taken from North
    times = allocate_green_times(make_intersection(1, 1, 1, 1), 30)

    assert as_list(times) == [6, 8, 8, 8]


def test_undershoot_goes_to_longest_queue(make_intersection):
    times = allocate_green_times(make_intersection(2, 2, 2, 3), 20)

    assert as_list(times) == [4, 4, 4, 8]


def test_undershoot_tie_goes_north(make_intersection):
    times = allocate_green_times(make_intersection(1, 1, 1, 1), 5)

    assert as_list(times) == [2, 1, 1, 1]


def test_half_seconds_round_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(7.5) == 8
    assert round_half_up(7.49) == 7
    assert round_half_up(0.0) == 0


@pytest.mark.parametrize('queues', [
    (0, 0, 0, 0), (1, 0, 0, 0), (0, 0, 0, 1), (5, 5, 5, 5), (100, 1, 0, 3),
    (17, 2, 9, 40), (1, 2, 3, 4), (0, 13, 0, 7),
])
@pytest.mark.parametrize('cycle_seconds', [0, 1, 2, 3, 4, 7, 30, 61, 120])
def test_allocation_sums_to_cycle(make_intersection, queues, cycle_seconds):
    times = allocate_green_times(make_intersection(*queues), cycle_seconds)

    assert sum(times.values()) == cycle_seconds
    assert all(isinstance(t, int) and t >= 0 for t in times.values())
    if sum(queues) > 0 and cycle_seconds >= 4:
        assert all(t >= 1 for t in times.values())


def test_short_cycle_with_traffic_still_sums(make_intersection):
    times = allocate_green_times(make_intersection(1, 1, 1, 1), 2)

    assert as_list(times) == [0, 0, 1, 1]


def test_allocation_does_not_touch_queues(make_intersection):
    intersection = make_intersection(3, 4, 5, 6)
    allocate_green_times(intersection, 30)

    assert [intersection.queues[d] for d in Direction] == [3, 4, 5, 6]


@pytest.mark.parametrize('cycle_seconds', [-1, 2.5, None])
def test_invalid_cycle_rejected(make_intersection, cycle_seconds):
    with pytest.raises(InvalidConfiguration):
        allocate_green_times(make_intersection(1, 2, 3, 4), cycle_seconds)


@pytest.mark.parametrize('times, expected', [
    ([9, 7, 7, 7], N),
    ([4, 4, 4, 8], W),
    ([1, 3, 3, 1], S),
    ([2, 2, 1, 1], N),
    ([0, 0, 30, 0], E),
])
def test_green_direction_is_largest_first_on_ties(times, expected):
    assert pick_green_direction(dict(zip(Direction, times))) is expected


def test_route_flags_exit_direction(grid_3x3, empty_3x3):
    preempted = apply_preemption(grid_3x3, empty_3x3, [0, 1, 2, 5, 8])

    assert preempted == {0, 1, 2, 5}
    assert empty_3x3[0].preempt[E]
    assert empty_3x3[1].preempt[E]
    assert empty_3x3[2].preempt[S]
    assert empty_3x3[5].preempt[S]
    # The destination is not crossed
    assert not empty_3x3[8].preempted
    assert not empty_3x3[4].preempted


def test_clear_preemption_resets_every_flag(grid_3x3, empty_3x3):
    apply_preemption(grid_3x3, empty_3x3, [6, 3, 0])
    clear_preemption(empty_3x3)

    assert not any(i.preempted for i in empty_3x3)


def test_preempted_intersection_gets_whole_cycle(grid_3x3, empty_3x3):
    for direction in Direction:
        empty_3x3[3].set_queue(direction, 50)
    apply_preemption(grid_3x3, empty_3x3, [3, 4])

    times = preempted_allocation(empty_3x3[3], 30)

    assert as_list(times) == [0, 0, 30, 0]


def test_normal_intersection_not_overridden(grid_3x3, empty_3x3):
    assert preempted_allocation(empty_3x3[4], 30) is None


def test_only_first_flag_honored(grid_3x3, empty_3x3):
    # Route loops back through node 4, leaving East the first time and North later
    apply_preemption(grid_3x3, empty_3x3, [4, 5, 2, 1, 4, 1])

    assert empty_3x3[4].preempt[E] and empty_3x3[4].preempt[N]
    assert as_list(preempted_allocation(empty_3x3[4], 20)) == [20, 0, 0, 0]


def test_route_must_follow_streets(grid_3x3):
    intersections = create_intersections(grid_3x3)

    with pytest.raises(InvalidConfiguration):
        apply_preemption(grid_3x3, intersections, [0, 4])
