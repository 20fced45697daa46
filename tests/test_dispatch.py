import pytest

from dispatch import (
    BasicDispatcher,
    Decision,
    Direction,
    ElevatorSnapshot,
    FirstComeFirstServedDispatcher,
    Move,
    Request,
    get_dispatcher,
)


def moving_up(elevator_id, floor, stops):
    return ElevatorSnapshot(elevator_id, floor, Direction.UP, frozenset(stops), passenger_count=1)


class TestSnapshot:
    def test_request_rejects_idle_direction(self):
        with pytest.raises(ValueError):
            Request(3, Direction.IDLE, 0)

    def test_request_direction_is_normalised(self):
        assert Request(3, 1, 0).direction is Direction.UP

    def test_idle_car_can_claim_either_way(self):
        car = ElevatorSnapshot(0, floor=4)
        assert car.can_claim(Request(1, Direction.UP, 0))
        assert car.can_claim(Request(8, Direction.DOWN, 1))

    def test_moving_car_only_claims_calls_ahead_in_its_direction(self):
        car = moving_up(0, 2, {6})
        assert car.can_claim(Request(4, Direction.UP, 0))
        assert car.can_claim(Request(2, Direction.UP, 1))
        assert not car.can_claim(Request(1, Direction.UP, 2))
        assert not car.can_claim(Request(3, Direction.DOWN, 3))

    def test_car_heading_to_reversing_pickup_takes_nothing_else(self):
        car = ElevatorSnapshot(0, floor=0).with_claim(Request(5, Direction.DOWN, 0))
        assert car.direction is Direction.UP
        assert car.reversing
        assert not car.can_claim(Request(3, Direction.UP, 1))

    def test_car_heading_to_reversing_pickup_absorbs_the_same_call(self):
        car = ElevatorSnapshot(0, floor=0).with_claim(Request(5, Direction.DOWN, 0))
        duplicate = Request(5, Direction.DOWN, 1)

        assert car.owes(duplicate)
        assert car.can_claim(duplicate)
        assert not car.owes(Request(5, Direction.UP, 2))

        absorbed = car.with_claim(duplicate)
        assert absorbed.stops == {5}
        assert absorbed.direction is Direction.UP

    def test_claim_on_own_floor_takes_callers_direction(self):
        car = ElevatorSnapshot(0, floor=3).with_claim(Request(3, Direction.DOWN, 0))
        assert car.direction is Direction.DOWN
        assert car.stops == {3}
        assert car.next_move() is Move.STAY

    def test_with_claim_leaves_original_untouched(self):
        car = ElevatorSnapshot(0, floor=0)
        claimed = car.with_claim(Request(4, Direction.UP, 0))
        assert car.is_idle and car.stops == frozenset()
        assert claimed.stops == {4}
        assert len(claimed.pickups) == 1

    @pytest.mark.parametrize(
        "direction, stops, expected",
        [
            (Direction.IDLE, set(), Move.STAY),
            (Direction.UP, {7, 9}, Move.UP),
            (Direction.DOWN, {1, 3}, Move.DOWN),
            (Direction.UP, {4, 8}, Move.STAY),
        ],
    )
    def test_next_move(self, direction, stops, expected):
        car = ElevatorSnapshot(0, 4, direction, stops)
        assert car.next_move() is expected


class TestBasicDispatcher:
    def test_nearest_idle_car_takes_the_call(self):
        cars = [ElevatorSnapshot(0, floor=0), ElevatorSnapshot(1, floor=9)]
        call = Request(5, Direction.DOWN, 0)

        decision = BasicDispatcher().decide(cars, [call])

        assert decision.claims == {1: [call]}
        assert decision.moves == {0: Move.STAY, 1: Move.DOWN}

    def test_moving_car_is_not_redirected_to_a_closer_opposite_call(self):
        car = moving_up(0, 2, {6})
        call = Request(3, Direction.DOWN, 0)

        decision = BasicDispatcher().decide([car], [call])

        assert decision.claims == {}
        assert decision.moves == {0: Move.UP}

    def test_opposite_call_goes_to_another_car(self):
        cars = [moving_up(0, 2, {6}), ElevatorSnapshot(1, floor=9)]
        call = Request(3, Direction.DOWN, 0)

        decision = BasicDispatcher().decide(cars, [call])

        assert decision.claims == {1: [call]}

    def test_passing_car_beats_idle_car_at_equal_distance(self):
        passing = ElevatorSnapshot(1, 7, Direction.DOWN, frozenset({1}), passenger_count=1)
        cars = [ElevatorSnapshot(0, floor=3), passing]
        call = Request(5, Direction.DOWN, 0)

        decision = BasicDispatcher().decide(cars, [call])

        assert decision.claims == {1: [call]}

    def test_ties_go_to_lowest_id(self):
        cars = [ElevatorSnapshot(1, floor=8), ElevatorSnapshot(0, floor=2)]
        call = Request(5, Direction.UP, 0)

        decision = BasicDispatcher().decide(cars, [call])

        assert decision.claims == {0: [call]}

    def test_later_calls_see_earlier_claims(self):
        first = Request(3, Direction.UP, 0)
        second = Request(6, Direction.UP, 1)

        decision = BasicDispatcher().decide([ElevatorSnapshot(0, floor=0)], [second, first])

        assert decision.claims == {0: [first, second]}
        assert decision.moves == {0: Move.UP}

    def test_reversing_claim_blocks_further_claims(self):
        reversing = Request(5, Direction.DOWN, 0)
        on_the_way = Request(3, Direction.UP, 1)

        decision = BasicDispatcher().decide([ElevatorSnapshot(0, floor=0)], [reversing, on_the_way])

        assert decision.claims == {0: [reversing]}

    def test_car_owing_the_pickup_absorbs_a_repeat_call(self):
        owner = ElevatorSnapshot(0, floor=1).with_claim(Request(5, Direction.DOWN, 0))
        closer = ElevatorSnapshot(1, floor=5)
        repeat = Request(5, Direction.DOWN, 1)

        decision = BasicDispatcher().decide([owner, closer], [repeat])

        assert decision.claims == {0: [repeat]}
        assert decision.moves == {0: Move.UP, 1: Move.STAY}

    def test_repeat_calls_in_one_decision_go_to_one_car(self):
        calls = [Request(5, Direction.DOWN, 0), Request(5, Direction.DOWN, 1)]
        cars = [ElevatorSnapshot(0, floor=0), ElevatorSnapshot(1, floor=0)]

        decision = BasicDispatcher().decide(cars, calls)

        assert decision.claims == {0: calls}

    def test_no_elevators_leaves_calls_unclaimed(self):
        decision = BasicDispatcher().decide([], [Request(2, Direction.UP, 0)])
        assert decision == Decision()

    def test_decisions_are_repeatable(self):
        cars = [ElevatorSnapshot(0, floor=1), moving_up(1, 4, {8})]
        calls = [Request(6, Direction.UP, 0), Request(2, Direction.DOWN, 1), Request(0, Direction.UP, 2)]
        dispatcher = BasicDispatcher()

        assert dispatcher.decide(cars, calls) == dispatcher.decide(list(cars), list(calls))


class TestFirstComeFirstServed:
    def test_only_idle_cars_are_assigned(self):
        cars = [moving_up(0, 2, {6}), ElevatorSnapshot(1, floor=9)]
        call = Request(4, Direction.UP, 0)

        decision = FirstComeFirstServedDispatcher().decide(cars, [call])

        assert decision.claims == {1: [call]}
        assert decision.moves == {0: Move.UP, 1: Move.DOWN}

    def test_oldest_call_goes_first_one_per_car(self):
        older = Request(8, Direction.DOWN, 0)
        newer = Request(2, Direction.UP, 1)

        decision = FirstComeFirstServedDispatcher().decide([ElevatorSnapshot(0, floor=0)], [newer, older])

        assert decision.claims == {0: [older]}

    def test_car_owing_the_pickup_absorbs_a_repeat_call(self):
        owner = ElevatorSnapshot(0, floor=0).with_claim(Request(5, Direction.DOWN, 0))
        repeat = Request(5, Direction.DOWN, 1)

        decision = FirstComeFirstServedDispatcher().decide([owner, ElevatorSnapshot(1, floor=4)], [repeat])

        assert decision.claims == {0: [repeat]}

    def test_nothing_to_do_without_idle_cars(self):
        decision = FirstComeFirstServedDispatcher().decide([moving_up(0, 2, {6})], [Request(7, Direction.UP, 0)])
        assert decision.claims == {}


def test_get_dispatcher_by_name():
    assert isinstance(get_dispatcher("basic"), BasicDispatcher)
    assert isinstance(get_dispatcher("FCFS"), FirstComeFirstServedDispatcher)


def test_get_dispatcher_unknown_name():
    with pytest.raises(ValueError, match="Unknown dispatcher"):
        get_dispatcher("optimal")
