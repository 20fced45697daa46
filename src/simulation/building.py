from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Set, Tuple

from dispatch import Decision, Direction, Dispatcher, ElevatorSnapshot, Move, Request, get_dispatcher

from .elevator import Elevator
from .errors import ConfigurationError, ContractViolation, UnservableRequest

logger = logging.getLogger(__name__)


class RequestSource(Protocol):
    """Whoever raises hall calls and rides the cars."""

    def poll(self, building: "Building", tick: int) -> None:
        """Submit calls that arrived during ``tick`` via ``building.submit_request``."""
        ...

    def on_arrival(
        self, elevator_id: int, floor: int, picked_up: Sequence[Request], tick: int
    ) -> List[int]:
        """Let riders off and on; return the destinations of those who boarded."""
        ...


@dataclass(frozen=True)
class BuildingSnapshot:
    """State of the building at the end of a tick."""

    tick: int
    num_floors: int
    elevators: Tuple[ElevatorSnapshot, ...]
    pending: Tuple[Request, ...]

    def waiting_at(self, floor: int) -> Tuple[int, int]:
        """Up and down callers on ``floor``, whether claimed yet or not."""
        calls = list(self.pending)
        for elevator in self.elevators:
            calls.extend(elevator.pickups)
        up = sum(1 for req in calls if req.origin == floor and req.direction is Direction.UP)
        down = sum(1 for req in calls if req.origin == floor and req.direction is Direction.DOWN)
        return up, down

    def to_dict(self) -> dict:
        return {
            "tick": self.tick,
            "floors": [list(self.waiting_at(floor)) for floor in range(self.num_floors)],
            "elevators": [
                {
                    "id": elevator.elevator_id,
                    "floor": elevator.floor,
                    "direction": elevator.direction.name.lower(),
                    "stops": sorted(elevator.stops),
                    "passenger_count": elevator.passenger_count,
                }
                for elevator in self.elevators
            ],
            "pending": [
                {
                    "origin": req.origin,
                    "direction": req.direction.name.lower(),
                    "sequence": req.sequence,
                }
                for req in self.pending
            ],
        }


@dataclass
class Building:
    """Elevators and live hall calls, advanced one tick at a time."""

    num_floors: int
    elevators: List[Elevator] = field(default_factory=list)
    dispatcher: Optional[Dispatcher] = None
    dispatcher_name: str = "basic"
    dispatcher_options: dict = field(default_factory=dict)
    source: Optional[RequestSource] = None
    pending_requests: Set[Request] = field(init=False, default_factory=set)
    current_tick: int = field(init=False, default=0)
    _next_sequence: int = field(init=False, default=0, repr=False)
    _unservable_reported: bool = field(init=False, default=False, repr=False)

    def __post_init__(self) -> None:
        if self.num_floors <= 0:
            raise ConfigurationError(f"a building needs at least one floor, got {self.num_floors}")
        self.elevators = sorted(self.elevators, key=lambda e: e.elevator_id)
        ids = [elevator.elevator_id for elevator in self.elevators]
        if len(set(ids)) != len(ids):
            raise ConfigurationError(f"elevator ids must be unique, got {ids}")
        for elevator in self.elevators:
            if not 0 <= elevator.floor < self.num_floors:
                raise ConfigurationError(
                    f"elevator {elevator.elevator_id} starts on floor {elevator.floor}, "
                    f"outside 0..{self.num_floors - 1}"
                )
        if self.dispatcher is None:
            self.dispatcher = get_dispatcher(self.dispatcher_name, **self.dispatcher_options)

    @property
    def top_floor(self) -> int:
        return self.num_floors - 1

    def set_dispatcher(self, name: str, **options) -> None:
        self.dispatcher = get_dispatcher(name, **options)
        self.dispatcher_name = name
        self.dispatcher_options = options

    def submit_request(self, origin: int, direction: Direction) -> Request:
        direction = Direction(direction)
        if not 0 <= origin < self.num_floors:
            raise ValueError(f"floor {origin} is outside 0..{self.top_floor}")
        if direction is Direction.UP and origin == self.top_floor:
            raise ValueError(f"cannot go up from the top floor {origin}")
        if direction is Direction.DOWN and origin == 0:
            raise ValueError("cannot go down from the bottom floor")

        request = Request(origin=origin, direction=direction, sequence=self._next_sequence)
        self._next_sequence += 1
        owner = self._find_owner(request)
        if owner is not None:
            owner.claim(request)
            logger.debug("elevator %d already owes floor %d, folded %s", owner.elevator_id, origin, request)
            return request
        self.pending_requests.add(request)
        if not self.elevators:
            self._report_unservable(request)
        return request

    def tick(self) -> BuildingSnapshot:
        elevators = self._snapshot_elevators()
        requests = self._pending_snapshot()
        decision = self.dispatcher.decide(elevators, requests)
        moves = self._validate(decision, elevators)

        tick = self.current_tick + 1
        self._apply_claims(decision.claims)
        for elevator in self.elevators:
            elevator.advance(moves.get(elevator.elevator_id, Move.STAY))
        self._resolve_arrivals(tick)

        self.current_tick = tick
        if self.source is not None:
            self.source.poll(self, tick)
        return self.snapshot()

    def snapshot(self) -> BuildingSnapshot:
        return BuildingSnapshot(
            tick=self.current_tick,
            num_floors=self.num_floors,
            elevators=tuple(self._snapshot_elevators()),
            pending=tuple(self._pending_snapshot()),
        )

    def _validate(self, decision: Decision, elevators: Sequence[ElevatorSnapshot]) -> Dict[int, Move]:
        planned = {elevator.elevator_id: elevator for elevator in elevators}

        claimed: Set[Request] = set()
        for elevator_id, requests in decision.claims.items():
            if elevator_id not in planned:
                raise ContractViolation(f"claim for unknown elevator {elevator_id}")
            for request in requests:
                if request in claimed:
                    raise ContractViolation(f"{request} claimed more than once")
                if request not in self.pending_requests:
                    raise ContractViolation(f"{request} is not pending")
                if not planned[elevator_id].can_claim(request):
                    raise ContractViolation(
                        f"elevator {elevator_id} cannot claim {request} without reversing"
                    )
                planned[elevator_id] = planned[elevator_id].with_claim(request)
                claimed.add(request)

        moves: Dict[int, Move] = {}
        for elevator_id, move in decision.moves.items():
            if elevator_id not in planned:
                raise ContractViolation(f"move for unknown elevator {elevator_id}")
            if move not in (Move.UP, Move.DOWN, Move.STAY):
                raise ContractViolation(
                    f"elevator {elevator_id} can move at most one floor per tick, got {move!r}"
                )
            moves[elevator_id] = Move(move)

        for plan in planned.values():
            self._check_move(plan, moves.get(plan.elevator_id, Move.STAY))
        return moves

    def _check_move(self, plan: ElevatorSnapshot, move: Move) -> None:
        if move is Move.STAY:
            return
        if plan.is_idle:
            raise ContractViolation(f"idle elevator {plan.elevator_id} has nowhere to go")
        if int(move) != int(plan.direction):
            raise ContractViolation(
                f"elevator {plan.elevator_id} heading {plan.direction.name} cannot move {move.name}"
            )
        target = plan.floor + int(move)
        if not 0 <= target < self.num_floors:
            raise ContractViolation(
                f"elevator {plan.elevator_id} would leave the shaft at floor {target}"
            )
        if plan.floor in plan.stops:
            raise ContractViolation(
                f"elevator {plan.elevator_id} would pass its stop at floor {plan.floor}"
            )

    def _apply_claims(self, claims: Dict[int, List[Request]]) -> None:
        for elevator_id, requests in claims.items():
            elevator = self._get_elevator(elevator_id)
            for request in requests:
                self.pending_requests.discard(request)
                elevator.claim(request)
                logger.debug("elevator %d claimed %s", elevator_id, request)

    def _resolve_arrivals(self, tick: int) -> None:
        for elevator in self.elevators:
            if not elevator.at_stop():
                continue
            picked_up, alighted = elevator.arrive()
            destinations: List[int] = []
            if self.source is not None:
                destinations = list(
                    self.source.on_arrival(elevator.elevator_id, elevator.floor, tuple(picked_up), tick)
                )
            elevator.board(destinations)
            logger.debug(
                "elevator %d stopped at floor %d: %d off, %d calls answered, %d on",
                elevator.elevator_id,
                elevator.floor,
                alighted,
                len(picked_up),
                len(destinations),
            )

    def _report_unservable(self, request: Request) -> None:
        if self._unservable_reported:
            return
        self._unservable_reported = True
        message = f"{request} will wait forever: the building has no elevators"
        logger.warning(message)
        warnings.warn(message, UnservableRequest, stacklevel=3)

    def _snapshot_elevators(self) -> List[ElevatorSnapshot]:
        return [elevator.snapshot() for elevator in self.elevators]

    def _pending_snapshot(self) -> List[Request]:
        return sorted(self.pending_requests, key=lambda req: req.sequence)

    def _find_owner(self, request: Request) -> Optional[Elevator]:
        for elevator in self.elevators:
            if any(
                req.direction == request.direction for req in elevator.pickups.get(request.origin, [])
            ):
                return elevator
        return None

    def _get_elevator(self, elevator_id: int) -> Elevator:
        for elevator in self.elevators:
            if elevator.elevator_id == elevator_id:
                return elevator
        raise KeyError(elevator_id)
