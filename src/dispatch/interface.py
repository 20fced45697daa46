from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Dict, FrozenSet, List, Protocol, Sequence, Tuple


class Direction(IntEnum):
    UP = 1
    DOWN = -1
    IDLE = 0


class Move(IntEnum):
    UP = 1
    DOWN = -1
    STAY = 0


@dataclass(frozen=True)
class Request:
    """A pending hall call: where it was raised and which way the caller travels."""

    origin: int
    direction: Direction
    sequence: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "direction", Direction(self.direction))
        if self.direction is Direction.IDLE:
            raise ValueError("a request must travel up or down")


@dataclass(frozen=True)
class ElevatorSnapshot:
    """Read-only view of an elevator for dispatch decisions."""

    elevator_id: int
    floor: int
    direction: Direction = Direction.IDLE
    stops: FrozenSet[int] = frozenset()
    pickups: Tuple[Request, ...] = ()
    passenger_count: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "direction", Direction(self.direction))
        object.__setattr__(self, "stops", frozenset(self.stops))
        object.__setattr__(self, "pickups", tuple(self.pickups))

    @property
    def is_idle(self) -> bool:
        return self.direction is Direction.IDLE

    @property
    def reversing(self) -> bool:
        """True while heading to a pickup whose riders travel the other way."""
        return any(req.direction != self.direction for req in self.pickups)

    def is_ahead(self, floor: int) -> bool:
        if self.direction is Direction.UP:
            return floor >= self.floor
        if self.direction is Direction.DOWN:
            return floor <= self.floor
        return True

    def owes(self, request: Request) -> bool:
        """True if a pickup for the same floor and direction is already claimed."""
        return any(
            req.origin == request.origin and req.direction == request.direction
            for req in self.pickups
        )

    def can_claim(self, request: Request) -> bool:
        """Whether claiming ``request`` keeps the direction-consistency invariant.

        Idle cars may take any call, and a car always absorbs a call it already
        owes. Otherwise a moving car only takes calls in its own direction at or
        ahead of its floor, and none at all while it is travelling to a
        reversing pickup.
        """
        if self.is_idle or self.owes(request):
            return True
        if request.direction != self.direction or self.reversing:
            return False
        return self.is_ahead(request.origin)

    def with_claim(self, request: Request) -> "ElevatorSnapshot":
        direction = self.direction
        if self.is_idle:
            if request.origin > self.floor:
                direction = Direction.UP
            elif request.origin < self.floor:
                direction = Direction.DOWN
            else:
                direction = request.direction
        return replace(
            self,
            direction=direction,
            stops=self.stops | {request.origin},
            pickups=self.pickups + (request,),
        )

    def next_move(self) -> Move:
        """One floor toward the nearest stop in the current direction."""
        if self.is_idle or not self.stops:
            return Move.STAY
        if self.direction is Direction.UP:
            return Move.UP if min(self.stops) > self.floor else Move.STAY
        return Move.DOWN if max(self.stops) < self.floor else Move.STAY


@dataclass(frozen=True)
class Decision:
    """Claims per elevator plus each elevator's next single-floor move."""

    claims: Dict[int, List[Request]] = field(default_factory=dict)
    moves: Dict[int, Move] = field(default_factory=dict)


class Dispatcher(Protocol):
    """Strategy interface for assigning hall calls and moving elevators."""

    def decide(
        self,
        elevators: Sequence[ElevatorSnapshot],
        requests: Sequence[Request],
    ) -> Decision:
        """
        Return newly claimed requests per elevator id and each elevator's move.

        Implementations must be pure: the same snapshots always yield the
        same decision, and nothing is remembered between calls. Requests may
        be left unclaimed when no elevator can take them without breaking
        direction consistency.
        """
        ...
