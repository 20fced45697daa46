from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set, Tuple

from dispatch import Direction, ElevatorSnapshot, Move, Request

from .errors import ContractViolation


@dataclass
class Elevator:
    """A car's position, committed stops, claimed pickups and riders' destinations."""

    elevator_id: int
    floor: int = 0
    direction: Direction = Direction.IDLE
    stops: Set[int] = field(default_factory=set)
    pickups: Dict[int, List[Request]] = field(default_factory=dict)
    riders: List[int] = field(default_factory=list)

    @property
    def passenger_count(self) -> int:
        return len(self.riders)

    def snapshot(self) -> ElevatorSnapshot:
        pickups = sorted(
            (req for reqs in self.pickups.values() for req in reqs),
            key=lambda req: req.sequence,
        )
        return ElevatorSnapshot(
            elevator_id=self.elevator_id,
            floor=self.floor,
            direction=self.direction,
            stops=frozenset(self.stops),
            pickups=tuple(pickups),
            passenger_count=self.passenger_count,
        )

    def claim(self, request: Request) -> None:
        self.direction = self.snapshot().with_claim(request).direction
        self.stops.add(request.origin)
        self.pickups.setdefault(request.origin, []).append(request)

    def advance(self, move: Move) -> None:
        self.floor += int(move)

    def at_stop(self) -> bool:
        return self.floor in self.stops

    def arrive(self) -> Tuple[List[Request], int]:
        """Clear the stop at the current floor.

        Returns the requests picked up here and how many riders got off.
        """
        self.stops.discard(self.floor)
        picked_up = self.pickups.pop(self.floor, [])
        staying = [destination for destination in self.riders if destination != self.floor]
        alighted = len(self.riders) - len(staying)
        self.riders = staying
        if not self.stops:
            self.direction = Direction.IDLE
        return picked_up, alighted

    def board(self, destinations: Sequence[int]) -> None:
        """Take on riders, turning an idle car toward their destinations."""
        direction = self._direction_for(destinations)
        self.direction = direction
        for destination in destinations:
            self.riders.append(destination)
            self.stops.add(destination)

    def _direction_for(self, destinations: Sequence[int]) -> Direction:
        direction = self.direction
        for destination in destinations:
            if destination == self.floor:
                raise ContractViolation(
                    f"rider boarding elevator {self.elevator_id} on floor {self.floor} "
                    "is already at their destination"
                )
            heading = Direction.UP if destination > self.floor else Direction.DOWN
            if direction is Direction.IDLE:
                direction = heading
            elif heading is not direction:
                raise ContractViolation(
                    f"elevator {self.elevator_id} heading {direction.name} on floor "
                    f"{self.floor} cannot take a rider to floor {destination}"
                )
        return direction
