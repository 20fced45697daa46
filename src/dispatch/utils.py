from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from .interface import ElevatorSnapshot, Move, Request


def claim_cost(elevator: ElevatorSnapshot, request: Request) -> Tuple[int, int, int, int]:
    """Rank a candidate for a call: a car already owing it, distance, cars already passing by, id."""

    owed = 0 if elevator.owes(request) else 1
    distance = abs(elevator.floor - request.origin)
    passing = 1 if elevator.is_idle else 0
    return owed, distance, passing, elevator.elevator_id


def find_owner(plans: Iterable[ElevatorSnapshot], request: Request) -> Optional[ElevatorSnapshot]:
    """The car, if any, already committed to pick up callers like ``request``."""
    for plan in plans:
        if plan.owes(request):
            return plan
    return None


def plan_moves(plans: Iterable[ElevatorSnapshot]) -> Dict[int, Move]:
    return {plan.elevator_id: plan.next_move() for plan in plans}


def sort_by_arrival(requests: Iterable[Request]) -> List[Request]:
    return sorted(requests, key=lambda req: req.sequence)
