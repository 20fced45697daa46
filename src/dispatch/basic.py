from __future__ import annotations

from typing import Dict, List, Sequence

from .interface import Decision, ElevatorSnapshot, Request
from .utils import claim_cost, plan_moves, sort_by_arrival


class BasicDispatcher:
    """Directional nearest-car heuristic.

    Calls are taken in arrival order. A car that already owes a pickup for the
    same floor and direction absorbs the call. Otherwise it goes to the closest
    car that can serve it without reversing; at equal distance a car already
    travelling past the floor beats an idle one, then the lowest id wins. Every
    car then moves one floor toward its nearest committed stop.
    """

    def decide(
        self,
        elevators: Sequence[ElevatorSnapshot],
        requests: Sequence[Request],
    ) -> Decision:
        plans: Dict[int, ElevatorSnapshot] = {e.elevator_id: e for e in elevators}
        claims: Dict[int, List[Request]] = {}

        for request in sort_by_arrival(requests):
            candidates = [plan for plan in plans.values() if plan.can_claim(request)]
            if not candidates:
                continue
            chosen = min(candidates, key=lambda plan: claim_cost(plan, request))
            plans[chosen.elevator_id] = chosen.with_claim(request)
            claims.setdefault(chosen.elevator_id, []).append(request)

        return Decision(claims=claims, moves=plan_moves(plans.values()))
