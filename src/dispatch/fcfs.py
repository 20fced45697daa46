from __future__ import annotations

from typing import Dict, List, Sequence

from .interface import Decision, ElevatorSnapshot, Request
from .utils import find_owner, plan_moves, sort_by_arrival


class FirstComeFirstServedDispatcher:
    """Sends the nearest idle car to the oldest outstanding call."""

    def decide(
        self,
        elevators: Sequence[ElevatorSnapshot],
        requests: Sequence[Request],
    ) -> Decision:
        plans: Dict[int, ElevatorSnapshot] = {e.elevator_id: e for e in elevators}
        claims: Dict[int, List[Request]] = {}

        for request in sort_by_arrival(requests):
            owner = find_owner(plans.values(), request)
            if owner is not None:
                plans[owner.elevator_id] = owner.with_claim(request)
                claims.setdefault(owner.elevator_id, []).append(request)
                continue

            idle = [
                plan
                for plan in plans.values()
                if plan.is_idle and plan.elevator_id not in claims
            ]
            if not idle:
                continue
            chosen = min(
                idle, key=lambda plan: (abs(plan.floor - request.origin), plan.elevator_id)
            )
            plans[chosen.elevator_id] = chosen.with_claim(request)
            claims[chosen.elevator_id] = [request]

        return Decision(claims=claims, moves=plan_moves(plans.values()))
