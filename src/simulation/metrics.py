from __future__ import annotations

import math
from dataclasses import dataclass
from statistics import fmean
from typing import Dict, List

from dispatch import Request

from .building import BuildingSnapshot
from .people import Person


@dataclass(frozen=True)
class MetricsSnapshot:
    tick: int
    delivered: int
    average_wait: float
    wait_p95: float
    average_ride: float
    ride_p95: float
    calls_waiting: int
    oldest_call: int
    utilisation: float


def nearest_rank(values: List[int], fraction: float) -> float:
    """Smallest recorded value with at least ``fraction`` of the values at or below it."""
    if not values:
        return 0.0
    ordered = sorted(values)
    rank = max(1, math.ceil(fraction * len(ordered)))
    return float(ordered[rank - 1])


class MetricsTracker:
    """Trip times of delivered people plus call backlog and car load seen each tick."""

    def __init__(self) -> None:
        self.waits: List[int] = []
        self.rides: List[int] = []
        self.tick = 0
        self.busy_car_ticks = 0
        self.car_ticks = 0
        self._call_seen: Dict[Request, int] = {}

    @property
    def delivered(self) -> int:
        return len(self.rides)

    def record_trip(self, person: Person) -> None:
        if person.wait_time is None or person.ride_time is None:
            raise ValueError(f"person {person.person_id} has not finished their trip")
        self.waits.append(person.wait_time)
        self.rides.append(person.ride_time)

    def observe(self, snapshot: BuildingSnapshot) -> None:
        """Fold one tick into the call ages and the car utilisation."""
        self.tick = snapshot.tick
        calls = list(snapshot.pending)
        for car in snapshot.elevators:
            calls.extend(car.pickups)
            if not car.is_idle:
                self.busy_car_ticks += 1
        self.car_ticks += len(snapshot.elevators)
        # A call is as old as the first tick it showed up in; answered ones drop out.
        self._call_seen = {call: self._call_seen.get(call, snapshot.tick) for call in calls}

    def snapshot(self) -> MetricsSnapshot:
        ages = [self.tick - seen for seen in self._call_seen.values()]
        return MetricsSnapshot(
            tick=self.tick,
            delivered=self.delivered,
            average_wait=fmean(self.waits) if self.waits else 0.0,
            wait_p95=nearest_rank(self.waits, 0.95),
            average_ride=fmean(self.rides) if self.rides else 0.0,
            ride_p95=nearest_rank(self.rides, 0.95),
            calls_waiting=len(ages),
            oldest_call=max(ages, default=0),
            utilisation=self.busy_car_ticks / self.car_ticks if self.car_ticks else 0.0,
        )
