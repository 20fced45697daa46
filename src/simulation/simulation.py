from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from .adapter import PeopleAdapter
from .building import Building, BuildingSnapshot
from .elevator import Elevator
from .metrics import MetricsTracker
from .people import PeopleSource

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .config import RunConfig

logger = logging.getLogger(__name__)


class Simulation:
    """A building fed by randomly spawning people, stepped one tick at a time."""

    def __init__(
        self,
        building: Building,
        spawn_interval: int = 3,
        random_seed: Optional[int] = None,
    ) -> None:
        self.building = building
        self.people = PeopleSource(building.num_floors, spawn_interval, random_seed)
        self.metrics = MetricsTracker()
        self.building.source = PeopleAdapter(self.people, self.metrics)
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}

    @classmethod
    def from_config(cls, config: "RunConfig") -> "Simulation":
        elevators = [Elevator(i) for i in range(config.elevators)]
        building = Building(
            num_floors=config.floors,
            elevators=elevators,
            dispatcher_name=config.dispatcher,
        )
        return cls(building, spawn_interval=config.spawn_interval, random_seed=config.random_seed)

    @property
    def current_time(self) -> int:
        return self.building.current_tick

    def run(self, duration: int) -> List[BuildingSnapshot]:
        logger.info(
            "running %d ticks: %d floors, %d elevators, %s dispatcher",
            duration,
            self.building.num_floors,
            len(self.building.elevators),
            self.building.dispatcher_name,
        )
        snapshots = [self.step() for _ in range(duration)]
        logger.info("finished at tick %d, %d riders delivered", self.current_time, self.metrics.delivered)
        return snapshots

    def step(self) -> BuildingSnapshot:
        snapshot = self.building.tick()
        self.metrics.observe(snapshot)
        self._emit("tick", snapshot)
        return snapshot

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)
