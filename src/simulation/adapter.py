from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from dispatch import Request

from .metrics import MetricsTracker
from .people import PeopleSource

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .building import Building

logger = logging.getLogger(__name__)


class PeopleAdapter:
    """Turns people into hall calls and elevator arrivals back into boarding.

    The building only ever sees ``Request`` values; this is the one place that
    remembers which person raised which call.
    """

    def __init__(self, people: PeopleSource, metrics: Optional[MetricsTracker] = None) -> None:
        self.people = people
        self.metrics = metrics
        self._callers: Dict[Request, int] = {}

    def poll(self, building: "Building", tick: int) -> None:
        for person in self.people.spawn(tick):
            request = building.submit_request(person.origin, person.direction)
            self._callers[request] = person.person_id

    def on_arrival(
        self, elevator_id: int, floor: int, picked_up: Sequence[Request], tick: int
    ) -> List[int]:
        for person in self.people.alight(elevator_id, floor, tick):
            if self.metrics is not None:
                self.metrics.record_trip(person)

        destinations: List[int] = []
        for request in picked_up:
            person_id = self._callers.pop(request, None)
            if person_id is None:
                # Raised without a person behind it (e.g. over the API).
                logger.debug("nobody to board for %s", request)
                continue
            person = self.people.board(person_id, elevator_id, tick)
            destinations.append(person.destination)
        return destinations
