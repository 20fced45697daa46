from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from dispatch import Direction

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class PersonState(str, Enum):
    WAITING = "waiting"
    RIDING = "riding"
    DONE = "done"


@dataclass
class Person:
    """Represents someone travelling between floors."""

    person_id: int
    origin: int
    destination: int
    spawned_at: int
    state: PersonState = PersonState.WAITING
    elevator_id: Optional[int] = None
    boarded_at: Optional[int] = None
    alighted_at: Optional[int] = None

    @property
    def direction(self) -> Direction:
        return Direction.UP if self.destination > self.origin else Direction.DOWN

    def record_boarding(self, elevator_id: int, time_step: int) -> None:
        self.state = PersonState.RIDING
        self.elevator_id = elevator_id
        self.boarded_at = time_step

    def record_alighting(self, time_step: int) -> None:
        self.state = PersonState.DONE
        self.elevator_id = None
        self.alighted_at = time_step

    @property
    def wait_time(self) -> Optional[int]:
        if self.boarded_at is None:
            return None
        return self.boarded_at - self.spawned_at

    @property
    def ride_time(self) -> Optional[int]:
        if self.boarded_at is None or self.alighted_at is None:
            return None
        return self.alighted_at - self.boarded_at


class PeopleSource:
    """Spawns one person every ``spawn_interval`` ticks and follows them to their floor.

    Only people still waiting or riding are kept; once someone alights they
    are handed back to the caller and forgotten, leaving a running count in
    ``delivered``.
    """

    def __init__(self, num_floors: int, spawn_interval: int = 3, random_seed: Optional[int] = None) -> None:
        if spawn_interval <= 0:
            raise ConfigurationError(f"spawn interval must be positive, got {spawn_interval}")
        self.num_floors = num_floors
        self.spawn_interval = spawn_interval
        self.random = random.Random(random_seed)
        self.delivered = 0
        self._people: Dict[int, Person] = {}
        self._riders: Dict[int, List[Person]] = {}
        self._next_person_id = 0
        if num_floors < 2:
            logger.warning("a %d-floor building has nowhere to go; nobody will appear", num_floors)

    @property
    def people(self) -> List[Person]:
        """Everyone not yet delivered, in spawn order."""
        return list(self._people.values())

    def get(self, person_id: int) -> Person:
        return self._people[person_id]

    def spawn(self, tick: int) -> List[Person]:
        if self.num_floors < 2 or tick % self.spawn_interval:
            return []
        origin = self.random.randrange(self.num_floors)
        destination = self.random.choice([f for f in range(self.num_floors) if f != origin])
        person = Person(
            person_id=self._next_person_id,
            origin=origin,
            destination=destination,
            spawned_at=tick,
        )
        self._next_person_id += 1
        self._people[person.person_id] = person
        logger.info("person %d appeared on floor %d bound for %d", person.person_id, origin, destination)
        return [person]

    def board(self, person_id: int, elevator_id: int, tick: int) -> Person:
        person = self._people[person_id]
        person.record_boarding(elevator_id, tick)
        self._riders.setdefault(elevator_id, []).append(person)
        return person

    def alight(self, elevator_id: int, floor: int, tick: int) -> List[Person]:
        riders = self._riders.get(elevator_id, [])
        arrived = [person for person in riders if person.destination == floor]
        if not arrived:
            return []
        self._riders[elevator_id] = [person for person in riders if person.destination != floor]
        for person in arrived:
            person.record_alighting(tick)
            del self._people[person.person_id]
        self.delivered += len(arrived)
        return arrived

    def in_state(self, state: PersonState) -> List[Person]:
        return [person for person in self._people.values() if person.state is state]
