"""Simulation primitives for the elevator dispatcher."""

from .adapter import PeopleAdapter
from .building import Building, BuildingSnapshot, RequestSource
from .config import RunConfig, load_run_config
from .elevator import Elevator
from .errors import ConfigurationError, ContractViolation, SimulationError, UnservableRequest
from .metrics import MetricsSnapshot, MetricsTracker
from .people import PeopleSource, Person, PersonState
from .render import render
from .simulation import Simulation

__all__ = [
    "Building",
    "BuildingSnapshot",
    "ConfigurationError",
    "ContractViolation",
    "Elevator",
    "MetricsSnapshot",
    "MetricsTracker",
    "PeopleAdapter",
    "PeopleSource",
    "Person",
    "PersonState",
    "RequestSource",
    "RunConfig",
    "SimulationError",
    "Simulation",
    "UnservableRequest",
    "load_run_config",
    "render",
]
