from __future__ import annotations

from typing import Dict, Type

from .basic import BasicDispatcher
from .fcfs import FirstComeFirstServedDispatcher
from .interface import Decision, Direction, Dispatcher, ElevatorSnapshot, Move, Request

__all__ = [
    "BasicDispatcher",
    "Decision",
    "Direction",
    "Dispatcher",
    "ElevatorSnapshot",
    "FirstComeFirstServedDispatcher",
    "Move",
    "Request",
    "get_dispatcher",
]


DISPATCHER_REGISTRY: Dict[str, Type[Dispatcher]] = {
    "basic": BasicDispatcher,
    "fcfs": FirstComeFirstServedDispatcher,
}


def get_dispatcher(name: str, **kwargs) -> Dispatcher:
    cls = DISPATCHER_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown dispatcher '{name}'. Available: {', '.join(DISPATCHER_REGISTRY)}")
    return cls(**kwargs)
