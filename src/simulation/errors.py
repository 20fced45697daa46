from __future__ import annotations


class SimulationError(Exception):
    """Base class for errors raised by the simulator."""


class ConfigurationError(SimulationError):
    """Run parameters are missing, unparsable or out of range."""


class ContractViolation(SimulationError):
    """A dispatcher or request source broke the tick protocol.

    The building refuses to continue from an inconsistent state, so this is
    never clamped or retried.
    """


class UnservableRequest(RuntimeWarning):
    """A hall call was placed in a building without elevators."""
