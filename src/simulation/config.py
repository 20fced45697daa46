from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from dispatch import DISPATCHER_REGISTRY

from .errors import ConfigurationError


class RunConfig(BaseModel):
    """Parameters for a single run, checked before the first tick."""

    floors: int = Field(10, gt=0)
    elevators: int = Field(2, gt=0)
    steps: int = Field(2000, gt=0)
    dispatcher: str = "basic"
    spawn_interval: int = Field(3, gt=0)
    tick_delay: float = Field(0.025, ge=0)
    random_seed: Optional[int] = None

    @field_validator("dispatcher")
    @classmethod
    def _known_dispatcher(cls, value: str) -> str:
        name = value.lower()
        if name not in DISPATCHER_REGISTRY:
            raise ValueError(f"unknown dispatcher '{value}', expected one of {', '.join(DISPATCHER_REGISTRY)}")
        return name


def load_run_config(**values) -> RunConfig:
    """Build a ``RunConfig``; unset (``None``) values fall back to the defaults."""
    supplied = {key: value for key, value in values.items() if value is not None}
    try:
        return RunConfig(**supplied)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise ConfigurationError(problems) from exc
