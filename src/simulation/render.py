"""Plain-text frames of the building, top floor first."""
from __future__ import annotations

from dispatch import Direction

from .building import BuildingSnapshot

ARROWS = {Direction.UP: "^", Direction.DOWN: "v", Direction.IDLE: "-"}
EMPTY_CELL = "  .  "


def render(snapshot: BuildingSnapshot) -> str:
    lines = [f"Tick {snapshot.tick}"]
    for floor in reversed(range(snapshot.num_floors)):
        up, down = snapshot.waiting_at(floor)
        lamps = ("^" if up else ".") + ("v" if down else ".")
        cells = [
            f"{e.elevator_id}({e.passenger_count}){ARROWS[e.direction]}" if e.floor == floor else EMPTY_CELL
            for e in snapshot.elevators
        ]
        lines.append(f"Floor: {floor} [{lamps}] Waiting: {up + down} | {' '.join(cells)}".rstrip())
    return "\n".join(lines)
