from __future__ import annotations

import asyncio
import contextlib
import json
from dataclasses import asdict
from typing import AsyncIterator, Dict, Literal, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from dispatch import Direction
from simulation import Building, Elevator, Simulation


class DispatcherSelection(BaseModel):
    name: str
    options: Dict[str, object] = {}


class HallCall(BaseModel):
    origin: int
    direction: Literal["up", "down"]


class SimulationManager:
    def __init__(
        self,
        num_floors: int = 10,
        elevator_count: int = 2,
        tick_interval: float = 0.25,
        dispatcher: str = "basic",
        spawn_interval: int = 3,
        random_seed: Optional[int] = None,
    ) -> None:
        elevators = [Elevator(i) for i in range(elevator_count)]
        building = Building(num_floors=num_floors, elevators=elevators, dispatcher_name=dispatcher)
        self.simulation = Simulation(building, spawn_interval=spawn_interval, random_seed=random_seed)
        self.tick_interval = tick_interval
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        while True:
            async with self._lock:
                self.simulation.step()
                payload = self.current_state()
            await self.broadcast(payload)
            await asyncio.sleep(self.tick_interval)

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        building = self.simulation.building
        metrics = asdict(self.simulation.metrics.snapshot())
        return {
            "time": self.simulation.current_time,
            "building": building.snapshot().to_dict(),
            "metrics": metrics,
            "dispatcher": building.dispatcher_name,
        }

    async def set_dispatcher(self, name: str, options: Dict[str, object]) -> dict:
        async with self._lock:
            self.simulation.building.set_dispatcher(name, **options)
            return self.current_state()

    async def submit_call(self, origin: int, direction: Direction) -> dict:
        async with self._lock:
            request = self.simulation.building.submit_request(origin, direction)
            state = self.current_state()
            state["request"] = {
                "origin": request.origin,
                "direction": request.direction.name.lower(),
                "sequence": request.sequence,
            }
            return state


def create_app(manager: SimulationManager) -> FastAPI:
    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await manager.start()
        try:
            yield
        finally:
            await manager.stop()

    app = FastAPI(title="Elevator Dispatch Simulation API", lifespan=lifespan)
    app.state.manager = manager
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/state")
    async def get_state() -> dict:
        return manager.current_state()

    @app.post("/dispatcher")
    async def set_dispatcher(selection: DispatcherSelection) -> dict:
        try:
            return await manager.set_dispatcher(selection.name, selection.options)
        except (TypeError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    @app.post("/requests")
    async def submit_call(call: HallCall) -> dict:
        direction = Direction.UP if call.direction == "up" else Direction.DOWN
        try:
            return await manager.submit_call(call.origin, direction)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    @app.websocket("/ws/stream")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await manager.register(websocket)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            await manager.unregister(websocket)

    return app


app = create_app(SimulationManager())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
