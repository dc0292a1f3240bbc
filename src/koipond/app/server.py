from __future__ import annotations

import asyncio
import json
import logging
from collections import deque
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from ..sim.core.config import PondConfig
from ..sim.core.pond import Pond

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_LIMIT = 120


@dataclass(frozen=True)
class QueuedSnapshot:
    tick: int
    payload: str


class SnapshotQueue:
    """Serialized frames waiting to reach every connected viewer.

    Frames leave when a client acks them or once every client has been sent
    them. ``limit`` caps the backlog a stalled client can hold open.
    """

    def __init__(self, limit: int = DEFAULT_QUEUE_LIMIT):
        self._items: deque[QueuedSnapshot] = deque(maxlen=max(1, limit))
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._items)

    async def ticks(self) -> List[int]:
        async with self._lock:
            return [item.tick for item in self._items]

    async def push(self, item: QueuedSnapshot) -> None:
        async with self._lock:
            self._items.append(item)

    async def after(self, tick: int) -> List[QueuedSnapshot]:
        async with self._lock:
            return [item for item in self._items if item.tick > tick]

    async def drop_through(self, tick: int) -> None:
        async with self._lock:
            while self._items and self._items[0].tick <= tick:
                self._items.popleft()

    async def keep_latest(self) -> None:
        async with self._lock:
            while len(self._items) > 1:
                self._items.popleft()

    async def clear(self) -> None:
        async with self._lock:
            self._items.clear()


class SimulationController:
    def __init__(self, config: PondConfig, broadcast_interval: int = 1, queue_limit: int = DEFAULT_QUEUE_LIMIT):
        self.config = config
        self.pond = Pond(config)
        self.broadcast_interval = max(1, broadcast_interval)
        self.running = False
        self.tick = 0
        self.speed_multiplier = 1.0
        self.queue = SnapshotQueue(queue_limit)
        self._last_sent: Dict[WebSocket, int] = {}
        self._step_lock = asyncio.Lock()
        self._loop_task: Optional[asyncio.Task] = None

    @property
    def clients(self) -> List[WebSocket]:
        return list(self._last_sent)

    async def start(self) -> None:
        if self._loop_task is None or self._loop_task.done():
            self._loop_task = asyncio.create_task(self._run())
            self._loop_task.add_done_callback(self._on_loop_done)
        self.running = True

    async def stop(self) -> None:
        self.running = False

    def _on_loop_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Simulation loop stopped: %r", error)

    async def reset(self) -> None:
        async with self._step_lock:
            self.pond.reset()
            self.tick = 0
        await self.queue.clear()
        for client in self._last_sent:
            self._last_sent[client] = -1
        await self.broadcast()

    async def scroll(self, scroll_y: float) -> None:
        async with self._step_lock:
            self.pond.scroll_to(scroll_y)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.config.time_step / self.speed_multiplier)
            if not self.running:
                continue
            async with self._step_lock:
                self.pond.step(self.tick)
                self.tick += 1
            if self.tick % self.broadcast_interval == 0:
                await self.broadcast()

    def connect(self, client: WebSocket) -> None:
        self._last_sent[client] = -1
        logger.info("Client connected (%d total)", len(self._last_sent))

    def disconnect(self, client: WebSocket) -> None:
        if self._last_sent.pop(client, None) is not None:
            logger.info("Client disconnected (%d left)", len(self._last_sent))

    async def acknowledge(self, tick: int) -> None:
        await self.queue.drop_through(tick)

    def frame(self) -> QueuedSnapshot:
        snapshot = self.pond.snapshot(self.tick)
        message = {
            "type": "snapshot",
            "tick": snapshot.tick,
            "payload": {
                "tick": snapshot.tick,
                "metrics": asdict(snapshot.metrics) if snapshot.metrics is not None else None,
                "fish": snapshot.fish,
                "world": asdict(snapshot.world),
                "metadata": asdict(snapshot.metadata),
            },
        }
        return QueuedSnapshot(tick=snapshot.tick, payload=json.dumps(message))

    async def send_pending(self, client: WebSocket) -> None:
        last_sent = self._last_sent.get(client, -1)
        for item in await self.queue.after(last_sent):
            await client.send_text(item.payload)
            last_sent = item.tick
        if client in self._last_sent:
            self._last_sent[client] = last_sent

    async def broadcast(self) -> None:
        await self.queue.push(self.frame())
        # clients may connect or drop while a send is awaited
        for client in self.clients:
            try:
                await self.send_pending(client)
            except WebSocketDisconnect:
                self.disconnect(client)
        if self._last_sent:
            await self.queue.drop_through(min(self._last_sent.values()))
        else:
            await self.queue.keep_latest()


app = FastAPI(title="Koi Pond")
controller = SimulationController(PondConfig())
static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=static_dir), name="static")


@app.on_event("startup")
async def _startup() -> None:
    await controller.start()


@app.get("/")
async def index() -> FileResponse:
    return FileResponse(static_dir / "index.html")


@app.get("/api/status")
async def status() -> JSONResponse:
    metrics = controller.pond.metrics
    return JSONResponse(
        {
            "running": controller.running,
            "tick": controller.tick,
            "population": len(controller.pond.fish),
            "clients": len(controller.clients),
            "queued": len(controller.queue),
            "metrics": asdict(metrics) if metrics is not None else None,
        }
    )


@app.post("/api/control/start")
async def start_simulation() -> JSONResponse:
    await controller.start()
    return JSONResponse({"running": True})


@app.post("/api/control/stop")
async def stop_simulation() -> JSONResponse:
    await controller.stop()
    return JSONResponse({"running": False})


@app.post("/api/control/reset")
async def reset_simulation() -> JSONResponse:
    await controller.reset()
    return JSONResponse({"running": controller.running, "tick": controller.tick})


@app.post("/api/control/speed")
async def set_speed(payload: dict) -> JSONResponse:
    speed = float(payload.get("multiplier", 1.0))
    controller.speed_multiplier = max(0.1, min(5.0, speed))
    return JSONResponse({"multiplier": controller.speed_multiplier})


@app.post("/api/control/scroll")
async def set_scroll(payload: dict) -> JSONResponse:
    scroll_y = float(payload.get("scroll_y", 0.0))
    await controller.scroll(scroll_y)
    return JSONResponse({"scroll_y": scroll_y})


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await websocket.accept()
    controller.connect(websocket)
    try:
        await controller.send_pending(websocket)
        while True:
            message = await websocket.receive_text()
            try:
                payload = json.loads(message)
            except json.JSONDecodeError:
                continue
            if payload.get("type") == "ack" and isinstance(payload.get("tick"), int):
                await controller.acknowledge(payload["tick"])
    except WebSocketDisconnect:
        logger.debug("Client closed the socket")
    finally:
        controller.disconnect(websocket)


__all__ = ["app", "controller"]
