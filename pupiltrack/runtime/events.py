from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Optional, Set
import asyncio, websockets, time

class Ellipse(BaseModel):
    cx: float; cy: float; width: float; height: float; angle: float

    @classmethod
    def from_result(cls, r) -> "Ellipse":
        return cls(cx=r.cx, cy=r.cy, width=r.width, height=r.height, angle=r.angle)

class PupilEvent(BaseModel):
    ts: float = Field(default_factory=lambda: time.time())
    frame: int = 0
    source: Optional[str] = None
    ok: bool
    ellipse: Optional[Ellipse] = None
    proc_ms: float = 0.0

    @classmethod
    def build(cls, ok: bool, result=None, **kw) -> "PupilEvent":
        # a failed frame carries no ellipse even if an older one is cached
        return cls(ok=ok, ellipse=Ellipse.from_result(result) if ok and result is not None else None, **kw)

async def ws_broadcast(queue: "asyncio.Queue[str]", host="0.0.0.0", port=8765):
    clients: Set = set()
    async def handler(websocket):
        clients.add(websocket)
        try:
            await websocket.wait_closed()
        finally:
            clients.discard(websocket)
    async def pump():
        while True:
            msg = await queue.get()
            if clients:
                await asyncio.gather(*[c.send(msg) for c in list(clients)], return_exceptions=True)
    async with websockets.serve(handler, host, port):
        await pump()
