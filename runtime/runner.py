import asyncio
from typing import List
from minibattles.game import Game
from minibattles.model import Order, State
from .eventlog import EventLog

FRAME_S = 1.0 / 60

class TickRunner:
    """Async driver that ticks the game at a fixed frame rate.

    Orders queued between frames are applied just before the next tick,
    under the same lock that guards snapshots.
    """

    def __init__(self, game: Game, time_compression: float = 1.0):
        self.game = game
        self.time_compression = time_compression
        self.sleep_s = FRAME_S / max(1.0, time_compression)
        self._orders: asyncio.Queue[List[Order]] = asyncio.Queue()
        self.events = EventLog()
        self._task: asyncio.Task | None = None
        self._lock = asyncio.Lock()

    async def start(self):
        """Start the frame loop."""
        if self._task:
            return
        self._task = asyncio.create_task(self._loop())

    async def stop(self):
        """Cancel the frame loop and wait for it to finish."""
        if not self._task:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    def _drain_orders(self) -> List[Order]:
        batched: List[Order] = []
        while not self._orders.empty():
            try:
                batched += self._orders.get_nowait()
            except asyncio.QueueEmpty:
                break
        return batched

    async def step(self):
        """Apply pending orders, run one tick and log what it produced."""
        batched = self._drain_orders()
        async with self._lock:
            if batched:
                print(f"[TickRunner] Applying {len(batched)} orders at frame {self.game.state.frame}")
                for order in batched:
                    self.game.apply_order(order)
            self.game.tick()
            evts = self.game.drain_events()

        if evts:
            kinds = sorted({e.kind for e in evts})
            print(f"[TickRunner] Frame {self.game.state.frame - 1} produced {len(evts)} events: {', '.join(kinds)}")
        self.events.append_many(evts)

    async def _loop(self):
        while True:
            await self.step()
            await asyncio.sleep(self.sleep_s)

    async def enqueue_orders(self, orders: List[Order]):
        """Queue orders to be applied before the next tick."""
        print(f"[TickRunner] Enqueuing {len(orders)} orders")
        await self._orders.put(orders)

    async def snapshot(self) -> State:
        """Copy of the game state taken between ticks."""
        async with self._lock:
            return self.game.snapshot()

    def set_time_compression(self, time_compression: float):
        """Update time compression factor (1.0 = 60 frames per second)."""
        self.time_compression = max(0.1, min(1000.0, time_compression))
        self.sleep_s = FRAME_S / max(1.0, self.time_compression)
        print(f"[TickRunner] Time compression set to {self.time_compression}x (sleep: {self.sleep_s:.4f}s)")
