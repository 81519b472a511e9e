from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from minibattles.game import Game
from minibattles.hud import hud_lines
from minibattles.model import GameConfig, Order, Unit
from runtime.runner import TickRunner
from .schemas import EventsResponse, OrderIn, StartRequest

app = FastAPI(title="MiniBattles API")
runner: TickRunner | None = None

# Enable CORS for development (the sketch page runs on the Vite dev server)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:5174", "http://localhost:5175"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def _unit_json(u: Unit) -> dict:
    return {
        "id": u.id,
        "team": u.team,
        "pos": list(u.pos),
        "health": u.health,
        "radius": u.radius,
        "target": list(u.target) if u.target else None,
        "waypoints": [list(p) for p in u.waypoints],
        "laser_cooldown": u.laser_cooldown,
    }

@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": "MiniBattles API",
        "docs": "/docs",
        "version": "1.0"
    }

@app.on_event("startup")
async def startup():
    """Create a default battle and start ticking it."""
    global runner
    runner = TickRunner(Game(seed=42))
    await runner.start()

@app.on_event("shutdown")
async def shutdown():
    """Stop the frame loop on app shutdown."""
    global runner
    if runner:
        await runner.stop()

@app.post("/battle/start")
async def start_battle(req: StartRequest):
    """Start a new battle with the given seed and config overrides."""
    await shutdown()
    global runner
    overrides = req.config.model_dump(exclude_none=True) if req.config else {}
    print(f"[API] Starting battle seed={req.seed} overrides={overrides}")
    runner = TickRunner(Game(seed=req.seed, config=GameConfig(**overrides)),
                        time_compression=req.time_compression)
    await runner.start()
    return {"battle_id": "local"}

@app.post("/battle/local/orders")
async def post_orders(orders: list[OrderIn]):
    """Queue move / group toggle / debug kill orders."""
    if not runner:
        raise HTTPException(400, "Battle not started")
    groups = len(runner.game.state.player_groups)
    for o in orders:
        if o.kind == "move" and o.target_pos is None:
            raise HTTPException(400, "Move order needs target_pos")
        if o.kind == "toggle_group" and (o.group_index is None or o.group_index >= groups):
            raise HTTPException(400, f"group_index must name one of {groups} groups")
    order_objs = [Order(**o.model_dump()) for o in orders]
    print(f"[API] Received {len(order_objs)} orders: {order_objs}")
    await runner.enqueue_orders(order_objs)
    return {"queued": len(orders)}

@app.get("/battle/local/state")
async def get_state():
    """Get current battle state snapshot."""
    if not runner:
        raise HTTPException(400, "Battle not started")
    s = await runner.snapshot()
    return {
        "frame": s.frame,
        "player_groups": [[_unit_json(u) for u in g] for g in s.player_groups],
        "enemies": [_unit_json(u) for u in s.enemies],
        "lasers": [
            {"start": list(l.start), "end": list(l.end), "frames_remaining": l.frames_remaining}
            for l in s.lasers
        ],
        "active_group": s.active_group,
        "enemy_wave": s.enemy_wave,
        "respawn_timer": s.respawn_timer,
        "walls": [{"x": w.x, "y": w.y, "w": w.w, "h": w.h} for w in runner.game.walls],
        "hud": hud_lines(s),
    }

@app.get("/battle/local/events")
async def get_events(since: int = 0, limit: int = 500):
    """Get events since offset."""
    if not runner:
        raise HTTPException(400, "Battle not started")
    evts, next_offset = runner.events.since(since, limit)
    return EventsResponse(
        next_offset=next_offset,
        total=len(runner.events),
        events=[{"kind": e.kind, "frame": e.frame, "data": e.data} for e in evts]
    )

@app.post("/battle/local/time-control")
async def set_time_control(time_compression: float):
    """Set simulation time compression (1.0 = 60 frames per second)."""
    if not runner:
        raise HTTPException(400, "Battle not started")
    runner.set_time_compression(time_compression)
    return {"time_compression": runner.time_compression}

@app.get("/battle/local/time-control")
async def get_time_control():
    """Get current time compression setting."""
    if not runner:
        raise HTTPException(400, "Battle not started")
    return {"time_compression": runner.time_compression}
