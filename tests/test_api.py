"""Test the FastAPI endpoints."""
import asyncio
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from api.app import app, shutdown


@pytest_asyncio.fixture
async def client():
    """HTTP client on the app; stops the frame loop before the event loop closes."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    await shutdown()


@pytest.mark.asyncio
async def test_start_battle(client):
    """Test starting a new battle."""
    response = await client.post("/battle/start", json={"seed": 123})
    assert response.status_code == 200
    assert response.json() == {"battle_id": "local"}


@pytest.mark.asyncio
async def test_get_state(client):
    """Test getting battle state."""
    await client.post("/battle/start", json={"seed": 42})
    response = await client.get("/battle/local/state")

    assert response.status_code == 200
    data = response.json()
    assert [len(g) for g in data["player_groups"]] == [3, 2]
    assert data["enemy_wave"] == 1
    assert len(data["walls"]) == 5
    assert data["active_group"] is None
    assert any("Wave: 1" == line for line in data["hud"])


@pytest.mark.asyncio
async def test_start_with_config_overrides(client):
    await client.post("/battle/start", json={"seed": 1, "config": {"base_enemy_count": 2}})
    data = (await client.get("/battle/local/state")).json()
    assert data["enemy_wave"] == 1
    assert len(data["enemies"]) == 3


@pytest.mark.asyncio
async def test_post_orders(client):
    """Test submitting orders."""
    await client.post("/battle/start", json={"seed": 42})
    response = await client.post("/battle/local/orders", json=[
        {"kind": "toggle_group", "group_index": 1},
        {"kind": "move", "target_pos": [100.0, 60.0]},
    ])

    assert response.status_code == 200
    assert response.json() == {"queued": 2}


@pytest.mark.asyncio
async def test_invalid_orders_rejected(client):
    await client.post("/battle/start", json={"seed": 42})
    response = await client.post("/battle/local/orders", json=[
        {"kind": "toggle_group", "group_index": 5}
    ])
    assert response.status_code == 400
    response = await client.post("/battle/local/orders", json=[{"kind": "move"}])
    assert response.status_code == 400
    response = await client.post("/battle/local/orders", json=[{"kind": "fly"}])
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_events(client):
    """Test retrieving events."""
    await client.post("/battle/start", json={"seed": 42})
    await client.post("/battle/local/orders", json=[
        {"kind": "move", "target_pos": [300.0, 200.0]}
    ])
    # Wait a moment for a few frames to run
    await asyncio.sleep(0.1)
    response = await client.get("/battle/local/events?since=0")

    assert response.status_code == 200
    data = response.json()
    assert "next_offset" in data
    kinds = [e["kind"] for e in data["events"]]
    assert "OrderAccepted" in kinds
    assert data["total"] >= len(data["events"])


@pytest.mark.asyncio
async def test_time_control(client):
    await client.post("/battle/start", json={"seed": 42})
    response = await client.post("/battle/local/time-control?time_compression=4")
    assert response.json() == {"time_compression": 4.0}
    response = await client.get("/battle/local/time-control")
    assert response.json() == {"time_compression": 4.0}
