import pytest


@pytest.mark.asyncio
async def test_metrics_endpoint(client):
    res = await client.get("/api/metrics")
    assert res.status_code == 200

    data = res.json()
    assert data["status"] == "Online"
    assert data["database"] == "Connected"
    assert "cpu" in data and "ram" in data

    assert isinstance(data["uptime"], int)
    assert isinstance(data["version"], str)


@pytest.mark.asyncio
async def test_root_health(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json()["service"] == "Course File Backend"
