import pytest

pytestmark = pytest.mark.anyio


async def test_healthz(async_client):
    response = await async_client.get("/healthz")
    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["timestamp"]


async def test_api_health(async_client):
    response = await async_client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert isinstance(data["database"], bool)
    assert isinstance(data["cache"], bool)


async def test_api_health_reports_cache(async_client, fake_redis):
    response = await async_client.get("/api/health")
    assert response.json()["cache"] is True


async def test_metrics_exposed(async_client):
    await async_client.get("/healthz")
    response = await async_client.get("/metrics")
    assert response.status_code == 200
    assert "studio_llm_calls_total" in response.text


async def test_unknown_route_uses_error_body(async_client):
    response = await async_client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
