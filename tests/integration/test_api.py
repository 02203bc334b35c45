"""API 통합 테스트 (FastAPI TestClient + 인메모리 게이트웨이)."""

import pytest
from fastapi.testclient import TestClient

from shopfeed.app import create_app
from shopfeed.core.exceptions import TransportError


@pytest.fixture
def fake_gateway(gateway_factory):
    return gateway_factory(total=60)


@pytest.fixture
def client(fake_gateway, clock):
    app = create_app(gateway=fake_gateway, clock=clock)
    with TestClient(app) as test_client:
        yield test_client


def test_health_after_startup(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["products"] == 15
    assert body["timer_running"] is True


def test_root(client):
    assert client.get("/").json()["docs"] == "/docs"


def test_get_feed(client):
    feed = client.get("/api/v1/feed").json()

    assert feed["phase"] == "idle"
    assert feed["current_limit"] == 15
    assert len(feed["products"]) == 15
    assert feed["has_more"] is True
    assert feed["refresh_disabled"] is False


def test_load_more(client, fake_gateway):
    body = client.post("/api/v1/feed/load-more").json()

    assert body["status"] == "appended"
    assert body["requested_limit"] == 20
    assert body["feed"]["current_page"] == 2
    assert len(body["feed"]["products"]) == 35
    assert fake_gateway.calls[-1] == ("list_products", 2, 20)


def test_refresh(client, fake_gateway):
    body = client.post("/api/v1/feed/refresh").json()

    assert body["status"] == "replaced"
    assert body["feed"]["current_limit"] == 20
    assert body["feed"]["refresh_count"] == 1
    assert fake_gateway.count("trigger_ingest_both") == 1


def test_search_filters_client_side(client):
    client.post("/api/v1/feed/load-more")

    body = client.put("/api/v1/feed/search", json={"query": "product 1"}).json()

    assert body["status"] == "replaced"
    feed = body["feed"]
    assert feed["current_limit"] == 15
    assert feed["scroll_count"] == 0
    assert [p["id"] for p in feed["filtered_products"]] == [1, 10, 11, 12, 13, 14, 15]


def test_reset(client):
    feed = client.post("/api/v1/feed/reset").json()

    assert feed["products"] == []
    assert feed["current_page"] == 1


def test_fetch_both(client):
    body = client.post("/api/v1/feed/fetch-both", json={"amazon_limit": 2, "jumia_limit": 2}).json()

    assert body["status"] == "replaced"
    assert [p["platform"] for p in body["feed"]["products"]] == ["amazon", "amazon", "jumia", "jumia"]


def test_visible_signal(client):
    body = client.post("/api/v1/feed/visible", json={"element_key": 15}).json()
    assert body["status"] == "appended"

    stale = client.post("/api/v1/feed/visible", json={"element_key": 15}).json()
    assert stale["status"] == "ignored"


def test_product_detail(client):
    response = client.get("/api/v1/products/3")

    assert response.status_code == 200
    assert response.json()["id"] == 3


def test_product_detail_not_found(client):
    assert client.get("/api/v1/products/9999").status_code == 404


def test_product_detail_transport_error(client, fake_gateway):
    fake_gateway.fail_next("get_product", TransportError(500, "boom"))

    assert client.get("/api/v1/products/4").status_code == 502


def test_display_failure_is_reported_in_feed(client, fake_gateway):
    fake_gateway.fail_next("list_products", TransportError(503, "down"))

    body = client.post("/api/v1/feed/refresh").json()

    assert body["status"] == "failed"
    assert body["feed"]["error"] is not None
    assert len(body["feed"]["products"]) == 15
    assert client.get("/health").json()["status"] == "degraded"


def test_shutdown_stops_timer(fake_gateway, clock):
    app = create_app(gateway=fake_gateway, clock=clock)
    with TestClient(app):
        assert app.state.engine.timer.running

    assert not app.state.engine.timer.running


def test_shutdown_releases_shared_gateway(fake_gateway, clock, monkeypatch):
    """기본(공유) 게이트웨이로 만든 앱은 종료 시 공유 클라이언트를 정리."""
    import shopfeed.app as app_module

    released = []

    async def fake_shutdown():
        released.append(True)

    monkeypatch.setattr(app_module, "get_shared_product_api", lambda: fake_gateway)
    monkeypatch.setattr(app_module, "shutdown_shared_product_api", fake_shutdown)

    app = app_module.create_app(clock=clock)
    with TestClient(app):
        assert app.state.shared_gateway is True
        assert app.state.gateway is fake_gateway

    assert released == [True]


def test_injected_gateway_is_not_treated_as_shared(fake_gateway, clock, monkeypatch):
    import shopfeed.app as app_module

    released = []

    async def fake_shutdown():
        released.append(True)

    monkeypatch.setattr(app_module, "shutdown_shared_product_api", fake_shutdown)

    app = app_module.create_app(gateway=fake_gateway, clock=clock)
    with TestClient(app):
        assert app.state.shared_gateway is False

    assert released == []
