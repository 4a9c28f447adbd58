from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from pastebin.config import Settings
from pastebin.errors import StorageUnavailable
from pastebin.main import create_app
from pastebin.routes.web import parse_duration
from pastebin.slugs import ALPHABET


def _create(client: TestClient, content: str = "hello world", **extra) -> str:
    response = client.post("/api/pastes", json={"content": content, **extra})
    assert response.status_code == 201
    return response.json()["id"]


def test_create_and_fetch_paste(client: TestClient) -> None:
    response = client.post("/api/pastes", json={"content": "hello world", "ttl_seconds": 3600})

    assert response.status_code == 201
    body = response.json()
    assert len(body["id"]) == 10
    assert set(body["id"]) <= set(ALPHABET)
    assert body["url"] == f"http://test/paste/{body['id']}"
    expires_at = datetime.fromisoformat(body["expires_at"])
    assert expires_at.utcoffset() == timedelta(0)
    paste = client.app.state.store.get_paste(body["id"])
    assert expires_at == paste.expires_at == paste.created_at + timedelta(seconds=3600)

    fetched = client.get(f"/api/pastes/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["content"] == "hello world"
    assert fetched.json()["expires_at"] == body["expires_at"]


def test_default_ttl_is_applied(client: TestClient) -> None:
    slug = _create(client)
    store = client.app.state.store

    paste = store.get_paste(slug)
    assert paste.expires_at - paste.created_at == timedelta(seconds=86400)


def test_empty_content_is_bad_request(client: TestClient) -> None:
    response = client.post("/api/pastes", json={"content": ""})

    assert response.status_code == 400
    assert client.get("/api/stats").json() == {"count": 0}


def test_invalid_ttl_is_rejected(client: TestClient) -> None:
    response = client.post("/api/pastes", json={"content": "x", "ttl_seconds": 0})

    assert response.status_code == 422


def test_oversized_ttl_is_rejected(client: TestClient) -> None:
    response = client.post("/api/pastes", json={"content": "x", "ttl_seconds": 10**12})

    assert response.status_code == 422
    assert client.get("/api/stats").json() == {"count": 0}


def test_unrepresentable_ttl_is_bad_request(settings: Settings) -> None:
    settings.DEFAULT_TTL_SECONDS = 10**12

    with TestClient(create_app(settings)) as client:
        response = client.post("/api/pastes", json={"content": "x"})

        assert response.status_code == 400
        assert response.json() == {"detail": "ttl is out of range"}
        assert client.app.state.store.count() == 0


def test_unknown_paste_is_404(client: TestClient) -> None:
    assert client.get("/api/pastes/nosuchpaste").status_code == 404


def test_expired_paste_is_410(client: TestClient) -> None:
    slug = _create(client, ttl_seconds=60)
    # Keep the reaper from removing the paste before it is read
    client.app.state.lifecycle.stop(timeout=1)
    store = client.app.state.store
    now = store.clock()
    store.clock = lambda: now + timedelta(seconds=61)

    assert client.get(f"/api/pastes/{slug}").status_code == 410
    store.join_pending()
    assert client.get(f"/api/pastes/{slug}").status_code == 404


def test_delete_paste(client: TestClient) -> None:
    slug = _create(client)

    assert client.delete(f"/api/pastes/{slug}").status_code == 204
    assert client.get(f"/api/pastes/{slug}").status_code == 404
    assert client.delete(f"/api/pastes/{slug}").status_code == 204


def test_stats_counts_pastes(client: TestClient) -> None:
    for i in range(3):
        _create(client, f"paste {i}")

    assert client.get("/api/stats").json() == {"count": 3}


def test_health_check(client: TestClient) -> None:
    response = client.get("/api/healthz")

    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_storage_failure_is_503(client: TestClient) -> None:
    store = client.app.state.store
    broken = MagicMock()
    broken.get.side_effect = RedisConnectionError("down")
    store.client = broken

    assert client.get("/api/pastes/anything00").status_code == 503


def test_reaper_runs_with_app(client: TestClient) -> None:
    assert client.app.state.lifecycle.is_running


def test_startup_aborts_when_redis_unreachable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORAGE_BACKEND", "redis")
    redis_client = MagicMock()
    redis_client.ping.side_effect = RedisConnectionError("refused")

    with patch("pastebin.store.Redis.from_url", return_value=redis_client):
        with pytest.raises(StorageUnavailable):
            with TestClient(create_app(Settings())):
                pass


def test_create_form_page(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert '<form action="/create" method="post"' in response.text


def test_get_create_redirects_to_form(client: TestClient) -> None:
    response = client.get("/create", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"


def test_create_from_form_and_view(client: TestClient) -> None:
    response = client.post("/create", data={"text": "<b>bold</b> & more", "expires": "1h"})

    assert response.status_code == 200
    store = client.app.state.store
    assert store.count() == 1
    slug = store.expired_slugs(store.clock() + timedelta(hours=2))[0]
    assert f'href="/paste/{slug}"' in response.text

    view = client.get(f"/paste/{slug}")
    assert view.status_code == 200
    assert "&lt;b&gt;bold&lt;/b&gt; &amp; more" in view.text
    assert "<b>bold</b>" not in view.text


def test_form_expiry_falls_back_to_one_day(client: TestClient) -> None:
    client.post("/create", data={"text": "x", "expires": "forever"})
    store = client.app.state.store

    assert store.expired_slugs(store.clock() + timedelta(hours=23)) == []
    assert len(store.expired_slugs(store.clock() + timedelta(hours=25))) == 1


def test_form_huge_expiry_falls_back_to_one_day(client: TestClient) -> None:
    response = client.post("/create", data={"text": "x", "expires": "99999999999h"})

    assert response.status_code == 200
    store = client.app.state.store
    assert store.expired_slugs(store.clock() + timedelta(hours=23)) == []
    assert len(store.expired_slugs(store.clock() + timedelta(hours=25))) == 1


def test_form_rejects_empty_text(client: TestClient) -> None:
    response = client.post("/create", data={"text": "", "expires": "1h"})

    assert response.status_code == 400
    assert client.app.state.store.count() == 0


def test_view_missing_paste_renders_404(client: TestClient) -> None:
    response = client.get("/paste/nosuchpaste")

    assert response.status_code == 404
    assert "not found or has expired" in response.text


@pytest.mark.parametrize("value, expected", [
    ("1h", timedelta(hours=1)),
    ("24h", timedelta(hours=24)),
    ("168h", timedelta(hours=168)),
    ("30m", timedelta(minutes=30)),
    ("1h30m", timedelta(hours=1, minutes=30)),
    ("1.5h", timedelta(minutes=90)),
    ("45s", timedelta(seconds=45)),
])
def test_parse_duration(value: str, expected: timedelta) -> None:
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", "h", "10", "1d", "1h junk", "-1h", "99999999999h", "1h99999999999999m"])
def test_parse_duration_rejects_garbage(value: str) -> None:
    assert parse_duration(value) is None
