"""Store Routes — end-to-end tests of auth, normalization, dispatch and emission.

Tests cover:
    - Missing/invalid key -> 401 envelope, store never called (every route, unknown paths too)
    - Health probe is public
    - Path + query parameters merged and passed downstream (list numbers coerced)
    - Success payload returned byte-for-byte
    - 404 only for app/developer/privacy/versionHistory; 500 otherwise
"""

import json
import math

import pytest

from tests.api.gateway_client import API_KEY, build_gateway, client_for
from tests.fake_store import RecordingStore

ROUTES = [
    ("/app/553834731", "app"),
    ("/list/topfreeapplications", "list"),
    ("/search?term=candy", "search"),
    ("/developer/526656015", "developer"),
    ("/reviews/553834731", "reviews"),
    ("/similar/553834731", "similar"),
    ("/privacy/553834731", "privacy"),
    ("/version-history/553834731", "version_history"),
]
NOT_FOUND_AWARE_ROUTES = [
    ("/app/1", "app"),
    ("/developer/1", "developer"),
    ("/privacy/1", "privacy"),
    ("/version-history/1", "version_history"),
]
ALWAYS_500_ROUTES = [
    ("/list/topfreeapplications", "list"),
    ("/search?term=x", "search"),
    ("/reviews/1", "reviews"),
    ("/similar/1", "similar"),
]


async def _get_with(store: RecordingStore, path: str):
    async with client_for(build_gateway(store)) as client:
        return await client.get(path)


# ─── Authorization ──────────────────────────────────────────────

@pytest.mark.asyncio
async def test_invalid_key_on_search_returns_401(client, store):
    response = await client.get(
        "/search", params={"term": "candy"}, headers={"x-api-key": "nope"},
    )
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized - Invalid API Key"}
    assert store.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("path, _method", ROUTES)
async def test_missing_key_rejected_on_every_route(anonymous, store, path, _method):
    response = await anonymous.get(path)
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized - Invalid API Key"}
    assert store.calls == []


@pytest.mark.asyncio
async def test_key_is_case_sensitive(client, store):
    response = await client.get("/app/1", headers={"x-api-key": API_KEY.upper()})
    assert response.status_code == 401
    assert store.calls == []


@pytest.mark.asyncio
async def test_unknown_path_requires_key(anonymous):
    response = await anonymous.get("/nowhere")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unknown_path_with_key_is_404_envelope(client):
    response = await client.get("/nowhere")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


@pytest.mark.asyncio
async def test_health_is_public(anonymous, store):
    response = await anonymous.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert store.calls == []


# ─── Parameters ─────────────────────────────────────────────────

@pytest.mark.asyncio
@pytest.mark.parametrize("path, method", ROUTES)
async def test_each_route_calls_its_store_method_once(client, store, path, method):
    response = await client.get(path)
    assert response.status_code == 200
    assert [name for name, _ in store.calls] == [method]


@pytest.mark.asyncio
async def test_list_coerces_category_and_num(client, store):
    await client.get(
        "/list/topfreeapplications", params={"category": "6014", "num": "10"},
    )
    _, params = store.calls[0]
    assert params == {
        "collection": "topfreeapplications", "category": 6014, "num": 10,
    }
    assert isinstance(params["category"], int)
    assert isinstance(params["num"], int)


@pytest.mark.asyncio
async def test_list_non_numeric_num_reaches_store_as_nan(client, store):
    response = await client.get(
        "/list/topfreeapplications", params={"num": "ten", "category": "6014"},
    )
    assert response.status_code == 200
    _, params = store.calls[0]
    assert math.isnan(params["num"])
    assert params["category"] == 6014


@pytest.mark.asyncio
async def test_app_params_pass_through_as_strings(client, store):
    await client.get(
        "/app/553834731", params={"ratings": "true", "country": "gb", "lang": "en"},
    )
    assert store.calls == [("app", {
        "id": "553834731", "ratings": "true", "country": "gb", "lang": "en",
    })]


@pytest.mark.asyncio
async def test_search_num_stays_string(client, store):
    await client.get("/search", params={"term": "candy", "num": "5", "page": "2"})
    assert store.calls == [("search", {"term": "candy", "num": "5", "page": "2"})]


@pytest.mark.asyncio
async def test_developer_uses_dev_id_name(client, store):
    await client.get("/developer/526656015", params={"country": "us"})
    assert store.calls == [("developer", {"devId": "526656015", "country": "us"})]


@pytest.mark.asyncio
async def test_query_overrides_path_value(client, store):
    await client.get("/reviews/1", params={"id": "2", "sort": "helpful"})
    assert store.calls == [("reviews", {"id": "2", "sort": "helpful"})]


@pytest.mark.asyncio
async def test_repeated_query_key_keeps_last_value(client, store):
    await client.get("/search?term=a&term=b")
    assert store.calls == [("search", {"term": "b"})]


# ─── Success emission ───────────────────────────────────────────

@pytest.mark.asyncio
async def test_app_success_returns_payload_verbatim():
    payload = {"id": 553834731, "title": "Candy Crush Saga"}
    response = await _get_with(RecordingStore(payloads={"app": payload}), "/app/553834731")
    assert response.status_code == 200
    assert response.json() == payload
    assert response.content == b'{"id":553834731,"title":"Candy Crush Saga"}'


@pytest.mark.asyncio
async def test_array_payload_keeps_order_and_fields():
    payload = [
        {"zeta": 1, "alpha": "é", "nested": {"b": [1, 2], "a": None}},
        {"id": 2},
    ]
    response = await _get_with(RecordingStore(payloads={"similar": payload}), "/similar/1")
    assert response.status_code == 200
    assert response.content == json.dumps(
        payload, ensure_ascii=False, separators=(",", ":"),
    ).encode("utf-8")


# ─── Failure classification ─────────────────────────────────────

@pytest.mark.asyncio
async def test_app_not_found_returns_404():
    store = RecordingStore(failures={"app": Exception("App not found (404)")})
    response = await _get_with(store, "/app/bogus")
    assert response.status_code == 404
    assert response.json() == {"error": "App not found (404)"}


@pytest.mark.asyncio
@pytest.mark.parametrize("path, method", NOT_FOUND_AWARE_ROUTES)
async def test_aware_routes_classify_not_found(path, method):
    store = RecordingStore(failures={method: Exception("Resource not found")})
    response = await _get_with(store, path)
    assert response.status_code == 404
    assert response.json() == {"error": "Resource not found"}


@pytest.mark.asyncio
@pytest.mark.parametrize("path, method", NOT_FOUND_AWARE_ROUTES)
async def test_aware_routes_other_failures_are_500(path, method):
    store = RecordingStore(failures={method: Exception("socket hang up")})
    response = await _get_with(store, path)
    assert response.status_code == 500
    assert response.json() == {"error": "socket hang up"}


@pytest.mark.asyncio
@pytest.mark.parametrize("path, method", ALWAYS_500_ROUTES)
async def test_always_500_routes_ignore_not_found(path, method):
    store = RecordingStore(failures={method: Exception("App not found (404)")})
    response = await _get_with(store, path)
    assert response.status_code == 500
    assert response.json() == {"error": "App not found (404)"}


@pytest.mark.asyncio
async def test_unserializable_payload_is_generic_500():
    store = RecordingStore(payloads={"app": {"score": float("nan")}})
    async with client_for(build_gateway(store), raise_app_exceptions=False) as client:
        response = await client.get("/app/1")
    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error"}


@pytest.mark.asyncio
async def test_wrong_method_is_405_envelope(client, store):
    response = await client.post("/app/1")
    assert response.status_code == 405
    assert response.json() == {"error": "Method Not Allowed"}
    assert store.calls == []
