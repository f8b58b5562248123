from app.routers.recipes import INVALID_ACTION

CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-headers": "authorization, x-client-info, apikey, content-type",
}


def _assert_cors(resp):
    for k, v in CORS.items():
        assert resp.headers[k] == v


# ── search ────────────────────────────────────────────────────────────────────

def test_search_normalizes_upstream_items(client, tasty):
    tasty.reply("/recipes/list", {"results": [
        {"id": 1, "name": "Pasta A", "total_time_minutes": 20},
        {"id": 2, "title": "Pasta B"},
    ]})

    resp = client.get("/", params={"action": "search", "query": "pasta", "from": 0, "size": 2})

    assert resp.status_code == 200
    _assert_cors(resp)
    body = resp.json()
    assert body["total"] == 2
    a, b = body["results"]
    assert (a["id"], a["title"], a["totalTime"]) == (1, "Pasta A", "20 min")
    assert (b["id"], b["title"], b["totalTime"]) == (2, "Pasta B", None)

    (req,) = tasty.calls("/recipes/list")
    assert dict(req.url.params) == {"q": "pasta", "from": "0", "size": "2"}
    assert req.headers["x-rapidapi-key"] == "test-key"
    assert req.headers["x-rapidapi-host"] == "tasty.p.rapidapi.com"


def test_search_defaults_and_sorted_tags(client, tasty):
    tasty.reply("/recipes/list", {"results": []})

    client.get("/", params={"action": "search", "query": "", "tags": "vegan,easy"})

    (req,) = tasty.calls("/recipes/list")
    # empty q is dropped, from=0 is kept
    assert dict(req.url.params) == {"from": "0", "size": "20", "tags": "easy,vegan"}


def test_search_served_from_cache_regardless_of_tag_order(client, tasty, cache):
    tasty.reply("/recipes/list", {"results": [{"id": 1, "name": "Soup"}]})

    first = client.get("/", params={"action": "search", "query": "soup", "tags": "a,b"})
    second = client.get("/", params={"action": "search", "query": "soup", "tags": "b,a"})

    assert first.json() == second.json()
    assert len(tasty.calls("/recipes/list")) == 1
    assert cache.summary()["hits"] == 1


def test_search_with_colons_does_not_reuse_another_entry(client, tasty):
    tasty.reply("/recipes/list", {"results": []})

    client.get("/", params={"action": "search", "query": "a:1", "from": 2, "size": 3})
    client.get("/", params={"action": "search", "query": "a", "from": 1, "size": 2, "tags": "3:"})

    assert len(tasty.calls("/recipes/list")) == 2


def test_search_refetches_after_ttl(client, tasty, clock):
    tasty.reply("/recipes/list", {"results": []})
    params = {"action": "search", "query": "soup"}

    client.get("/", params=params)
    clock.now += 301
    client.get("/", params=params)

    assert len(tasty.calls("/recipes/list")) == 2


def test_search_requires_query(client, tasty):
    resp = client.get("/", params={"action": "search"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Search query required"}
    assert tasty.requests == []


def test_search_rejects_bad_paging(client):
    resp = client.get("/", params={"action": "search", "query": "x", "size": "-5"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "from and size must be non-negative integers"}


# ── details ───────────────────────────────────────────────────────────────────

def test_details(client, tasty):
    tasty.reply("/recipes/get-more-info", {
        "id": 42, "name": "Tacos",
        "instructions": [{"display_text": "Cook."}],
        "sections": [{"components": [{"raw_text": "tortillas"}]}],
    })

    resp = client.get("/", params={"action": "details", "id": "42"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Tacos"
    assert body["steps"] == ["Cook."]
    assert body["ingredients"] == ["tortillas"]
    (req,) = tasty.calls("/recipes/get-more-info")
    assert req.url.params["id"] == "42"


def test_details_requires_id(client):
    resp = client.get("/", params={"action": "details"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Recipe ID required"}


def test_details_upstream_failure_is_not_cached(client, tasty, cache):
    tasty.reply("/recipes/get-more-info", {"message": "down"}, status=503)

    resp = client.get("/", params={"action": "details", "id": "7"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Tasty API error: 503"}
    _assert_cors(resp)
    assert cache.get("details:7") is None

    tasty.reply("/recipes/get-more-info", {"id": 7, "name": "Back"})
    resp = client.get("/", params={"action": "details", "id": "7"})
    assert resp.status_code == 200
    assert resp.json()["title"] == "Back"
    assert len(tasty.calls("/recipes/get-more-info")) == 2


# ── featured / tags ───────────────────────────────────────────────────────────

def test_featured_uses_fixed_page_and_constant_key(client, tasty):
    tasty.reply("/recipes/list", {"count": 900, "results": [{"id": 1, "name": "A"}]})

    first = client.get("/", params={"action": "featured"})
    second = client.get("/", params={"action": "featured", "query": "ignored"})

    assert first.json() == second.json() == {
        "results": [{
            "id": 1, "title": "A", "image": None, "description": "",
            "totalTime": None, "yields": None, "rating": None,
        }],
        "total": 900,
    }
    (req,) = tasty.calls("/recipes/list")
    assert dict(req.url.params) == {"from": "0", "size": "8"}


def test_tags(client, tasty):
    tasty.reply("/tags/list", {"count": 1, "results": [
        {"id": 5, "name": "vegan", "display_name": "Vegan", "type": "dietary"},
    ]})

    resp = client.get("/", params={"action": "tags"})

    assert resp.json() == {"results": [
        {"id": 5, "name": "vegan", "display_name": "Vegan", "type": "dietary"},
    ]}
    client.get("/", params={"action": "tags"})
    assert len(tasty.calls("/tags/list")) == 1


# ── envelope ──────────────────────────────────────────────────────────────────

def test_missing_api_key(client, tasty, monkeypatch):
    monkeypatch.delenv("RAPIDAPI_KEY")

    resp = client.get("/", params={"action": "tags"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "API key not configured"}
    _assert_cors(resp)
    assert tasty.requests == []


def test_missing_api_key_checked_before_action(client, monkeypatch):
    monkeypatch.delenv("RAPIDAPI_KEY")
    resp = client.get("/", params={"action": "bogus"})
    assert resp.status_code == 500


def test_invalid_action(client):
    resp = client.get("/", params={"action": "bogus"})
    assert resp.status_code == 400
    assert resp.json() == {"error": INVALID_ACTION}
    _assert_cors(resp)


def test_missing_action(client):
    resp = client.get("/")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid action. Use: search, details, featured, or tags"}


def test_preflight(client, tasty):
    resp = client.options("/", params={"action": "search"})
    assert resp.status_code == 200
    assert resp.content == b""
    _assert_cors(resp)
    assert tasty.requests == []


def test_preflight_without_api_key(client, monkeypatch):
    monkeypatch.delenv("RAPIDAPI_KEY")
    assert client.options("/").status_code == 200


def test_malformed_upstream_json_becomes_500(client, tasty):
    tasty.reply("/recipes/get-more-info", b"<html>oops</html>")

    resp = client.get("/", params={"action": "details", "id": "1"})

    assert resp.status_code == 500
    assert set(resp.json()) == {"error"}
    assert "Traceback" not in resp.text
    _assert_cors(resp)


def test_unknown_path_uses_error_envelope(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}
    _assert_cors(resp)


def test_health(client, tasty, cache):
    tasty.reply("/tags/list", {"results": []})
    client.get("/", params={"action": "tags"})

    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["api_key_configured"] is True
    assert body["cache"]["entries"] == 1
    assert body["cache"]["keys"]["tags"]["fresh"] is True
    assert len(tasty.requests) == 1


def test_health_reports_missing_key(client, monkeypatch):
    monkeypatch.delenv("RAPIDAPI_KEY")
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["api_key_configured"] is False


def test_default_cache_is_shared():
    from app.core.cache import get_recipe_cache
    assert get_recipe_cache() is get_recipe_cache()
