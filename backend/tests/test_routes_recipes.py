from bson import ObjectId

from app.core.config import Settings
from app.core.deps import get_settings
from app.main import app
from conftest import recipe_payload


def _create(client, **overrides):
    r = client.post("/api/recipes", json=recipe_payload(**overrides))
    assert r.status_code == 201, r.text
    return r.json()["recipe"]


def test_create_returns_envelope(client):
    r = client.post("/api/recipes", json=recipe_payload())
    body = r.json()

    assert r.status_code == 201
    assert body["success"] is True
    assert body["message"] == "Recipe posted successfully!"
    recipe = body["recipe"]
    assert ObjectId.is_valid(recipe["id"])
    assert recipe["likes"] == 0
    assert recipe["createdAt"].endswith("Z")


def test_create_defaults_difficulty_to_easy(client):
    body = recipe_payload()
    del body["difficulty"]
    r = client.post("/api/recipes", json=body)
    assert r.status_code == 201
    assert r.json()["recipe"]["difficulty"] == "Easy"


def test_create_rejects_extreme_difficulty(client):
    r = client.post("/api/recipes", json=recipe_payload(difficulty="Extreme"))
    body = r.json()

    assert r.status_code == 400
    assert body["success"] is False
    assert "difficulty" in str(body["details"])
    assert client.get("/api/recipes").json()["count"] == 0


def test_create_missing_fields(client):
    r = client.post("/api/recipes", json={"title": "Only a title"})
    body = r.json()

    assert r.status_code == 400
    assert body["success"] is False
    assert body["error"].startswith("Missing required fields")
    # 다른 검증 오류와 같은 [{field, message}] 형태
    assert [d["field"] for d in body["details"]] == [
        "description", "cookingTime", "category", "author", "authorEmail",
    ]


def test_create_wrong_type_is_400_envelope(client):
    r = client.post("/api/recipes", json=recipe_payload(cookingTime="soon"))
    body = r.json()
    assert r.status_code == 400
    assert body["success"] is False
    assert body["details"][0]["field"] == "cookingTime"


def test_create_ignores_client_supplied_counters(client):
    recipe = _create(client, likes=99, createdAt="2001-01-01T00:00:00Z")
    assert recipe["likes"] == 0
    assert not recipe["createdAt"].startswith("2001")


def test_list_newest_first_with_count(client):
    first = _create(client, title="first")
    second = _create(client, title="second")

    body = client.get("/api/recipes").json()
    assert body["success"] is True
    assert body["count"] == 2
    assert [r["id"] for r in body["recipes"]] == [second["id"], first["id"]]


def test_list_empty(client):
    assert client.get("/api/recipes").json() == {"success": True, "count": 0, "recipes": []}


def test_get_by_id_matches_created(client):
    created = _create(client)
    body = client.get(f"/api/recipes/{created['id']}").json()
    assert body["success"] is True
    assert body["recipe"]["id"] == created["id"]
    assert body["recipe"]["createdAt"] == created["createdAt"]


def test_get_unknown_is_404(client):
    r = client.get(f"/api/recipes/{ObjectId()}")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Recipe not found"}


def test_delete_without_ownership_check(client):
    created = _create(client)
    other = _create(client, title="other")

    # 작성자가 아니어도 id만 맞으면 삭제 (기본 설정)
    r = client.delete(f"/api/recipes/{created['id']}", params={"authorEmail": "someone@else.com"})
    assert r.status_code == 200
    assert r.json()["success"] is True

    ids = [x["id"] for x in client.get("/api/recipes").json()["recipes"]]
    assert ids == [other["id"]]


def test_delete_unknown_is_404_and_count_unchanged(client):
    _create(client)
    r = client.delete(f"/api/recipes/{ObjectId()}")
    assert r.status_code == 404
    assert r.json()["success"] is False
    assert client.get("/api/recipes").json()["count"] == 1


def test_delete_with_ownership_enforced(client):
    app.dependency_overrides[get_settings] = lambda: Settings(ENFORCE_DELETE_OWNERSHIP=True)
    created = _create(client)

    r = client.delete(f"/api/recipes/{created['id']}", params={"authorEmail": "Jiyong@example.com"})
    assert r.status_code == 403
    assert r.json()["success"] is False

    r = client.delete(f"/api/recipes/{created['id']}", params={"authorEmail": "jiyong@example.com"})
    assert r.status_code == 200

    r = client.delete(f"/api/recipes/{created['id']}", params={"authorEmail": "jiyong@example.com"})
    assert r.status_code == 404


def test_like_increments(client):
    created = _create(client)
    client.post(f"/api/recipes/{created['id']}/like")
    r = client.post(f"/api/recipes/{created['id']}/like")

    assert r.json() == {"success": True, "message": "Recipe liked!", "likes": 2}
    assert client.get(f"/api/recipes/{created['id']}").json()["recipe"]["likes"] == 2


def test_like_unknown_is_404(client):
    r = client.post(f"/api/recipes/{ObjectId()}/like")
    assert r.status_code == 404
    assert r.json()["error"] == "Recipe not found"


def test_root(client):
    assert client.get("/").json() == {"status": "ok"}
