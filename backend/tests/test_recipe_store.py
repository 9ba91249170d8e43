import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId

from app.core.errors import RecipeForbidden, RecipeNotFound, RecipeValidationError
from app.db import recipe_store as recipe_store_module
from conftest import recipe_payload


async def test_insert_assigns_id_timestamps_and_defaults(store):
    saved = await store.insert(recipe_payload(difficulty=None))

    assert ObjectId.is_valid(saved["id"])
    assert "_id" not in saved
    assert saved["difficulty"] == "Easy"
    assert saved["likes"] == 0
    assert saved["ingredients"] == []
    assert saved["instructions"] == []
    assert saved["createdAt"] == saved["updatedAt"]


async def test_created_at_is_stable_across_reads(store):
    saved = await store.insert(recipe_payload())

    first = await store.find_by_id(saved["id"])
    await store.increment_likes(saved["id"])
    second = await store.find_by_id(saved["id"])

    assert first["id"] == saved["id"]
    assert first["createdAt"] == saved["createdAt"]
    assert second["createdAt"] == saved["createdAt"]
    # 좋아요는 updatedAt을 건드리지 않는다
    assert second["updatedAt"] == saved["updatedAt"]


async def test_insert_rejects_unknown_difficulty(store):
    with pytest.raises(RecipeValidationError) as exc:
        await store.insert(recipe_payload(difficulty="Extreme"))
    assert any(d["field"] == "difficulty" for d in exc.value.details)
    assert await store.count() == 0


async def test_insert_reports_missing_fields(store):
    with pytest.raises(RecipeValidationError) as exc:
        await store.insert(recipe_payload(title="  ", authorEmail=None))
    assert exc.value.details == [
        {"field": "title", "message": "Field required"},
        {"field": "authorEmail", "message": "Field required"},
    ]
    assert "title" in exc.value.error


async def test_insert_rejects_non_positive_cooking_time(store):
    with pytest.raises(RecipeValidationError):
        await store.insert(recipe_payload(cookingTime=0))


async def test_insert_keeps_structured_ingredients(store):
    saved = await store.insert(recipe_payload(
        ingredients=[{"name": "rice", "amount": "1", "unit": "cup"}],
        instructions=[{"step": 1, "description": "Fry kimchi"}],
    ))
    got = await store.find_by_id(saved["id"])
    assert got["ingredients"][0]["name"] == "rice"
    assert got["instructions"][0]["step"] == 1


async def test_list_all_is_newest_first(store, monkeypatch):
    t1 = datetime(2026, 1, 1, 9, 0, 0)
    t2 = t1 + timedelta(minutes=5)
    t3 = t1 + timedelta(hours=1)
    # 삽입 순서와 무관하게 createdAt 기준
    times = iter([t2, t3, t1])
    monkeypatch.setattr(recipe_store_module, "utcnow", lambda: next(times))

    await store.insert(recipe_payload(title="second"))
    await store.insert(recipe_payload(title="third"))
    await store.insert(recipe_payload(title="first"))

    listed = await store.list_all()
    assert [r["title"] for r in listed] == ["third", "second", "first"]


async def test_list_all_ties_put_latest_insert_first(store, monkeypatch):
    same = datetime(2026, 1, 1, 9, 0, 0)
    monkeypatch.setattr(recipe_store_module, "utcnow", lambda: same)

    a = await store.insert(recipe_payload(title="a"))
    b = await store.insert(recipe_payload(title="b"))

    listed = await store.list_all()
    assert [r["id"] for r in listed] == [b["id"], a["id"]]


async def test_list_all_empty(store):
    assert await store.list_all() == []


async def test_find_by_id_unknown_and_malformed(store):
    with pytest.raises(RecipeNotFound):
        await store.find_by_id(str(ObjectId()))
    with pytest.raises(RecipeNotFound):
        await store.find_by_id("not-an-id")


async def test_delete_by_id_removes_only_that_record(store):
    keep = await store.insert(recipe_payload(title="keep"))
    drop = await store.insert(recipe_payload(title="drop"))

    assert await store.delete_by_id(drop["id"]) is True
    remaining = await store.list_all()
    assert [r["id"] for r in remaining] == [keep["id"]]


async def test_delete_by_id_missing_leaves_store_unchanged(store):
    await store.insert(recipe_payload())
    assert await store.delete_by_id(str(ObjectId())) is False
    assert await store.delete_by_id("garbage") is False
    assert await store.count() == 1


async def test_delete_owned_checks_author_email(store):
    saved = await store.insert(recipe_payload())

    with pytest.raises(RecipeForbidden):
        await store.delete_owned(saved["id"], "JIYONG@example.com")
    with pytest.raises(RecipeForbidden):
        await store.delete_owned(saved["id"], None)
    assert await store.count() == 1

    assert await store.delete_owned(saved["id"], "jiyong@example.com") is True
    assert await store.delete_owned(saved["id"], "jiyong@example.com") is False


async def test_increment_likes_concurrently_loses_nothing(store):
    saved = await store.insert(recipe_payload())

    results = await asyncio.gather(*[store.increment_likes(saved["id"]) for _ in range(25)])

    assert sorted(results) == list(range(1, 26))
    got = await store.find_by_id(saved["id"])
    assert got["likes"] == 25


async def test_increment_likes_unknown_id(store):
    with pytest.raises(RecipeNotFound):
        await store.increment_likes(str(ObjectId()))


def test_utcnow_is_naive_utc_at_millisecond_precision():
    got = recipe_store_module.utcnow()
    ref = datetime.now(timezone.utc).replace(tzinfo=None)

    assert got.tzinfo is None
    assert got.microsecond % 1000 == 0
    assert abs((ref - got).total_seconds()) < 5
