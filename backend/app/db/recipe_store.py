# app/db/recipe_store.py
# recipes 컬렉션 접근 계층 — 생성/목록/단건/삭제/좋아요 증가
# - 소유권 검사는 여기서 하지 않는다 (delete_owned 제외, 호출자가 선택)
# - 좋아요는 $inc 한 번으로 처리 (읽고-쓰기 금지, 동시 요청에서 유실 방지)

from __future__ import annotations
import functools
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import ValidationError
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from app.core.errors import RecipeForbidden, RecipeNotFound, RecipeValidationError, StoreError
from app.db.models.recipe import RecipeDoc, missing_fields

log = logging.getLogger(__name__)

COLLECTION = "recipes"

def utcnow() -> datetime:
    # Mongo는 ms 정밀도로 저장하므로 미리 잘라 insert 반환값 == 재조회 값
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)

def to_public(doc: Dict[str, Any]) -> Dict[str, Any]:
    # _id(ObjectId) → id(str)
    out = dict(doc)
    if "_id" in out:
        out["id"] = str(out.pop("_id"))
    return out

def validation_details(e: ValidationError) -> List[Dict[str, str]]:
    return [
        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in e.errors()
    ]

def _oid(rid: str) -> ObjectId:
    # 형식이 틀린 id도 "없는 레시피"로 취급
    if not ObjectId.is_valid(rid):
        raise RecipeNotFound()
    return ObjectId(rid)

def _driver_errors(fn):
    @functools.wraps(fn)
    async def inner(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except PyMongoError as e:
            log.exception("recipe store %s failed", fn.__name__)
            raise StoreError(details=str(e)) from e
    return inner


class RecipeStore:
    def __init__(self, col: AsyncIOMotorCollection):
        self.col = col

    @_driver_errors
    async def insert(self, data: Dict[str, Any]) -> Dict[str, Any]:
        missing = missing_fields(data)
        if missing:
            raise RecipeValidationError(
                "Missing required fields: " + ", ".join(missing),
                details=[{"field": k, "message": "Field required"} for k in missing],
            )
        try:
            doc = RecipeDoc(**data)
        except ValidationError as e:
            raise RecipeValidationError(details=validation_details(e)) from e

        now = utcnow()
        payload = doc.model_dump()
        payload["createdAt"] = now
        payload["updatedAt"] = now

        res = await self.col.insert_one(payload)
        payload["_id"] = res.inserted_id
        return to_public(payload)

    @_driver_errors
    async def list_all(self) -> List[Dict[str, Any]]:
        # 최신순, 같은 시각이면 나중에 넣은 것이 먼저
        cur = self.col.find({}, sort=[("createdAt", DESCENDING), ("_id", DESCENDING)])
        docs = await cur.to_list(length=None)
        return [to_public(d) for d in docs]

    @_driver_errors
    async def find_by_id(self, rid: str) -> Dict[str, Any]:
        doc = await self.col.find_one({"_id": _oid(rid)})
        if not doc:
            raise RecipeNotFound()
        return to_public(doc)

    @_driver_errors
    async def delete_by_id(self, rid: str) -> bool:
        if not ObjectId.is_valid(rid):
            return False
        res = await self.col.delete_one({"_id": ObjectId(rid)})
        return res.deleted_count == 1

    @_driver_errors
    async def delete_owned(self, rid: str, author_email: Optional[str]) -> bool:
        """authorEmail까지 조건에 넣어 한 번에 삭제.
        레시피는 있는데 작성자가 다르면 RecipeForbidden, 아예 없으면 False."""
        if not ObjectId.is_valid(rid):
            return False
        oid = ObjectId(rid)
        if author_email:
            res = await self.col.delete_one({"_id": oid, "authorEmail": author_email})
            if res.deleted_count == 1:
                return True
        exists = await self.col.find_one({"_id": oid}, {"_id": 1})
        if exists:
            raise RecipeForbidden()
        return False

    @_driver_errors
    async def increment_likes(self, rid: str) -> int:
        doc = await self.col.find_one_and_update(
            {"_id": _oid(rid)},
            {"$inc": {"likes": 1}},
            projection={"likes": 1},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise RecipeNotFound()
        return int(doc.get("likes", 0))

    @_driver_errors
    async def count(self) -> int:
        return await self.col.count_documents({})
