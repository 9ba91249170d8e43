# app/api/routes_recipes.py
# 레시피 포럼 API — 작성/목록/단건/삭제/좋아요
# 모든 응답은 {success, ...} 봉투. 실패 봉투는 main.py의 exception handler가 만든다.

from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Depends, Query

from app.core.config import Settings
from app.core.deps import get_recipe_store, get_settings
from app.core.errors import RecipeNotFound, StoreError
from app.db.models.schemas import RecipeIn, RecipeOut
from app.db.recipe_store import RecipeStore

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes", tags=["recipes"])

def _iso(v: Any) -> Optional[str]:
    # Mongo에서 나온 naive datetime은 UTC
    if isinstance(v, datetime):
        s = v.isoformat(timespec="milliseconds")
        return s if v.tzinfo else s + "Z"
    return v

def to_recipe_out(doc: Dict[str, Any]) -> Dict[str, Any]:
    d = dict(doc)
    d["createdAt"] = _iso(d.get("createdAt"))
    d["updatedAt"] = _iso(d.get("updatedAt"))
    return RecipeOut(**d).model_dump()

@router.post("", status_code=201)
async def create_recipe(payload: RecipeIn, store: RecipeStore = Depends(get_recipe_store)):
    data = payload.model_dump(exclude_none=True)
    try:
        recipe = await store.insert(data)
    except StoreError as e:
        raise StoreError("Failed to post recipe", details=e.details) from e

    log.info('new recipe posted: "%s" by %s', recipe["title"], recipe["author"])
    return {
        "success": True,
        "message": "Recipe posted successfully!",
        "recipe": to_recipe_out(recipe),
    }

@router.get("")
async def list_recipes(store: RecipeStore = Depends(get_recipe_store)):
    # 필터/페이지네이션 없음 — 항상 전체, 최신순
    try:
        recipes = await store.list_all()
    except StoreError as e:
        raise StoreError("Failed to fetch recipes", details=e.details) from e
    return {
        "success": True,
        "count": len(recipes),
        "recipes": [to_recipe_out(r) for r in recipes],
    }

@router.get("/{rid}")
async def get_recipe(rid: str, store: RecipeStore = Depends(get_recipe_store)):
    try:
        recipe = await store.find_by_id(rid)
    except StoreError as e:
        raise StoreError("Failed to fetch recipe", details=e.details) from e
    return {"success": True, "recipe": to_recipe_out(recipe)}

@router.delete("/{rid}")
async def delete_recipe(
    rid: str,
    authorEmail: Optional[str] = Query(None, description="삭제 요청자 이메일 (소유권 검사 켜진 경우 필수)"),
    store: RecipeStore = Depends(get_recipe_store),
    cfg: Settings = Depends(get_settings),
):
    """
    기본 동작: id만 맞으면 삭제 (서버 측 소유권 검사 없음, 앱이 삭제 버튼만 숨김).
    ENFORCE_DELETE_OWNERSHIP=true 이면 authorEmail이 저장된 작성자와 같아야 삭제.
    """
    try:
        if cfg.ENFORCE_DELETE_OWNERSHIP:
            deleted = await store.delete_owned(rid, authorEmail)
        else:
            deleted = await store.delete_by_id(rid)
    except StoreError as e:
        raise StoreError("Failed to delete recipe", details=e.details) from e

    if not deleted:
        raise RecipeNotFound()
    log.info("recipe deleted: %s", rid)
    return {"success": True, "message": "Recipe deleted successfully"}

@router.post("/{rid}/like")
async def like_recipe(rid: str, store: RecipeStore = Depends(get_recipe_store)):
    # 누가 눌렀는지는 기록하지 않음 (중복 좋아요 허용)
    try:
        likes = await store.increment_likes(rid)
    except StoreError as e:
        raise StoreError("Failed to like recipe", details=e.details) from e
    return {"success": True, "message": "Recipe liked!", "likes": likes}
