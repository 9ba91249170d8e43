# app/client/api.py
# 레시피 API 호출 래퍼 (httpx 비동기)
# - 네트워크 실패 → TransportError
# - 봉투가 아니거나 success:false → ApiError (status/error/details 보존)

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.client.config import client_settings

log = logging.getLogger(__name__)


class TransportError(Exception):
    # 연결 실패/타임아웃 등
    pass


class ApiError(Exception):
    def __init__(self, status: int, error: str, details: Any = None):
        super().__init__(f"{status}: {error}")
        self.status = status
        self.error = error
        self.details = details


class RecipesApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or client_settings.BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else client_settings.TIMEOUT
        self._transport = transport   # 테스트용 MockTransport 주입

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as cli:
                r = await cli.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path}: {e}") from e

        try:
            body = r.json()
        except ValueError:
            raise ApiError(r.status_code, "Malformed response from server")

        if not isinstance(body, dict):
            raise ApiError(r.status_code, "Malformed response from server")
        if r.is_error or not body.get("success"):
            raise ApiError(
                r.status_code,
                str(body.get("error") or body.get("message") or "Request failed"),
                body.get("details"),
            )
        return body

    async def list_recipes(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/recipes")

    async def get_recipe(self, rid: str) -> Dict[str, Any]:
        body = await self._request("GET", f"/api/recipes/{rid}")
        return body.get("recipe") or {}

    async def create_recipe(self, recipe: Dict[str, Any]) -> Dict[str, Any]:
        log.debug("posting recipe to %s/api/recipes", self.base_url)
        body = await self._request("POST", "/api/recipes", json=recipe)
        return body.get("recipe") or {}

    async def delete_recipe(self, rid: str, author_email: Optional[str] = None) -> None:
        params = {"authorEmail": author_email} if author_email else None
        await self._request("DELETE", f"/api/recipes/{rid}", params=params)

    async def like_recipe(self, rid: str) -> int:
        body = await self._request("POST", f"/api/recipes/{rid}/like")
        return int(body.get("likes", 0))


def build_recipe_payload(form: Dict[str, Any], ingredients: Optional[List[dict]] = None,
                         instructions: Optional[List[dict]] = None) -> Dict[str, Any]:
    """작성 화면 폼 → POST 바디. cookingTime은 문자열 입력을 정수로."""
    raw_time = str(form.get("cookingTime") or "").strip()
    try:
        cooking_time: Optional[int] = int(raw_time)
    except ValueError:
        cooking_time = None
    return {
        "title": form.get("title"),
        "description": form.get("description"),
        "cookingTime": cooking_time,
        "difficulty": form.get("difficulty"),
        "category": form.get("category"),
        "author": form.get("author"),
        "authorEmail": form.get("authorEmail"),
        "ingredients": ingredients or [],
        "instructions": instructions or [],
    }
