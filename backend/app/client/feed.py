# app/client/feed.py
# 레시피 포럼 피드 동기화 (앱 쪽 로더)
# - 서버 응답 정규화: id / createdAt 필드명 차이 흡수, 없으면 로컬 값 합성
# - 네트워크/서버 실패 → 빈 목록 (FeedUnavailable 로 구분해서 보관)
# - 트리거: 화면 최초 표시, 포커스 복귀, 당겨서 새로고침

from __future__ import annotations
import asyncio
import itertools
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field

from app.client.api import ApiError, RecipesApiClient, TransportError
from app.client.presentation import utcnow

log = logging.getLogger(__name__)

# 필드 우선순위 (앞쪽이 우선)
ID_FIELDS = ("id", "_id")
TIMESTAMP_FIELDS = ("createdAt", "timestamp")
LOCAL_ID_PREFIX = "local-"


class FeedRecipe(BaseModel):
    id: str
    createdAt: Any                 # datetime(합성) 또는 서버 원본 값
    synthetic_id: bool = False
    data: Dict[str, Any] = Field(default_factory=dict)


class FeedLoaded(BaseModel):
    # 서버가 정상 응답. recipes가 비었으면 정말로 글이 없는 것
    recipes: List[FeedRecipe] = Field(default_factory=list)


class FeedUnavailable(BaseModel):
    # 네트워크/서버 실패. 화면에는 빈 목록만 보인다
    reason: str
    recipes: List[FeedRecipe] = Field(default_factory=list)


FeedResult = Union[FeedLoaded, FeedUnavailable]


def _server_id(entry: Dict[str, Any]) -> Optional[str]:
    for k in ID_FIELDS:
        v = entry.get(k)
        if isinstance(v, dict):
            v = v.get("$oid")       # extended JSON {"$oid": "..."}
        if v is not None and str(v).strip():
            return str(v)
    return None

def _server_timestamp(entry: Dict[str, Any]) -> Any:
    for k in TIMESTAMP_FIELDS:
        v = entry.get(k)
        if isinstance(v, dict):
            v = v.get("$date")
        if v not in (None, ""):
            return v
    return None

def normalize_entries(raw: Iterable[Any], now: Optional[datetime] = None) -> List[FeedRecipe]:
    """
    서버 recipes 배열 → 로컬 레코드.
    id: id → _id → "local-<n>" (이번 로드 안에서 증가, 중복 id도 합성 id로 교체)
    createdAt: createdAt → timestamp → now
    dict가 아닌 항목은 건너뛴다.
    """
    now = now or utcnow()
    counter = itertools.count(1)
    seen: set = set()
    out: List[FeedRecipe] = []

    for entry in raw or []:
        if not isinstance(entry, dict):
            continue

        rid = _server_id(entry)
        synthetic = rid is None or rid in seen
        if synthetic:
            rid = f"{LOCAL_ID_PREFIX}{next(counter)}"
            while rid in seen:
                rid = f"{LOCAL_ID_PREFIX}{next(counter)}"
        seen.add(rid)

        ts = _server_timestamp(entry)
        if ts is None:
            ts = now

        out.append(FeedRecipe(id=rid, createdAt=ts, synthetic_id=synthetic, data=dict(entry)))
    return out

async def fetch_feed(
    api: RecipesApiClient,
    now: Optional[datetime] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FeedResult:
    # 예외를 밖으로 내보내지 않는다. 실패는 FeedUnavailable
    # 합성 시각은 응답을 받은 뒤에 읽는다 (요청 시작 시각 아님)
    try:
        body = await api.list_recipes()
    except TransportError as e:
        log.warning("feed load failed (network): %s", e)
        return FeedUnavailable(reason=f"network: {e}")
    except ApiError as e:
        log.warning("feed load failed (server %s): %s", e.status, e.error)
        return FeedUnavailable(reason=f"server {e.status}: {e.error}")

    entries = body.get("recipes")
    if not isinstance(entries, list):
        log.warning("feed load failed: recipes is not a list")
        return FeedUnavailable(reason="malformed: recipes is not a list")
    if now is None:
        now = (clock or utcnow)()
    return FeedLoaded(recipes=normalize_entries(entries, now))


class RecipeFeed:
    """
    포럼 화면 상태. 동시에 여러 트리거가 와도 요청은 최대 1개 진행 + 1개 대기.
    진행 중에 들어온 load()는 새 요청을 만들지 않고 '한 번 더' 표시만 한 뒤
    그 재요청까지 끝난 최신 상태를 돌려받는다.
    """

    def __init__(self, api: RecipesApiClient, clock: Optional[Callable[[], datetime]] = None):
        self.api = api
        self._clock = clock or utcnow
        self.recipes: List[FeedRecipe] = []
        self.last_result: Optional[FeedResult] = None
        self.refreshing = False
        self._mounted = False
        self._inflight: Optional[asyncio.Future] = None
        self._rerun = False

    @property
    def unavailable(self) -> bool:
        return isinstance(self.last_result, FeedUnavailable)

    async def on_mount(self) -> List[FeedRecipe]:
        if self._mounted:
            return self.recipes
        self._mounted = True
        return await self.load()

    async def on_focus(self) -> List[FeedRecipe]:
        # 글 작성 후 돌아왔을 때 등
        return await self.load()

    async def on_refresh(self) -> List[FeedRecipe]:
        self.refreshing = True
        try:
            return await self.load()
        finally:
            self.refreshing = False

    async def load(self) -> List[FeedRecipe]:
        if self._inflight is not None and not self._inflight.done():
            self._rerun = True
            await asyncio.shield(self._inflight)
            return self.recipes

        # 먼저 부른 쪽이 취소돼도 공유 작업은 끝까지 돈다
        task = asyncio.ensure_future(self._run())
        self._inflight = task
        task.add_done_callback(self._clear_inflight)
        await asyncio.shield(task)
        return self.recipes

    def _clear_inflight(self, task: asyncio.Future) -> None:
        if self._inflight is task:
            self._inflight = None

    async def _run(self) -> None:
        while True:
            self._rerun = False
            result = await fetch_feed(self.api, clock=self._clock)
            self._apply(result)
            if not self._rerun:
                return

    def _apply(self, result: FeedResult) -> None:
        self.last_result = result
        self.recipes = list(result.recipes)
