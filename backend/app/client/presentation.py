# app/client/presentation.py
# 포럼/상세 화면 표시용 순수 함수 — 상대 시간, 날짜, 난이도 색, 작성자 여부
# 부수효과 없음. now는 항상 인자로 받을 수 있게 (테스트 고정용)

from __future__ import annotations
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, Optional

UNKNOWN_DATE = "Unknown date"

# 난이도 색 토큰
GREEN = "#4CAF50"
ORANGE = "#ff6b35"
RED = "#F44336"

_DIFFICULTY_COLORS = {"easy": GREEN, "medium": ORANGE, "hard": RED}

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def parse_timestamp(v: Any) -> Optional[datetime]:
    """
    서버/로컬 시각 값을 tz-aware UTC datetime으로.
    - datetime: naive면 UTC로 간주
    - 숫자: epoch 밀리초 (앱 쪽 Date.now() 기준)
    - 문자열: ISO-8601 ("Z" 접미사 허용)
    해석 불가면 None.
    """
    if isinstance(v, bool):
        return None
    if isinstance(v, datetime):
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)
    if isinstance(v, (int, float)):
        try:
            return datetime.fromtimestamp(v / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(v, str):
        s = v.strip()
        if not s:
            return None
        if s.endswith("Z") or s.endswith("z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
        return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    return None

def _ago(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'} ago"

def format_relative(timestamp: Any, now: Any = None) -> str:
    dt = parse_timestamp(timestamp)
    if dt is None:
        return UNKNOWN_DATE
    ref = parse_timestamp(now) if now is not None else None
    ref = ref or utcnow()

    seconds = (ref - dt).total_seconds()
    # 미래 시각(기기 시계 차이)도 Just now
    if seconds < 60:
        return "Just now"

    minutes = int(seconds // 60)
    if minutes < 60:
        return _ago(minutes, "minute")

    hours = minutes // 60
    if hours < 24:
        return _ago(hours, "hour")

    days = hours // 24
    if days < 7:
        return _ago(days, "day")
    if days < 28:
        return _ago(days // 7, "week")

    months = days // 30
    if months < 12:
        return _ago(max(1, months), "month")

    return _ago(max(1, days // 365), "year")

def format_date(timestamp: Any, tz: Optional[tzinfo] = None) -> str:
    # 상세 화면 형식: "20 Aug 2024 | 18:00" (24시간제)
    dt = parse_timestamp(timestamp)
    if dt is None:
        return UNKNOWN_DATE
    dt = dt.astimezone(tz or timezone.utc)
    return f"{dt.day} {_MONTHS[dt.month - 1]} {dt.year} | {dt.hour}:{dt.minute:02d}"

def is_owner(viewer_email: Optional[str], author_email: Optional[str]) -> bool:
    # 대소문자 구분 완전 일치. 삭제 버튼 노출 여부에만 쓰임 (서버 권한 아님)
    if not viewer_email or not author_email:
        return False
    return viewer_email == author_email

def difficulty_color(difficulty: Optional[str]) -> str:
    return _DIFFICULTY_COLORS.get((difficulty or "").strip().lower(), ORANGE)

def to_card(recipe: Any, viewer: Any = None, now: Any = None) -> Dict[str, Any]:
    """피드 한 줄 표시용 묶음. recipe는 FeedRecipe 또는 dict."""
    data = getattr(recipe, "data", None) or (recipe if isinstance(recipe, dict) else {})
    rid = getattr(recipe, "id", None) or data.get("id")
    created = getattr(recipe, "createdAt", None) or data.get("createdAt")
    viewer_email = getattr(viewer, "email", None) if viewer is not None else None
    if viewer_email is None and isinstance(viewer, dict):
        viewer_email = viewer.get("email")

    return {
        "id": rid,
        "title": data.get("title") or "",
        "author": data.get("author") or "",
        "category": data.get("category") or "",
        "cookingTime": data.get("cookingTime"),
        "difficulty": data.get("difficulty"),
        "likes": data.get("likes") or 0,
        "timeAgo": format_relative(created, now),
        "difficultyColor": difficulty_color(data.get("difficulty")),
        "canDelete": is_owner(viewer_email, data.get("authorEmail")),
    }

def describe_create_error(error: Optional[str], details: Any, difficulty: Optional[str]) -> str:
    # 작성 실패 알림 문구 — 서버가 difficulty 문제를 말하면 값까지 보여준다
    if details is not None and "difficulty" in str(details):
        return (
            f'The difficulty value "{difficulty}" is not accepted by the server. '
            f"{details}"
        )
    return error or "Failed to post recipe"
