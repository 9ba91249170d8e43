# 운영 DB 점검용 — recipes 컬렉션에서 데이터 규칙 위반 문서를 찾아 출력
# 사용: python -m app.scripts.audit_recipes
import asyncio
from datetime import datetime
from typing import List

from app.db.init import close_db, init_db
from app.db.models.recipe import DIFFICULTIES, REQUIRED_TEXT
from app.db.recipe_store import COLLECTION

def _problems(doc: dict) -> List[str]:
    probs: List[str] = []
    if doc.get("difficulty") not in DIFFICULTIES:
        probs.append(f"bad-difficulty({doc.get('difficulty')!r})")
    for k in REQUIRED_TEXT:
        v = doc.get(k)
        if not isinstance(v, str) or not v.strip():
            probs.append(f"no-{k}")
    t = doc.get("cookingTime")
    if not isinstance(t, int) or isinstance(t, bool) or t <= 0:
        probs.append(f"bad-cookingTime({t!r})")
    likes = doc.get("likes", 0)
    if not isinstance(likes, int) or likes < 0:
        probs.append(f"bad-likes({likes!r})")
    created = doc.get("createdAt")
    if not isinstance(created, datetime):
        probs.append("no-createdAt")
    elif isinstance(doc.get("updatedAt"), datetime) and doc["updatedAt"] < created:
        probs.append("updatedAt-before-createdAt")
    return probs

async def audit(db, limit: int = 0):
    cur = db[COLLECTION].find({}, limit=limit)   # 0 = 전체
    docs = await cur.to_list(length=None)
    bad = []
    for d in docs:
        p = _problems(d)
        if p:
            bad.append((str(d.get("_id")), d.get("title"), p))
    return len(docs), bad

async def main(limit: int = 0):
    db = await init_db()
    try:
        checked, bad = await audit(db, limit)
    finally:
        await close_db()
    print(f"checked: {checked}, issues: {len(bad)}")
    for bid, title, probs in bad[:50]:
        print("-", bid, "/", title, "=>", probs)

if __name__ == "__main__":
    asyncio.run(main())
