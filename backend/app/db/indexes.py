# 컬렉션 인덱스 생성
# 앱 스타트업에서 한 번 ensure_indexes()를 await로 호출한다.

from pymongo import DESCENDING

from app.db.init import get_db
from app.db.recipe_store import COLLECTION

async def ensure_recipe_indexes(db):
    col = db[COLLECTION]
    # 피드 정렬 (createdAt desc, _id desc)
    await col.create_index([("createdAt", DESCENDING), ("_id", DESCENDING)], name="feed_order")
    # 작성자 기준 삭제/조회
    await col.create_index("authorEmail", name="authorEmail_1")

async def ensure_indexes(db=None):
    db = db if db is not None else get_db()
    await ensure_recipe_indexes(db)
