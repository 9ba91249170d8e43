# 공용 의존성 (DB 핸들 → 레시피 스토어, 설정)
from fastapi import Depends

from app.core.config import Settings, settings
from app.db.init import get_db
from app.db.recipe_store import COLLECTION, RecipeStore

def get_settings() -> Settings:
    return settings

def get_recipe_store(db=Depends(get_db)) -> RecipeStore:
    # 요청마다 얇은 래퍼만 새로 만든다 (커넥션은 전역)
    return RecipeStore(db[COLLECTION])
