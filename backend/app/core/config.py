# 환경변수 로딩 (.env)
from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"  # 필요 시 prod/staging로 분리
    MONGO_DB: str = "recipes"
    CORS_ORIGINS: List[str] = [
        "http://localhost:8081",
        "http://127.0.0.1:8081",
    ]
    # true면 DELETE 시 authorEmail 일치 검사 (기본: 검사 없음)
    ENFORCE_DELETE_OWNERSHIP: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
