# app/client/config.py
# 앱(클라이언트) 쪽 설정 — API 주소는 실행 시 환경변수/.env 로 주입
# (빌드 때 호스트 IP를 스캔해서 박아 넣지 않는다)
from pydantic_settings import BaseSettings, SettingsConfigDict

class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RECIPES_API_", env_file=".env", extra="ignore")

    BASE_URL: str = "http://localhost:3001"
    TIMEOUT: float = 10.0   # 초

client_settings = ClientSettings()
