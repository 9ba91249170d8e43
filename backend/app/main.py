# app/main.py
# FastAPI 앱 초기화, 라우터/에러 핸들러 설정
# 라우터는 각 기능별로 분리하여 관리

from __future__ import annotations

import logging
from asyncio import sleep
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes_recipes import router as recipes_router
from app.core.config import settings
from app.core.errors import RecipeError
from app.db.init import get_db, init_db, close_db
from app.db.indexes import ensure_indexes

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

app = FastAPI(title="Recipe Forum - API", version="0.1.0")

# CORS: Expo 개발 서버 허용 (CORS_ORIGINS 로 조정)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------------
# 에러 → {success:false, error, details?} 봉투
# ------------------------------

@app.exception_handler(RecipeError)
async def recipe_error_handler(request: Request, exc: RecipeError):
    if exc.status_code >= 500:
        log.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.error, exc.details)
    return JSONResponse(status_code=exc.status_code, content=exc.envelope())

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid recipe data", "details": details},
    )

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # 스택트레이스는 로그에만, 응답엔 메시지만
    log.exception("%s %s crashed", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "details": str(exc)},
    )

# 앱 시작/종료 이벤트 핸들러
@app.on_event("startup")
async def on_startup() -> None:
    # 1) DB 먼저 붙는다 (최대 20회, 1초 간격)
    db = None
    for i in range(20):
        try:
            db = await init_db()
            log.info("[startup] db ready")
            break
        except Exception as e:
            log.warning("[startup] db init retry %d: %s", i + 1, e)
            await sleep(1.0)
    if db is None:
        log.error("[startup] db init failed after retries")
        return

    # 2) 인덱스 보장
    try:
        await ensure_indexes(db)
        log.info("[startup] indexes ensured")
    except Exception:
        log.exception("[startup] ensure_indexes failed")

@app.on_event("shutdown")
async def on_shutdown() -> None:
    # 몽고db 커넥션 정리
    await close_db()

@app.get("/")
async def root():
    return {"status": "ok"}

@app.get("/health")
async def health():
    # DB ping 포함 헬스체크
    ok = {"status": "ok", "db": "ok"}
    try:
        db = get_db()
        await db.command("ping")
    except Exception as e:
        ok["db"] = f"error: {e}"
    return ok

# 라우터 prefix는 각 파일 내에서 정의함 , 중복 prefix 금지
app.include_router(recipes_router)
