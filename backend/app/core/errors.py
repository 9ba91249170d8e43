# app/core/errors.py
# 레시피 도메인 예외 — main.py의 exception handler가 {success:false, ...} 봉투로 바꾼다

from __future__ import annotations
from typing import Any, Optional


class RecipeError(Exception):
    status_code = 500
    error = "Internal server error"

    def __init__(self, error: Optional[str] = None, details: Any = None):
        super().__init__(error or self.error)
        if error:
            self.error = error
        self.details = details

    def envelope(self) -> dict:
        body = {"success": False, "error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class RecipeValidationError(RecipeError):
    # 필수 필드 누락/형식 오류
    status_code = 400
    error = "Invalid recipe data"


class RecipeNotFound(RecipeError):
    status_code = 404
    error = "Recipe not found"


class RecipeForbidden(RecipeError):
    # ENFORCE_DELETE_OWNERSHIP=true 일 때만 발생
    status_code = 403
    error = "Not allowed to delete this recipe"


class StoreError(RecipeError):
    # Mongo 드라이버 오류 래핑
    status_code = 500
    error = "Storage failure"
