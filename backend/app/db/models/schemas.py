# app/db/models/schemas.py
# API 입출력 Pydantic 모델
# RecipeIn: 앱 작성 화면에서 보내는 바디 (대부분 optional — 필수 검증은 스토어에서 한 번에)
# RecipeOut: 응답 봉투 안의 recipe 형태 (id, ISO 시각 문자열)
from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.db.models.recipe import Ingredient, InstructionStep

class RecipeIn(BaseModel):
    # 알 수 없는 필드는 조용히 버린다 (likes/createdAt 등 클라이언트가 덮어쓰기 금지)
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    cookingTime: Optional[int] = None
    difficulty: Optional[str] = None        # "Easy" | "Medium" | "Hard" — 그 외는 저장 시 거절
    category: Optional[str] = None
    author: Optional[str] = None
    authorEmail: Optional[str] = None
    ingredients: Optional[List[Ingredient]] = None
    instructions: Optional[List[InstructionStep]] = None

class RecipeOut(BaseModel):
    id: str
    title: str
    description: str
    cookingTime: int
    difficulty: str
    category: str
    author: str
    authorEmail: str
    ingredients: List[Ingredient] = Field(default_factory=list)
    instructions: List[InstructionStep] = Field(default_factory=list)
    likes: int = 0
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
