# 레시피 문서 스키마 — recipes 컬렉션에 저장되는 형태
# 요청 스키마(RecipeIn)와 별개로 저장 직전에 한 번 더 검증한다 (difficulty enum 등)
from __future__ import annotations
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Difficulty = Literal["Easy", "Medium", "Hard"]
DIFFICULTIES = ("Easy", "Medium", "Hard")

REQUIRED_TEXT = ("title", "description", "category", "author", "authorEmail")
REQUIRED_FIELDS = ("title", "description", "cookingTime", "category", "author", "authorEmail")


def missing_fields(data: dict) -> List[str]:
    """필수 필드 중 없거나 빈 값인 것 (입력 순서 유지)"""
    out: List[str] = []
    for k in REQUIRED_FIELDS:
        v = data.get(k)
        if isinstance(v, str):
            v = v.strip()
        if v is None or v == "":
            out.append(k)
    return out


class Ingredient(BaseModel):
    name: Optional[str] = None
    amount: Optional[str] = None
    unit: Optional[str] = None


class InstructionStep(BaseModel):
    step: Optional[int] = Field(default=None, ge=1)
    description: Optional[str] = None


class RecipeDoc(BaseModel):
    title: str
    description: str
    cookingTime: int = Field(..., gt=0)   # 분 단위
    difficulty: Difficulty = "Easy"
    category: str
    author: str
    authorEmail: str
    ingredients: List[Ingredient] = Field(default_factory=list)
    instructions: List[InstructionStep] = Field(default_factory=list)
    likes: int = Field(default=0, ge=0)
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @field_validator(*REQUIRED_TEXT, mode="before")
    @classmethod
    def _v_not_blank(cls, v):
        if isinstance(v, str):
            v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("difficulty", mode="before")
    @classmethod
    def _v_difficulty_default(cls, v):
        # 누락/빈값은 Easy, 그 외 값은 Literal 검증에 맡긴다
        return v or "Easy"

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def _v_list_default(cls, v):
        return v or []
