from __future__ import annotations
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ===== 요청 =====

Level = Literal["beginner", "intermediate", "advanced"]

DEFAULT_LEVEL: Level = "beginner"
DEFAULT_LOCALE = "zh-TW"


class ComposeRequest(BaseModel):
    """
    SONG 레슨 생성 요청
    - topic: 공백 제거 후 비어 있으면 INVALID_INPUT
    """
    topic: str = Field(..., description="학습 주제")
    level: Level = Field(DEFAULT_LEVEL, description="학습 수준")
    locale: str = Field(DEFAULT_LOCALE, description="응답 언어")
    goal: Optional[str] = Field(None, description="학습자가 원하는 목표 (선택)")

    @field_validator("topic")
    @classmethod
    def _require_topic(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("topic must not be empty")
        return v

    @field_validator("level", mode="before")
    @classmethod
    def _default_level(cls, v: Any) -> Any:
        return DEFAULT_LEVEL if v is None else v

    @field_validator("locale", mode="before")
    @classmethod
    def _default_locale(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_LOCALE
        return v.strip() if isinstance(v, str) else v

    @field_validator("goal")
    @classmethod
    def _blank_goal(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


# ===== 강제 변환 규칙 =====

def as_text(v: Any) -> str:
    """문자열이면 trim, 아니면 빈 문자열"""
    return v.strip() if isinstance(v, str) else ""


def as_text_list(v: Any) -> List[str]:
    """리스트 안의 비어 있지 않은 문자열만 trim해서 남김, 리스트가 아니면 []"""
    if not isinstance(v, list):
        return []
    return [item.strip() for item in v if isinstance(item, str) and item.strip()]


def as_object(v: Any) -> dict:
    return v if isinstance(v, dict) else {}


def as_object_list(v: Any) -> List[dict]:
    if not isinstance(v, list):
        return []
    return [item for item in v if isinstance(item, dict)]


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


# ===== 레슨 본문 =====

class LessonMeta(_Lenient):
    topic: str = ""
    level: Level = DEFAULT_LEVEL
    locale: str = DEFAULT_LOCALE
    duration_min: int


class Table(_Lenient):
    headers: List[str] = Field(default_factory=list)
    rows: List[List[str]] = Field(default_factory=list)

    @field_validator("headers", mode="before")
    @classmethod
    def _headers(cls, v: Any) -> List[str]:
        return as_text_list(v)

    @field_validator("rows", mode="before")
    @classmethod
    def _rows(cls, v: Any) -> List[List[str]]:
        if not isinstance(v, list):
            return []
        rows = [as_text_list(row) for row in v]
        return [row for row in rows if row]


class Spark(_Lenient):
    hook_story: str = ""
    intuition: str = ""
    visual_aid: str = ""
    table: Table = Field(default_factory=Table)
    real_world_examples: List[str] = Field(default_factory=list)

    @field_validator("hook_story", "intuition", "visual_aid", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return as_text(v)

    @field_validator("real_world_examples", mode="before")
    @classmethod
    def _list(cls, v: Any) -> List[str]:
        return as_text_list(v)

    @field_validator("table", mode="before")
    @classmethod
    def _table(cls, v: Any) -> dict:
        return as_object(v)


class Objectives(_Lenient):
    goals: List[str] = Field(default_factory=list)
    prerequisites: List[str] = Field(default_factory=list)
    key_terms: List[str] = Field(default_factory=list)
    checklist: List[str] = Field(default_factory=list)

    @field_validator("goals", "prerequisites", "key_terms", "checklist", mode="before")
    @classmethod
    def _list(cls, v: Any) -> List[str]:
        return as_text_list(v)


class WorkedExample(_Lenient):
    problem: str = ""
    steps: List[str] = Field(default_factory=list)
    answer: str = ""

    @field_validator("problem", "answer", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return as_text(v)

    @field_validator("steps", mode="before")
    @classmethod
    def _list(cls, v: Any) -> List[str]:
        return as_text_list(v)


class Misconception(_Lenient):
    myth: str
    fix: str

    @field_validator("myth", "fix", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return as_text(v)


class Nucleus(_Lenient):
    core_explanation: str = ""
    formulas: List[str] = Field(default_factory=list)
    step_by_step: List[str] = Field(default_factory=list)
    worked_example: WorkedExample = Field(default_factory=WorkedExample)
    misconceptions: List[Misconception] = Field(default_factory=list)

    @field_validator("core_explanation", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return as_text(v)

    @field_validator("formulas", "step_by_step", mode="before")
    @classmethod
    def _list(cls, v: Any) -> List[str]:
        return as_text_list(v)

    @field_validator("worked_example", mode="before")
    @classmethod
    def _worked_example(cls, v: Any) -> dict:
        return as_object(v)

    @field_validator("misconceptions", mode="before")
    @classmethod
    def _misconceptions(cls, v: Any) -> List[dict]:
        # myth, fix 둘 다 있어야 유지
        return [
            {"myth": as_text(m.get("myth")), "fix": as_text(m.get("fix"))}
            for m in as_object_list(v)
            if as_text(m.get("myth")) and as_text(m.get("fix"))
        ]


class PracticeItem(_Lenient):
    q: str
    expected: str
    hints: List[str] = Field(default_factory=list)

    @field_validator("q", "expected", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return as_text(v)

    @field_validator("hints", mode="before")
    @classmethod
    def _hints(cls, v: Any) -> List[str]:
        return as_text_list(v)


def _keep_items(v: Any) -> List[dict]:
    return [
        item for item in as_object_list(v)
        if as_text(item.get("q")) and as_text(item.get("expected"))
    ]


class PracticeSet(_Lenient):
    title: str
    items: List[PracticeItem] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> str:
        return as_text(v)

    @field_validator("items", mode="before")
    @classmethod
    def _items(cls, v: Any) -> List[dict]:
        return _keep_items(v)


class Generation(_Lenient):
    practice_sets: List[PracticeSet] = Field(default_factory=list)
    summary: str = ""
    spaced_retrieval: List[str] = Field(default_factory=list)
    extensions: List[str] = Field(default_factory=list)

    @field_validator("practice_sets", mode="before")
    @classmethod
    def _practice_sets(cls, v: Any) -> List[dict]:
        # 제목이 있고 유효한 문항이 1개 이상인 세트만 유지
        kept = []
        for s in as_object_list(v):
            items = _keep_items(s.get("items"))
            if as_text(s.get("title")) and items:
                kept.append({"title": s.get("title"), "items": items})
        return kept

    @field_validator("summary", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return as_text(v)

    @field_validator("spaced_retrieval", "extensions", mode="before")
    @classmethod
    def _list(cls, v: Any) -> List[str]:
        return as_text_list(v)


class NormalizedLesson(_Lenient):
    """
    SONG 레슨 문서
    - S: Spark / O: Objectives / N: Nucleus / G: Generation
    - 리스트 필드는 항상 리스트 (null 없음)
    """
    meta: LessonMeta
    S: Spark = Field(default_factory=Spark)
    O: Objectives = Field(default_factory=Objectives)
    N: Nucleus = Field(default_factory=Nucleus)
    G: Generation = Field(default_factory=Generation)

    @field_validator("S", "O", "N", "G", mode="before")
    @classmethod
    def _section(cls, v: Any) -> dict:
        return as_object(v)
