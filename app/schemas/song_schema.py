"""
Responses API `text.format` 용 SONG 레슨 JSON Schema

strict 모드는 모든 속성을 required로, additionalProperties=false로 요구한다.
최소 개수(예시 2개 이상 등)는 스키마가 아니라 정규화 단계에서 검사한다.
"""
from typing import Any, Dict

SCHEMA_NAME = "song_lesson"


def _string() -> Dict[str, Any]:
    return {"type": "string"}


def _strings() -> Dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}}


def _object(properties: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "object",
        "additionalProperties": False,
        "properties": properties,
        "required": list(properties),
    }


def _array_of(item: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "array", "items": item}


LESSON_JSON_SCHEMA: Dict[str, Any] = _object({
    "meta": _object({
        "topic": _string(),
        "level": {"type": "string", "enum": ["beginner", "intermediate", "advanced"]},
        "locale": _string(),
        "duration_min": {"type": "integer"},
    }),
    "S": _object({
        "hook_story": _string(),
        "intuition": _string(),
        "visual_aid": _string(),
        "table": _object({
            "headers": _strings(),
            "rows": _array_of(_strings()),
        }),
        "real_world_examples": _strings(),
    }),
    "O": _object({
        "goals": _strings(),
        "prerequisites": _strings(),
        "key_terms": _strings(),
        "checklist": _strings(),
    }),
    "N": _object({
        "core_explanation": _string(),
        "formulas": _strings(),
        "step_by_step": _strings(),
        "worked_example": _object({
            "problem": _string(),
            "steps": _strings(),
            "answer": _string(),
        }),
        "misconceptions": _array_of(_object({
            "myth": _string(),
            "fix": _string(),
        })),
    }),
    "G": _object({
        "practice_sets": _array_of(_object({
            "title": _string(),
            "items": _array_of(_object({
                "q": _string(),
                "expected": _string(),
                "hints": _strings(),
            })),
        })),
        "summary": _string(),
        "spaced_retrieval": _strings(),
        "extensions": _strings(),
    }),
})


def json_schema_format(schema: Dict[str, Any], name: str = SCHEMA_NAME) -> Dict[str, Any]:
    """Responses API `text.format` 블록 (strict json_schema)"""
    return {"type": "json_schema", "name": name, "schema": schema, "strict": True}


JSON_OBJECT_FORMAT: Dict[str, Any] = {"type": "json_object"}
