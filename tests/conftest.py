from __future__ import annotations

import copy
from typing import Any, Dict, List

import pytest

from app.core.config import Settings
from app.schemas.lesson import ComposeRequest
from app.services.openai_client import ModelReply

_VALID_LESSON: Dict[str, Any] = {
    "meta": {"topic": "Pythagorean theorem", "level": "beginner", "locale": "en-US", "duration_min": 25},
    "S": {
        "hook_story": "A carpenter checks a corner with a 3-4-5 rope.",
        "intuition": "Squares on the legs fill the square on the hypotenuse.",
        "visual_aid": "Right triangle with squares drawn on each side.",
        "table": {"headers": ["a", "b", "c"], "rows": [["3", "4", "5"], ["5", "12", "13"]]},
        "real_world_examples": ["Squaring a deck frame", "Screen diagonal sizes"],
    },
    "O": {
        "goals": ["Compute a missing side of a right triangle"],
        "prerequisites": ["Squares and square roots"],
        "key_terms": ["hypotenuse", "leg"],
        "checklist": ["I can name the hypotenuse"],
    },
    "N": {
        "core_explanation": "In a right triangle a^2 + b^2 = c^2.",
        "formulas": ["a^2 + b^2 = c^2"],
        "step_by_step": ["Identify the hypotenuse", "Square the legs", "Add and take the root"],
        "worked_example": {
            "problem": "Legs 6 and 8, find c.",
            "steps": ["36 + 64 = 100", "sqrt(100) = 10"],
            "answer": "10",
        },
        "misconceptions": [{"myth": "Works for any triangle", "fix": "Only right triangles"}],
    },
    "G": {
        "practice_sets": [
            {"title": "Warm-up", "items": [{"q": "Legs 3 and 4?", "expected": "5", "hints": ["3-4-5"]}]},
        ],
        "summary": "Square the legs, add them, take the root.",
        "spaced_retrieval": ["State the theorem from memory tomorrow."],
        "extensions": ["Distance formula"],
    },
}


@pytest.fixture
def valid_lesson() -> Dict[str, Any]:
    return copy.deepcopy(_VALID_LESSON)


@pytest.fixture
def compose_request() -> ComposeRequest:
    return ComposeRequest(topic="Pythagorean theorem", level="beginner", locale="en-US")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        OPENAI_API_KEY="sk-test",
        OPENAI_BASE_URL="https://llm.test/v1",
        UPSTREAM_DETAIL_MAX_CHARS=4000,
    )


class FakeResponsesClient:
    """정해진 응답(또는 예외)을 순서대로 돌려주고 받은 payload 를 기록"""

    def __init__(self, replies: List[Any]) -> None:
        self.replies = list(replies)
        self.payloads: List[Dict[str, Any]] = []

    async def create(self, payload: Dict[str, Any]) -> ModelReply:
        self.payloads.append(payload)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, ModelReply):
            return reply
        return ModelReply(text=reply)


@pytest.fixture
def fake_client_factory():
    return FakeResponsesClient
