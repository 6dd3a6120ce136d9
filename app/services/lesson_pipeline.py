from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, NoReturn, Optional, Protocol

from app.core.result import Failure, Result, bind, with_raw
from app.schemas.lesson import ComposeRequest, NormalizedLesson
from app.schemas.song_schema import JSON_OBJECT_FORMAT, json_schema_format
from app.services.json_recovery import parse_model_text, recover_json
from app.services.lesson_normalizer import normalize_lesson
from app.services.openai_client import ModelReply
from app.services.prompt_builder import build_song_messages

logger = logging.getLogger(__name__)

# 모델 출력이 깨졌을 때 돌려주는 상태코드
BAD_MODEL_OUTPUT_STATUS = 502


class ResponsesClient(Protocol):
    async def create(self, payload: Dict[str, Any]) -> ModelReply:
        ...


PromptBuilder = Callable[[ComposeRequest], List[dict]]


def recover_lesson(raw_text: str, request: ComposeRequest, default_duration_min: int) -> Result[NormalizedLesson]:
    """
    추출 → 제어문자 제거 → 파싱 → 정규화
    어느 단계든 실패하면 그 Failure 를 그대로 반환 (부분 성공 없음)
    """
    parsed = parse_model_text(raw_text)
    lesson = bind(parsed, lambda value: normalize_lesson(value, request, default_duration_min))
    return with_raw(lesson, raw_text)


def _raise_failure(failure: Failure, label: str) -> NoReturn:
    logger.warning("[%s] %s: %s", label, failure.code.value, failure.reason)
    raise failure.to_error(BAD_MODEL_OUTPUT_STATUS)


class LessonPipeline:
    """
    SONG 레슨 생성 파이프라인
    - 프롬프트 / 스키마 / 토큰 한도 / 모델은 생성 시 주입
    - schema 가 있으면 strict json_schema 생성, 없으면 json_object
    """

    def __init__(
        self,
        client: ResponsesClient,
        *,
        model: str,
        max_output_tokens: int,
        default_duration_min: int,
        schema: Optional[Dict[str, Any]] = None,
        temperature: Optional[float] = None,
        prompt_builder: PromptBuilder = build_song_messages,
    ) -> None:
        self.client = client
        self.model = model
        self.max_output_tokens = max_output_tokens
        self.default_duration_min = default_duration_min
        self.schema = schema
        self.temperature = temperature
        self.prompt_builder = prompt_builder

    def build_payload(self, request: ComposeRequest) -> Dict[str, Any]:
        text_format = json_schema_format(self.schema) if self.schema else JSON_OBJECT_FORMAT
        payload: Dict[str, Any] = {
            "model": self.model,
            "input": self.prompt_builder(request),
            "max_output_tokens": self.max_output_tokens,
            "text": {"format": text_format},
        }
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        return payload

    async def compose(self, request: ComposeRequest) -> Dict[str, Any]:
        logger.info("[compose] topic=%r level=%s locale=%s", request.topic, request.level, request.locale)
        reply = await self.client.create(self.build_payload(request))

        # strict 스키마 생성이 구조화 값을 돌려준 경우 그대로 사용
        if self.schema and isinstance(reply.parsed, dict):
            return reply.parsed

        result = recover_lesson(reply.text, request, self.default_duration_min)
        if isinstance(result, Failure):
            _raise_failure(result, "compose")
        return result.value.model_dump()


async def generate_json_object(
    client: ResponsesClient,
    *,
    model: str,
    messages: List[dict],
    max_output_tokens: int,
    label: str,
) -> Dict[str, Any]:
    """
    json_object 형식으로 호출하고 JSON 객체를 복구 (iterate / summarize)
    """
    payload = {
        "model": model,
        "input": messages,
        "max_output_tokens": max_output_tokens,
        "text": {"format": JSON_OBJECT_FORMAT},
    }
    reply = await client.create(payload)
    if isinstance(reply.parsed, dict):
        return reply.parsed

    result = recover_json(reply.text)
    if isinstance(result, Failure):
        _raise_failure(result, label)
    return result.value
