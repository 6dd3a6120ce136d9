from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import Settings
from app.core.errors import UpstreamError
from app.utils.text import truncate

logger = logging.getLogger(__name__)


@dataclass
class ModelReply:
    """
    Responses API 응답 요약
    - text: 출력 텍스트 (없으면 "")
    - parsed: strict 스키마 생성이 돌려준 구조화 값 (없으면 None)
    """
    text: str
    parsed: Any = None
    status_code: int = 200


def _output_parts(data: Dict[str, Any]) -> List[dict]:
    parts = []
    for item in data.get("output") or []:
        if isinstance(item, dict):
            parts.extend(p for p in item.get("content") or [] if isinstance(p, dict))
    parts.extend(p for p in data.get("content") or [] if isinstance(p, dict))
    return parts


def read_reply(data: Any, status_code: int = 200) -> ModelReply:
    """
    응답 JSON에서 텍스트/구조화 값 추출
    1) output_parsed 또는 content 의 json 파트 → parsed
    2) output_text → text
    3) output[*].content[*].text 이어붙이기 → text
    """
    if not isinstance(data, dict):
        return ModelReply(text="", status_code=status_code)

    parts = _output_parts(data)

    parsed = data.get("output_parsed")
    if parsed is None:
        parsed = next((p["json"] for p in parts if p.get("json") is not None), None)

    text = data.get("output_text")
    if not isinstance(text, str) or not text:
        text = "".join(p["text"] for p in parts if isinstance(p.get("text"), str))

    return ModelReply(text=text, parsed=parsed, status_code=status_code)


class OpenAIResponsesClient:
    """
    OpenAI Responses API 호출 (재시도 없음)
    - 키 없음 → 500, 네트워크 오류 → 502, 타임아웃 → 504
    - 2xx 이외 응답 → 해당 상태코드 + 잘린 응답 본문
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.api_key = settings.OPENAI_API_KEY
        self.url = settings.OPENAI_BASE_URL.rstrip("/") + "/responses"
        self.timeout = settings.OPENAI_TIMEOUT_SECONDS
        self.detail_max_chars = settings.UPSTREAM_DETAIL_MAX_CHARS
        self.transport = transport

    async def create(self, payload: Dict[str, Any]) -> ModelReply:
        if not self.api_key:
            raise UpstreamError(500, "OPENAI_API_KEY is not set")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        model = payload.get("model")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            logger.warning("model=%s upstream timeout: %s", model, e)
            raise UpstreamError(504, truncate(f"upstream timeout: {e}", self.detail_max_chars)) from e
        except httpx.HTTPError as e:
            logger.warning("model=%s upstream unreachable: %s", model, e)
            raise UpstreamError(502, truncate(f"upstream unreachable: {e}", self.detail_max_chars)) from e

        logger.info("model=%s status=%s", model, response.status_code)
        if not response.is_success:
            # 리다이렉트 등 4xx/5xx 가 아닌 실패는 502 로 돌려준다
            status = response.status_code if response.status_code >= 400 else 502
            raise UpstreamError(status, truncate(response.text, self.detail_max_chars))

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(502, truncate(f"upstream returned non-JSON body: {response.text}", self.detail_max_chars)) from e

        return read_reply(data, response.status_code)
