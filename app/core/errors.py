from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional

from app.utils.text import truncate


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    MODEL_OUTPUT_NOT_JSON = "MODEL_OUTPUT_NOT_JSON"
    SCHEMA_VALIDATION_FAILED = "SCHEMA_VALIDATION_FAILED"


class LessonError(Exception):
    """
    요청 실패 → `{"error": code, "detail"?, "raw"?}` 형태로 응답
    - status_code: 호출자에게 돌려줄 HTTP 상태
    - detail: 진단용 사유 (잘라서 반환)
    - raw: 진단용 모델 원문 (잘라서 반환)
    """

    def __init__(
        self,
        code: ErrorCode,
        status_code: int,
        detail: Optional[str] = None,
        raw: Optional[str] = None,
    ) -> None:
        super().__init__(detail or code.value)
        self.code = code
        self.status_code = status_code
        self.detail = detail
        self.raw = raw

    def to_payload(self, max_chars: int) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.code.value}
        if self.detail:
            payload["detail"] = truncate(self.detail, max_chars)
        if self.raw is not None:
            payload["raw"] = truncate(self.raw, max_chars)
        return payload


class UpstreamError(LessonError):
    """모델 API 호출 실패 (키 없음, 네트워크 오류, 2xx 이외 응답)"""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(ErrorCode.UPSTREAM_UNAVAILABLE, status_code, detail=detail)
