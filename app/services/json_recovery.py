# ------------------------------------------------------------
# 모델 원문에서 JSON을 복구하는 단계들
#   1) extract_json_candidate: 코드펜스 / 중괄호 / 대괄호 기준으로 후보 추출
#   2) sanitize_json_candidate: 제어문자 제거
#   3) parse_layered: 직접 파싱 → 이중 인코딩 재파싱 → 따옴표 벗기고 재파싱
# 각 단계는 Ok / Failure 를 반환하고 실패하면 다음 단계로 넘어가지 않는다
# ------------------------------------------------------------

from __future__ import annotations
import json
import re
from typing import Any

from app.core.errors import ErrorCode
from app.core.result import Failure, Ok, Result, bind, with_raw
from app.utils.text import strip_control_chars

# 펜스 태그(json, javascript, JSON5 …)는 내용에 포함하지 않는다
_FENCED_RE = re.compile(r"```[\w+-]*[ \t]*\r?\n?([\s\S]*?)```")
_LEADING_FENCE_RE = re.compile(r"^```[\w+-]*")
_TRAILING_FENCE_RE = re.compile(r"```$")
_WRAPPING_QUOTES_RE = re.compile(r'^"([\s\S]*)"$')


# -------------------- 1) 후보 추출 --------------------

def _is_complete_json(text: str) -> bool:
    # 이중 인코딩 문자열, 객체 배열 등 그 자체로 유효한 JSON은 잘라내지 않는다
    if not text or text[0] not in '"[{':
        return False
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def _slice_between(text: str, opening: str, closing: str) -> str | None:
    start = text.find(opening)
    end = text.rfind(closing)
    if start != -1 and end > start:
        return text[start:end + 1]
    return None


def extract_json_candidate(text: str) -> str:
    """
    임의의 텍스트에서 JSON일 가능성이 가장 높은 부분 문자열을 반환
    - 예외 없음. 반환값이 유효한 JSON인지는 다음 단계에서 판단
    """
    if not text:
        return ""

    fenced = _FENCED_RE.search(text)
    if fenced:
        return fenced.group(1).strip()

    body = text.strip()
    if _is_complete_json(body):
        return body

    body = _LEADING_FENCE_RE.sub("", body)
    body = _TRAILING_FENCE_RE.sub("", body).strip()

    for opening, closing in (("{", "}"), ("[", "]")):
        sliced = _slice_between(body, opening, closing)
        if sliced is not None:
            return sliced

    return text.strip()


# -------------------- 2) 제어문자 제거 --------------------

def sanitize_json_candidate(candidate: str) -> str:
    return strip_control_chars(candidate)


# -------------------- 3) 단계별 파싱 --------------------

def _loads(text: str) -> Result[Any]:
    try:
        return Ok(json.loads(text))
    except ValueError as e:
        return Failure(ErrorCode.MODEL_OUTPUT_NOT_JSON, f"invalid JSON: {e}")


def _unwrap_double_encoded(value: Any) -> Result[Any]:
    if isinstance(value, str):
        return _loads(value)
    return Ok(value)


def _strip_wrapping_quotes(text: str) -> str:
    match = _WRAPPING_QUOTES_RE.match(text)
    return match.group(1) if match else text


def parse_layered(candidate: str) -> Result[Any]:
    """
    1) 직접 파싱 (결과가 문자열이면 한 번 더 파싱)
    2) 직접 파싱 실패 시 바깥 큰따옴표 한 겹을 벗기고 재시도
    """
    direct = _loads(candidate)
    if isinstance(direct, Ok):
        return _unwrap_double_encoded(direct.value)
    return _loads(_strip_wrapping_quotes(candidate))


# -------------------- 파이프라인 --------------------

def parse_model_text(raw_text: str) -> Result[Any]:
    """추출 → 제어문자 제거 → 파싱. 실패 시 raw에 원문을 담는다"""
    candidate = sanitize_json_candidate(extract_json_candidate(raw_text or ""))
    if not candidate:
        return Failure(ErrorCode.MODEL_OUTPUT_NOT_JSON, "empty model output", raw_text)
    return with_raw(parse_layered(candidate), raw_text)


def _require_object(value: Any) -> Result[dict]:
    if isinstance(value, dict):
        return Ok(value)
    return Failure(ErrorCode.MODEL_OUTPUT_NOT_JSON, f"expected a JSON object, got {type(value).__name__}")


def recover_json(raw_text: str) -> Result[dict]:
    """JSON 객체만 허용하는 복구 (iterate / summarize 응답용)"""
    return with_raw(bind(parse_model_text(raw_text), _require_object), raw_text)
