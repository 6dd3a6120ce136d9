import json
import re
from typing import Any

# C0 제어문자 + DEL + C1 제어문자
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def strip_control_chars(text: str) -> str:
    """
    제어문자(U+0000–U+001F, U+007F–U+009F)를 제거하고 앞뒤 공백 정리
    """
    if not text:
        return ""
    return _CONTROL_RE.sub("", text).strip()


def truncate(text: str, limit: int) -> str:
    """
    limit 글자를 넘으면 잘라낸다 (limit <= 0 이면 빈 문자열)
    """
    if text is None:
        return ""
    if limit <= 0:
        return ""
    return text if len(text) <= limit else text[:limit]


def clip_json(value: Any, limit: int) -> str:
    """
    프롬프트에 넣을 JSON 문자열: 한 줄로 직렬화 후 limit 글자로 자름
    """
    return truncate(json.dumps(value, ensure_ascii=False), limit)
