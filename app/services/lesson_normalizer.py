# ------------------------------------------------------------
# 파싱된 값 → NormalizedLesson
# - 형식이 틀린 필드는 빈 값으로 강제 변환 (schemas/lesson.py 의 validator)
# - 변환 후 최소 내용 조건을 순서대로 검사, 처음 어긋난 조건을 사유로 실패
# ------------------------------------------------------------

from __future__ import annotations
import logging
import math
import numbers
from typing import Any, Callable, List, Optional, Tuple

from pydantic import ValidationError

from app.core.errors import ErrorCode
from app.core.result import Failure, Ok, Result
from app.schemas.lesson import ComposeRequest, NormalizedLesson, as_object

logger = logging.getLogger(__name__)

# ===================== 최소 내용 조건 =====================

MIN_REAL_WORLD_EXAMPLES = 2
MIN_STEP_BY_STEP = 2
MIN_WORKED_EXAMPLE_STEPS = 2
MIN_MISCONCEPTIONS = 1
MIN_PRACTICE_SETS = 1
MIN_SPACED_RETRIEVAL = 1

# 레슨 길이 상한 (분). 넘으면 기본값
MAX_DURATION_MIN = 24 * 60

Check = Tuple[str, Callable[[NormalizedLesson], bool]]

MINIMUM_CONTENT: List[Check] = [
    ("S.hook_story must not be empty", lambda x: bool(x.S.hook_story)),
    ("S.intuition must not be empty", lambda x: bool(x.S.intuition)),
    (
        f"S.real_world_examples needs at least {MIN_REAL_WORLD_EXAMPLES} entries",
        lambda x: len(x.S.real_world_examples) >= MIN_REAL_WORLD_EXAMPLES,
    ),
    ("N.core_explanation must not be empty", lambda x: bool(x.N.core_explanation)),
    (
        f"N.step_by_step needs at least {MIN_STEP_BY_STEP} entries",
        lambda x: len(x.N.step_by_step) >= MIN_STEP_BY_STEP,
    ),
    ("N.worked_example.problem must not be empty", lambda x: bool(x.N.worked_example.problem)),
    (
        f"N.worked_example.steps needs at least {MIN_WORKED_EXAMPLE_STEPS} entries",
        lambda x: len(x.N.worked_example.steps) >= MIN_WORKED_EXAMPLE_STEPS,
    ),
    (
        f"N.misconceptions needs at least {MIN_MISCONCEPTIONS} entry with myth and fix",
        lambda x: len(x.N.misconceptions) >= MIN_MISCONCEPTIONS,
    ),
    (
        f"G.practice_sets needs at least {MIN_PRACTICE_SETS} set with at least one item",
        lambda x: len(x.G.practice_sets) >= MIN_PRACTICE_SETS,
    ),
    ("G.summary must not be empty", lambda x: bool(x.G.summary)),
    (
        f"G.spaced_retrieval needs at least {MIN_SPACED_RETRIEVAL} entry",
        lambda x: len(x.G.spaced_retrieval) >= MIN_SPACED_RETRIEVAL,
    ),
]

# =========================================================


def coerce_duration(value: Any, default: int) -> int:
    """
    (0, MAX_DURATION_MIN] 범위의 숫자면 정수로 반올림, 아니면 기본값
    - bool 은 숫자로 보지 않음
    - json.loads 는 자릿수 제한 없는 int 를 돌려주므로 float 변환 전에 범위부터 확인
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    if value <= 0 or value > MAX_DURATION_MIN:
        return default
    return int(round(value))


def find_violation(lesson: NormalizedLesson) -> Optional[str]:
    for reason, passes in MINIMUM_CONTENT:
        if not passes(lesson):
            return reason
    return None


def normalize_lesson(value: Any, request: ComposeRequest, default_duration_min: int) -> Result[NormalizedLesson]:
    """
    value: 파싱된 모델 출력
    request: topic / level / locale 은 항상 요청 값을 사용
    """
    if not isinstance(value, dict):
        return Failure(
            ErrorCode.SCHEMA_VALIDATION_FAILED,
            f"lesson must be a JSON object, got {type(value).__name__}",
        )

    raw_meta = as_object(value.get("meta"))
    data = dict(value)
    data["meta"] = {
        "topic": request.topic,
        "level": request.level,
        "locale": request.locale,
        "duration_min": coerce_duration(raw_meta.get("duration_min"), default_duration_min),
    }

    try:
        lesson = NormalizedLesson.model_validate(data)
    except ValidationError as e:
        return Failure(ErrorCode.SCHEMA_VALIDATION_FAILED, f"lesson shape rejected: {e.errors()[0]['msg']}")

    violation = find_violation(lesson)
    if violation:
        logger.info("lesson rejected: %s", violation)
        return Failure(ErrorCode.SCHEMA_VALIDATION_FAILED, violation)
    return Ok(lesson)
