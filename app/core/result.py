from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from app.core.errors import ErrorCode, LessonError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    code: ErrorCode
    reason: str
    raw: str | None = None

    def to_error(self, status_code: int = 502) -> LessonError:
        return LessonError(self.code, status_code, detail=self.reason, raw=self.raw)


Result = Union[Ok[T], Failure]


def bind(result: "Result[T]", step: Callable[[T], "Result[U]"]) -> "Result[U]":
    """성공이면 다음 단계 실행, 실패면 그대로 전달"""
    if isinstance(result, Failure):
        return result
    return step(result.value)


def with_raw(result: "Result[Any]", raw: str) -> "Result[Any]":
    if isinstance(result, Failure) and result.raw is None:
        return Failure(result.code, result.reason, raw)
    return result
