from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.api.deps import get_lesson_pipeline
from app.schemas.lesson import ComposeRequest
from app.services.lesson_pipeline import LessonPipeline

router = APIRouter()


@router.post("")
async def compose_lesson(
    req: ComposeRequest,
    pipeline: LessonPipeline = Depends(get_lesson_pipeline),
) -> Dict[str, Any]:
    """
    주제 → SONG 레슨 생성
    실패는 LessonError 로 올라가 main.py 의 핸들러가 JSON 오류로 변환
    """
    return await pipeline.compose(req)
