from fastapi import Depends

from app.core.config import Settings, get_settings
from app.schemas.song_schema import LESSON_JSON_SCHEMA
from app.services.lesson_pipeline import LessonPipeline, ResponsesClient
from app.services.openai_client import OpenAIResponsesClient


def get_responses_client(settings: Settings = Depends(get_settings)) -> ResponsesClient:
    return OpenAIResponsesClient(settings)


def get_lesson_pipeline(
    settings: Settings = Depends(get_settings),
    client: ResponsesClient = Depends(get_responses_client),
) -> LessonPipeline:
    return LessonPipeline(
        client,
        model=settings.COMPOSE_MODEL,
        max_output_tokens=settings.COMPOSE_MAX_OUTPUT_TOKENS,
        default_duration_min=settings.DEFAULT_DURATION_MIN,
        schema=LESSON_JSON_SCHEMA if settings.STRICT_SCHEMA else None,
        temperature=settings.COMPOSE_TEMPERATURE,
    )
