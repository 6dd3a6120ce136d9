from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.api.deps import get_responses_client
from app.core.config import Settings, get_settings
from app.schemas.addon import IterateRequest, SummarizeRequest
from app.services.lesson_pipeline import ResponsesClient, generate_json_object
from app.services.prompt_builder import build_iterate_messages, build_summarize_messages

router = APIRouter()


@router.post("/iterate")
async def iterate_lesson(
    req: IterateRequest,
    settings: Settings = Depends(get_settings),
    client: ResponsesClient = Depends(get_responses_client),
) -> Dict[str, Any]:
    messages = build_iterate_messages(
        req.song_plan,
        req.action,
        req.context,
        max_chars=settings.SONG_PLAN_MAX_CHARS,
    )
    return await generate_json_object(
        client,
        model=settings.ITERATE_MODEL,
        messages=messages,
        max_output_tokens=settings.ADDON_MAX_OUTPUT_TOKENS,
        label="iterate",
    )


@router.post("/summarize")
async def summarize_lesson(
    req: SummarizeRequest,
    settings: Settings = Depends(get_settings),
    client: ResponsesClient = Depends(get_responses_client),
) -> Dict[str, Any]:
    messages = build_summarize_messages(
        req.song_plan,
        req.user_answers,
        max_chars=settings.SONG_PLAN_MAX_CHARS,
    )
    return await generate_json_object(
        client,
        model=settings.SUMMARIZE_MODEL,
        messages=messages,
        max_output_tokens=settings.ADDON_MAX_OUTPUT_TOKENS,
        label="summarize",
    )
