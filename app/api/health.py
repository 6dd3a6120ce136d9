import time

from fastapi import APIRouter, Depends

from app.api.deps import get_responses_client
from app.core.config import Settings, get_settings
from app.services.lesson_pipeline import ResponsesClient

router = APIRouter()


@router.get("/health")
def health(settings: Settings = Depends(get_settings)):
    # 키 값은 노출하지 않고 존재 여부만
    has_key = bool(settings.OPENAI_API_KEY)
    return {"ok": True, "env": {"OPENAI_API_KEY": "present" if has_key else "missing"}}


@router.get("/ping")
def ping():
    return {"ok": True, "message": "pong", "ts": int(time.time() * 1000)}


@router.get("/debug-openai")
async def debug_openai(
    settings: Settings = Depends(get_settings),
    client: ResponsesClient = Depends(get_responses_client),
):
    """모델 API 연결 확인용: "Say: ok" 한 번 호출"""
    reply = await client.create({
        "model": settings.COMPOSE_MODEL,
        "input": [{"role": "user", "content": "Say: ok"}],
    })
    return {"ok": True, "status": reply.status_code, "text": reply.text}
