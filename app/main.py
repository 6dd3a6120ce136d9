import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import addon, compose, health
from app.core.config import get_settings
from app.core.errors import ErrorCode, LessonError
from app.core.logging import configure_logging

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="SONG Tutor")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(compose.router, prefix="/api/compose")
app.include_router(addon.router, prefix="/api")
app.include_router(health.router, prefix="/api")


# ===== 오류 → JSON =====

@app.exception_handler(LessonError)
async def lesson_error_handler(request: Request, exc: LessonError):
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_payload(get_settings().UPSTREAM_DETAIL_MAX_CHARS),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # 잘못된 본문 / 빈 topic / 허용되지 않는 level 등 → 업스트림 호출 전에 400
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"error": ErrorCode.INVALID_INPUT.value, "detail": problems},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "INTERNAL_ERROR"})


@app.get("/")
def root():
    return {"message": "SONG Tutor server running"}
