from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """
    환경변수 / .env 기반 설정
    - 파이프라인은 이 객체를 주입받아 사용 (전역 os.getenv 직접 호출 금지)
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # 모델 API
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_TIMEOUT_SECONDS: float = 60.0

    # 모델 / 생성 옵션
    COMPOSE_MODEL: str = "gpt-4o-mini"
    ITERATE_MODEL: str = "gpt-4o-mini"
    SUMMARIZE_MODEL: str = "o4-mini"
    COMPOSE_TEMPERATURE: float = 0.7
    COMPOSE_MAX_OUTPUT_TOKENS: int = 2400
    ADDON_MAX_OUTPUT_TOKENS: int = 1200
    STRICT_SCHEMA: bool = True

    # 정규화 / 응답 크기
    DEFAULT_DURATION_MIN: int = 20
    UPSTREAM_DETAIL_MAX_CHARS: int = 4000
    SONG_PLAN_MAX_CHARS: int = 6000

    # 서버
    CORS_ALLOW_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
