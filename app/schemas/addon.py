from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

IterateAction = Literal["explain-differently", "more-examples", "mini-quiz"]


class IterateRequest(BaseModel):
    """
    기존 SONG 레슨에 추가 콘텐츠 요청
    - explain-differently: 비유로 다시 설명
    - more-examples: 연습 문제 추가
    - mini-quiz: 4지선다 3문항
    """
    model_config = ConfigDict(populate_by_name=True)

    song_plan: Dict[str, Any] = Field(..., alias="songPlan")
    action: IterateAction
    context: Optional[str] = None


class SummarizeRequest(BaseModel):
    """
    SONG 레슨 + 학습자 답안 → 마무리 요약 요청
    """
    model_config = ConfigDict(populate_by_name=True)

    song_plan: Dict[str, Any] = Field(..., alias="songPlan")
    user_answers: Any = Field(None, alias="userAnswers")
