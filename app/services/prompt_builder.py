from typing import Any, List, Optional

from app.schemas.lesson import ComposeRequest
from app.utils.text import clip_json

# SONG 레슨 생성용 프롬프트
SONG_SYSTEM_PROMPT = (
    "You are a tutor who understands instructional design.\n"
    "You design lessons with the SONG method:\n"
    "- S (Spark): a hook story, the core intuition, a visual aid, a small comparison table, real-world examples.\n"
    "- O (Objectives): measurable goals, prerequisites, key terms, a self-check checklist.\n"
    "- N (Nucleus): the core explanation, formulas, a step-by-step sequence, one worked example, common misconceptions with fixes.\n"
    "- G (Generation): practice sets with expected answers, a summary, spaced-retrieval prompts, extensions.\n\n"
    "Output only JSON. No Markdown, no code fences, no commentary."
)

SONG_OUTPUT_SHAPE = """{
  "meta": {"topic": str, "level": str, "locale": str, "duration_min": int},
  "S": {"hook_story": str, "intuition": str, "visual_aid": str,
        "table": {"headers": [str], "rows": [[str]]},
        "real_world_examples": [str]},
  "O": {"goals": [str], "prerequisites": [str], "key_terms": [str], "checklist": [str]},
  "N": {"core_explanation": str, "formulas": [str], "step_by_step": [str],
        "worked_example": {"problem": str, "steps": [str], "answer": str},
        "misconceptions": [{"myth": str, "fix": str}]},
  "G": {"practice_sets": [{"title": str, "items": [{"q": str, "expected": str, "hints": [str]}]}],
        "summary": str, "spaced_retrieval": [str], "extensions": [str]}
}"""

SONG_MINIMUM_CONTENT = (
    "Minimum content:\n"
    "1. S.hook_story and S.intuition are filled in, with at least 2 real_world_examples.\n"
    "2. N.core_explanation is filled in, with at least 2 step_by_step entries.\n"
    "3. N.worked_example has a problem and at least 2 steps.\n"
    "4. At least 1 misconception, each with both myth and fix.\n"
    "5. At least 1 practice set with a title and at least 1 item, each with q and expected.\n"
    "6. G.summary is filled in, with at least 1 spaced_retrieval prompt.\n"
    "Do not just restate the topic."
)


def build_song_messages(request: ComposeRequest) -> List[dict]:
    goal_line = f"Learner goal: {request.goal}\n" if request.goal else ""
    user_content = (
        f"Topic: {request.topic}\n"
        f"Level: {request.level}\n"
        f"Answer language (locale): {request.locale}\n"
        f"{goal_line}\n"
        f"Return one JSON object with exactly this shape:\n{SONG_OUTPUT_SHAPE}\n\n"
        f"{SONG_MINIMUM_CONTENT}"
    )
    return [
        {"role": "system", "content": SONG_SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]


# iterate 액션별 규칙
ITERATE_RULES = {
    "explain-differently": (
        'Restate S.hook_story and S.intuition with an everyday analogy. '
        'Return it in a "paraphrase" field.'
    ),
    "more-examples": (
        "Add 2-3 practice items to G.practice_sets, each with q, hints and expected."
    ),
    "mini-quiz": (
        "Write 3 single-choice questions, each shaped as "
        '{"question": str, "options": [4 x str], "answer": str, "why": str}.'
    ),
}


def build_iterate_messages(song_plan: dict, action: str, context: Optional[str], max_chars: int) -> List[dict]:
    if action not in ITERATE_RULES:
        raise ValueError(f"Unknown action: {action}")

    user_content = (
        f"Current SONG lesson (JSON): {clip_json(song_plan, max_chars)}\n"
        f"Action: {action}\n"
        f"Context: {context or 'none'}\n\n"
        'Return only: { "addon": { ...new content for the action... } }\n\n'
        f"Rule: {ITERATE_RULES[action]}"
    )
    return [{"role": "user", "content": user_content}]


# 마무리 요약용 프롬프트
def build_summarize_messages(song_plan: dict, user_answers: Any, max_chars: int) -> List[dict]:
    user_content = (
        "Based on the SONG lesson and the learner's answers, return:\n"
        "{\n"
        '  "wrapup": {\n'
        '    "recap": "key points in at most five lines",\n'
        '    "corrections": ["fixes for the misconceptions the answers show"],\n'
        '    "nextSteps": ["three follow-up suggestions with keywords"],\n'
        '    "ttsPlainText": "plain text suited for text-to-speech"\n'
        "  }\n"
        "}\n"
        f"SONG: {clip_json(song_plan, max_chars)}\n"
        f"Answers: {clip_json(user_answers if user_answers is not None else {}, max_chars)}"
    )
    return [{"role": "user", "content": user_content}]
