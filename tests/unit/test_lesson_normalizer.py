import pytest

from app.core.errors import ErrorCode
from app.core.result import Failure, Ok
from app.services.lesson_normalizer import coerce_duration, normalize_lesson

DEFAULT_DURATION = 20


def _normalize(value, request):
    return normalize_lesson(value, request, DEFAULT_DURATION)


def test_valid_lesson_passes(valid_lesson, compose_request):
    result = _normalize(valid_lesson, compose_request)
    assert isinstance(result, Ok)
    lesson = result.value
    assert lesson.meta.topic == "Pythagorean theorem"
    assert lesson.meta.duration_min == 25
    assert len(lesson.S.real_world_examples) >= 2
    assert lesson.N.misconceptions[0].fix == "Only right triangles"


def test_normalize_is_idempotent(valid_lesson, compose_request):
    first = _normalize(valid_lesson, compose_request).value.model_dump()
    second = _normalize(first, compose_request).value.model_dump()
    assert first == second


def test_meta_comes_from_request(valid_lesson, compose_request):
    valid_lesson["meta"] = {"topic": "something else", "level": "expert", "locale": "xx"}
    lesson = _normalize(valid_lesson, compose_request).value
    assert lesson.meta.topic == compose_request.topic
    assert lesson.meta.level == compose_request.level
    assert lesson.meta.locale == compose_request.locale


@pytest.mark.parametrize("value, expected", [
    (30, 30),
    (12.6, 13),
    ("25", DEFAULT_DURATION),
    (None, DEFAULT_DURATION),
    (True, DEFAULT_DURATION),
    (0, DEFAULT_DURATION),
    (-5, DEFAULT_DURATION),
    (float("nan"), DEFAULT_DURATION),
    (float("inf"), DEFAULT_DURATION),
    (10 ** 400, DEFAULT_DURATION),
    (24 * 60 + 1, DEFAULT_DURATION),
    (24 * 60, 24 * 60),
])
def test_coerce_duration(value, expected):
    assert coerce_duration(value, DEFAULT_DURATION) == expected


def test_strings_and_lists_are_trimmed_and_filtered(valid_lesson, compose_request):
    valid_lesson["S"]["hook_story"] = "   story  "
    valid_lesson["S"]["visual_aid"] = 42
    valid_lesson["S"]["real_world_examples"] = [" one ", "", "   ", None, 7, "two"]
    valid_lesson["O"]["goals"] = "not a list"
    valid_lesson["O"]["key_terms"] = None

    lesson = _normalize(valid_lesson, compose_request).value
    assert lesson.S.hook_story == "story"
    assert lesson.S.visual_aid == ""
    assert lesson.S.real_world_examples == ["one", "two"]
    assert lesson.O.goals == []
    assert lesson.O.key_terms == []


def test_missing_sections_degrade_to_defaults(valid_lesson, compose_request):
    valid_lesson["O"] = "garbage"
    valid_lesson["S"]["table"] = ["not", "an", "object"]
    lesson = _normalize(valid_lesson, compose_request).value
    assert lesson.O.model_dump() == {"goals": [], "prerequisites": [], "key_terms": [], "checklist": []}
    assert lesson.S.table.model_dump() == {"headers": [], "rows": []}


def test_list_fields_are_never_null(valid_lesson, compose_request):
    for key in ("goals", "prerequisites", "key_terms", "checklist"):
        valid_lesson["O"][key] = None
    valid_lesson["G"]["extensions"] = None
    dumped = _normalize(valid_lesson, compose_request).value.model_dump()
    assert all(isinstance(v, list) for v in dumped["O"].values())
    assert dumped["G"]["extensions"] == []


def test_table_rows_keep_only_text_cells(valid_lesson, compose_request):
    valid_lesson["S"]["table"]["rows"] = [["3", " 4 ", 5], "bad", [], [None]]
    lesson = _normalize(valid_lesson, compose_request).value
    assert lesson.S.table.rows == [["3", "4"]]


def test_incomplete_misconceptions_are_dropped(valid_lesson, compose_request):
    valid_lesson["N"]["misconceptions"] = [
        {"myth": "m1", "fix": ""},
        {"myth": "  ", "fix": "f"},
        "not an object",
        {"myth": " m2 ", "fix": " f2 "},
    ]
    lesson = _normalize(valid_lesson, compose_request).value
    assert [m.model_dump() for m in lesson.N.misconceptions] == [{"myth": "m2", "fix": "f2"}]


def test_practice_sets_need_title_and_items(valid_lesson, compose_request):
    valid_lesson["G"]["practice_sets"] = [
        {"title": "", "items": [{"q": "q", "expected": "e"}]},
        {"title": "Empty", "items": [{"q": "q", "expected": ""}]},
        {"title": " Keep ", "items": [{"q": " q ", "expected": "e", "hints": [" h ", 3]}, {"q": "drop"}]},
    ]
    lesson = _normalize(valid_lesson, compose_request).value
    assert len(lesson.G.practice_sets) == 1
    kept = lesson.G.practice_sets[0]
    assert kept.title == "Keep"
    assert [item.model_dump() for item in kept.items] == [{"q": "q", "expected": "e", "hints": ["h"]}]


def test_non_object_is_rejected(compose_request):
    result = _normalize(["not", "a", "lesson"], compose_request)
    assert isinstance(result, Failure)
    assert result.code is ErrorCode.SCHEMA_VALIDATION_FAILED


def test_empty_misconceptions_fail(valid_lesson, compose_request):
    valid_lesson["N"]["misconceptions"] = []
    result = _normalize(valid_lesson, compose_request)
    assert isinstance(result, Failure)
    assert result.code is ErrorCode.SCHEMA_VALIDATION_FAILED
    assert "misconceptions" in result.reason


@pytest.mark.parametrize("mutate, reason_part", [
    (lambda d: d["S"].update(hook_story=""), "S.hook_story"),
    (lambda d: d["S"].update(intuition=None), "S.intuition"),
    (lambda d: d["S"].update(real_world_examples=["only one"]), "S.real_world_examples"),
    (lambda d: d["N"].update(core_explanation="  "), "N.core_explanation"),
    (lambda d: d["N"].update(step_by_step=["one"]), "N.step_by_step"),
    (lambda d: d["N"]["worked_example"].update(problem=""), "N.worked_example.problem"),
    (lambda d: d["N"]["worked_example"].update(steps=["one"]), "N.worked_example.steps"),
    (lambda d: d["G"].update(practice_sets=[]), "G.practice_sets"),
    (lambda d: d["G"].update(summary=""), "G.summary"),
    (lambda d: d["G"].update(spaced_retrieval=[]), "G.spaced_retrieval"),
])
def test_minimum_content_violations(valid_lesson, compose_request, mutate, reason_part):
    mutate(valid_lesson)
    result = _normalize(valid_lesson, compose_request)
    assert isinstance(result, Failure)
    assert result.code is ErrorCode.SCHEMA_VALIDATION_FAILED
    assert result.reason.startswith(reason_part)


def test_topic_only_response_fails(compose_request):
    result = _normalize({"meta": {"topic": "Pythagorean theorem"}}, compose_request)
    assert isinstance(result, Failure)
    assert result.reason.startswith("S.hook_story")


def test_huge_integer_duration_falls_back_to_default(valid_lesson, compose_request):
    valid_lesson["meta"]["duration_min"] = 10 ** 400
    result = _normalize(valid_lesson, compose_request)
    assert isinstance(result, Ok)
    assert result.value.meta.duration_min == DEFAULT_DURATION
