"""Structured output parser tests."""
import pytest

from chronos_ai.exceptions import MalformedResponseError
from chronos_ai.parsing import extract_json_candidate, parse, parse_object
from chronos_ai.parsing.schemas import BEAT, IDEA, ISSUE, RIPPLE_EFFECT, SCENE_CARD


@pytest.mark.parametrize("raw, expected", [
    ('{"a": 1}', '{"a": 1}'),
    ('```json\n{"a": 1}\n```', '{"a": 1}'),
    ('```\n[1, 2]\n```', '[1, 2]'),
    ('Here you go:\n```json\n{"a": 1}\n```\nEnjoy!', '{"a": 1}'),
    ('   {"a": 1}  \n', '{"a": 1}'),
    ('', ''),
])
def test_extract_json_candidate(raw, expected):
    assert extract_json_candidate(raw) == expected


def test_fenced_and_bare_parse_identically():
    assert parse('```json\n{"issues":[]}\n```', ISSUE) == parse('{"issues":[]}', ISSUE) == []


def test_unknown_severity_defaults_to_warning():
    raw = '{"issues": [{"severity": "catastrophic", "category": "timeline_paradox", "title": "Dead man walks"}]}'

    issues = parse(raw, ISSUE)

    assert len(issues) == 1
    assert issues[0]["severity"] == "warning"
    assert issues[0]["category"] == "timeline_paradox"
    assert issues[0]["title"] == "Dead man walks"


def test_issue_defaults():
    issue = parse('{"issues": [{"category": "plot_hole"}]}', ISSUE)[0]

    assert issue == {
        "severity": "warning",
        "category": "logic_gap",
        "title": "Untitled Issue",
        "description": "",
        "entityNames": [],
        "suggestedFix": "",
    }


def test_ripple_defaults():
    effect = parse('{"effects": [{"impactLevel": "extreme"}]}', RIPPLE_EFFECT)[0]
    assert effect["impactLevel"] == "medium"
    assert effect["affectedEntityName"] == "Unknown Entity"


def test_arrays_are_not_capped():
    items = ",".join('{"title": "Issue %d"}' % i for i in range(15))
    issues = parse('{"issues": [%s]}' % items, ISSUE)

    assert len(issues) == 15
    assert issues[-1]["title"] == "Issue 14"


def test_missing_root_key_yields_empty_list():
    assert parse('{"something_else": []}', ISSUE) == []


def test_non_object_entries_are_dropped():
    assert [b["description"] for b in parse('[{"type": "dialogue", "description": "Hi"}, "noise", 3]', BEAT)] == ["Hi"]


def test_beat_type_defaults_to_action():
    beats = parse('[{"type": "montage", "description": "Years pass."}]', BEAT)
    assert beats == [{"type": "action", "description": "Years pass."}]


def test_idea_confidence_defaults_when_missing_or_zero():
    ideas = parse('{"ideas": [{"title": "A"}, {"title": "B", "confidence": 0}, {"title": "C", "confidence": 0.9}]}', IDEA)
    assert [i["confidence"] for i in ideas] == [0.7, 0.7, 0.9]


def test_parse_object_coerces_single_object():
    card = parse_object('```json\n{"pov": "Mara", "goal": "Escape", "extra": "dropped"}\n```', SCENE_CARD)

    assert card["pov"] == "Mara"
    assert card["openingLine"] == ""
    assert "extra" not in card


def test_syntax_error_raises_malformed_response():
    with pytest.raises(MalformedResponseError) as exc_info:
        parse('```json\n{"issues": [\n```', ISSUE)

    assert exc_info.value.excerpt == '{"issues": ['
    assert exc_info.value.provider == ""


@pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN", "1e999"])
def test_non_finite_numbers_fall_back_to_default(literal):
    ideas = parse('{"ideas": [{"title": "A", "confidence": %s}]}' % literal, IDEA)
    assert ideas[0]["confidence"] == 0.7
