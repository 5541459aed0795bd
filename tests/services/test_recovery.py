from __future__ import annotations

import json

import pytest

from ideagen.errors import RecoveryFailureError
from ideagen.services.recovery import (
    NO_JSON_MESSAGE,
    UNPARSEABLE_MESSAGE,
    find_embedded_object,
    parse_direct,
    parse_embedded,
    recover_ideas,
    strip_code_fences,
)


def test_fenced_reply_matches_unfenced(one_idea):
    raw = json.dumps(one_idea)
    fenced = f"```json\n{raw}\n```"
    assert recover_ideas(fenced) == recover_ideas(raw) == one_idea


def test_fence_without_language_tag(one_idea):
    assert recover_ideas(f"```\n{json.dumps(one_idea)}\n```") == one_idea


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```\n') == '{"a": 1}'
    assert strip_code_fences("  plain  ") == "plain"


def test_prose_around_object_uses_embedded_strategy(one_idea):
    text = f"Sure! Here are your ideas:\n{json.dumps(one_idea)}\nHope this helps."
    assert parse_direct(text) is None
    assert parse_embedded(text) == one_idea
    assert recover_ideas(text) == one_idea


def test_embedded_search_is_greedy():
    text = 'x {"ideas": [{"t": {"n": 1}}]} y'
    assert find_embedded_object(text) == '{"ideas": [{"t": {"n": 1}}]}'


def test_no_braces_fails_with_generate_message():
    with pytest.raises(RecoveryFailureError) as exc:
        recover_ideas("I cannot help with that.")
    assert exc.value.status_code == 500
    assert exc.value.message == NO_JSON_MESSAGE


def test_broken_braces_fail_with_process_message():
    with pytest.raises(RecoveryFailureError) as exc:
        recover_ideas("Here: {not json at all}")
    assert exc.value.message == UNPARSEABLE_MESSAGE


def test_missing_ideas_list_is_a_failure():
    with pytest.raises(RecoveryFailureError):
        recover_ideas('{"error": "could not produce json"}')
    with pytest.raises(RecoveryFailureError):
        recover_ideas('{"ideas": "not a list"}')


def test_top_level_array_is_rejected():
    with pytest.raises(RecoveryFailureError) as exc:
        recover_ideas("[1, 2, 3]")
    assert exc.value.message == NO_JSON_MESSAGE


def test_empty_ideas_list_is_accepted():
    assert recover_ideas('{"ideas": []}') == {"ideas": []}


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
def test_non_standard_constants_are_rejected(token):
    reply = '{"ideas": [{"feasibility": {"technical": %s}}]}' % token
    assert parse_direct(reply) is None
    assert parse_embedded("Here:\n" + reply) is None
    with pytest.raises(RecoveryFailureError) as exc:
        recover_ideas(reply)
    assert exc.value.message == UNPARSEABLE_MESSAGE
