import pytest

from edura.services.errors import ExtractionError
from edura.services.extraction import extract_json, strip_fences


def test_fenced_and_unfenced_text_parse_identically():
    body = '[{"question": "What does photosynthesis convert?", "answer": "Light into chemical energy"}]'
    fenced = f"```json\n{body}\n```"

    assert extract_json(fenced, "array") == extract_json(body, "array")
    assert strip_fences(strip_fences(fenced)) == strip_fences(fenced)


def test_fence_tags_are_matched_case_insensitively():
    assert extract_json('```JSON\n{"title": "Roadmap"}\n```', "object") == {"title": "Roadmap"}
    assert extract_json('```\n{"title": "Plain"}\n```') == {"title": "Plain"}


def test_leading_and_trailing_prose_is_ignored():
    raw = 'Sure! Here is your roadmap:\n{"title": "Learn Go", "stages": []}\nGood luck with it.'

    assert extract_json(raw, "object") == {"title": "Learn Go", "stages": []}


def test_expected_shape_selects_the_delimiters():
    raw = 'Note {see below}: [1, 2, 3]'

    assert extract_json(raw, "array") == [1, 2, 3]


def test_first_opener_is_used_when_no_shape_is_expected():
    raw = 'Result: [{"question": "Q", "answer": "A"}] done'

    assert extract_json(raw) == [{"question": "Q", "answer": "A"}]


def test_extractor_is_type_agnostic():
    assert extract_json('{"flashcards": []}', "array") == {"flashcards": []}


def test_trailing_comma_is_not_repaired():
    raw = 'Here are your questions:\n[{"question": "Q1", "answer": "A1"},]'

    with pytest.raises(ExtractionError, match="no structured payload found"):
        extract_json(raw, "array")


@pytest.mark.parametrize("raw", ["", "   ", "I could not produce any cards today.", "```json\n```"])
def test_text_without_payload_raises(raw):
    with pytest.raises(ExtractionError):
        extract_json(raw, "array")


def test_prose_after_a_closing_fence_is_kept():
    raw = '```json\n{"title": "Roadmap"}\n``` Hope this helps'

    assert strip_fences(raw) == '{"title": "Roadmap"}\nHope this helps'
    assert extract_json(raw, "object") == {"title": "Roadmap"}
