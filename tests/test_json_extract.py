"""Tests for permissive JSON extraction from model output."""

from __future__ import annotations

import pytest

from careerscout.errors import ParseError
from careerscout.models.llm import CareersUrlOutput
from careerscout.tools.json_extract import extract_json, iter_json_spans, load_json, parse_llm_output


class TestExtractJson:
    def test_plain_object(self) -> None:
        assert extract_json('{"a": 1}') == '{"a": 1}'

    def test_object_surrounded_by_prose(self) -> None:
        text = 'Here is the answer: {"url": "https://acme.com/careers"} Hope that helps!'
        assert extract_json(text) == '{"url": "https://acme.com/careers"}'

    def test_nested_object(self) -> None:
        text = 'x {"a": {"b": [1, 2, {"c": 3}]}, "d": 4} y {"e": 5}'
        assert extract_json(text) == '{"a": {"b": [1, 2, {"c": 3}]}, "d": 4}'

    def test_array_before_object(self) -> None:
        text = 'Companies: ["Monzo", "Wise"] and {"ignored": true}'
        assert extract_json(text) == '["Monzo", "Wise"]'

    def test_braces_inside_strings(self) -> None:
        text = '{"customizedCv": "Skills: {Python} [SQL]", "changes": ["a \\"quoted\\" }"]}'
        assert extract_json(text) == text

    def test_code_fence(self) -> None:
        text = '```json\n{"confidence": "high"}\n```'
        assert extract_json(text) == '{"confidence": "high"}'

    def test_unbalanced_returns_none(self) -> None:
        assert extract_json('{"a": [1, 2}') is None
        assert extract_json('{"a": 1') is None

    def test_no_json_returns_none(self) -> None:
        assert extract_json("no payload here") is None
        assert extract_json("") is None
        assert extract_json(None) is None


class TestLoadJson:
    def test_decodes_payload(self) -> None:
        assert load_json('prefix {"companies": ["Acme"]}') == {"companies": ["Acme"]}

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(ParseError):
            load_json("{'single': 'quotes'}")

    def test_missing_json_raises(self) -> None:
        with pytest.raises(ParseError):
            load_json("nothing")


class TestRecoveryAfterBadSpans:
    def test_mismatched_bracket_in_prose_skipped(self) -> None:
        text = 'Note {see list] below: {"careersUrl": "https://acme.com/careers"}'
        assert extract_json(text) == '{"careersUrl": "https://acme.com/careers"}'

    def test_all_spans_listed_in_order(self) -> None:
        text = 'Option [1] is best: {"url": "https://acme.com/jobs"} or [2]'
        assert list(iter_json_spans(text)) == ["[1]", '{"url": "https://acme.com/jobs"}', "[2]"]

    def test_nested_spans_not_repeated(self) -> None:
        assert list(iter_json_spans('{"a": {"b": [1]}}')) == ['{"a": {"b": [1]}}']

    def test_schema_picks_first_fitting_payload(self) -> None:
        raw = 'Footnote [1]: {"careersUrl": "https://acme.com/careers", "confidence": "high"}'
        result = parse_llm_output(raw, CareersUrlOutput)
        assert result.careers_url == "https://acme.com/careers"

    def test_undecodable_span_skipped_for_schema(self) -> None:
        raw = "{'draft': true} then {\"careersUrl\": \"https://acme.com/careers\"}"
        assert parse_llm_output(raw, CareersUrlOutput).careers_url == "https://acme.com/careers"

    def test_no_fitting_payload_raises(self) -> None:
        with pytest.raises(ParseError, match="CareersUrlOutput"):
            parse_llm_output('[1] and {"other": 2}', CareersUrlOutput)
