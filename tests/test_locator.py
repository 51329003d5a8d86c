"""Locating the model's text inside provider response bodies."""

import json

import pytest

from src.extraction.errors import EnvelopeUnreadableError, NoTextFoundError
from src.extraction.locator import ResponseTextLocator

from tests.helpers import responses_envelope


def _dumps(payload):
    return json.dumps(payload).encode("utf-8")


class TestTypedPath:
    def setup_method(self):
        self.locator = ResponseTextLocator()

    def test_first_output_text_after_reasoning(self):
        fragment = self.locator.locate(responses_envelope('{"make": "Audi"}'))

        assert fragment.text == '{"make": "Audi"}'
        assert fragment.source == "typed"

    def test_blank_parts_are_skipped(self):
        fragment = self.locator.locate(responses_envelope("   \n", "second"))

        assert fragment.text == "second"

    def test_text_is_returned_untrimmed(self):
        fragment = self.locator.locate(responses_envelope("  padded  "))

        assert fragment.text == "  padded  "

    def test_null_members_are_tolerated(self):
        envelope = _dumps(
            {"output": [None, {"content": None}, {"content": [None, {"type": None, "text": "hit"}]}]}
        )

        assert self.locator.locate(envelope).source == "typed"

    def test_accepts_str(self):
        envelope = responses_envelope("hello").decode("utf-8")

        assert self.locator.locate(envelope).text == "hello"


class TestGenericFallback:
    def setup_method(self):
        self.locator = ResponseTextLocator()

    def test_unknown_shape(self):
        envelope = _dumps(
            {"wrapper": {"deep": [{"note": "x"}, {"text": '  {"ok":true}  '}]}}
        )

        fragment = self.locator.locate(envelope)

        assert fragment.text == '  {"ok":true}  '
        assert fragment.source == "generic"

    def test_output_with_wrong_type_uses_generic_search(self):
        envelope = _dumps({"output": "not a list", "text": "hello"})

        assert self.locator.locate(envelope).text == "hello"

    def test_typed_shape_without_text_falls_back(self):
        envelope = _dumps(
            {
                "output": [
                    {
                        "type": "reasoning",
                        "summary": [{"type": "summary_text", "text": "thinking"}],
                    }
                ]
            }
        )

        fragment = self.locator.locate(envelope)

        assert fragment.text == "thinking"
        assert fragment.source == "generic"

    def test_depth_first_before_later_siblings(self):
        envelope = _dumps({"a": {"text": "first"}, "text": "second"})

        assert self.locator.locate(envelope).text == "first"

    def test_blank_and_non_string_text_keys_are_skipped(self):
        envelope = _dumps({"text": "  ", "n": {"text": 5}, "b": [{"text": "x"}]})

        assert self.locator.locate(envelope).text == "x"

    def test_text_key_holding_a_mapping_is_searched(self):
        envelope = _dumps({"text": {"value": "v", "text": "nested"}})

        assert self.locator.locate(envelope).text == "nested"

    def test_gemini_shape(self):
        envelope = _dumps(
            {
                "candidates": [
                    {"content": {"role": "model", "parts": [{"text": '{"make": "Fiat"}'}]}}
                ],
                "usage_metadata": {"total_token_count": 10},
            }
        )

        assert self.locator.locate(envelope).text == '{"make": "Fiat"}'

    def test_top_level_array(self):
        envelope = _dumps([{"id": 1}, {"text": "from array"}])

        assert self.locator.locate(envelope).text == "from array"


class TestFailures:
    def setup_method(self):
        self.locator = ResponseTextLocator()

    @pytest.mark.parametrize("body", [b"<html>502 Bad Gateway</html>", b"", b'{"output": ['])
    def test_unreadable(self, body):
        with pytest.raises(EnvelopeUnreadableError) as excinfo:
            self.locator.locate(body)

        assert excinfo.value.kind == "envelope_unreadable"

    @pytest.mark.parametrize(
        "payload",
        [
            {"output": []},
            {"output": [{"type": "reasoning", "summary": []}]},
            [1, 2, 3],
            None,
            "text",
            {"image": {"url": "https://example.com/car.jpg"}},
        ],
    )
    def test_no_text(self, payload):
        with pytest.raises(NoTextFoundError) as excinfo:
            self.locator.locate(_dumps(payload))

        assert excinfo.value.kind == "no_text_found"
