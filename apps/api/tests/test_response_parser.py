from types import SimpleNamespace

import pytest

from swenlog_ai.services.ai import extract_text_from_response


@pytest.mark.parametrize("reply", [None, ""])
def test_missing_reply(reply):
    text = extract_text_from_response(reply)
    assert "did not receive a response" in text


def test_plain_string_is_returned_as_is():
    assert extract_text_from_response("  hello  ") == "  hello  "


def test_choices_with_text_parts_joined():
    reply = {"choices": [{"message": {"content": [{"type": "text", "text": "A"}, {"type": "text", "text": "B"}]}}]}
    assert extract_text_from_response(reply) == "A B"


def test_choices_string_content():
    reply = {"choices": [{"message": {"role": "assistant", "content": "hi there"}}]}
    assert extract_text_from_response(reply) == "hi there"


def test_non_text_parts_are_dropped():
    reply = {"message": {"content": [{"type": "image", "url": "x"}, {"type": "text", "text": " only "}]}}
    assert extract_text_from_response(reply) == "only"


def test_message_content():
    assert extract_text_from_response({"message": {"content": "plain"}}) == "plain"


def test_empty_choices_fall_through_to_message():
    reply = {"choices": [], "message": {"content": "from message"}}
    assert extract_text_from_response(reply) == "from message"


def test_content_and_text_fields_are_stringified():
    assert extract_text_from_response({"content": 42}) == "42"
    assert extract_text_from_response({"text": "from text"}) == "from text"


def test_attribute_style_sdk_objects():
    reply = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content="from object"))]
    )
    assert extract_text_from_response(reply) == "from object"


@pytest.mark.parametrize("reply", [{"unexpected": True}, {}, [], {"message": {"content": ""}}])
def test_unknown_shape_apologizes(reply):
    text = extract_text_from_response(reply)
    assert "apologize" in text
    assert "could not process" in text


def test_traversal_errors_are_contained():
    class Exploding:
        @property
        def choices(self):
            raise RuntimeError("boom")

    text = extract_text_from_response(Exploding())
    assert "apologize" in text
    assert "error processing" in text
