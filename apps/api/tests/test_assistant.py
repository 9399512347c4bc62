import json

import pytest

from conftest import FakeEnvironment, FakeSdk, make_service
from swenlog_ai.data import CANNED_REPLIES
from swenlog_ai.services.ai import AIAssistant, MemoryStorage, is_generic_response
from swenlog_ai.services.ai.assistant import DEFAULT_SYSTEM_PROMPT, TRAINING_DATA_KEY

USEFUL = "Ocean freight from Shanghai to Rotterdam usually takes 30 to 35 days port to port."

TRAINING = [
    {
        "id": "1",
        "question": "What is FCL?",
        "answer": "Full Container Load.",
        "category": "freight",
        "keywords": ["fcl", "container"],
    },
    {"id": "2", "question": "missing answer"},
]


def assistant_with(reply=USEFUL, error=None, storage=None):
    sdk = FakeSdk(reply=reply, error=error)
    service = make_service(FakeEnvironment(sdk=sdk, preloaded=True))
    return AIAssistant(service, storage or MemoryStorage()), sdk


@pytest.mark.parametrize(
    "text",
    [
        "",
        "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor.",
        "I'm sorry, but I cannot help with that request about your shipment today.",
        "Too short.",
    ],
)
def test_generic_responses(text):
    assert is_generic_response(text) is True


def test_useful_response_is_not_generic():
    assert is_generic_response(USEFUL) is False


def test_training_data_loaded_and_invalid_entries_skipped():
    storage = MemoryStorage({TRAINING_DATA_KEY: json.dumps(TRAINING)})
    assistant, _ = assistant_with(storage=storage)
    assert assistant.training_data_count == 1


def test_corrupt_training_data_is_ignored():
    storage = MemoryStorage({TRAINING_DATA_KEY: "[oops"})
    assistant, _ = assistant_with(storage=storage)
    assert assistant.training_data_count == 0


def test_build_prompt_includes_context_and_knowledge_base():
    storage = MemoryStorage({TRAINING_DATA_KEY: json.dumps(TRAINING[:1])})
    assistant, _ = assistant_with(storage=storage)

    prompt = assistant.build_prompt("What is FCL?", context="warehouse")

    assert prompt.startswith(DEFAULT_SYSTEM_PROMPT)
    assert "You are currently helping with warehouse management." in prompt
    assert "Q: What is FCL?\nA: Full Container Load.\nCategory: freight\nKeywords: fcl, container" in prompt
    assert prompt.endswith("User Question: What is FCL?\n\nPlease provide a helpful, professional response:")


@pytest.mark.asyncio
async def test_query_returns_model_text():
    assistant, sdk = assistant_with()
    answer = await assistant.query("How long to Rotterdam?")

    assert answer.text == USEFUL
    assert answer.error is None
    _, api_options = sdk.calls[0]
    assert api_options["temperature"] == 0.7
    assert api_options["max_tokens"] == 1000


@pytest.mark.asyncio
async def test_generic_reply_replaced_with_canned_answer():
    assistant, _ = assistant_with(reply="I don't know.")
    answer = await assistant.query("Do I need cargo insurance?")
    assert answer.text == CANNED_REPLIES["insurance"]
    assert answer.error is None


@pytest.mark.asyncio
async def test_service_not_ready_is_reported_not_raised():
    assistant = AIAssistant(make_service(None, default_timeout_ms=20), MemoryStorage())
    answer = await assistant.query("hello")
    assert answer.error == "Service not ready"
    assert "not available" in answer.text


@pytest.mark.asyncio
async def test_request_failure_is_reported_not_raised():
    assistant, _ = assistant_with(error=RuntimeError("upstream 500"))
    answer = await assistant.query("hello")
    assert answer.error == "upstream 500"
    assert answer.text.startswith("Sorry")
