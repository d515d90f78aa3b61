"""
Tests for request DTOs.
"""

import pytest
from pydantic import ValidationError

from mimir.dto import ChatCompletionRequest, FunctionChoice, ImageContentPart, TextContentPart


def test_multimodal_content_is_tagged():
    request = ChatCompletionRequest.model_validate(
        {
            "model": "gpt-4o",
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": "Describe this"},
                        {"type": "image_url", "image_url": {"url": "https://example.com/cat.png"}},
                    ],
                }
            ],
        }
    )

    parts = request.messages[0].content
    assert isinstance(parts[0], TextContentPart)
    assert isinstance(parts[1], ImageContentPart)
    assert request.messages[0].text() == "Describe this"


def test_unknown_content_part_type_is_rejected():
    with pytest.raises(ValidationError):
        ChatCompletionRequest.model_validate(
            {
                "model": "gpt-4o",
                "messages": [{"role": "user", "content": [{"type": "audio", "data": "..."}]}],
            }
        )


def test_tool_choice_variants():
    auto = ChatCompletionRequest(model="m", messages=[{"role": "user", "content": "hi"}], tool_choice="auto")
    forced = ChatCompletionRequest(
        model="m",
        messages=[{"role": "user", "content": "hi"}],
        tool_choice={"type": "function", "function": {"name": "lookup"}},
    )

    assert auto.tool_choice == "auto"
    assert isinstance(forced.tool_choice, FunctionChoice)
    assert forced.tool_choice.function.name == "lookup"


def test_cache_text_includes_model_and_roles():
    request = ChatCompletionRequest(
        model="gpt-4o",
        messages=[
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "Capital of France?"},
        ],
    )

    assert request.cache_text() == "model: gpt-4o\nsystem: Be brief.\nuser: Capital of France?"


def test_cache_text_separates_reply_shaping_params():
    base = {"model": "gpt-4o", "messages": [{"role": "user", "content": "List three colors"}]}
    plain = ChatCompletionRequest.model_validate(base)
    as_json = ChatCompletionRequest.model_validate({**base, "response_format": {"type": "json_object"}})
    three = ChatCompletionRequest.model_validate({**base, "n": 3, "temperature": 0.2})

    assert as_json.cache_text() != plain.cache_text()
    assert three.cache_text() != plain.cache_text()
    assert as_json.cache_text().endswith("params: response_format=json_object")
    assert three.cache_text().endswith("params: n=3 temperature=0.2")


def test_cache_text_includes_tool_names_and_choice():
    request = ChatCompletionRequest.model_validate(
        {
            "model": "gpt-4o",
            "messages": [{"role": "user", "content": "Weather in Paris?"}],
            "tools": [{"type": "function", "function": {"name": "get_weather"}}],
            "tool_choice": {"type": "function", "function": {"name": "get_weather"}},
        }
    )

    assert request.cache_text().splitlines()[-1] == (
        "params: tools=['get_weather'] tool_choice=function:get_weather"
    )


def test_to_upstream_keeps_extra_fields_and_drops_unset():
    request = ChatCompletionRequest.model_validate(
        {
            "model": "gpt-4o",
            "messages": [{"role": "user", "content": "hi"}],
            "logit_bias": {"50256": -100},
        }
    )

    payload = request.to_upstream()
    assert payload["logit_bias"] == {"50256": -100}
    assert "temperature" not in payload
    assert payload["stream"] is False
