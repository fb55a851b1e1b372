#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""orchestrator/gemini_client.py에 대한 단위 테스트"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import types

from . import gemini_client as gc
from .conversation import Conversation
from .errors import EmptyResponseError, MalformedResponseError, ModelAPIError
from .models import TextPart, ToolCallPart, ToolResultPart


def make_response(parts):
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=parts))]
    )


class TestBuildTools:
    def test_declares_four_functions(self):
        tools = gc.build_tools()
        assert len(tools) == 1
        names = [fd.name for fd in tools[0].function_declarations]
        assert names == ["get_files_info", "get_file_content", "write_file", "run_file"]


class TestParseResponse:
    def test_text_and_function_call_in_order(self):
        response = make_response([
            types.Part(text="Checking."),
            types.Part(function_call=types.FunctionCall(name="get_files_info", args={"directory": "."})),
        ])
        parsed = gc.parse_response(response)
        assert parsed.parts[0] == TextPart(text="Checking.")
        assert isinstance(parsed.parts[1], ToolCallPart)
        assert parsed.parts[1].name == "get_files_info"
        assert parsed.parts[1].arguments == {"directory": "."}

    def test_function_call_without_args(self):
        response = make_response([types.Part(function_call=types.FunctionCall(name="get_files_info"))])
        assert gc.parse_response(response).function_calls[0].arguments == {}

    def test_empty_text_parts_are_skipped(self):
        response = make_response([
            types.Part(text=""),
            types.Part(function_call=types.FunctionCall(name="get_files_info", args={})),
        ])
        parsed = gc.parse_response(response)
        assert parsed.text_parts == []
        assert [p.name for p in parsed.function_calls] == ["get_files_info"]

    def test_thought_parts_are_skipped(self):
        response = make_response([types.Part(text="thinking...", thought=True), types.Part(text="answer")])
        assert gc.parse_response(response).text_parts == ["answer"]

    def test_thought_signature_preserved(self):
        response = make_response([
            types.Part(
                function_call=types.FunctionCall(name="get_files_info", args={}),
                thought_signature=b"sig",
            )
        ])
        assert gc.parse_response(response).function_calls[0].signature == b"sig"

    def test_no_candidates(self):
        with pytest.raises(EmptyResponseError):
            gc.parse_response(types.GenerateContentResponse(candidates=[]))
        with pytest.raises(EmptyResponseError):
            gc.parse_response(None)

    def test_candidate_without_content(self):
        response = types.GenerateContentResponse(candidates=[types.Candidate()])
        with pytest.raises(MalformedResponseError):
            gc.parse_response(response)


class TestToContents:
    def test_roles_and_merged_tool_results(self):
        conv = Conversation("list and read")
        conv.add_model_parts([
            ToolCallPart(name="get_files_info"),
            ToolCallPart(name="get_file_content", arguments={"file_path": "a.txt"}),
        ])
        conv.add_tool_result(ToolResultPart(name="get_files_info", output="- a.txt"))
        conv.add_tool_result(ToolResultPart(name="get_file_content", error="file not found: a.txt"))
        conv.add_model_parts([TextPart(text="done")])

        contents = gc.to_contents(conv)

        assert [c.role for c in contents] == ["user", "model", "user", "model"]
        responses = contents[2].parts
        assert len(responses) == 2
        assert responses[0].function_response.name == "get_files_info"
        assert responses[0].function_response.response == {"result": "- a.txt"}
        assert responses[1].function_response.response == {"error": "file not found: a.txt"}

    def test_function_call_round_trip_keeps_signature(self):
        conv = Conversation("x")
        conv.add_model_parts([ToolCallPart(name="get_files_info", arguments={"directory": "."}, signature=b"s")])
        part = gc.to_contents(conv)[1].parts[0]
        assert part.function_call.name == "get_files_info"
        assert part.function_call.args == {"directory": "."}
        assert part.thought_signature == b"s"


class TestGeminiClient:
    def _client(self, generate):
        sdk = MagicMock()
        sdk.aio.models.generate_content = generate
        return gc.GeminiClient("key", "gemini-test", system_prompt="be brief", sdk_client=sdk)

    @pytest.mark.asyncio
    async def test_generate_sends_full_conversation(self):
        generate = AsyncMock(return_value=make_response([types.Part(text="hi")]))
        client = self._client(generate)

        result = await client.generate(Conversation("hello"))

        assert result.text_parts == ["hi"]
        kwargs = generate.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"][0].parts[0].text == "hello"
        assert kwargs["config"].system_instruction == "be brief"
        assert kwargs["config"].automatic_function_calling.disable is True
        assert len(kwargs["config"].tools[0].function_declarations) == 4

    @pytest.mark.asyncio
    async def test_sdk_error_becomes_model_api_error(self):
        client = self._client(AsyncMock(side_effect=RuntimeError("network down")))
        with pytest.raises(ModelAPIError, match="network down"):
            await client.generate(Conversation("hello"))

    @pytest.mark.asyncio
    async def test_empty_response(self):
        client = self._client(AsyncMock(return_value=SimpleNamespace(candidates=None)))
        with pytest.raises(EmptyResponseError):
            await client.generate(Conversation("hello"))
