#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""orchestrator/agent.py 에 대한 단위 테스트 (가짜 모델 클라이언트 사용)"""

import pytest

from .agent import Agent, RunState
from .conversation import Conversation
from .errors import ModelAPIError
from .models import AgentRunConfig, ModelResponse, TextPart, ToolCallPart, ToolResultPart


class ScriptedClient:
    """미리 정한 응답을 차례대로 돌려주고, 받은 대화 스냅샷을 기록합니다."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.seen = []

    async def generate(self, conversation):
        self.seen.append(conversation.turns)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def text(t):
    return ModelResponse(parts=[TextPart(text=t)])


def call(name, **arguments):
    return ToolCallPart(name=name, arguments=arguments)


@pytest.fixture
def root(tmp_path):
    path = tmp_path / "work"
    path.mkdir()
    (path / "a.txt").write_text("hello")
    return path


class TestAgentRun:
    @pytest.mark.asyncio
    async def test_text_only_finishes_in_one_step(self, root):
        client = ScriptedClient([text("Hello!")])
        result = await Agent(AgentRunConfig(work_dir=root), client).run("hi")
        assert result.status == "done"
        assert result.steps == 1
        assert result.final_text == "Hello!"
        assert [t.role for t in result.turns] == ["user", "model"]

    @pytest.mark.asyncio
    async def test_tool_call_then_answer(self, root):
        client = ScriptedClient([
            ModelResponse(parts=[call("get_file_content", file_path="a.txt")]),
            text("The file says hello."),
        ])
        result = await Agent(AgentRunConfig(work_dir=root), client).run("read a.txt")

        assert result.status == "done"
        assert result.steps == 2
        tool_turn = result.turns[2]
        assert tool_turn.role == "tool"
        assert tool_turn.parts[0] == ToolResultPart(name="get_file_content", output="hello")
        # 두 번째 요청에는 도구 결과까지 포함된 대화 전체가 전송됨
        assert len(client.seen[1]) == 3

    @pytest.mark.asyncio
    async def test_tool_error_is_fed_back(self, root):
        client = ScriptedClient([
            ModelResponse(parts=[call("get_file_content", file_path="../secret")]),
            text("I cannot read that."),
        ])
        result = await Agent(AgentRunConfig(work_dir=root), client).run("read secret")

        assert result.status == "done"
        tool_result = result.turns[2].parts[0]
        assert tool_result.is_error
        assert "path traversal" in tool_result.error

    @pytest.mark.asyncio
    async def test_unknown_tool_is_fed_back(self, root):
        client = ScriptedClient([ModelResponse(parts=[call("format_disk")]), text("ok")])
        result = await Agent(AgentRunConfig(work_dir=root), client).run("x")
        assert result.turns[2].parts[0].error == "unknown function: format_disk"

    @pytest.mark.asyncio
    async def test_repeated_call_stops_without_another_round_trip(self, root):
        same = call("get_files_info", directory=".")
        client = ScriptedClient([
            ModelResponse(parts=[same]),
            ModelResponse(parts=[same]),
            text("never reached"),
        ])
        executed = []
        agent = Agent(AgentRunConfig(work_dir=root), client, on_tool_call=executed.append)
        result = await agent.run("list")

        assert result.status == "repeated_call"
        assert result.repeated_call == same
        assert result.steps == 2
        assert len(client.seen) == 2
        assert executed == [same]

    @pytest.mark.asyncio
    async def test_repeated_call_with_reordered_arguments(self, root):
        first = ToolCallPart(name="run_file", arguments={"file_path": "a.py", "args": ["1"]})
        second = ToolCallPart(name="run_file", arguments={"args": ["1"], "file_path": "a.py"})
        client = ScriptedClient([ModelResponse(parts=[first]), ModelResponse(parts=[second])])
        result = await Agent(AgentRunConfig(work_dir=root), client).run("run")
        assert result.status == "repeated_call"

    @pytest.mark.asyncio
    async def test_same_tool_different_arguments_is_allowed(self, root):
        (root / "b.txt").write_text("world")
        client = ScriptedClient([
            ModelResponse(parts=[call("get_file_content", file_path="a.txt")]),
            ModelResponse(parts=[call("get_file_content", file_path="b.txt")]),
            text("done"),
        ])
        result = await Agent(AgentRunConfig(work_dir=root), client).run("read both")
        assert result.status == "done"
        assert result.steps == 3

    @pytest.mark.asyncio
    async def test_step_budget_exhausted(self, root):
        client = ScriptedClient([
            ModelResponse(parts=[call("get_files_info", directory=f"d{i}")]) for i in range(5)
        ])
        result = await Agent(AgentRunConfig(work_dir=root, max_steps=3), client).run("loop")
        assert result.status == "step_budget_exhausted"
        assert result.steps == 3
        assert len(client.seen) == 3

    @pytest.mark.asyncio
    async def test_mixed_text_and_calls_in_order(self, root):
        client = ScriptedClient([
            ModelResponse(parts=[
                TextPart(text="Let me look."),
                call("get_files_info"),
                call("get_file_content", file_path="a.txt"),
            ]),
            text("Found it."),
        ])
        events = []
        agent = Agent(
            AgentRunConfig(work_dir=root),
            client,
            on_text=lambda t: events.append(("text", t)),
            on_tool_call=lambda c: events.append(("call", c.name)),
            on_tool_result=lambda r: events.append(("result", r.name)),
        )
        result = await agent.run("what is in a.txt")

        assert events == [
            ("text", "Let me look."),
            ("call", "get_files_info"),
            ("result", "get_files_info"),
            ("call", "get_file_content"),
            ("result", "get_file_content"),
            ("text", "Found it."),
        ]
        assert result.output == ["Let me look.", "Found it."]
        assert [t.role for t in result.turns] == ["user", "model", "tool", "tool", "model"]

    @pytest.mark.asyncio
    async def test_model_error_propagates(self, root):
        client = ScriptedClient([ModelAPIError("API call failed: boom")])
        with pytest.raises(ModelAPIError):
            await Agent(AgentRunConfig(work_dir=root), client).run("hi")

    @pytest.mark.asyncio
    async def test_runs_do_not_share_state(self, root):
        same = call("get_files_info")
        client = ScriptedClient([ModelResponse(parts=[same]), text("a"), ModelResponse(parts=[same]), text("b")])
        agent = Agent(AgentRunConfig(work_dir=root), client)
        first = await agent.run("one")
        second = await agent.run("two")
        assert first.status == second.status == "done"
        assert second.turns[0].parts[0].text == "two"

    @pytest.mark.asyncio
    async def test_dry_run_write_reported_to_model(self, root):
        client = ScriptedClient([
            ModelResponse(parts=[call("write_file", file_path="new.txt", content="abc")]),
            text("ok"),
        ])
        result = await Agent(AgentRunConfig(work_dir=root, dry_run=True), client).run("write")
        assert result.turns[2].parts[0].output == "[DRY RUN] Would write 3 bytes to new.txt"
        assert not (root / "new.txt").exists()


class TestRunState:
    def test_mark_seen(self):
        state = RunState(conversation=Conversation("x"))
        c = call("get_files_info")
        assert state.mark_seen(c) is True
        assert state.mark_seen(c) is False
