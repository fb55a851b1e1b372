#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""orchestrator/conversation.py 에 대한 단위 테스트"""

from .conversation import Conversation
from .models import TextPart, ToolCallPart, ToolResultPart


class TestConversation:
    def test_starts_with_user_prompt(self):
        conv = Conversation("list files")
        assert len(conv) == 1
        assert conv.turns[0].role == "user"
        assert conv.turns[0].parts[0] == TextPart(text="list files")

    def test_empty_without_prompt(self):
        assert len(Conversation()) == 0

    def test_append_order(self):
        conv = Conversation("hi")
        call = ToolCallPart(name="get_files_info")
        conv.add_model_parts([TextPart(text="looking"), call])
        conv.add_tool_result(ToolResultPart(name="get_files_info", output="- a.txt"))
        assert [t.role for t in conv] == ["user", "model", "tool"]
        assert conv.tool_calls() == [call]

    def test_turns_is_a_snapshot(self):
        conv = Conversation("hi")
        snapshot = conv.turns
        conv.add_user_text("more")
        assert len(snapshot) == 1
        assert len(conv.turns) == 2
