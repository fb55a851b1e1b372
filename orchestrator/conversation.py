#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# orchestrator/conversation.py

from typing import Iterator, List, Tuple

from .models import Part, TextPart, ToolCallPart, ToolResultPart, Turn


class Conversation:
    """
    한 번의 실행 동안 모델에게 매 왕복마다 전송되는 대화 기록.
    항목은 추가만 가능하며 순서가 곧 모델의 컨텍스트입니다.
    """

    def __init__(self, prompt: str | None = None):
        self._turns: List[Turn] = []
        if prompt is not None:
            self.add_user_text(prompt)

    def append(self, turn: Turn) -> None:
        self._turns.append(turn)

    def add_user_text(self, text: str) -> Turn:
        turn = Turn(role="user", parts=[TextPart(text=text)])
        self.append(turn)
        return turn

    def add_model_parts(self, parts: List[Part]) -> Turn:
        turn = Turn(role="model", parts=list(parts))
        self.append(turn)
        return turn

    def add_tool_result(self, result: ToolResultPart) -> Turn:
        turn = Turn(role="tool", parts=[result])
        self.append(turn)
        return turn

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    def tool_calls(self) -> List[ToolCallPart]:
        return [p for t in self._turns for p in t.parts if isinstance(p, ToolCallPart)]

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))
