#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# orchestrator/agent.py
"""
에이전트 루프: 모델 호출 → 함수 호출 디스패치 → 결과를 대화에 추가, 를
함수 호출이 없는 응답, 반복 호출 감지, 단계 한도 소진 중 하나가 일어날 때까지 반복합니다.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Set

from .conversation import Conversation
from .errors import ToolError
from .models import AgentRunConfig, ModelResponse, RunResult, TextPart, ToolCallPart, ToolResultPart
from .tool_registry import ConfirmWrite, dispatch

logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    async def generate(self, conversation: Conversation) -> ModelResponse:
        ...


@dataclass
class RunState:
    """한 번의 실행에만 속하는 가변 상태. 실행 간에 공유되지 않습니다."""
    conversation: Conversation
    seen_calls: Set[str] = field(default_factory=set)
    steps: int = 0
    output: List[str] = field(default_factory=list)

    def mark_seen(self, call: ToolCallPart) -> bool:
        """처음 보는 호출이면 기록하고 True, 이미 본 호출이면 False."""
        signature = call.call_signature()
        if signature in self.seen_calls:
            return False
        self.seen_calls.add(signature)
        return True


class Agent:
    """
    Gemini 함수 호출 기반 에이전트.

    콜백은 모두 선택 사항이며 CLI 가 출력에 사용합니다:
      on_text(text), on_tool_call(call), on_tool_result(result), on_step(step, max_steps)
    """

    def __init__(
        self,
        config: AgentRunConfig,
        client: ModelClient,
        on_text: Optional[Callable[[str], None]] = None,
        on_tool_call: Optional[Callable[[ToolCallPart], None]] = None,
        on_tool_result: Optional[Callable[[ToolResultPart], None]] = None,
        on_step: Optional[Callable[[int, int], None]] = None,
        confirm_write: Optional[ConfirmWrite] = None,
    ):
        self.config = config
        self.client = client
        self.on_text = on_text
        self.on_tool_call = on_tool_call
        self.on_tool_result = on_tool_result
        self.on_step = on_step
        self.confirm_write = confirm_write

    def execute_call(self, call: ToolCallPart) -> ToolResultPart:
        """함수 호출 하나를 실행합니다. 도구 오류는 결과로 변환되어 반환됩니다."""
        try:
            output = dispatch(call.name, call.arguments, self.config, self.confirm_write)
        except ToolError as e:
            logger.warning(f"Error executing {call.name} [{e.code}]: {e}")
            return ToolResultPart(name=call.name, error=str(e))
        return ToolResultPart(name=call.name, output=output)

    async def run(self, prompt: str) -> RunResult:
        """프롬프트 하나에 대해 실행을 끝까지 진행합니다.

        Raises:
            ModelClientError: 모델 호출 실패, 빈 응답, 형식 오류 (실행 중단).
        """
        state = RunState(conversation=Conversation(prompt))
        max_steps = self.config.max_steps

        while state.steps < max_steps:
            state.steps += 1
            logger.debug(f"[Step {state.steps}/{max_steps}]")
            if self.on_step:
                self.on_step(state.steps, max_steps)

            response = await self.client.generate(state.conversation)
            state.conversation.add_model_parts(response.parts)

            has_function_call = False
            for part in response.parts:
                if isinstance(part, ToolCallPart):
                    has_function_call = True
                    if not state.mark_seen(part):
                        logger.warning(f"Model is looping on the same function call ({part.name}). Aborting.")
                        return self._result("repeated_call", state, repeated=part)

                    if self.on_tool_call:
                        self.on_tool_call(part)
                    result = self.execute_call(part)
                    state.conversation.add_tool_result(result)
                    if self.on_tool_result:
                        self.on_tool_result(result)

                elif isinstance(part, TextPart) and part.text:
                    state.output.append(part.text)
                    if self.on_text:
                        self.on_text(part.text)

            if not has_function_call:
                logger.info(f"Run finished after {state.steps} step(s)")
                return self._result("done", state)

        logger.warning(f"Reached maximum steps ({max_steps})")
        return self._result("step_budget_exhausted", state)

    @staticmethod
    def _result(status: str, state: RunState, repeated: Optional[ToolCallPart] = None) -> RunResult:
        return RunResult(
            status=status,
            steps=state.steps,
            output=list(state.output),
            turns=list(state.conversation.turns),
            repeated_call=repeated,
        )
