#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# orchestrator/gemini_client.py

import logging
from typing import Any, Iterable, List, Optional

from google import genai
from google.genai import types

from shared.prompt_manager import DEFAULT_SYSTEM_PROMPT

from .conversation import Conversation
from .errors import EmptyResponseError, MalformedResponseError, ModelAPIError
from .models import ModelResponse, TextPart, ToolCallPart, ToolResultPart, Turn
from .tool_registry import TOOL_DECLARATIONS

logger = logging.getLogger(__name__)


def build_tools() -> List[types.Tool]:
    """정적 도구 선언을 Gemini Tool 객체로 변환합니다."""
    return [
        types.Tool(
            function_declarations=[types.FunctionDeclaration(**decl) for decl in TOOL_DECLARATIONS]
        )
    ]


def _part_to_gemini(part) -> types.Part:
    if isinstance(part, TextPart):
        return types.Part(text=part.text)
    if isinstance(part, ToolCallPart):
        return types.Part(
            function_call=types.FunctionCall(name=part.name, args=dict(part.arguments)),
            thought_signature=part.signature,
        )
    if isinstance(part, ToolResultPart):
        payload = {"error": part.error} if part.is_error else {"result": part.output or ""}
        return types.Part.from_function_response(name=part.name, response=payload)
    raise TypeError(f"unsupported conversation part: {type(part).__name__}")


def to_contents(turns: Iterable[Turn]) -> List[types.Content]:
    """
    대화 기록 전체를 Gemini Content 리스트로 변환합니다.
    도구 결과는 user 역할로 보내며, 연속된 도구 결과 턴은 하나의 Content 로 합칩니다.
    """
    contents: List[types.Content] = []
    previous_role: Optional[str] = None
    for turn in turns:
        parts = [_part_to_gemini(p) for p in turn.parts]
        if turn.role == "tool" and previous_role == "tool":
            contents[-1].parts.extend(parts)
        else:
            role = "model" if turn.role == "model" else "user"
            contents.append(types.Content(role=role, parts=parts))
        previous_role = turn.role
    return contents


def parse_response(response: Any) -> ModelResponse:
    """Gemini 응답을 TextPart / ToolCallPart 순서 리스트로 변환합니다.

    Raises:
        EmptyResponseError: 후보(candidate)가 없을 때.
        MalformedResponseError: 후보에 content/parts 가 없을 때.
    """
    candidates = getattr(response, "candidates", None) if response is not None else None
    if not candidates:
        raise EmptyResponseError("empty response from API")

    content = getattr(candidates[0], "content", None)
    if content is None or content.parts is None:
        raise MalformedResponseError("malformed response: candidate has no content")

    parts = []
    for part in content.parts:
        if part.function_call is not None:
            fc = part.function_call
            parts.append(ToolCallPart(
                name=fc.name or "",
                arguments=dict(fc.args or {}),
                signature=getattr(part, "thought_signature", None),
            ))
        elif part.text and not getattr(part, "thought", False):
            parts.append(TextPart(text=part.text))
    return ModelResponse(parts=parts)


class GeminiClient:
    """google-genai 를 사용하는 모델 클라이언트. 재시도는 하지 않습니다."""

    def __init__(
        self,
        api_key: str,
        model: str,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        sdk_client: Optional[genai.Client] = None,
    ):
        self.model = model
        self.system_prompt = system_prompt
        self._client = sdk_client if sdk_client is not None else genai.Client(api_key=api_key)
        self._config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            tools=build_tools(),
            automatic_function_calling=types.AutomaticFunctionCallingConfig(disable=True),
        )

    async def generate(self, conversation: Conversation) -> ModelResponse:
        """대화 전체와 도구 선언을 보내고 모델 응답을 돌려받습니다.

        Raises:
            ModelAPIError: SDK 또는 네트워크 오류.
            EmptyResponseError, MalformedResponseError: 응답 형식 오류.
        """
        contents = to_contents(conversation)
        logger.debug(f"Gemini 호출: model={self.model}, contents={len(contents)}")
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=self._config,
            )
        except Exception as e:
            logger.error(f"Gemini API 호출 실패: {e}")
            raise ModelAPIError(f"API call failed: {e}") from e

        return parse_response(response)
