#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# orchestrator/models.py

import json
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DEFAULT_MAX_STEPS, DEFAULT_MODEL


class Credentials(BaseModel):
    """설정 로더가 돌려주는 API 키와 모델 식별자"""
    model_config = ConfigDict(frozen=True)

    api_key: str
    model: str = DEFAULT_MODEL


class AgentRunConfig(BaseModel):
    """한 번의 실행 동안 변경되지 않는 에이전트 설정"""
    model_config = ConfigDict(frozen=True)

    work_dir: Path
    max_steps: int = Field(default=DEFAULT_MAX_STEPS, ge=1)
    dry_run: bool = False
    allow_run: bool = False
    auto_apply: bool = False
    verbose: bool = False
    restrict_writes: bool = False
    model: str = DEFAULT_MODEL

    @field_validator("work_dir")
    @classmethod
    def _resolve_work_dir(cls, value: Path) -> Path:
        resolved = Path(value).expanduser().resolve()
        if not resolved.is_dir():
            raise ValueError(f"work_dir must be an existing directory: {resolved}")
        return resolved


# --- 대화 구성 요소 (kind 로 구분되는 태그드 유니온) ---

class TextPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class ToolCallPart(BaseModel):
    """모델이 요청한 단일 함수 호출"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["tool_call"] = "tool_call"
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    # Gemini thought signature; 다음 왕복에 그대로 돌려보내야 함
    signature: Optional[bytes] = None

    def call_signature(self) -> str:
        """반복 호출 감지용 정규화 키 (이름 + 정렬된 JSON 인자)."""
        serialized = json.dumps(self.arguments, sort_keys=True, ensure_ascii=False, default=str)
        return f"{self.name}:{serialized}"


class ToolResultPart(BaseModel):
    """디스패처 실행 결과. output 또는 error 중 하나만 채워집니다."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["tool_result"] = "tool_result"
    name: str
    output: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def text(self) -> str:
        return f"Error: {self.error}" if self.is_error else (self.output or "")


Part = Annotated[Union[TextPart, ToolCallPart, ToolResultPart], Field(discriminator="kind")]


class Turn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "model", "tool"]
    parts: List[Part]


class ModelResponse(BaseModel):
    """모델 한 번의 응답. parts 는 모델이 내보낸 순서를 유지합니다."""
    model_config = ConfigDict(frozen=True)

    parts: List[Annotated[Union[TextPart, ToolCallPart], Field(discriminator="kind")]] = Field(default_factory=list)

    @property
    def text_parts(self) -> List[str]:
        return [p.text for p in self.parts if isinstance(p, TextPart)]

    @property
    def function_calls(self) -> List[ToolCallPart]:
        return [p for p in self.parts if isinstance(p, ToolCallPart)]


class RunResult(BaseModel):
    """에이전트 실행의 최종 결과"""
    status: Literal["done", "repeated_call", "step_budget_exhausted"]
    steps: int
    output: List[str] = Field(default_factory=list)
    turns: List[Turn] = Field(default_factory=list)
    repeated_call: Optional[ToolCallPart] = None

    @property
    def final_text(self) -> str:
        return "\n".join(self.output)
