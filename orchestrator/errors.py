#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# orchestrator/errors.py
"""에이전트 실행 중 발생하는 오류 계층.

ToolError 계열은 도구 수준 오류로, 에이전트 루프가 잡아서 텍스트 결과로
모델에게 되돌려줍니다. ModelClientError 계열은 실행 자체를 중단시키는
치명적 오류로, 호출자에게 그대로 전파됩니다.
"""


class AgentError(Exception):
    """모든 nova-horizon 오류의 최상위 클래스."""

    code = "AgentError"


class ConfigError(AgentError):
    """API 키 또는 설정 파일을 불러올 수 없을 때."""

    code = "ConfigError"


# --- 도구 수준 오류 (대화에 결과로 기록됨) ---

class ToolError(AgentError):
    code = "ToolError"


class PathTraversalError(ToolError):
    code = "PathTraversal"


class PathNotFoundError(ToolError):
    code = "NotFound"


class TargetIsDirectoryError(ToolError):
    code = "IsADirectory"


class FileTooLargeError(ToolError):
    code = "TooLarge"


class ExtensionNotAllowedError(ToolError):
    code = "ExtensionNotAllowed"


class ExecutionTimeoutError(ToolError):
    code = "ExecutionTimeout"


class ExecutionFailedError(ToolError):
    code = "ExecutionFailed"

    def __init__(self, message: str, exit_code: int | None = None, output: str = ""):
        super().__init__(message)
        self.exit_code = exit_code
        self.output = output


class ToolPermissionError(ToolError):
    code = "PermissionDenied"


class MissingArgumentError(ToolError):
    code = "MissingArgument"


class UnknownToolError(ToolError):
    code = "UnknownTool"


class ToolIOError(ToolError):
    code = "IOError"


# --- 모델 호출 오류 (실행 중단) ---

class ModelClientError(AgentError):
    code = "ModelClientError"


class ModelAPIError(ModelClientError):
    code = "APIError"


class EmptyResponseError(ModelClientError):
    code = "EmptyResponse"


class MalformedResponseError(ModelClientError):
    code = "MalformedResponse"
