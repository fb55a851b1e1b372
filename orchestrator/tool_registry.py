#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# orchestrator/tool_registry.py
"""모델에게 노출되는 도구 스키마와, 함수 호출을 실제 도구로 연결하는 디스패처."""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from workspace_tools import code_execution, file_operations
from workspace_tools.diff_utils import generate_diff
from workspace_tools.path_resolver import resolve_path, to_display_path

from .errors import FileTooLargeError, MissingArgumentError, ToolPermissionError, UnknownToolError
from .models import AgentRunConfig

logger = logging.getLogger(__name__)

# (file_path, diff_text) -> 승인 여부
ConfirmWrite = Callable[[str, str], bool]

# 매 왕복마다 동일하게 전송되는 정적 도구 선언
TOOL_DECLARATIONS: Tuple[Dict[str, Any], ...] = (
    {
        "name": "get_files_info",
        "description": "Lists files in a specified directory relative to the working directory, providing file size and directory status",
        "parameters": {
            "type": "OBJECT",
            "properties": {
                "directory": {
                    "type": "STRING",
                    "description": "Directory path to list files from, relative to the working directory (default is the working directory itself)",
                },
            },
        },
    },
    {
        "name": "get_file_content",
        "description": "Retrieves the content of a specified file relative to the working directory",
        "parameters": {
            "type": "OBJECT",
            "properties": {
                "file_path": {
                    "type": "STRING",
                    "description": "Path of the file to read, relative to the working directory",
                },
            },
            "required": ["file_path"],
        },
    },
    {
        "name": "write_file",
        "description": "Writes content to a specified file or creates a new file relative to the working directory. Creates directories if they do not exist.",
        "parameters": {
            "type": "OBJECT",
            "properties": {
                "file_path": {
                    "type": "STRING",
                    "description": "Path of the file to write, relative to the working directory",
                },
                "content": {
                    "type": "STRING",
                    "description": "Content to write to the file as a string",
                },
            },
            "required": ["file_path", "content"],
        },
    },
    {
        "name": "run_file",
        "description": "Executes a specified file relative to the working directory (.go, .py, .sh, .js, .ts supported), with optional CLI args",
        "parameters": {
            "type": "OBJECT",
            "properties": {
                "file_path": {
                    "type": "STRING",
                    "description": "Path of the file to execute, relative to the working directory",
                },
                "args": {
                    "type": "ARRAY",
                    "items": {"type": "STRING"},
                    "description": "Optional array of string arguments to pass to the file",
                },
            },
            "required": ["file_path"],
        },
    },
)


def list_tools() -> List[Tuple[str, str, List[str]]]:
    """(이름, 설명, 필수 인자) 목록을 반환합니다."""
    return [
        (d["name"], d["description"], list(d["parameters"].get("required", [])))
        for d in TOOL_DECLARATIONS
    ]


# --- 인자 추출 헬퍼 ---

def _require_str(arguments: Mapping[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str):
        raise MissingArgumentError(f"missing {key} argument")
    return value


def _optional_str(arguments: Mapping[str, Any], key: str, default: str) -> str:
    value = arguments.get(key)
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        raise MissingArgumentError(f"{key} argument must be a string")
    return value


def _optional_args(arguments: Mapping[str, Any]) -> List[str]:
    value = arguments.get("args")
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise MissingArgumentError("args argument must be an array of strings")
    result = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, (str, int, float)):
            raise MissingArgumentError("args argument must be an array of strings")
        result.append(str(item))
    return result


# --- 도구별 핸들러 ---

def _handle_get_files_info(arguments, config: AgentRunConfig, confirm_write: Optional[ConfirmWrite]) -> str:
    directory = _optional_str(arguments, "directory", ".")
    return file_operations.get_files_info(config.work_dir, directory)


def _handle_get_file_content(arguments, config: AgentRunConfig, confirm_write: Optional[ConfirmWrite]) -> str:
    file_path = _require_str(arguments, "file_path")
    return file_operations.get_file_content(config.work_dir, file_path)


def _handle_write_file(arguments, config: AgentRunConfig, confirm_write: Optional[ConfirmWrite]) -> str:
    file_path = _require_str(arguments, "file_path")
    content = _require_str(arguments, "content")

    if config.restrict_writes:
        file_operations.validate_write_extension(file_path)

    if config.dry_run:
        size = len(content.encode("utf-8"))
        if size > file_operations.MAX_FILE_SIZE:
            raise FileTooLargeError(
                f"content too large ({size} bytes, max {file_operations.MAX_FILE_SIZE})"
            )
        target = resolve_path(config.work_dir, file_path)
        logger.info(f"[DRY RUN] write_file skipped: {file_path}")
        return f"[DRY RUN] Would write {size} bytes to {to_display_path(config.work_dir, target)}"

    if confirm_write is not None and not config.auto_apply:
        old = file_operations.read_existing(config.work_dir, file_path)
        diff_text = generate_diff(old, content, fromfile=f"a/{file_path}", tofile=f"b/{file_path}")
        if not confirm_write(file_path, diff_text):
            logger.info(f"write_file declined by user: {file_path}")
            raise ToolPermissionError(f"write to {file_path} was declined by the user")

    return file_operations.write_file(config.work_dir, file_path, content)


def _handle_run_file(arguments, config: AgentRunConfig, confirm_write: Optional[ConfirmWrite]) -> str:
    file_path = _require_str(arguments, "file_path")
    if not config.allow_run:
        raise ToolPermissionError("program execution not allowed (use --allow-run flag)")
    args = _optional_args(arguments)
    return code_execution.run_file(config.work_dir, file_path, args)


_HANDLERS: Dict[str, Callable[..., str]] = {
    "get_files_info": _handle_get_files_info,
    "get_file_content": _handle_get_file_content,
    "write_file": _handle_write_file,
    "run_file": _handle_run_file,
}


def dispatch(
    name: str,
    arguments: Optional[Mapping[str, Any]],
    config: AgentRunConfig,
    confirm_write: Optional[ConfirmWrite] = None,
) -> str:
    """함수 호출 하나를 해당 도구로 실행하고 결과 문자열을 반환합니다.

    Args:
        name: 모델이 요청한 함수 이름.
        arguments: 함수 인자 (문자열 키 → JSON 호환 값).
        config: 현재 실행의 불변 설정 (dry-run, 실행 허용 등 정책 포함).
        confirm_write: 주어지면, auto_apply 가 아닐 때 쓰기 전에 diff 와 함께 호출됩니다.

    Raises:
        UnknownToolError: 알 수 없는 함수 이름.
        MissingArgumentError: 필수 인자가 없거나 형식이 틀린 경우.
        ToolPermissionError: run_file 이 허용되지 않았거나 쓰기가 거절된 경우.
        ToolError: 그 밖의 도구 수준 오류.
    """
    handler = _HANDLERS.get(name)
    if handler is None:
        raise UnknownToolError(f"unknown function: {name}")
    if arguments is None:
        arguments = {}
    elif not isinstance(arguments, Mapping):
        raise MissingArgumentError(f"arguments for {name} must be an object")

    logger.info(f"Dispatching tool call: {name}")
    return handler(arguments, config, confirm_write)
