#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
code_execution.py: 샌드박스 루트 안의 스크립트 파일을 실행하는 도구.

허용된 확장자의 파일만 정해진 인터프리터로 실행하며, 작업 디렉토리는
항상 샌드박스 루트입니다. 자식 프로세스는 별도 세션(프로세스 그룹)에서
시작되어, 시간 초과 시 손자 프로세스까지 함께 종료됩니다. 출력은 임시 파일로
받으므로 시간 제한은 출력 핸들이 아니라 자식 프로세스의 종료 기준입니다.
"""

import logging
import os
import signal
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Union

from orchestrator.errors import (
    ExecutionFailedError,
    ExecutionTimeoutError,
    ExtensionNotAllowedError,
    PathNotFoundError,
    TargetIsDirectoryError,
)
from .path_resolver import resolve_path

logger = logging.getLogger(__name__)

# 실행 최대 대기 시간(초)
RUN_TIMEOUT_SECONDS = 30

# 확장자 → 인터프리터 명령. 대상 파일과 인자가 뒤에 그대로 붙습니다.
RUN_INTERPRETERS: Dict[str, List[str]] = {
    ".go": ["go", "run"],
    ".py": [sys.executable or "python3"],
    ".sh": ["bash"],
    ".js": ["node"],
    ".ts": ["ts-node"],
}


def build_command(target: Path, args: Optional[List[str]] = None) -> List[str]:
    """실행할 명령어 리스트를 만듭니다.

    Raises:
        ExtensionNotAllowedError: 확장자가 허용 목록에 없을 경우.
    """
    ext = target.suffix
    interpreter = RUN_INTERPRETERS.get(ext)
    if interpreter is None:
        raise ExtensionNotAllowedError(
            f"file type not allowed: {ext or '(none)'} (allowed: {', '.join(RUN_INTERPRETERS)})"
        )
    return [*interpreter, str(target), *(args or [])]


def _kill_process_group(process: subprocess.Popen) -> None:
    if hasattr(os, "killpg"):
        try:
            os.killpg(os.getpgid(process.pid), signal.SIGKILL)
        except OSError:
            pass
    process.kill()


def run_file(
    root: Union[str, Path],
    file_path: str,
    args: Optional[List[str]] = None,
    timeout: float = RUN_TIMEOUT_SECONDS,
) -> str:
    """허용된 스크립트 파일을 실행하고 표준 출력(+표준 에러)을 반환합니다.

    Args:
        root (Union[str, Path]): 샌드박스 루트. 자식 프로세스의 작업 디렉토리가 됩니다.
        file_path (str): 루트 기준 실행 파일 경로.
        args (Optional[List[str]]): 파일 뒤에 그대로 전달할 인자.
        timeout (float): 실행 시작부터의 최대 대기 시간(초). 기본값 30.

    Returns:
        str: 캡처된 출력. 출력이 없으면 '(no output)'.

    Raises:
        PathTraversalError: 경로가 루트 밖일 경우.
        ExtensionNotAllowedError: 허용되지 않은 확장자. 프로세스를 띄우지 않습니다.
        PathNotFoundError: 파일이 없을 경우.
        ExecutionTimeoutError: 시간 초과. 프로세스 그룹은 강제 종료됩니다.
        ExecutionFailedError: 0 이 아닌 종료 코드 또는 실행 실패.

    Example:
        >>> run_file("/work", "hello.py")
        'Hello World\\n'
    """
    target = resolve_path(root, file_path)
    command = build_command(target, args)

    if not target.exists():
        raise PathNotFoundError(f"file not found: {file_path}")
    if target.is_dir():
        raise TargetIsDirectoryError(f"cannot execute a directory: {file_path}")

    logger.info(f"명령어 실행: {' '.join(command)} (작업 디렉토리: {root})")
    # 대기는 출력 핸들의 EOF 가 아니라 자식 프로세스의 종료에만 묶임
    with tempfile.TemporaryFile() as capture:
        try:
            process = subprocess.Popen(
                command,
                cwd=str(root),
                stdin=subprocess.DEVNULL,
                stdout=capture,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
        except OSError as e:
            logger.error(f"명령어 '{command[0]}'를 실행할 수 없습니다: {e}")
            raise ExecutionFailedError(f"execution failed: {e}") from e

        try:
            process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            _kill_process_group(process)
            process.wait()
            logger.error(f"명령어 시간 초과: {' '.join(command)}")
            raise ExecutionTimeoutError(f"execution timeout ({timeout:g} seconds)")

        capture.seek(0)
        output = capture.read().decode("utf-8", errors="replace")

    if process.returncode != 0:
        logger.error(f"명령어 실행 실패 (종료 코드 {process.returncode}): {' '.join(command)}")
        detail = output.strip()
        message = f"execution failed: exit status {process.returncode}"
        if detail:
            message = f"{message}\n{detail}"
        raise ExecutionFailedError(message, exit_code=process.returncode, output=output)

    logger.info(f"명령어 성공: {' '.join(command)}")
    return output if output else "(no output)"
