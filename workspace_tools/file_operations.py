#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
샌드박스 루트 안에서 동작하는 파일 도구 모음 (목록 조회, 읽기, 쓰기).

모든 함수는 경로 인자를 먼저 path_resolver.resolve_path 로 해석하며,
실패는 orchestrator.errors 의 ToolError 하위 예외로 보고합니다.
"""

import logging
import os
import stat
from pathlib import Path
from typing import Union

from orchestrator.errors import (
    ExtensionNotAllowedError,
    FileTooLargeError,
    PathNotFoundError,
    TargetIsDirectoryError,
    ToolIOError,
)
from .path_resolver import resolve_path, to_display_path

logger = logging.getLogger(__name__)

# 읽기/쓰기 공통 최대 크기 (bytes)
MAX_FILE_SIZE = 100_000

# 쓰기 허용 확장자 목록. 실행 허용 목록(code_execution.RUN_INTERPRETERS)과는 별개로 관리됩니다.
WRITE_EXTENSIONS = (
    ".go", ".py", ".sh", ".js", ".ts",
    ".md", ".txt", ".json", ".yaml", ".yml", ".toml", ".env",
)

Root = Union[str, Path]


def validate_write_extension(file_path: str) -> None:
    """쓰기 허용 확장자인지 확인합니다.

    Raises:
        ExtensionNotAllowedError: 확장자가 WRITE_EXTENSIONS 에 없을 경우.
    """
    ext = Path(file_path).suffix
    # '.env' 처럼 점으로 시작하는 파일은 suffix 가 비어 있음
    if not ext and Path(file_path).name.startswith("."):
        ext = Path(file_path).name
    if ext not in WRITE_EXTENSIONS:
        raise ExtensionNotAllowedError(
            f"file extension {ext or '(none)'} not allowed for writing (allowed: {', '.join(WRITE_EXTENSIONS)})"
        )


def get_files_info(root: Root, directory: str | None = ".") -> str:
    """디렉토리의 바로 아래 항목들의 이름, 크기, 디렉토리 여부를 나열합니다.

    Args:
        root (Union[str, Path]): 샌드박스 루트.
        directory (str, optional): 루트 기준 디렉토리 경로. 비어 있으면 '.'.

    Returns:
        str: 이름순으로 정렬된 한 줄 한 항목의 보고서.
            예: "- a.txt: file_size=10 bytes, is_dir=false"

    Raises:
        PathTraversalError: 경로가 루트 밖일 경우.
        PathNotFoundError: 디렉토리가 없을 경우.
        ToolIOError: 디렉토리가 아니거나 읽을 수 없는 경우.
    """
    directory = directory or "."
    logger.info(f"Listing directory: {directory}")
    target = resolve_path(root, directory)

    if not target.exists():
        raise PathNotFoundError(f"directory not found: {directory}")
    if not target.is_dir():
        raise ToolIOError(f"failed to read directory: {directory} is not a directory")

    try:
        with os.scandir(target) as it:
            entries = sorted(it, key=lambda e: e.name)
            lines = []
            for entry in entries:
                size = entry.stat(follow_symlinks=False).st_size
                is_dir = entry.is_dir()
                lines.append(f"- {entry.name}: file_size={size} bytes, is_dir={str(is_dir).lower()}")
    except OSError as e:
        logger.error(f"Failed to list directory {directory}: {e}")
        raise ToolIOError(f"failed to read directory: {e}") from e

    logger.info(f"Found {len(lines)} items in {directory}")
    if not lines:
        return "(empty directory)"
    return "\n".join(lines)


def get_file_content(root: Root, file_path: str) -> str:
    """파일 전체 내용을 텍스트로 반환합니다.

    Raises:
        PathTraversalError, PathNotFoundError, TargetIsDirectoryError,
        FileTooLargeError, ToolIOError
    """
    logger.info(f"Attempting to read text file: {file_path}")
    target = resolve_path(root, file_path)

    try:
        st = target.stat()
    except FileNotFoundError as e:
        raise PathNotFoundError(f"file not found: {file_path}") from e
    except OSError as e:
        raise ToolIOError(f"failed to stat file {file_path}: {e}") from e

    if stat.S_ISDIR(st.st_mode):
        raise TargetIsDirectoryError(f"cannot read directory as file: {file_path}")
    if not stat.S_ISREG(st.st_mode):
        raise ToolIOError(f"not a regular file: {file_path}")
    if st.st_size > MAX_FILE_SIZE:
        raise FileTooLargeError(f"file too large ({st.st_size} bytes, max {MAX_FILE_SIZE})")

    try:
        content = target.read_bytes().decode("utf-8", errors="replace")
    except OSError as e:
        logger.error(f"Failed to read file {file_path}: {e}")
        raise ToolIOError(f"failed to read file: {e}") from e

    logger.info(f"Successfully read {st.st_size} bytes from {target}")
    return content


def write_file(root: Root, file_path: str, content: str) -> str:
    """파일에 내용을 씁니다. 상위 디렉토리를 생성하고 기존 파일은 덮어씁니다.

    크기 검사는 파일 시스템에 접근하기 전에 수행되므로,
    한도를 넘는 내용은 어떤 파일도 만들지 않습니다.

    Returns:
        str: 기록한 바이트 수를 포함한 확인 메시지.
    """
    logger.info(f"Attempting to write text file: {file_path}")
    data = content.encode("utf-8")
    if len(data) > MAX_FILE_SIZE:
        raise FileTooLargeError(f"content too large ({len(data)} bytes, max {MAX_FILE_SIZE})")

    target = resolve_path(root, file_path)
    if target.is_dir():
        raise TargetIsDirectoryError(f"cannot write file, path is a directory: {file_path}")
    if target.exists() and not target.is_file():
        raise ToolIOError(f"cannot write file, not a regular file: {file_path}")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as e:
        logger.error(f"Failed to write file {file_path}: {e}")
        raise ToolIOError(f"failed to write file: {e}") from e

    logger.info(f"Successfully wrote {len(data)} bytes to {target}")
    return f"File {to_display_path(root, target)} written successfully with {len(data)} bytes"


def read_existing(root: Root, file_path: str) -> str:
    """쓰기 미리보기용: 기존 파일 내용, 없거나 읽을 수 없으면 빈 문자열."""
    try:
        return get_file_content(root, file_path)
    except (PathNotFoundError, TargetIsDirectoryError, FileTooLargeError, ToolIOError):
        return ""
