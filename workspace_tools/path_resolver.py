#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""작업 디렉토리(샌드박스 루트) 밖으로의 경로 접근을 차단하는 경로 해석기."""

import logging
import os
from pathlib import Path
from typing import Union

from orchestrator.errors import PathTraversalError

logger = logging.getLogger(__name__)


def _canonical(path: Union[str, Path]) -> str:
    return os.path.normcase(os.path.realpath(path))


def is_within_root(root: Union[str, Path], path: Union[str, Path]) -> bool:
    """path 가 root 자신이거나 root 의 하위 경로인지 확인합니다.

    단순 문자열 접두사 비교가 아니라 경로 구분자 경계를 확인하므로
    루트가 '/work' 일 때 '/work2' 는 통과하지 못합니다.
    """
    root_c = _canonical(root)
    path_c = _canonical(path)
    if path_c == root_c:
        return True
    prefix = root_c if root_c.endswith(os.sep) else root_c + os.sep
    return path_c.startswith(prefix)


def resolve_path(root: Union[str, Path], candidate: Union[str, Path, None]) -> Path:
    """후보 경로를 루트 기준으로 해석하여 정규화된 절대 경로를 반환합니다.

    후보가 절대 경로면 루트와 결합해도 그대로 유지되며, 루트 밖이면 거부됩니다.
    대상이 실제로 존재할 필요는 없습니다.

    Args:
        root (Union[str, Path]): 샌드박스 루트 (절대 경로).
        candidate (Union[str, Path, None]): 모델 또는 사용자가 전달한 경로.
            비어 있으면 루트 자신을 의미합니다.

    Returns:
        Path: 루트 하위의 정규화된 절대 경로.

    Raises:
        PathTraversalError: 정규화된 경로가 루트 밖을 가리키거나 유효하지 않은 경우.

    Example:
        >>> resolve_path("/work", "src/../a.txt")
        PosixPath('/work/a.txt')
    """
    root_real = os.path.realpath(root)
    raw = "" if candidate is None else str(candidate)
    if "\x00" in raw:
        logger.error(f"Invalid path rejected: {raw!r}")
        raise PathTraversalError(f"invalid path: {raw!r}")

    try:
        resolved = os.path.realpath(os.path.join(root_real, raw))
    except (ValueError, OSError) as e:
        logger.error(f"Invalid path rejected: {raw!r}: {e}")
        raise PathTraversalError(f"invalid path: {raw!r}") from e

    if not is_within_root(root_real, resolved):
        logger.error(f"Path traversal blocked: {raw!r} resolves outside {root_real}")
        raise PathTraversalError(f"path traversal not allowed: {raw} is outside working directory")

    return Path(resolved)


def to_display_path(root: Union[str, Path], path: Union[str, Path]) -> str:
    """루트 기준 상대 경로 문자열을 반환합니다 (모델/사용자 메시지용)."""
    try:
        rel = os.path.relpath(os.path.realpath(path), os.path.realpath(root))
    except ValueError:
        return str(path)
    return "." if rel == "." else rel.replace(os.sep, "/")
