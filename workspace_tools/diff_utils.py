#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""파일 쓰기 전 사용자에게 보여줄 표시용 diff 생성."""

import difflib


def generate_diff(old_content: str, new_content: str, fromfile: str = "original", tofile: str = "modified") -> str:
    """두 텍스트의 unified diff 를 문자열로 반환합니다.

    표시 전용이며 변경이 없으면 빈 문자열을 반환합니다.

    Example:
        >>> print(generate_diff("a\\n", "b\\n"))
        --- original
        +++ modified
        @@ -1 +1 @@
        -a
        +b
    """
    lines = difflib.unified_diff(
        old_content.splitlines(keepends=True),
        new_content.splitlines(keepends=True),
        fromfile=fromfile,
        tofile=tofile,
    )
    out = []
    for line in lines:
        out.append(line if line.endswith("\n") else line + "\n")
    return "".join(out)


def summarize_diff(diff_text: str) -> tuple:
    """(추가된 줄 수, 삭제된 줄 수)"""
    added = removed = 0
    for line in diff_text.splitlines():
        if line.startswith("+") and not line.startswith("+++"):
            added += 1
        elif line.startswith("-") and not line.startswith("---"):
            removed += 1
    return added, removed
