#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# shared/prompt_manager.py

from pathlib import Path
from typing import Optional

from orchestrator.constants import PROMPTS_DIR

DEFAULT_SYSTEM_PROMPT = """You are a helpful AI coding agent.

When a user asks a question or makes a request, make a function call plan. You can perform the following operations:

- List files and directories
- Read file contents
- Write or modify files
- Execute scripts and programs

All paths you provide should be relative to the working directory. You do not need to specify the working directory in your function calls as it is automatically injected for security reasons.

Follow these guidelines:
1. Make function calls to gather information first
2. Plan your approach before making changes
3. Provide clear feedback about what you're doing
4. Show diffs before writing files
5. Stop if you detect infinite loops (same call multiple times)"""


class PromptManager:
    """
    시스템 프롬프트를 파일 시스템에서 로드하는 유틸리티 클래스.
    기본 디렉토리는 ~/.config/nova-horizon/prompts 이며, 처음 사용할 때 생성됩니다.
    """
    def __init__(self, prompts_dir: Optional[Path] = None):
        self.base_dir = Path(prompts_dir) if prompts_dir else PROMPTS_DIR

    def _ensure_defaults(self):
        """디렉토리가 없으면 만들고 기본 프롬프트 파일을 생성"""
        if self.base_dir.exists():
            return
        self.base_dir.mkdir(parents=True, exist_ok=True)
        (self.base_dir / "default.txt").write_text(DEFAULT_SYSTEM_PROMPT, encoding="utf-8")

    def load(self, name: str, **kwargs) -> str:
        """
        프롬프트 파일을 읽어옵니다. **kwargs가 있으면 {key} 포맷팅을 수행합니다.

        Args:
            name (str): 파일명 (확장자 포함 또는 제외, 예: 'reviewer' or 'reviewer.txt')
            **kwargs: 프롬프트 내의 플레이스홀더를 채울 변수들.

        Returns:
            str: 로드된 (그리고 포맷팅된) 프롬프트 문자열.
                 파일이 없거나 읽을 수 없으면 '[System Warning ...]' / '[System Error ...]' 문자열.
        """
        if not name.endswith(".txt"):
            name += ".txt"

        try:
            self._ensure_defaults()
        except OSError as e:
            return f"[System Error: Failed to create prompts directory '{self.base_dir}': {e}]"

        file_path = self.base_dir / name
        if not file_path.exists():
            return f"[System Warning: Prompt file '{name}' not found]"

        try:
            content = file_path.read_text(encoding="utf-8")
            if kwargs:
                try:
                    return content.format(**kwargs)
                except KeyError as e:
                    return f"{content}\n\n[System Warning: Missing format key {e}]"
            return content
        except OSError as e:
            return f"[System Error: Failed to load prompt '{name}': {e}]"

    @staticmethod
    def is_error(content: str) -> bool:
        return content.startswith("[System Warning") or content.startswith("[System Error")


# 전역 인스턴스 (필요시 사용)
prompt_manager = PromptManager()
