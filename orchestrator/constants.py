#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# orchestrator/constants.py
"""프로젝트 전역 상수 정의.

이 파일에 정의된 상수들은 CLI, 설정 로더, 에이전트 루프에서 공유됩니다.
도구별 제한값(파일 크기, 실행 시간 등)은 workspace_tools 각 모듈에 있습니다.
"""

from pathlib import Path
from typing import Final

APP_NAME: Final[str] = "nova-horizon"

# 기본 Gemini 모델
DEFAULT_MODEL: Final[str] = "gemini-2.5-flash"

# 한 번의 실행에서 허용되는 최대 모델 왕복 횟수
DEFAULT_MAX_STEPS: Final[int] = 10

# API 키 환경변수 (primary → fallback 순서로 조회)
API_KEY_ENV: Final[str] = "GEMINI_API_KEY"
API_KEY_FALLBACK_ENV: Final[str] = "GOOGLE_API_KEY"
MODEL_ENV: Final[str] = "NOVA_HORIZON_MODEL"

# 사용자 설정 디렉토리 (~/.config/nova-horizon)
CONFIG_DIR: Final[Path] = Path.home() / ".config" / APP_NAME
CONFIG_FILE: Final[Path] = CONFIG_DIR / "config.toml"
PROMPTS_DIR: Final[Path] = CONFIG_DIR / "prompts"

LOG_FORMAT: Final[str] = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
