#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# orchestrator/config.py

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .constants import (
    API_KEY_ENV,
    API_KEY_FALLBACK_ENV,
    CONFIG_FILE,
    DEFAULT_MAX_STEPS,
    DEFAULT_MODEL,
    MODEL_ENV,
)
from .errors import ConfigError
from .models import AgentRunConfig, Credentials

load_dotenv()

logger = logging.getLogger(__name__)


# --- 환경변수 헬퍼 ---

def get_env_with_fallback(primary: str, fallback: str) -> str:
    """환경변수를 primary → fallback 순서로 조회합니다."""
    return os.getenv(primary) or os.getenv(fallback) or ""


def load_config_file(path: Path = CONFIG_FILE) -> Dict[str, Any]:
    """TOML 설정 파일을 읽습니다. 파일이 없으면 빈 dict 를 반환합니다."""
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"failed to parse config file {path}: {e}") from e
    logger.info(f"Config loaded from {path}")
    return data


def load_credentials(config_path: Path = CONFIG_FILE, model: Optional[str] = None) -> Credentials:
    """API 키와 모델 식별자를 환경변수 → 설정 파일 순서로 불러옵니다.

    Args:
        config_path: TOML 설정 파일 경로 (기본값 ~/.config/nova-horizon/config.toml).
        model: CLI 에서 명시한 모델. 주어지면 다른 모든 값보다 우선합니다.

    Raises:
        ConfigError: API 키를 어디에서도 찾지 못했거나 설정 파일이 손상된 경우.
    """
    file_config: Optional[Dict[str, Any]] = None

    api_key = get_env_with_fallback(API_KEY_ENV, API_KEY_FALLBACK_ENV)
    if not api_key:
        file_config = load_config_file(config_path)
        api_key = str(file_config.get("api_key") or "")
    if not api_key:
        raise ConfigError(
            f"{API_KEY_ENV} environment variable not set and no api_key found in {config_path}"
        )

    resolved_model = model or os.getenv(MODEL_ENV)
    if not resolved_model:
        if file_config is None:
            file_config = load_config_file(config_path)
        resolved_model = str(file_config.get("model") or DEFAULT_MODEL)

    return Credentials(api_key=api_key, model=resolved_model)


def build_run_config(
    work_dir: Optional[str] = None,
    model: str = DEFAULT_MODEL,
    max_steps: int = DEFAULT_MAX_STEPS,
    dry_run: bool = False,
    allow_run: bool = False,
    auto_apply: bool = False,
    verbose: bool = False,
    restrict_writes: bool = False,
) -> AgentRunConfig:
    """CLI 옵션으로부터 불변 실행 설정을 만듭니다. work_dir 가 없으면 현재 디렉토리."""
    try:
        return AgentRunConfig(
            work_dir=Path(work_dir) if work_dir else Path(os.getcwd()),
            model=model,
            max_steps=max_steps,
            dry_run=dry_run,
            allow_run=allow_run,
            auto_apply=auto_apply,
            verbose=verbose,
            restrict_writes=restrict_writes,
        )
    except ValueError as e:
        raise ConfigError(f"invalid run configuration: {e}") from e
