#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# tests/conftest.py
"""
Pytest 설정 파일.

테스트 실행 시 프로젝트의 루트 디렉토리를 Python 경로에 추가하여
'workspace_tools', 'orchestrator', 'shared' 패키지와 main 모듈을 찾을 수 있도록 합니다.
"""

import os
import sys
from pathlib import Path

import pytest

# 현재 파일(conftest.py)의 부모 디렉토리(tests/)의 부모 디렉토리(프로젝트 루트)
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def workspace(tmp_path):
    """심볼릭 링크가 풀린 샌드박스 루트 (macOS 의 /private/var 등 대비)."""
    root = Path(os.path.realpath(tmp_path)) / "work"
    root.mkdir()
    return root
