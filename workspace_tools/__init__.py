#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
샌드박스 작업 디렉토리 도구 패키지.
경로 해석기, 파일 도구, 실행 도구의 핵심 함수들을 임포트합니다.
"""

from .path_resolver import resolve_path, is_within_root, to_display_path

from .file_operations import get_files_info, get_file_content, write_file, validate_write_extension, MAX_FILE_SIZE, WRITE_EXTENSIONS

from .code_execution import run_file, RUN_INTERPRETERS, RUN_TIMEOUT_SECONDS

from .diff_utils import generate_diff
