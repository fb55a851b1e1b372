#!/usr/bin/env python3
"""에이전트 루프, Gemini 클라이언트, 도구 디스패처를 담은 오케스트레이터 패키지."""

import logging

# 로깅 설정은 CLI(main.py)가 담당
logging.getLogger(__name__).addHandler(logging.NullHandler())
