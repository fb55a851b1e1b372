#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""CLI 와 오케스트레이터가 함께 쓰는 프롬프트 유틸리티."""
