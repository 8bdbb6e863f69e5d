"""
FastAPI Routes.

페이지 라우트 (HTML) + HTMX 라우트 (fragment) + 생성 API
"""

from . import generate, ui

__all__ = ["generate", "ui"]
