"""
FastAPI Routes.

페이지 라우트 (HTML) + API 라우트 (JSON)
"""

from . import pages, preserve

__all__ = ["pages", "preserve"]
