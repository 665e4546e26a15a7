"""
Application Services.

역할:
- composition: 업로드 + 프레임 → 이미지 생성 서비스 → 합성 결과
"""

from .composition import CompositionService

__all__ = [
    "CompositionService",
]
