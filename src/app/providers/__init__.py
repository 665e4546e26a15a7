"""
AI Provider Abstraction.

이미지 생성 서비스 교체 가능하게 설계.
모델명은 config만 SSOT.
"""

from .base import ImageEditResult, ImageInput, ImageProvider, ProviderError
from .openai import OpenAIImageProvider

__all__ = [
    "ImageProvider",
    "ImageInput",
    "ImageEditResult",
    "ProviderError",
    "OpenAIImageProvider",
]
