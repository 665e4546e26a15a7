"""
Image Provider 추상 인터페이스.

규칙:
- Provider 추상화로 이미지 생성 서비스 교체 가능
- model_requested + model_used 기록
- 재시도/fallback 없음: 실패는 ProviderError로 즉시 전파
"""

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any


def compute_hash(content: str) -> str:
    """SHA-256 해시 계산."""
    return f"sha256:{hashlib.sha256(content.encode()).hexdigest()[:16]}"

# =============================================================================
# Input / Result Data Classes
# =============================================================================

@dataclass(frozen=True)
class ImageInput:
    """Provider에 전달할 이미지 파일."""
    path: Path
    mime_type: str


@dataclass
class ImageEditResult:
    """
    이미지 편집(합성) 결과.

    image_b64: 생성된 첫 번째 이미지 (base64)
    """
    success: bool
    image_b64: str | None = None

    # 모델 추적
    model_requested: str | None = None
    model_used: str | None = None

    revised_prompt: str | None = None
    prompt_hash: str | None = None
    processed_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        # image_b64는 로그에 남기지 않음
        result = {
            "success": self.success,
            "has_image": bool(self.image_b64),
            "model_requested": self.model_requested,
            "model_used": self.model_used,
            "revised_prompt": self.revised_prompt,
            "prompt_hash": self.prompt_hash,
            "processed_at": self.processed_at,
        }
        return {k: v for k, v in result.items() if v is not None}


# =============================================================================
# Provider Exceptions
# =============================================================================

class ProviderError(Exception):
    """
    Provider 관련 에러.

    status_code: 외부 서비스가 돌려준 HTTP 상태 (없으면 None)
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int | None = None,
        **context: Any,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.context = context
        super().__init__(f"[{code}] {message}")


# =============================================================================
# Abstract Provider
# =============================================================================

class ImageProvider(ABC):
    """
    Image Provider 추상 인터페이스.

    역할: 입력 이미지들 + 지시문 → 생성 이미지 1장
    """

    model: str

    @abstractmethod
    async def edit_images(
        self,
        images: list[ImageInput],
        prompt: str,
        size: str,
        quality: str,
    ) -> ImageEditResult:
        """
        여러 이미지를 참조해 새 이미지 생성.

        Args:
            images: 입력 이미지 목록 (업로드 이미지, 프레임 순)
            prompt: 고정 지시문
            size: 출력 크기 (예: "1024x1024")
            quality: 출력 품질 (예: "high")

        Returns:
            ImageEditResult (image_b64 채워짐)

        Raises:
            ProviderError: 외부 서비스 오류 또는 빈 응답
        """
        ...
