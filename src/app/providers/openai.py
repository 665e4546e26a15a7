"""
OpenAI Image Provider.

예외 정책 (재시도 없음):
- APIStatusError (RateLimit, BadRequest, Authentication ...) → 상태 코드/메시지 그대로 전달
- APIConnectionError (timeout 포함) → 상태 코드 없음 (상위에서 500)
- 빈 응답 (data 없음, b64_json 없음) → EMPTY_RESPONSE
"""

import asyncio
import logging
import os
from datetime import UTC, datetime
from typing import Any

import openai

from src.domain.constants import (
    DEFAULT_IMAGE_MODEL,
    DEFAULT_IMAGE_QUALITY,
    DEFAULT_IMAGE_SIZE,
)

from .base import (
    ImageEditResult,
    ImageInput,
    ImageProvider,
    ProviderError,
    compute_hash,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Exception Mapping
# =============================================================================

# 상태 코드별 에러 코드 (로그/응답 분류용)
STATUS_ERROR_CODES: dict[int, str] = {
    400: "INVALID_INPUT",
    401: "AUTHENTICATION_FAILED",
    403: "PERMISSION_DENIED",
    404: "MODEL_NOT_FOUND",
    413: "INPUT_TOO_LARGE",
    422: "INVALID_INPUT",
    429: "RATE_LIMITED",
}


def error_code_for_status(status_code: int) -> str:
    """HTTP 상태 코드 → 에러 코드."""
    if status_code >= 500:
        return "SERVICE_UNAVAILABLE"
    return STATUS_ERROR_CODES.get(status_code, "UPSTREAM_REJECTED")


class OpenAIImageProvider(ImageProvider):
    """
    OpenAI 이미지 편집 Provider.

    Usage:
        provider = OpenAIImageProvider(model="gpt-image-1")
        result = await provider.edit_images(
            [ImageInput(upload_path, "image/jpeg"), ImageInput(frame_path, "image/png")],
            prompt=PRESERVATION_PROMPT,
            size="1024x1024",
            quality="high",
        )
    """

    def __init__(
        self,
        model: str = DEFAULT_IMAGE_MODEL,
        api_key: str | None = None,
        timeout: float | None = None,
    ):
        """
        Args:
            model: 이미지 모델 ID (config에서 주입)
            api_key: API 키 (환경변수 OPENAI_API_KEY 사용 가능)
            timeout: 요청 타임아웃 (None이면 SDK 기본값)
        """
        self.model = model
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.timeout = timeout
        self._client: Any = None

    def _get_client(self) -> Any:
        """OpenAI 클라이언트 (lazy init)."""
        if self._client is None:
            if not self.api_key:
                raise ProviderError(
                    "OPENAI_KEY_MISSING",
                    "OpenAI API key is not configured. Set OPENAI_API_KEY.",
                )
            kwargs: dict[str, Any] = {"api_key": self.api_key}
            if self.timeout is not None:
                kwargs["timeout"] = self.timeout
            self._client = openai.AsyncOpenAI(**kwargs)
        return self._client

    async def edit_images(
        self,
        images: list[ImageInput],
        prompt: str,
        size: str = DEFAULT_IMAGE_SIZE,
        quality: str = DEFAULT_IMAGE_QUALITY,
    ) -> ImageEditResult:
        """
        업로드 이미지 + 프레임 이미지 → 합성 이미지.

        첫 번째로 반환된 이미지의 b64_json만 사용.
        """
        client = self._get_client()
        files = [await asyncio.to_thread(self._to_file, image) for image in images]

        logger.info(
            f"Calling OpenAI images.edit (model={self.model}, images={len(files)}, "
            f"size={size}, quality={quality})"
        )

        try:
            response = await client.images.edit(
                model=self.model,
                image=files,
                prompt=prompt,
                size=size,
                quality=quality,
            )

        except openai.APIStatusError as e:
            logger.error(
                f"OpenAI images.edit failed with status {e.status_code}: {e.message}",
                exc_info=True,
            )
            raise ProviderError(
                error_code_for_status(e.status_code),
                e.message or "Unknown error",
                status_code=e.status_code,
                model=self.model,
            ) from e

        except openai.APIConnectionError as e:
            logger.error(f"OpenAI connection error: {e}", exc_info=True)
            raise ProviderError(
                "CONNECTION_ERROR",
                str(e) or "Connection error.",
                model=self.model,
            ) from e

        return self._parse_response(response, prompt)

    def _parse_response(self, response: Any, prompt: str) -> ImageEditResult:
        """images.edit 응답 → ImageEditResult."""
        data = getattr(response, "data", None)
        if not data:
            raise ProviderError(
                "EMPTY_RESPONSE",
                "No valid image data returned from OpenAI",
                model=self.model,
            )

        first = data[0]
        image_b64 = getattr(first, "b64_json", None)
        if not image_b64:
            raise ProviderError(
                "EMPTY_RESPONSE",
                "No base64 image data returned from OpenAI",
                model=self.model,
            )

        return ImageEditResult(
            success=True,
            image_b64=image_b64,
            model_requested=self.model,
            model_used=self.model,
            revised_prompt=getattr(first, "revised_prompt", None),
            prompt_hash=compute_hash(prompt),
            processed_at=datetime.now(UTC).isoformat(),
        )

    def _to_file(self, image: ImageInput) -> tuple[str, bytes, str]:
        """ImageInput → SDK 업로드 튜플 (filename, bytes, content_type)."""
        return (image.path.name, image.path.read_bytes(), image.mime_type)
