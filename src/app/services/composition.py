"""
Composition Service: 업로드 이미지 + 프레임 → 보존 꽃 합성 이미지.

처리 순서 (요청 1건, 동기 응답 1건):
1. 업로드 검증 (파일 누락, MIME 허용 목록, 크기) → 실패 시 400, 외부 호출 없음
2. 프레임 에셋 확인 → 없으면 404, 외부 호출 없음
3. 업로드 바이트를 임시 파일로 저장 (scoped, 모든 경로에서 삭제)
4. 이미지 생성 서비스 호출 (재시도 없음)
5. 첫 번째 이미지 base64 + frameType 반환
"""

import logging
from pathlib import Path
from typing import Any

from src.app.providers.base import ImageInput, ImageProvider, ProviderError
from src.app.providers.openai import OpenAIImageProvider
from src.core.frames import DEFAULT_FRAMES_DIR, get_frame, resolve_frame_asset
from src.core.tempfiles import scoped_upload
from src.domain.constants import (
    ALLOWED_MIME_TYPES,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_IMAGE_QUALITY,
    DEFAULT_IMAGE_SIZE,
    FRAME_ASSET_MIME_TYPE,
    MAX_UPLOAD_BYTES,
    PRESERVATION_PROMPT,
)
from src.domain.errors import CompositionError, ErrorCodes
from src.domain.schemas import CompositionRequest, CompositionResult, UploadedImage

logger = logging.getLogger(__name__)


class CompositionService:
    """
    합성 서비스.

    상태 없음: 요청 간 공유되는 것은 provider 핸들과 설정뿐.
    """

    def __init__(
        self,
        config: dict,
        provider: ImageProvider | None = None,
        frames_dir: Path | None = None,
        temp_dir: Path | None = None,
    ):
        """
        Args:
            config: 설정 (ai.image, upload, paths 포함)
            provider: Image Provider (None이면 config 기반 생성)
            frames_dir: 프레임 이미지 디렉토리 (None이면 config 또는 내장 static/frames)
            temp_dir: 임시 업로드 디렉토리 (None이면 config 또는 시스템 기본값)
        """
        self.config = config

        image_config = config.get("ai", {}).get("image", {})
        self.size: str = image_config.get("size", DEFAULT_IMAGE_SIZE)
        self.quality: str = image_config.get("quality", DEFAULT_IMAGE_QUALITY)
        self.prompt: str = image_config.get("prompt") or PRESERVATION_PROMPT

        if provider is not None:
            self.provider = provider
        else:
            self.provider = OpenAIImageProvider(
                model=image_config.get("model", DEFAULT_IMAGE_MODEL),
                timeout=image_config.get("timeout"),
            )

        paths_config = config.get("paths", {})
        if frames_dir is None and paths_config.get("frames_dir"):
            frames_dir = Path(paths_config["frames_dir"])
        self.frames_dir = frames_dir or DEFAULT_FRAMES_DIR

        if temp_dir is None and paths_config.get("temp_dir"):
            temp_dir = Path(paths_config["temp_dir"])
        self.temp_dir = temp_dir

        self.max_upload_bytes: int = config.get("upload", {}).get(
            "max_bytes", MAX_UPLOAD_BYTES
        )

    @property
    def model(self) -> str | None:
        return getattr(self.provider, "model", None)

    def validate_upload(self, image: UploadedImage | None) -> UploadedImage:
        """
        업로드 검증.

        Raises:
            CompositionError: NO_IMAGE / INVALID_MIME_TYPE / EMPTY_IMAGE (400),
                IMAGE_TOO_LARGE (413)
        """
        if image is None:
            raise CompositionError(
                ErrorCodes.NO_IMAGE,
                "No image file provided",
                status_code=400,
                details="Attach a JPEG, PNG, or WebP photo in the 'image' field.",
            )

        if image.mime_type not in ALLOWED_MIME_TYPES:
            raise CompositionError(
                ErrorCodes.INVALID_MIME_TYPE,
                "Invalid file type",
                status_code=400,
                details=(
                    f"File type '{image.mime_type}' is not supported. "
                    f"Supported types are: {', '.join(ALLOWED_MIME_TYPES)}"
                ),
                mime_type=image.mime_type,
            )

        if image.size == 0:
            raise CompositionError(
                ErrorCodes.EMPTY_IMAGE,
                "Empty image file",
                status_code=400,
                details="The uploaded file contains no data.",
            )

        self.check_upload_size(image.size)

        return image

    def check_upload_size(self, size: int) -> None:
        """
        업로드 크기 검사 (route에서 본문을 읽기 전에도 사용).

        Raises:
            CompositionError: IMAGE_TOO_LARGE (413)
        """
        if size > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise CompositionError(
                ErrorCodes.IMAGE_TOO_LARGE,
                "Image file too large",
                status_code=413,
                details=f"Images must be {limit_mb}MB or smaller.",
                size=size,
            )

    async def compose(self, request: CompositionRequest) -> CompositionResult:
        """
        합성 요청 처리.

        Args:
            request: 업로드 이미지 + frame identifier

        Returns:
            CompositionResult

        Raises:
            CompositionError: 입력/프레임/외부 서비스/내부 오류
        """
        image = self.validate_upload(request.image)
        frame_path = resolve_frame_asset(self.frames_dir, request.frame_id)

        try:
            async with scoped_upload(image.data, image.mime_type, self.temp_dir) as upload_path:
                result = await self.provider.edit_images(
                    [
                        ImageInput(upload_path, image.mime_type),
                        ImageInput(frame_path, FRAME_ASSET_MIME_TYPE),
                    ],
                    prompt=self.prompt,
                    size=self.size,
                    quality=self.quality,
                )

        except ProviderError as e:
            raise CompositionError(
                ErrorCodes.EMPTY_RESPONSE
                if e.code == ErrorCodes.EMPTY_RESPONSE
                else ErrorCodes.UPSTREAM_ERROR,
                "Image generation error",
                status_code=e.status_code or 500,
                details=e.message,
                upstream_status=e.status_code,
                provider_code=e.code,
            ) from e

        except Exception as e:
            logger.error(f"Unexpected error while composing frame {request.frame_id}: {e}", exc_info=True)
            raise CompositionError(
                ErrorCodes.INTERNAL_ERROR,
                "Failed to process image",
                status_code=500,
                details="An unexpected error occurred. Please try again.",
            ) from e

        if not result.image_b64:
            raise CompositionError(
                ErrorCodes.EMPTY_RESPONSE,
                "Image generation error",
                status_code=500,
                details="No image data returned from the generation service",
            )

        frame = get_frame(request.frame_id)
        frame_name = frame.display_name if frame else f"frame {request.frame_id}"
        logger.info(f"Composed {frame_name}: {result.to_dict()}")

        return CompositionResult(
            image_data=result.image_b64,
            frame_type=request.frame_id,
            model_used=result.model_used,
            prompt_hash=result.prompt_hash,
        )

    def describe(self) -> dict[str, Any]:
        """현재 설정 요약 (health/디버그용, 비밀값 제외)."""
        return {
            "model": self.model,
            "size": self.size,
            "quality": self.quality,
            "max_upload_bytes": self.max_upload_bytes,
        }
