"""
Data schemas for the composition pipeline.

규칙:
- 업로드 이미지/결과는 요청 수명 동안만 존재 (저장 금지)
- Frame은 빌드 시점에 정의되는 불변 카탈로그 항목
- 요청은 정확히 하나의 프레임을 identifier로 참조
"""

from dataclasses import dataclass
from typing import Any

# =============================================================================
# Catalog
# =============================================================================

@dataclass(frozen=True)
class Frame:
    """
    프레임 카탈로그 항목.

    image_asset_path는 브라우저 기준 경로 (/static/frames/<id>.png).
    """
    identifier: int
    display_name: str
    image_asset_path: str
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화용 (위저드 화면 필드명)."""
        return {
            "id": self.identifier,
            "name": self.display_name,
            "image": self.image_asset_path,
            "description": self.description,
        }


# =============================================================================
# Request / Result
# =============================================================================

@dataclass
class UploadedImage:
    """업로드된 이미지 (메모리 전용)."""
    data: bytes
    mime_type: str
    filename: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class CompositionRequest:
    """합성 요청: 업로드 이미지 + 선택 프레임."""
    image: UploadedImage | None
    frame_id: int


@dataclass
class CompositionResult:
    """
    합성 결과.

    image_data: base64 인코딩된 생성 이미지
    frame_type: 요청에 사용된 프레임 identifier (echo)
    model_used, prompt_hash: request log용 (응답 바디에는 포함하지 않음)
    """
    image_data: str
    frame_type: int
    model_used: str | None = None
    prompt_hash: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """HTTP 응답 바디."""
        return {
            "success": True,
            "imageData": self.image_data,
            "frameType": self.frame_type,
        }


# =============================================================================
# Request Log Schema (core/logging.py에서 사용)
# =============================================================================

@dataclass
class RequestLog:
    """
    요청 로그.

    합성 요청 1건의 실행 결과 및 메타데이터.
    이미지 바이트는 기록하지 않음.
    """
    request_id: str
    started_at: str  # ISO 8601
    frame_type: int | None = None
    mime_type: str | None = None
    upload_bytes: int | None = None
    finished_at: str | None = None
    duration_ms: int | None = None
    result: str = "pending"  # pending, success, failed
    status_code: int | None = None

    # Model tracking
    model_requested: str | None = None
    model_used: str | None = None
    prompt_hash: str | None = None

    # Error (if failed)
    error_code: str | None = None
    error_context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "request_id": self.request_id,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "duration_ms": self.duration_ms,
            "result": self.result,
            "status_code": self.status_code,
            "frame_type": self.frame_type,
            "mime_type": self.mime_type,
            "upload_bytes": self.upload_bytes,
            "model_requested": self.model_requested,
            "model_used": self.model_used,
            "prompt_hash": self.prompt_hash,
            "error_code": self.error_code,
            "error_context": self.error_context,
        }
