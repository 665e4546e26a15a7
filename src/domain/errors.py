"""
Error definitions for the composition pipeline.

규칙:
- 조용한 실패 금지 → CompositionError로 명시적 실패
- 입력 오류는 외부 호출 전에 reject
- 외부 서비스 오류는 상태 코드/메시지를 그대로 전달 (없으면 500)
- 재시도 없음: 모든 실패는 해당 요청에서 종료
"""

from typing import Any


class CompositionError(Exception):
    """
    합성 요청 처리 실패 시 발생하는 에러.

    route 경계에서 JSON 응답으로 변환됨:
    - 입력 오류 (파일 누락, 미지원 MIME) → 400
    - 프레임 에셋 없음 → 404
    - 외부 서비스 오류 → 서비스 상태 코드 또는 500
    - 예상치 못한 오류 → 500 (민감 정보 없는 메시지)

    Usage:
        raise CompositionError(
            ErrorCodes.FRAME_NOT_FOUND,
            "Selected frame image not found: 99.png",
            status_code=404,
            frame_type=99,
        )
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: str | None = None,
        upstream_status: int | None = None,
        **context: Any,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.upstream_status = upstream_status
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        base = f"[{self.code}] {self.message}"
        return f"{base} ({ctx_str})" if ctx_str else base

    def to_response(self) -> dict[str, Any]:
        """HTTP 응답 바디."""
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        if self.upstream_status is not None:
            body["status"] = self.upstream_status
        return body

    def to_dict(self) -> dict[str, Any]:
        """로그 직렬화용."""
        return {
            "code": self.code,
            "status_code": self.status_code,
            **self.context,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Input (400-class) ===
    NO_IMAGE = "NO_IMAGE"
    EMPTY_IMAGE = "EMPTY_IMAGE"
    INVALID_MIME_TYPE = "INVALID_MIME_TYPE"
    IMAGE_TOO_LARGE = "IMAGE_TOO_LARGE"

    # === Assets (404) ===
    FRAME_NOT_FOUND = "FRAME_NOT_FOUND"

    # === Upstream ===
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"

    # === Internal ===
    INTERNAL_ERROR = "INTERNAL_ERROR"
