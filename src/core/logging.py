"""
Request logging: request log schema, completion, emit

규칙:
- 요청 1건당 로그 1줄 (성공/실패/거절 모두)
- 이미지 바이트/base64는 절대 기록하지 않음
- 파일로 저장하지 않음 (요청 수명 밖 보존 금지)
"""

import json
import logging
from datetime import UTC, datetime
from typing import Any

from src.core.ids import generate_request_id
from src.domain.schemas import RequestLog

logger = logging.getLogger(__name__)

# =============================================================================
# Request Log Management
# =============================================================================


def create_request_log(
    frame_type: int | None = None,
    mime_type: str | None = None,
    upload_bytes: int | None = None,
) -> RequestLog:
    """
    새 RequestLog 생성.

    Args:
        frame_type: 요청 프레임 identifier
        mime_type: 업로드 MIME 타입
        upload_bytes: 업로드 크기

    Returns:
        초기화된 RequestLog
    """
    now = datetime.now(UTC).isoformat()

    return RequestLog(
        request_id=generate_request_id(),
        started_at=now,
        frame_type=frame_type,
        mime_type=mime_type,
        upload_bytes=upload_bytes,
        result="pending",
    )


def complete_request_log(
    request_log: RequestLog,
    success: bool,
    status_code: int,
    model_requested: str | None = None,
    model_used: str | None = None,
    prompt_hash: str | None = None,
    error_code: str | None = None,
    error_context: dict[str, Any] | None = None,
) -> None:
    """
    RequestLog 완료 처리.

    Args:
        request_log: RequestLog 인스턴스
        success: 성공 여부
        status_code: 응답 HTTP 상태 코드
        model_requested: 설정된 모델
        model_used: 실제 호출된 모델 (provider 응답 기준)
        prompt_hash: 사용한 지시문 해시
        error_code: 에러 코드 (실패 시)
        error_context: 에러 컨텍스트 (실패 시)
    """
    finished = datetime.now(UTC)
    request_log.finished_at = finished.isoformat()
    request_log.duration_ms = _elapsed_ms(request_log.started_at, finished)
    request_log.result = "success" if success else "failed"
    request_log.status_code = status_code
    request_log.model_requested = model_requested
    request_log.model_used = model_used
    request_log.prompt_hash = prompt_hash

    if not success:
        request_log.error_code = error_code
        request_log.error_context = error_context


def emit_request_log(request_log: RequestLog) -> None:
    """
    RequestLog를 구조화된 한 줄로 출력.

    실패 요청은 warning 레벨.
    """
    line = json.dumps(request_log.to_dict(), ensure_ascii=False, default=str)
    if request_log.result == "success":
        logger.info(f"request_log {line}")
    else:
        logger.warning(f"request_log {line}")


def _elapsed_ms(started_at: str, finished: datetime) -> int:
    try:
        started = datetime.fromisoformat(started_at)
    except ValueError:
        return 0
    return max(0, int((finished - started).total_seconds() * 1000))
