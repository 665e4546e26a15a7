"""
Preserve Routes: 꽃 보존 합성 요청.

- POST /api/preserve-flower → 업로드 이미지 + frameType → 합성 이미지 (base64)
- GET /api/frames → 프레임 카탈로그

응답 계약:
- 200: {"success": true, "imageData": "<base64>", "frameType": <int>}
- 실패: {"error": ..., "details": ...} + 400/404/413/500 또는 외부 서비스 상태 코드

Request Log: 항상 기록 (성공/실패/거절 모두, finally 블록에서 보장)
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from src.app.services.composition import CompositionService
from src.core.frames import list_frames, parse_frame_id
from src.core.logging import complete_request_log, create_request_log, emit_request_log
from src.domain.constants import DEFAULT_FRAME_ID
from src.domain.errors import CompositionError, ErrorCodes
from src.domain.schemas import CompositionRequest, UploadedImage

logger = logging.getLogger(__name__)

api_router = APIRouter()


def get_composition_service(request: Request) -> CompositionService:
    """lifespan에서 만든 공유 CompositionService."""
    service: CompositionService = request.app.state.composition_service
    return service


# =============================================================================
# API Routes
# =============================================================================

@api_router.post("/preserve-flower")
async def preserve_flower(
    image: UploadFile | None = File(None),
    frame_type: str | None = Form(None, alias="frameType"),
    service: CompositionService = Depends(get_composition_service),
) -> JSONResponse:
    """
    꽃 사진을 선택한 프레임 안에 보존된 모습으로 합성.

    Args:
        image: 업로드 이미지 (image/jpeg, image/png, image/webp)
        frame_type: 프레임 identifier (없거나 파싱 불가하면 기본 프레임)

    Returns:
        JSONResponse (성공 바디 또는 에러 바디)
    """
    frame_id = parse_frame_id(frame_type)
    request_log = create_request_log(frame_type=frame_id)

    # 결과 추적용 변수
    success = False
    status_code = 500
    error_code: str | None = None
    error_context: dict[str, Any] | None = None
    model_used: str | None = None
    prompt_hash: str | None = None

    try:
        uploaded: UploadedImage | None = None
        if image is not None:
            request_log.mime_type = image.content_type or "application/octet-stream"
            if image.size is not None:
                # 크기를 알면 본문을 읽기 전에 거절
                request_log.upload_bytes = image.size
                service.check_upload_size(image.size)

            # 최대 크기 + 1 바이트까지만 읽음 (초과분은 validate_upload에서 413)
            uploaded = UploadedImage(
                data=await image.read(service.max_upload_bytes + 1),
                mime_type=request_log.mime_type,
                filename=image.filename,
            )
            if request_log.upload_bytes is None:
                request_log.upload_bytes = uploaded.size

        result = await service.compose(CompositionRequest(image=uploaded, frame_id=frame_id))

        success = True
        status_code = 200
        model_used = result.model_used
        prompt_hash = result.prompt_hash
        return JSONResponse(status_code=status_code, content=result.to_dict())

    except CompositionError as e:
        status_code = e.status_code
        error_code = e.code
        error_context = e.to_dict()
        return JSONResponse(status_code=status_code, content=e.to_response())

    except Exception as e:
        # 예상치 못한 에러
        logger.error(f"Error processing image: {e}", exc_info=True)
        error_code = ErrorCodes.INTERNAL_ERROR
        error_context = {"error_type": type(e).__name__}
        return JSONResponse(
            status_code=status_code,
            content={
                "error": "Failed to process image",
                "details": "An unexpected error occurred. Please try again.",
            },
        )

    finally:
        # Request Log 항상 기록
        complete_request_log(
            request_log=request_log,
            success=success,
            status_code=status_code,
            model_requested=service.model,
            model_used=model_used,
            prompt_hash=prompt_hash,
            error_code=error_code,
            error_context=error_context,
        )
        emit_request_log(request_log)


@api_router.get("/frames")
async def get_frames() -> dict[str, Any]:
    """프레임 카탈로그."""
    return {
        "frames": [frame.to_dict() for frame in list_frames()],
        "defaultFrameId": DEFAULT_FRAME_ID,
    }
