"""
Page Routes: 꽃 보존 위저드 화면.

- GET / → 업로드 → 프레임 선택 → 결과 미리보기 (3단계)

화면 상태는 전부 브라우저 메모리에만 존재 (static/js/app.js).
서버는 프레임 카탈로그와 업로드 정책만 내려줌.
"""

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from src.core.frames import list_frames
from src.domain.constants import ALLOWED_MIME_TYPES, DEFAULT_FRAME_ID, MAX_UPLOAD_BYTES

# Jinja2 템플릿 설정
_templates_dir = Path(__file__).parent.parent / "templates"
jinja_templates = Jinja2Templates(directory=_templates_dir)

router = APIRouter()  # HTML pages


@router.get("/", response_class=HTMLResponse)
async def index_page(request: Request) -> HTMLResponse:
    """위저드 화면."""
    config: dict = getattr(request.app.state, "config", {}) or {}
    max_bytes = config.get("upload", {}).get("max_bytes", MAX_UPLOAD_BYTES)

    return jinja_templates.TemplateResponse(
        request,
        "index.html",
        {
            "frames": [frame.to_dict() for frame in list_frames()],
            "default_frame_id": DEFAULT_FRAME_ID,
            "allowed_mime_types": ALLOWED_MIME_TYPES,
            "max_upload_mb": max_bytes // (1024 * 1024),
        },
    )
