"""
Core layer: 요청 처리 안전 핵심 모듈.

역할:
- 프레임 카탈로그/에셋 해석, scoped 임시 파일, 요청 로그, ID
"""

from .frames import (
    FRAME_CATALOG,
    get_frame,
    list_frames,
    parse_frame_id,
    resolve_frame_asset,
)
from .ids import generate_request_id
from .logging import complete_request_log, create_request_log, emit_request_log
from .tempfiles import scoped_upload

__all__ = [
    # frames
    "FRAME_CATALOG",
    "list_frames",
    "get_frame",
    "parse_frame_id",
    "resolve_frame_asset",
    # tempfiles
    "scoped_upload",
    # ids
    "generate_request_id",
    # logging
    "create_request_log",
    "complete_request_log",
    "emit_request_log",
]
