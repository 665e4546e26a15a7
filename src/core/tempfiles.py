"""
Scoped temp files: 업로드 바이트를 임시 파일로 쓰고 반드시 정리.

동작:
- 요청마다 고유한 파일명 (동시 요청 간 충돌 없음)
- 파일 쓰기는 worker thread에서 (이벤트 루프 블로킹 없음)
- with 블록 종료 시 성공/실패/예외 모든 경로에서 삭제
- 삭제 실패는 경고만 남기고 원래 예외를 가리지 않음
"""

import asyncio
import logging
import mimetypes
import os
import tempfile
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from src.domain.constants import TEMP_UPLOAD_PREFIX

logger = logging.getLogger(__name__)


def suffix_for_mime_type(mime_type: str) -> str:
    """MIME 타입 → 파일 확장자 (알 수 없으면 .bin)."""
    if mime_type == "image/jpeg":
        return ".jpg"
    return mimetypes.guess_extension(mime_type) or ".bin"


def _write_fd(fd: int, data: bytes) -> None:
    with os.fdopen(fd, "wb") as f:
        f.write(data)


@asynccontextmanager
async def scoped_upload(
    data: bytes,
    mime_type: str,
    temp_dir: Path | None = None,
) -> AsyncGenerator[Path, None]:
    """
    업로드 바이트를 임시 파일로 저장하고 경로를 반환.

    Args:
        data: 업로드 바이트
        mime_type: 업로드 MIME 타입 (확장자 결정)
        temp_dir: 임시 디렉토리 (None이면 시스템 기본값)

    Yields:
        임시 파일 경로

    Usage:
        async with scoped_upload(image.data, image.mime_type) as path:
            await provider.edit_images([ImageInput(path, image.mime_type), ...])
    """
    if temp_dir is not None:
        temp_dir.mkdir(parents=True, exist_ok=True)

    fd, name = tempfile.mkstemp(
        prefix=TEMP_UPLOAD_PREFIX,
        suffix=suffix_for_mime_type(mime_type),
        dir=temp_dir,
    )
    temp_path = Path(name)

    try:
        await asyncio.to_thread(_write_fd, fd, data)
        yield temp_path
    finally:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove temp upload {temp_path}: {e}")
