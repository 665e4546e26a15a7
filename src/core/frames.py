"""
Frame catalog: 프레임 목록, identifier 파싱, 에셋 경로 해석.

규칙:
- 카탈로그는 코드에 고정 (런타임 변경 없음)
- frameType 누락/파싱 불가 → DEFAULT_FRAME_ID
- 에셋 파일이 없으면 외부 호출 전에 404
"""

import logging
import re
from pathlib import Path

from src.domain.constants import DEFAULT_FRAME_ID, FRAME_ASSET_SUFFIX
from src.domain.errors import CompositionError, ErrorCodes
from src.domain.schemas import Frame

logger = logging.getLogger(__name__)

# 앞쪽 정수 부분 ("2.5" → 2, "2abc" → 2)
_LEADING_INT = re.compile(r"[+-]?\d+")

# static/frames/ (패키지 내장 기본 위치)
DEFAULT_FRAMES_DIR = Path(__file__).parent.parent / "app" / "static" / "frames"

FRAME_CATALOG: tuple[Frame, ...] = (
    Frame(
        identifier=1,
        display_name="Rectangular Wood",
        image_asset_path="/static/frames/1.png",
        description="Classic rectangular frame in natural wood.",
    ),
    Frame(
        identifier=2,
        display_name="Circular Wood",
        image_asset_path="/static/frames/2.png",
        description="Round wooden hoop for a softer look.",
    ),
)


def list_frames() -> list[Frame]:
    """카탈로그 전체 (identifier 순)."""
    return sorted(FRAME_CATALOG, key=lambda f: f.identifier)


def get_frame(frame_id: int) -> Frame | None:
    """identifier로 카탈로그 항목 조회."""
    for frame in FRAME_CATALOG:
        if frame.identifier == frame_id:
            return frame
    return None


def parse_frame_id(raw: str | int | None) -> int:
    """
    frameType 폼 값 → frame identifier.

    - None / 빈 문자열 → DEFAULT_FRAME_ID
    - 앞쪽 정수 부분만 사용 ("2.5", "2abc" → 2)
    - 숫자로 시작하지 않음 → DEFAULT_FRAME_ID
    - 범위 검사는 하지 않음 (에셋 존재 여부로 판정)

    Args:
        raw: 폼에서 받은 원본 값

    Returns:
        frame identifier
    """
    if raw is None:
        return DEFAULT_FRAME_ID
    if isinstance(raw, int):
        return raw

    value = raw.strip()
    if not value:
        return DEFAULT_FRAME_ID

    match = _LEADING_INT.match(value)
    if match is None:
        logger.info(f"Unparseable frameType {raw!r}, using default frame {DEFAULT_FRAME_ID}")
        return DEFAULT_FRAME_ID

    return int(match.group())


def frame_asset_filename(frame_id: int) -> str:
    return f"{frame_id}{FRAME_ASSET_SUFFIX}"


def resolve_frame_asset(frames_dir: Path, frame_id: int) -> Path:
    """
    frame identifier → 정적 에셋 파일 경로.

    Args:
        frames_dir: 프레임 이미지 디렉토리
        frame_id: frame identifier

    Returns:
        존재하는 에셋 파일 경로

    Raises:
        CompositionError: FRAME_NOT_FOUND (404)
    """
    filename = frame_asset_filename(frame_id)
    asset_path = frames_dir / filename

    if not asset_path.is_file():
        raise CompositionError(
            ErrorCodes.FRAME_NOT_FOUND,
            f"Selected frame image not found: {filename}",
            status_code=404,
            frame_type=frame_id,
        )

    return asset_path
