"""
Domain Constants: 합성 파이프라인 전역 상수.

업로드 허용 정책, 프레임 기본값, 이미지 생성 파라미터 등
요청 처리 전반에서 사용되는 값들.
"""

# =============================================================================
# Upload Policy (업로드 허용 정책)
# =============================================================================
# 이 세 가지 외의 MIME 타입은 외부 호출 전에 400으로 거절.

ALLOWED_MIME_TYPES: tuple[str, ...] = ("image/jpeg", "image/png", "image/webp")

# 업로드 화면 안내 문구와 동일: "up to 10MB"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024

# =============================================================================
# Frames (프레임 정책)
# =============================================================================
# static/frames/<id>.png
# frameType이 없거나 파싱 불가하면 기본 프레임 사용

DEFAULT_FRAME_ID = 1
FRAME_ASSET_SUFFIX = ".png"
FRAME_ASSET_MIME_TYPE = "image/png"

# =============================================================================
# Image Generation (이미지 생성 파라미터)
# =============================================================================

DEFAULT_IMAGE_MODEL = "gpt-image-1"
DEFAULT_IMAGE_SIZE = "1024x1024"
DEFAULT_IMAGE_QUALITY = "high"

PRESERVATION_PROMPT = (
    "Create a high-quality image of the actual flowers from the uploaded image, "
    "preserved in the provided frame. "
    "The preservation should resemble the flowers as closely as possible to their "
    "real-life appearance, capturing all the intricate details, colors, and textures "
    "of the flowers themselves. "
    "The frame provided should be used, showcasing its design, and the flowers should "
    "be encapsulated in a smooth resin finish. "
    "The final output should look like a polished, pressed flower artwork with perfect "
    "preservation, highlighting both the natural beauty of the flowers and the frame's "
    "features."
)

# =============================================================================
# Temp Files (임시 파일)
# =============================================================================

TEMP_UPLOAD_PREFIX = "flower-input-"
