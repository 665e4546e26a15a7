"""
Pytest fixtures for the composition tests.

테스트 구성:
- 정상 케이스 (지원 MIME 3종), 입력 오류, 프레임 누락, 외부 서비스 오류 분리
- 외부 이미지 생성 서비스는 항상 mock (실제 API 호출 없음)
"""

import base64
import threading
import time
from collections.abc import Generator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import uvicorn
import yaml

from src.app.providers.base import ImageEditResult, ImageProvider

# 1x1 PNG
PIXEL_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="
)

# 생성 이미지 대용 (base64)
GENERATED_B64 = base64.b64encode(b"generated preserved flower").decode()

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def frames_dir(tmp_path: Path) -> Path:
    """
    테스트용 프레임 디렉토리.

    포함: 1.png, 2.png (99.png 없음)
    """
    frames = tmp_path / "frames"
    frames.mkdir()
    (frames / "1.png").write_bytes(PIXEL_PNG)
    (frames / "2.png").write_bytes(PIXEL_PNG)
    return frames


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """scoped 업로드 임시 디렉토리 (정리 여부 확인용)."""
    uploads = tmp_path / "uploads"
    uploads.mkdir()
    return uploads


# =============================================================================
# Provider Fixtures
# =============================================================================

@pytest.fixture
def mock_provider() -> MagicMock:
    """항상 성공하는 Image Provider mock."""
    provider = MagicMock(spec=ImageProvider)
    provider.model = "gpt-image-1"
    provider.edit_images = AsyncMock(return_value=ImageEditResult(
        success=True,
        image_b64=GENERATED_B64,
        model_requested="gpt-image-1",
        model_used="gpt-image-1",
    ))
    return provider


@pytest.fixture
def test_config() -> dict:
    """테스트용 설정."""
    return {
        "ai": {
            "image": {
                "model": "gpt-image-1",
                "size": "1024x1024",
                "quality": "high",
            },
        },
        "upload": {
            "max_bytes": 1024 * 1024,
        },
    }


# =============================================================================
# Upload Fixtures
# =============================================================================

@pytest.fixture
def jpeg_bytes() -> bytes:
    """JPEG 업로드 대용 바이트 (내용 검증은 외부 서비스 몫)."""
    return b"\xff\xd8\xff\xe0" + b"fake jpeg flower" + b"\xff\xd9"


@pytest.fixture
def png_bytes() -> bytes:
    return PIXEL_PNG


# =============================================================================
# Browser Test Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def live_server(tmp_path_factory: pytest.TempPathFactory) -> Generator[str, None, None]:
    """
    FastAPI 앱을 백그라운드에서 실행하는 fixture.

    외부 이미지 생성 서비스는 mock provider로 교체.

    Returns:
        서버 URL (예: "http://localhost:8765")
    """
    from src.app.main import app
    from src.app.routes.preserve import get_composition_service
    from src.app.services.composition import CompositionService

    provider = MagicMock(spec=ImageProvider)
    provider.model = "gpt-image-1"
    provider.edit_images = AsyncMock(return_value=ImageEditResult(
        success=True,
        image_b64=base64.b64encode(PIXEL_PNG).decode(),
    ))
    service = CompositionService(
        {},
        provider=provider,
        temp_dir=tmp_path_factory.mktemp("live-uploads"),
    )
    app.dependency_overrides[get_composition_service] = lambda: service

    # 테스트용 포트
    port = 8765
    host = "127.0.0.1"

    # 별도 스레드에서 서버 실행
    config = uvicorn.Config(app, host=host, port=port, log_level="error")
    server = uvicorn.Server(config)

    def run_server() -> None:
        import asyncio
        asyncio.run(server.serve())

    thread = threading.Thread(target=run_server, daemon=True)
    thread.start()

    # 서버가 준비될 때까지 대기
    base_url = f"http://{host}:{port}"
    max_attempts = 30
    for _ in range(max_attempts):
        try:
            response = httpx.get(f"{base_url}/health", timeout=1.0)
            if response.status_code == 200:
                break
        except httpx.HTTPError:
            time.sleep(0.1)
    else:
        raise RuntimeError("Failed to start test server")

    yield base_url

    # 서버 종료
    server.should_exit = True
    app.dependency_overrides.pop(get_composition_service, None)
