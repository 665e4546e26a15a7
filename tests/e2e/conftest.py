"""
E2E 테스트 설정.

- API 테스트: 실제 앱(app.main) + TestClient, provider만 mock으로 교체
- 브라우저 테스트: Playwright (선택적 의존성, RUN_BROWSER_TESTS=1일 때만)

실패 시 디버깅 정보 저장 (브라우저 테스트):
- 스크린샷 (.png)
- 콘솔 로그 (.log) - 민감 정보 마스킹
"""

import re
from collections.abc import Generator
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from src.app.main import app
from src.app.routes.preserve import get_composition_service
from src.app.services.composition import CompositionService

# Playwright는 선택적 의존성 - 설치되어 있을 때만 import
try:
    from playwright.sync_api import BrowserContext, Page

    PLAYWRIGHT_AVAILABLE = True
except ImportError:
    PLAYWRIGHT_AVAILABLE = False

if TYPE_CHECKING:
    from playwright.sync_api import BrowserContext, Page

# =============================================================================
# 상수
# =============================================================================

ARTIFACTS_DIR = Path(__file__).parent / "artifacts"

# 마스킹할 패턴들 (API 키, Bearer 토큰)
SENSITIVE_PATTERNS = [
    (r"(sk-[a-zA-Z0-9_-]{20,})", r"[MASKED_API_KEY]"),
    (r"(Bearer\s+)([a-zA-Z0-9._-]{20,})", r"\1[MASKED_TOKEN]"),
]


def mask_sensitive_data(content: str) -> str:
    """민감 정보를 마스킹한 문자열 반환."""
    masked = content
    for pattern, replacement in SENSITIVE_PATTERNS:
        masked = re.sub(pattern, replacement, masked, flags=re.IGNORECASE)
    return masked


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def e2e_service(test_config, mock_provider, frames_dir, temp_dir) -> CompositionService:
    """mock provider + 테스트 프레임 디렉토리를 쓰는 서비스."""
    return CompositionService(
        test_config,
        provider=mock_provider,
        frames_dir=frames_dir,
        temp_dir=temp_dir,
    )


@pytest.fixture
def client(e2e_service: CompositionService) -> Generator[TestClient, None, None]:
    """
    실제 앱 TestClient (lifespan 포함).

    외부 이미지 생성 서비스 호출만 mock provider로 교체.
    """
    previous = app.dependency_overrides.get(get_composition_service)
    app.dependency_overrides[get_composition_service] = lambda: e2e_service
    with TestClient(app) as client:
        yield client

    # live_server(session)의 override 복원
    if previous is None:
        app.dependency_overrides.pop(get_composition_service, None)
    else:
        app.dependency_overrides[get_composition_service] = previous


# =============================================================================
# Playwright 설정 (Playwright가 설치된 경우에만 활성화)
# =============================================================================

if PLAYWRIGHT_AVAILABLE:

    @pytest.fixture(scope="session")
    def browser_context_args(browser_context_args: dict) -> dict:
        """브라우저 컨텍스트 설정."""
        return {
            **browser_context_args,
            "viewport": {"width": 1280, "height": 720},
        }

    @pytest.fixture
    def page(context: "BrowserContext") -> "Generator[Page, None, None]":
        """페이지 fixture with 타임아웃 + 콘솔 로그 수집."""
        page = context.new_page()
        page.set_default_timeout(15000)

        console_logs: list[str] = []
        page.on("console", lambda msg: console_logs.append(f"[{msg.type}] {msg.text}"))
        page.on("pageerror", lambda err: console_logs.append(f"[PAGE_ERROR] {err}"))
        page._console_logs = console_logs  # type: ignore[attr-defined]

        yield page

        page.close()


# =============================================================================
# 실패 시 디버깅 정보 저장
# =============================================================================


def _generate_artifact_name(item_name: str) -> str:
    """고유한 artifact 파일명 (테스트명 + 타임스탬프)."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    # 테스트 파라미터 제거 (예: test_foo[chromium] -> test_foo)
    return f"{item_name.split('[')[0]}_{timestamp}"


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """브라우저 테스트 실패 시 스크린샷/콘솔 로그 저장."""
    outcome = yield
    rep = outcome.get_result()

    if rep.when != "call" or not rep.failed:
        return

    page = item.funcargs.get("page")
    if not page:
        return

    ARTIFACTS_DIR.mkdir(exist_ok=True)
    base_name = _generate_artifact_name(item.name)

    screenshot_path = ARTIFACTS_DIR / f"{base_name}.png"
    try:
        page.screenshot(path=str(screenshot_path), full_page=True)
        print(f"\nScreenshot: {screenshot_path}")
    except Exception as e:
        print(f"\nScreenshot failed: {e}")

    console_logs = getattr(page, "_console_logs", [])
    if console_logs:
        log_path = ARTIFACTS_DIR / f"{base_name}.log"
        log_path.write_text(mask_sensitive_data("\n".join(console_logs)), encoding="utf-8")
        print(f"Console log: {log_path}")
