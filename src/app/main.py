"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- 프로덕션: uv run uvicorn src.app.main:app
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

# Routes
from src.app.routes import pages, preserve
from src.app.services.composition import CompositionService

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = Path(__file__).parent.parent.parent / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def configure_logging(config: dict) -> None:
    """logging.level 설정을 src 로거에 적용."""
    level_name = str(config.get("logging", {}).get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    logging.getLogger("src").setLevel(level)


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 공유 CompositionService 생성 (provider 클라이언트는 lazy)
    종료 시: 리소스 정리 없음 (요청 간 상태 없음)
    """
    # Startup (.env의 OPENAI_API_KEY 포함)
    load_dotenv()
    app.state.config = load_config()
    configure_logging(app.state.config)
    app.state.composition_service = CompositionService(app.state.config)
    logger.info(f"Composition service ready: {app.state.composition_service.describe()}")

    yield

    # Shutdown


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Sushi Flowers",
    description="꽃 사진 + 프레임 → 보존된 꽃 액자 이미지 생성",
    version="0.1.0",
    lifespan=lifespan,
)

# Static files (CSS, JS, frames)
static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=static_dir), name="static")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """폼 파싱 실패도 {error, details} 형식의 400으로."""
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request",
            "details": "; ".join(
                f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
                for err in exc.errors()
            ),
        },
    )


# =============================================================================
# Routes
# =============================================================================

# 페이지 라우트 (HTML)
app.include_router(pages.router, tags=["Pages"])

# API 라우트
app.include_router(preserve.api_router, prefix="/api", tags=["Preserve API"])


# =============================================================================
# Root Endpoints
# =============================================================================


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
