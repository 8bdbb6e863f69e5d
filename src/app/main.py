"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uvicorn src.app.main:app --reload
- 프로덕션: uvicorn src.app.main:app --host 0.0.0.0 --port 3000
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx
import yaml
from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles

from src.app.middleware import CacheControlMiddleware, RequestLogMiddleware
from src.app.routes import generate, ui
from src.app.services.image_generator import ImageGenerator
from src.app.sessions import DEFAULT_MAX_SESSIONS, ControllerRegistry
from src.client.controller import GeneratorController
from src.client.render import Renderer
from src.core.logging import configure_logging
from src.domain.constants import GENERATE_ENDPOINT
from src.domain.errors import GenerateError

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_CLIENT_TIMEOUT = 30.0

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """YAML 설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def build_http_client(config: dict, app: FastAPI) -> httpx.AsyncClient:
    """
    컨트롤러가 생성 엔드포인트 호출에 쓰는 HTTP client.

    `client.service_url` 설정 → 원격 서비스, 아니면 이 앱이 in-process로 처리.
    """
    section = config.get("client") or {}
    timeout = float(section.get("timeout", DEFAULT_CLIENT_TIMEOUT))
    service_url = section.get("service_url")

    if service_url:
        return httpx.AsyncClient(base_url=service_url, timeout=timeout)
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://generator.local",
        timeout=timeout,
    )


def setup_state(app: FastAPI, config: dict, root: Path = PROJECT_ROOT) -> None:
    """생성기, HTTP client, renderer, 세션 레지스트리 생성."""
    app.state.config = config

    app.state.generator = None
    app.state.generator_error = None
    try:
        app.state.generator = ImageGenerator.from_config(config, root)
    except GenerateError as e:
        app.state.generator_error = e.message
        logger.error(f"Image generator unavailable: {e.message}")

    client_config = config.get("client") or {}
    ui_config = config.get("ui") or {}
    endpoint = client_config.get("endpoint", GENERATE_ENDPOINT)

    app.state.http_client = build_http_client(config, app)
    app.state.renderer = Renderer(messages=ui_config.get("messages"))

    def controller_factory() -> GeneratorController:
        return GeneratorController(
            app.state.http_client,
            renderer=app.state.renderer,
            endpoint=endpoint,
        )

    app.state.controllers = ControllerRegistry(
        controller_factory,
        max_sessions=int(ui_config.get("max_sessions", DEFAULT_MAX_SESSIONS)),
    )


async def teardown_state(app: FastAPI) -> None:
    app.state.controllers.close_all()
    await app.state.http_client.aclose()


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    시작: 설정 로드, 로깅 설정, 공유 state 생성.
    종료: 이미지 핸들 해제, HTTP client 종료.
    """
    config = load_config()
    configure_logging(config)
    setup_state(app, config)

    server = config.get("server") or {}
    logger.info(
        f"Server running on {server.get('host', '0.0.0.0')}:{server.get('port', 3000)}"
    )

    yield

    await teardown_state(app)


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Povistka Generator",
    description="Form → generated summons image with print/save",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(GenerateError, generate.generate_error_handler)  # type: ignore[arg-type]

# Middleware (마지막에 추가된 것이 먼저 실행)
app.add_middleware(CacheControlMiddleware)
app.add_middleware(RequestLogMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)

# Static files (CSS, JS, icons, fonts)
static_dir = Path(__file__).parent / "static"
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=static_dir), name="static")


# =============================================================================
# Routes
# =============================================================================

app.include_router(ui.router, prefix="", tags=["UI"])
app.include_router(ui.api_router, prefix="/ui", tags=["UI API"])
app.include_router(generate.router, prefix="/generate", tags=["Generate"])


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# 모르는 GET 경로 → 폼 페이지 (마지막에 등록)
app.add_api_route(
    "/{path:path}",
    ui.fallback_page,
    methods=["GET"],
    include_in_schema=False,
)


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    server_config = load_config().get("server") or {}
    uvicorn.run(
        "src.app.main:app",
        host=server_config.get("host", "0.0.0.0"),
        port=int(server_config.get("port", 3000)),
    )
