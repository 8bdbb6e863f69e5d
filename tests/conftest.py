"""
Pytest fixtures.

- 경로 / 설정 (default.yaml)
- Pillow로 만든 템플릿 이미지 / PNG 바이트
- 브라우저 테스트용 live_server
"""

import io
import threading
import time
from collections.abc import Generator
from pathlib import Path

import pytest
import uvicorn
import yaml
from PIL import Image

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """파싱된 default.yaml."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Image Fixtures
# =============================================================================

def make_template(path: Path, size: tuple[int, int] = (1000, 1200)) -> Path:
    """흰색 RGBA 템플릿."""
    Image.new("RGBA", size, (255, 255, 255, 255)).save(path, format="PNG")
    return path


@pytest.fixture
def template_path(tmp_path: Path) -> Path:
    """디스크의 빈 템플릿 이미지."""
    return make_template(tmp_path / "template.png")


@pytest.fixture
def png_bytes() -> bytes:
    """작은 유효 PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), (0, 50, 150)).save(buffer, format="PNG")
    return buffer.getvalue()


# =============================================================================
# Config Fixtures
# =============================================================================

@pytest.fixture
def test_config(tmp_path: Path, template_path: Path) -> dict:
    """
    tmp 템플릿을 가리키는 설정.

    폰트 경로는 존재하지 않으므로 기본 폰트가 사용됨.
    """
    return {
        "generator": {
            "template_path": str(template_path),
            "font_path": str(tmp_path / "missing-font.ttf"),
        },
        "client": {"endpoint": "/generate", "timeout": 5},
        "ui": {"session_cookie": "povistka_session", "max_sessions": 10},
    }


# =============================================================================
# Browser Test Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def live_server(tmp_path_factory: pytest.TempPathFactory) -> Generator[str, None, None]:
    """
    백그라운드 스레드에서 FastAPI 앱 실행.

    실제 템플릿 에셋은 저장소에 없으므로 생성기를 빈 템플릿용으로 교체.

    Returns:
        서버 URL (e.g. "http://127.0.0.1:8765")
    """
    from src.app.main import app
    from src.app.services.image_generator import DEFAULT_FIELDS, FieldLayout, ImageGenerator

    port = 8765
    host = "127.0.0.1"

    config = uvicorn.Config(app, host=host, port=port, log_level="error")
    server = uvicorn.Server(config)

    def run_server() -> None:
        import asyncio
        asyncio.run(server.serve())

    thread = threading.Thread(target=run_server, daemon=True)
    thread.start()

    base_url = f"http://{host}:{port}"
    max_attempts = 30
    for _ in range(max_attempts):
        try:
            import httpx
            response = httpx.get(f"{base_url}/health", timeout=1.0)
            if response.status_code == 200:
                break
        except Exception:
            time.sleep(0.1)
    else:
        raise RuntimeError("Failed to start test server")

    template = make_template(tmp_path_factory.mktemp("assets") / "template.png")
    with Image.open(template) as img:
        app.state.generator = ImageGenerator(
            template=img.convert("RGBA"),
            fields={name: FieldLayout.from_dict(spec) for name, spec in DEFAULT_FIELDS.items()},
        )

    yield base_url

    server.should_exit = True
