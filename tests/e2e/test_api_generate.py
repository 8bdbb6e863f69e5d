"""
test_api_generate.py - 전체 앱 E2E 테스트 (TestClient)

Endpoints:
- POST /generate
- GET / (폼 페이지) 및 모르는 경로
- POST /ui/submit → GET /ui/images/{handle_id}[/print|/save]
- GET /health
- GET /static/css/style.css

실제 템플릿 에셋은 배포 시 제공되므로 생성기를
빈 템플릿에 그리는 것으로 교체함.
"""

import re
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from src.app.main import app
from src.app.services.image_generator import DEFAULT_FIELDS, FieldLayout, ImageGenerator

pytestmark = pytest.mark.e2e

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def client(template_path):
    """빈 템플릿 생성기를 가진 FastAPI TestClient."""
    with TestClient(app) as client:
        with Image.open(template_path) as img:
            generator = ImageGenerator(
                template=img,
                fields={name: FieldLayout.from_dict(spec) for name, spec in DEFAULT_FIELDS.items()},
            )
        with patch.object(client.app.state, "generator", generator):
            yield client


# =============================================================================
# POST /generate
# =============================================================================


class TestGenerateEndpoint:

    def test_success(self, client):
        response = client.post(
            "/generate",
            json={"name": "Jane Doe", "address": "1 Main St", "issuer": "Office"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
        assert response.content.startswith(b"\x89PNG")

    def test_validation_error(self, client):
        response = client.post("/generate", json={"name": "", "address": "a", "issuer": "b"})

        assert response.status_code == 400
        assert response.json() == {"error": "Name cannot be empty", "success": False}
        assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"

    def test_get_not_allowed_falls_back_to_page(self, client):
        """GET /generate는 API가 아님: catch-all이 폼 페이지 제공."""
        response = client.get("/generate")

        assert response.status_code == 200
        assert 'id="generateForm"' in response.text


# =============================================================================
# Pages & Static
# =============================================================================


class TestPages:

    def test_index(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "povistka_session" not in response.cookies

    def test_fallback(self, client):
        response = client.get("/nonexistent-page-12345")

        assert response.status_code == 200
        assert 'id="generateForm"' in response.text

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_stylesheet_long_cache(self, client):
        response = client.get("/static/css/style.css")

        assert response.status_code == 200
        assert response.headers["cache-control"] == "public, max-age=31536000"

    def test_page_gzipped(self, client):
        response = client.get("/", headers={"Accept-Encoding": "gzip"})

        assert response.headers.get("content-encoding") == "gzip"


# =============================================================================
# Submit → Print / Save
# =============================================================================


class TestSubmitFlow:

    def test_full_cycle(self, client):
        client.get("/")

        fragment = client.post(
            "/ui/submit",
            data={"name": "Jane Doe", "address": "1 Main St", "issuer": "Office"},
        )
        assert "povistka_session" in fragment.cookies
        assert fragment.headers["HX-Reswap"] == "innerHTML show:bottom"

        url = re.search(r'<img src="(/ui/images/[^"]+)"', fragment.text).group(1)

        image = client.get(url)
        assert image.content.startswith(b"\x89PNG")

        printed = client.get(f"{url}/print")
        assert "window.print()" in printed.text

        saved = client.get(f"{url}/save")
        assert re.search(r'filename="povistka_[0-9a-f]{16}\.png"', saved.headers["content-disposition"])

        # 재로드 → 새 페이지 세션, 이전 이미지 만료
        client.get("/")
        assert client.get(url).status_code == 404

    def test_generator_missing_shows_error(self, client):
        with patch.object(client.app.state, "generator", None):
            fragment = client.post(
                "/ui/submit",
                data={"name": "Jane Doe", "address": "1 Main St"},
            )

        assert 'class="error"' in fragment.text
        assert "Помилка:" in fragment.text
