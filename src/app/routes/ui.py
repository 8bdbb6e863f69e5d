"""
UI Routes: 폼 페이지 + HTMX 엔드포인트.

- GET /                                → 폼 페이지 (세션 표시 영역 Idle로 초기화)
- POST /ui/submit                      → 표시 영역 fragment (세션 쿠키 발급)
- GET /ui/state                        → 표시 영역 fragment
- GET /ui/images/{handle_id}           → 이미지 바이트
- GET /ui/images/{handle_id}/print     → 인쇄 문서 (새 탭)
- GET /ui/images/{handle_id}/save      → 첨부 다운로드

세션 쿠키 → GeneratorController 바인딩 (src/app/sessions.py 참조).
컨트롤러는 첫 제출 시에만 생성됨 (페이지 조회는 세션을 만들지 않음).
"""

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates
from starlette.background import BackgroundTask

from src.app.sessions import ControllerRegistry
from src.client.controller import GeneratorController
from src.client.display import DisplayRegion
from src.client.render import Renderer
from src.domain.schemas import Error, Loading, TextInput

logger = logging.getLogger(__name__)

# 페이지 템플릿
_templates_dir = Path(__file__).parent.parent / "templates"
jinja_templates = Jinja2Templates(directory=_templates_dir)

# Routers
router = APIRouter()  # HTML 페이지
api_router = APIRouter()  # HTMX 엔드포인트

DEFAULT_SESSION_COOKIE = "povistka_session"

DEFAULT_FORM_FIELDS: list[dict[str, str]] = [
    {"name": "name", "label": "ПІБ", "placeholder": "Прізвище Ім'я По батькові"},
    {"name": "address", "label": "Адреса", "placeholder": "Місто, вулиця, будинок"},
    {"name": "issuer", "label": "Ким видано", "placeholder": "Установа"},
]


# =============================================================================
# Helpers
# =============================================================================

def _ui_config(request: Request) -> dict[str, Any]:
    config: dict[str, Any] = getattr(request.app.state, "config", None) or {}
    return config.get("ui") or {}


def _cookie_name(request: Request) -> str:
    return str(_ui_config(request).get("session_cookie", DEFAULT_SESSION_COOKIE))


def _registry(request: Request) -> ControllerRegistry:
    registry: ControllerRegistry = request.app.state.controllers
    return registry


def _renderer(request: Request) -> Renderer:
    renderer: Renderer = request.app.state.renderer
    return renderer


def _existing_controller(request: Request) -> GeneratorController | None:
    """쿠키에 바인딩된 컨트롤러 (없으면 None, 생성하지 않음)."""
    return _registry(request).get(request.cookies.get(_cookie_name(request)))


def _set_session_cookie(request: Request, response: Response, session_id: str) -> None:
    response.set_cookie(
        _cookie_name(request),
        session_id,
        httponly=True,
        samesite="lax",
    )


def _form_fields(request: Request) -> list[TextInput]:
    fields = _ui_config(request).get("fields") or DEFAULT_FORM_FIELDS
    return [
        TextInput(
            name=field["name"],
            label=field.get("label", field["name"]),
            placeholder=field.get("placeholder", ""),
        )
        for field in fields
    ]


def _fragment(controller: GeneratorController | None) -> HTMLResponse:
    """현재 표시 영역 markup. 성공 시 HTMX에 스크롤 요청."""
    if controller is None:
        return HTMLResponse(content="")

    headers = {}
    if controller.display.scroll_into_view:
        headers["HX-Reswap"] = "innerHTML show:bottom"
    return HTMLResponse(content=controller.display.markup, headers=headers)


def _expired(request: Request) -> HTMLResponse:
    """해제됐거나 모르는 이미지 핸들 → 오류 박스 (404)."""
    renderer = _renderer(request)
    message = renderer.messages["image_expired"]
    return HTMLResponse(content=renderer.render(Error(message)), status_code=404)


# =============================================================================
# Page Routes (HTML)
# =============================================================================

@router.get("/", response_class=HTMLResponse)
async def index_page(request: Request) -> HTMLResponse:
    """
    폼 페이지.

    페이지 로드 = 새 페이지 세션: 기존 컨트롤러가 있으면 Idle로 되돌려
    이전 결과/진행 중 요청을 버리고 이미지 핸들을 해제함.
    """
    controller = _existing_controller(request)
    if controller is not None:
        controller.reset()

    renderer = _renderer(request)
    return jinja_templates.TemplateResponse(
        request,
        "index.html",
        {
            "fields": _form_fields(request),
            "loading_markup": renderer.render(Loading(renderer.messages["loading"])),
            "region_id": DisplayRegion.element_id,
        },
    )


async def fallback_page(request: Request) -> HTMLResponse:
    """모르는 GET 경로 → 폼 페이지."""
    return await index_page(request)


# =============================================================================
# HTMX Routes
# =============================================================================

@api_router.post("/submit", response_class=HTMLResponse)
async def submit_form(request: Request) -> HTMLResponse:
    """
    폼 제출 → 제출 사이클 1회 → 표시 영역 fragment.

    HTMX가 오류 박스도 swap하도록 항상 200.
    """
    cookie_value = request.cookies.get(_cookie_name(request))
    session_id, controller = _registry(request).get_or_create(cookie_value)

    form = await request.form()
    await controller.handle_submit(form)

    response = _fragment(controller)
    if session_id != cookie_value:
        _set_session_cookie(request, response, session_id)
    return response


@api_router.get("/state", response_class=HTMLResponse)
async def display_state(request: Request) -> HTMLResponse:
    """현재 표시 영역 fragment (세션 없으면 빈 영역)."""
    return _fragment(_existing_controller(request))


@api_router.get("/images/{handle_id}")
async def image(request: Request, handle_id: str) -> Response:
    """이 세션의 살아있는 핸들의 이미지 바이트."""
    controller = _existing_controller(request)
    found = controller.get_image(handle_id) if controller is not None else None
    if found is None:
        return _expired(request)

    data, media_type = found
    return Response(content=data, media_type=media_type)


@api_router.get("/images/{handle_id}/print", response_class=HTMLResponse)
async def print_image(request: Request, handle_id: str) -> HTMLResponse:
    """인쇄 문서. 인쇄 버튼이 새 탭으로 엶."""
    controller = _existing_controller(request)
    document = controller.print_image(handle_id) if controller is not None else None
    if document is None:
        return _expired(request)
    return HTMLResponse(content=document)


@api_router.get("/images/{handle_id}/save")
async def save_image(request: Request, handle_id: str) -> Response:
    """
    랜덤 파일명 첨부 다운로드.

    다운로드용 lease는 본문 전송 후 해제됨.
    """
    controller = _existing_controller(request)
    download = controller.save_image(handle_id) if controller is not None else None
    if controller is None or download is None:
        return _expired(request)

    logger.info(f"Saving image as {download.filename}")
    return Response(
        content=download.data,
        media_type=download.media_type,
        headers={"Content-Disposition": f'attachment; filename="{download.filename}"'},
        background=BackgroundTask(controller.finish_download, download),
    )
