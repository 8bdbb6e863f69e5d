"""
표시 영역 markup 렌더링.

Jinja2 autoescape: 모든 동적 문자열 (서비스 오류 메시지 포함)은
페이지에 들어가기 전에 escape됨.
"""

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from src.domain.constants import MESSAGES
from src.domain.schemas import Error, Idle, Loading, RenderState, Success

_TEMPLATES_DIR = Path(__file__).parent / "templates"


class Renderer:
    """RenderState → 표시 영역 HTML."""

    def __init__(
        self,
        messages: dict[str, str] | None = None,
        templates_dir: Path = _TEMPLATES_DIR,
    ) -> None:
        self.messages = {**MESSAGES, **(messages or {})}
        self.env = Environment(
            loader=FileSystemLoader(templates_dir),
            autoescape=select_autoescape(["html"]),
        )

    def _render(self, template_name: str, **context: Any) -> str:
        template = self.env.get_template(template_name)
        return template.render(messages=self.messages, **context)

    def render(self, state: RenderState) -> str:
        if isinstance(state, Loading):
            return self._render("loading.html", message=state.message)
        if isinstance(state, Error):
            return self._render("error.html", message=state.message)
        if isinstance(state, Success):
            return self._render(
                "image.html",
                image_url=state.image_url,
                handle_id=state.handle.handle_id,
            )
        if isinstance(state, Idle):
            return ""
        raise TypeError(f"Unknown render state: {state!r}")

    def render_print_document(self, image_url: str) -> str:
        """이미지를 담고 인쇄 대화상자를 여는 단독 페이지."""
        return self._render("print.html", image_url=image_url)
