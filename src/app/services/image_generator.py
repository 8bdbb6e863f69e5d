"""
Image Generator: 요청 필드를 повістка 템플릿 위에 그림.

필드마다 설정된 모든 위치에 작은 랜덤 오프셋 + 랜덤 폰트 크기로 텍스트를
그림 → 같은 문서라도 픽셀 단위로 동일하지 않음.
요청 필드 (name, address, issuer) 외 레이아웃:
- number: 랜덤 문서 번호
- year, time: 설정의 고정 값

렌더링은 CPU 작업이므로 worker thread에서 실행.
"""

import asyncio
import io
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from PIL import Image, ImageDraw, ImageFont

from src.domain.errors import ErrorCodes, GenerateError
from src.domain.schemas import FieldPosition, GenerateRequest

logger = logging.getLogger(__name__)

# =============================================================================
# Layout Defaults
# =============================================================================

DEFAULT_TEMPLATE_PATH = "assets/template.png"
DEFAULT_FONT_PATH = "assets/font.ttf"
DEFAULT_COLOR = (0, 50, 150, 255)
DEFAULT_NUMBER_RANGE = (64 * 64, 512 * 512)
DEFAULT_STATIC_VALUES = {"year": "25", "time": "12:34"}

DEFAULT_FIELDS: dict[str, dict[str, Any]] = {
    "name": {
        "positions": [[255.0, 22.0], [365.0, 975.0]],
        "jitter_x": [-2.0, 3.0],
        "jitter_y": [-2.0, 2.0],
        "size": [26.0, 38.0],
    },
    "address": {
        "positions": [[305.0, 70.0]],
        "jitter_x": [-2.0, 4.0],
        "jitter_y": [-2.0, 2.0],
        "size": [26.0, 34.0],
    },
    "issuer": {
        "positions": [[305.0, 250.0], [145.0, 730.0], [265.0, 1020.0]],
        "jitter_x": [-2.0, 3.0],
        "jitter_y": [-2.0, 2.0],
        "size": [26.0, 38.0],
    },
    "number": {
        "positions": [[560.0, 135.0], [448.0, 350.0]],
        "jitter_x": [-2.0, 5.0],
        "jitter_y": [-2.2, 1.0],
        "size": [36.0, 48.0],
    },
    "year": {
        "positions": [
            [367.0, 352.0], [676.0, 453.0], [392.0, 843.0],
            [483.0, 1096.0], [836.0, 1096.0],
        ],
        "jitter_x": [-1.7, 1.7],
        "jitter_y": [-1.2, 1.2],
        "size": [32.0, 37.0],
    },
    "time": {
        "positions": [[753.0, 457.0]],
        "jitter_x": [-2.0, 8.0],
        "jitter_y": [-2.2, 2.2],
        "size": [27.0, 34.0],
    },
}


@dataclass
class FieldLayout:
    """필드 1개를 어디에, 어떻게 그릴지."""
    positions: list[FieldPosition]
    jitter_x: tuple[float, float]
    jitter_y: tuple[float, float]
    size: tuple[float, float]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FieldLayout":
        return cls(
            positions=[FieldPosition(float(x), float(y)) for x, y in data["positions"]],
            jitter_x=_pair(data.get("jitter_x", (0.0, 0.0))),
            jitter_y=_pair(data.get("jitter_y", (0.0, 0.0))),
            size=_pair(data["size"]),
        )


def _pair(value: Any) -> tuple[float, float]:
    low, high = value
    return float(low), float(high)


# =============================================================================
# Generator
# =============================================================================

class ImageGenerator:
    """템플릿 + 폰트 + 레이아웃 → PNG 바이트."""

    def __init__(
        self,
        template: Image.Image,
        fields: dict[str, FieldLayout],
        font_path: Path | None = None,
        color: tuple[int, int, int, int] = DEFAULT_COLOR,
        number_range: tuple[int, int] = DEFAULT_NUMBER_RANGE,
        static_values: dict[str, str] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.template = template.convert("RGBA")
        self.fields = fields
        self.font_path = font_path
        self.color = color
        self.number_range = number_range
        self.static_values = {**DEFAULT_STATIC_VALUES, **(static_values or {})}
        self.rng = rng or random.Random()
        self._fonts: dict[int, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    @classmethod
    def from_config(cls, config: dict[str, Any], root: Path) -> "ImageGenerator":
        """
        `generator` 설정 섹션으로 생성.

        상대 경로는 `root` 기준으로 해석.

        Raises:
            GenerateError: INITIALIZATION_ERROR (템플릿 로드 실패)
        """
        section = config.get("generator") or {}

        template_path = root / section.get("template_path", DEFAULT_TEMPLATE_PATH)
        try:
            with Image.open(template_path) as img:
                template = img.convert("RGBA")
        except (OSError, ValueError) as e:
            raise GenerateError(
                ErrorCodes.INITIALIZATION_ERROR,
                f"Failed to open template image: {e}",
            ) from e

        font_path: Path | None = root / section.get("font_path", DEFAULT_FONT_PATH)
        if not font_path.exists():
            logger.warning(f"Font not found at {font_path}, using the built-in font")
            font_path = None

        raw_fields = section.get("fields") or DEFAULT_FIELDS
        fields = {name: FieldLayout.from_dict(spec) for name, spec in raw_fields.items()}

        color = tuple(section.get("color", DEFAULT_COLOR))
        number_range = tuple(section.get("number_range", DEFAULT_NUMBER_RANGE))

        return cls(
            template=template,
            fields=fields,
            font_path=font_path,
            color=color,  # type: ignore[arg-type]
            number_range=number_range,  # type: ignore[arg-type]
            static_values=section.get("static_values"),
        )

    def _font(self, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        font = self._fonts.get(size)
        if font is None:
            if self.font_path is not None:
                font = ImageFont.truetype(str(self.font_path), size)
            else:
                font = ImageFont.load_default(size=size)
            self._fonts[size] = font
        return font

    def field_values(self, request: GenerateRequest, number: int) -> dict[str, str]:
        return {
            "name": request.name,
            "address": request.address,
            "issuer": request.issuer,
            "number": str(number),
            **self.static_values,
        }

    def render(self, request: GenerateRequest) -> bytes:
        """
        모든 필드 그리기 + PNG 인코딩.

        Raises:
            GenerateError: GENERATION_ERROR (그리기/인코딩 실패)
        """
        number = self.rng.randrange(*self.number_range)
        values = self.field_values(request, number)
        image = self.template.copy()

        try:
            self._draw_all_text(image, values)

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
        except (OSError, ValueError) as e:
            raise GenerateError(
                ErrorCodes.GENERATION_ERROR, f"Failed to encode PNG: {e}"
            ) from e

        logger.info(f"Successfully generated image for: {request.name}")
        return buffer.getvalue()

    def _draw_all_text(self, image: Image.Image, values: dict[str, str]) -> None:
        draw = ImageDraw.Draw(image)

        for field_name, layout in self.fields.items():
            text = values.get(field_name)
            if not text:
                continue

            for position in layout.positions:
                x = position.x + self.rng.uniform(*layout.jitter_x)
                y = position.y + self.rng.uniform(*layout.jitter_y)
                size = round(self.rng.uniform(*layout.size))
                draw.text(
                    (x, y),
                    text,
                    font=self._font(size),
                    fill=self.color,
                    anchor="la",
                )

    async def generate_image(self, request: GenerateRequest) -> bytes:
        return await asyncio.to_thread(self.render, request)
