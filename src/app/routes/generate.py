"""
Generate Routes: повістка 이미지 생성 서비스.

- POST /generate → JSON {name, address, issuer} → image/png

실패 응답 {"error": message, "success": false}:
- 400: 검증 실패 / 잘못된 본문
- 500: 생성기 사용 불가 또는 그리기 실패
"""

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from src.app.services.image_generator import ImageGenerator
from src.domain.constants import IMAGE_MEDIA_TYPE, INLINE_FILENAME, NO_CACHE
from src.domain.errors import ErrorCodes, GenerateError
from src.domain.schemas import GenerateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Error Handling
# =============================================================================

async def generate_error_handler(request: Request, exc: GenerateError) -> JSONResponse:
    """GenerateError → 매핑된 status의 JSON 에러 본문."""
    if exc.status_code >= 500:
        logger.error(f"Generate failed: {exc}")
    else:
        logger.info(f"Generate rejected: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# =============================================================================
# API Routes
# =============================================================================

@router.post("")
async def generate_image(request: Request) -> Response:
    """
    전달된 필드로 повістка 렌더링.

    본문을 직접 파싱: 잘못된 JSON, 잘못된 필드 타입도 검증 실패와 같은
    {"error"} 형태로 응답.
    """
    generator: ImageGenerator | None = getattr(request.app.state, "generator", None)
    if generator is None:
        init_error = getattr(request.app.state, "generator_error", None)
        raise GenerateError(
            ErrorCodes.INITIALIZATION_ERROR,
            init_error or "Image generator is not available",
        )

    try:
        payload = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise GenerateError(ErrorCodes.INVALID_INPUT, "Invalid input data") from None

    generate_request = GenerateRequest.from_dict(payload)
    generate_request.sanitize()
    generate_request.validate()

    logger.info(f"Processing generate request for: {generate_request.name}")

    image_data = await generator.generate_image(generate_request)

    return Response(
        content=image_data,
        media_type=IMAGE_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'inline; filename="{INLINE_FILENAME}"',
            "Cache-Control": NO_CACHE,
        },
    )
