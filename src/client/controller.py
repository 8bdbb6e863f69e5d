"""
폼 컨트롤러: 폼 필드 → 렌더링된 결과까지의 제출 사이클.

흐름:
1. collect_inputs: 텍스트 필드 → trim된 dict
2. validate_inputs: name, address 필수 (실패 시 요청 없음)
3. generate_image: Loading → POST /generate → Success | Error
4. print_image / save_image: 현재 결과에 대한 내보내기 액션
5. reset: 새 페이지 세션 → Idle

협력 객체 (표시 영역, HTTP client, 핸들 저장소)는 주입받음 → 여러 컨트롤러
공존 가능. UI는 브라우저 세션마다 1개 보유.

겹치는 제출은 fencing: 제출마다 새 request id, 완료 결과는 그 id가 아직
최신일 때만 반영됨.
"""

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from src.core.ids import generate_download_filename
from src.domain.constants import (
    GENERATE_ENDPOINT,
    IMAGE_URL_TEMPLATE,
    REQUIRED_FORM_FIELDS,
)
from src.domain.errors import (
    ControllerError,
    ParsingError,
    ServiceError,
    TransportError,
    ValidationError,
)
from src.domain.schemas import (
    Download,
    Error,
    Idle,
    Loading,
    RenderState,
    Success,
)

from .display import DisplayRegion
from .handles import ImageHandleStore
from .render import Renderer

logger = logging.getLogger(__name__)


def default_image_url(handle_id: str) -> str:
    return IMAGE_URL_TEMPLATE.format(handle_id=handle_id)


class GeneratorController:
    """표시 영역을 Idle / Loading / Success / Error로 전이시킴."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        renderer: Renderer | None = None,
        handles: ImageHandleStore | None = None,
        display: DisplayRegion | None = None,
        endpoint: str = GENERATE_ENDPOINT,
        image_url: Callable[[str], str] = default_image_url,
    ) -> None:
        self.http_client = http_client
        self.renderer = renderer or Renderer()
        self.handles = handles or ImageHandleStore()
        self.display = display or DisplayRegion(self.renderer, self.handles)
        self.endpoint = endpoint
        self.image_url = image_url
        self.messages = self.renderer.messages
        self._latest_request_id = 0

    # =========================================================================
    # Input Collection & Validation
    # =========================================================================

    @staticmethod
    def collect_inputs(fields: Mapping[str, Any]) -> dict[str, str]:
        """
        텍스트 필드 → trim된 값.

        텍스트가 아닌 값 (파일 업로드)은 건너뜀.
        """
        data: dict[str, str] = {}
        for key, value in fields.items():
            if isinstance(value, str):
                data[key] = value.strip()
        return data

    def check_inputs(self, data: Mapping[str, str]) -> None:
        """
        Raises:
            ValidationError: 누락되었거나 공백인 첫 번째 필수 필드
        """
        for field_name in REQUIRED_FORM_FIELDS:
            if not data.get(field_name, "").strip():
                raise ValidationError(field_name, self.messages[f"{field_name}_required"])

    def validate_inputs(self, data: Mapping[str, str]) -> bool:
        """입력 검사. 실패 시 필드 메시지 표시 후 False."""
        try:
            self.check_inputs(data)
        except ValidationError as e:
            self.show_error(str(e))
            return False
        return True

    # =========================================================================
    # Submission Cycle
    # =========================================================================

    def _next_request_id(self) -> int:
        self._latest_request_id += 1
        return self._latest_request_id

    @property
    def latest_request_id(self) -> int:
        return self._latest_request_id

    async def handle_submit(self, fields: Mapping[str, Any]) -> RenderState:
        """
        폼 제출.

        Returns:
            이 제출 후의 표시 상태 (더 새로운 제출이 앞지른 경우 그 상태)
        """
        # 유효하지 않은 제출도 id를 받음: 늦게 온 결과가 오류 메시지를 덮지 않도록
        request_id = self._next_request_id()

        data = self.collect_inputs(fields)
        if not self.validate_inputs(data):
            return self.display.state

        return await self._generate(request_id, data)

    async def generate_image(self, data: Mapping[str, str]) -> RenderState:
        """검증된 데이터 POST → 결과 렌더링."""
        return await self._generate(self._next_request_id(), data)

    async def _generate(self, request_id: int, data: Mapping[str, str]) -> RenderState:
        self.show_loading()

        try:
            blob = await self._request_image(data)
        except ControllerError as e:
            logger.warning(f"Generation request {request_id} failed: {e}")
            return self._apply(request_id, Error(self.messages["error_prefix"] + str(e)))
        except Exception as e:
            logger.error(f"Generation request {request_id} failed: {e}", exc_info=True)
            return self._apply(request_id, Error(self.messages["error_prefix"] + str(e)))

        handle = self.handles.create(blob)
        return self._apply(
            request_id,
            Success(handle=handle, image_url=self.image_url(handle.handle_id)),
        )

    async def _request_image(self, data: Mapping[str, str]) -> bytes:
        """
        단발 POST. 재시도 없음.

        Raises:
            TransportError: 요청을 완료하지 못함
            ParsingError: 응답 본문 디코딩 실패
            ServiceError: 비성공 status
        """
        body = json.dumps(dict(data), ensure_ascii=False, separators=(",", ":"))
        try:
            async with self.http_client.stream(
                "POST",
                self.endpoint,
                content=body.encode("utf-8"),
                headers={"Content-Type": "application/json"},
            ) as response:
                await response.aread()
        except httpx.DecodingError as e:
            raise ParsingError(str(e) or type(e).__name__) from e
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__) from e

        if not response.is_success:
            raise ServiceError(response.status_code, self._error_message(response))

        return response.content

    def _error_message(self, response: httpx.Response) -> str:
        """JSON 실패 본문의 `error` 필드, 없으면 일반 fallback 메시지."""
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict) and payload.get("error"):
            return str(payload["error"])
        return self.messages["generic_failure"]

    def _apply(self, request_id: int, state: RenderState) -> RenderState:
        """더 새로운 제출에 밀리지 않았으면 완료 결과 반영."""
        if request_id != self._latest_request_id:
            logger.debug(
                f"Discarding result of request {request_id} "
                f"(latest is {self._latest_request_id})"
            )
            if isinstance(state, Success):
                self.handles.release(state.handle.handle_id)
            return self.display.state

        self.display.replace(state)
        return state

    # =========================================================================
    # Render Transitions
    # =========================================================================

    def show_loading(self) -> None:
        self.display.replace(Loading(self.messages["loading"]))

    def show_error(self, message: str) -> None:
        self.display.replace(Error(message))

    def reset(self) -> None:
        """
        새 페이지 세션: Idle로 되돌림.

        진행 중인 요청은 id를 올려 무효화 (완료돼도 반영 안 됨), 표시 중인
        이미지 핸들은 해제됨.
        """
        self._next_request_id()
        self.display.replace(Idle())

    # =========================================================================
    # Export Actions
    # =========================================================================

    def get_image(self, handle_id: str) -> tuple[bytes, str] | None:
        """살아있는 핸들의 바이트 + media type."""
        handle = self.handles.get(handle_id)
        if handle is None:
            return None
        return handle.data, handle.media_type

    def print_image(self, handle_id: str) -> str | None:
        """
        살아있는 핸들의 인쇄 문서.

        Returns:
            인쇄 대화상자를 여는 HTML 페이지 (핸들 해제됐으면 None)
        """
        if self.handles.get(handle_id) is None:
            return None
        return self.renderer.render_print_document(self.image_url(handle_id))

    def save_image(self, handle_id: str) -> Download | None:
        """
        살아있는 핸들의 다운로드 시작.

        핸들 lease를 1개 가져감. 호출자는 바이트 전송 후 Download를
        finish_download()에 넘겨야 함.

        Returns:
            새 랜덤 파일명의 Download (해제됐으면 None)
        """
        handle = self.handles.acquire(handle_id)
        if handle is None:
            return None

        return Download(
            handle_id=handle.handle_id,
            filename=generate_download_filename(),
            data=handle.data,
            media_type=handle.media_type,
        )

    def finish_download(self, download: Download) -> None:
        """save_image()가 가져간 lease 해제."""
        self.handles.release(download.handle_id)

    def close(self) -> None:
        """이 컨트롤러의 모든 핸들 폐기."""
        self.handles.clear()
