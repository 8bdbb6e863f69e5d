"""
표시 영역: 로딩, 결과, 오류를 보여주는 유일한 자리.

RenderState를 정확히 1개 보유. 전이마다 상태와 markup을 통째로 교체하고
밀려난 이미지의 lease를 해제함.
"""

import logging

from src.domain.schemas import Idle, RenderState, Success

from .handles import ImageHandleStore
from .render import Renderer

logger = logging.getLogger(__name__)


class DisplayRegion:
    """
    현재 렌더 상태 + markup.

    `scroll_into_view`: 마지막 전이가 영역 스크롤을 요청했는지 (Success만).
    """

    element_id = "responseContainer"

    def __init__(self, renderer: Renderer, handles: ImageHandleStore) -> None:
        self.renderer = renderer
        self.handles = handles
        self.state: RenderState = Idle()
        self.markup = ""
        self.scroll_into_view = False

    def replace(self, state: RenderState) -> None:
        previous = self.state
        self.state = state
        self.markup = self.renderer.render(state)
        self.scroll_into_view = isinstance(state, Success)

        if isinstance(previous, Success) and previous is not state:
            self.handles.release(previous.handle.handle_id)

        logger.debug(f"Display region -> {state.kind.value}")

    @property
    def current_handle_id(self) -> str | None:
        if isinstance(self.state, Success):
            return self.state.handle.handle_id
        return None
