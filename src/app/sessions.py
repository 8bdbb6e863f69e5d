"""
브라우저 세션 → 컨트롤러 매핑.

세션 쿠키당 GeneratorController 1개. 레지스트리는 크기 제한이 있음:
가장 오래 안 쓴 세션이 축출되고 그 이미지 핸들이 해제됨.

세션 id는 항상 서버가 발급함 (클라이언트가 보낸 모르는 쿠키 값은
재사용하지 않음).
"""

import logging
from collections import OrderedDict
from collections.abc import Callable

from src.client.controller import GeneratorController
from src.core.ids import generate_session_id

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 1000


class ControllerRegistry:
    """세션별 컨트롤러의 인메모리 LRU."""

    def __init__(
        self,
        factory: Callable[[], GeneratorController],
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ) -> None:
        self.factory = factory
        self.max_sessions = max(1, max_sessions)
        self._controllers: OrderedDict[str, GeneratorController] = OrderedDict()

    def __len__(self) -> int:
        return len(self._controllers)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._controllers

    def get(self, session_id: str | None) -> GeneratorController | None:
        if session_id is None:
            return None
        controller = self._controllers.get(session_id)
        if controller is not None:
            self._controllers.move_to_end(session_id)
        return controller

    def get_or_create(self, session_id: str | None) -> tuple[str, GeneratorController]:
        """
        세션의 컨트롤러. 없으면 새 id로 생성.

        Args:
            session_id: 요청 쿠키 값 (없거나 모르는 값이면 새로 발급)

        Returns:
            (session_id, controller) - 새로 발급된 경우 id가 입력과 다름
        """
        controller = self.get(session_id)
        if session_id is not None and controller is not None:
            return session_id, controller

        session_id = generate_session_id()
        controller = self.factory()
        self._controllers[session_id] = controller
        self._evict()
        return session_id, controller

    def _evict(self) -> None:
        while len(self._controllers) > self.max_sessions:
            session_id, controller = self._controllers.popitem(last=False)
            controller.close()
            logger.info(f"Evicted session {session_id[:8]}...")

    def close_all(self) -> None:
        for controller in self._controllers.values():
            controller.close()
        self._controllers.clear()
