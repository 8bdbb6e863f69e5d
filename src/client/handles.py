"""
임시 이미지 핸들.

컨트롤러마다 store 1개. 핸들은 lease가 남아 있는 동안 유효:
- 표시 영역: 이미지 표시 시 첫 lease
- 저장 다운로드: 응답 전송 완료까지 lease 1개씩 추가
마지막 lease 해제 시 바이트 폐기.
"""

import logging

from src.core.ids import generate_handle_id
from src.domain.constants import IMAGE_MEDIA_TYPE
from src.domain.schemas import ImageHandle

logger = logging.getLogger(__name__)


class ImageHandleStore:
    """세션 1개의 인메모리 핸들 저장소."""

    def __init__(self) -> None:
        self._handles: dict[str, ImageHandle] = {}

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, handle_id: object) -> bool:
        return handle_id in self._handles

    def create(self, data: bytes, media_type: str = IMAGE_MEDIA_TYPE) -> ImageHandle:
        """바이트 → lease 1개를 가진 새 핸들."""
        handle = ImageHandle(
            handle_id=generate_handle_id(),
            data=data,
            media_type=media_type,
        )
        self._handles[handle.handle_id] = handle
        return handle

    def get(self, handle_id: str) -> ImageHandle | None:
        """살아있는 핸들 (모르거나 해제됐으면 None)."""
        return self._handles.get(handle_id)

    def acquire(self, handle_id: str) -> ImageHandle | None:
        """lease 추가 획득. 핸들이 없으면 None."""
        handle = self._handles.get(handle_id)
        if handle is None:
            return None
        handle.leases += 1
        return handle

    def release(self, handle_id: str) -> bool:
        """
        lease 1개 해제.

        Returns:
            이 호출로 핸들이 해제됐으면 True
        """
        handle = self._handles.get(handle_id)
        if handle is None:
            return False

        handle.leases -= 1
        if handle.leases > 0:
            return False

        del self._handles[handle_id]
        logger.debug(f"Released image handle {handle_id} ({len(handle.data)} bytes)")
        return True

    def clear(self) -> None:
        """lease와 무관하게 모든 핸들 해제."""
        for handle in self._handles.values():
            handle.leases = 0
        self._handles.clear()
