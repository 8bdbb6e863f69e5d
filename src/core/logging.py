"""
로깅 설정.

각 모듈은 `logging.getLogger(__name__)`로 로깅하고, 여기서는 default.yaml의
`logging` 섹션으로 root handler만 설정함:

    logging:
      level: INFO
      format: "%(asctime)s %(levelname)s %(name)s: %(message)s"
"""

import logging
from typing import Any

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(config: dict[str, Any] | None = None) -> int:
    """
    root 로깅 설정.

    Args:
        config: 전체 애플리케이션 설정 (`logging`만 읽음)

    Returns:
        적용된 숫자 레벨
    """
    section = (config or {}).get("logging") or {}
    level_name = str(section.get("level", DEFAULT_LEVEL)).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format=section.get("format", DEFAULT_FORMAT),
    )
    logging.getLogger("src").setLevel(level)
    return level
