"""
Core layer: ID 생성 + 로깅 설정.
"""

from .ids import (
    generate_download_filename,
    generate_handle_id,
    generate_random_hex,
    generate_session_id,
)
from .logging import configure_logging

__all__ = [
    # ids
    "generate_random_hex",
    "generate_download_filename",
    "generate_session_id",
    "generate_handle_id",
    # logging
    "configure_logging",
]
