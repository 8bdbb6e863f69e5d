"""
Client layer: 폼 컨트롤러 + 표시 영역.

- controller.py: 제출 사이클, fencing, 내보내기 액션
- display.py: 단일 표시 영역 (RenderState 1개)
- handles.py: lease 기반 임시 이미지 핸들
- render.py: escape된 HTML fragment (Jinja2)
"""

from .controller import GeneratorController
from .display import DisplayRegion
from .handles import ImageHandleStore
from .render import Renderer

__all__ = [
    "GeneratorController",
    "DisplayRegion",
    "ImageHandleStore",
    "Renderer",
]
