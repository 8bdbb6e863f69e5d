"""
Application Services.

- image_generator: 템플릿 + 요청 필드 → PNG
"""

from .image_generator import FieldLayout, ImageGenerator

__all__ = [
    "FieldLayout",
    "ImageGenerator",
]
