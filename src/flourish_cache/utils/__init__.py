"""Utility modules for the media feed cache."""

from .images import image_srcset, optimized_image_url
from .log import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "image_srcset",
    "optimized_image_url",
]
