"""Content management for Akshara."""

from .curriculum import Curriculum, Grapheme, Module, load_curriculum, parse_curriculum
from .loader import ContentLoader

__all__ = [
    "ContentLoader",
    "Curriculum",
    "Grapheme",
    "Module",
    "load_curriculum",
    "parse_curriculum",
]
