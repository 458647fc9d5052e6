"""Case registry public API."""
from .registry import CaseRegistry

__all__ = [
    "CaseRegistry",
]
