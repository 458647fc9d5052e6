"""Utility helpers."""
from .importing import import_string, load_module

__all__ = ["import_string", "load_module"]
