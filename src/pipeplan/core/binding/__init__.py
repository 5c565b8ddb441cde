# src/pipeplan/core/binding/__init__.py
"""Vinculação de parâmetros (`bind`) contra o schema de um template."""

from .binder import bind

__all__ = ["bind"]
