"""
PineScript code skeletons.

Usage:
    from pinescript_assistant.templates import TemplateResolver

    resolver = TemplateResolver()
    source = resolver.resolve("strategy", "ma cross")
"""

from .registry import (
    TemplateCategory,
    TemplateEntry,
    TemplateRegistry,
    TemplateResolver,
    build_default_registry,
    default_registry,
)

__all__ = [
    "TemplateCategory",
    "TemplateEntry",
    "TemplateRegistry",
    "TemplateResolver",
    "build_default_registry",
    "default_registry",
]
