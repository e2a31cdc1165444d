"""Configuration package."""

from coa_compiler.config.settings import CompilerSettings, get_settings

__all__ = [
    "CompilerSettings",
    "get_settings",
]
