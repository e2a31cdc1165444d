"""
Template Store Package

Provides the template lookup contract and concrete repositories.
"""

from coa_compiler.templates.interface import TemplateRepository, TemplateStoreError
from coa_compiler.templates.memory import InMemoryTemplateRepository
from coa_compiler.templates.builtin import (
    BUILTIN_TEMPLATES,
    GLOBAL_POSTING_RULES,
    UNIVERSAL_BASE,
    create_default_repository,
)

__all__ = [
    # Interface
    "TemplateRepository",
    "TemplateStoreError",
    # Implementations
    "InMemoryTemplateRepository",
    "create_default_repository",
    # Built-in content
    "BUILTIN_TEMPLATES",
    "GLOBAL_POSTING_RULES",
    "UNIVERSAL_BASE",
]
