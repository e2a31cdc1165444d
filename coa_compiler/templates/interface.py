"""
Abstract Template Repository

DESIGN DECISION: The compiler depends on a lookup contract, not on where
templates live. This allows us to:
1. Ship built-in templates for common industries and countries
2. Load curated templates from disk or a database
3. Use small hand-built repositories in tests

Repositories are shared by reference and read-only after construction,
so any number of compilations may use one concurrently.
"""

from abc import ABC, abstractmethod
from typing import Optional

from coa_compiler.models.coa import PostingRule, Template, TemplateCategory


class TemplateRepository(ABC):
    """
    Abstract interface for template lookups.

    Any template store must implement these methods.
    """

    @abstractmethod
    def load_template(
        self,
        template_id: str,
        category: TemplateCategory,
    ) -> Optional[Template]:
        """
        Retrieve a template by identifier.

        Args:
            template_id: Template key (e.g. 'restaurant', 'usa')
            category: Store partition to look in

        Returns:
            The template if found, None otherwise. Absence is not an error.

        Raises:
            TemplateStoreError: If the store itself cannot be read
        """
        pass

    @abstractmethod
    def load_posting_rules(self) -> list[PostingRule]:
        """
        Retrieve the global generic posting rules.

        Returns:
            Rules in their canonical order

        Raises:
            TemplateStoreError: If the store itself cannot be read
        """
        pass

    @abstractmethod
    def list_templates(
        self,
        category: Optional[TemplateCategory] = None,
    ) -> list[Template]:
        """
        List available templates, optionally for one category.

        Returns:
            Templates sorted by category then identifier
        """
        pass


class TemplateStoreError(Exception):
    """Template store could not be read."""
    pass
