"""
Template Resolver

Selects the base, industry and country layers for a business.

DESIGN DECISION: Unknown industry or country keys are NOT errors. The
business still gets a working COA from whatever layers exist. Only a
missing base layer (or an unreadable store) stops compilation, because
that means the store itself is misconfigured.
"""

from typing import Optional

from coa_compiler.config import CompilerSettings, get_settings
from coa_compiler.models.coa import (
    BusinessRequirements,
    SelectedTemplates,
    Template,
    TemplateCategory,
)
from coa_compiler.templates.interface import TemplateRepository, TemplateStoreError


class CompilerError(Exception):
    """Base exception for compilation errors."""
    pass


class ConfigurationError(CompilerError):
    """Template store is missing the base layer or cannot be read."""
    pass


class TemplateResolver:
    """Looks up the template layers that apply to one business."""

    def __init__(
        self,
        repository: TemplateRepository,
        settings: Optional[CompilerSettings] = None,
    ):
        self._repository = repository
        self._settings = settings or get_settings()

    def resolve(self, requirements: BusinessRequirements) -> SelectedTemplates:
        """
        Select templates for the given business.

        Raises:
            ConfigurationError: If the base template is missing or the store fails
        """
        base_id = self._settings.base_template_id
        base = self._lookup(base_id, TemplateCategory.BASE)
        if base is None:
            raise ConfigurationError(
                f"Base template '{base_id}' not found in template store"
            )

        industry = self._lookup(requirements.industry, TemplateCategory.INDUSTRIES)
        country = self._lookup(requirements.country, TemplateCategory.COUNTRIES)

        missing = []
        if industry is None:
            missing.append(TemplateCategory.INDUSTRIES)
        if country is None:
            missing.append(TemplateCategory.COUNTRIES)

        return SelectedTemplates(
            base=base,
            industry=industry,
            country=country,
            missing_layers=tuple(missing),
            reasoning=self._reasoning(requirements, base, industry, country),
        )

    def _lookup(self, template_id: str, category: TemplateCategory) -> Optional[Template]:
        try:
            return self._repository.load_template(template_id, category)
        except TemplateStoreError as e:
            raise ConfigurationError(f"Template store unavailable: {e}") from e

    @staticmethod
    def _reasoning(
        requirements: BusinessRequirements,
        base: Template,
        industry: Optional[Template],
        country: Optional[Template],
    ) -> str:
        layers = [t.name for t in (industry, country) if t is not None]
        text = (
            f"Based on your {requirements.industry} business in {requirements.country} "
            f"({requirements.business_size.value}), we selected the {base.name} template"
        )
        if layers:
            text += f" with {len(layers)} specialized layer{'s' if len(layers) != 1 else ''}: "
            text += ", ".join(layers)
        else:
            text += " with no specialized layers"
        return text + "."
