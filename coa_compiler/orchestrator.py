"""
COA Compiler Orchestrator

This module ties the components together and defines the end-to-end
compilation flow:

    requirements → resolve templates → consolidate accounts
                 → generate smart codes → adapt posting rules
                 → validate → plan → GeneratedCOA

DESIGN DECISION: The orchestrator enforces the boundaries:
- Only a misconfigured template store raises; everything else is data
- Nothing is persisted or posted; the artifact is the only output
- Every step is logged under one correlation ID

Compilation is synchronous with no shared mutable state, so one compiler
can serve any number of concurrent callers.
"""

import re
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional
from uuid import UUID

from coa_compiler.audit import CompilationLogger, EventSink, create_correlation_id
from coa_compiler.config import CompilerSettings, get_settings
from coa_compiler.consolidation import AccountConsolidator
from coa_compiler.models.audit import CompilationEventBuilder
from coa_compiler.models.coa import (
    BusinessRequirements,
    BusinessSize,
    GeneratedCOA,
    Industry,
    PostingRule,
    SelectedTemplates,
    ValidationStatus,
)
from coa_compiler.planning import ImplementationPlanner, total_estimated_minutes
from coa_compiler.posting_rules import PostingRuleAdapter, build_smart_code_mappings
from coa_compiler.resolver import ConfigurationError, TemplateResolver
from coa_compiler.smart_codes import SmartCodeGenerator, industry_short_code
from coa_compiler.templates import (
    TemplateRepository,
    TemplateStoreError,
    create_default_repository,
)
from coa_compiler.validation import COAValidator


_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("Only non-negative values can be encoded")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def slugify(name: str) -> str:
    """Lower-case, collapse non-alphanumerics to '-', trim separators."""
    return _SLUG_SEPARATORS.sub("-", name.lower()).strip("-")


def derive_organization_id(name: str, now: datetime) -> str:
    """
    Slug of the business name plus a base-36 millisecond timestamp.

    The suffix keeps repeated compilations for the same name distinct.
    """
    slug = slugify(name) or "organization"
    millis = int(now.timestamp() * 1000)
    return f"{slug}-{to_base36(millis)}"


class COACompiler:
    """
    Orchestrates the compilation of a Chart of Accounts.

    Flow:
    1. Resolve → pick base/industry/country templates
    2. Consolidate → merge accounts, higher layers win
    3. Smart codes → fill every missing account code
    4. Adapt → specialize posting rules, derive mappings
    5. Validate → annotate with findings
    6. Plan → size the rollout plan
    7. Assemble → one immutable GeneratedCOA

    The template repository is injected and shared read-only.
    """

    def __init__(
        self,
        repository: TemplateRepository,
        settings: Optional[CompilerSettings] = None,
        logger: Optional[CompilationLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._repository = repository
        self._settings = settings or get_settings()
        self._logger = logger or CompilationLogger(level=self._settings.log_level)
        self._clock = clock or _utcnow

        self._resolver = TemplateResolver(repository, self._settings)
        self._consolidator = AccountConsolidator()
        self._smart_codes = SmartCodeGenerator(self._settings)
        self._adapter = PostingRuleAdapter()
        self._validator = COAValidator(self._settings)
        self._planner = ImplementationPlanner(self._settings)

    @property
    def settings(self) -> CompilerSettings:
        return self._settings

    def generate_coa(
        self,
        requirements: BusinessRequirements,
        correlation_id: Optional[UUID] = None,
    ) -> GeneratedCOA:
        """
        Compile the complete configuration for one business.

        Returns:
            The GeneratedCOA, with validation findings attached

        Raises:
            ConfigurationError: If the template store has no base layer or fails
        """
        correlation_id = correlation_id or create_correlation_id()

        self._logger.log(CompilationEventBuilder.compilation_started(
            business_name=requirements.name,
            industry=requirements.industry,
            country=requirements.country,
            business_size=requirements.business_size.value,
            correlation_id=correlation_id,
        ))

        try:
            templates = self._resolver.resolve(requirements)
            generic_rules = self._load_posting_rules()
        except ConfigurationError as e:
            self._logger.log(CompilationEventBuilder.configuration_error(
                error_message=str(e),
                correlation_id=correlation_id,
            ))
            raise

        self._log_templates(requirements, templates, correlation_id)

        industry = Industry.from_key(requirements.industry)

        # Step 2: Consolidate accounts
        structure = self._consolidator.consolidate(templates)
        self._logger.log(CompilationEventBuilder.accounts_consolidated(
            total_accounts=structure.total_accounts,
            overridden_codes=list(structure.overridden_codes),
            correlation_id=correlation_id,
        ))

        # Step 3: Smart codes for accounts
        accounts, generated = self._smart_codes.assign_accounts(
            structure.final_accounts, industry
        )
        structure = structure.model_copy(update={"final_accounts": accounts})

        # Step 4: Posting rules, global first then template layers in order
        template_rules = [
            rule
            for _, template in templates.layers
            for rule in template.posting_rules
        ]
        adapted = self._adapter.adapt([*generic_rules, *template_rules], industry)
        rules, generated_rule_codes = self._smart_codes.assign_rules(adapted, industry)
        mappings = build_smart_code_mappings(
            rules,
            hints=[
                hint
                for _, template in templates.layers
                for hint in template.smart_code_mappings
            ],
        )
        self._logger.log(CompilationEventBuilder.smart_codes_generated(
            generated_count=generated + generated_rule_codes,
            industry_short_code=industry_short_code(industry),
            correlation_id=correlation_id,
        ))
        self._logger.log(CompilationEventBuilder.posting_rules_adapted(
            rule_count=len(rules),
            mapping_count=len(mappings),
            correlation_id=correlation_id,
        ))

        # Step 5: Validate
        validation_results = self._validator.validate(accounts, rules)
        self._logger.log(CompilationEventBuilder.validation_completed(
            fail_count=sum(1 for r in validation_results if r.status == ValidationStatus.FAIL),
            warning_count=sum(1 for r in validation_results if r.status == ValidationStatus.WARNING),
            correlation_id=correlation_id,
        ))

        # Step 6: Plan
        plan = self._planner.plan(requirements.business_size)
        self._logger.log(CompilationEventBuilder.plan_generated(
            step_count=len(plan),
            total_minutes=total_estimated_minutes(plan),
            business_size=requirements.business_size.value,
            correlation_id=correlation_id,
        ))

        # Step 7: Assemble
        coa = GeneratedCOA(
            organization_id=derive_organization_id(requirements.name, self._clock()),
            requirements=requirements,
            selected_templates=templates,
            coa_structure=structure,
            posting_rules=rules,
            smart_code_mappings=mappings,
            implementation_plan=plan,
            validation_results=tuple(validation_results),
        )

        self._logger.log(CompilationEventBuilder.compilation_completed(
            organization_id=coa.organization_id,
            account_count=structure.total_accounts,
            rule_count=len(rules),
            ready=coa.is_ready_for_implementation,
            correlation_id=correlation_id,
        ))

        return coa

    def quick_setup_coa(
        self,
        name: str,
        industry: str,
        country: Optional[str] = None,
    ) -> GeneratedCOA:
        """Compile for a small business, defaulting the country from settings."""
        return self.generate_coa(BusinessRequirements(
            name=name,
            industry=industry,
            country=country or self._settings.default_country,
            business_size=BusinessSize.SMALL,
        ))

    def generate_many(
        self,
        requirements: Iterable[BusinessRequirements],
    ) -> list[GeneratedCOA]:
        """
        Compile several independent businesses.

        Results are in input order. A ConfigurationError stops the batch,
        since it would affect every business equally.
        """
        return [self.generate_coa(item) for item in requirements]

    def validation_summary(self, coa: GeneratedCOA) -> str:
        return self._validator.get_summary(list(coa.validation_results))

    def _load_posting_rules(self) -> list[PostingRule]:
        try:
            return self._repository.load_posting_rules()
        except TemplateStoreError as e:
            raise ConfigurationError(f"Posting rules unavailable: {e}") from e

    def _log_templates(
        self,
        requirements: BusinessRequirements,
        templates: SelectedTemplates,
        correlation_id: UUID,
    ) -> None:
        for provenance, template in templates.layers:
            self._logger.log(CompilationEventBuilder.template_resolved(
                category=template.category.value,
                template_id=template.id,
                version=template.version,
                correlation_id=correlation_id,
            ))
        requested = {
            "industries": requirements.industry,
            "countries": requirements.country,
        }
        for category in templates.missing_layers:
            self._logger.log(CompilationEventBuilder.template_layer_missing(
                category=category.value,
                key=requested[category.value],
                correlation_id=correlation_id,
            ))


def create_compiler(
    repository: Optional[TemplateRepository] = None,
    settings: Optional[CompilerSettings] = None,
    sink: Optional[EventSink] = None,
) -> COACompiler:
    """
    Factory function to create a ready-to-use compiler.

    Args:
        repository: Template store. Defaults to the built-in templates.
        settings: Compiler settings. Defaults to environment configuration.
        sink: Optional destination for compilation events.
    """
    settings = settings or get_settings()
    return COACompiler(
        repository=repository or create_default_repository(),
        settings=settings,
        logger=CompilationLogger(sink=sink, level=settings.log_level),
    )
