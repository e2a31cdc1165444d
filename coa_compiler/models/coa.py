"""
Core Data Models for the COA Compiler

These models define the strict schemas for everything flowing through a
compilation:
1. Templates and their accounts/posting rules (inputs, shared, read-only)
2. Business requirements (input, immutable)
3. The generated artifact and its parts (output, immutable)

DESIGN DECISION: Every model is frozen and every collection is a tuple.
Templates are shared by concurrent compilations, so nothing downstream
may change them; the artifact is handed to other systems as-is.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountType(str, Enum):
    """Top-level ledger account classification."""
    ASSETS = "assets"
    LIABILITIES = "liabilities"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSES = "expenses"


class NormalBalance(str, Enum):
    """Side on which increases to an account are recorded."""
    DEBIT = "debit"
    CREDIT = "credit"


class AccountProvenance(str, Enum):
    """Which template layer produced an account."""
    BASE = "base"
    INDUSTRY = "industry"
    COUNTRY = "country"


class TemplateCategory(str, Enum):
    """
    Template store partitions.

    Values match the store's category keys.
    """
    BASE = "base"
    INDUSTRIES = "industries"
    COUNTRIES = "countries"


class BusinessSize(str, Enum):
    """Business size tier. Drives the implementation plan only."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class Industry(str, Enum):
    """
    Industries with a dedicated smart-code segment.

    DESIGN DECISION: Unknown industry keys resolve to GENERIC rather than
    failing, so a business in an unlisted industry still compiles.
    """
    RESTAURANT = "restaurant"
    RETAIL = "retail"
    SALON = "salon"
    HEALTHCARE = "healthcare"
    MANUFACTURING = "manufacturing"
    PROFESSIONAL = "professional"
    TECHNOLOGY = "technology"
    CONSTRUCTION = "construction"
    HOSPITALITY = "hospitality"
    EDUCATION = "education"
    LOGISTICS = "logistics"
    FINANCIAL = "financial"
    JEWELRY = "jewelry"
    GENERIC = "generic"

    @classmethod
    def from_key(cls, key: Optional[str]) -> "Industry":
        """Resolve a free-form industry key, falling back to GENERIC."""
        if not key:
            return cls.GENERIC
        try:
            return cls(key.strip().lower())
        except ValueError:
            return cls.GENERIC


class AccountSubtype(str, Enum):
    """
    Known account subtypes.

    Accounts keep their subtype as free text; this enum is only used to
    pick a smart-code segment. Anything unlisted maps to GENERIC.
    """
    # Assets
    CASH = "cash"
    BANK = "bank"
    RECEIVABLES = "receivables"
    INVENTORY = "inventory"
    PREPAID = "prepaid"
    FIXED_ASSETS = "fixed_assets"
    CONTRA_ASSET = "contra_asset"
    # Liabilities
    PAYABLES = "payables"
    ACCRUED = "accrued"
    TAX = "tax"
    PAYROLL = "payroll"
    LONG_TERM_DEBT = "long_term_debt"
    # Equity
    CAPITAL = "capital"
    RETAINED_EARNINGS = "retained_earnings"
    # Revenue
    OPERATING_REVENUE = "operating_revenue"
    OTHER_INCOME = "other_income"
    # Expenses
    COST_OF_SALES = "cost_of_sales"
    OCCUPANCY = "occupancy"
    MARKETING = "marketing"
    DEPRECIATION = "depreciation"
    FINANCIAL = "financial"
    GENERIC = "generic"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "AccountSubtype":
        if not value:
            return cls.GENERIC
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.GENERIC


class PostingType(str, Enum):
    """Side of a posting."""
    DEBIT = "debit"
    CREDIT = "credit"


class ValidationStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"


class ValidationRuleType(str, Enum):
    """Validation checks run over a compiled COA."""
    COMPLETENESS = "completeness"
    FORMAT = "format"
    SMART_CODE = "smart_code"
    AUTOMATION = "automation"
    NUMBERING = "numbering"
    NORMAL_BALANCE = "normal_balance"
    POSTING_REFERENCES = "posting_references"
    POSTING_BALANCE = "posting_balance"
    DUPLICATE_SMART_CODES = "duplicate_smart_codes"
    OVERALL = "overall"


class StepStatus(str, Enum):
    """
    Implementation step status.

    The compiler only ever emits PENDING; execution happens elsewhere.
    """
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# Natural side of each account type
NORMAL_BALANCE_BY_TYPE: dict[AccountType, NormalBalance] = {
    AccountType.ASSETS: NormalBalance.DEBIT,
    AccountType.EXPENSES: NormalBalance.DEBIT,
    AccountType.LIABILITIES: NormalBalance.CREDIT,
    AccountType.EQUITY: NormalBalance.CREDIT,
    AccountType.REVENUE: NormalBalance.CREDIT,
}


# =============================================================================
# TEMPLATE CONTENT
# =============================================================================

class Account(BaseModel):
    """
    A single ledger account.

    Identity is the account code. Two accounts with the same name but
    different codes are different accounts.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    code: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="Canonical account key (fixed-width numeric string)"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Account display name"
    )
    type: AccountType
    subtype: str = Field(
        default=AccountSubtype.GENERIC.value,
        max_length=50,
        description="Free-form classification within the type"
    )
    normal_balance: NormalBalance
    required: bool = Field(
        default=False,
        description="Must be present for the COA to be considered complete"
    )
    smart_code: Optional[str] = Field(
        default=None,
        description="Optional on input, always set on output"
    )
    parent_code: Optional[str] = Field(
        default=None,
        description="Parent account code for hierarchy"
    )
    provenance: AccountProvenance = Field(
        default=AccountProvenance.BASE,
        description="Template layer that produced this account"
    )

    @model_validator(mode='before')
    @classmethod
    def infer_normal_balance(cls, data: Any) -> Any:
        """Fill normal_balance from the account type when omitted."""
        if isinstance(data, dict) and not data.get("normal_balance"):
            try:
                account_type = AccountType(data.get("type"))
            except ValueError:
                # Let field validation report the bad type
                return data
            data = {**data, "normal_balance": NORMAL_BALANCE_BY_TYPE[account_type]}
        return data

    @field_validator('smart_code', 'parent_code')
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @property
    def industry_specific(self) -> bool:
        return self.provenance == AccountProvenance.INDUSTRY

    @property
    def country_specific(self) -> bool:
        return self.provenance == AccountProvenance.COUNTRY


class AccountReference(BaseModel):
    """One side of a posting: an account code and its weight."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    account_code: str = Field(..., min_length=1)
    weight: Decimal = Field(
        default=Decimal("1"),
        gt=0,
        description="Share of the transaction amount posted to this account"
    )


ConditionScalar = Union[bool, int, Decimal, str]


class TriggerCondition(BaseModel):
    """A field/value predicate that must hold for a posting rule to fire."""
    model_config = ConfigDict(frozen=True)

    field: str = Field(..., min_length=1)
    operator: str = Field(
        default="eq",
        pattern="^(eq|ne|in|gt|lt)$",
    )
    value: Optional[Union[ConditionScalar, tuple[ConditionScalar, ...]]] = None

    @field_validator('value', mode='before')
    @classmethod
    def freeze_collections(cls, v: Any) -> Any:
        """Store list and set values as tuples so the condition stays hashable."""
        if isinstance(v, list):
            return tuple(v)
        if isinstance(v, (set, frozenset)):
            return tuple(sorted(v, key=str))
        return v


class PostingRule(BaseModel):
    """
    Maps a business-event pattern to the accounts it debits and credits.

    The pattern may contain a wildcard segment ("*") which is replaced with
    the industry short code when the rule is adapted for a business.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    pattern: str = Field(
        ...,
        min_length=1,
        description="Business-event pattern, e.g. HERA.*.SALE.CASH.v1"
    )
    name: str = Field(
        default="",
        max_length=200,
        description="Human-readable rule name"
    )
    debit: tuple[AccountReference, ...] = Field(
        ...,
        min_length=1,
        description="Accounts debited when the event occurs"
    )
    credit: tuple[AccountReference, ...] = Field(
        ...,
        min_length=1,
        description="Accounts credited when the event occurs"
    )
    conditions: tuple[TriggerCondition, ...] = Field(default_factory=tuple)
    smart_code: Optional[str] = None

    @field_validator('debit', 'credit', mode='before')
    @classmethod
    def coerce_references(cls, v: Any) -> Any:
        """Accept bare account codes as shorthand for weight-1 references."""
        if isinstance(v, (list, tuple)):
            return tuple(
                {"account_code": item} if isinstance(item, str) else item
                for item in v
            )
        return v

    @property
    def debit_weight(self) -> Decimal:
        return sum((ref.weight for ref in self.debit), Decimal("0"))

    @property
    def credit_weight(self) -> Decimal:
        return sum((ref.weight for ref in self.credit), Decimal("0"))

    @property
    def account_codes(self) -> list[str]:
        """Every account code this rule touches, debit side first."""
        return [ref.account_code for ref in (*self.debit, *self.credit)]


class SmartCodeMapping(BaseModel):
    """
    Resolved link from a business-event smart code to an account.

    This is what a transaction-posting engine queries to find which
    account(s) to debit or credit for an event.
    """
    model_config = ConfigDict(frozen=True)

    smart_code: str = Field(..., min_length=1)
    account_code: str = Field(..., min_length=1)
    posting_type: PostingType
    conditions: tuple[TriggerCondition, ...] = Field(default_factory=tuple)

    @property
    def key(self) -> tuple:
        """Identity of the mapping. Rules that differ only in their conditions stay apart."""
        return (self.smart_code, self.account_code, self.posting_type, self.conditions)


class Template(BaseModel):
    """
    A named, versioned bundle of accounts, posting rules and mapping hints.

    CRITICAL: Templates are shared across compilations and must never be
    mutated. They are frozen to enforce this.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    version: str = Field(default="1.0.0")
    category: TemplateCategory
    description: str = Field(default="", max_length=1000)
    currency: Optional[str] = Field(
        default=None,
        pattern="^[A-Z]{3}$",
        description="ISO currency code (country templates)"
    )
    tax_rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        le=1,
        description="Standard indirect tax rate as a fraction (country templates)"
    )
    accounts: tuple[Account, ...] = Field(default_factory=tuple)
    posting_rules: tuple[PostingRule, ...] = Field(default_factory=tuple)
    smart_code_mappings: tuple[SmartCodeMapping, ...] = Field(default_factory=tuple)


# =============================================================================
# INPUT
# =============================================================================

class BusinessRequirements(BaseModel):
    """
    What the business told us about itself.

    Drives every downstream decision and is never changed after intake.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Business name"
    )
    industry: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Industry template key"
    )
    country: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Country template key"
    )
    business_size: BusinessSize = BusinessSize.SMALL
    special_requirements: Optional[str] = Field(
        default=None,
        max_length=2000,
    )

    @field_validator('industry', 'country')
    @classmethod
    def normalize_key(cls, v: str) -> str:
        return v.lower()


# =============================================================================
# OUTPUT
# =============================================================================

class ValidationResult(BaseModel):
    """One finding from one validation check."""
    model_config = ConfigDict(frozen=True)

    rule_type: ValidationRuleType
    status: ValidationStatus
    message: str = Field(..., min_length=1)
    recommendation: Optional[str] = None
    account_codes: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Accounts the finding refers to, if any"
    )


class ImplementationStep(BaseModel):
    """One node of the rollout plan DAG."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    description: str
    estimated_minutes: int = Field(..., ge=0)
    dependencies: tuple[str, ...] = Field(default_factory=tuple)
    status: StepStatus = StepStatus.PENDING

    @property
    def estimated_time(self) -> str:
        """Human-readable estimate, e.g. '1 hour 30 minutes'."""
        hours, minutes = divmod(self.estimated_minutes, 60)
        parts = []
        if hours:
            parts.append(f"{hours} hour{'s' if hours != 1 else ''}")
        if minutes or not hours:
            parts.append(f"{minutes} minute{'s' if minutes != 1 else ''}")
        return " ".join(parts)


class SelectedTemplates(BaseModel):
    """The template layers chosen for one business."""
    model_config = ConfigDict(frozen=True)

    base: Template
    industry: Optional[Template] = None
    country: Optional[Template] = None
    missing_layers: tuple[TemplateCategory, ...] = Field(default_factory=tuple)
    reasoning: str = ""

    @property
    def layers(self) -> list[tuple[AccountProvenance, Template]]:
        """Present layers in ascending priority order."""
        result = [(AccountProvenance.BASE, self.base)]
        if self.industry is not None:
            result.append((AccountProvenance.INDUSTRY, self.industry))
        if self.country is not None:
            result.append((AccountProvenance.COUNTRY, self.country))
        return result


class COAStructure(BaseModel):
    """The consolidated account list plus how it was assembled."""
    model_config = ConfigDict(frozen=True)

    final_accounts: tuple[Account, ...]
    base_account_count: int = Field(..., ge=0)
    industry_account_count: int = Field(..., ge=0)
    country_account_count: int = Field(..., ge=0)
    overridden_codes: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Codes where a higher layer replaced a lower one"
    )

    @property
    def total_accounts(self) -> int:
        return len(self.final_accounts)


class GeneratedCOA(BaseModel):
    """
    The compiled configuration for one business.

    CRITICAL: This is the sole contract handed to downstream consumers.
    Everything except the time-derived suffix of organization_id is a
    deterministic function of the requirements and the template store.
    """
    model_config = ConfigDict(frozen=True)

    organization_id: str
    requirements: BusinessRequirements
    selected_templates: SelectedTemplates
    coa_structure: COAStructure
    posting_rules: tuple[PostingRule, ...]
    smart_code_mappings: tuple[SmartCodeMapping, ...]
    implementation_plan: tuple[ImplementationStep, ...]
    validation_results: tuple[ValidationResult, ...]

    @property
    def failures(self) -> list[ValidationResult]:
        return [r for r in self.validation_results if r.status == ValidationStatus.FAIL]

    @property
    def warnings(self) -> list[ValidationResult]:
        return [r for r in self.validation_results if r.status == ValidationStatus.WARNING]

    @property
    def is_ready_for_implementation(self) -> bool:
        """Warnings do not block; any failure does."""
        return not self.failures

    @property
    def total_estimated_minutes(self) -> int:
        return sum(step.estimated_minutes for step in self.implementation_plan)

    @property
    def currency(self) -> Optional[str]:
        country = self.selected_templates.country
        return country.currency if country is not None else None

    def account(self, code: str) -> Optional[Account]:
        """Look up a final account by code."""
        for account in self.coa_structure.final_accounts:
            if account.code == code:
                return account
        return None
