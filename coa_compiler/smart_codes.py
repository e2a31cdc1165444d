"""
Smart-Code Generation

Assigns a deterministic smart code to every account and posting rule
that does not already carry one.

Account smart codes have the shape:

    HERA.<INDUSTRY_SHORT>.<TYPE_SEGMENT>.<CODE_SUFFIX>.<VERSION>

e.g. HERA.REST.ASSET.CASH.1100000.v1

CRITICAL: Output depends only on the account, the industry and the
settings. No randomness, no clock. Explicit smart codes are never replaced.
"""

import re
from typing import Optional

from coa_compiler.config import CompilerSettings, get_settings
from coa_compiler.models.coa import (
    Account,
    AccountSubtype,
    AccountType,
    Industry,
    PostingRule,
)


INDUSTRY_SHORT_CODES: dict[Industry, str] = {
    Industry.RESTAURANT: "REST",
    Industry.RETAIL: "RETAIL",
    Industry.SALON: "SALON",
    Industry.HEALTHCARE: "HLTH",
    Industry.MANUFACTURING: "MFG",
    Industry.PROFESSIONAL: "PROF",
    Industry.TECHNOLOGY: "TECH",
    Industry.CONSTRUCTION: "CONST",
    Industry.HOSPITALITY: "HOSP",
    Industry.EDUCATION: "EDU",
    Industry.LOGISTICS: "LOGI",
    Industry.FINANCIAL: "FIN",
    Industry.JEWELRY: "JEWEL",
    Industry.GENERIC: "GEN",
}

# Fallback segment when a subtype has no specific entry
GENERIC_TYPE_SEGMENTS: dict[AccountType, str] = {
    AccountType.ASSETS: "ASSET.GEN",
    AccountType.LIABILITIES: "LIAB.GEN",
    AccountType.EQUITY: "EQUITY.GEN",
    AccountType.REVENUE: "REV.GEN",
    AccountType.EXPENSES: "EXP.GEN",
}

TYPE_SEGMENTS: dict[tuple[AccountType, AccountSubtype], str] = {
    (AccountType.ASSETS, AccountSubtype.CASH): "ASSET.CASH",
    (AccountType.ASSETS, AccountSubtype.BANK): "ASSET.BANK",
    (AccountType.ASSETS, AccountSubtype.RECEIVABLES): "ASSET.AR",
    (AccountType.ASSETS, AccountSubtype.INVENTORY): "ASSET.INV",
    (AccountType.ASSETS, AccountSubtype.PREPAID): "ASSET.PREPAID",
    (AccountType.ASSETS, AccountSubtype.FIXED_ASSETS): "ASSET.FIXED",
    (AccountType.ASSETS, AccountSubtype.CONTRA_ASSET): "ASSET.CONTRA",
    (AccountType.ASSETS, AccountSubtype.TAX): "ASSET.TAX",
    (AccountType.LIABILITIES, AccountSubtype.PAYABLES): "LIAB.AP",
    (AccountType.LIABILITIES, AccountSubtype.ACCRUED): "LIAB.ACCRUED",
    (AccountType.LIABILITIES, AccountSubtype.TAX): "LIAB.TAX",
    (AccountType.LIABILITIES, AccountSubtype.PAYROLL): "LIAB.PAYROLL",
    (AccountType.LIABILITIES, AccountSubtype.LONG_TERM_DEBT): "LIAB.LTD",
    (AccountType.EQUITY, AccountSubtype.CAPITAL): "EQUITY.CAPITAL",
    (AccountType.EQUITY, AccountSubtype.RETAINED_EARNINGS): "EQUITY.RE",
    (AccountType.REVENUE, AccountSubtype.OPERATING_REVENUE): "REV.OPERATING",
    (AccountType.REVENUE, AccountSubtype.OTHER_INCOME): "REV.OTHER",
    (AccountType.EXPENSES, AccountSubtype.COST_OF_SALES): "EXP.COGS",
    (AccountType.EXPENSES, AccountSubtype.PAYROLL): "EXP.PAYROLL",
    (AccountType.EXPENSES, AccountSubtype.OCCUPANCY): "EXP.OCCUPANCY",
    (AccountType.EXPENSES, AccountSubtype.MARKETING): "EXP.MARKETING",
    (AccountType.EXPENSES, AccountSubtype.DEPRECIATION): "EXP.DEPRECIATION",
    (AccountType.EXPENSES, AccountSubtype.FINANCIAL): "EXP.FINANCIAL",
}

SMART_CODE_PATTERN = re.compile(r"^HERA(\.[A-Z0-9_]+)+\.v[0-9]+$")

_NON_SEGMENT_CHARS = re.compile(r"[^A-Z0-9]+")


def industry_short_code(industry: Industry) -> str:
    return INDUSTRY_SHORT_CODES.get(industry, INDUSTRY_SHORT_CODES[Industry.GENERIC])


def type_segment(account_type: AccountType, subtype: Optional[str]) -> str:
    """Segment for a (type, subtype) pair, generic per type when unlisted."""
    key = (account_type, AccountSubtype.from_value(subtype))
    return TYPE_SEGMENTS.get(key, GENERIC_TYPE_SEGMENTS[account_type])


def is_smart_code(value: Optional[str]) -> bool:
    return bool(value) and SMART_CODE_PATTERN.match(value) is not None


class SmartCodeGenerator:
    """Generates smart codes for accounts and posting rules."""

    def __init__(self, settings: Optional[CompilerSettings] = None):
        self._settings = settings or get_settings()

    def account_smart_code(self, account: Account, industry: Industry) -> str:
        """Build the smart code for an account, ignoring any it already has."""
        digits = re.sub(r"[^0-9]", "", account.code) or "0"
        suffix = digits[-self._settings.smart_code_suffix_digits:]
        return ".".join([
            "HERA",
            industry_short_code(industry),
            type_segment(account.type, account.subtype),
            suffix,
            self._settings.smart_code_version,
        ])

    def rule_smart_code(self, rule: PostingRule, industry: Industry) -> str:
        """
        Build the smart code for a posting rule.

        A pattern that is already a complete smart code is used as-is;
        otherwise one is derived from the rule's name (or pattern).
        """
        if is_smart_code(rule.pattern):
            return rule.pattern
        segment = _NON_SEGMENT_CHARS.sub("_", (rule.name or rule.pattern).upper()).strip("_")
        return ".".join([
            "HERA",
            industry_short_code(industry),
            "RULE",
            segment or "UNNAMED",
            self._settings.smart_code_version,
        ])

    def assign_accounts(
        self,
        accounts: tuple[Account, ...],
        industry: Industry,
    ) -> tuple[tuple[Account, ...], int]:
        """
        Fill missing account smart codes.

        Returns:
            (accounts, number_of_codes_generated)
        """
        generated = 0
        result = []
        for account in accounts:
            if account.smart_code:
                result.append(account)
                continue
            result.append(account.model_copy(
                update={"smart_code": self.account_smart_code(account, industry)}
            ))
            generated += 1
        return tuple(result), generated

    def assign_rules(
        self,
        rules: tuple[PostingRule, ...],
        industry: Industry,
    ) -> tuple[tuple[PostingRule, ...], int]:
        """Fill missing posting-rule smart codes. Order is preserved."""
        generated = 0
        result = []
        for rule in rules:
            if rule.smart_code:
                result.append(rule)
                continue
            result.append(rule.model_copy(
                update={"smart_code": self.rule_smart_code(rule, industry)}
            ))
            generated += 1
        return tuple(result), generated
