"""
COA Validation

DESIGN DECISION: Validation is a battery of INDEPENDENT checks.
Every check runs on every compilation, regardless of what the others
found, and each contributes zero or more findings.

POLICIES:
- format is the only check that FAILS (blocks go-live)
- everything else is advisory and produces WARNINGS
- a single 'overall: pass' is emitted only when nothing else was found

IMPORTANT: Validation NEVER fixes anything and NEVER aborts compilation.
It annotates the artifact for the caller to act on.
"""

import re
from collections import defaultdict
from typing import Iterable, Optional

from coa_compiler.config import CompilerSettings, get_settings
from coa_compiler.models.coa import (
    NORMAL_BALANCE_BY_TYPE,
    Account,
    AccountType,
    PostingRule,
    ValidationResult,
    ValidationRuleType,
    ValidationStatus,
)


# Leading digit of an account code → expected type
NUMBERING_BY_DIGIT: dict[str, AccountType] = {
    "1": AccountType.ASSETS,
    "2": AccountType.LIABILITIES,
    "3": AccountType.EQUITY,
    "4": AccountType.REVENUE,
    "5": AccountType.EXPENSES,
    "6": AccountType.EXPENSES,
    "7": AccountType.EXPENSES,
    "8": AccountType.EXPENSES,
    "9": AccountType.EXPENSES,
}

# Findings list at most this many codes in their message
MAX_CODES_IN_MESSAGE = 5


def _code_list(codes: list[str]) -> str:
    shown = ", ".join(codes[:MAX_CODES_IN_MESSAGE])
    if len(codes) > MAX_CODES_IN_MESSAGE:
        shown += f" and {len(codes) - MAX_CODES_IN_MESSAGE} more"
    return shown


class COAValidator:
    """
    Validates a consolidated COA and its posting rules.

    Checks:
    - completeness: enough required accounts
    - format: fixed-width numeric account codes
    - smart_code: every account has a smart code
    - automation: enough posting rules
    - numbering: leading digit matches account type
    - normal_balance: normal balance matches account type
    - posting_references: rule accounts exist in the COA
    - posting_balance: debit and credit weights are equal per rule
    - duplicate_smart_codes: no two accounts share a smart code
    """

    def __init__(self, settings: Optional[CompilerSettings] = None):
        self._settings = settings or get_settings()
        self._code_pattern = re.compile(self._settings.account_code_pattern)

    def _validate_completeness(self, accounts: list[Account]) -> list[ValidationResult]:
        required_count = sum(1 for account in accounts if account.required)
        minimum = self._settings.min_required_accounts
        if required_count >= minimum:
            return []
        return [ValidationResult(
            rule_type=ValidationRuleType.COMPLETENESS,
            status=ValidationStatus.WARNING,
            message=(
                f"Only {required_count} required accounts found; "
                f"at least {minimum} are recommended"
            ),
            recommendation="Review the base template for missing core accounts",
        )]

    def _validate_format(self, accounts: list[Account]) -> list[ValidationResult]:
        invalid = [a.code for a in accounts if not self._code_pattern.match(a.code)]
        if not invalid:
            return []
        digits = self._settings.account_code_digits
        return [ValidationResult(
            rule_type=ValidationRuleType.FORMAT,
            status=ValidationStatus.FAIL,
            message=(
                f"{len(invalid)} account code(s) are not {digits}-digit numbers: "
                f"{_code_list(invalid)}"
            ),
            recommendation=f"Renumber these accounts using exactly {digits} digits",
            account_codes=tuple(invalid),
        )]

    def _validate_smart_codes(self, accounts: list[Account]) -> list[ValidationResult]:
        missing = [a.code for a in accounts if not a.smart_code]
        if not missing:
            return []
        return [ValidationResult(
            rule_type=ValidationRuleType.SMART_CODE,
            status=ValidationStatus.WARNING,
            message=f"{len(missing)} account(s) have no smart code: {_code_list(missing)}",
            recommendation="Smart-code generation should cover every account; report this",
            account_codes=tuple(missing),
        )]

    def _validate_automation(self, rules: list[PostingRule]) -> list[ValidationResult]:
        minimum = self._settings.min_posting_rules
        if len(rules) >= minimum:
            return []
        return [ValidationResult(
            rule_type=ValidationRuleType.AUTOMATION,
            status=ValidationStatus.WARNING,
            message=(
                f"Only {len(rules)} posting rules configured; "
                f"at least {minimum} are recommended for automatic posting"
            ),
            recommendation="Add posting rules for your most common business events",
        )]

    def _validate_numbering(self, accounts: list[Account]) -> list[ValidationResult]:
        mismatched = []
        for account in accounts:
            expected = NUMBERING_BY_DIGIT.get(account.code[:1])
            # Non-numeric codes are reported by the format check
            if expected is not None and expected != account.type:
                mismatched.append(account.code)
        if not mismatched:
            return []
        return [ValidationResult(
            rule_type=ValidationRuleType.NUMBERING,
            status=ValidationStatus.WARNING,
            message=(
                f"{len(mismatched)} account(s) are numbered outside their type's range: "
                f"{_code_list(mismatched)}"
            ),
            recommendation=(
                "Use 1xxxxxx for assets, 2 for liabilities, 3 for equity, "
                "4 for revenue and 5-9 for expenses"
            ),
            account_codes=tuple(mismatched),
        )]

    def _validate_normal_balance(self, accounts: list[Account]) -> list[ValidationResult]:
        mismatched = [
            account.code for account in accounts
            if not account.subtype.lower().startswith("contra")
            and account.normal_balance != NORMAL_BALANCE_BY_TYPE[account.type]
        ]
        if not mismatched:
            return []
        return [ValidationResult(
            rule_type=ValidationRuleType.NORMAL_BALANCE,
            status=ValidationStatus.WARNING,
            message=(
                f"{len(mismatched)} account(s) have a normal balance opposite to their type: "
                f"{_code_list(mismatched)}"
            ),
            recommendation="Mark contra accounts with a 'contra' subtype or fix the balance side",
            account_codes=tuple(mismatched),
        )]

    def _validate_posting_references(
        self,
        accounts: list[Account],
        rules: list[PostingRule],
    ) -> list[ValidationResult]:
        known = {account.code for account in accounts}
        results = []
        for rule in rules:
            unresolved = sorted({c for c in rule.account_codes if c not in known})
            if unresolved:
                results.append(ValidationResult(
                    rule_type=ValidationRuleType.POSTING_REFERENCES,
                    status=ValidationStatus.WARNING,
                    message=(
                        f"Posting rule {rule.smart_code or rule.pattern} references "
                        f"unknown account(s): {_code_list(unresolved)}"
                    ),
                    recommendation="Add the accounts or point the rule at existing ones",
                    account_codes=tuple(unresolved),
                ))
        return results

    def _validate_posting_balance(self, rules: list[PostingRule]) -> list[ValidationResult]:
        results = []
        for rule in rules:
            if rule.debit_weight != rule.credit_weight:
                results.append(ValidationResult(
                    rule_type=ValidationRuleType.POSTING_BALANCE,
                    status=ValidationStatus.WARNING,
                    message=(
                        f"Posting rule {rule.smart_code or rule.pattern} is unbalanced: "
                        f"debit weight {rule.debit_weight} vs credit weight {rule.credit_weight}"
                    ),
                    recommendation="Adjust the weights so both sides post the same total",
                ))
        return results

    def _validate_duplicate_smart_codes(self, accounts: list[Account]) -> list[ValidationResult]:
        by_code: dict[str, list[str]] = defaultdict(list)
        for account in accounts:
            if account.smart_code:
                by_code[account.smart_code].append(account.code)
        results = []
        for smart_code, codes in sorted(by_code.items()):
            if len(codes) > 1:
                results.append(ValidationResult(
                    rule_type=ValidationRuleType.DUPLICATE_SMART_CODES,
                    status=ValidationStatus.WARNING,
                    message=f"Smart code {smart_code} is shared by accounts {_code_list(codes)}",
                    recommendation="Give each account its own smart code",
                    account_codes=tuple(codes),
                ))
        return results

    def validate(
        self,
        accounts: Iterable[Account],
        posting_rules: Iterable[PostingRule],
    ) -> list[ValidationResult]:
        """
        Run every check and return all findings.

        Returns:
            Findings in check order, or a single 'overall: pass' result
            when no check found anything.
        """
        accounts = list(accounts)
        rules = list(posting_rules)

        results: list[ValidationResult] = []
        results.extend(self._validate_completeness(accounts))
        results.extend(self._validate_format(accounts))
        results.extend(self._validate_smart_codes(accounts))
        results.extend(self._validate_automation(rules))
        results.extend(self._validate_numbering(accounts))
        results.extend(self._validate_normal_balance(accounts))
        results.extend(self._validate_posting_references(accounts, rules))
        results.extend(self._validate_posting_balance(rules))
        results.extend(self._validate_duplicate_smart_codes(accounts))

        if not any(
            r.status in (ValidationStatus.FAIL, ValidationStatus.WARNING)
            for r in results
        ):
            results.append(ValidationResult(
                rule_type=ValidationRuleType.OVERALL,
                status=ValidationStatus.PASS,
                message=f"All checks passed for {len(accounts)} accounts and {len(rules)} posting rules",
            ))

        return results

    @staticmethod
    def is_ready_for_implementation(results: Iterable[ValidationResult]) -> bool:
        """Warnings do not block; any failure does."""
        return not any(r.status == ValidationStatus.FAIL for r in results)

    def get_summary(self, results: list[ValidationResult]) -> str:
        """
        Generate a readable summary of validation results.

        This is what we show to the person setting up the books.
        """
        failures = [r for r in results if r.status == ValidationStatus.FAIL]
        warnings = [r for r in results if r.status == ValidationStatus.WARNING]

        if not failures and not warnings:
            return "All checks passed. The chart of accounts is ready to import."

        lines = []

        if failures:
            lines.append("The following must be fixed before go-live:")
            for result in failures:
                lines.append(f"   - {result.message}")
                if result.recommendation:
                    lines.append(f"     Fix: {result.recommendation}")

        if warnings:
            if lines:
                lines.append("")
            lines.append("Please review the following:")
            for result in warnings:
                lines.append(f"   - {result.message}")

        lines.append("")
        if failures:
            lines.append("Implementation is blocked until the failures above are resolved.")
        else:
            lines.append("You can proceed with implementation, but please review the warnings.")

        return "\n".join(lines)
