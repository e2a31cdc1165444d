"""
Tests for COA validation

Every check is exercised against a small COA that is clean apart from
the one problem under test.
"""

import pytest

from coa_compiler.config import CompilerSettings
from coa_compiler.models.coa import (
    Account,
    PostingRule,
    ValidationRuleType,
    ValidationStatus,
)
from coa_compiler.validation import COAValidator


def _clean_accounts(required=10):
    """Twelve asset accounts, the first `required` of them required."""
    return [
        Account(
            code=f"1{i:06d}",
            name=f"Asset {i}",
            type="assets",
            required=i < required,
            smart_code=f"HERA.GEN.ASSET.GEN.{i:06d}.v1",
        )
        for i in range(12)
    ]


def _clean_rules(count=5):
    return [
        PostingRule(pattern=f"HERA.GEN.MOVE.R{i}.v1", debit=["1000000"], credit=["1000001"])
        for i in range(count)
    ]


def _findings(results, rule_type):
    return [r for r in results if r.rule_type == rule_type]


@pytest.fixture
def validator(settings):
    return COAValidator(settings)


class TestCleanCOA:
    """Tests for a COA with nothing to report."""

    def test_single_overall_pass(self, validator):
        """Test that a clean COA yields exactly one overall pass."""
        results = validator.validate(_clean_accounts(), _clean_rules())
        assert len(results) == 1
        assert results[0].rule_type == ValidationRuleType.OVERALL
        assert results[0].status == ValidationStatus.PASS
        assert validator.is_ready_for_implementation(results)

    def test_summary_for_clean_coa(self, validator):
        """Test the summary shown when nothing needs attention."""
        results = validator.validate(_clean_accounts(), _clean_rules())
        assert validator.get_summary(results).startswith("All checks passed")


class TestFormatCheck:
    """Tests for the account code format check."""

    def test_short_code_fails(self, validator):
        """Test that a 2-digit code blocks implementation."""
        accounts = _clean_accounts() + [
            Account(code="12", name="Bad", type="assets", smart_code="HERA.GEN.ASSET.GEN.12.v1"),
        ]
        results = validator.validate(accounts, _clean_rules())
        failures = _findings(results, ValidationRuleType.FORMAT)
        assert len(failures) == 1
        assert failures[0].status == ValidationStatus.FAIL
        assert failures[0].account_codes == ("12",)
        assert not validator.is_ready_for_implementation(results)
        assert not _findings(results, ValidationRuleType.OVERALL)

    def test_non_numeric_code_fails(self, validator):
        """Test that letters in a code fail the format check."""
        accounts = _clean_accounts() + [
            Account(code="CASH001", name="Bad", type="assets", smart_code="HERA.GEN.ASSET.GEN.X.v1"),
        ]
        results = validator.validate(accounts, _clean_rules())
        assert _findings(results, ValidationRuleType.FORMAT)[0].account_codes == ("CASH001",)

    def test_non_ascii_digits_fail(self, validator):
        """Test that digits outside 0-9 do not satisfy the format check."""
        accounts = _clean_accounts() + [
            Account(code="١٢٣٤٥٦٧", name="Bad", type="assets", required=True, smart_code="HERA.GEN.ASSET.GEN.X.v1"),
        ]
        results = validator.validate(accounts, _clean_rules())
        failures = _findings(results, ValidationRuleType.FORMAT)
        assert len(failures) == 1
        assert failures[0].status == ValidationStatus.FAIL
        assert failures[0].account_codes == ("١٢٣٤٥٦٧",)
        assert not validator.is_ready_for_implementation(results)

    def test_digits_follow_settings(self):
        """Test that the expected width comes from settings."""
        validator = COAValidator(CompilerSettings(_env_file=None, account_code_digits=4))
        results = validator.validate(_clean_accounts(), _clean_rules())
        assert len(_findings(results, ValidationRuleType.FORMAT)[0].account_codes) == 12

    def test_long_code_lists_are_truncated(self):
        """Test that findings name at most five codes in their message."""
        validator = COAValidator(CompilerSettings(_env_file=None, account_code_digits=4))
        results = validator.validate(_clean_accounts(), _clean_rules())
        assert "and 7 more" in _findings(results, ValidationRuleType.FORMAT)[0].message


class TestAdvisoryChecks:
    """Tests for checks that only warn."""

    def test_too_few_required_accounts(self, validator):
        """Test that fewer than ten required accounts is a warning."""
        results = validator.validate(_clean_accounts(required=9), _clean_rules())
        warnings = _findings(results, ValidationRuleType.COMPLETENESS)
        assert len(warnings) == 1
        assert warnings[0].status == ValidationStatus.WARNING
        assert validator.is_ready_for_implementation(results)

    def test_missing_smart_code(self, validator):
        """Test that an account without a smart code is reported."""
        accounts = _clean_accounts() + [Account(code="1000099", name="Plain", type="assets")]
        results = validator.validate(accounts, _clean_rules())
        assert _findings(results, ValidationRuleType.SMART_CODE)[0].account_codes == ("1000099",)

    def test_too_few_posting_rules(self, validator):
        """Test that fewer than five rules is a warning."""
        results = validator.validate(_clean_accounts(), _clean_rules(count=4))
        assert _findings(results, ValidationRuleType.AUTOMATION)[0].status == ValidationStatus.WARNING

    def test_numbering_mismatch(self, validator):
        """Test that an expense numbered in the revenue range is reported."""
        accounts = _clean_accounts() + [
            Account(code="4000001", name="Misfiled", type="expenses", smart_code="HERA.GEN.EXP.GEN.1.v1"),
        ]
        results = validator.validate(accounts, _clean_rules())
        assert _findings(results, ValidationRuleType.NUMBERING)[0].account_codes == ("4000001",)

    def test_normal_balance_mismatch(self, validator):
        """Test that a liability with a debit balance is reported."""
        accounts = _clean_accounts() + [
            Account(
                code="2000001", name="Odd", type="liabilities", normal_balance="debit",
                smart_code="HERA.GEN.LIAB.GEN.1.v1",
            ),
        ]
        results = validator.validate(accounts, _clean_rules())
        assert _findings(results, ValidationRuleType.NORMAL_BALANCE)[0].account_codes == ("2000001",)

    def test_contra_accounts_exempt(self, validator):
        """Test that contra subtypes may sit on the opposite side."""
        accounts = _clean_accounts() + [
            Account(
                code="1510000", name="Accumulated Depreciation", type="assets",
                subtype="contra_asset", normal_balance="credit",
                smart_code="HERA.GEN.ASSET.CONTRA.510000.v1",
            ),
        ]
        results = validator.validate(accounts, _clean_rules())
        assert not _findings(results, ValidationRuleType.NORMAL_BALANCE)

    def test_unknown_posting_accounts(self, validator):
        """Test that each rule pointing at missing accounts is reported."""
        rules = _clean_rules() + [
            PostingRule(pattern="HERA.GEN.A.v1", debit=["9999999"], credit=["1000000"]),
            PostingRule(pattern="HERA.GEN.B.v1", debit=["1000000"], credit=["8888888"]),
        ]
        results = validator.validate(_clean_accounts(), rules)
        findings = _findings(results, ValidationRuleType.POSTING_REFERENCES)
        assert [f.account_codes for f in findings] == [("9999999",), ("8888888",)]
        assert validator.is_ready_for_implementation(results)

    def test_unbalanced_rule(self, validator):
        """Test that unequal debit and credit weights are reported."""
        rules = _clean_rules() + [
            PostingRule(
                pattern="HERA.GEN.SPLIT.v1",
                debit=["1000000"],
                credit=[
                    {"account_code": "1000001", "weight": "0.5"},
                    {"account_code": "1000002", "weight": "0.4"},
                ],
            ),
        ]
        results = validator.validate(_clean_accounts(), rules)
        assert len(_findings(results, ValidationRuleType.POSTING_BALANCE)) == 1

    def test_duplicate_smart_codes(self, validator):
        """Test that two accounts sharing a smart code are reported."""
        accounts = _clean_accounts() + [
            Account(code="1000050", name="Copy", type="assets", smart_code="HERA.GEN.ASSET.GEN.000001.v1"),
        ]
        results = validator.validate(accounts, _clean_rules())
        findings = _findings(results, ValidationRuleType.DUPLICATE_SMART_CODES)
        assert findings[0].account_codes == ("1000001", "1000050")

    def test_checks_are_independent(self, validator):
        """Test that every problem is reported even when others exist."""
        accounts = _clean_accounts(required=3) + [Account(code="12", name="Bad", type="assets")]
        results = validator.validate(accounts, _clean_rules(count=1))
        rule_types = {r.rule_type for r in results}
        assert {
            ValidationRuleType.COMPLETENESS,
            ValidationRuleType.FORMAT,
            ValidationRuleType.SMART_CODE,
            ValidationRuleType.AUTOMATION,
        } <= rule_types


class TestSummary:
    """Tests for the readable summary."""

    def test_summary_with_failures_and_warnings(self, validator):
        """Test that failures come first and block implementation."""
        accounts = _clean_accounts(required=3) + [
            Account(code="12", name="Bad", type="assets", smart_code="HERA.GEN.ASSET.GEN.12.v1"),
        ]
        summary = validator.get_summary(validator.validate(accounts, _clean_rules()))
        assert summary.index("must be fixed") < summary.index("Please review")
        assert summary.endswith("Implementation is blocked until the failures above are resolved.")

    def test_summary_with_warnings_only(self, validator):
        """Test the closing line when only warnings exist."""
        summary = validator.get_summary(validator.validate(_clean_accounts(required=3), _clean_rules()))
        assert "You can proceed" in summary
