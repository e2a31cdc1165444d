"""Tests for the template repositories and built-in templates."""

import json
import re

import pytest

from coa_compiler.models.coa import Template, TemplateCategory
from coa_compiler.templates import (
    BUILTIN_TEMPLATES,
    GLOBAL_POSTING_RULES,
    UNIVERSAL_BASE,
    InMemoryTemplateRepository,
    TemplateStoreError,
    create_default_repository,
)


def _write_json(path, document):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document), encoding="utf-8")


class TestInMemoryRepository:
    """Tests for lookups against the in-memory store."""

    def test_loads_base_template(self, repository):
        """Test that the universal base is available."""
        base = repository.load_template("universal", TemplateCategory.BASE)
        assert base is UNIVERSAL_BASE

    def test_lookup_ignores_case(self, repository):
        """Test that template keys are matched case-insensitively."""
        template = repository.load_template("Restaurant", TemplateCategory.INDUSTRIES)
        assert template is not None
        assert template.id == "restaurant"

    def test_unknown_template_is_none(self, repository):
        """Test that absence is not an error."""
        assert repository.load_template("space_mining", TemplateCategory.INDUSTRIES) is None

    def test_lookup_respects_category(self, repository):
        """Test that an id only matches within its own category."""
        assert repository.load_template("usa", TemplateCategory.INDUSTRIES) is None

    def test_list_templates_by_category(self, repository):
        """Test listing one partition sorted by id."""
        countries = repository.list_templates(TemplateCategory.COUNTRIES)
        assert [t.id for t in countries] == ["india", "uae", "uk", "usa"]

    def test_list_all_templates(self, repository):
        """Test that listing without a category returns everything."""
        assert len(repository.list_templates()) == len(BUILTIN_TEMPLATES)

    def test_posting_rules_are_a_copy(self, repository):
        """Test that callers cannot change the store's rules."""
        rules = repository.load_posting_rules()
        rules.clear()
        assert len(repository.load_posting_rules()) == len(GLOBAL_POSTING_RULES)

    def test_duplicate_template_rejected(self):
        """Test that two templates with the same key are rejected."""
        template = Template(id="cafe", name="Cafe", category=TemplateCategory.INDUSTRIES)
        duplicate = Template(id="CAFE", name="Cafe 2", category=TemplateCategory.INDUSTRIES)
        with pytest.raises(TemplateStoreError):
            InMemoryTemplateRepository([template, duplicate])

    def test_default_repository_is_new_each_call(self):
        """Test that the factory does not hand out a shared instance."""
        assert create_default_repository() is not create_default_repository()


class TestDirectoryLoading:
    """Tests for loading templates from JSON documents."""

    def test_from_directory(self, tmp_path):
        """Test loading templates and posting rules from disk."""
        _write_json(tmp_path / "base" / "universal.json", {
            "name": "Universal",
            "accounts": [
                {"code": "1100000", "name": "Cash", "type": "assets", "required": True},
                {"code": "4100000", "name": "Sales", "type": "revenue"},
            ],
        })
        _write_json(tmp_path / "industries" / "bakery.json", {
            "name": "Bakery",
            "accounts": [{"code": "1310000", "name": "Flour", "type": "assets", "subtype": "inventory"}],
        })
        _write_json(tmp_path / "posting_rules.json", [
            {"pattern": "HERA.*.SALE.CASH.v1", "debit": ["1100000"], "credit": ["4100000"]},
        ])

        repository = InMemoryTemplateRepository.from_directory(tmp_path)

        base = repository.load_template("universal", TemplateCategory.BASE)
        bakery = repository.load_template("bakery", TemplateCategory.INDUSTRIES)
        assert base.category == TemplateCategory.BASE
        assert len(base.accounts) == 2
        assert bakery.id == "bakery"
        assert repository.load_posting_rules()[0].pattern == "HERA.*.SALE.CASH.v1"

    def test_missing_directory(self, tmp_path):
        """Test that a missing root is a store error."""
        with pytest.raises(TemplateStoreError):
            InMemoryTemplateRepository.from_directory(tmp_path / "nowhere")

    def test_unreadable_document(self, tmp_path):
        """Test that malformed JSON is a store error."""
        path = tmp_path / "base" / "universal.json"
        path.parent.mkdir()
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(TemplateStoreError):
            InMemoryTemplateRepository.from_directory(tmp_path)

    def test_invalid_template(self, tmp_path):
        """Test that a document failing validation is a store error."""
        _write_json(tmp_path / "base" / "universal.json", {
            "name": "Universal",
            "accounts": [{"code": "1100000", "name": "Cash", "type": "goodwill"}],
        })
        with pytest.raises(TemplateStoreError):
            InMemoryTemplateRepository.from_directory(tmp_path)

    def test_category_mismatch(self, tmp_path):
        """Test that a template filed under the wrong category is rejected."""
        _write_json(tmp_path / "countries" / "usa.json", {"name": "USA", "category": "industries"})
        with pytest.raises(TemplateStoreError):
            InMemoryTemplateRepository.from_directory(tmp_path)


class TestBuiltinTemplates:
    """Sanity checks over the shipped template content."""

    def test_account_codes_are_seven_digits(self):
        """Test that every built-in account uses the 7-digit format."""
        for template in BUILTIN_TEMPLATES:
            for account in template.accounts:
                assert re.match(r"^\d{7}$", account.code), (template.id, account.code)

    def test_base_has_enough_required_accounts(self):
        """Test that the universal base alone is complete."""
        assert sum(1 for a in UNIVERSAL_BASE.accounts if a.required) >= 10

    def test_global_rules_reference_base_accounts(self):
        """Test that every generic rule posts to accounts of the base layer."""
        codes = {a.code for a in UNIVERSAL_BASE.accounts}
        for rule in GLOBAL_POSTING_RULES:
            assert set(rule.account_codes) <= codes, rule.pattern

    def test_country_templates_have_currency(self):
        """Test that every country overlay declares its currency."""
        for template in BUILTIN_TEMPLATES:
            if template.category == TemplateCategory.COUNTRIES:
                assert template.currency is not None
