"""
In-Memory Template Repository

Holds templates in a dict keyed by (category, id). Optionally loads them
from a directory of JSON documents:

    <root>/base/universal.json
    <root>/industries/restaurant.json
    <root>/countries/usa.json
    <root>/posting_rules.json

Files are read once at construction; the repository never changes after.
"""

import json
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Optional, Union

from pydantic import TypeAdapter, ValidationError

from coa_compiler.models.coa import PostingRule, Template, TemplateCategory
from coa_compiler.templates.interface import TemplateRepository, TemplateStoreError


POSTING_RULES_FILENAME = "posting_rules.json"

_posting_rules_adapter = TypeAdapter(list[PostingRule])


class InMemoryTemplateRepository(TemplateRepository):
    """Template repository backed by an immutable mapping."""

    def __init__(
        self,
        templates: Iterable[Template] = (),
        posting_rules: Iterable[PostingRule] = (),
    ):
        index: dict[tuple[TemplateCategory, str], Template] = {}
        for template in templates:
            key = (template.category, template.id.lower())
            if key in index:
                raise TemplateStoreError(
                    f"Duplicate {template.category.value} template: {template.id}"
                )
            index[key] = template

        self._templates = MappingProxyType(index)
        self._posting_rules = tuple(posting_rules)

    def load_template(
        self,
        template_id: str,
        category: TemplateCategory,
    ) -> Optional[Template]:
        return self._templates.get((category, template_id.strip().lower()))

    def load_posting_rules(self) -> list[PostingRule]:
        return list(self._posting_rules)

    def list_templates(
        self,
        category: Optional[TemplateCategory] = None,
    ) -> list[Template]:
        keys = sorted(
            (key for key in self._templates if category is None or key[0] == category),
            key=lambda key: (key[0].value, key[1]),
        )
        return [self._templates[key] for key in keys]

    @classmethod
    def from_directory(cls, root: Union[str, Path]) -> "InMemoryTemplateRepository":
        """
        Load every template and the global posting rules under root.

        Raises:
            TemplateStoreError: If root is missing or any document is unreadable
        """
        root = Path(root)
        if not root.is_dir():
            raise TemplateStoreError(f"Template directory not found: {root}")

        templates = []
        for category in TemplateCategory:
            category_dir = root / category.value
            if not category_dir.is_dir():
                continue
            for path in sorted(category_dir.glob("*.json")):
                document = _read_json(path)
                if isinstance(document, dict):
                    document.setdefault("id", path.stem)
                    document.setdefault("category", category.value)
                try:
                    template = Template.model_validate(document)
                except ValidationError as e:
                    raise TemplateStoreError(f"Invalid template {path}: {e}") from e
                if template.category != category:
                    raise TemplateStoreError(
                        f"Template {path} declares category "
                        f"'{template.category.value}' but lives under '{category.value}'"
                    )
                templates.append(template)

        posting_rules: list[PostingRule] = []
        rules_path = root / POSTING_RULES_FILENAME
        if rules_path.exists():
            try:
                posting_rules = _posting_rules_adapter.validate_python(_read_json(rules_path))
            except ValidationError as e:
                raise TemplateStoreError(f"Invalid posting rules {rules_path}: {e}") from e

        return cls(templates, posting_rules)


def _read_json(path: Path):
    try:
        with path.open(encoding="utf-8") as handle:
            return json.load(handle)
    except (OSError, json.JSONDecodeError) as e:
        raise TemplateStoreError(f"Could not read {path}: {e}") from e
