"""Tests for the component catalog and its loading."""

import json
from pathlib import Path

import pytest

from design_service.models.schemas.catalog import (
    CatalogLoadError,
    ComponentCatalog,
    ComponentNotFoundError,
    load_catalog,
)


def codegens(docs, title="Private Component Codegen"):
    return [{"title": title, "rules": [{"type": "private-components", "docs": docs}]}]


class TestQuery:

    def test_unknown_component_lists_available(self, ab_catalog):
        with pytest.raises(ComponentNotFoundError) as exc_info:
            ab_catalog.query("nonexistent")

        assert "Component 'nonexistent' not found" in str(exc_info.value)
        assert "Available components: a, b" in str(exc_info.value)
        assert exc_info.value.available == ["a", "b"]

    def test_descriptive_fields_removed(self, sample_catalog):
        entry = sample_catalog.query("cat-button")
        assert entry == {"api": {"props": {"loading": "boolean"}}}

    def test_query_result_is_a_copy(self, sample_catalog):
        sample_catalog.query("cat-button")["api"]["props"]["loading"] = "changed"
        assert sample_catalog.get("cat-button")["api"]["props"]["loading"] == "boolean"


class TestCatalog:

    def test_membership(self, sample_catalog):
        assert sample_catalog.has("cat-button")
        assert "cat-table" in sample_catalog
        assert not sample_catalog.has("Button")
        assert len(sample_catalog) == 2

    def test_string_entries_become_purpose(self):
        catalog = ComponentCatalog({"cat-tag": "Coloured tag"})
        assert catalog.get("cat-tag") == {"purpose": "Coloured tag"}

    def test_describe(self, sample_catalog):
        description = sample_catalog.describe()

        assert description.startswith("- Component Library -")
        assert "  cat-button: Primary action button Form submission, Toolbar actions" in description
        assert "  cat-table: Data table with pagination Lists of records" in description
        assert description.endswith("---------------------")

    def test_describe_empty(self, empty_catalog):
        assert empty_catalog.describe() == ""
        assert empty_catalog.is_empty


class TestBuilders:

    def test_from_rules_first_private_components_rule(self):
        rules = [
            {"type": "styles", "prompt": "tailwind"},
            {"type": "private-components", "docs": {"x": {"purpose": "x"}}},
            {"type": "private-components", "docs": {"y": {"purpose": "y"}}},
        ]
        assert ComponentCatalog.from_rules(rules).names() == ["x"]

    def test_from_rules_without_docs(self):
        assert ComponentCatalog.from_rules([{"type": "styles"}]).is_empty
        assert ComponentCatalog.from_rules(None).is_empty

    def test_from_codegens_prefers_titled_group(self):
        groups = codegens({"other": {}}, title="Other") + codegens({"mine": {}})
        catalog = ComponentCatalog.from_codegens(groups, "Private Component Codegen")
        assert catalog.names() == ["mine"]

    def test_from_codegens_falls_back_to_any_group(self):
        catalog = ComponentCatalog.from_codegens(codegens({"only": {}}, title="Other"), "Missing title")
        assert catalog.names() == ["only"]

    def test_from_codegens_rejects_non_list(self):
        with pytest.raises(CatalogLoadError):
            ComponentCatalog.from_codegens({"rules": []})


class TestLoadCatalog:

    def test_first_existing_path_wins(self, tmp_path):
        first = tmp_path / "first.json"
        second = tmp_path / "second.json"
        first.write_text(json.dumps(codegens({"first": {"purpose": "1"}})), encoding="utf-8")
        second.write_text(json.dumps(codegens({"second": {"purpose": "2"}})), encoding="utf-8")

        catalog = load_catalog([str(tmp_path / "missing.json"), str(first), str(second)])

        assert catalog.names() == ["first"]
        assert catalog.source == str(first)

    def test_missing_source_gives_empty_catalog(self, tmp_path):
        catalog = load_catalog([str(tmp_path / "missing.json")])
        assert catalog.is_empty

    def test_unreadable_source_gives_empty_catalog(self, tmp_path):
        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding="utf-8")

        assert load_catalog([str(broken)]).is_empty

    def test_invalid_encoding_gives_empty_catalog(self, tmp_path):
        broken = tmp_path / "latin.json"
        broken.write_bytes(b'[{"title": "\xff\xfe"}]')

        assert load_catalog([str(broken)]).is_empty

    def test_bundled_sample_catalog(self):
        bundled = Path(__file__).resolve().parents[1] / "data" / "codegens.json"
        catalog = load_catalog([str(bundled)], "Private Component Codegen")

        assert catalog.has("cat-button")
        assert catalog.has("cat-table")
