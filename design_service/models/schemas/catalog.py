"""Component catalog.

Read-only mapping from a reusable component's name to its documentation.
Loaded once at startup and injected into every stage that needs it; the
single ``has`` check decides whether a component counts as private.
"""

from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from design_service.utils.logging import get_logger

logger = get_logger(__name__)

PRIVATE_COMPONENTS_RULE = "private-components"

# Fields that feed the prompt description and are hidden from query results
DESCRIPTIVE_FIELDS = ("purpose", "usage")


class CatalogLoadError(Exception):
    """Catalog source missing or unreadable"""
    pass


class ComponentNotFoundError(Exception):
    """Queried component is not in the catalog"""

    def __init__(self, component_name: str, available: List[str]):
        self.component_name = component_name
        self.available = available
        super().__init__(
            f"Component '{component_name}' not found. "
            f"Available components: {', '.join(available)}"
        )


class ComponentCatalog:
    """Name → entry mapping, never mutated after construction."""

    def __init__(self, entries: Optional[Mapping[str, Any]] = None, source: Optional[str] = None):
        docs = {
            str(name): entry if isinstance(entry, dict) else {"purpose": str(entry)}
            for name, entry in (entries or {}).items()
        }
        self._entries: Mapping[str, Dict[str, Any]] = MappingProxyType(docs)
        self.source = source

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._entries

    def has(self, name: str) -> bool:
        return name in self

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(name)
        return deepcopy(entry) if entry is not None else None

    def names(self) -> List[str]:
        return list(self._entries.keys())

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def query(self, name: str) -> Dict[str, Any]:
        """
        Return an entry without its descriptive fields.

        Raises:
            ComponentNotFoundError: listing every available key
        """
        if name not in self._entries:
            raise ComponentNotFoundError(name, self.names())

        return {
            key: deepcopy(value)
            for key, value in self._entries[name].items()
            if key not in DESCRIPTIVE_FIELDS
        }

    def describe(self) -> str:
        """Purpose and usage of every entry, as a delimited prompt section."""
        lines = []
        for name, entry in self._entries.items():
            description = str(entry.get("purpose") or "")
            usage = entry.get("usage")
            if usage:
                usage_text = ", ".join(str(u) for u in usage) if isinstance(usage, list) else str(usage)
                description = f"{description} {usage_text}" if description else usage_text
            if description:
                lines.append(f"  {name}: {description}")

        if not lines:
            return ""

        return "\n".join([
            "- Component Library - The following components are available for use:",
            "---------------------",
            *lines,
            "---------------------",
        ])

    @classmethod
    def from_rules(cls, rules: Optional[Iterable[Dict[str, Any]]], source: Optional[str] = None) -> "ComponentCatalog":
        """Build from a rule list; the first private-components rule with docs wins."""
        for rule in rules or []:
            if isinstance(rule, dict) and rule.get("type") == PRIVATE_COMPONENTS_RULE and rule.get("docs"):
                return cls(rule["docs"], source=source)
        return cls({}, source=source)

    @classmethod
    def from_codegens(cls, codegens: Any, group_title: Optional[str] = None, source: Optional[str] = None) -> "ComponentCatalog":
        """
        Build from a list of rule groups.

        The group titled ``group_title`` is preferred; otherwise the first group
        carrying a private-components rule is used.
        """
        if not isinstance(codegens, list):
            raise CatalogLoadError(f"Catalog source must be a list of rule groups, got {type(codegens).__name__}")

        groups = [group for group in codegens if isinstance(group, dict)]
        if group_title:
            groups.sort(key=lambda group: group.get("title") != group_title)

        for group in groups:
            catalog = cls.from_rules(group.get("rules"), source=source)
            if not catalog.is_empty:
                return catalog

        return cls({}, source=source)


def load_catalog(paths: Iterable[str], group_title: Optional[str] = None) -> ComponentCatalog:
    """
    Load the catalog from the first candidate path that exists.

    Never raises: an absent or unreadable source degrades to an empty catalog.
    """
    candidates = [Path(p) for p in paths]

    try:
        for path in candidates:
            if not path.is_file():
                logger.debug("catalog.load.skipped", extra={"path": str(path)})
                continue

            try:
                codegens = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:  # ValueError covers bad JSON and bad encoding
                raise CatalogLoadError(f"Could not read catalog at {path}: {e}") from e

            catalog = ComponentCatalog.from_codegens(codegens, group_title, source=str(path))
            logger.info(
                "catalog.load.completed",
                extra={"path": str(path), "components": len(catalog)}
            )
            return catalog

        raise CatalogLoadError("Could not find codegens.json in any expected location")

    except CatalogLoadError as e:
        logger.warning(
            "catalog.load.degraded",
            message="Continuing with an empty component catalog",
            extra={"error": str(e), "candidates": [str(p) for p in candidates]}
        )
        return ComponentCatalog({})
