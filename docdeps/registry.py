"""Template registry for docdeps.

The registry holds every known ``TemplateDescriptor`` plus the alias table
that maps human-friendly keys (slugs, display names, legacy ids) to
canonical ids. It is built once at startup and handed to the resolver.

Resolving a reference runs a fixed sequence of strategy functions, each
returning a canonical id or ``None``:

1. ``match_exact``: the reference already is a canonical id.
2. ``match_alias``: the reference is a registered alias.
3. ``match_reverse_alias``: the reference is a key written another way,
   e.g. ``"project charter"`` for ``"project-charter"``.
4. ``match_fuzzy``: normalized substring match against display names.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from . import catalog
from .errors import RegistryError
from .models import TemplateDescriptor

logger = logging.getLogger("docdeps.registry")


def normalize_key(value: str) -> str:
    """Lowercase and drop everything but ASCII letters and digits."""
    return re.sub(r"[^a-z0-9]", "", value.lower())


def slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


# ----------------------------------------------------------------------
# Resolution strategies
# ----------------------------------------------------------------------

Strategy = Callable[["Registry", str], Optional[str]]


def match_exact(registry: "Registry", ref: str) -> Optional[str]:
    return ref if ref in registry else None


def match_alias(registry: "Registry", ref: str) -> Optional[str]:
    return registry.alias_target(ref)


def match_reverse_alias(registry: "Registry", ref: str) -> Optional[str]:
    key = registry.primary_key(ref)
    if key:
        target = registry.alias_target(key)
        if target:
            return target
    return registry.alias_target(slugify(ref)) or registry.folded_alias_target(ref)


def match_fuzzy(registry: "Registry", ref: str) -> Optional[str]:
    needle = normalize_key(ref)
    if not needle:
        return None
    for descriptor in registry:
        name = normalize_key(descriptor.name)
        if name and (needle in name or name in needle):
            logger.debug(f"Fuzzy matched '{ref}' to {descriptor.name} ({descriptor.id})")
            return descriptor.id
    return None


RESOLUTION_STRATEGIES: Tuple[Strategy, ...] = (
    match_exact,
    match_alias,
    match_reverse_alias,
    match_fuzzy,
)

# Documents a project already has are matched without the fuzzy pass.
DOCUMENT_STRATEGIES: Tuple[Strategy, ...] = RESOLUTION_STRATEGIES[:-1]


class Registry:
    """Immutable set of template descriptors and their aliases."""

    def __init__(
        self,
        descriptors: Iterable[TemplateDescriptor],
        aliases: Optional[Dict[str, str]] = None,
    ):
        issues: List[str] = []
        staged: Dict[str, TemplateDescriptor] = {}
        for descriptor in descriptors:
            issues.extend(descriptor.validate())
            if descriptor.id in staged:
                issues.append(f"Duplicate template ID: {descriptor.id}")
                continue
            staged[descriptor.id] = descriptor

        self._aliases: Dict[str, str] = {}
        self._primary_keys: Dict[str, str] = {}
        for alias, target in (aliases or {}).items():
            if target not in staged:
                issues.append(f"Alias '{alias}' points to unknown template '{target}'")
                continue
            self._aliases[alias] = target
            self._primary_keys.setdefault(target, alias)

        self._folded = {alias.casefold(): target for alias, target in self._aliases.items()}
        self._descriptors: Dict[str, TemplateDescriptor] = dict(staged)

        # Dependencies may be written as aliases; store canonical ids.
        for template_id, descriptor in staged.items():
            canonical = tuple(dict.fromkeys(self._canonical_dependency(dep) for dep in descriptor.dependencies))
            if template_id in canonical and template_id not in descriptor.dependencies:
                issues.append(f"Template '{template_id}' depends on itself through an alias")
            if canonical != descriptor.dependencies:
                self._descriptors[template_id] = replace(descriptor, dependencies=canonical)

        if issues:
            raise RegistryError("Invalid template registry", issues)

        logger.debug(f"Registry built with {len(self._descriptors)} templates and {len(self._aliases)} aliases")

    def _canonical_dependency(self, dep: str) -> str:
        target = self.canonical_id(dep, DOCUMENT_STRATEGIES)
        if target:
            return target
        logger.debug(f"Dependency '{dep}' is not a registered template")
        return dep

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def default(cls) -> "Registry":
        """Registry of the stock document templates."""
        return cls(catalog.DEFAULT_TEMPLATES, catalog.DEFAULT_ALIASES)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Registry":
        """Build from the ``{"templates": [...], "aliases": {...}}`` format."""
        if not isinstance(data, dict) or not isinstance(data.get("templates"), list):
            raise RegistryError("Registry configuration must contain a 'templates' list")
        try:
            descriptors = [TemplateDescriptor.from_dict(item) for item in data["templates"]]
        except (KeyError, TypeError, AttributeError) as e:
            raise RegistryError(f"Malformed template entry: {e}")
        aliases = data.get("aliases") or {}
        if not isinstance(aliases, dict):
            raise RegistryError("Registry 'aliases' must be a mapping")
        return cls(descriptors, {str(k): str(v) for k, v in aliases.items()})

    @classmethod
    def load(cls, path: Path | str) -> "Registry":
        """Load a registry from a JSON file."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise RegistryError(f"Could not read registry file {path}: {e}")
        except json.JSONDecodeError as e:
            raise RegistryError(f"Registry file {path} is not valid JSON: {e}")
        registry = cls.from_dict(data)
        logger.info(f"Loaded {len(registry)} templates from {path}")
        return registry

    @classmethod
    def from_template_records(
        cls,
        records: Sequence[Dict[str, Any]],
        aliases: Optional[Dict[str, str]] = None,
    ) -> "Registry":
        """Build descriptors from raw template records.

        Records look like rows of the template store: ``id`` (or ``_id``),
        ``name``, ``category``, ``description`` and an optional ``metadata``
        mapping. Priority, knowledge area, effort and dependencies are taken
        from ``metadata`` when present and inferred from the category
        otherwise.
        """
        by_category: Dict[str, List[str]] = {}
        for record in records:
            record_id = str(record.get("id") or record.get("_id") or "")
            by_category.setdefault(str(record.get("category", "")).lower(), []).append(record_id)

        descriptors = []
        for record in records:
            template_id = str(record.get("id") or record.get("_id") or "")
            name = record.get("name", "")
            category = str(record.get("category", ""))
            key = category.lower()
            metadata = record.get("metadata") or {}

            explicit = metadata.get("dependencies")
            if isinstance(explicit, list):
                dependencies = tuple(str(dep) for dep in explicit)
            else:
                dependencies = tuple(
                    dep_id
                    for dep_category in catalog.CATEGORY_DEPENDENCIES.get(key, [])
                    for dep_id in by_category.get(dep_category, [])
                    if dep_id != template_id
                )

            descriptors.append(
                TemplateDescriptor(
                    id=template_id,
                    name=name,
                    category=category,
                    priority=_infer_priority(key, metadata.get("priority")),
                    knowledge_area=catalog.CATEGORY_KNOWLEDGE_AREAS.get(key, catalog.DEFAULT_KNOWLEDGE_AREA),
                    dependencies=dependencies,
                    description=record.get("description") or f"{name} template",
                    estimated_effort=catalog.CATEGORY_EFFORT.get(key, catalog.DEFAULT_EFFORT),
                )
            )

        merged = {slugify(d.name): d.id for d in descriptors if d.name}
        merged.update(aliases or {})
        return cls(descriptors, merged)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "templates": [descriptor.to_dict() for descriptor in self],
            "aliases": dict(self._aliases),
        }

    def save(self, path: Path | str) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        return path

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._descriptors

    def __iter__(self) -> Iterator[TemplateDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)

    def get(self, template_id: str) -> Optional[TemplateDescriptor]:
        return self._descriptors.get(template_id)

    def ids(self) -> List[str]:
        return list(self._descriptors)

    def alias_target(self, alias: str) -> Optional[str]:
        return self._aliases.get(alias)

    def folded_alias_target(self, alias: str) -> Optional[str]:
        return self._folded.get(alias.casefold())

    def primary_key(self, template_id: str) -> Optional[str]:
        """The preferred human-readable key for a template id."""
        return self._primary_keys.get(template_id)

    def aliases_for(self, template_id: str) -> List[str]:
        return [alias for alias, target in self._aliases.items() if target == template_id]

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def canonical_id(
        self,
        ref: Any,
        strategies: Sequence[Strategy] = RESOLUTION_STRATEGIES,
    ) -> Optional[str]:
        """Return the canonical id for any known form of ``ref``."""
        if not isinstance(ref, str) or not ref.strip():
            return None
        ref = ref.strip()
        for strategy in strategies:
            template_id = strategy(self, ref)
            if template_id is not None:
                return template_id
        return None

    def resolve(
        self,
        ref: Any,
        strategies: Sequence[Strategy] = RESOLUTION_STRATEGIES,
    ) -> Optional[TemplateDescriptor]:
        template_id = self.canonical_id(ref, strategies)
        return self._descriptors.get(template_id) if template_id else None


def _infer_priority(category_key: str, metadata_priority: Any) -> str:
    if isinstance(metadata_priority, (int, float)) and not isinstance(metadata_priority, bool):
        if metadata_priority <= 50:
            return "critical"
        if metadata_priority <= 100:
            return "high"
        if metadata_priority <= 200:
            return "medium"
        return "low"
    if category_key in catalog.CRITICAL_CATEGORIES:
        return "critical"
    if category_key in catalog.HIGH_CATEGORIES:
        return "high"
    return "medium"
