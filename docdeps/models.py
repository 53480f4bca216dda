"""Data models for docdeps.

This module contains the core data structures used throughout docdeps,
representing document templates, the documents a project already has,
and the results of dependency validation and generation ordering.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple


PRIORITIES = ("critical", "high", "medium", "low")
PRIORITY_ORDER = {name: rank for rank, name in enumerate(PRIORITIES)}


@dataclass(frozen=True, slots=True)
class TemplateDescriptor:
    """Static metadata describing one generatable document type.

    Descriptors are frozen and hold ``dependencies`` as a tuple, so one
    instance can be shared by every registry and result that refers to it.
    """

    id: str
    name: str
    category: str
    priority: str
    knowledge_area: str
    dependencies: Tuple[str, ...] = ()
    description: str = ""
    estimated_effort: str = ""

    def __post_init__(self):
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "priority": self.priority,
            "knowledge_area": self.knowledge_area,
            "dependencies": list(self.dependencies),
            "description": self.description,
            "estimated_effort": self.estimated_effort,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TemplateDescriptor":
        """Create from dictionary representation."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            category=data.get("category", ""),
            priority=data.get("priority", "medium"),
            knowledge_area=data.get("knowledge_area", data.get("knowledgeArea", "")),
            dependencies=tuple(str(dep) for dep in data.get("dependencies", ())),
            description=data.get("description", ""),
            estimated_effort=data.get("estimated_effort", data.get("estimatedEffort", "")),
        )

    @property
    def priority_rank(self) -> int:
        """Sort key for priority, critical first."""
        return PRIORITY_ORDER.get(self.priority, len(PRIORITIES))

    def validate(self) -> List[str]:
        """Validate the descriptor and return any issues."""
        issues = []

        if not self.id:
            issues.append("Template ID is required")
        if not self.name:
            issues.append(f"Template name is required for '{self.id}'")
        if self.priority not in PRIORITY_ORDER:
            issues.append(f"Invalid priority for '{self.id}': {self.priority}")
        if self.id and self.id in self.dependencies:
            issues.append(f"Template '{self.id}' depends on itself")

        return issues


@dataclass(slots=True)
class AvailableDocument:
    """A document already produced in the current session."""

    id: str
    name: str = ""
    template_id: Optional[str] = None
    path: Optional[Path] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "template_id": self.template_id,
            "path": str(self.path) if self.path else None,
        }

    @classmethod
    def coerce(cls, value: Any) -> Optional["AvailableDocument"]:
        """Read a caller-supplied entry, returning None when it is unusable."""
        if isinstance(value, AvailableDocument):
            return value
        if isinstance(value, str):
            return cls(id=value, name=value) if value.strip() else None
        if isinstance(value, dict):
            template_id = value.get("template_id", value.get("templateId"))
            doc_id = value.get("id") or template_id
            if not doc_id:
                return None
            return cls(
                id=str(doc_id),
                name=str(value.get("name") or ""),
                template_id=str(template_id) if template_id else None,
            )
        return None


@dataclass(slots=True)
class DependencyValidationResult:
    """Outcome of checking one template's prerequisites."""

    is_valid: bool
    missing_dependencies: List[TemplateDescriptor] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    template: Optional[TemplateDescriptor] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "is_valid": self.is_valid,
            "template": self.template.to_dict() if self.template else None,
            "missing_dependencies": [dep.to_dict() for dep in self.missing_dependencies],
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
        }

    @property
    def critical_missing(self) -> List[TemplateDescriptor]:
        return [dep for dep in self.missing_dependencies if dep.priority == "critical"]


@dataclass(slots=True)
class GenerationOrder:
    """Batch generation order, tagged with whatever could not be placed.

    ``order`` is always safe to generate left to right. When ``is_complete``
    is false, ``unresolved`` names the requested templates that were left out
    and ``cycles`` names any dependency cycles found among them.
    """

    order: List[TemplateDescriptor] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)
    unknown: List[str] = field(default_factory=list)
    cycles: List[List[str]] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.unresolved and not self.unknown

    @property
    def ids(self) -> List[str]:
        return [descriptor.id for descriptor in self.order]

    def __iter__(self) -> Iterator[TemplateDescriptor]:
        return iter(self.order)

    def __len__(self) -> int:
        return len(self.order)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "is_complete": self.is_complete,
            "order": [descriptor.to_dict() for descriptor in self.order],
            "unresolved": list(self.unresolved),
            "unknown": list(self.unknown),
            "cycles": [list(cycle) for cycle in self.cycles],
        }
