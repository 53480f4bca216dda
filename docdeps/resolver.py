"""Dependency resolution and generation ordering.

``DependencyResolver`` answers three questions against an injected
``Registry``: can this template be generated now, which templates can be
generated now, and in what order should a batch be generated.

Resolution fails open. An unregistered template is reported with a warning
and treated as having no prerequisites, malformed available-document
entries are skipped, and a batch that cannot be fully ordered comes back as
a partial ``GenerationOrder`` naming what was left out. None of the public
operations raise.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .models import (
    AvailableDocument,
    DependencyValidationResult,
    GenerationOrder,
    TemplateDescriptor,
)
from .registry import DOCUMENT_STRATEGIES, Registry, slugify

logger = logging.getLogger("docdeps.resolver")


class DependencyResolver:
    """Stateless dependency checks over a template registry."""

    def __init__(self, registry: Registry):
        self.registry = registry

    # ------------------------------------------------------------------
    # Available documents
    # ------------------------------------------------------------------

    def document_template_id(self, document: AvailableDocument) -> str:
        """Canonical template id for a document, or its raw id if unknown."""
        if document.template_id:
            candidates = [document.template_id]
        else:
            candidates = [slugify(document.name)] if document.name else []
            candidates.append(document.id)

        for candidate in candidates:
            template_id = self.registry.canonical_id(candidate, DOCUMENT_STRATEGIES)
            if template_id:
                return template_id
        return document.template_id or document.id

    def available_template_ids(self, available: Any) -> Set[str]:
        return {self.document_template_id(doc) for doc in _documents(available)}

    # ------------------------------------------------------------------
    # Single-template validation
    # ------------------------------------------------------------------

    def validate_dependencies(self, template_ref: Any, available: Any = None) -> DependencyValidationResult:
        """Check whether ``template_ref``'s prerequisites are among ``available``."""
        template = self.registry.resolve(template_ref)

        if template is None:
            logger.info(f"Template '{template_ref}' is not registered; skipping dependency checks")
            return DependencyValidationResult(
                is_valid=True,
                warnings=[f"Template '{template_ref}' not found in dependency registry, assuming no dependencies"],
                recommendations=["Consider adding this template to the dependency registry for proper validation"],
            )

        if not template.dependencies:
            return DependencyValidationResult(is_valid=True, template=template)

        present = self.available_template_ids(available)
        missing: List[TemplateDescriptor] = []
        for dep_id in template.dependencies:
            if dep_id in present:
                continue
            dependency = self.registry.get(dep_id)
            if dependency is not None:
                missing.append(dependency)

        warnings: List[str] = []
        recommendations: List[str] = []

        critical = [dep for dep in missing if dep.priority == "critical"]
        high = [dep for dep in missing if dep.priority == "high"]

        if critical:
            warnings.append(f"CRITICAL: Missing {len(critical)} required foundation document(s)")
            recommendations.append("Generate the following critical documents first to ensure document quality:")
            recommendations.extend(_describe(dep) for dep in critical)

        if high:
            warnings.append(f"RECOMMENDED: Missing {len(high)} supporting document(s)")
            recommendations.append("Consider generating these high-priority documents for enhanced document quality:")
            recommendations.extend(_describe(dep) for dep in high)

        if missing:
            logger.debug(
                f"{template.name} is missing {len(missing)} dependencies: "
                + ", ".join(dep.name for dep in missing)
            )

        return DependencyValidationResult(
            is_valid=not missing,
            missing_dependencies=missing,
            warnings=warnings,
            recommendations=recommendations,
            template=template,
        )

    # ------------------------------------------------------------------
    # Frontier queries
    # ------------------------------------------------------------------

    def get_available_templates(self, available: Any = None) -> List[TemplateDescriptor]:
        """Every registered template whose prerequisites are satisfied."""
        documents = _documents(available)
        return [
            descriptor
            for descriptor in self.registry
            if self.validate_dependencies(descriptor.id, documents).is_valid
        ]

    def get_templates_ready_for_generation(self, available: Any = None) -> List[TemplateDescriptor]:
        """Templates that can be generated now and do not exist yet, critical first."""
        documents = _documents(available)
        present = self.available_template_ids(documents)
        ready = [d for d in self.get_available_templates(documents) if d.id not in present]
        return sorted(ready, key=lambda d: d.priority_rank)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def get_recommended_generation_order(self, requested_ids: Any, available: Any = None) -> GenerationOrder:
        """Order ``requested_ids`` so every prerequisite precedes its dependents."""
        documents = _documents(available)
        generated: Set[str] = set()
        for doc in documents:
            generated.add(doc.template_id or doc.id)
            generated.add(self.document_template_id(doc))

        pending: List[Tuple[str, TemplateDescriptor]] = []
        unknown: List[str] = []
        seen: Set[str] = set()
        for ref in _requested(requested_ids):
            descriptor = self.registry.resolve(ref)
            if descriptor is None:
                unknown.append(str(ref))
                continue
            if descriptor.id in seen:
                continue
            seen.add(descriptor.id)
            pending.append((ref, descriptor))

        order: List[TemplateDescriptor] = []
        while pending:
            remaining: List[Tuple[str, TemplateDescriptor]] = []
            for ref, descriptor in pending:
                if all(dep in generated for dep in descriptor.dependencies):
                    order.append(descriptor)
                    generated.add(descriptor.id)
                else:
                    remaining.append((ref, descriptor))
            if len(remaining) == len(pending):
                break
            pending = remaining

        result = GenerationOrder(order=order, unknown=unknown)
        if pending:
            result.unresolved = [ref for ref, _ in pending]
            result.cycles = self._cycles_among({descriptor.id: descriptor for _, descriptor in pending})
            logger.warning(
                f"Could not order {len(pending)} of the requested templates: "
                + ", ".join(result.unresolved)
            )
        if unknown:
            logger.info(f"Unregistered templates left out of the generation order: {', '.join(unknown)}")
        return result

    def get_dependency_chain(self, template_ref: Any) -> List[TemplateDescriptor]:
        """All transitive prerequisites of a template, prerequisites first."""
        root = self.registry.resolve(template_ref)
        if root is None:
            return []

        chain: List[TemplateDescriptor] = []
        visited: Set[str] = {root.id}
        work: List[Tuple[TemplateDescriptor, Iterator[str]]] = [(root, iter(root.dependencies))]

        # Explicit stack: registry files may hold chains deeper than the recursion limit.
        while work:
            descriptor, pending = work[-1]
            for dep_id in pending:
                if dep_id in visited:
                    continue
                visited.add(dep_id)
                dependency = self.registry.get(dep_id)
                if dependency is not None:
                    work.append((dependency, iter(dependency.dependencies)))
                    break
            else:
                work.pop()
                if descriptor.id != root.id:
                    chain.append(descriptor)

        return chain

    def find_cycles(self) -> List[List[str]]:
        """Dependency cycles anywhere in the registry."""
        return self._cycles_among({descriptor.id: descriptor for descriptor in self.registry})

    def _cycles_among(self, descriptors: Dict[str, TemplateDescriptor]) -> List[List[str]]:
        graph = {
            template_id: [dep for dep in descriptor.dependencies if dep in descriptors]
            for template_id, descriptor in descriptors.items()
        }
        rank = {template_id: index for index, template_id in enumerate(self.registry.ids())}
        cycles = []
        for component in strongly_connected_components(graph):
            if len(component) > 1 or component[0] in graph[component[0]]:
                cycles.append(sorted(component, key=lambda tid: rank.get(tid, len(rank))))
        return cycles


def strongly_connected_components(graph: Dict[str, List[str]]) -> List[List[str]]:
    """Tarjan's algorithm; components come out in reverse topological order."""
    index = 0
    indices: Dict[str, int] = {}
    lowlinks: Dict[str, int] = {}
    stack: List[str] = []
    on_stack: Set[str] = set()
    components: List[List[str]] = []

    def enter(node: str) -> None:
        nonlocal index
        indices[node] = index
        lowlinks[node] = index
        index += 1
        stack.append(node)
        on_stack.add(node)
        work.append((node, iter(graph.get(node, []))))

    work: List[Tuple[str, Iterator[str]]] = []
    for start in graph:
        if start in indices:
            continue
        enter(start)
        while work:
            node, neighbors = work[-1]
            for neighbor in neighbors:
                if neighbor not in indices:
                    enter(neighbor)
                    break
                if neighbor in on_stack:
                    lowlinks[node] = min(lowlinks[node], indices[neighbor])
            else:
                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlinks[parent] = min(lowlinks[parent], lowlinks[node])
                if lowlinks[node] == indices[node]:
                    component: List[str] = []
                    while True:
                        popped = stack.pop()
                        on_stack.discard(popped)
                        component.append(popped)
                        if popped == node:
                            break
                    components.append(component)

    return components


def _describe(descriptor: TemplateDescriptor) -> str:
    return f"- {descriptor.name} ({descriptor.knowledge_area}) - {descriptor.description}"


def _documents(available: Any) -> List[AvailableDocument]:
    if not available or isinstance(available, (str, bytes, dict)):
        return []
    try:
        entries = list(available)
    except TypeError:
        return []
    return [doc for doc in map(AvailableDocument.coerce, entries) if doc is not None]


def _requested(requested_ids: Any) -> Iterable[str]:
    if isinstance(requested_ids, str):
        return [requested_ids]
    if not requested_ids:
        return []
    try:
        return [ref for ref in requested_ids if isinstance(ref, str)]
    except TypeError:
        return []
