"""Generation workflow facade for docdeps.

This module ties a project workspace to a dependency resolver and returns
plain dict responses with guidance for the next step, ready to hand to an
MCP client or any other orchestrator.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import Settings
from .docdeps_logging import (
    log_error_with_context,
    log_generation_plan,
    log_operation,
    log_performance,
    log_validation,
    observability_hooks,
)
from .models import AvailableDocument
from .registry import Registry
from .resolver import DependencyResolver
from .workspace import DocumentWorkspace

logger = logging.getLogger("docdeps.workflow")


WORKFLOW_STEPS = (
    {
        "step": 1,
        "tool": "list_documents",
        "description": "Scan generated-documents/ for documents the project already has",
        "purpose": "Establish the set of available documents",
    },
    {
        "step": 2,
        "tool": "ready_templates",
        "description": "List templates whose prerequisites are already satisfied",
        "purpose": "Find what can be generated right now",
    },
    {
        "step": 3,
        "tool": "generation_order",
        "description": "Order a batch of templates so prerequisites come first",
        "purpose": "Plan a batch generation run",
    },
    {
        "step": 4,
        "tool": "validate_dependencies",
        "description": "Check a single template right before generating it",
        "purpose": "Catch missing critical foundation documents",
    },
)


class GenerationWorkflow:
    """Dependency-aware planning for one project's document generation."""

    def __init__(
        self,
        root: Path | str,
        registry: Optional[Registry] = None,
        settings: Optional[Settings] = None,
    ):
        self.workspace = DocumentWorkspace(root, settings=settings)
        self.registry = registry if registry is not None else self.workspace.load_registry()
        self.resolver = DependencyResolver(self.registry)

        cycles = self.resolver.find_cycles()
        for cycle in cycles:
            logger.warning(f"Registry contains a dependency cycle: {' -> '.join(cycle + cycle[:1])}")
        observability_hooks.log_resolution_event(
            "registry_loaded",
            template_count=len(self.registry),
            cycle_count=len(cycles),
        )

    def _available(self, available: Optional[List[Any]]) -> List[Any]:
        if available is None:
            return self.workspace.available_documents()
        return available

    # ------------------------------------------------------------------
    # Single template
    # ------------------------------------------------------------------

    @log_performance("validate_template")
    def validate_template(self, template_ref: str, available: Optional[List[Any]] = None) -> Dict[str, Any]:
        """Check one template's prerequisites against the project's documents."""
        try:
            with log_operation("validate_template", template_ref=template_ref):
                result = self.resolver.validate_dependencies(template_ref, self._available(available))
                template_id = result.template.id if result.template else None
                log_validation(template_id, result.is_valid, len(result.missing_dependencies))

                response = result.to_dict()
                if result.is_valid:
                    response["next_suggested_step"] = "generate"
                    response["workflow_tip"] = f"'{template_ref}' can be generated now"
                else:
                    response["next_suggested_step"] = "generation_order"
                    response["workflow_tip"] = (
                        "Generate the missing prerequisites first; use generation_order to sequence them"
                    )
                return response
        except Exception as e:
            log_error_with_context(e, {"operation": "validate_template", "template_ref": template_ref})
            return {
                "error": f"Failed to validate dependencies: {e}",
                "suggestion": "Check the template reference and the project root",
                "next_suggested_step": "registry_summary",
            }

    def dependency_chain(self, template_ref: str) -> Dict[str, Any]:
        """Every prerequisite of a template, in generation order."""
        template = self.registry.resolve(template_ref)
        chain = self.resolver.get_dependency_chain(template_ref)
        return {
            "template": template.to_dict() if template else None,
            "chain": [descriptor.to_dict() for descriptor in chain],
            "count": len(chain),
            "message": (
                f"{template.name} needs {len(chain)} prerequisite document(s)"
                if template
                else f"Template '{template_ref}' not found in dependency registry"
            ),
        }

    # ------------------------------------------------------------------
    # Frontier
    # ------------------------------------------------------------------

    def list_available_templates(self, available: Optional[List[Any]] = None) -> Dict[str, Any]:
        """Templates whose prerequisites are satisfied, already generated or not."""
        try:
            templates = self.resolver.get_available_templates(self._available(available))
            return {
                "templates": [descriptor.to_dict() for descriptor in templates],
                "count": len(templates),
                "total_registered": len(self.registry),
            }
        except Exception as e:
            log_error_with_context(e, {"operation": "list_available_templates"})
            return {
                "error": f"Failed to list available templates: {e}",
                "suggestion": "Check your project setup",
                "next_suggested_step": "list_documents",
            }

    def list_ready_templates(self, available: Optional[List[Any]] = None) -> Dict[str, Any]:
        """Templates not yet generated whose prerequisites are satisfied, critical first."""
        try:
            templates = self.resolver.get_templates_ready_for_generation(self._available(available))
            return {
                "templates": [descriptor.to_dict() for descriptor in templates],
                "count": len(templates),
                "next_suggested_step": "generation_order" if templates else "list_documents",
                "workflow_tip": (
                    f"{len(templates)} templates ready for generation"
                    if templates
                    else "Nothing is ready - everything is generated or blocked on prerequisites"
                ),
            }
        except Exception as e:
            log_error_with_context(e, {"operation": "list_ready_templates"})
            return {
                "error": f"Failed to list ready templates: {e}",
                "suggestion": "Check your project setup",
                "next_suggested_step": "list_documents",
            }

    # ------------------------------------------------------------------
    # Batch planning
    # ------------------------------------------------------------------

    @log_performance("plan_generation")
    def plan_generation(
        self,
        requested: List[str],
        available: Optional[List[Any]] = None,
        save: bool = True,
    ) -> Dict[str, Any]:
        """Order a batch of templates and optionally save the plan."""
        try:
            with log_operation("plan_generation", requested_count=len(requested)):
                order = self.resolver.get_recommended_generation_order(requested, self._available(available))
                log_generation_plan(len(requested), len(order), order.is_complete)

                response = order.to_dict()
                response["plan_path"] = str(self.workspace.save_generation_plan(order)) if save else None
                if order.is_complete:
                    response["next_suggested_step"] = "generate"
                    response["workflow_tip"] = "Generate the documents in the listed order"
                else:
                    response["next_suggested_step"] = "dependency_chain"
                    response["workflow_tip"] = (
                        "Some templates could not be ordered: add their prerequisites to the batch, "
                        "register unknown templates, or break the reported cycles"
                    )
                return response
        except Exception as e:
            log_error_with_context(e, {"operation": "plan_generation", "requested": list(requested)})
            return {
                "error": f"Failed to plan generation: {e}",
                "suggestion": "Check the requested template references",
                "next_suggested_step": "registry_summary",
            }

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def list_documents(self) -> Dict[str, Any]:
        documents = self.workspace.list_documents()
        resolved = []
        for doc in documents:
            template_id = self.resolver.document_template_id(
                AvailableDocument(id=doc["id"], name=doc["name"], template_id=doc["template_id"])
            )
            resolved.append({**doc, "resolved_template_id": template_id if template_id in self.registry else None})
        return {
            "documents": resolved,
            "count": len(resolved),
            "output_dir": str(self.workspace.output_dir),
            "message": (
                f"Found {len(resolved)} documents"
                if resolved
                else f"No documents found in {self.workspace.output_dir}"
            ),
        }

    def describe_registry(self) -> Dict[str, Any]:
        return {
            "templates": [
                {**descriptor.to_dict(), "aliases": self.registry.aliases_for(descriptor.id)}
                for descriptor in self.registry
            ],
            "count": len(self.registry),
            "cycles": self.resolver.find_cycles(),
            "source": str(self.workspace.registry_path) if self.workspace.registry_path.exists() else "default",
        }

    @staticmethod
    def get_workflow_guide() -> Dict[str, Any]:
        return {
            "workflow_overview": "Dependency-aware document generation in recommended order",
            "steps": list(WORKFLOW_STEPS),
            "tips": [
                "Unregistered templates are never blocked; they come back valid with a warning",
                "Critical missing prerequisites should be generated before the dependent document",
                "An incomplete generation order lists what was left out and any dependency cycles",
                "Put a registry.json in .docdeps/ to replace the stock template catalog",
            ],
        }
