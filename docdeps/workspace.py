"""Project workspace for docdeps.

Turns a project's ``generated-documents/`` folder into the available
document list the resolver consumes, and keeps docdeps' own state
(registry overrides, the last generation plan) under ``.docdeps/``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import Settings
from .docdeps_logging import log_error_with_context, observability_hooks
from .models import AvailableDocument, GenerationOrder
from .registry import Registry

logger = logging.getLogger("docdeps.workspace")

IGNORED_DOCUMENTS = {"README.md"}


class DocumentWorkspace:
    """Generated documents and docdeps state within one project root."""

    def __init__(self, root: Path | str, settings: Optional[Settings] = None):
        settings = settings or Settings.from_env()
        try:
            self.root = Path(root).resolve()
            self.base_dir = self.root / settings.storage_dir
            self.output_dir = self.root / settings.output_dir
            if settings.registry_path:
                registry_path = Path(settings.registry_path)
                self.registry_path = registry_path if registry_path.is_absolute() else self.root / registry_path
            else:
                self.registry_path = self.base_dir / "registry.json"
            self.plan_path = self.base_dir / "generation-plan.md"

            try:
                self.base_dir.mkdir(parents=True, exist_ok=True)
                self.output_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(f"Failed to create workspace directories: {e}")
                raise RuntimeError(f"Could not initialize workspace at {self.root}: {e}")

            logger.info(f"Workspace initialized at {self.root}")
            observability_hooks.log_resolution_event("workspace_initialized", root=str(self.root))

        except Exception as e:
            log_error_with_context(e, {"operation": "workspace_init", "root": str(root)})
            raise

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def list_documents(self) -> List[Dict[str, Any]]:
        """Markdown documents under the output directory."""
        documents: List[Dict[str, Any]] = []
        for path in sorted(self.output_dir.rglob("*.md")):
            if not path.is_file() or path.name in IGNORED_DOCUMENTS:
                continue
            if self.base_dir in path.parents:
                continue
            relative = path.relative_to(self.output_dir)
            documents.append(
                {
                    "id": relative.with_suffix("").as_posix(),
                    "name": path.stem,
                    "template_id": path.stem,
                    "category": path.parent.name if path.parent != self.output_dir else "general",
                    "path": str(path),
                    "last_modified": datetime.fromtimestamp(path.stat().st_mtime).isoformat(timespec="seconds"),
                }
            )
        return documents

    def available_documents(self) -> List[AvailableDocument]:
        return [
            AvailableDocument(
                id=doc["id"],
                name=doc["name"],
                template_id=doc["template_id"],
                path=Path(doc["path"]),
            )
            for doc in self.list_documents()
        ]

    # ------------------------------------------------------------------
    # Registry configuration
    # ------------------------------------------------------------------

    def load_registry(self) -> Registry:
        """The project's registry override, or the stock catalog."""
        if self.registry_path.exists():
            return Registry.load(self.registry_path)
        logger.debug(f"No registry file at {self.registry_path}; using the stock catalog")
        return Registry.default()

    def save_registry(self, registry: Registry) -> Path:
        path = registry.save(self.registry_path)
        logger.info(f"Registry with {len(registry)} templates saved to {path}")
        return path

    # ------------------------------------------------------------------
    # Generation plans
    # ------------------------------------------------------------------

    def render_generation_plan(self, order: GenerationOrder) -> str:
        lines = [
            "# Document Generation Plan",
            "",
            f"Generated: {datetime.now(timezone.utc).isoformat(timespec='seconds')}",
            "",
            "## Order",
            "",
        ]
        if order.order:
            for index, descriptor in enumerate(order.order, start=1):
                lines.append(
                    f"- [ ] {index}. {descriptor.name} "
                    f"({descriptor.priority}, {descriptor.knowledge_area}) `{descriptor.id}`"
                )
        else:
            lines.append("_Nothing can be generated yet._")

        if not order.is_complete:
            lines.extend(["", "## Unresolved", ""])
            lines.extend(f"- {ref}: prerequisites unavailable" for ref in order.unresolved)
            lines.extend(f"- {ref}: not in the template registry" for ref in order.unknown)
            for cycle in order.cycles:
                lines.append(f"- Dependency cycle: {' -> '.join(cycle + cycle[:1])}")

        return "\n".join(lines) + "\n"

    def save_generation_plan(self, order: GenerationOrder) -> Path:
        self.plan_path.write_text(self.render_generation_plan(order), encoding="utf-8")
        logger.info(f"Generation plan saved to {self.plan_path}")
        return self.plan_path
