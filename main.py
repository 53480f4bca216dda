"""MCP server exposing document dependency resolution tools."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from docdeps.config import DEFAULT_OUTPUT_DIR, DEFAULT_STORAGE_DIR, PROJECT_ROOT_ENV, Settings
from docdeps.docdeps_logging import setup_logging
from docdeps.workflow import GenerationWorkflow

mcp = FastMCP("docdeps")

SETTINGS = Settings.from_env()
PROJECT_MARKER_DIRECTORIES = (SETTINGS.storage_dir, SETTINGS.output_dir, DEFAULT_STORAGE_DIR, DEFAULT_OUTPUT_DIR)


def _candidate_bases() -> List[Path]:
    cwd = Path.cwd().resolve()
    bases: List[Path] = [cwd]
    bases.extend(cwd.parents)
    seen: set[Path] = set()
    ordered: List[Path] = []
    for base in bases:
        if base not in seen:
            seen.add(base)
            ordered.append(base)
    return ordered


def _locate_workspace_root() -> Optional[Path]:
    for base in _candidate_bases():
        for marker in PROJECT_MARKER_DIRECTORIES:
            if (base / marker).is_dir():
                return base
    return None


def _resolve_root(root: Optional[str]) -> Path:
    if root:
        resolved = Path(root).expanduser().resolve()
        if not resolved.exists():
            raise ValueError(f"Provided root '{root}' does not exist.")
        return resolved

    if SETTINGS.project_root:
        env_path = SETTINGS.project_root.resolve()
        if not env_path.exists():
            raise ValueError(
                f"Environment variable {PROJECT_ROOT_ENV} points to '{SETTINGS.project_root}', which does not exist."
            )
        return env_path

    detected_root = _locate_workspace_root()
    if detected_root:
        return detected_root

    raise ValueError(
        "Unable to determine project root automatically. Provide the 'root' argument when calling the tool "
        f"or set the {PROJECT_ROOT_ENV} environment variable."
    )


def _workflow(root: Optional[str]) -> GenerationWorkflow:
    return GenerationWorkflow(_resolve_root(root), settings=SETTINGS)


@mcp.tool()
def validate_dependencies(
    template: str,
    available: Optional[List[Dict[str, Any]]] = None,
    root: Optional[str] = None,
) -> Dict[str, Any]:
    """Check whether a template's prerequisite documents exist.
    The template may be given by id, slug or display name. When 'available' is
    omitted, the project's generated-documents/ folder is scanned instead.
    Unregistered templates are reported valid with a warning."""

    return _workflow(root).validate_template(template, available)


@mcp.tool()
def available_templates(
    available: Optional[List[Dict[str, Any]]] = None,
    root: Optional[str] = None,
) -> Dict[str, Any]:
    """List every registered template whose prerequisites are satisfied."""

    return _workflow(root).list_available_templates(available)


@mcp.tool()
def ready_templates(
    available: Optional[List[Dict[str, Any]]] = None,
    root: Optional[str] = None,
) -> Dict[str, Any]:
    """List templates that can be generated now and do not exist yet, critical first."""

    return _workflow(root).list_ready_templates(available)


@mcp.tool()
def generation_order(
    templates: List[str],
    available: Optional[List[Dict[str, Any]]] = None,
    root: Optional[str] = None,
    save: bool = True,
) -> Dict[str, Any]:
    """Order a batch of templates so prerequisites are generated first.
    The response says whether the order is complete and, if not, which
    templates were left out and which dependency cycles were found.
    When 'save' is true the plan is written to .docdeps/generation-plan.md."""

    return _workflow(root).plan_generation(templates, available, save=save)


@mcp.tool()
def dependency_chain(template: str, root: Optional[str] = None) -> Dict[str, Any]:
    """List every transitive prerequisite of a template, prerequisites first."""

    return _workflow(root).dependency_chain(template)


@mcp.tool()
def list_documents(root: Optional[str] = None) -> Dict[str, Any]:
    """Enumerate generated documents and the templates they resolve to."""

    return _workflow(root).list_documents()


@mcp.tool()
def registry_summary(root: Optional[str] = None) -> Dict[str, Any]:
    """Describe the template registry in use, including aliases and cycles."""

    return _workflow(root).describe_registry()


@mcp.tool()
def workflow_guide() -> Dict[str, Any]:
    """Recommended order for using the docdeps tools."""

    return GenerationWorkflow.get_workflow_guide()


@mcp.resource("docdeps://templates")
def resource_templates():
    """Resource view of the registered templates and their prerequisites."""

    try:
        workflow = _workflow(None)
    except ValueError:
        return f"No project root detected. Launch tools with a 'root' argument or set {PROJECT_ROOT_ENV}."

    lines = ["Document Templates"]
    for descriptor in workflow.registry:
        lines.append("")
        lines.append(f"- {descriptor.name} [{descriptor.priority}] ({descriptor.id})")
        for dep_id in descriptor.dependencies:
            dependency = workflow.registry.get(dep_id)
            lines.append(f"  Requires: {dependency.name if dependency else dep_id}")

    return "\n".join(lines)


if __name__ == "__main__":
    setup_logging(SETTINGS.log_level, SETTINGS.log_file)
    mcp.run(transport="stdio")
