"""Unit tests for the docdeps project workspace.

This module tests scanning generated documents, registry overrides,
and rendering of generation plans.
"""

import json
import tempfile
from pathlib import Path

import pytest

from docdeps import catalog
from docdeps.config import Settings
from docdeps.docdeps_logging import observability_hooks
from docdeps.errors import RegistryError
from docdeps.models import GenerationOrder
from docdeps.registry import Registry
from docdeps.workspace import DocumentWorkspace


def _write(path: Path, text: str = "# Document\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestWorkspaceInitialization:
    """Test cases for workspace initialization."""

    def test_workspace_creation(self, tmp_path):
        """Test creating a new workspace."""
        workspace = DocumentWorkspace(tmp_path)
        root = tmp_path.resolve()

        assert workspace.root == root
        assert workspace.base_dir == root / ".docdeps"
        assert workspace.output_dir == root / "generated-documents"
        assert workspace.registry_path == root / ".docdeps" / "registry.json"
        assert workspace.plan_path == root / ".docdeps" / "generation-plan.md"
        assert workspace.base_dir.is_dir()
        assert workspace.output_dir.is_dir()

    def test_workspace_with_custom_directories(self, tmp_path, monkeypatch):
        """Storage and output directories come from the environment."""
        monkeypatch.setenv("DOCDEPS_STORAGE_DIR", ".custom-docdeps")
        monkeypatch.setenv("DOCDEPS_OUTPUT_DIR", "docs/out")

        workspace = DocumentWorkspace(tmp_path)

        assert workspace.base_dir == tmp_path.resolve() / ".custom-docdeps"
        assert workspace.output_dir == tmp_path.resolve() / "docs" / "out"
        assert workspace.output_dir.is_dir()

    def test_relative_registry_path_is_under_root(self, tmp_path):
        workspace = DocumentWorkspace(tmp_path, settings=Settings(registry_path=Path("config/templates.json")))

        assert workspace.registry_path == tmp_path.resolve() / "config" / "templates.json"

    def test_workspace_with_string_path(self):
        """Test workspace creation with string path."""
        with tempfile.TemporaryDirectory() as temp_dir:
            workspace = DocumentWorkspace(temp_dir)
            assert workspace.root == Path(temp_dir).resolve()

    def test_unwritable_root(self, tmp_path):
        blocker = _write(tmp_path / "not-a-directory")

        with pytest.raises(RuntimeError, match="Could not initialize workspace"):
            DocumentWorkspace(blocker)

    def test_initialization_event(self, tmp_path):
        received = []
        observability_hooks.register_hook("workspace_initialized", lambda **data: received.append(data))

        DocumentWorkspace(tmp_path)

        assert received[0]["root"] == str(tmp_path.resolve())


class TestDocumentScanning:
    """Test cases for listing generated documents."""

    def test_empty_output_directory(self, tmp_path):
        workspace = DocumentWorkspace(tmp_path)

        assert workspace.list_documents() == []
        assert workspace.available_documents() == []

    def test_list_documents(self, tmp_path):
        workspace = DocumentWorkspace(tmp_path)
        _write(workspace.output_dir / "business-case.md")
        _write(workspace.output_dir / "planning" / "project-charter.md")
        _write(workspace.output_dir / "README.md")
        _write(workspace.output_dir / "notes.txt")

        documents = workspace.list_documents()

        assert [doc["id"] for doc in documents] == ["business-case", "planning/project-charter"]
        charter = documents[1]
        assert charter["name"] == "project-charter"
        assert charter["template_id"] == "project-charter"
        assert charter["category"] == "planning"
        assert documents[0]["category"] == "general"
        assert Path(charter["path"]).exists()
        assert "last_modified" in charter

    def test_storage_directory_inside_output_is_skipped(self, tmp_path):
        settings = Settings(storage_dir="generated-documents/.docdeps")
        workspace = DocumentWorkspace(tmp_path, settings=settings)
        _write(workspace.output_dir / "business-case.md")
        _write(workspace.plan_path)

        assert [doc["id"] for doc in workspace.list_documents()] == ["business-case"]

    def test_available_documents(self, tmp_path):
        workspace = DocumentWorkspace(tmp_path)
        path = _write(workspace.output_dir / "strategy" / "business-case.md")

        [document] = workspace.available_documents()

        assert document.id == "strategy/business-case"
        assert document.template_id == "business-case"
        assert document.path == path.resolve()


class TestRegistryOverride:
    """Test cases for loading and saving the registry file."""

    def test_default_registry_without_file(self, tmp_path):
        registry = DocumentWorkspace(tmp_path).load_registry()

        assert catalog.BUSINESS_CASE in registry

    def test_saved_registry_is_loaded(self, tmp_path, descriptor_factory):
        workspace = DocumentWorkspace(tmp_path)
        workspace.save_registry(Registry([descriptor_factory("A"), descriptor_factory("B", ["A"])]))

        registry = workspace.load_registry()

        assert registry.ids() == ["A", "B"]
        assert json.loads(workspace.registry_path.read_text())["templates"][1]["dependencies"] == ["A"]

    def test_invalid_registry_file(self, tmp_path):
        workspace = DocumentWorkspace(tmp_path)
        workspace.registry_path.write_text(json.dumps({"templates": "nope"}), encoding="utf-8")

        with pytest.raises(RegistryError):
            workspace.load_registry()


class TestGenerationPlan:
    """Test cases for rendering and saving generation plans."""

    def test_render_complete_plan(self, tmp_path, chain_resolver):
        workspace = DocumentWorkspace(tmp_path)
        order = chain_resolver.get_recommended_generation_order(["C", "B", "A"])

        text = workspace.render_generation_plan(order)

        assert text.startswith("# Document Generation Plan\n")
        assert "- [ ] 1. Document A (critical, Integration Management) `A`" in text
        assert "- [ ] 3. Document C (critical, Integration Management) `C`" in text
        assert "## Unresolved" not in text

    def test_plan_timestamp_is_utc(self, tmp_path):
        text = DocumentWorkspace(tmp_path).render_generation_plan(GenerationOrder())

        [stamp] = [line for line in text.splitlines() if line.startswith("Generated: ")]
        assert stamp.endswith("+00:00")

    def test_render_incomplete_plan(self, tmp_path):
        workspace = DocumentWorkspace(tmp_path)
        order = GenerationOrder(unresolved=["X", "Y"], unknown=["mystery"], cycles=[["X", "Y"]])

        text = workspace.render_generation_plan(order)

        assert "_Nothing can be generated yet._" in text
        assert "- X: prerequisites unavailable" in text
        assert "- mystery: not in the template registry" in text
        assert "- Dependency cycle: X -> Y -> X" in text

    def test_save_generation_plan(self, tmp_path, chain_resolver):
        workspace = DocumentWorkspace(tmp_path)

        path = workspace.save_generation_plan(chain_resolver.get_recommended_generation_order(["A"]))

        assert path == workspace.plan_path
        assert "`A`" in path.read_text(encoding="utf-8")
