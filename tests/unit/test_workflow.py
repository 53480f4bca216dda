"""Unit tests for the generation workflow facade.

This module tests the dict responses handed to MCP clients, including
next-step guidance and error handling.
"""

import logging

import pytest

from docdeps import catalog
from docdeps.docdeps_logging import observability_hooks, performance_monitor
from docdeps.registry import Registry
from docdeps.workflow import WORKFLOW_STEPS, GenerationWorkflow


@pytest.fixture
def workflow(tmp_path):
    return GenerationWorkflow(tmp_path)


def _add_document(workflow, relative):
    path = workflow.workspace.output_dir / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("# Generated\n", encoding="utf-8")
    return path


class TestWorkflowInitialization:
    """Test cases for building a workflow."""

    def test_uses_stock_registry_by_default(self, workflow):
        assert len(workflow.registry) == len(catalog.DEFAULT_TEMPLATES)

    def test_uses_injected_registry(self, tmp_path, chain_registry):
        workflow = GenerationWorkflow(tmp_path, registry=chain_registry)

        assert workflow.registry is chain_registry
        assert workflow.resolver.registry is chain_registry

    def test_empty_injected_registry_is_kept(self, tmp_path):
        workflow = GenerationWorkflow(tmp_path, registry=Registry([]))

        assert len(workflow.registry) == 0

    def test_loads_registry_file(self, tmp_path, chain_registry):
        GenerationWorkflow(tmp_path).workspace.save_registry(chain_registry)

        assert GenerationWorkflow(tmp_path).registry.ids() == ["A", "B", "C"]

    def test_warns_about_cycles(self, tmp_path, descriptor_factory, caplog):
        registry = Registry([descriptor_factory("X", ["Y"]), descriptor_factory("Y", ["X"])])

        with caplog.at_level(logging.WARNING, logger="docdeps.workflow"):
            GenerationWorkflow(tmp_path, registry=registry)

        assert "Registry contains a dependency cycle: X -> Y -> X" in caplog.text

    def test_registry_loaded_event(self, tmp_path):
        received = []
        observability_hooks.register_hook("registry_loaded", lambda **data: received.append(data))

        GenerationWorkflow(tmp_path)

        assert received[0]["template_count"] == len(catalog.DEFAULT_TEMPLATES)
        assert received[0]["cycle_count"] == 0


class TestValidateTemplate:
    """Test cases for GenerationWorkflow.validate_template."""

    def test_missing_prerequisite(self, workflow):
        response = workflow.validate_template("project-charter")

        assert response["is_valid"] is False
        assert response["missing_dependencies"][0]["id"] == catalog.BUSINESS_CASE
        assert response["next_suggested_step"] == "generation_order"

    def test_prerequisite_found_in_workspace(self, workflow):
        _add_document(workflow, "strategy/business-case.md")

        response = workflow.validate_template("project-charter")

        assert response["is_valid"] is True
        assert response["template"]["id"] == catalog.PROJECT_CHARTER
        assert response["next_suggested_step"] == "generate"

    def test_explicit_available_overrides_workspace(self, workflow):
        _add_document(workflow, "business-case.md")

        assert workflow.validate_template("project-charter", available=[])["is_valid"] is False

    def test_unknown_template(self, workflow):
        response = workflow.validate_template("quarterly-newsletter")

        assert response["is_valid"] is True
        assert response["template"] is None
        assert "not found in dependency registry" in response["warnings"][0]

    def test_records_metrics_and_events(self, workflow):
        received = []
        observability_hooks.register_hook("template_validated", lambda **data: received.append(data))

        workflow.validate_template("project-charter")

        assert len(performance_monitor.get_metrics("validate_template_duration")["validate_template_duration"]) == 1
        assert received[0]["template_id"] == catalog.PROJECT_CHARTER
        assert received[0]["is_valid"] is False
        assert received[0]["missing_count"] == 1

    def test_unexpected_failure_becomes_error_response(self, workflow, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("resolver exploded")

        monkeypatch.setattr(workflow.resolver, "validate_dependencies", broken)

        response = workflow.validate_template("project-charter")

        assert response["error"] == "Failed to validate dependencies: resolver exploded"
        assert response["next_suggested_step"] == "registry_summary"


class TestFrontierResponses:
    """Test cases for available and ready template listings."""

    def test_list_available_templates(self, workflow):
        response = workflow.list_available_templates(available=[])

        assert response["count"] == 3
        assert response["total_registered"] == len(catalog.DEFAULT_TEMPLATES)

    def test_list_ready_templates(self, workflow):
        _add_document(workflow, "business-case.md")

        response = workflow.list_ready_templates()

        assert [t["id"] for t in response["templates"]] == [
            catalog.MISSION_VISION,
            catalog.PROJECT_CHARTER,
            catalog.DATA_GOVERNANCE,
            catalog.USER_STORIES_AGILE,
        ]
        assert response["next_suggested_step"] == "generation_order"

    def test_nothing_ready(self, tmp_path, chain_registry):
        workflow = GenerationWorkflow(tmp_path, registry=chain_registry)

        response = workflow.list_ready_templates(available=["A", "B", "C"])

        assert response["count"] == 0
        assert response["next_suggested_step"] == "list_documents"


class TestPlanGeneration:
    """Test cases for GenerationWorkflow.plan_generation."""

    def test_complete_plan_is_saved(self, workflow):
        response = workflow.plan_generation(["test-plan", "functional-requirements", "project-charter", "business-case"])

        assert response["is_complete"] is True
        assert [t["id"] for t in response["order"]] == [
            catalog.BUSINESS_CASE,
            catalog.PROJECT_CHARTER,
            catalog.FUNCTIONAL_REQUIREMENTS,
            catalog.TEST_PLAN,
        ]
        assert response["plan_path"] == str(workflow.workspace.plan_path)
        assert workflow.workspace.plan_path.exists()
        assert response["next_suggested_step"] == "generate"

    def test_incomplete_plan(self, workflow):
        response = workflow.plan_generation(["test-plan", "quarterly-newsletter"], save=False)

        assert response["is_complete"] is False
        assert response["unresolved"] == ["test-plan"]
        assert response["unknown"] == ["quarterly-newsletter"]
        assert response["plan_path"] is None
        assert not workflow.workspace.plan_path.exists()
        assert response["next_suggested_step"] == "dependency_chain"

    def test_workspace_documents_satisfy_prerequisites(self, workflow):
        _add_document(workflow, "functional-requirements.md")

        response = workflow.plan_generation(["test-plan"], save=False)

        assert response["is_complete"] is True

    def test_plan_event(self, workflow):
        received = []
        observability_hooks.register_hook("generation_planned", lambda **data: received.append(data))

        workflow.plan_generation(["business-case", "test-plan"], save=False)

        assert received[0]["requested_count"] == 2
        assert received[0]["ordered_count"] == 1
        assert received[0]["is_complete"] is False


class TestInspection:
    """Test cases for chains, documents and registry summaries."""

    def test_dependency_chain(self, workflow):
        response = workflow.dependency_chain("test-plan")

        assert response["count"] == 3
        assert response["template"]["id"] == catalog.TEST_PLAN
        assert response["message"] == "Test Plan Document needs 3 prerequisite document(s)"

    def test_dependency_chain_unknown(self, workflow):
        response = workflow.dependency_chain("quarterly-newsletter")

        assert response["template"] is None
        assert response["chain"] == []

    def test_list_documents(self, workflow):
        _add_document(workflow, "business-case.md")
        _add_document(workflow, "notes/meeting.md")

        response = workflow.list_documents()

        resolved = {doc["id"]: doc["resolved_template_id"] for doc in response["documents"]}
        assert resolved == {"business-case": catalog.BUSINESS_CASE, "notes/meeting": None}
        assert response["count"] == 2

    def test_list_documents_empty(self, workflow):
        response = workflow.list_documents()

        assert response["count"] == 0
        assert response["message"].startswith("No documents found in")

    def test_describe_registry(self, workflow):
        summary = workflow.describe_registry()

        assert summary["count"] == len(catalog.DEFAULT_TEMPLATES)
        assert summary["source"] == "default"
        assert summary["cycles"] == []
        business_case = summary["templates"][0]
        assert "business-case" in business_case["aliases"]

    def test_describe_registry_from_file(self, tmp_path, chain_registry):
        GenerationWorkflow(tmp_path).workspace.save_registry(chain_registry)
        workflow = GenerationWorkflow(tmp_path)

        assert workflow.describe_registry()["source"] == str(workflow.workspace.registry_path)

    def test_workflow_guide(self):
        guide = GenerationWorkflow.get_workflow_guide()

        assert [step["tool"] for step in guide["steps"]] == [step["tool"] for step in WORKFLOW_STEPS]
        assert guide["tips"]
