"""Shared fixtures for docdeps tests."""

import logging

import pytest

from docdeps.docdeps_logging import observability_hooks, performance_monitor
from docdeps.models import TemplateDescriptor
from docdeps.registry import Registry
from docdeps.resolver import DependencyResolver


def make_descriptor(template_id, dependencies=(), priority="critical", name=None, **kwargs):
    return TemplateDescriptor(
        id=template_id,
        name=name or f"Document {template_id}",
        category=kwargs.pop("category", "Testing"),
        priority=priority,
        knowledge_area=kwargs.pop("knowledge_area", "Integration Management"),
        dependencies=list(dependencies),
        description=kwargs.pop("description", f"Description of {template_id}"),
        **kwargs,
    )


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep DOCDEPS_* settings, hooks, metrics and log handlers per-test."""
    for name in (
        "DOCDEPS_PROJECT_ROOT",
        "DOCDEPS_STORAGE_DIR",
        "DOCDEPS_OUTPUT_DIR",
        "DOCDEPS_REGISTRY_PATH",
        "DOCDEPS_LOG_LEVEL",
        "DOCDEPS_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    performance_monitor.reset()
    observability_hooks.hooks.clear()
    yield
    observability_hooks.hooks.clear()
    logger = logging.getLogger("docdeps")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def descriptor_factory():
    return make_descriptor


@pytest.fixture
def chain_registry():
    """A <- B <- C, all critical."""
    return Registry(
        [
            make_descriptor("A"),
            make_descriptor("B", ["A"]),
            make_descriptor("C", ["B"]),
        ],
        {"alpha": "A", "beta": "B", "gamma": "C"},
    )


@pytest.fixture
def chain_resolver(chain_registry):
    return DependencyResolver(chain_registry)


@pytest.fixture
def default_registry():
    return Registry.default()


@pytest.fixture
def default_resolver(default_registry):
    return DependencyResolver(default_registry)
