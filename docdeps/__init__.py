"""docdeps - document dependency resolution for generation pipelines."""

# No imports at package level to avoid circular import issues
# Import modules directly where needed

__all__ = [
    "catalog",
    "config",
    "docdeps_logging",
    "errors",
    "models",
    "registry",
    "resolver",
    "workflow",
    "workspace",
]
