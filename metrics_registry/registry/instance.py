"""Module-level default registry accessor.

Optional wiring for applications that want one shared registry; nothing in
MetricRegistry depends on it.
"""

from .registry import MetricRegistry

# Module-level singleton, created at import so every thread sees the same one
_registry: MetricRegistry = MetricRegistry()


def get_default_registry() -> MetricRegistry:
    """Get the shared registry.

    Returns:
        The process-wide default MetricRegistry
    """
    return _registry


def set_default_registry(registry: MetricRegistry) -> None:
    """Replace the shared registry.

    Args:
        registry: The registry instance to use from now on
    """
    global _registry
    _registry = registry


def reset_default_registry() -> None:
    """Replace the shared registry with a fresh, empty one. Used for testing."""
    global _registry
    _registry = MetricRegistry()
