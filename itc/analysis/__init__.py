import importlib
import logging
from collections.abc import Callable
from typing import Any

log = logging.getLogger(__name__)

_REGISTRY: dict[str, Callable] = {}

# All analysis module names — imported at bottom to auto-register
_MODULES = [
    "itc.analysis.bucher",
    "itc.analysis.sensitivity",
    "itc.analysis.homogeneity",
    "itc.analysis.nnt",
]


def register(name: str):
    """Decorator to register an analysis function."""

    def decorator(fn):
        _REGISTRY[name] = fn
        return fn

    return decorator


def available_analyses() -> list[str]:
    return sorted(_REGISTRY)


def run_analysis(analysis_type: str, params: dict) -> Any:
    """Dispatch to the registered analysis function."""
    fn = _REGISTRY.get(analysis_type)
    if not fn:
        raise ValueError(
            f"Unknown analysis type: {analysis_type}. "
            f"Available: {', '.join(available_analyses())}"
        )
    log.info("Running analysis: %s with params %s", analysis_type, params)
    return fn(params)


# Auto-import modules to trigger @register decorators
for _mod in _MODULES:
    importlib.import_module(_mod)
