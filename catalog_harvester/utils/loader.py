from __future__ import annotations

import importlib
from typing import Any


def load_symbol(dotted: str) -> Any:
    """
    Resolve ``HarvestConfig.store`` / ``HarvestConfig.exporter`` to a class.
    Both "module:Name" and "module.Name" are accepted.
    """
    module_name, sep, symbol_name = dotted.partition(":")
    if not sep:
        module_name, _, symbol_name = dotted.rpartition(".")
    if not module_name or not symbol_name:
        raise ImportError(f"not a dotted path: {dotted!r}")

    module = importlib.import_module(module_name)
    try:
        return getattr(module, symbol_name)
    except AttributeError as exc:
        raise ImportError(f"{module_name} has no attribute {symbol_name!r}") from exc
