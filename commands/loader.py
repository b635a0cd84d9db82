"""
Handler Loader
Discovers typed handler descriptors inside a package
"""

import importlib
import pkgutil
from types import ModuleType
from typing import Any, List, Tuple, Type

from commands.errors import InvalidDefinition, LoadError
from utils.logger import get_logger

logger = get_logger("Loader")


def _import(name: str) -> ModuleType:
    try:
        return importlib.import_module(name)
    except LoadError:
        raise
    except Exception as e:
        raise LoadError(f"Failed to import handler module '{name}': {e}") from e


def iter_modules(source: str) -> List[ModuleType]:
    """
    Import a package and every module below it.

    Args:
        source: Dotted package name, e.g. ``handlers.commands``

    Returns:
        Modules in a stable (sorted) order, package first
    """
    package = _import(source)
    modules = [package]

    path = getattr(package, "__path__", None)
    if path is None:
        return modules

    names = sorted(
        info.name
        for info in pkgutil.walk_packages(path, prefix=f"{package.__name__}.", onerror=_on_walk_error)
    )
    for name in names:
        modules.append(_import(name))

    return modules


def _on_walk_error(name: str) -> None:
    raise LoadError(f"Failed to import handler package '{name}'")


def collect(source: str, attribute: str, kind: Type) -> List[Tuple[str, Any]]:
    """
    Collect descriptors exported by modules of a package.

    Each module may export ``attribute`` as one descriptor or a list/tuple of
    them. Modules without the attribute are helpers and are skipped.

    Args:
        source: Dotted package name
        attribute: Module attribute holding the descriptor(s)
        kind: Expected descriptor class

    Returns:
        List of (module name, descriptor) pairs in discovery order

    Raises:
        LoadError: If a module cannot be imported or exports something else
    """
    found: List[Tuple[str, Any]] = []

    for module in iter_modules(source):
        if not hasattr(module, attribute):
            continue

        value = getattr(module, attribute)
        items = value if isinstance(value, (list, tuple)) else [value]

        for item in items:
            if not isinstance(item, kind):
                raise InvalidDefinition(
                    f"{module.__name__}.{attribute} must be a {kind.__name__}, got {type(item).__name__}"
                )
            found.append((module.__name__, item))

    logger.debug(f"Discovered {len(found)} {kind.__name__} definition(s) in {source}")
    return found
