"""Loads the renderer callable from a module or file reference.

References take one of these forms:
    package.module
    package.module:attribute
    path/to/renderer.py
    path/to/renderer.py:attribute

Without an attribute the module's ``default`` export is used, falling
back to ``render``. Loading imports and executes the module, so only
trusted renderer code should be referenced.
"""

import hashlib
import importlib
import importlib.util
import sys
from collections.abc import Callable
from pathlib import Path
from types import ModuleType
from typing import Any

import structlog

from static_site_builder.renderer.errors import InvalidRendererError, MissingSourceError


logger = structlog.get_logger()

# Export names tried, in order, when the reference has no attribute
DEFAULT_EXPORTS = ("default", "render")

# Prefix for modules loaded from file paths
FILE_MODULE_PREFIX = "_static_site_renderer_"


def split_reference(reference: str) -> tuple[str, str | None]:
    """Split a renderer reference into its module part and attribute.

    Args:
        reference: Renderer reference.

    Returns:
        Tuple of (module or file path, attribute name or None).
    """
    target, sep, attribute = reference.rpartition(":")
    if sep and target and attribute.isidentifier():
        return target, attribute
    return reference, None


def is_file_reference(target: str) -> bool:
    """Check whether a module part refers to a file rather than a module."""
    return target.endswith(".py") or "/" in target or "\\" in target


def _load_file_module(reference: str, file_path: Path) -> ModuleType:
    """Import a Python file as a module.

    Raises:
        MissingSourceError: If the file does not exist.
    """
    if not file_path.is_file():
        raise MissingSourceError(reference)

    digest = hashlib.sha256(str(file_path).encode("utf-8")).hexdigest()[:12]
    module_name = f"{FILE_MODULE_PREFIX}{file_path.stem}_{digest}"

    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise MissingSourceError(reference)

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def _import_module(reference: str, module_name: str) -> ModuleType:
    """Import a module by dotted name.

    Raises:
        MissingSourceError: If the module itself cannot be found.
    """
    try:
        return importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        # Only a missing renderer module is a missing source; a missing
        # dependency of the renderer propagates as is
        if e.name and (module_name == e.name or module_name.startswith(f"{e.name}.")):
            raise MissingSourceError(reference) from e
        raise


def _select_export(reference: str, module: ModuleType, attribute: str | None) -> Any:
    """Pick the renderer export from a loaded module.

    Raises:
        InvalidRendererError: If the export is missing.
    """
    if attribute is not None:
        if not hasattr(module, attribute):
            raise InvalidRendererError(reference, f"module has no export {attribute!r}")
        return getattr(module, attribute)

    for name in DEFAULT_EXPORTS:
        if hasattr(module, name):
            return getattr(module, name)

    raise InvalidRendererError(
        reference,
        f"module has none of the default exports {', '.join(DEFAULT_EXPORTS)}",
    )


def load_renderer(
    reference: str, base_dir: Path | None = None
) -> Callable[[dict[str, Any]], Any]:
    """Load the renderer callable.

    Args:
        reference: Renderer reference (module or file, optional attribute).
        base_dir: Directory relative file references resolve against
            (defaults to the current working directory).

    Returns:
        The renderer callable.

    Raises:
        MissingSourceError: If the module or file cannot be found.
        InvalidRendererError: If the export is missing or not callable.
    """
    target, attribute = split_reference(reference)
    log = logger.bind(component="loader", renderer=reference)

    if is_file_reference(target):
        file_path = Path(target)
        if not file_path.is_absolute():
            file_path = (base_dir or Path.cwd()) / file_path
        module = _load_file_module(reference, file_path.resolve())
    else:
        module = _import_module(reference, target)

    renderer = _select_export(reference, module, attribute)

    if not callable(renderer):
        raise InvalidRendererError(
            reference, f"export is {type(renderer).__name__}, expected a callable"
        )

    log.info(
        "renderer_loaded",
        module=module.__name__,
        export=getattr(renderer, "__name__", type(renderer).__name__),
    )
    return renderer
