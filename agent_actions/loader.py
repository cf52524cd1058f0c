"""
Action parser discovery and registration.

Parser families are plain Python files exposing ``get_parser_configs()``.
They are discovered from two directories:

1. builtin_plugins/actions/ - Shipped with the package
2. plugins/actions/ - User parsers, registered after the builtins

Files load in name order; registration order decides phase ordering and
which family wins a shared tag spelling.
"""

import importlib.util
import logging
from pathlib import Path
from typing import Optional

from .registry import ParserRegistry, get_registry

logger = logging.getLogger(__name__)

BUILTIN_DIR = Path(__file__).resolve().parent.parent / "builtin_plugins" / "actions"


def _load_parsers_from_directory(directory: Path, registry: ParserRegistry) -> int:
    """
    Register every ParserConfig exposed by the .py files in a directory.

    A file that fails to import, or whose configs are invalid, is logged and
    skipped; the remaining files still load.

    Args:
        directory: Directory to scan
        registry: Registry to add parsers to

    Returns:
        Number of configs registered
    """
    if not directory.exists():
        logger.debug(f"Action parser directory does not exist: {directory}")
        return 0

    count = 0
    for py_file in sorted(directory.glob("*.py")):
        if py_file.name.startswith("_"):
            continue

        try:
            module_name = f"_action_parsers_{directory.parent.name}_{py_file.stem}"
            spec = importlib.util.spec_from_file_location(module_name, py_file)
            if not (spec and spec.loader):
                continue
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)

            get_configs = getattr(module, "get_parser_configs", None)
            if get_configs is None:
                logger.debug(f"No get_parser_configs() in {py_file}, skipping")
                continue

            for config in get_configs():
                registry.register(config)
                count += 1
        except Exception as e:
            logger.error(f"Failed to load action parsers from {py_file}: {e}", exc_info=True)

    return count


def discover_action_parsers(
    registry: Optional[ParserRegistry] = None,
    plugins_dir: Optional[Path] = None,
    builtin_dir: Optional[Path] = None,
) -> int:
    """
    Discover and register all action parsers.

    Args:
        registry: Registry to populate (default: the global registry)
        plugins_dir: User parser directory (default: ./plugins/actions)
        builtin_dir: Builtin parser directory (default: builtin_plugins/actions)

    Returns:
        Total number of configs registered
    """
    registry = registry or get_registry()
    if builtin_dir is None:
        builtin_dir = BUILTIN_DIR
    if plugins_dir is None:
        plugins_dir = Path.cwd() / "plugins" / "actions"

    builtin = _load_parsers_from_directory(builtin_dir, registry)
    user = 0
    if plugins_dir.resolve() != builtin_dir.resolve():
        user = _load_parsers_from_directory(plugins_dir, registry)

    logger.info(f"Action parser discovery complete: {builtin} builtin, {user} user parser(s)")
    return builtin + user
