"""Module list selection for the link stage.

Exactly one source is chosen, evaluated top-down:

1. explicit override (``MODULES`` environment variable)
2. manual override file ``custom-modules.txt``
3. most recently modified ``*-modules.txt`` written by ``jrekit analyze``
4. the built-in default module set

A source with blank content counts as absent.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import structlog

from jrekit.config import Settings
from jrekit.fs import FileSystem, LocalFileSystem
from jrekit.modules.models import DEFAULT_MODULES, parse_module_list, serialize_modules

log = structlog.get_logger("jrekit.modules")

CUSTOM_MODULES_FILE = "custom-modules.txt"
AUTO_MODULES_PATTERN = "*-modules.txt"


@dataclass(frozen=True)
class ModuleSelection:
    """The module list handed to jlink, and where it came from."""

    modules: tuple[str, ...]
    source: str  # "environment" | "custom" | "auto" | "default"
    origin: str = ""  # file name for file-based sources

    @property
    def argument(self) -> str:
        return serialize_modules(self.modules)

    def describe(self) -> str:
        return f"{self.source} ({self.origin})" if self.origin else self.source


def _from_environment(settings: Settings, fs: FileSystem) -> ModuleSelection | None:
    if settings.modules_override is None:
        return None
    modules = parse_module_list(settings.modules_override)
    return ModuleSelection(modules, "environment") if modules else None


def _from_file(path: Path, source: str, fs: FileSystem) -> ModuleSelection | None:
    try:
        modules = parse_module_list(fs.read_text(path))
    except (OSError, UnicodeDecodeError) as e:
        log.warning("resolve.unreadable", path=str(path), error=str(e))
        return None
    return ModuleSelection(modules, source, path.name) if modules else None


def _from_custom_file(settings: Settings, fs: FileSystem) -> ModuleSelection | None:
    path = settings.work_dir / CUSTOM_MODULES_FILE
    if not fs.is_file(path):
        return None
    return _from_file(path, "custom", fs)


def _from_latest_analysis(settings: Settings, fs: FileSystem) -> ModuleSelection | None:
    candidates = [
        p for p in fs.glob(settings.work_dir, AUTO_MODULES_PATTERN) if p.name != CUSTOM_MODULES_FILE
    ]
    # Newest first; name breaks ties so the choice is deterministic.
    candidates.sort(key=lambda p: (-fs.mtime(p), p.name))
    for path in candidates:
        selection = _from_file(path, "auto", fs)
        if selection is not None:
            return selection
    return None


ModuleSource = Callable[[Settings, FileSystem], ModuleSelection | None]

# Evaluated top-down; the default set answers when none of these do.
PRIORITY_CHAIN: list[ModuleSource] = [
    _from_environment,
    _from_custom_file,
    _from_latest_analysis,
]


def resolve_modules(settings: Settings, fs: FileSystem | None = None) -> ModuleSelection:
    """Select the module list source by precedence and log the choice."""
    fs = fs or LocalFileSystem()
    selection = None
    for source in PRIORITY_CHAIN:
        selection = source(settings, fs)
        if selection is not None:
            break
    if selection is None:
        selection = ModuleSelection(DEFAULT_MODULES, "default")

    log.info(
        "resolve.selected",
        source=selection.source,
        origin=selection.origin or None,
        modules=selection.argument,
    )
    return selection
