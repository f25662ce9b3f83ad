from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from ..context import BuildContext, ChunkModule
from ..util import atomic_write_text

logger = logging.getLogger(__name__)

CHUNK_MANIFEST = "chunks.json"


def _ordered_groups(groups: list[dict[str, Any]]) -> list[dict[str, Any]]:
    # sorted() is stable, so equal priorities keep declaration order.
    return sorted(groups, key=lambda g: -int(g.get("priority", 0)))


def assign_chunk(module: ChunkModule, groups: list[dict[str, Any]]) -> str | None:
    """Name of the highest-priority group whose pattern matches the module, if any."""
    for group in _ordered_groups(groups):
        chunks = group.get("chunks", "all")
        if chunks == "initial" and not module.initial:
            continue
        if chunks == "async" and module.initial:
            continue
        if re.search(group["test"], module.module_id):
            return str(group["name"])
    return None


def split_modules(modules: list[ChunkModule], groups: list[dict[str, Any]]) -> dict[str, list[str]]:
    out: dict[str, list[str]] = {}
    for m in modules:
        name = assign_chunk(m, groups)
        if name is not None:
            out.setdefault(name, []).append(m.module_id)
    return {k: sorted(v) for k, v in sorted(out.items())}


def discover_modules(root: Path) -> list[ChunkModule]:
    """Top-level installed packages as initial modules, identified by their absolute directory."""
    node_modules = root / "node_modules"
    if not node_modules.is_dir():
        return []
    out: list[ChunkModule] = []
    for pkg in sorted(node_modules.iterdir()):
        if not pkg.is_dir() or pkg.name.startswith("."):
            continue
        if pkg.name.startswith("@"):
            out.extend(ChunkModule(sub.resolve().as_posix() + "/") for sub in sorted(pkg.iterdir()) if sub.is_dir())
        else:
            out.append(ChunkModule(pkg.resolve().as_posix() + "/"))
    return out


def run(ctx: BuildContext, options: dict[str, Any]) -> None:
    groups = list(options.get("groups") or [])
    modules = ctx.modules if ctx.modules is not None else discover_modules(ctx.options.project_root)
    assignment = split_modules(modules, groups)
    atomic_write_text(ctx.output_path / CHUNK_MANIFEST, json.dumps(assignment, indent=2) + "\n")
    for name, ids in assignment.items():
        logger.info("Chunk %s: %d module(s)", name, len(ids))
