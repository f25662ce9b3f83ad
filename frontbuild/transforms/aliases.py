from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ..context import BuildContext

logger = logging.getLogger(__name__)


def resolve_alias(specifier: str, aliases: dict[str, str]) -> str | None:
    """Map `@components/Nav.vue` to its concrete path; the longest matching root wins."""
    best: str | None = None
    for root in aliases:
        if specifier == root or specifier.startswith(root + "/"):
            if best is None or len(root) > len(best):
                best = root
    if best is None:
        return None
    rest = specifier[len(best) :].lstrip("/")
    target = Path(aliases[best])
    return str(target / rest) if rest else str(target)


def run(ctx: BuildContext, options: dict[str, Any]) -> None:
    aliases = dict(options.get("aliases") or {})
    for root, target in sorted(aliases.items()):
        if not Path(target).is_dir():
            logger.warning("Alias %s points at missing directory %s", root, target)
    ctx.aliases = aliases
