from __future__ import annotations

import logging
from pathlib import Path

from .manifest import Manifest
from .models import is_icon_file, manifest_key

logger = logging.getLogger(__name__)


def list_icon_paths(icon_dir: Path) -> list[Path]:
    if not icon_dir.is_dir():
        return []
    return sorted((p for p in icon_dir.iterdir() if is_icon_file(p)), key=lambda p: p.name)


def icon_keys(icon_dir: Path) -> set[str]:
    return {manifest_key(p.name) for p in list_icon_paths(icon_dir)}


def needs_repack(icon_dir: Path, manifest: Manifest, *, repack_on_removal: bool = False) -> bool:
    """
    Decide whether the sprite sheet must be regenerated.

    An absent manifest always forces a repack. Otherwise an empty icon directory
    needs nothing, and any icon missing from the manifest triggers a repack.
    Manifest keys for icons that were since removed are ignored unless
    `repack_on_removal` is set.
    """
    if not manifest.loaded:
        logger.info("Sprite repack required: no manifest")
        return True

    keys = icon_keys(icon_dir)
    if not keys:
        logger.debug("No icons in %s; nothing to sprite", icon_dir)
        return False

    missing = sorted(keys - manifest.keys)
    if missing:
        logger.info("Sprite repack required: %d new icon(s), first %s", len(missing), missing[0])
        return True

    if repack_on_removal:
        stale = manifest.keys - keys
        if stale:
            logger.info("Sprite repack required: %d icon(s) removed", len(stale))
            return True

    return False
