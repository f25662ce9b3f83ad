from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from ..util import publish_staged, stage_bytes
from .detector import list_icon_paths
from .layout import DEFAULT_PADDING, pack_icons
from .manifest import Manifest, ManifestStore
from .models import IconFile
from .stylesheet import DEFAULT_PREFIX, generate_stylesheet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpriteTargets:
    icon_dir: Path
    image_path: Path
    stylesheet_path: Path
    image_ref: str
    padding: int = DEFAULT_PADDING
    prefix: str = DEFAULT_PREFIX


def regenerate_sprites(targets: SpriteTargets, store: ManifestStore) -> Manifest:
    """
    Repack every icon, publish the stylesheet and composite, then overwrite the manifest.

    Both artifacts are rendered in memory and staged to synced temp files before
    either is renamed into place; a failure while staging publishes nothing. The
    manifest is only saved after both renames succeed.
    """
    icons = [IconFile.read(p) for p in list_icon_paths(targets.icon_dir)]
    if not icons:
        logger.info("No icons in %s; writing an empty sprite manifest", targets.icon_dir)
        manifest = Manifest.of([])
        store.save(manifest)
        return manifest

    sheet = pack_icons(icons, image_ref=targets.image_ref, padding=targets.padding)
    css = generate_stylesheet(targets.image_ref, sheet.entries, prefix=targets.prefix)

    buf = BytesIO()
    sheet.image.save(buf, format="PNG", optimize=True)

    staged: list[tuple[Path, Path]] = []
    try:
        staged.append((stage_bytes(targets.stylesheet_path, css.encode("utf-8")), targets.stylesheet_path))
        staged.append((stage_bytes(targets.image_path, buf.getvalue()), targets.image_path))
    except BaseException:
        for tmp, _target in staged:
            tmp.unlink(missing_ok=True)
        raise
    publish_staged(staged)
    logger.info(
        "Packed %d icons into %s (%dx%d)",
        len(sheet.entries),
        targets.image_path,
        sheet.composite.width,
        sheet.composite.height,
    )

    manifest = Manifest.of(sheet.keys)
    store.save(manifest)
    return manifest
