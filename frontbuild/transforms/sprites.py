from __future__ import annotations

from pathlib import Path
from typing import Any

from ..context import BuildContext
from ..sprites import ManifestStore, SpriteTargets, regenerate_sprites


def targets_from_options(options: dict[str, Any]) -> SpriteTargets:
    return SpriteTargets(
        icon_dir=Path(options["icon_dir"]),
        image_path=Path(options["image_path"]),
        stylesheet_path=Path(options["stylesheet_path"]),
        image_ref=str(options["image_ref"]),
        padding=int(options.get("padding", 2)),
        prefix=str(options.get("prefix", "ico")),
    )


def run(ctx: BuildContext, options: dict[str, Any]) -> None:
    store = ManifestStore(Path(options.get("manifest_path") or ctx.options.manifest_path))
    regenerate_sprites(targets_from_options(options), store)
