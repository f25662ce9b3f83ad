from __future__ import annotations

import math
from io import BytesIO
from typing import Iterable

from PIL import Image

from .models import Composite, IconFile, LayoutEntry, SpriteSheet

DEFAULT_PADDING = 2


def _open_rgba(icon: IconFile) -> Image.Image:
    with Image.open(BytesIO(icon.data)) as im:
        im.load()
        return im.convert("RGBA")


def pack_icons(icons: Iterable[IconFile], *, image_ref: str, padding: int = DEFAULT_PADDING) -> SpriteSheet:
    """
    Pack icons into one RGBA composite using fixed-width shelves.

    Each icon occupies a cell grown by `padding` on every side. Placement order is
    (height desc, width desc, name) so the same icon set always yields the same sheet.
    """
    if padding < 0:
        raise ValueError("padding must be >= 0")

    icons = list(icons)
    seen: dict[str, IconFile] = {}
    for icon in icons:
        if icon.name in seen:
            raise ValueError(f"Icons {seen[icon.name].path.name} and {icon.path.name} normalize to the same name '{icon.name}'")
        seen[icon.name] = icon

    images = {icon.name: _open_rgba(icon) for icon in icons}
    if not images:
        raise ValueError("No icons to pack")

    order = sorted(images, key=lambda n: (-images[n].height, -images[n].width, n))
    cells = {n: (images[n].width + 2 * padding, images[n].height + 2 * padding) for n in order}

    total_area = sum(w * h for w, h in cells.values())
    shelf_width = max(max(w for w, _ in cells.values()), math.ceil(math.sqrt(total_area)))

    placed: dict[str, tuple[int, int]] = {}
    x = y = row_h = 0
    sheet_w = 0
    for name in order:
        cw, ch = cells[name]
        if x and x + cw > shelf_width:
            y += row_h
            x = row_h = 0
        placed[name] = (x + padding, y + padding)
        x += cw
        row_h = max(row_h, ch)
        sheet_w = max(sheet_w, x)
    sheet_h = y + row_h

    composite = Composite(image_ref=image_ref, width=sheet_w, height=sheet_h)
    sheet = Image.new("RGBA", (sheet_w, sheet_h), (0, 0, 0, 0))
    entries = []
    for name in sorted(placed):
        im = images[name]
        px, py = placed[name]
        sheet.paste(im, (px, py))
        entries.append(LayoutEntry(name=name, composite=composite, width=im.width, height=im.height, x=px, y=py))

    return SpriteSheet(image=sheet, composite=composite, entries=tuple(entries))
