from itertools import combinations

import pytest

from frontbuild.sprites import IconFile, pack_icons

from .conftest import make_icon


def _icons(icon_dir, sizes):
    paths = [make_icon(icon_dir / f"icon_{i}.png", size) for i, size in enumerate(sizes)]
    return [IconFile.read(p) for p in paths]


def test_entries_do_not_overlap(icon_dir):
    icons = _icons(icon_dir, [(16, 16), (24, 24), (8, 32), (40, 10), (12, 12), (30, 30)])
    sheet = pack_icons(icons, image_ref="sprites.png", padding=2)
    assert len(sheet.entries) == len(icons)
    for a, b in combinations(sheet.entries, 2):
        assert not a.overlaps(b)


def test_padding_reserved_on_every_side(icon_dir):
    padding = 3
    icons = _icons(icon_dir, [(16, 16), (24, 24), (8, 32), (40, 10)])
    sheet = pack_icons(icons, image_ref="sprites.png", padding=padding)
    for e in sheet.entries:
        assert e.x >= padding and e.y >= padding
        assert e.x + e.width + padding <= sheet.composite.width
        assert e.y + e.height + padding <= sheet.composite.height
    for a, b in combinations(sheet.entries, 2):
        grown = a.__class__(a.name, a.composite, a.width + 2 * padding, a.height + 2 * padding, a.x - padding, a.y - padding)
        other = b.__class__(b.name, b.composite, b.width + 2 * padding, b.height + 2 * padding, b.x - padding, b.y - padding)
        assert not grown.overlaps(other)


def test_composite_matches_reported_size_and_pixels(icon_dir):
    icons = _icons(icon_dir, [(10, 10), (6, 6)])
    sheet = pack_icons(icons, image_ref="sprites.png")
    assert sheet.image.size == (sheet.composite.width, sheet.composite.height)
    e = sheet.entries[0]
    assert sheet.image.getpixel((e.x, e.y)) == (200, 30, 30, 255)


def test_layout_is_deterministic(icon_dir):
    icons = _icons(icon_dir, [(16, 16), (24, 24), (8, 32)])
    first = pack_icons(icons, image_ref="sprites.png")
    second = pack_icons(list(reversed(icons)), image_ref="sprites.png")
    assert first.entries == second.entries
    assert [e.name for e in first.entries] == sorted(e.name for e in first.entries)


def test_colliding_names_rejected(icon_dir):
    a = IconFile.read(make_icon(icon_dir / "My_Icon.png"))
    b = IconFile.read(make_icon(icon_dir / "my-icon.png"))
    with pytest.raises(ValueError, match="same name"):
        pack_icons([a, b], image_ref="sprites.png")


def test_empty_input_rejected():
    with pytest.raises(ValueError):
        pack_icons([], image_ref="sprites.png")
