import pytest
from PIL import Image

from frontbuild.sprites import ManifestStore, SpriteTargets, icon_keys, needs_repack, regenerate_sprites

from .conftest import make_icon


def _targets(project, icon_dir):
    return SpriteTargets(
        icon_dir=icon_dir,
        image_path=project / "src/assets/images/sprites.png",
        stylesheet_path=project / "src/assets/scss/sprites.scss",
        image_ref="../images/sprites.png",
    )


def test_repack_from_empty_manifest(project, icon_dir, three_icons):
    store = ManifestStore(project / "icons.json")
    assert needs_repack(icon_dir, store.load()) is True

    targets = _targets(project, icon_dir)
    manifest = regenerate_sprites(targets, store)

    assert len(manifest) == 3
    assert store.load().keys == frozenset({"home.png", "search-big.png", "arrow-down.png"})
    assert icon_keys(icon_dir) <= store.load().keys

    css = targets.stylesheet_path.read_text(encoding="utf-8")
    for name in ("home", "search-big", "arrow-down"):
        assert f".ico-{name} {{" in css
    with Image.open(targets.image_path) as im:
        assert im.mode == "RGBA"
        assert f"background-size: {im.width}px {im.height}px;" in css


def test_no_repack_after_regeneration(project, icon_dir, three_icons):
    store = ManifestStore(project / "icons.json")
    regenerate_sprites(_targets(project, icon_dir), store)
    assert needs_repack(icon_dir, store.load()) is False
    assert needs_repack(icon_dir, store.load()) is False


def test_repack_drops_deleted_icons(project, icon_dir, three_icons):
    store = ManifestStore(project / "icons.json")
    regenerate_sprites(_targets(project, icon_dir), store)
    three_icons[0].unlink()
    make_icon(icon_dir / "star.png")
    assert needs_repack(icon_dir, store.load()) is True
    regenerate_sprites(_targets(project, icon_dir), store)
    assert store.load().keys == frozenset({"search-big.png", "arrow-down.png", "star.png"})


def test_empty_icon_dir_writes_empty_manifest(project, icon_dir):
    store = ManifestStore(project / "icons.json")
    targets = _targets(project, icon_dir)
    manifest = regenerate_sprites(targets, store)
    assert len(manifest) == 0
    assert store.load().loaded is True
    assert not targets.image_path.exists()
    assert needs_repack(icon_dir, store.load()) is False


def test_unreadable_icon_publishes_nothing(project, icon_dir):
    make_icon(icon_dir / "good.png")
    (icon_dir / "broken.png").write_bytes(b"not a png")
    store = ManifestStore(project / "icons.json")
    targets = _targets(project, icon_dir)
    with pytest.raises(OSError):
        regenerate_sprites(targets, store)
    assert not targets.image_path.exists()
    assert not targets.stylesheet_path.exists()
    assert store.load().loaded is False


def test_unwritable_stylesheet_publishes_nothing(project, icon_dir, three_icons):
    store = ManifestStore(project / "icons.json")
    targets = _targets(project, icon_dir)
    targets.stylesheet_path.parent.parent.mkdir(parents=True, exist_ok=True)
    targets.stylesheet_path.parent.write_text("blocks the scss directory", encoding="utf-8")
    with pytest.raises(OSError):
        regenerate_sprites(targets, store)
    assert not targets.image_path.exists()
    assert store.load().loaded is False


def test_unwritable_composite_keeps_previous_stylesheet(project, icon_dir, three_icons):
    store = ManifestStore(project / "icons.json")
    targets = _targets(project, icon_dir)
    targets.stylesheet_path.parent.mkdir(parents=True, exist_ok=True)
    targets.stylesheet_path.write_text(".ico {}\n", encoding="utf-8")
    targets.image_path.parent.parent.mkdir(parents=True, exist_ok=True)
    targets.image_path.parent.write_text("blocks the images directory", encoding="utf-8")
    with pytest.raises(OSError):
        regenerate_sprites(targets, store)
    assert targets.stylesheet_path.read_text(encoding="utf-8") == ".ico {}\n"
    assert [p.name for p in targets.stylesheet_path.parent.iterdir()] == ["sprites.scss"]
    assert store.load().loaded is False
