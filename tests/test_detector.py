from frontbuild.sprites import Manifest, icon_keys, manifest_key, needs_repack, normalize_icon_name

from .conftest import make_icon


def test_normalization():
    assert manifest_key("Icon_One.PNG") == "icon-one.png"
    assert normalize_icon_name("Search_Big.png") == "search-big"


def test_absent_manifest_forces_repack_even_for_empty_dir(icon_dir):
    assert needs_repack(icon_dir, Manifest.absent()) is True


def test_empty_dir_needs_nothing(icon_dir):
    assert needs_repack(icon_dir, Manifest.of([])) is False


def test_missing_dir_needs_nothing(tmp_path):
    assert needs_repack(tmp_path / "nope", Manifest.of(["a.png"])) is False


def test_empty_manifest_with_icons_repacks(icon_dir, three_icons):
    assert needs_repack(icon_dir, Manifest.of([])) is True


def test_all_icons_packed(icon_dir):
    make_icon(icon_dir / "a.png")
    make_icon(icon_dir / "b.png")
    manifest = Manifest.of(["a.png", "b.png"])
    assert needs_repack(icon_dir, manifest) is False
    assert needs_repack(icon_dir, manifest) is False


def test_new_icon_triggers_repack(icon_dir):
    make_icon(icon_dir / "a.png")
    make_icon(icon_dir / "New_Icon.png")
    assert needs_repack(icon_dir, Manifest.of(["a.png"])) is True


def test_mixed_case_name_matches_normalized_key(icon_dir):
    make_icon(icon_dir / "Icon_One.PNG")
    assert icon_keys(icon_dir) == {"icon-one.png"}
    assert needs_repack(icon_dir, Manifest.of(["icon-one.png"])) is False


def test_stale_keys_ignored_by_default(icon_dir):
    make_icon(icon_dir / "a.png")
    manifest = Manifest.of(["a.png", "deleted.png"])
    assert needs_repack(icon_dir, manifest) is False
    assert needs_repack(icon_dir, manifest, repack_on_removal=True) is True


def test_non_icon_files_ignored(icon_dir):
    make_icon(icon_dir / "a.png")
    (icon_dir / ".DS_Store").write_bytes(b"\0")
    (icon_dir / "notes.txt").write_text("x")
    assert needs_repack(icon_dir, Manifest.of(["a.png"])) is False
