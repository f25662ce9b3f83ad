import json

from frontbuild.sprites import Manifest, ManifestStore


def test_load_missing_file_is_absent(tmp_path):
    manifest = ManifestStore(tmp_path / "icons.json").load()
    assert manifest.loaded is False
    assert len(manifest) == 0


def test_load_unparsable_file_is_absent(tmp_path):
    path = tmp_path / "icons.json"
    path.write_text("{not json", encoding="utf-8")
    assert ManifestStore(path).load().loaded is False


def test_load_non_object_is_absent(tmp_path):
    path = tmp_path / "icons.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert ManifestStore(path).load().loaded is False


def test_load_reads_truthy_keys(tmp_path):
    path = tmp_path / "icons.json"
    path.write_text(json.dumps({"a.png": True, "b.png": True, "c.png": False}), encoding="utf-8")
    manifest = ManifestStore(path).load()
    assert manifest.loaded is True
    assert manifest.keys == frozenset({"a.png", "b.png"})
    assert "a.png" in manifest


def test_save_overwrites_instead_of_merging(tmp_path):
    store = ManifestStore(tmp_path / "icons.json")
    store.save(Manifest.of(["old.png", "kept.png"]))
    store.save(Manifest.of(["kept.png", "new.png"]))
    assert store.load().keys == frozenset({"kept.png", "new.png"})


def test_save_is_sorted_and_readable(tmp_path):
    path = tmp_path / "icons.json"
    ManifestStore(path).save(Manifest.of(["b.png", "a.png"]))
    assert path.read_text(encoding="utf-8") == '{\n  "a.png": true,\n  "b.png": true\n}\n'
    assert [p.name for p in tmp_path.iterdir()] == ["icons.json"]
