import json

from frontbuild.cli import main


def test_inspect_prints_pipeline(project, capsys):
    assert main(["--root", str(project), "--mode", "production", "--analyze", "inspect"]) == 0
    payload = json.loads(capsys.readouterr().out)
    names = [d["name"] for d in payload["pipeline"]]
    assert names[0] == "aliases"
    assert names[-1] == "bundle-analysis"
    assert "sprites" in names
    assert payload["options"]["mode"] == "production"
    assert payload["config"]["externals"]["vue"] == "Vue"


def test_inspect_development(project, capsys):
    (project / "icons.json").write_text("{}", encoding="utf-8")
    assert main(["--root", str(project), "inspect"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [d["name"] for d in payload["pipeline"]] == ["aliases", "image-compression"]


def test_sprites_command(project, three_icons):
    assert main(["--root", str(project), "sprites"]) == 0
    manifest = json.loads((project / "icons.json").read_text(encoding="utf-8"))
    assert len(manifest) == 3
    stat = (project / "src/assets/scss/sprites.scss").stat().st_mtime_ns
    assert main(["--root", str(project), "sprites"]) == 0
    assert (project / "src/assets/scss/sprites.scss").stat().st_mtime_ns == stat


def test_sprites_command_reports_failure(project, icon_dir):
    (icon_dir / "broken.png").write_bytes(b"nope")
    assert main(["--root", str(project), "sprites"]) == 1


def test_build_command_development(project, three_icons):
    assert main(["--root", str(project), "build"]) == 0
    assert (project / "src/assets/images/sprites.png").is_file()
