"""
Pytest fixtures: a throwaway front-end project tree with raster icons.
"""
from pathlib import Path

import pytest
from PIL import Image

from frontbuild.config import BuildOptions

ICON_DIR = "src/assets/icons"


def make_icon(path: Path, size: tuple[int, int] = (16, 16), color: tuple[int, int, int, int] = (200, 30, 30, 255)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path, format="PNG")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "NODE_ENV",
        "IS_ANALYZ",
        "VUE_APP_PUBLIC_PATH",
        "VUE_APP_OSS_SRC",
        "REGION",
        "BUCKET",
        "PREFIX",
        "ACCESS_KEY_ID",
        "ACCESS_KEY_SECRET",
        "PRERENDER_BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "app"
    for rel in ("src/assets", "src/components", ICON_DIR):
        (root / rel).mkdir(parents=True, exist_ok=True)
    return root


@pytest.fixture
def icon_dir(project: Path) -> Path:
    return project / ICON_DIR


@pytest.fixture
def three_icons(icon_dir: Path) -> list[Path]:
    return [
        make_icon(icon_dir / "home.png", (16, 16), (255, 0, 0, 255)),
        make_icon(icon_dir / "Search_Big.png", (24, 24), (0, 255, 0, 255)),
        make_icon(icon_dir / "arrow_down.PNG", (8, 12), (0, 0, 255, 255)),
    ]


@pytest.fixture
def dev_options(project: Path) -> BuildOptions:
    return BuildOptions(mode="development", project_root=project)


@pytest.fixture
def prod_options(project: Path) -> BuildOptions:
    return BuildOptions(mode="production", project_root=project)
