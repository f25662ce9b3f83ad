from frontbuild.sprites import Composite, IconFile, LayoutEntry, generate_stylesheet, pack_icons

from .conftest import make_icon

REF = "../images/sprites.png"


def _entries():
    comp = Composite(image_ref=REF, width=40, height=20)
    return [
        LayoutEntry(name="home", composite=comp, width=16, height=16, x=2, y=2),
        LayoutEntry(name="search-big", composite=comp, width=8, height=8, x=22, y=0),
    ]


def test_exact_output():
    css = generate_stylesheet(REF, _entries())
    assert css == (
        ".ico {\n"
        "  display: inline-block;\n"
        "  background-image: url(../images/sprites.png);\n"
        "  background-size: 40px 20px;\n"
        "}\n"
        ".ico-home {\n"
        "  width: 16px;\n"
        "  height: 16px;\n"
        "  background-position: -2px -2px;\n"
        "}\n"
        ".ico-search-big {\n"
        "  width: 8px;\n"
        "  height: 8px;\n"
        "  background-position: -22px 0px;\n"
        "}\n"
    )


def test_custom_prefix():
    css = generate_stylesheet(REF, _entries(), prefix="sprite")
    assert css.startswith(".sprite {")
    assert ".sprite-home {" in css


def test_repeated_generation_is_byte_identical(icon_dir):
    icons = [IconFile.read(make_icon(icon_dir / f"i{n}.png", (8 + n, 10))) for n in range(5)]
    a = generate_stylesheet(REF, pack_icons(icons, image_ref=REF).entries)
    b = generate_stylesheet(REF, pack_icons(icons, image_ref=REF).entries)
    assert a == b
    assert a.count(".ico-") == 5
