from __future__ import annotations

from typing import Sequence

from .models import LayoutEntry

DEFAULT_PREFIX = "ico"


def _neg_px(v: int) -> str:
    return f"-{v}px" if v else "0px"


def generate_stylesheet(image_ref: str, entries: Sequence[LayoutEntry], *, prefix: str = DEFAULT_PREFIX) -> str:
    """
    Render the base rule and one positional rule per layout entry.

    Pure: the same image reference and the same ordered entries always produce
    the same text.
    """
    sheet_w = max((e.composite.width for e in entries), default=0)
    sheet_h = max((e.composite.height for e in entries), default=0)

    lines = [
        f".{prefix} {{",
        "  display: inline-block;",
        f"  background-image: url({image_ref});",
        f"  background-size: {sheet_w}px {sheet_h}px;",
        "}",
    ]
    for e in entries:
        lines.extend(
            [
                f".{prefix}-{e.name} {{",
                f"  width: {e.width}px;",
                f"  height: {e.height}px;",
                f"  background-position: {_neg_px(e.x)} {_neg_px(e.y)};",
                "}",
            ]
        )
    return "\n".join(lines) + "\n"
