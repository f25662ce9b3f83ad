from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urljoin
from urllib.request import Request, urlopen

from ..config import prerender_base_url
from ..context import BuildContext, Renderer
from ..util import atomic_write_text

logger = logging.getLogger(__name__)

_BETWEEN_TAGS_RE = re.compile(r">\s+<")


class UrlRenderer:
    """Fetches each route from a running renderer (dev server or headless browser proxy)."""

    def __init__(self, base_url: str, *, timeout: float = 60.0) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout

    def render(self, route: str) -> str:
        url = urljoin(self.base_url, route.lstrip("/"))
        req = Request(url, headers={"Accept": "text/html"}, method="GET")
        try:
            with urlopen(req, timeout=self.timeout) as resp:  # nosec - build-time fetch
                return resp.read().decode("utf-8", errors="replace")
        except HTTPError as e:
            raise RuntimeError(f"Prerender of {route} failed: HTTP {e.code}") from e
        except URLError as e:
            raise RuntimeError(f"Prerender of {route} failed: {e}") from e


def collapse_whitespace(html: str) -> str:
    return _BETWEEN_TAGS_RE.sub("><", html)


def output_path_for(route: str, output_dir: Path) -> Path:
    """`/about.html` is written as-is; any other route becomes `<route>/index.html`."""
    rel = route.strip("/")
    if rel.endswith(".html"):
        return output_dir / rel
    return output_dir / rel / "index.html" if rel else output_dir / "index.html"


def prerender_routes(renderer: Renderer, routes: list[str], output_dir: Path) -> list[Path]:
    written: list[Path] = []
    for route in routes:
        html = collapse_whitespace(renderer.render(route))
        target = output_path_for(route, output_dir)
        atomic_write_text(target, html)
        logger.info("Prerendered %s -> %s", route, target)
        written.append(target)
    return written


def run(ctx: BuildContext, options: dict[str, Any]) -> None:
    renderer = ctx.renderer or UrlRenderer(prerender_base_url())
    prerender_routes(renderer, list(options.get("routes") or ["/"]), ctx.output_path)
