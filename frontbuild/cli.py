from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .assembler import sprite_options
from .config import SPRITE_OPTIONS, BuildOptions, declarative_config, options_from_env
from .errors import TransformError
from .runner import build, plan_build
from .sprites import ManifestStore, needs_repack, regenerate_sprites
from .transforms.sprites import targets_from_options

logger = logging.getLogger("frontbuild")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _options(args: argparse.Namespace) -> BuildOptions:
    return options_from_env(
        mode=args.mode,
        analyze=True if args.analyze else None,
        project_root=Path(args.root).resolve(),
        repack_on_removal=True if args.repack_on_removal else None,
    )


def _cmd_build(args: argparse.Namespace) -> int:
    options = _options(args)
    try:
        ctx = build(options)
    except TransformError as e:
        logger.error("Build failed in %s: %s", e.transform, e.cause)
        return 1
    logger.info("Build complete: %s", ", ".join(ctx.completed) or "nothing to do")
    if ctx.skipped:
        logger.warning("Skipped best-effort transforms: %s", ", ".join(ctx.skipped))
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    options = _options(args)
    pipeline = plan_build(options)
    payload = {
        "options": json.loads(options.model_dump_json()),
        "pipeline": [{"name": d.name, "options": d.options} for d in pipeline],
        "config": declarative_config(options),
    }
    print(json.dumps(payload, indent=2, default=str))
    return 0


def _cmd_sprites(args: argparse.Namespace) -> int:
    options = _options(args)
    store = ManifestStore(options.manifest_path)
    icon_dir = options.resolve(SPRITE_OPTIONS["icon_dir"])
    if not args.force and not needs_repack(icon_dir, store.load(), repack_on_removal=options.repack_on_removal):
        logger.info("Sprite sheet is up to date")
        return 0
    targets = targets_from_options(sprite_options(options))
    try:
        regenerate_sprites(targets, store)
    except (OSError, ValueError) as e:
        logger.error("Sprite regeneration failed: %s", e)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="frontbuild", description="Assemble and run the front-end asset build.")
    parser.add_argument("--root", default=".", help="project root (default: current directory)")
    parser.add_argument("--mode", choices=["development", "production"], default=None, help="override NODE_ENV")
    parser.add_argument("--analyze", action="store_true", help="emit the bundle analysis report")
    parser.add_argument("--repack-on-removal", action="store_true", help="repack sprites when icons were deleted")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("build", help="run the assembled pipeline").set_defaults(func=_cmd_build)
    sub.add_parser("inspect", help="print options and the assembled pipeline as JSON").set_defaults(func=_cmd_inspect)
    sprites = sub.add_parser("sprites", help="regenerate the sprite sheet if icons changed")
    sprites.add_argument("--force", action="store_true", help="repack even if the manifest is current")
    sprites.set_defaults(func=_cmd_sprites)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return int(args.func(args))
    except ValidationError as e:
        logger.error("Invalid build options: %s", e)
        return 2
