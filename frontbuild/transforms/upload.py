# Purpose: Upload built assets to the remote object store (S3-compatible).
# Dependencies: boto3.
# Notes: Requires REGION, BUCKET; PREFIX and ACCESS_KEY_ID/ACCESS_KEY_SECRET are optional.
# Never deletes remote objects.
from __future__ import annotations

import logging
import mimetypes
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

import boto3

from ..config import S3Config, get_s3_config
from ..context import BuildContext, UploadAsset
from ..util import iter_files, posix_rel

logger = logging.getLogger(__name__)

LONG_CACHE = "public, max-age=31536000"


def s3_client(cfg: S3Config):
    kwargs: dict[str, Any] = {"region_name": cfg.region}
    if cfg.access_key_id and cfg.access_key_secret:
        kwargs["aws_access_key_id"] = cfg.access_key_id
        kwargs["aws_secret_access_key"] = cfg.access_key_secret
    return boto3.client("s3", **kwargs)


class S3Uploader:
    def __init__(self, cfg: S3Config, *, client: Any = None, max_workers: int = 8) -> None:
        self.cfg = cfg
        self.client = client if client is not None else s3_client(cfg)
        self.max_workers = max_workers

    def _put(self, asset: UploadAsset) -> None:
        self.client.put_object(
            Bucket=self.cfg.bucket,
            Key=asset.key,
            Body=asset.path.read_bytes(),
            ContentType=asset.content_type or "application/octet-stream",
            CacheControl=LONG_CACHE,
        )

    def upload(self, assets: list[UploadAsset]) -> None:
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            # list() re-raises the first failure
            list(pool.map(self._put, assets))
        logger.info("Uploaded %d asset(s) to s3://%s/%s", len(assets), self.cfg.bucket, self.cfg.prefix)


def collect_assets(output_dir: Path, *, include: str, exclude: str, prefix: str) -> list[UploadAsset]:
    inc = re.compile(include) if include else None
    exc = re.compile(exclude) if exclude else None
    out: list[UploadAsset] = []
    for path in iter_files(output_dir):
        rel = posix_rel(path, output_dir)
        if inc is not None and not inc.search(rel):
            continue
        if exc is not None and exc.search(rel):
            continue
        content_type = mimetypes.guess_type(rel)[0] or "application/octet-stream"
        out.append(UploadAsset(path=path, key=f"{prefix}{rel}", content_type=content_type))
    return out


def run(ctx: BuildContext, options: dict[str, Any]) -> None:
    if options.get("delete_all"):
        raise ValueError("Deleting remote objects is not supported")
    uploader = ctx.uploader
    prefix = options.get("prefix")
    if uploader is None:
        cfg = get_s3_config()
        uploader = S3Uploader(cfg)
        if prefix is None:
            prefix = cfg.prefix
    assets = collect_assets(
        ctx.output_path,
        include=str(options.get("include") or ""),
        exclude=str(options.get("exclude") or ""),
        prefix=str(prefix or ""),
    )
    if not assets:
        logger.info("No assets to upload from %s", ctx.output_path)
        return
    uploader.upload(assets)
