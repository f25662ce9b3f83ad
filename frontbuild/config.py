from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PRODUCTION_ENVS = {"production", "prod"}

OUTPUT_DIR = "dist"
ASSETS_DIR = "static"
MANIFEST_FILENAME = "icons.json"

# Symbolic import roots -> directories relative to the project root.
ALIASES: dict[str, str] = {
    "@": "src",
    "@assets": "src/assets",
    "@components": "src/components",
}

SPRITE_OPTIONS: dict[str, Any] = {
    "icon_dir": "src/assets/icons",
    "image_path": "src/assets/images/sprites.png",
    "stylesheet_path": "src/assets/scss/sprites.scss",
    "image_ref": "../images/sprites.png",
    "padding": 2,
    "prefix": "ico",
}

IMAGE_COMPRESSION_OPTIONS: dict[str, Any] = {
    "jpeg": {"progressive": True, "quality": 65},
    "png": {"enabled": True, "colors": 256, "quality": "65-90"},
    "optipng": {"enabled": False},
    "gif": {"interlaced": False},
    "webp": {"quality": 75},
}

PURGE_OPTIONS: dict[str, Any] = {
    "content": ["**/*.vue"],
    "safelist": ["html", "body"],
    "safelist_patterns": [r"el-.*"],
    "safelist_patterns_children": [r"^token", r"^pre", r"^code"],
}

MINIFY_OPTIONS: dict[str, Any] = {
    "pure_funcs": ["console.log"],
    "drop_debugger": False,
}

SPLIT_CHUNK_GROUPS: list[dict[str, Any]] = [
    {
        "name": "chunk-element",
        "chunks": "all",
        "priority": 20,
        "test": r"[\\/]node_modules[\\/]element-ui[\\/]",
    },
    {
        "name": "chunk-libs",
        "chunks": "initial",
        "priority": 10,
        "test": r"[\\/]node_modules[\\/]",
    },
]

GZIP_OPTIONS: dict[str, Any] = {
    "test": r"\.(js|css|json|txt|html|ico|svg)(\?.*)?$",
    "threshold": 10240,
    "min_ratio": 0.8,
}

PRERENDER_OPTIONS: dict[str, Any] = {
    "routes": ["/"],
}

UPLOAD_OPTIONS: dict[str, Any] = {
    "include": r".*",
    "exclude": r".*\.html$",
    "delete_all": False,
}

ANALYSIS_OPTIONS: dict[str, Any] = {
    "report_filename": "report.html",
    "chart_filename": "report.png",
    "top_n": 20,
}

EXTERNALS: dict[str, str] = {
    "vue": "Vue",
    "vuex": "Vuex",
    "axios": "axios",
    "element-ui": "ELEMENT",
    "vue-router": "VueRouter",
}

CDN: dict[str, list[str]] = {
    "css": ["//unpkg.com/element-ui@2.10.1/lib/theme-chalk/index.css"],
    "js": [
        "//unpkg.com/vue@2.6.10/dist/vue.min.js",
        "//unpkg.com/vuex@3.1.1/dist/vuex.min.js",
        "//unpkg.com/axios@0.19.0/dist/axios.min.js",
        "//unpkg.com/element-ui@2.10.1/lib/index.js",
        "//unpkg.com/vue-router@3.0.6/dist/vue-router.min.js",
    ],
}

STYLE_PRELUDE_IMPORTS = [
    "@scss/config.scss",
    "@scss/variables.scss",
    "@scss/mixins.scss",
    "@scss/utils.scss",
]


def _env_flag(name: str) -> bool:
    return bool(os.environ.get(name, "").strip())


def mode_from_env() -> Literal["development", "production"]:
    node_env = os.environ.get("NODE_ENV", "").strip().lower()
    return "production" if node_env in PRODUCTION_ENVS else "development"


class BuildOptions(BaseModel):
    """Resolved inputs for one build invocation."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, frozen=True)

    mode: Literal["development", "production"] = "development"
    analyze: bool = False
    project_root: Path = Field(default_factory=Path.cwd)
    output_dir: str = OUTPUT_DIR
    assets_dir: str = ASSETS_DIR
    public_path: str = "./"
    cdn_src: str = ""
    repack_on_removal: bool = False

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in PRODUCTION_ENVS:
                return "production"
            if lowered in {"development", "dev"}:
                return "development"
        return value

    @field_validator("output_dir", "assets_dir")
    @classmethod
    def validate_relative_dir(cls, value: str) -> str:
        if not value or Path(value).is_absolute() or ".." in Path(value).parts:
            raise ValueError("must be a non-empty path relative to the project root")
        return value

    @property
    def is_production(self) -> bool:
        return self.mode == "production"

    @property
    def output_path(self) -> Path:
        return self.project_root / self.output_dir

    @property
    def manifest_path(self) -> Path:
        return self.project_root / MANIFEST_FILENAME

    def resolve(self, relative: str) -> Path:
        return self.project_root / relative


def options_from_env(**overrides: Any) -> BuildOptions:
    mode = overrides.get("mode") or mode_from_env()
    if mode in PRODUCTION_ENVS:
        mode = "production"
    values: dict[str, Any] = {
        "mode": mode,
        "analyze": _env_flag("IS_ANALYZ"),
        "public_path": (os.environ.get("VUE_APP_PUBLIC_PATH", "").strip() or "/") if mode == "production" else "./",
        "cdn_src": os.environ.get("VUE_APP_OSS_SRC", "").strip(),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return BuildOptions(**values)


@dataclass(frozen=True)
class S3Config:
    region: str
    bucket: str
    prefix: str
    access_key_id: str
    access_key_secret: str


def get_s3_config() -> S3Config:
    region = os.environ.get("REGION", "").strip()
    bucket = os.environ.get("BUCKET", "").strip()
    prefix = os.environ.get("PREFIX", "").strip()
    access_key_id = os.environ.get("ACCESS_KEY_ID", "").strip()
    access_key_secret = os.environ.get("ACCESS_KEY_SECRET", "").strip()

    if not region:
        raise RuntimeError("REGION is not set")
    if not bucket:
        raise RuntimeError("BUCKET is not set")
    if prefix and not prefix.endswith("/"):
        prefix = prefix + "/"

    return S3Config(
        region=region,
        bucket=bucket,
        prefix=prefix,
        access_key_id=access_key_id,
        access_key_secret=access_key_secret,
    )


def prerender_base_url() -> str:
    return os.environ.get("PRERENDER_BASE_URL", "").strip() or "http://localhost:8080"


def style_prelude(cdn_src: str) -> str:
    """SCSS injected ahead of every stylesheet; `$src` is the image CDN prefix."""
    lines = [f'@import "{path}";' for path in STYLE_PRELUDE_IMPORTS]
    escaped = cdn_src.replace("\\", "\\\\").replace('"', '\\"')
    lines.append(f'$src: "{escaped}";')
    return "\n".join(lines) + "\n"


def declarative_config(options: BuildOptions) -> dict[str, Any]:
    return {
        "public_path": options.public_path,
        "output_dir": options.output_dir,
        "assets_dir": options.assets_dir,
        "externals": dict(EXTERNALS),
        "cdn": {k: list(v) for k, v in CDN.items()},
        "aliases": {k: str(options.resolve(v)) for k, v in ALIASES.items()},
        "production_source_map": not options.is_production,
        "extract_css": options.is_production,
        "style_prelude": style_prelude(options.cdn_src),
    }
