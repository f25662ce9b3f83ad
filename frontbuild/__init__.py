"""Front-end asset build: environment-gated transforms and an incremental sprite sheet."""

from .assembler import TransformDescriptor, assemble_pipeline
from .config import BuildOptions, options_from_env
from .context import BuildContext
from .errors import TransformError
from .runner import build, plan_build, run_pipeline

__all__ = [
    "BuildContext",
    "BuildOptions",
    "TransformDescriptor",
    "TransformError",
    "assemble_pipeline",
    "build",
    "options_from_env",
    "plan_build",
    "run_pipeline",
]
