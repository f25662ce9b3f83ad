from __future__ import annotations


class TransformError(RuntimeError):
    """A fatal build transform failure; carries the transform name."""

    def __init__(self, transform: str, cause: BaseException) -> None:
        super().__init__(f"{transform}: {cause}")
        self.transform = transform
        self.cause = cause
