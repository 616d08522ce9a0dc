from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import ForbiddenPathError

__all__ = [
    "ResolvedPath",
    "canonical_root",
    "resolve_path",
]


@dataclass(frozen=True)
class ResolvedPath:
    """A canonical filesystem path known to lie inside `root`.

    Only `resolve_path` should build these; holding one means the
    confinement check already passed.
    """

    path: Path
    root: Path

    @property
    def is_root(self) -> bool:
        return self.path == self.root

    @property
    def relative(self) -> str:
        """POSIX-style path relative to the root ("" for the root itself)."""
        rel = self.path.relative_to(self.root).as_posix()
        return "" if rel == "." else rel

    def __fspath__(self) -> str:
        return str(self.path)


def canonical_root(root: str | Path) -> Path:
    """Return the absolute, symlink-free form of a root directory.

    Raises:
        ValueError: if the directory does not exist or is not a directory.
    """
    try:
        resolved = Path(root).expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise ValueError(f"root directory does not exist: {root}") from e
    if not resolved.is_dir():
        raise ValueError(f"root path is not a directory: {resolved}")
    return resolved


def resolve_path(root: Path, request_path: str) -> ResolvedPath:
    """Map an untrusted URL path onto a file below `root`.

    Rules:
    - Leading slashes are dropped so the path is always joined onto the root.
    - The joined path is canonicalized: `.`, `..` and symlinks are resolved.
    - The result must be `root` or lie below it, compared segment by segment
      so `/media-private` never passes for `/media`.
    - Nonexistent targets still resolve; existence is the caller's concern.

    Raises:
        ForbiddenPathError: on any escape or resolution failure (fails closed).
    """
    rel = request_path.lstrip("/")
    try:
        candidate = (root / rel).resolve(strict=False)
    except (OSError, RuntimeError, ValueError) as e:
        # Symlink loops, NUL bytes, over-long names
        raise ForbiddenPathError(f"cannot resolve {request_path!r}") from e

    if not candidate.is_relative_to(root):
        raise ForbiddenPathError(f"{request_path!r} escapes the media root")
    return ResolvedPath(path=candidate, root=root)
