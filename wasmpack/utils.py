"""Helpers shared by the commands: locating crates and package directories."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from typing import Union

PathArg = Union[str, "os.PathLike[str]"]


def get_crate_path(path: PathArg | None = None) -> Path:
    """Use ``path`` if given, otherwise search upwards from the working directory for a crate."""
    if path is not None:
        return Path(path)
    return _find_manifest_from_cwd()


def _find_manifest_from_cwd() -> Path:
    cwd = Path.cwd()
    for candidate in (cwd, *cwd.parents):
        if (candidate / "Cargo.toml").is_file():
            return candidate
    return Path(".")


def create_pkg_dir(out_dir: PathArg) -> None:
    """Create the output directory with a ``.gitignore`` that ignores everything."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    (out / ".gitignore").write_text("*")


def _is_pkg_directory(path: Path) -> bool:
    return path.is_dir() and path.name == "pkg"


def _walk(path: Path) -> Iterator[Path]:
    yield path
    try:
        with os.scandir(path) as entries:
            children = sorted(entries, key=lambda entry: entry.name)
    except OSError:
        return
    for entry in children:
        child = Path(entry.path)
        if entry.is_dir(follow_symlinks=False):
            yield from _walk(child)
        else:
            yield child


def find_pkg_directory(path: PathArg) -> Path | None:
    """Find a ``pkg`` directory at ``path`` or below it, depth first."""
    root = Path(path)
    return next((p for p in _walk(root) if _is_pkg_directory(p)), None)


def elapsed(seconds: float) -> str:
    """Render a duration in seconds for the console."""
    nanos = round(seconds * 1_000_000_000)
    secs, subsec = divmod(nanos, 1_000_000_000)
    if secs >= 60:
        return f"{secs // 60}m {secs % 60:02}s"
    return f"{secs}.{subsec // 10_000_000:02}s"