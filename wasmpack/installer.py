"""Assemble the installer web page with the current version filled in."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Union
import os

from wasmpack.options import WasmPackError

PathArg = Union[str, "os.PathLike[str]"]


def _manifest_version(manifest_text: str) -> str:
    line = next(
        (line for line in manifest_text.splitlines() if line.startswith("version =")),
        None,
    )
    if line is None:
        raise WasmPackError("no version line found in the manifest")
    first, last = line.find('"'), line.rfind('"')
    if first == -1 or last <= first:
        raise WasmPackError(f"malformed version line in the manifest: {line}")
    return line[first + 1 : last]


def fixup(text: str, manifest_text: str) -> str:
    """Replace ``$VERSION`` in ``text`` with the manifest's version, prefixed by ``v``."""
    version = _manifest_version(manifest_text)
    return text.replace("$VERSION", f"v{version}")


def build_installer(root: PathArg = ".") -> Path:
    """Build ``docs/installer`` from ``docs/_installer`` under ``root``; return the output directory."""
    base = Path(root)
    source = base / "docs" / "_installer"
    target = base / "docs" / "installer"
    manifest_text = (base / "Cargo.toml").read_text()

    target.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source / "wasm-pack.js", target / "wasm-pack.js")
    for name in ("index.html", "init.sh"):
        text = (source / name).read_text()
        (target / name).write_text(fixup(text, manifest_text))
    return target