"""The binary cache where downloaded and installed tools are kept."""

from __future__ import annotations

import hashlib
import io
import logging
import os
import shutil
import sys
import tarfile
import urllib.error
import urllib.request
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Tuple, Union

import platformdirs

from wasmpack.options import WasmPackError

log = logging.getLogger(__name__)

PathArg = Union[str, "os.PathLike[str]"]

EXE_SUFFIX = ".exe" if sys.platform.startswith("win") else ""


@dataclass(frozen=True)
class Download:
    """A directory holding the binaries of a downloaded or installed tool."""

    root: Path

    @classmethod
    def at(cls, path: PathArg) -> "Download":
        """A download that lives at ``path``."""
        return cls(Path(path))

    def binary(self, name: str) -> Path:
        """The path of the binary ``name``; raises if it is not there."""
        path = self.root / f"{name}{EXE_SUFFIX}"
        if not path.is_file():
            raise WasmPackError(f"{path} binary does not exist")
        return path


def _binary_stem(filename: str) -> str:
    if filename.lower().endswith(".exe"):
        return filename[: -len(".exe")]
    return filename


def _tar_members(data: bytes) -> Iterator[Tuple[str, bytes]]:
    with tarfile.open(fileobj=io.BytesIO(data), mode="r:*") as archive:
        for member in archive:
            if not member.isfile():
                continue
            handle = archive.extractfile(member)
            if handle is None:
                continue
            yield Path(member.name).name, handle.read()


def _zip_members(data: bytes) -> Iterator[Tuple[str, bytes]]:
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            yield Path(info.filename).name, archive.read(info)


@dataclass(frozen=True)
class Cache:
    """A directory of downloaded tools, one subdirectory per download."""

    root: Path

    @classmethod
    def at(cls, path: PathArg) -> "Cache":
        """A cache kept in ``path``."""
        return cls(Path(path))

    @classmethod
    def new(cls, name: str) -> "Cache":
        """A cache in the user's cache directory for application ``name``."""
        return cls(Path(platformdirs.user_cache_dir(name)))

    def join(self, name: PathArg) -> Path:
        """The path of ``name`` inside the cache."""
        return self.root / name

    @staticmethod
    def _dirname(name: str, url: str) -> str:
        digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]
        return f"{name}-{digest}"

    def download(
        self,
        install_permitted: bool,
        name: str,
        binaries: Iterable[str],
        url: str,
    ) -> Download | None:
        """Fetch the archive at ``url`` and keep ``binaries`` from it.

        Returns the cached download if it is already there, and ``None`` when
        it is missing and installing is not permitted.
        """
        wanted = set(binaries)
        dirname = self._dirname(name, url)
        destination = self.join(dirname)
        if destination.exists():
            return Download.at(destination)
        if not install_permitted:
            return None

        log.info("Downloading %s", url)
        data = self._fetch(url)

        tmp = self.join(f".{dirname}")
        shutil.rmtree(tmp, ignore_errors=True)
        tmp.mkdir(parents=True, exist_ok=True)
        try:
            members = _zip_members(data) if url.endswith(".zip") else _tar_members(data)
            found = set()
            for filename, content in members:
                stem = _binary_stem(filename)
                if stem not in wanted:
                    continue
                target = tmp / filename
                target.write_bytes(content)
                target.chmod(0o755)
                found.add(stem)
        except (tarfile.TarError, zipfile.BadZipFile) as exc:
            shutil.rmtree(tmp, ignore_errors=True)
            raise WasmPackError(f"failed to extract the archive from {url}: {exc}") from exc

        missing = sorted(wanted - found)
        if missing:
            shutil.rmtree(tmp, ignore_errors=True)
            raise WasmPackError(
                f"the archive at {url} does not contain: {', '.join(missing)}"
            )
        tmp.rename(destination)
        return Download.at(destination)

    @staticmethod
    def _fetch(url: str) -> bytes:
        request = urllib.request.Request(url, headers={"User-Agent": "wasm-pack"})
        try:
            with urllib.request.urlopen(request, timeout=60) as response:
                return response.read()
        except (urllib.error.URLError, OSError, ValueError) as exc:
            raise WasmPackError(f"failed to download from {url}: {exc}") from exc


def get_wasm_pack_cache() -> Cache:
    """The binary cache: ``$WASM_PACK_CACHE`` if set, else the user cache directory."""
    path = os.environ.get("WASM_PACK_CACHE")
    if path is not None:
        return Cache.at(path)
    return Cache.new("wasm-pack")