"""Finding, downloading and installing the tools a build needs."""

from __future__ import annotations

import json
import logging
import os
import platform
import shutil
import sys
import urllib.error
import urllib.request
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from wasmpack import emoji
from wasmpack.cache import EXE_SUFFIX, Cache, Download
from wasmpack.child import run, run_capture_stdout
from wasmpack.options import Tool, WasmPackError

log = logging.getLogger(__name__)

PathArg = Union[str, "os.PathLike[str]"]

WASM_OPT_VERSION = "version_90"


class StatusKind(Enum):
    """Possible outcomes of finding or installing a tool."""

    CANNOT_INSTALL = "cannot-install"
    PLATFORM_NOT_SUPPORTED = "platform-not-supported"
    FOUND = "found"


@dataclass(frozen=True)
class Status:
    """The outcome of finding or installing a tool, with the download when found."""

    kind: StatusKind
    download: Download | None = None

    @classmethod
    def found(cls, download: Download) -> "Status":
        return cls(StatusKind.FOUND, download)


def get_tool_path(status: Status, tool: Tool) -> Download:
    """The download of a found tool; raises for the other outcomes."""
    if status.kind is StatusKind.FOUND and status.download is not None:
        return status.download
    if status.kind is StatusKind.PLATFORM_NOT_SUPPORTED:
        raise WasmPackError(f"{tool} does not currently support your platform.")
    raise WasmPackError(f"Not able to find or install a local {tool}.")


def fetch_max_version(tool: Tool) -> str:
    """The newest version of ``tool`` published on crates.io."""
    url = f"https://crates.io/api/v1/crates/{tool}"
    request = urllib.request.Request(url, headers={"User-Agent": "wasm-pack"})
    try:
        with urllib.request.urlopen(request, timeout=30) as response:
            body = response.read()
    except (urllib.error.URLError, OSError) as exc:
        raise WasmPackError(f"failed to query {url}: {exc}") from exc
    try:
        return json.loads(body)["crate"]["max_version"]
    except (ValueError, KeyError, TypeError) as exc:
        raise WasmPackError(f"unexpected response from {url}: {exc}") from exc


def get_cli_version(tool: Tool, path: PathArg) -> str:
    """The version a tool reports for itself with ``--version``."""
    stdout = run_capture_stdout([str(path), "--version"], tool)
    words = stdout.split()
    if len(words) < 2:
        raise WasmPackError(
            "Something went wrong! We couldn't determine your version of the "
            "wasm-bindgen CLI. We were supposed to set that up for you, so it's "
            "likely not your fault! You should file an issue."
        )
    return words[1]


def check_version(tool: Tool, path: PathArg, expected_version: str) -> bool:
    """Whether the tool at ``path`` has ``expected_version`` (``latest`` asks crates.io)."""
    if expected_version == "latest":
        expected_version = fetch_max_version(tool)
    version = get_cli_version(tool, path)
    log.info(
        "Checking installed `%s` version == expected version: %s == %s",
        tool,
        version,
        expected_version,
    )
    return version == expected_version


def _arch() -> str:
    machine = platform.machine().lower()
    if machine in ("x86_64", "amd64"):
        return "x86_64"
    if machine in ("i386", "i486", "i586", "i686", "x86"):
        return "x86"
    return machine


def _prebuilt_target(tool: Tool) -> str:
    system = platform.system()
    arch = _arch()
    wasm_opt = tool is Tool.WASM_OPT
    if system == "Linux" and arch == "x86_64":
        return "x86-linux" if wasm_opt else "x86_64-unknown-linux-musl"
    if system == "Linux" and arch == "x86" and wasm_opt:
        return "x86-linux"
    if system == "Darwin" and arch == "x86_64":
        return "x86_64-apple-darwin"
    if system == "Windows" and arch == "x86_64":
        return "x86-windows" if wasm_opt else "x86_64-pc-windows-msvc"
    if system == "Windows" and arch == "x86" and wasm_opt:
        return "x86-windows"
    raise WasmPackError("Unrecognized target!")


def prebuilt_url(tool: Tool, version: str) -> str:
    """The URL of a prebuilt archive of ``tool`` for this platform."""
    target = _prebuilt_target(tool)
    if tool is Tool.WASM_BINDGEN:
        return (
            "https://github.com/rustwasm/wasm-bindgen/releases/download/"
            f"{version}/wasm-bindgen-{version}-{target}.tar.gz"
        )
    if tool is Tool.CARGO_GENERATE:
        latest = fetch_max_version(Tool.CARGO_GENERATE)
        return (
            "https://github.com/ashleygwilliams/cargo-generate/releases/download/"
            f"v{latest}/cargo-generate-v{latest}-{target}.tar.gz"
        )
    return (
        "https://github.com/WebAssembly/binaryen/releases/download/"
        f"{WASM_OPT_VERSION}/binaryen-{WASM_OPT_VERSION}-{target}.tar.gz"
    )


_PREBUILT_BINARIES = {
    Tool.WASM_BINDGEN: ("wasm-bindgen", "wasm-bindgen-test-runner"),
    Tool.CARGO_GENERATE: ("cargo-generate",),
    Tool.WASM_OPT: ("wasm-opt",),
}


def download_prebuilt(
    tool: Tool, cache: Cache, version: str, install_permitted: bool
) -> Status:
    """Fetch a prebuilt copy of ``tool`` into ``cache``."""
    try:
        url = prebuilt_url(tool, version)
    except WasmPackError as exc:
        raise WasmPackError(
            f"no prebuilt {tool} binaries are available for this platform: {exc}"
        ) from exc

    download = cache.download(install_permitted, str(tool), _PREBUILT_BINARIES[tool], url)
    if download is not None:
        return Status.found(download)
    if tool is Tool.WASM_OPT:
        return Status(StatusKind.CANNOT_INSTALL)
    raise WasmPackError(f"{tool} v{version} is not installed!")


_CARGO_BINARIES = {
    Tool.WASM_BINDGEN: ("wasm-bindgen", "wasm-bindgen-test-runner"),
    Tool.CARGO_GENERATE: ("cargo-generate",),
}


def cargo_install(
    tool: Tool, cache: Cache, version: str, install_permitted: bool
) -> Status:
    """Install ``tool`` with ``cargo install`` into ``cache``."""
    log.debug("Attempting to use a `cargo install`ed version of `%s=%s`", tool, version)

    dirname = f"{tool}-cargo-install-{version}"
    destination = cache.join(dirname)
    if destination.exists():
        log.debug("`cargo install`ed `%s=%s` already exists at %s", tool, version, destination)
        return Status.found(Download.at(destination))

    if not install_permitted:
        return Status(StatusKind.CANNOT_INSTALL)

    # Install into a temporary directory so an interrupted install leaves no stale files.
    tmp = cache.join(f".{dirname}")
    shutil.rmtree(tmp, ignore_errors=True)
    log.debug("cargo installing %s to tempdir: %s", tool, tmp)
    try:
        tmp.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WasmPackError(
            f"failed to create temp dir for `cargo install {tool}`: {exc}"
        ) from exc

    command = [
        "cargo", "install", "--force", tool.crate_name(),
        "--version", version, "--root", str(tmp),
    ]
    try:
        run(command, "cargo install")
    except (WasmPackError, OSError) as exc:
        raise WasmPackError(f"Installing {tool} with cargo: {exc}") from exc

    if tool not in _CARGO_BINARIES:
        raise WasmPackError("Cannot install wasm-opt with cargo.")

    # `cargo install` puts binaries in `$root/bin`; the rest of the code expects them in `$root`.
    for binary in _CARGO_BINARIES[tool]:
        source = tmp / "bin" / f"{binary}{EXE_SUFFIX}"
        target = tmp / source.name
        try:
            source.rename(target)
        except OSError as exc:
            raise WasmPackError(
                f"failed to move {source} to {target} for `cargo install`ed `{binary}`: {exc}"
            ) from exc

    tmp.rename(destination)
    return Status.found(Download.at(destination))


def download_prebuilt_or_cargo_install(
    tool: Tool, cache: Cache, version: str, install_permitted: bool
) -> Status:
    """Find ``tool``: a matching global install, a prebuilt download, or ``cargo install``."""
    global_path = shutil.which(str(tool))
    if global_path is not None:
        path = Path(global_path)
        log.debug("found global %s binary at: %s", tool, path)
        if check_version(tool, path, version):
            return Status.found(Download.at(path.parent))

    print(f"{emoji.DOWN_ARROW}Installing {tool}...", file=sys.stderr)

    try:
        return download_prebuilt(tool, cache, version, install_permitted)
    except (WasmPackError, OSError) as exc:
        log.warning(
            "could not download pre-built `%s`: %s. Falling back to `cargo install`.",
            tool,
            exc,
        )

    return cargo_install(tool, cache, version, install_permitted)