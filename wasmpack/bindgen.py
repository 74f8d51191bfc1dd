"""Running the ``wasm-bindgen`` CLI to generate JavaScript bindings."""

from __future__ import annotations

import logging
import os
import re
from typing import Optional, Tuple, Union

from wasmpack.child import run
from wasmpack.install import Status, get_cli_version, get_tool_path
from wasmpack.options import Target, Tool, WasmPackError

log = logging.getLogger(__name__)

PathArg = Union[str, "os.PathLike[str]"]

WEB_TARGET_VERSION = "0.2.39"
DASH_DASH_TARGET_VERSION = "0.2.40"

_SEMVER = re.compile(
    r"^(\d+)\.(\d+)\.(\d+)(?:-([0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$"
)

_LEGACY_TARGET_FLAGS = {
    Target.NODEJS: "--nodejs",
    Target.NO_MODULES: "--no-modules",
    Target.WEB: "--web",
    Target.BUNDLER: "--browser",
}


def _version_key(version: str) -> Tuple:
    match = _SEMVER.match(version.strip())
    if match is None:
        raise WasmPackError(f"invalid version: {version!r}")
    major, minor, patch, pre = match.groups()
    if pre is None:
        pre_key: Tuple = ()
        release = 1
    else:
        pre_key = tuple(
            (0, int(part), "") if part.isdigit() else (1, 0, part)
            for part in pre.split(".")
        )
        release = 0
    return (int(major), int(minor), int(patch), release, pre_key)


def supports_web_target(version: str) -> bool:
    """Whether a wasm-bindgen CLI of ``version`` knows the ``web`` target."""
    return _version_key(version) >= _version_key(WEB_TARGET_VERSION)


def supports_dash_dash_target(version: str) -> bool:
    """Whether a wasm-bindgen CLI of ``version`` takes the ``--target`` flag."""
    return _version_key(version) >= _version_key(DASH_DASH_TARGET_VERSION)


def _build_target_arg_legacy(target: Target, version: str) -> str:
    log.info(
        "Your version of wasm-bindgen is out of date. You should consider updating "
        "your Cargo.toml to a version >= 0.2.40."
    )
    if target is Target.WEB and not supports_web_target(version):
        raise WasmPackError(
            "Your current version of wasm-bindgen does not support the 'web' target. "
            "Please update your project to wasm-bindgen version >= 0.2.39."
        )
    return _LEGACY_TARGET_FLAGS[target]


def build_target_arg(target: Target, version: str) -> str:
    """The target argument to hand a wasm-bindgen CLI of ``version``."""
    if not supports_dash_dash_target(version):
        return _build_target_arg_legacy(target, version)
    return str(target)


def wasm_bindgen_build(
    wasm_path: PathArg,
    install_status: Status,
    out_dir: PathArg,
    out_name: Optional[str],
    disable_dts: bool,
    target: Target,
    debug_js_glue: bool = False,
    demangle_name_section: bool = True,
    keep_debug: bool = False,
) -> None:
    """Run the wasm-bindgen CLI on ``wasm_path``, writing bindings to ``out_dir``."""
    bindgen_path = get_tool_path(install_status, Tool.WASM_BINDGEN).binary(
        str(Tool.WASM_BINDGEN)
    )
    version = get_cli_version(Tool.WASM_BINDGEN, bindgen_path)

    command = [
        str(bindgen_path),
        str(wasm_path),
        "--out-dir",
        str(out_dir),
        "--no-typescript" if disable_dts else "--typescript",
    ]

    target_arg = build_target_arg(target, version)
    if supports_dash_dash_target(version):
        command += ["--target", target_arg]
    else:
        command.append(target_arg)

    if out_name is not None:
        command += ["--out-name", out_name]
    if debug_js_glue:
        command.append("--debug")
    if not demangle_name_section:
        command.append("--no-demangle")
    if keep_debug:
        command.append("--keep-debug")

    try:
        run(command, "wasm-bindgen")
    except (WasmPackError, OSError) as exc:
        raise WasmPackError(f"Running the wasm-bindgen CLI: {exc}") from exc