"""Creating a new project from a template with ``cargo-generate``."""

from __future__ import annotations

import logging
import sys

from wasmpack import emoji
from wasmpack.cache import get_wasm_pack_cache
from wasmpack.child import run
from wasmpack.install import Status, download_prebuilt_or_cargo_install, get_tool_path
from wasmpack.options import Tool, WasmPackError

log = logging.getLogger(__name__)


def generate(template: str, name: str, install_status: Status) -> None:
    """Run ``cargo generate`` in the working directory to create project ``name``."""
    bin_path = get_tool_path(install_status, Tool.CARGO_GENERATE).binary(
        str(Tool.CARGO_GENERATE)
    )
    command = [str(bin_path), "generate", "--git", template, "--name", name]

    print(f"{emoji.SHEEP} Generating a new rustwasm project with name '{name}'...")
    try:
        run(command, "cargo-generate")
    except (WasmPackError, OSError) as exc:
        raise WasmPackError(f"Running cargo-generate: {exc}") from exc


def generate_project(template: str, name: str, install_permitted: bool) -> None:
    """Find or install ``cargo-generate`` and create project ``name`` from ``template``."""
    log.info("Generating a new rustwasm project...")
    status = download_prebuilt_or_cargo_install(
        Tool.CARGO_GENERATE, get_wasm_pack_cache(), "latest", install_permitted
    )
    generate(template, name, status)
    print(f"🐑 Generated new project at /{name}", file=sys.stderr)