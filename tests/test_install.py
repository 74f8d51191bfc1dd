import platform
import sys
from pathlib import Path
from unittest import mock

import pytest

from wasmpack.cache import Cache, Download
from wasmpack.install import (
    Status,
    StatusKind,
    cargo_install,
    check_version,
    download_prebuilt,
    download_prebuilt_or_cargo_install,
    fetch_max_version,
    get_cli_version,
    get_tool_path,
    prebuilt_url,
)
from wasmpack.options import Tool, WasmPackError


def _on(system, machine):
    return mock.patch.multiple(
        "platform", system=mock.Mock(return_value=system), machine=mock.Mock(return_value=machine)
    )


def _crates_response(body):
    opener = mock.MagicMock()
    opener.return_value.__enter__.return_value.read.return_value = body
    return mock.patch("urllib.request.urlopen", opener)


def test_get_tool_path_found(tmp_path):
    download = Download.at(tmp_path)
    assert get_tool_path(Status.found(download), Tool.WASM_BINDGEN) == download


def test_get_tool_path_cannot_install():
    with pytest.raises(WasmPackError, match="Not able to find or install a local wasm-bindgen."):
        get_tool_path(Status(StatusKind.CANNOT_INSTALL), Tool.WASM_BINDGEN)


def test_get_tool_path_platform_not_supported():
    with pytest.raises(WasmPackError, match="wasm-opt does not currently support your platform."):
        get_tool_path(Status(StatusKind.PLATFORM_NOT_SUPPORTED), Tool.WASM_OPT)


def test_get_cli_version_reads_second_word():
    assert get_cli_version(Tool.WASM_BINDGEN, sys.executable) == platform.python_version()


def test_check_version_compares():
    assert check_version(Tool.WASM_OPT, sys.executable, platform.python_version()) is True
    assert check_version(Tool.WASM_OPT, sys.executable, "0.0.0") is False


def test_fetch_max_version_reads_crate():
    with _crates_response(b'{"crate": {"max_version": "0.5.0"}}'):
        assert fetch_max_version(Tool.CARGO_GENERATE) == "0.5.0"


def test_fetch_max_version_bad_body_raises():
    with _crates_response(b'{"nothing": 1}'):
        with pytest.raises(WasmPackError, match="unexpected response"):
            fetch_max_version(Tool.CARGO_GENERATE)


def test_prebuilt_url_bindgen_linux():
    with _on("Linux", "x86_64"):
        url = prebuilt_url(Tool.WASM_BINDGEN, "0.2.50")
    assert url == (
        "https://github.com/rustwasm/wasm-bindgen/releases/download/"
        "0.2.50/wasm-bindgen-0.2.50-x86_64-unknown-linux-musl.tar.gz"
    )


def test_prebuilt_url_wasm_opt_windows():
    with _on("Windows", "AMD64"):
        url = prebuilt_url(Tool.WASM_OPT, "ignored")
    assert url.endswith("binaryen-version_90-x86-windows.tar.gz")


def test_prebuilt_url_cargo_generate_uses_latest():
    with _on("Darwin", "x86_64"), _crates_response(b'{"crate": {"max_version": "0.5.0"}}'):
        url = prebuilt_url(Tool.CARGO_GENERATE, "latest")
    assert url.endswith("/v0.5.0/cargo-generate-v0.5.0-x86_64-apple-darwin.tar.gz")


@pytest.mark.parametrize(
    "system,machine,tool",
    [
        ("Linux", "i686", Tool.WASM_BINDGEN),
        ("Windows", "x86", Tool.WASM_BINDGEN),
        ("FreeBSD", "x86_64", Tool.WASM_OPT),
        ("Linux", "aarch64", Tool.WASM_OPT),
    ],
)
def test_prebuilt_url_unrecognized(system, machine, tool):
    with _on(system, machine):
        with pytest.raises(WasmPackError, match="Unrecognized target!"):
            prebuilt_url(tool, "0.2.50")


def test_download_prebuilt_unsupported_platform(tmp_path):
    with _on("Linux", "i686"):
        with pytest.raises(WasmPackError, match="no prebuilt wasm-bindgen binaries are available"):
            download_prebuilt(Tool.WASM_BINDGEN, Cache.at(tmp_path), "0.2.50", True)


def test_download_prebuilt_wasm_opt_not_permitted(tmp_path):
    with _on("Linux", "x86_64"):
        status = download_prebuilt(Tool.WASM_OPT, Cache.at(tmp_path), "0", False)
    assert status.kind is StatusKind.CANNOT_INSTALL


def test_download_prebuilt_bindgen_not_permitted(tmp_path):
    with _on("Linux", "x86_64"):
        with pytest.raises(WasmPackError, match="wasm-bindgen v0.2.50 is not installed!"):
            download_prebuilt(Tool.WASM_BINDGEN, Cache.at(tmp_path), "0.2.50", False)


def test_cargo_install_reuses_existing(tmp_path):
    existing = tmp_path / "wasm-bindgen-cargo-install-0.2.50"
    existing.mkdir()
    status = cargo_install(Tool.WASM_BINDGEN, Cache.at(tmp_path), "0.2.50", False)
    assert status.kind is StatusKind.FOUND
    assert status.download.root == existing


def test_cargo_install_not_permitted(tmp_path):
    status = cargo_install(Tool.WASM_BINDGEN, Cache.at(tmp_path), "0.2.50", False)
    assert status.kind is StatusKind.CANNOT_INSTALL
    assert list(tmp_path.iterdir()) == []


def test_fallback_to_cargo_install_when_not_permitted(tmp_path):
    with mock.patch("shutil.which", return_value=None), _on("Linux", "x86_64"):
        status = download_prebuilt_or_cargo_install(
            Tool.WASM_BINDGEN, Cache.at(tmp_path), "0.2.50", False
        )
    assert status.kind is StatusKind.CANNOT_INSTALL


def test_global_tool_with_right_version_is_used(tmp_path):
    with mock.patch("shutil.which", return_value=sys.executable):
        status = download_prebuilt_or_cargo_install(
            Tool.WASM_OPT, Cache.at(tmp_path), platform.python_version(), False
        )
    assert status.kind is StatusKind.FOUND
    assert status.download.root == Path(sys.executable).parent