import pytest

from wasmpack.options import (
    Access,
    BuildProfile,
    InstallMode,
    Target,
    Tool,
    WasmPackError,
    resolve_profile,
)


@pytest.mark.parametrize(
    "flag, expected",
    [
        ("--dev", BuildProfile.DEV),
        ("--debug", BuildProfile.DEV),
        ("--profiling", BuildProfile.PROFILING),
        ("--release", BuildProfile.RELEASE),
    ],
)
def test_build_different_profiles(flag, expected):
    name = flag.lstrip("-")
    assert resolve_profile(**{name: True}) is expected


def test_default_profile_is_release():
    assert resolve_profile() is BuildProfile.RELEASE


@pytest.mark.parametrize(
    "kwargs",
    [
        {"dev": True, "release": True},
        {"debug": True, "profiling": True},
        {"release": True, "profiling": True},
        {"dev": True, "release": True, "profiling": True},
    ],
)
def test_conflicting_profiles_raise(kwargs):
    with pytest.raises(WasmPackError, match="Can only supply one"):
        resolve_profile(**kwargs)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("bundler", Target.BUNDLER),
        ("browser", Target.BUNDLER),
        ("web", Target.WEB),
        ("nodejs", Target.NODEJS),
        ("no-modules", Target.NO_MODULES),
    ],
)
def test_target_parse(text, expected):
    assert Target.parse(text) is expected


def test_target_round_trip():
    for target in Target:
        assert Target.parse(str(target)) is target


def test_unknown_target():
    with pytest.raises(WasmPackError, match="Unknown target: wat"):
        Target.parse("wat")


def test_install_mode_parse_and_permission():
    assert InstallMode.parse("normal").install_permitted() is True
    assert InstallMode.parse("force").install_permitted() is True
    assert InstallMode.parse("no-install").install_permitted() is False


def test_install_mode_unknown():
    with pytest.raises(WasmPackError, match="Unknown build mode: fast"):
        InstallMode.parse("fast")


def test_tool_names():
    assert str(Tool.WASM_BINDGEN) == "wasm-bindgen"
    assert Tool.WASM_BINDGEN.crate_name() == "wasm-bindgen-cli"
    assert Tool.CARGO_GENERATE.crate_name() == "cargo-generate"
    assert str(Tool.WASM_OPT) == "wasm-opt"


def test_access_parse_and_flag():
    assert Access.parse("public").flag() == "--access=public"
    assert Access.parse("restricted") is Access.RESTRICTED
    assert Access.parse("private") is Access.RESTRICTED
    assert str(Access.RESTRICTED) == "--access=restricted"


def test_access_unknown():
    with pytest.raises(WasmPackError, match="not a supported access level"):
        Access.parse("secretive")