"""Option values shared by the commands: install modes, tools, targets and profiles."""

from __future__ import annotations

from enum import Enum


class WasmPackError(Exception):
    """Raised when a command cannot do what it was asked to do."""


class InstallMode(Enum):
    """Which install steps a command performs."""

    NORMAL = "normal"
    NOINSTALL = "no-install"
    FORCE = "force"

    @classmethod
    def parse(cls, value: str) -> "InstallMode":
        """Parse a ``--mode`` value."""
        try:
            return cls(value)
        except ValueError:
            raise WasmPackError(f"Unknown build mode: {value}") from None

    def install_permitted(self) -> bool:
        """Whether tools may be downloaded or installed in this mode."""
        return self is not InstallMode.NOINSTALL

    def __str__(self) -> str:
        return self.value


class Tool(Enum):
    """The command-line tools the build relies on."""

    CARGO_GENERATE = "cargo-generate"
    WASM_BINDGEN = "wasm-bindgen"
    WASM_OPT = "wasm-opt"

    def crate_name(self) -> str:
        """The name of the crate that provides this tool."""
        if self is Tool.WASM_BINDGEN:
            return "wasm-bindgen-cli"
        return self.value

    def __str__(self) -> str:
        return self.value


class Access(Enum):
    """Access level of a package published to the registry."""

    PUBLIC = "public"
    RESTRICTED = "restricted"

    @classmethod
    def parse(cls, value: str) -> "Access":
        """Parse an ``--access`` value; ``private`` means restricted."""
        if value == "private":
            return cls.RESTRICTED
        try:
            return cls(value)
        except ValueError:
            raise WasmPackError(
                f"{value} is not a supported access level. See "
                "https://docs.npmjs.com/cli/access for more information on npm "
                "package access levels."
            ) from None

    def flag(self) -> str:
        """The flag passed on to ``npm publish``."""
        return f"--access={self.value}"

    def __str__(self) -> str:
        return self.flag()


class Target(Enum):
    """The JavaScript environment the generated bindings are meant for."""

    BUNDLER = "bundler"
    WEB = "web"
    NODEJS = "nodejs"
    NO_MODULES = "no-modules"

    @classmethod
    def parse(cls, value: str) -> "Target":
        """Parse a ``--target`` value; ``browser`` is an alias of bundler."""
        if value == "browser":
            return cls.BUNDLER
        try:
            return cls(value)
        except ValueError:
            raise WasmPackError(f"Unknown target: {value}") from None

    def __str__(self) -> str:
        return self.value


class BuildProfile(Enum):
    """Whether optimizations, debug info and assertions are enabled."""

    DEV = "dev"
    RELEASE = "release"
    PROFILING = "profiling"

    def __str__(self) -> str:
        return self.value


def resolve_profile(
    dev: bool = False,
    release: bool = False,
    profiling: bool = False,
    debug: bool = False,
) -> BuildProfile:
    """Pick the build profile from the profile flags; ``debug`` is an alias of ``dev``."""
    dev = dev or debug
    if dev and not release and not profiling:
        return BuildProfile.DEV
    if profiling and not dev and not release:
        return BuildProfile.PROFILING
    if not dev and not profiling:
        return BuildProfile.RELEASE
    raise WasmPackError("Can only supply one of the --dev, --release, or --profiling flags")