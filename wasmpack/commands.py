"""Command-line parsing for the build, pack, new, publish, login and test commands."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from wasmpack.options import (
    Access,
    BuildProfile,
    InstallMode,
    Target,
    WasmPackError,
    resolve_profile,
)
from wasmpack.steps import TestOptions

DEFAULT_TEMPLATE = "https://github.com/rustwasm/wasm-pack-template"


@dataclass
class BuildOptions:
    """Everything that configures the ``build`` command."""

    path: Optional[Path] = None
    scope: Optional[str] = None
    mode: InstallMode = InstallMode.NORMAL
    disable_dts: bool = False
    target: Target = Target.BUNDLER
    debug: bool = False
    dev: bool = False
    release: bool = False
    profiling: bool = False
    out_dir: str = "pkg"
    out_name: Optional[str] = None
    extra_options: List[str] = field(default_factory=list)

    @property
    def profile(self) -> BuildProfile:
        """The build profile the flags select; raises if they conflict."""
        return resolve_profile(
            dev=self.dev, release=self.release, profiling=self.profiling, debug=self.debug
        )


@dataclass
class PackCommand:
    """Create a tarball of the npm package without publishing it."""

    path: Optional[Path] = None


@dataclass
class GenerateCommand:
    """Create a new project from a template."""

    name: str
    template: str = DEFAULT_TEMPLATE
    mode: InstallMode = InstallMode.NORMAL


@dataclass
class PublishCommand:
    """Pack up the npm package and publish it."""

    target: str = "bundler"
    access: Optional[Access] = None
    tag: Optional[str] = None
    path: Optional[Path] = None


@dataclass
class LoginCommand:
    """Add an npm registry user account."""

    registry: Optional[str] = None
    scope: Optional[str] = None
    always_auth: bool = False
    auth_type: Optional[str] = None


@dataclass
class TestCommand:
    """Run the crate's tests compiled to wasm."""

    __test__ = False

    options: TestOptions = field(default_factory=TestOptions)


Command = Union[
    BuildOptions, PackCommand, GenerateCommand, PublishCommand, LoginCommand, TestCommand
]


class _Parser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise WasmPackError(message)


def _add_mode(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mode", "-m", type=InstallMode.parse, default=InstallMode.NORMAL,
        help="Sets steps to be run. [possible values: no-install, normal, force]",
    )


def _parser() -> _Parser:
    parser = _Parser(prog="wasm-pack", description="your favorite rust -> wasm workflow tool!")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", aliases=["init"], help="build your npm package!")
    build.add_argument("path", nargs="?", type=Path)
    build.add_argument("--scope", "-s")
    _add_mode(build)
    build.add_argument("--no-typescript", dest="disable_dts", action="store_true")
    build.add_argument("--target", "-t", type=Target.parse, default=Target.BUNDLER)
    build.add_argument("--debug", action="store_true")
    build.add_argument("--dev", action="store_true")
    build.add_argument("--release", action="store_true")
    build.add_argument("--profiling", action="store_true")
    build.add_argument("--out-dir", "-d", default="pkg")
    build.add_argument("--out-name")

    pack = sub.add_parser("pack", help="create a tar of your npm package but don't publish!")
    pack.add_argument("path", nargs="?", type=Path)

    new = sub.add_parser("new", help="create a new project with a template")
    new.add_argument("name")
    new.add_argument("--template", "-temp", default=DEFAULT_TEMPLATE)
    _add_mode(new)

    publish = sub.add_parser("publish", help="pack up your npm package and publish!")
    publish.add_argument("--target", "-t", default="bundler")
    publish.add_argument("--access", "-a", type=Access.parse)
    publish.add_argument("--tag")
    publish.add_argument("path", nargs="?", type=Path)

    login = sub.add_parser(
        "login", aliases=["adduser", "add-user"], help="Add an npm registry user account!"
    )
    login.add_argument("--registry", "-r")
    login.add_argument("--scope", "-s")
    login.add_argument("--always-auth", "-a", action="store_true")
    login.add_argument("--auth-type", "-t")

    test = sub.add_parser("test", help="test your wasm!")
    test.add_argument("path", nargs="?", type=Path)
    test.add_argument("--node", action="store_true")
    test.add_argument("--firefox", action="store_true")
    test.add_argument("--geckodriver", type=Path)
    test.add_argument("--chrome", action="store_true")
    test.add_argument("--chromedriver", type=Path)
    test.add_argument("--safari", action="store_true")
    test.add_argument("--safaridriver", type=Path)
    test.add_argument("--headless", action="store_true")
    _add_mode(test)
    test.add_argument("--release", "-r", action="store_true")
    return parser


def parse_command(argv: Sequence[str]) -> Command:
    """Parse command-line arguments (without the program name) into a command."""
    args_list = list(argv)
    extra: List[str] = []
    if "--" in args_list:
        split = args_list.index("--")
        args_list, extra = args_list[:split], args_list[split + 1 :]

    args = _parser().parse_args(args_list)
    command = args.command

    if command in ("build", "init"):
        return BuildOptions(
            path=args.path,
            scope=args.scope,
            mode=args.mode,
            disable_dts=args.disable_dts,
            target=args.target,
            debug=args.debug,
            dev=args.dev,
            release=args.release,
            profiling=args.profiling,
            out_dir=args.out_dir,
            out_name=args.out_name,
            extra_options=extra,
        )
    if command == "test":
        return TestCommand(
            TestOptions(
                path=args.path,
                node=args.node,
                firefox=args.firefox,
                geckodriver=args.geckodriver,
                chrome=args.chrome,
                chromedriver=args.chromedriver,
                safari=args.safari,
                safaridriver=args.safaridriver,
                headless=args.headless,
                mode=args.mode,
                release=args.release,
                extra_options=extra,
            )
        )

    if extra:
        raise WasmPackError(f"unexpected arguments: {' '.join(extra)}")
    if command == "pack":
        return PackCommand(path=args.path)
    if command == "new":
        return GenerateCommand(name=args.name, template=args.template, mode=args.mode)
    if command == "publish":
        return PublishCommand(
            target=args.target, access=args.access, tag=args.tag, path=args.path
        )
    return LoginCommand(
        registry=args.registry,
        scope=args.scope,
        always_auth=args.always_auth,
        auth_type=args.auth_type,
    )