# wasmpack

A library of building blocks for turning a WebAssembly crate into a
package ready for npm. It parses the options of the `build`, `pack`,
`new`, `publish`, `login` and `test` commands, works out which steps a
build or test run takes, finds or installs the external tools involved
(`wasm-bindgen`, `wasm-opt`, `cargo-generate`) in a local binary cache,
and runs `wasm-bindgen` and `cargo-generate` with the right arguments.

## Modules

- `wasmpack.options`: `InstallMode`, `Tool`, `Access`, `Target`,
  `BuildProfile`, `resolve_profile` and the `WasmPackError` exception
  raised throughout the package.
- `wasmpack.commands`: `parse_command(argv)` turns an argument list
  (without the program name) into a `BuildOptions`, `PackCommand`,
  `GenerateCommand`, `PublishCommand`, `LoginCommand` or `TestCommand`.
  Arguments after `--` become `extra_options` of `build` and `test`.
- `wasmpack.steps`: `build_step_names(mode)`, `test_step_names(options)`,
  the `TestOptions` dataclass with `validate()`, and `webdriver_env`.
- `wasmpack.cache`: `Cache` and `Download`, and `get_wasm_pack_cache()`.
- `wasmpack.install`: `Status`, `StatusKind`, `get_tool_path`,
  `get_cli_version`, `check_version`, `prebuilt_url`,
  `download_prebuilt`, `cargo_install` and
  `download_prebuilt_or_cargo_install`, which first looks for a tool on
  `PATH` with the expected version, then tries a prebuilt archive, then
  falls back to `cargo install`.
- `wasmpack.bindgen`: `wasm_bindgen_build` runs the `wasm-bindgen` CLI;
  `build_target_arg`, `supports_web_target` and
  `supports_dash_dash_target` pick the target argument for the installed
  version (`--target` from 0.2.40, legacy flags before, `web` only from
  0.2.39).
- `wasmpack.generate`: `generate` and `generate_project` create a new
  project from a template with `cargo-generate`.
- `wasmpack.utils`: `get_crate_path`, `create_pkg_dir`,
  `find_pkg_directory` and `elapsed`.
- `wasmpack.child`: `new_command`, `run` and `run_capture_stdout` run
  child processes and raise `WasmPackError` when they fail.
- `wasmpack.emoji`: the `Emoji` values used in console messages.
- `wasmpack.installer`: `fixup` and `build_installer` fill in `$VERSION`
  in the installer page files under `docs/_installer`, writing them to
  `docs/installer`.

## Examples

Parsing options:

```python
from wasmpack.options import Access, InstallMode, Target, resolve_profile

Target.parse("browser")                              # Target.BUNDLER
InstallMode.parse("no-install").install_permitted()  # False
Access.parse("private").flag()                       # "--access=restricted"
resolve_profile(dev=True)                            # BuildProfile.DEV
```

Asking for more than one of dev, release or profiling raises
`WasmPackError`, as does an unknown target, mode or access level.

Reading a command line:

```python
from wasmpack.commands import parse_command

command = parse_command(["build", "--target", "web", "--out-dir", "dist"])
command.profile   # BuildProfile.RELEASE
```

Listing what a build would do:

```python
from wasmpack.options import InstallMode
from wasmpack.steps import build_step_names

build_step_names(InstallMode.parse("force"))   # the checks are skipped
```

Locating the output directory and formatting durations:

```python
from wasmpack.utils import elapsed, find_pkg_directory

find_pkg_directory("path/to/crate")   # a directory named "pkg", or None
elapsed(75)                            # "1m 15s"
```

## The binary cache

Downloaded and installed tools are kept in a per-user cache directory.
Set the `WASM_PACK_CACHE` environment variable to use a different
location; `wasmpack.cache.get_wasm_pack_cache()` returns the cache in use.

## What it does not do

- There is no console command. `parse_command` only parses arguments;
  nothing dispatches the parsed command.
- `build_step_names` and `test_step_names` return step names only. The
  package does not compile the crate with cargo, check the rustc version
  or the wasm32 target, read `Cargo.toml` or `Cargo.lock`, copy the
  readme or licence files, run `wasm-opt`, or write `package.json`.
- It does not run `npm` for packing, publishing or logging in, and does
  not fetch browser WebDriver clients for tests.

## Running the tests

Install the `test` extra and run `pytest` from the project root.