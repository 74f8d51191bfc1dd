"""The ordered steps that the build and test commands run."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from wasmpack.options import InstallMode, WasmPackError

log = logging.getLogger(__name__)

PathArg = Union[str, "os.PathLike[str]"]

_BUILD_CHECKS = [
    "step_check_rustc_version",
    "step_check_crate_config",
    "step_check_for_wasm_target",
]

_BUILD_STEPS = [
    "step_build_wasm",
    "step_create_dir",
    "step_copy_readme",
    "step_copy_license",
    "step_install_wasm_bindgen",
    "step_run_wasm_bindgen",
    "step_run_wasm_opt",
    "step_create_json",
]

_TEST_CHECKS = {
    InstallMode.NORMAL: ["step_check_rustc_version", "step_check_for_wasm_target"],
    InstallMode.FORCE: ["step_check_for_wasm_target"],
    InstallMode.NOINSTALL: [],
}


def build_step_names(mode: InstallMode) -> List[str]:
    """The steps ``build`` runs in ``mode``; ``force`` skips the checks."""
    checks = [] if mode is InstallMode.FORCE else _BUILD_CHECKS
    return [*checks, *_BUILD_STEPS]


@dataclass
class TestOptions:
    """Everything that configures the ``test`` command."""

    __test__ = False

    path: Optional[Path] = None
    node: bool = False
    firefox: bool = False
    geckodriver: Optional[Path] = None
    chrome: bool = False
    chromedriver: Optional[Path] = None
    safari: bool = False
    safaridriver: Optional[Path] = None
    headless: bool = False
    mode: InstallMode = InstallMode.NORMAL
    release: bool = False
    extra_options: List[str] = field(default_factory=list)

    @property
    def any_browser(self) -> bool:
        return self.chrome or self.firefox or self.safari

    def validate(self) -> None:
        """Raise if the chosen flags make no sense together."""
        if not self.node and not self.any_browser:
            raise WasmPackError(
                "Must specify at least one of `--node`, `--chrome`, `--firefox`, or `--safari`"
            )
        if self.headless and not self.any_browser:
            raise WasmPackError(
                "The `--headless` flag only applies to browser tests. Node does not "
                "provide a UI, so it doesn't make sense to talk about a headless "
                "version of Node tests."
            )


def test_step_names(options: TestOptions) -> List[str]:
    """The steps ``test`` runs for ``options``."""
    steps = [*_TEST_CHECKS[options.mode], "step_build_tests", "step_install_wasm_bindgen"]
    if options.node:
        steps.append("step_test_node")
    browsers = [
        (options.chrome, options.chromedriver, "step_get_chromedriver", "step_test_chrome"),
        (options.firefox, options.geckodriver, "step_get_geckodriver", "step_test_firefox"),
        (options.safari, options.safaridriver, "step_get_safaridriver", "step_test_safari"),
    ]
    for enabled, driver, get_step, test_step in browsers:
        if not enabled:
            continue
        if driver is None:
            steps.append(get_step)
        steps.append(test_step)
    return steps


test_step_names.__test__ = False  # type: ignore[attr-defined]


def webdriver_env(test_runner: PathArg, headless: bool) -> Dict[str, str]:
    """Environment for running the tests in a browser through the test runner."""
    runner = str(test_runner)
    log.info("Using wasm-bindgen test runner at %s", runner)
    env = {
        "CARGO_TARGET_WASM32_UNKNOWN_UNKNOWN_RUNNER": runner,
        "WASM_BINDGEN_TEST_ONLY_WEB": "1",
    }
    if not headless:
        env["NO_HEADLESS"] = "1"
    return env