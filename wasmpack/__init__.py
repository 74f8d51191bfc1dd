"""Options, command parsing, tool installation and wasm-bindgen helpers for WebAssembly npm packages."""

__version__ = "0.9.1"