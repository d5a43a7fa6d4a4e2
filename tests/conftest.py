"""
Shared pytest fixtures for pfhooks tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing
import unittest.mock as _mock

import click.testing as _click_testing
import pytest as _pytest
import yaml as _yaml

import pfhooks.flags.engine as engine

# Environment variables with this prefix are cleared for isolated tests
ENV_PREFIX = "PFHOOKS_"

# =============================================================================
# Sample declarations
# =============================================================================

SAMPLE_PACKAGE_NAMESPACES = [
    "com.example.app=.flags,shared_ns,app_prefs",
    "com.example.other=.config",
]

SAMPLE_FLAGS_OVERRIDE = [
    "com.example.app.flags/enable_feature/bool=true",
    "com.example.app.flags/max_items/int=42",
    "shared_ns/max_items/int=7",
    "com.example.other.config/ratio/float=0.5",
    "app_prefs/flagX/bool=true",
    "app_prefs/label/string=hello",
    "gservices/settings_foo/string=bar",
    "gservices/settings_bar/int=3",
    "gservices/other_baz/bool=false",
]


def write_declarations(
    path: _pathlib.Path,
    package_namespaces: list[str] | None = None,
    flags_override: list[str] | None = None,
) -> _pathlib.Path:
    """Write a declarations YAML file and return its path."""
    path.write_text(
        _yaml.safe_dump(
            {
                "package_namespaces": package_namespaces or [],
                "flags_override": flags_override or [],
            }
        ),
        encoding="utf-8",
    )
    return path


@_pytest.fixture
def clean_env() -> dict[str, str]:
    """
    Return environment dict with pfhooks keys removed.

    Use with mock.patch.dict to isolate tests from the actual environment.
    """
    return {k: v for k, v in _os.environ.items() if not k.startswith(ENV_PREFIX)}


@_pytest.fixture
def isolated_env(clean_env: dict[str, str]):
    """
    Context manager that isolates tests from environment variables.

    Usage:
        def test_something(isolated_env):
            with isolated_env:
                settings = config.Settings.construct_without_dotenv()
    """
    return _mock.patch.dict(_os.environ, clean_env, clear=True)


@_pytest.fixture
def config_files(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> dict[str, _pathlib.Path]:
    """
    Global and device declaration files wired up through environment variables.

    The global file holds the sample namespace declarations and all but the
    last sample override; the device file holds the last one.
    """
    for key in list(_os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)

    global_path = write_declarations(
        tmp_path / "global.yaml",
        SAMPLE_PACKAGE_NAMESPACES,
        SAMPLE_FLAGS_OVERRIDE[:-1],
    )
    device_path = write_declarations(
        tmp_path / "device.yaml",
        flags_override=SAMPLE_FLAGS_OVERRIDE[-1:],
    )
    monkeypatch.setenv("PFHOOKS_GLOBAL_CONFIG", str(global_path))
    monkeypatch.setenv("PFHOOKS_DEVICE_CONFIG", str(device_path))
    monkeypatch.setenv("PFHOOKS_CONFIG_DIR", str(tmp_path / "config"))
    return {"global": global_path, "device": device_path}


@_pytest.fixture
def declarations() -> engine.StaticDeclarations:
    """In-memory declarations with the sample namespaces and overrides."""
    return engine.StaticDeclarations(SAMPLE_PACKAGE_NAMESPACES, SAMPLE_FLAGS_OVERRIDE)


@_pytest.fixture
def merge_engine(declarations: engine.StaticDeclarations) -> engine.MergeEngine:
    """Enabled merge engine over the sample declarations."""
    return engine.MergeEngine(declarations)


@_pytest.fixture
def make_engine() -> _typing.Callable[..., engine.MergeEngine]:
    """Factory for engines over ad-hoc declarations."""

    def _make(
        package_namespaces: list[str] | None = None,
        flags_override: list[str] | None = None,
        *,
        enabled: bool = True,
    ) -> engine.MergeEngine:
        return engine.MergeEngine(
            engine.StaticDeclarations(package_namespaces or [], flags_override or []),
            enabled=enabled,
        )

    return _make


@_pytest.fixture
def cli_runner() -> _click_testing.CliRunner:
    """CLI runner for command tests."""
    return _click_testing.CliRunner()
