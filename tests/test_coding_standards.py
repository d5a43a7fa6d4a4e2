"""
Tests that enforce coding standards.

These tests verify that the codebase follows our import and logging
conventions:

- no 'from X import Y' outside __init__.py re-exports
- third-party and stdlib modules imported as 'import x.y as _y'
- pfhooks modules imported under their own public name
- one module logger per module that logs
"""

import pathlib as _pathlib
import re as _re

import pytest as _pytest

SRC_DIR = _pathlib.Path(__file__).parent.parent / "src" / "pfhooks"
TESTS_DIR = _pathlib.Path(__file__).parent.parent / "tests"

INTERNAL_PACKAGES = ("pfhooks", "tests")
LOGGER_DEFINITION = "_logger = _logging.getLogger(__name__)"

_IMPORT_AS = _re.compile(r"import (?P<module>[\w.]+)(?: as (?P<alias>\w+))?$")


def _get_python_files(*directories: _pathlib.Path) -> list[_pathlib.Path]:
    """Get all Python files in the given directories, recursively."""
    return [path for directory in directories for path in directory.rglob("*.py")]


def _is_internal(module: str) -> bool:
    return module.split(".")[0] in INTERNAL_PACKAGES


def _extract_from_imports(content: str) -> list[tuple[int, str]]:
    """
    Extract 'from X import Y' statements from file content.

    Returns list of (line_number, line_content) tuples.
    'from __future__ import' is allowed.
    """
    imports: list[tuple[int, str]] = []
    for i, line in enumerate(content.split("\n"), start=1):
        stripped = line.strip()
        if not stripped.startswith("from ") or " import " not in stripped:
            continue
        if stripped.startswith("from __future__ import"):
            continue
        imports.append((i, stripped))
    return imports


def _check_import_aliases(content: str) -> list[tuple[int, str]]:
    """
    Check plain 'import' statements against the aliasing convention.

    External modules need a private alias ('import yaml as _yaml');
    pfhooks modules keep a public one ('import pfhooks.flags.engine as engine').
    """
    violations: list[tuple[int, str]] = []
    for i, line in enumerate(content.split("\n"), start=1):
        match = _IMPORT_AS.fullmatch(line.strip())
        if match is None:
            continue
        module, alias = match.group("module"), match.group("alias")
        if _is_internal(module):
            if alias is not None and alias.startswith("_"):
                violations.append((i, line.strip()))
        elif alias is None or not alias.startswith("_"):
            violations.append((i, line.strip()))
    return violations


def _check_file_imports(path: _pathlib.Path) -> list[str]:
    """Return import violation messages for one file."""
    content = path.read_text()
    found = _check_import_aliases(content)
    # __init__.py files may re-export with 'from X import Y'
    if path.name != "__init__.py":
        found.extend(_extract_from_imports(content))
    return [f"{path}:{line_num}: {line}" for line_num, line in sorted(found)]


def _check_logger_definition(path: _pathlib.Path) -> list[str]:
    """
    Check that a module logging through _logger defines it per module.

    Returns list of violation messages.
    """
    content = path.read_text()
    if "_logger." not in content or LOGGER_DEFINITION in content:
        return []
    return [f"{path}: uses _logger without '{LOGGER_DEFINITION}'"]


class TestImportStyle:
    """Tests for import style compliance."""

    def test_no_import_violations(self) -> None:
        violations: list[str] = []
        for path in _get_python_files(SRC_DIR, TESTS_DIR):
            if path.name == "test_coding_standards.py":
                continue
            violations.extend(_check_file_imports(path))

        if violations:
            msg = "Found imports that break the convention:\n"
            msg += "\n".join(f"  {v}" for v in violations)
            msg += "\n\nUse 'import X as _x' (external) or 'import pfhooks.x as x' (internal)."
            _pytest.fail(msg)


class TestImportChecks:
    """Tests for the import checks themselves."""

    def test_detects_from_import(self) -> None:
        imports = _extract_from_imports("from pathlib import Path")
        assert imports == [(1, "from pathlib import Path")]

    def test_detects_indented_from_import(self) -> None:
        content = "def foo():\n    from pfhooks import hooks\n"
        assert _extract_from_imports(content) == [(2, "from pfhooks import hooks")]

    def test_allows_future_imports(self) -> None:
        assert _extract_from_imports("from __future__ import annotations") == []

    @_pytest.mark.parametrize(
        "line",
        [
            "import yaml as _yaml",
            "import click.testing as _click_testing",
            "import pfhooks.flags.engine as engine",
            "import pfhooks.config.sources as config_sources",
            "import tests.conftest as conftest",
            "import pfhooks",
        ],
    )
    def test_accepted_aliases(self, line: str) -> None:
        assert _check_import_aliases(line) == []

    @_pytest.mark.parametrize(
        "line",
        [
            "import yaml",
            "import os.path",
            "import json as json",
            "import pfhooks.hooks as _hooks",
        ],
    )
    def test_rejected_aliases(self, line: str) -> None:
        assert _check_import_aliases(line) == [(1, line)]


class TestLoggerConvention:
    """Tests for per-module loggers."""

    def test_src_loggers_named_after_module(self) -> None:
        """Modules that log must use a logger named after the module."""
        violations: list[str] = []

        for path in _get_python_files(SRC_DIR):
            violations.extend(_check_logger_definition(path))

        if violations:
            _pytest.fail("Found modules without a module logger:\n" + "\n".join(violations))

    def test_detects_missing_definition(self, tmp_path: _pathlib.Path) -> None:
        path = tmp_path / "module.py"
        path.write_text('import logging as _logging\n\n_logger.info("x")\n')
        assert len(_check_logger_definition(path)) == 1

    def test_accepts_module_logger(self, tmp_path: _pathlib.Path) -> None:
        path = tmp_path / "module.py"
        path.write_text(f'import logging as _logging\n\n{LOGGER_DEFINITION}\n_logger.info("x")\n')
        assert _check_logger_definition(path) == []
