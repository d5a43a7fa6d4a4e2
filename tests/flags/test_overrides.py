"""Tests for the override table."""

import logging as _logging

import pytest as _pytest

import pfhooks.flags.coercion as coercion
import pfhooks.flags.errors as errors
import pfhooks.flags.overrides as overrides


class TestOverrideEntry:
    """Tests for parsing a single override declaration."""

    def test_parse(self) -> None:
        entry = overrides.OverrideEntry.parse("ns/key/int=5")
        assert entry == overrides.OverrideEntry("ns", "key", "int", "5")

    def test_value_keeps_later_separators(self) -> None:
        """Only the first '=' separates key path and value."""
        entry = overrides.OverrideEntry.parse("ns/key/string=a=b")
        assert entry.raw_value == "a=b"

    def test_missing_value_is_empty(self) -> None:
        entry = overrides.OverrideEntry.parse("ns/key/string")
        assert entry.raw_value == ""
        assert entry.to_value() == coercion.FlagValue(coercion.FlagType.STRING, "")

    @_pytest.mark.parametrize(
        "line",
        ["ns/key=1", "ns/key/int/extra=1", "just-a-key=1", "a/b/c/d/e/int=1"],
    )
    def test_wrong_segment_count_is_malformed(self, line: str) -> None:
        with _pytest.raises(errors.MalformedDeclarationError):
            overrides.OverrideEntry.parse(line)


class TestBuildOverrideTable:
    """Tests for build_override_table."""

    def test_typed_entries(self) -> None:
        table = overrides.build_override_table(
            [
                "ns/count/int=42",
                "ns/enabled/bool=true",
                "ns/name/string=x",
                "ns/blob/extension=QUI",
            ]
        )
        flags = table.flags_for("ns")
        assert flags["count"].value == 42
        assert flags["enabled"].value is True
        assert flags["name"].value == "x"
        assert flags["blob"].value == b"AB"

    def test_last_write_wins(self) -> None:
        table = overrides.build_override_table(["ns/k/int=1", "ns/k/int=2"])
        assert table["ns"]["k"].value == 2

    def test_malformed_entry_isolated(self) -> None:
        """A malformed key path is skipped without affecting other entries."""
        table = overrides.build_override_table(
            ["ns/a/int=1", "ns/bad=2", "ns/b/int=3"]
        )
        assert set(table["ns"]) == {"a", "b"}
        assert table["ns"]["a"].value == 1
        assert table["ns"]["b"].value == 3

    def test_unsupported_type_skipped(self) -> None:
        table = overrides.build_override_table(["ns/a/long=1", "ns/b/int=2"])
        assert set(table["ns"]) == {"b"}

    def test_parse_failure_skipped(self) -> None:
        """A bad value does not replace an earlier good one."""
        table = overrides.build_override_table(["ns/a/int=1", "ns/a/int=oops"])
        assert table["ns"]["a"].value == 1

    def test_skips_are_logged(self, caplog: _pytest.LogCaptureFixture) -> None:
        with caplog.at_level(_logging.DEBUG, logger="pfhooks.flags.overrides"):
            overrides.build_override_table(["ns/bad=1", "ns/a/long=1"])
        assert "Invalid config" in caplog.text
        assert "Unsupported type specifier: long" in caplog.text

    def test_flags_for_unknown_namespace(self) -> None:
        table = overrides.build_override_table([])
        assert table.flags_for("missing") == {}
        assert "missing" not in table

    def test_to_dict_hex_encodes_bytes(self) -> None:
        table = overrides.build_override_table(["ns/blob/extension=AQID", "ns/n/int=1"])
        assert table.to_dict() == {
            "ns": {
                "blob": {"type": "extension", "value": "010203"},
                "n": {"type": "int", "value": 1},
            }
        }

    def test_padded_extension_value(self) -> None:
        """The first '=' splits the line, so base64 padding stays in the value."""
        table = overrides.build_override_table(["ns/blob/extension=QUI="])
        assert table["ns"]["blob"].value == b"AB"
        assert table.to_dict() == {"ns": {"blob": {"type": "extension", "value": "4142"}}}
