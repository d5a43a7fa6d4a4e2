"""Tests for the namespace directory."""

import pytest as _pytest

import pfhooks.flags.directory as directory
import pfhooks.flags.errors as errors


class TestNamespaceDeclaration:
    """Tests for parsing a single namespace declaration."""

    def test_relative_and_absolute_aliases(self) -> None:
        """'.x' is expanded against the package; others are verbatim."""
        declaration = directory.NamespaceDeclaration.parse("P=.a,b,.c")
        assert declaration.package == "P"
        assert declaration.aliases == ("P.a", "b", "P.c")

    def test_missing_separator_is_malformed(self) -> None:
        with _pytest.raises(errors.MalformedDeclarationError):
            directory.NamespaceDeclaration.parse("com.example.app")

    def test_empty_package_is_malformed(self) -> None:
        with _pytest.raises(errors.MalformedDeclarationError):
            directory.NamespaceDeclaration.parse("=a,b")


class TestBuildDirectory:
    """Tests for build_directory."""

    def test_self_aliases_appended_last(self) -> None:
        """Declared aliases keep their order; P and P#P follow."""
        result = directory.build_directory(["P=.a,b,.c"])
        assert result["P"] == ["P.a", "b", "P.c", "P", "P#P"]

    def test_global_before_device(self) -> None:
        """Device declarations for the same package extend the global ones."""
        result = directory.build_directory(["P=a"], ["P=b"])
        assert result["P"] == ["a", "P", "P#P", "b", "P", "P#P"]

    def test_duplicates_are_kept(self) -> None:
        result = directory.build_directory(["P=a,a"])
        assert result["P"] == ["a", "a", "P", "P#P"]

    def test_malformed_line_skipped(self) -> None:
        """A bad line does not affect the others."""
        result = directory.build_directory(["garbage", "P=a"], ["=x", "Q=.b"])
        assert dict(result) == {
            "P": ["a", "P", "P#P"],
            "Q": ["Q.b", "Q", "Q#Q"],
        }

    def test_empty_sources(self) -> None:
        result = directory.build_directory([], [])
        assert len(result) == 0
        assert result.lookup("P") is None

    def test_lookup_returns_copy(self) -> None:
        """Mutating a lookup result does not change the directory."""
        result = directory.build_directory(["P=a"])
        aliases = result.lookup("P")
        assert aliases is not None
        aliases.append("mutated")
        assert directory.lookup_aliases(result, "P") == ["a", "P", "P#P"]

    def test_to_dict(self) -> None:
        result = directory.build_directory(["P=a"])
        assert result.to_dict() == {"P": ["a", "P", "P#P"]}


class TestResolvePackageAndFile:
    """Tests for resolve_package_and_file."""

    def test_bare_namespace(self) -> None:
        target = directory.resolve_package_and_file("com.example.app", False)
        assert target == directory.RequestTarget(package="com.example.app")

    def test_namespace_with_owner(self) -> None:
        """The part after '#' names the owning package."""
        target = directory.resolve_package_and_file("com.example.app.flags#com.example.app", False)
        assert target.package == "com.example.app"
        assert target.file is None

    def test_property_map_token(self) -> None:
        target = directory.resolve_package_and_file("com.example.app/prefs.xml", True)
        assert target == directory.RequestTarget(package="com.example.app", file="prefs.xml")

    def test_property_map_token_without_file(self) -> None:
        target = directory.resolve_package_and_file("com.example.app", True)
        assert target.package == "com.example.app"
        assert target.file is None

    def test_hash_ignored_in_property_map_mode(self) -> None:
        target = directory.resolve_package_and_file("a#b/file.xml", True)
        assert target.package == "a#b"
