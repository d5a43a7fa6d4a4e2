"""Configuration type definitions for pfhooks settings.

This module defines the Pydantic models nested within the main Settings
class:

- DeclarationSet: the namespace and override declaration lines from one
  source (global built-in defaults, or the device overlay)

Design decision: All types use `extra="allow"` to preserve unknown fields,
so a config audit can report typos. Use `get_extra_fields()` to inspect them,
or `Settings.collect_all_extra_fields()` for every section at once.
"""

import typing as _typing

import pydantic as _pydantic

# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    Unknown fields are preserved rather than silently dropped.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Return fields that were provided but not in the schema.

        Returns:
            Dict of field_name → value for all unrecognized fields.
        """
        return dict(self.model_extra) if self.model_extra else {}

    def has_extra_fields(self) -> bool:
        """Check if this config has any unrecognized fields."""
        return bool(self.model_extra)

    def collect_all_extra_fields(
        self,
        prefix: str = "",
    ) -> dict[str, _typing.Any]:
        """
        Collect extra fields with dotted paths as keys, e.g.:
            {"device_declarations.flag_overrides": ["ns/k/int=1"]}

        Args:
            prefix: Dotted path of this section within Settings.

        Returns:
            Flat dict of path → value for all unrecognized fields.
        """
        result: dict[str, _typing.Any] = {}
        for key, value in self.get_extra_fields().items():
            path = f"{prefix}.{key}" if prefix else key
            result[path] = value
        return result


# =============================================================================
# Declarations
# =============================================================================


class DeclarationSet(ConfigBase):
    """
    Raw declarations from one configuration source.

    YAML layout:
        package_namespaces:
          - com.google.android.gms=.flags,gms_common
        flags_override:
          - com.google.android.gms.flags/enable_x/bool=true
    """

    package_namespaces: list[str] = _pydantic.Field(default_factory=list)
    """Namespace alias declarations: ``package=alias1,alias2,...``."""

    flags_override: list[str] = _pydantic.Field(default_factory=list)
    """Typed override declarations: ``namespace/key/type=value``."""

    @_pydantic.field_validator("package_namespaces", "flags_override", mode="before")
    @classmethod
    def _none_as_empty(cls, value: _typing.Any) -> _typing.Any:
        """A YAML key with no items parses as None; treat it as empty."""
        return [] if value is None else value

    def is_empty(self) -> bool:
        """Whether this set declares nothing at all."""
        return not self.package_namespaces and not self.flags_override
