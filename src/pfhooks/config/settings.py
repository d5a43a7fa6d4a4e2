"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with PFHOOKS_ prefix
3. .env file (if PFHOOKS_ENV_FILE points at one)
4. Declaration YAML files:
   - Global: bundled defaults/global.yaml
   - Device: ~/.config/pfhooks/device.yaml

Nested config uses double underscore delimiter:
  PFHOOKS_ENABLED=false
  PFHOOKS_DEVICE_DECLARATIONS__FLAGS_OVERRIDE='["gservices/foo/string=bar"]'
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import pfhooks.config.sources as sources
import pfhooks.config.types as types

_logger = _logging.getLogger(__name__)

_DECLARATION_SECTIONS = ("global_declarations", "device_declarations")


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only an explicit PFHOOKS_ENV_FILE is honoured; if it is set but does
    not exist, nothing is loaded rather than silently falling back.
    """
    if env_file := _os.environ.get("PFHOOKS_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    pfhooks configuration settings.

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (PFHOOKS_*)
    3. .env file
    4. Device and global declaration files
    5. Field defaults

    Settings is also the declaration source handed to the merge engine:
    see namespace_declarations() and override_declarations().
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="PFHOOKS_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (PFHOOKS_* env vars)
        3. dotenv_settings (.env file)
        4. declaration files (global + device YAML)
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.DeclarationsSettingsSource(settings_cls),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from environment variables only, without loading .env file.

        Useful for test isolation and for reproducing issues without .env
        interference.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    # =========================================================================
    # Toggle
    # =========================================================================

    enabled: bool = _pydantic.Field(
        default=True,
        description="Process-wide switch; when false no override is ever applied",
    )

    # =========================================================================
    # Declarations
    # =========================================================================

    global_declarations: types.DeclarationSet = _pydantic.Field(
        default_factory=types.DeclarationSet
    )
    """Framework-wide declarations (global.yaml)."""

    device_declarations: types.DeclarationSet = _pydantic.Field(
        default_factory=types.DeclarationSet
    )
    """Device-specific declarations (device.yaml), applied after global."""

    # =========================================================================
    # Declaration source interface
    # =========================================================================

    def namespace_declarations(self) -> tuple[list[str], list[str]]:
        """Namespace declarations as (global, device)."""
        return (
            list(self.global_declarations.package_namespaces),
            list(self.device_declarations.package_namespaces),
        )

    def override_declarations(self) -> list[str]:
        """Override declarations, global first then device."""
        return [
            *self.global_declarations.flags_override,
            *self.device_declarations.flags_override,
        ]

    # =========================================================================
    # Directory settings (computed at runtime)
    # =========================================================================

    @property
    def config_dir(self) -> _pathlib.Path:
        """User configuration directory (~/.config/pfhooks/)."""
        return sources.get_user_config_dir()

    @property
    def global_config_path(self) -> _pathlib.Path:
        """Global declarations file."""
        return sources.get_global_config_path()

    @property
    def device_config_path(self) -> _pathlib.Path:
        """Device declarations file (may not exist)."""
        return sources.get_device_config_path()

    # =========================================================================
    # Introspection (config auditing)
    # =========================================================================

    def collect_all_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Collect unknown keys from both declaration sections.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"device_declarations.flag_overrides": ["ns/k/int=1"]}
        """
        result: dict[str, _typing.Any] = {}
        for field_name in _DECLARATION_SECTIONS:
            nested = getattr(self, field_name)
            result.update(nested.collect_all_extra_fields(prefix=field_name))
        return result

    def has_extra_fields(self) -> bool:
        """Check if there are any unknown keys in the declaration files."""
        return bool(self.collect_all_extra_fields())

    @_pydantic.model_validator(mode="after")
    def _warn_unknown_keys(self) -> "Settings":
        for path in self.collect_all_extra_fields():
            _logger.warning("Unknown config key %s is ignored", path)
        return self

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert settings to dictionary (for JSON output)."""
        namespaces_global, namespaces_device = self.namespace_declarations()
        return {
            "enabled": self.enabled,
            "global_config": str(self.global_config_path),
            "device_config": str(self.device_config_path),
            "namespace_declarations": len(namespaces_global) + len(namespaces_device),
            "override_declarations": len(self.override_declarations()),
        }
