"""Custom pydantic-settings source for pfhooks declarations.

Declarations come from two YAML files, mirroring the platform's split
between framework-wide and device-specific resources:

1. Global: bundled defaults/global.yaml (or PFHOOKS_GLOBAL_CONFIG)
2. Device: ~/.config/pfhooks/device.yaml (or PFHOOKS_DEVICE_CONFIG)

The two are never merged into each other; each becomes its own
DeclarationSet and consumers concatenate them (global first).

Environment variables:
- PFHOOKS_GLOBAL_CONFIG: Override the global declarations file
- PFHOOKS_DEVICE_CONFIG: Override the device declarations file
- PFHOOKS_CONFIG_DIR: Override the user config directory (default: ~/.config/pfhooks)
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

ENV_GLOBAL_CONFIG = "PFHOOKS_GLOBAL_CONFIG"
ENV_DEVICE_CONFIG = "PFHOOKS_DEVICE_CONFIG"
ENV_CONFIG_DIR = "PFHOOKS_CONFIG_DIR"


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any] | None:
    """
    Load a YAML file and return its contents as a dict.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML contents, or None if the file is empty.

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or contains non-dict content at the top level.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigFileError(path, f"permission denied: {e}") from e
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return None

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type_name}",
        )

    return parsed


class DeclarationsSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that loads the global and device declaration files.

    The global file is required: if it is missing, that is an installation
    problem and is surfaced rather than ignored. The device file is
    optional; most devices have none.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        *,
        global_config_path: _pathlib.Path | None = None,
        device_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            global_config_path: Override path for the global file (for testing).
            device_config_path: Override path for the device file (for testing).
        """
        super().__init__(settings_cls)
        self._global_config_path = global_config_path
        self._device_config_path = device_config_path
        self._loaded_layers: list[tuple[str, _pathlib.Path]] = []
        self._data = self._load_layers()

    def _load_layers(self) -> dict[str, _typing.Any]:
        data: dict[str, _typing.Any] = {}

        global_path = self._global_config_path or get_global_config_path()
        if not global_path.exists():
            raise ConfigFileError(
                global_path,
                "global declarations not found (possible installation problem)",
            )
        data["global_declarations"] = load_yaml_file(global_path) or {}
        self._loaded_layers.append(("global", global_path))

        device_path = self._device_config_path or get_device_config_path()
        if device_path.exists():
            content = load_yaml_file(device_path)
            if content:
                data["device_declarations"] = content
                self._loaded_layers.append(("device", device_path))

        return data

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """
        Get info about files that were actually loaded.

        Returns:
            List of (layer_name, path) tuples, global first.
        """
        return list(self._loaded_layers)

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """
        Get value for a field from the loaded files.

        Returns:
            Tuple of (value, field_name, is_complex).
        """
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, dict)

    def __call__(self) -> dict[str, _typing.Any]:
        """Return loaded declarations for Pydantic validation."""
        return dict(self._data)


def get_builtin_global_path() -> _pathlib.Path:
    """
    Get the path to the bundled global declarations.

    Returns:
        Path to defaults/global.yaml.
    """
    return _pathlib.Path(__file__).parent / "defaults" / "global.yaml"


def get_global_config_path() -> _pathlib.Path:
    """
    Get the path to the global declarations file.

    Respects PFHOOKS_GLOBAL_CONFIG if set, otherwise the bundled defaults.
    """
    override = _os.environ.get(ENV_GLOBAL_CONFIG)
    if override:
        return _pathlib.Path(override)
    return get_builtin_global_path()


def get_user_config_dir() -> _pathlib.Path:
    """
    Get the user config directory.

    Respects PFHOOKS_CONFIG_DIR environment variable if set,
    otherwise uses XDG standard path.
    """
    config_dir_env = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    return _pathlib.Path.home() / ".config" / "pfhooks"


def get_device_config_path() -> _pathlib.Path:
    """
    Get the path to the device declarations file.

    Respects PFHOOKS_DEVICE_CONFIG if set, otherwise device.yaml in the
    user config directory.
    """
    override = _os.environ.get(ENV_DEVICE_CONFIG)
    if override:
        return _pathlib.Path(override)
    return get_user_config_dir() / "device.yaml"
