"""
Main CLI entry point for pfhooks.

A diagnostic tool built with Click: shows the effective namespace
directory and override table, and runs either hook against a made-up
request so declarations can be checked without a device.
"""

import json as _json
import logging as _logging
import os as _os
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import click as _click
import rich.console as _rich_console
import rich.syntax as _rich_syntax
import yaml as _yaml

import pfhooks
import pfhooks.adapters.tabular as tabular
import pfhooks.config as config
import pfhooks.config.sources as config_sources
import pfhooks.constants as constants
import pfhooks.hooks as hooks

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


def _jsonable(value: _typing.Any) -> _typing.Any:
    """Make a merged value printable as JSON."""
    if isinstance(value, bytes):
        return value.hex()
    return value


def _parse_pairs(pairs: tuple[str, ...], option: str) -> dict[str, str]:
    """Parse repeated KEY=VALUE options."""
    result: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise _click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint=option)
        result[key] = value
    return result


def _load_hooks(ctx: _click.Context) -> hooks.OverrideHooks:
    settings: config.Settings = ctx.obj["settings"]
    return hooks.OverrideHooks.from_settings(settings)


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(pfhooks.__version__, "-v", "--version", prog_name="pfhooks")
@_click.option(
    "--verbose",
    is_flag=True,
    help="Log skipped declarations and merge decisions to stderr",
)
@_click.pass_context
def cli(ctx: _click.Context, verbose: bool) -> None:
    """
    pfhooks - phenotype flag override inspector.

    \b
    Examples:
        pfhooks directory                         # Package -> namespace aliases
        pfhooks overrides --json                  # Typed override table
        pfhooks query content://com.google.android.gms.phenotype/com.example
        pfhooks query content://com.google.android.gsf.gservices/prefix -s settings_
        pfhooks prefs /data/user/0/com.example/shared_prefs/flags.xml
    """
    if verbose:
        _logging.basicConfig(level=_logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = config.Settings()
    except config.ConfigFileError as e:
        raise _click.ClickException(str(e)) from e

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def directory(ctx: _click.Context, as_json: bool) -> None:
    """Show the effective package -> namespace alias directory."""
    entries = _load_hooks(ctx).engine.build_directory().to_dict()

    if as_json:
        _click.echo(_json.dumps(entries, indent=2))
        return

    if not entries:
        _click.echo("No namespace declarations.")
        return
    for package, aliases in entries.items():
        _click.echo(f"{package}:")
        for alias in aliases:
            _click.echo(f"  {alias}")


@cli.command()
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def overrides(ctx: _click.Context, as_json: bool) -> None:
    """Show the effective override table."""
    table = _load_hooks(ctx).engine.build_override_table().to_dict()

    if as_json:
        _click.echo(_json.dumps(table, indent=2))
        return

    if not table:
        _click.echo("No override declarations.")
        return
    for namespace, flags in table.items():
        _click.echo(f"{namespace}:")
        for key, flag in flags.items():
            _click.echo(f"  {key} ({flag['type']}) = {flag['value']}")


@cli.command()
@_click.argument("uri")
@_click.option(
    "-s",
    "--select",
    "selection_args",
    multiple=True,
    help="Selection argument (gservices key prefix); repeatable",
)
@_click.option(
    "-r",
    "--row",
    "rows",
    multiple=True,
    help="Existing KEY=VALUE row returned by the provider; repeatable",
)
@_click.pass_context
def query(
    ctx: _click.Context,
    uri: str,
    selection_args: tuple[str, ...],
    rows: tuple[str, ...],
) -> None:
    """Run the query hook for URI and print the resulting rows."""
    existing = _parse_pairs(rows, "--row")
    original = tabular.MatrixRows(constants.KV_PROJECTION, existing.items()) if existing else None
    query_args = (
        {constants.QUERY_ARG_SQL_SELECTION_ARGS: list(selection_args)} if selection_args else None
    )

    result = _load_hooks(ctx).maybe_modify_query_result(
        uri,
        projection=constants.KV_PROJECTION,
        query_args=query_args,
        original=original,
    )
    if result is None:
        _click.echo("No result (provider output passes through unchanged).")
        return
    _click.echo(_json.dumps({k: _jsonable(v) for k, v in result.to_dict().items()}, indent=2))


@cli.command()
@_click.argument("path")
@_click.option(
    "-e",
    "--entry",
    "entries",
    multiple=True,
    help="Existing KEY=VALUE preference; repeatable",
)
@_click.pass_context
def prefs(ctx: _click.Context, path: str, entries: tuple[str, ...]) -> None:
    """Run the property-map hook for a preference file PATH."""
    values: dict[str, _typing.Any] = dict(_parse_pairs(entries, "--entry"))
    changed = _load_hooks(ctx).maybe_modify_property_map(path, values)

    _click.echo(
        _json.dumps(
            {"changed": changed, "values": {k: _jsonable(v) for k, v in values.items()}},
            indent=2,
        )
    )


@cli.group(invoke_without_command=True)
@_click.pass_context
def config_cmd(ctx: _click.Context) -> None:
    """Configuration commands.

    Without a subcommand, shows a configuration overview.
    """
    if ctx.invoked_subcommand is None:
        settings: config.Settings = ctx.obj["settings"]
        _click.echo("pfhooks Configuration:")
        _click.echo(f"  Enabled: {settings.enabled}")
        _click.echo(f"  Global Config: {settings.global_config_path}")
        _click.echo(f"  Device Config: {settings.device_config_path}")
        unknown = settings.collect_all_extra_fields()
        if unknown:
            _click.echo(f"  Unknown Keys: {', '.join(unknown)}")
        _click.echo("\nRun 'pfhooks config show' for full configuration details.")


# Register config_cmd with the name "config" to avoid shadowing the module
cli.add_command(config_cmd, name="config")


@config_cmd.command(name="show")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.option("--provenance", is_flag=True, help="Show which files the declarations came from")
@_click.option(
    "--section",
    type=_click.Choice(["enabled", "global_declarations", "device_declarations"]),
    default=None,
    help="Show specific section only",
)
@_click.option(
    "--color/--no-color",
    "use_color",
    default=None,
    help="Enable/disable syntax highlighting (default: auto-detect TTY)",
)
@_click.pass_context
def config_show(
    ctx: _click.Context,
    as_json: bool,
    provenance: bool,
    section: str | None,
    use_color: bool | None,
) -> None:
    """Show effective configuration from all sources.

    Color output is enabled by default when outputting to a terminal.
    Override with --color/--no-color, NO_COLOR env var, or
    PFHOOKS_CONFIG_SHOW_COLOR=0|1 env var.

    \b
    Examples:
        pfhooks config show                        # All settings as YAML
        pfhooks config show --json                 # As JSON
        pfhooks config show --section device_declarations
        pfhooks config show --provenance           # With loaded files
    """
    settings: config.Settings = ctx.obj["settings"]
    full_config = settings.model_dump(mode="json")
    unknown = sorted(
        path
        for path in settings.collect_all_extra_fields()
        if section is None or path.startswith(f"{section}.")
    )
    if section is not None:
        full_config = {section: full_config[section]}

    if as_json:
        if provenance:
            full_config["_provenance"] = {name: str(path) for name, path in _loaded_layers()}
        if unknown:
            full_config["_unknown_keys"] = unknown
        _click.echo(_json.dumps(full_config, indent=2))
        return

    yaml_text = _yaml.dump(full_config, default_flow_style=False, sort_keys=False)
    if provenance:
        header = "".join(f"# {name}: {path}\n" for name, path in _loaded_layers())
        yaml_text = header + yaml_text
    if unknown:
        yaml_text = f"# unknown keys: {', '.join(unknown)}\n" + yaml_text

    color_enabled, force_color = _should_use_color(use_color)
    _print_yaml(yaml_text, color=color_enabled, force_color=force_color)


def _loaded_layers() -> list[tuple[str, _pathlib.Path]]:
    """Declaration files that are actually loaded, global first."""
    source = config_sources.DeclarationsSettingsSource(config.Settings)
    return source.get_loaded_layers()


def _should_use_color(cli_flag: bool | None) -> tuple[bool, bool]:
    """Determine whether to use color output.

    Priority:
    1. CLI flag (--color / --no-color) if specified
    2. PFHOOKS_CONFIG_SHOW_COLOR env var (1=on, 0=off)
    3. NO_COLOR env var (if set, disable color) - standard convention
    4. Auto-detect: color if stdout is a TTY

    Returns:
        Tuple of (color_enabled, force_color).
        force_color is True when color was explicitly requested (not auto-detected).
    """
    if cli_flag is not None:
        return (cli_flag, cli_flag)

    env_color = _os.environ.get("PFHOOKS_CONFIG_SHOW_COLOR")
    if env_color is not None:
        enabled = env_color.lower() in ("1", "true", "yes", "on")
        return (enabled, enabled)

    if _os.environ.get("NO_COLOR") is not None:
        return (False, False)

    return (_sys.stdout.isatty(), False)


def _print_yaml(yaml_text: str, *, color: bool = True, force_color: bool = False) -> None:
    """Print YAML text, optionally with syntax highlighting."""
    if not color:
        _click.echo(yaml_text, nl=False)
        return

    # force_terminal/no_color/color_system override NO_COLOR and FORCE_COLOR when forced
    console = _rich_console.Console(
        force_terminal=force_color,
        no_color=False if force_color else None,
        color_system="truecolor" if force_color else "auto",
    )
    console.print(
        _rich_syntax.Syntax(yaml_text, "yaml", theme="monokai", background_color="default")
    )


@config_cmd.command(name="path")
@_click.option("--all", "show_all", is_flag=True, help="Show all paths even if not found")
def config_path(show_all: bool) -> None:
    """Show configuration file paths and their status."""
    paths = [
        ("Global declarations", config_sources.get_global_config_path()),
        ("Device declarations", config_sources.get_device_config_path()),
    ]

    for name, path in paths:
        exists = path.exists()
        if exists or show_all:
            status = "✓" if exists else "✗"
            _click.echo(f"{status} {name}: {path}")


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="pfhooks")


if __name__ == "__main__":
    main()
