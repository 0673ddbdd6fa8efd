"""
Argument parsing and settings merging for photo-tool.

Settings are layered in increasing precedence: AppConfig defaults,
TOML config file, PHOTO_TOOL_* environment variables, command line flags.
"""

import argparse
import dataclasses
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from phototool.models import AppConfig, colorize, colors, normalize_extensions
from phototool.print import printe

ENV_PREFIX = "PHOTO_TOOL_"
DEFAULT_CONFIG_NAME = ".photo-tool.toml"
SETTING_KEYS = ("path", "target", "ext", "depth", "preview")
TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off", "")


class ConfigError(ValueError):
    """Raised when a config file or environment variable holds an invalid value."""


def get_default_value(field_name: str) -> Any:
    """Extract default value from AppConfig dataclass field."""
    f = AppConfig.__dataclass_fields__[field_name]
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory()
    return f.default


def get_default_info(default_val: Any) -> str:
    """Generate a string with default settings for help message."""
    return f"(default: '{colorize(str(default_val), colors.yellow)}')"


def get_default_config_path() -> Path:
    return Path.home() / DEFAULT_CONFIG_NAME


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser. Every option defaults to None so unset flags can be told apart."""
    parser = argparse.ArgumentParser(
        prog="photo-tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Organize photos into date-based folders by reading the EXIF capture date.\n"
        f"Requires {colorize('ExifTool', colors.green)} command-line tool and {colorize('PyExifTool', colors.green)} Python library.",
        epilog=f"Example: {colorize('photo-tool', colors.green)} -p yourpath -t targetpath -d 1 -e JPG -e PNG -e JPEG",
    )

    parser.add_argument(
        "-p",
        "--path",
        dest="path",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory to scan (required)",
    )
    parser.add_argument(
        "-t",
        "--target",
        dest="target",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory to receive the date folders (default: current directory)",
    )

    def_extensions = [ext.upper() for ext in get_default_value("extensions")]
    parser.add_argument(
        "-e",
        "--ext",
        dest="ext",
        type=str,
        action="append",
        default=None,
        metavar="EXT",
        help=f"File extension to include, repeatable; used only with --depth 0 {get_default_info(', '.join(def_extensions))}",
    )

    def_depth = get_default_value("depth")
    parser.add_argument(
        "-d",
        "--depth",
        dest="depth",
        type=int,
        default=None,
        metavar="N",
        help=f"Scan depth, 0 walks the whole tree {get_default_info(def_depth)}",
    )
    parser.add_argument(
        "--preview",
        dest="preview",
        action="store_true",
        default=None,
        help="Preview mode: show what would be moved without making changes",
    )
    parser.add_argument(
        "--config",
        dest="config",
        type=str,
        default=None,
        metavar="FILE",
        help=f"Config file {get_default_info('~/' + DEFAULT_CONFIG_NAME)}",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        dest="quiet",
        action="store_true",
        help="Quiet mode (suppress header and summary)",
    )
    parser.add_argument(
        "-V",
        "--verbose",
        dest="verbose",
        action="store_true",
        help="Also list skipped files with the reason",
    )
    parser.add_argument(
        "-v", "--version", dest="show_version", action="store_true", help="Print version and exit"
    )
    return parser


def parse_bool(value: Any, name: str) -> bool:
    """Interpret a config or environment value as a boolean."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in TRUE_VALUES:
        return True
    if isinstance(value, str) and value.strip().lower() in FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value for '{name}': {value!r}")


def coerce_setting(key: str, value: Any, name: str) -> Any:
    """
    Convert a raw setting from a config file or environment into its typed form.

    Args:
        key: One of SETTING_KEYS
        value: Raw value
        name: Setting label used in error messages

    Raises:
        ConfigError: If the value has the wrong type
    """
    if key in ("path", "target"):
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"Invalid path for '{name}': {value!r}")
        return value
    if key == "ext":
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"Invalid extension list for '{name}': {value!r}")
        return value
    if key == "depth":
        if isinstance(value, bool):
            raise ConfigError(f"Invalid depth for '{name}': {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid depth for '{name}': {value!r}") from None
    if key == "preview":
        return parse_bool(value, name)
    raise ConfigError(f"Unknown setting '{name}'")


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Read settings from a TOML config file.

    Unknown keys are ignored.

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file '{path}': {e.strerror or e}") from None
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid config file '{path}': {e}") from None

    return {key: coerce_setting(key, data[key], f"{path}:{key}") for key in SETTING_KEYS if key in data}


def get_env_settings(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect PHOTO_TOOL_* settings from the environment."""
    env = os.environ if environ is None else environ
    settings: dict[str, Any] = {}
    for key in SETTING_KEYS:
        name = f"{ENV_PREFIX}{key.upper()}"
        if name in env:
            settings[key] = coerce_setting(key, env[name], name)
    return settings


def resolve_config_file(explicit: str | None) -> Path | None:
    """Return the config file to load, or None when no file applies."""
    if explicit:
        return Path(explicit).expanduser()
    default = get_default_config_path()
    return default if default.is_file() else None


def merge_settings(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Merge setting layers, later layers win. None values do not override."""
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            if value is not None:
                merged[key] = value
    return merged


def get_config(argv: list[str] | None = None, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Parse command line arguments, merge config file and environment, and return the AppConfig object."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config_file = resolve_config_file(args.config)
        file_settings = load_config_file(config_file) if config_file is not None else {}
        env_settings = get_env_settings(environ)
    except ConfigError as e:
        printe(str(e), 1)

    if config_file is not None and not args.quiet:
        print(f"Using config file: {colorize(str(config_file), colors.cyan)}")

    flag_settings = {key: getattr(args, key) for key in SETTING_KEYS}
    settings = merge_settings(file_settings, env_settings, flag_settings)

    source_dir = Path(settings["path"]).expanduser().absolute() if "path" in settings else None
    target_dir = Path(settings.get("target", ".")).expanduser().absolute()
    extensions = (
        normalize_extensions(settings["ext"])
        if "ext" in settings
        else get_default_value("extensions")
    )

    # Construct and return the immutable AppConfig
    return AppConfig(
        extensions=extensions,
        depth=settings.get("depth", get_default_value("depth")),
        preview=settings.get("preview", get_default_value("preview")),
        quiet=args.quiet,
        verbose=args.verbose,
        show_version=args.show_version,
        source_dir=source_dir,
        target_dir=target_dir,
        config_file=config_file,
    )
