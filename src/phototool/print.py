"""
Output logic for photo-tool.
"""

import sys
from typing import Any, NoReturn

from phototool.models import AppConfig, FileItem, colorize, colors


def get_schema(cfg: AppConfig) -> str:
    """Get schema string based on current configuration."""
    arrow = colorize("→", colors.yellow)
    folder = colorize(cfg.directory_template, colors.cyan)
    return f"FileName.Ext {arrow} {folder}/FileName.Ext"


def get_status(value: bool) -> str:
    """Get colored ON/OFF status."""
    return colorize("ON", colors.green) if value else colorize("OFF", colors.red)


def get_mode(cfg: AppConfig) -> str:
    """Describe the traversal mode selected by depth."""
    if cfg.unbounded:
        return "recursive (extension filter)"
    return f"bounded to {min(cfg.depth, cfg.max_depth)} level(s) (all files)"


def printe(message: str, exit_code: int = 1) -> NoReturn:
    """Print error message and exit with given exit code."""
    msg = message if exit_code == 0 else f"{colorize('Error', colors.red)}: {message}"
    print(msg)
    sys.exit(exit_code)


def print_schema(cfg: AppConfig) -> None:
    """Print the schema based on current configuration."""
    print(f"{colorize('Schema:', colors.yellow)}")
    print(f"{cfg.indent}{get_schema(cfg)}")


def print_header(cfg: AppConfig) -> None:
    """Print the header information based on current configuration."""
    if cfg.quiet:
        return
    print(
        f"{colorize('Photo Organizer', colors.green)} ({colorize(cfg.script_name, colors.green)}) v{cfg.script_version}"
    )
    print_schema(cfg)
    print(f"{colorize('Settings:', colors.yellow)}")
    print(f"{cfg.indent}Source: {colorize(str(cfg.source_dir), colors.cyan)}")
    print(f"{cfg.indent}Target: {colorize(str(cfg.target_dir), colors.cyan)}")
    print(f"{cfg.indent}Traversal: {colorize(get_mode(cfg), colors.cyan)}")
    if cfg.unbounded or cfg.verbose:
        print(f"{cfg.indent}Include extensions: {colorize(', '.join(cfg.extensions), colors.cyan)}")
    if cfg.preview or cfg.verbose:
        print(f"{cfg.indent}Preview mode: {get_status(cfg.preview)}")
    if cfg.verbose and cfg.config_file is not None:
        print(f"{cfg.indent}Config file: {colorize(str(cfg.config_file), colors.cyan)}")


def print_process_file(file: FileItem, cfg: AppConfig) -> None:
    """Print the source, destination and outcome for a single file."""
    old = colorize(str(file.path_old), colors.cyan)
    arr = colorize("→", colors.yellow)
    new = colorize(str(file.path_new), colors.cyan)

    if file.status == "failed":
        status = colorize("failed", colors.red)
        print(f"{cfg.indent}{old} {arr} {new} [{status}]")
        print(f"{cfg.indent}{cfg.indent}{colorize(file.error, colors.red)}")
        return

    status_color = colors.yellow if file.status == "preview" else colors.green
    print(f"{cfg.indent}{old} {arr} {new} [{colorize(file.status, status_color)}]")


def print_skipped_file(file: FileItem, cfg: AppConfig) -> None:
    """Print a skipped file with its reason; shown only in verbose mode, never for hidden files."""
    if not cfg.verbose or file.candidate.is_hidden:
        return
    name = colorize(str(file.path_old), colors.cyan)
    print(f"{cfg.indent}{name}: skipped ({colorize(file.error, colors.magenta)})")


def print_footer(summary: dict[str, Any], cfg: AppConfig) -> None:
    """Print the run summary."""
    if cfg.quiet:
        return
    print(f"{colorize('Summary:', colors.yellow)}")
    if cfg.preview:
        print(f"{cfg.indent}Preview mode (no changes made).")
        print(f"{cfg.indent}Files to move: {len(summary['preview'])}")
    else:
        print(f"{cfg.indent}Moved files: {len(summary['moved'])}")
        print(f"{cfg.indent}Failed files: {len(summary['failed'])}")
        print(f"{cfg.indent}Directories created: {len(summary['created_dirs'])}")
    print(f"{cfg.indent}Skipped files: {len(summary['skipped'])}")
