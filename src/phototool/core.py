#!/usr/bin/env python3
"""
Organize photos into date-based folders by reading the EXIF capture date.
Requires: ExifTool command-line tool and PyExifTool Python library.
"""

import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Any

import exiftool
from exiftool.exceptions import ExifToolException

from phototool.args import get_config
from phototool.models import AppConfig, FileCandidate, FileItem, colorize, colors
from phototool.print import (
    print_footer,
    print_header,
    print_process_file,
    print_skipped_file,
    printe,
)
from phototool.scan import iter_candidates


def fail_file(file: FileItem, error: str) -> None:
    """
    Mark file as failed with error message.

    Args:
        file: FileItem whose move did not happen
        error: Error message to set
    """
    file.error = error
    file.status = "failed"


def check_exiftool_availability() -> None:
    """Check if ExifTool command-line tool is available."""
    try:
        subprocess.run(["exiftool", "-ver"], capture_output=True, check=True)
    except (subprocess.SubprocessError, FileNotFoundError):
        print("\033[0;31mExifTool command-line tool is not installed or not in PATH.\033[0m")
        print("Please download and install it from: \033[0;36mhttps://exiftool.org/\033[0m")
        sys.exit(1)


def check_conditions(cfg: AppConfig) -> None:
    """Check if all conditions are met to run the script."""
    # Show version and exit when requested with --version
    if cfg.show_version:
        date_str = f" ({cfg.script_date})" if cfg.script_date else ""
        author_str = f" by {colorize(cfg.script_author, colors.cyan)}" if cfg.script_author else ""
        msg = (
            f"{colorize(cfg.script_name, colors.green)} "
            f"version {colorize(cfg.script_version, colors.cyan)}{date_str}{author_str}"
        )
        printe(msg, 0)

    check_exiftool_availability()

    if cfg.source_dir is None:
        printe("A source directory must be specified with -p/--path.", 1)

    # Exit if source directory does not exist or cannot be statted
    try:
        is_dir = cfg.source_dir.is_dir()
    except OSError as e:
        printe(f"Cannot access '{colorize(str(cfg.source_dir), colors.cyan)}': {e}", 1)
    if not is_dir:
        printe(
            f"The specified directory '{colorize(str(cfg.source_dir), colors.cyan)}' does not exist or is not a directory.",
            1,
        )

    if cfg.depth < 0:
        printe(f"Depth must be 0 or greater, got {cfg.depth}.", 1)

    # Extensions only filter the unbounded walk
    if cfg.unbounded and not cfg.extensions:
        printe("At least one file extension must be specified.", 1)

    # Check for conflicting quiet and verbose modes
    if cfg.quiet and cfg.verbose:
        printe("Cannot use both quiet mode and verbose mode.", 1)


def read_metadata(et: Any, path: Path) -> dict[str, Any] | None:
    """
    Read metadata of a single file with a running ExifToolHelper.

    Returns None if ExifTool fails or yields nothing for the file.
    """
    try:
        data = et.get_metadata(str(path))
    except (ExifToolException, ValueError):
        return None
    if not data:
        return None
    return data[0]


def get_file_item(candidate: FileCandidate, et: Any, cfg: AppConfig) -> FileItem:
    """Build a FileItem, reading metadata only for visible, readable files."""
    metadata = None
    if not candidate.is_hidden and os.access(candidate.path, os.R_OK):
        metadata = read_metadata(et, candidate.path)
    return FileItem(candidate, cfg, metadata)


def relocate_file(file: FileItem, cfg: AppConfig, created_dirs: list[str] | None = None) -> None:
    """
    Move a valid file into its date directory, or mark it as preview.

    A file whose target already exists is not moved and is marked failed.
    Moves across filesystems fall back to copy and delete via shutil.move.

    Args:
        file: Valid FileItem with path_new set
        cfg: Application configuration
        created_dirs: Optional list collecting directories created during the run
    """
    target = file.path_new
    target_dir = file.target_dir
    if target is None or target_dir is None:
        fail_file(file, "No target path.")
        return

    if cfg.preview:
        file.status = "preview"
        return

    try:
        existed = target_dir.is_dir()
        target_dir.mkdir(parents=True, exist_ok=True)
        if not existed and created_dirs is not None and str(target_dir) not in created_dirs:
            created_dirs.append(str(target_dir))
    except PermissionError:
        fail_file(file, f"Permission denied: cannot create directory '{target_dir}'.")
        return
    except OSError as e:
        fail_file(file, f"Error creating directory '{target_dir}': {e}")
        return

    if target.exists():
        fail_file(file, "Target file already exists.")
        return

    try:
        shutil.move(str(file.path_old), str(target))
    except PermissionError:
        fail_file(file, "Permission denied: cannot move file.")
        return
    except FileNotFoundError:
        fail_file(file, "Source file no longer exists.")
        return
    except FileExistsError:
        fail_file(file, "Target file already exists (race condition).")
        return
    except (shutil.Error, OSError) as e:
        fail_file(file, f"File system error: {e}")
        return

    file.status = "moved"


def process_file(
    candidate: FileCandidate, et: Any, cfg: AppConfig, summary: dict[str, Any]
) -> FileItem:
    """Classify one candidate and move it, recording the outcome in summary."""
    file = get_file_item(candidate, et, cfg)
    # hidden files are neither reported nor counted
    if candidate.is_hidden:
        return file
    if not file.is_valid:
        summary["skipped"].append(str(file.path_old))
        print_skipped_file(file, cfg)
        return file

    relocate_file(file, cfg, summary["created_dirs"])
    summary[file.status].append(str(file.path_old))
    print_process_file(file, cfg)
    return file


def new_summary() -> dict[str, Any]:
    return {
        "moved": [],
        "preview": [],
        "failed": [],
        "skipped": [],
        "created_dirs": [],
    }


def process_files(cfg: AppConfig) -> dict[str, Any]:
    """Walk the source directory and process every candidate in turn."""
    summary = new_summary()

    if not cfg.quiet:
        action = "Previewing" if cfg.preview else "Moving"
        print(f"{colorize(f'{action} files:', colors.yellow)}")

    with exiftool.ExifToolHelper() as et:
        for candidate in iter_candidates(cfg):
            process_file(candidate, et, cfg, summary)

    if not cfg.quiet and not (summary["moved"] or summary["preview"] or summary["failed"]):
        print(f"{cfg.indent}No files were processed.")
    return summary


def main() -> None:
    """Main function to run the photo sorting process."""
    # Get configuration (from args module)
    cfg = get_config()
    # Condition checks
    check_conditions(cfg)
    # Print header
    print_header(cfg)
    # Main processing
    summary = process_files(cfg)
    # Print footer
    print_footer(summary, cfg)


if __name__ == "__main__":
    main()
