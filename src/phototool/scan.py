"""
Directory traversal for photo-tool.
"""

import os
from collections.abc import Iterator
from pathlib import Path

from phototool.models import MAX_DEPTH, AppConfig, FileCandidate, get_normalized_extension


def iter_candidates(cfg: AppConfig) -> Iterator[FileCandidate]:
    """Yield candidate files from the source directory according to the configured depth."""
    if cfg.source_dir is None:
        return
    if cfg.unbounded:
        yield from walk_all(cfg.source_dir, cfg.extensions)
    else:
        yield from walk_bounded(cfg.source_dir, cfg.depth, cfg.max_depth)


def walk_all(root: Path, extensions: tuple[str, ...]) -> Iterator[FileCandidate]:
    """
    Walk the whole tree under root and yield files whose extension is allowed.

    Extension matching is case-insensitive. Subdirectories that cannot be
    read are skipped.

    Args:
        root: Directory to walk
        extensions: Allowed extensions, lowercase without leading dot
    """
    allowed = {ext.lower().lstrip(".") for ext in extensions}
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            path = Path(dirpath) / filename
            if get_normalized_extension(path) not in allowed:
                continue
            # symlinks to directories, fifos and sockets are not photos
            if not path.is_file():
                continue
            yield FileCandidate.from_path(path)


def walk_bounded(root: Path, depth: int, max_depth: int = MAX_DEPTH) -> Iterator[FileCandidate]:
    """
    Walk at most `depth` directory levels below and including root.

    The root is level 1, so depth=1 yields only the files directly inside it.
    Every regular file (or symlink to one) is yielded, no extension filter
    applies in this mode. Symlinks to directories, fifos and sockets are
    ignored, and directories that cannot be listed are skipped.

    Args:
        root: Directory to walk
        depth: Number of levels to visit
        max_depth: Hard ceiling on top of depth
    """
    stack: list[tuple[Path, int]] = [(Path(root), 1)]
    while stack:
        directory, level = stack.pop()
        if level > depth or level > max_depth:
            continue

        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError:
            continue

        subdirs: list[Path] = []
        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                if not is_dir and not entry.is_file():
                    continue
            except OSError:
                continue
            if is_dir:
                subdirs.append(Path(entry.path))
            else:
                yield FileCandidate.from_path(entry.path)

        # reversed so that subdirectories are popped in listing order
        for subdir in reversed(subdirs):
            stack.append((subdir, level + 1))
