import datetime
import os
import tomllib
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any


@lru_cache(maxsize=1)
def _get_pyproject_data() -> dict[str, Any]:
    """
    Load data from pyproject.toml located in the project root.
    Cached to prevent multiple file reads.
    Assumes structure: project_root/src/phototool/models.py
    """
    try:
        pyproject_path = Path(__file__).parents[2] / "pyproject.toml"

        if not pyproject_path.is_file():
            return {}

        with open(pyproject_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _get_script_version() -> str:
    """Get version directly from pyproject.toml [project] section."""
    data = _get_pyproject_data()
    return str(data.get("project", {}).get("version", "0.0.0"))


def _get_script_date() -> str:
    """Get date directly from pyproject.toml [tool.phototool] section."""
    data = _get_pyproject_data()
    return str(data.get("tool", {}).get("phototool", {}).get("date", ""))


def _get_script_name() -> str:
    """Get project name from [project]."""
    data = _get_pyproject_data()
    return str(data.get("project", {}).get("name", "photo-tool"))


def _get_script_author() -> str:
    """Get first author name from [project.authors]."""
    data = _get_pyproject_data()
    authors = data.get("project", {}).get("authors", [])
    if isinstance(authors, list) and len(authors) > 0:
        return str(authors[0].get("name", ""))
    return ""


DIRECTORY_TEMPLATES: dict[str, str] = {
    "YYYY-MM-DD": "%Y-%m-%d",
}

# Hard ceiling for bounded traversal, applied on top of the user depth
MAX_DEPTH = 100


@dataclass
class Colors:
    """Terminal color codes."""

    reset: str = "\033[0m"
    red: str = "\033[31m"
    green: str = "\033[32m"
    yellow: str = "\033[33m"
    cyan: str = "\033[36m"
    magenta: str = "\033[35m"


# global Colors instance
colors = Colors()


def colorize(text: str, color: str) -> str:
    """Wrap text in color codes."""
    return f"{color}{text}{colors.reset}"


def get_normalized_extension(path: Path) -> str:
    """
    Extract and normalize file extension from path.

    Args:
        path: Path object to extract extension from

    Returns:
        Lowercase extension without leading dot
    """
    return path.suffix.lstrip(".").lower()


def normalize_extensions(values: list[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Lowercase extensions, strip leading dots and drop blanks and duplicates."""
    result: list[str] = []
    for value in values:
        ext = value.strip().lstrip(".").lower()
        if ext and ext not in result:
            result.append(ext)
    return tuple(result)


@dataclass(frozen=True)
class AppConfig:
    """Application configuration with default values."""

    # Settings
    extensions: tuple[str, ...] = ("jpg", "jpeg")
    exif_date_tags: tuple[str, ...] = (
        "EXIF:DateTimeOriginal",
        "EXIF:ModifyDate",
    )
    depth: int = 1
    max_depth: int = MAX_DEPTH
    preview: bool = False

    # Templates & Formatting
    directory_template: str = "YYYY-MM-DD"
    indent: str = "    "

    # Flags
    quiet: bool = False
    verbose: bool = False
    show_version: bool = False

    # Runtime metadata
    script_name: str = field(default_factory=_get_script_name)
    script_version: str = field(default_factory=_get_script_version)
    script_date: str = field(default_factory=_get_script_date)
    script_author: str = field(default_factory=_get_script_author)

    # Runtime state
    source_dir: Path | None = None
    target_dir: Path = field(default_factory=Path.cwd)
    config_file: Path | None = None

    @property
    def unbounded(self) -> bool:
        """Depth 0 selects the full recursive walk."""
        return self.depth == 0


@dataclass(frozen=True)
class FileCandidate:
    """A file found during traversal."""

    path: Path
    name: str

    @classmethod
    def from_path(cls, path: Path | str) -> "FileCandidate":
        p = Path(path).absolute()
        return cls(path=p, name=p.name)

    @property
    def is_hidden(self) -> bool:
        return self.name.startswith(".")


def parse_exif_date(value: Any) -> datetime.date | None:
    """
    Parse an ExifTool date string such as '2021:03:05 14:22:01' into a date.

    Returns None when the value is too short or not a real calendar date
    (cameras write '0000:00:00 00:00:00' when the clock was never set).
    """
    date_str = str(value).strip()
    if len(date_str) < 10:
        return None

    # Handle EXIF date format: YYYY:MM:DD -> YYYY-MM-DD
    if date_str[4:5] == ":" and date_str[7:8] == ":":
        date_str = date_str.replace(":", "-", 2)

    try:
        return datetime.datetime.strptime(date_str[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


class PathGenerator:
    """
    Generates target directories and paths for media files.

    Separates path generation logic from file validation and EXIF parsing.
    """

    def __init__(self, config: AppConfig):
        self.cfg = config

    def generate_subdir(self, capture_date: datetime.date) -> str:
        """
        Generate subdirectory name from the capture date.

        Args:
            capture_date: Date read from the file metadata

        Returns:
            Subdirectory name, e.g. '2021-03-05'
        """
        format_str = DIRECTORY_TEMPLATES.get(self.cfg.directory_template, "%Y-%m-%d")
        return capture_date.strftime(format_str)

    def generate_path(self, target_dir: Path, subdir: str, filename: str) -> Path:
        """
        Generate full target path for file.

        Args:
            target_dir: Destination root
            subdir: Date subdirectory name
            filename: Original base name of the file

        Returns:
            Absolute path to target location
        """
        return (target_dir / subdir / filename).absolute()


class FileItem:
    """Class representing a candidate file with its capture date and target."""

    def __init__(
        self,
        candidate: FileCandidate,
        config: AppConfig,
        metadata: dict[str, Any] | None = None,
    ):
        self.cfg = config
        self.path_gen = PathGenerator(config)
        self.candidate = candidate
        self.path_old = candidate.path
        self.name = candidate.name
        self.metadata = metadata
        self.error = ""
        self.is_valid = True
        self.status = ""
        self.capture_date: datetime.date | None = None
        self.subdir: str | None = None
        self.path_new: Path | None = None

        if not self._validate_file():
            return

        self._process_exif()
        if self.is_valid:
            self._generate_target()

    def _validate_file(self) -> bool:
        if self.candidate.is_hidden:
            self.error = "Hidden file."
            self.is_valid = False
            return False

        if not os.access(self.path_old, os.R_OK):
            self.error = "File is not readable."
            self.is_valid = False
            return False

        return True

    def _process_exif(self) -> None:
        if not self.metadata:
            self.error = "Metadata not provided or could not be read."
            self.is_valid = False
            return

        self.capture_date = self.get_capture_date()
        if self.capture_date is None:
            self.error = "No EXIF date found."
            self.is_valid = False

    def _generate_target(self) -> None:
        if self.capture_date is None:
            return
        self.subdir = self.path_gen.generate_subdir(self.capture_date)
        self.path_new = self.path_gen.generate_path(self.cfg.target_dir, self.subdir, self.name)

    @property
    def target_dir(self) -> Path | None:
        return self.path_new.parent if self.path_new is not None else None

    def get_capture_date(self) -> datetime.date | None:
        if not self.metadata:
            return None

        for tag in self.cfg.exif_date_tags:
            if tag in self.metadata:
                capture_date = parse_exif_date(self.metadata[tag])
                if capture_date is not None:
                    return capture_date
        return None
