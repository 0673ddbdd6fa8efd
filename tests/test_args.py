"""
Tests for argument parsing and settings merging in args.py
"""
from pathlib import Path
from unittest.mock import patch

import pytest

from phototool.args import (
    ConfigError,
    coerce_setting,
    get_config,
    get_default_info,
    get_default_value,
    get_env_settings,
    load_config_file,
    merge_settings,
    parse_bool,
    resolve_config_file,
)
from phototool.models import AppConfig


@pytest.fixture(autouse=True)
def no_home_config(tmp_path):
    """Keep a real ~/.photo-tool.toml out of the tests."""
    with patch("phototool.args.get_default_config_path", return_value=tmp_path / "absent.toml"):
        yield


def test_get_default_value():
    assert get_default_value("depth") == 1
    assert get_default_value("preview") is False
    assert get_default_value("extensions") == ("jpg", "jpeg")
    assert get_default_value("max_depth") == 100


def test_get_default_info():
    result = get_default_info("test_value")
    assert "default:" in result
    assert "test_value" in result


def test_get_config_defaults():
    """Without flags, config file or environment the AppConfig defaults apply."""
    cfg = get_config([], environ={})
    assert isinstance(cfg, AppConfig)
    assert cfg.source_dir is None
    assert cfg.target_dir == Path(".").absolute()
    assert cfg.extensions == ("jpg", "jpeg")
    assert cfg.depth == 1
    assert cfg.preview is False
    assert cfg.config_file is None


def test_get_config_flags(tmp_path):
    argv = ["-p", str(tmp_path), "-t", str(tmp_path / "out"), "-d", "0", "--preview"]
    cfg = get_config(argv, environ={})
    assert cfg.source_dir == tmp_path
    assert cfg.target_dir == tmp_path / "out"
    assert cfg.depth == 0
    assert cfg.preview is True


def test_get_config_repeatable_extensions():
    cfg = get_config(["-e", "JPG", "-e", ".png", "--ext", "Jpeg"], environ={})
    assert cfg.extensions == ("jpg", "png", "jpeg")


@patch("sys.argv", ["photo-tool", "-V", "-q", "-v"])
def test_get_config_reads_sys_argv():
    cfg = get_config(environ={})
    assert cfg.verbose is True
    assert cfg.quiet is True
    assert cfg.show_version is True


def test_get_config_rejects_non_integer_depth():
    with pytest.raises(SystemExit) as exc_info:
        get_config(["-d", "deep"], environ={})
    assert exc_info.value.code == 2


# --- config file ---

def write_config(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_config_file(tmp_path):
    path = write_config(
        tmp_path / "cfg.toml",
        'path = "/photos"\ntarget = "/sorted"\next = ["jpg", "heic"]\ndepth = 0\npreview = true\nother = 1\n',
    )
    settings = load_config_file(path)
    assert settings == {
        "path": "/photos",
        "target": "/sorted",
        "ext": ["jpg", "heic"],
        "depth": 0,
        "preview": True,
    }


def test_load_config_file_missing(tmp_path):
    with pytest.raises(ConfigError, match="Cannot read config file"):
        load_config_file(tmp_path / "missing.toml")


def test_load_config_file_invalid_toml(tmp_path):
    path = write_config(tmp_path / "bad.toml", "depth = = 2\n")
    with pytest.raises(ConfigError, match="Invalid config file"):
        load_config_file(path)


def test_load_config_file_wrong_type(tmp_path):
    path = write_config(tmp_path / "bad.toml", "depth = true\n")
    with pytest.raises(ConfigError, match="Invalid depth"):
        load_config_file(path)


def test_get_config_uses_config_file(tmp_path, capsys):
    path = write_config(tmp_path / "cfg.toml", f'path = "{tmp_path.as_posix()}"\ndepth = 3\n')
    cfg = get_config(["--config", str(path)], environ={})
    assert cfg.source_dir == tmp_path
    assert cfg.depth == 3
    assert cfg.config_file == path
    assert "Using config file" in capsys.readouterr().out


def test_get_config_explicit_missing_config_is_fatal(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        get_config(["--config", str(tmp_path / "missing.toml")], environ={})
    assert exc_info.value.code == 1
    assert "Error" in capsys.readouterr().out


def test_resolve_config_file_default_home(tmp_path):
    home_cfg = write_config(tmp_path / ".photo-tool.toml", "depth = 2\n")
    with patch("phototool.args.get_default_config_path", return_value=home_cfg):
        assert resolve_config_file(None) == home_cfg
        cfg = get_config(["-q"], environ={})
    assert cfg.depth == 2


def test_resolve_config_file_absent_default():
    assert resolve_config_file(None) is None


# --- environment ---

def test_get_env_settings():
    env = {
        "PHOTO_TOOL_PATH": "/photos",
        "PHOTO_TOOL_EXT": "jpg,PNG",
        "PHOTO_TOOL_DEPTH": "0",
        "PHOTO_TOOL_PREVIEW": "yes",
        "PATH": "/usr/bin",
    }
    assert get_env_settings(env) == {
        "path": "/photos",
        "ext": ["jpg", "PNG"],
        "depth": 0,
        "preview": True,
    }


def test_get_env_settings_invalid_depth():
    with pytest.raises(ConfigError, match="PHOTO_TOOL_DEPTH"):
        get_env_settings({"PHOTO_TOOL_DEPTH": "two"})


def test_get_config_invalid_env_is_fatal():
    with pytest.raises(SystemExit) as exc_info:
        get_config([], environ={"PHOTO_TOOL_PREVIEW": "maybe"})
    assert exc_info.value.code == 1


# --- precedence ---

def test_precedence_flags_over_env_over_file(tmp_path):
    path = write_config(tmp_path / "cfg.toml", 'depth = 5\ntarget = "/from-file"\next = ["gif"]\n')
    env = {"PHOTO_TOOL_DEPTH": "4", "PHOTO_TOOL_TARGET": "/from-env"}

    cfg = get_config(["--config", str(path), "-q", "-d", "3"], environ=env)

    assert cfg.depth == 3
    assert cfg.target_dir == Path("/from-env")
    assert cfg.extensions == ("gif",)


def test_preview_flag_absent_keeps_env_value():
    cfg = get_config([], environ={"PHOTO_TOOL_PREVIEW": "1"})
    assert cfg.preview is True


def test_merge_settings_ignores_none():
    assert merge_settings({"depth": 2}, {"depth": None, "preview": True}) == {
        "depth": 2,
        "preview": True,
    }


@pytest.mark.parametrize("value, expected", [
    (True, True),
    ("TRUE", True),
    ("on", True),
    ("0", False),
    ("no", False),
    ("", False),
])
def test_parse_bool(value, expected):
    assert parse_bool(value, "x") is expected


def test_parse_bool_invalid():
    with pytest.raises(ConfigError):
        parse_bool(3, "x")


def test_coerce_setting_rejects_bad_path():
    with pytest.raises(ConfigError, match="Invalid path"):
        coerce_setting("path", 12, "cfg:path")


def test_coerce_setting_rejects_bad_ext():
    with pytest.raises(ConfigError, match="Invalid extension list"):
        coerce_setting("ext", ["jpg", 1], "cfg:ext")
