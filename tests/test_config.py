"""Tests covering configuration layering."""

from __future__ import annotations

import pytest

from framecount.config import ENV_CONFIG_VAR, ENV_LOG_LEVEL_VAR, RunConfig, load_config
from framecount.errors import ConfigError, SetupFailure


def test_defaults() -> None:
    config = load_config("clip.mp4", environ={})

    assert config.path == "clip.mp4"
    assert config.pipeline_name == "framecount"
    assert config.log_level == "INFO"
    assert config.log_format is None


def test_yaml_file_and_env_override(tmp_path) -> None:
    config_file = tmp_path / "framecount.yaml"
    config_file.write_text("pipeline_name: probe\nlog_level: warning\n")

    config = load_config(
        "clip.mp4",
        environ={ENV_CONFIG_VAR: str(config_file), ENV_LOG_LEVEL_VAR: "debug"},
    )

    assert config.pipeline_name == "probe"
    assert config.log_level == "DEBUG"


def test_command_line_path_wins_over_file(tmp_path) -> None:
    config_file = tmp_path / "framecount.yaml"
    config_file.write_text("path: other.mp4\n")

    config = load_config("clip.mp4", environ={ENV_CONFIG_VAR: str(config_file)})

    assert config.path == "clip.mp4"


@pytest.mark.parametrize("content", ["- a\n- b\n", "log_level: [unterminated\n", "colour: blue\n"])
def test_bad_config_file_is_rejected(tmp_path, content) -> None:
    config_file = tmp_path / "framecount.yaml"
    config_file.write_text(content)

    with pytest.raises(ConfigError):
        load_config("clip.mp4", environ={ENV_CONFIG_VAR: str(config_file)})


def test_missing_config_file_is_rejected(tmp_path) -> None:
    with pytest.raises(SetupFailure):
        load_config("clip.mp4", environ={ENV_CONFIG_VAR: str(tmp_path / "absent.yaml")})


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ConfigError):
        load_config("clip.mp4", environ={ENV_LOG_LEVEL_VAR: "chatty"})


def test_blank_path_is_rejected() -> None:
    with pytest.raises(ConfigError):
        load_config("   ", environ={})


def test_path_is_kept_verbatim() -> None:
    assert RunConfig(path="clip.mp4 ").path == "clip.mp4 "
    assert load_config(" clip.mp4", environ={}).path == " clip.mp4"
