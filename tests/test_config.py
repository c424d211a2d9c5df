"""Tests for Config loading: defaults, YAML file and environment overrides."""

import pytest

from notebook_sync.config import Config
from notebook_sync.errors import InvalidDelimiterError
from notebook_sync.notebooks.line_index import DEFAULT_CELL_DELIMITER

ENV_KEYS = (
    "NOTEBOOK_SYNC_CELL_DELIMITER",
    "NOTEBOOK_SYNC_LANGUAGE",
    "NOTEBOOK_SYNC_LOG_LEVEL",
    "NOTEBOOK_SYNC_LOG_FILE",
)


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_defaults():
    config = Config.load()

    assert config.CELL_DELIMITER == DEFAULT_CELL_DELIMITER
    assert config.LANGUAGE == "ipynb"
    assert config.LOG_LEVEL == "INFO"
    assert config.LOG_FILE is None


def test_yaml_in_working_directory(isolated):
    (isolated / ".notebook_sync.yaml").write_text(
        'cell_delimiter: "#SPLIT\\n"\nlanguage: py\nlog_level: debug\n',
        encoding="utf-8",
    )

    config = Config.load()

    assert config.CELL_DELIMITER == "#SPLIT\n"
    assert config.LANGUAGE == "py"
    assert config.LOG_LEVEL == "DEBUG"


def test_yml_extension_is_found(isolated):
    (isolated / ".notebook_sync.yml").write_text("language: py\n", encoding="utf-8")
    assert Config.load().LANGUAGE == "py"


def test_env_overrides_yaml(isolated, monkeypatch):
    path = isolated / "custom.yaml"
    path.write_text("language: py\nlog_level: WARNING\n", encoding="utf-8")
    monkeypatch.setenv("NOTEBOOK_SYNC_LANGUAGE", "ipython")

    config = Config.load(str(path))

    assert config.LANGUAGE == "ipython"
    assert config.LOG_LEVEL == "WARNING"


def test_escaped_newline_in_env(monkeypatch):
    monkeypatch.setenv("NOTEBOOK_SYNC_CELL_DELIMITER", "#CELL\\n")
    assert Config().CELL_DELIMITER == "#CELL\n"


def test_invalid_delimiter_fails_at_load(monkeypatch):
    monkeypatch.setenv("NOTEBOOK_SYNC_CELL_DELIMITER", "#CELL")
    with pytest.raises(InvalidDelimiterError):
        Config()


def test_invalid_yaml_falls_back_to_defaults(isolated):
    (isolated / ".notebook_sync.yaml").write_text("language: [unclosed\n", encoding="utf-8")
    assert Config.load().LANGUAGE == "ipynb"


def test_non_mapping_yaml_ignored(isolated):
    (isolated / ".notebook_sync.yaml").write_text("- a\n- b\n", encoding="utf-8")
    assert Config.load().LANGUAGE == "ipynb"


def test_missing_explicit_path_uses_defaults(isolated):
    (isolated / ".notebook_sync.yaml").write_text("language: py\n", encoding="utf-8")

    config = Config.load(str(isolated / "nope.yaml"))

    assert config.LANGUAGE == "ipynb"
