"""
Tests for the settings loader.
"""

import textwrap
from pathlib import Path

import pytest

from starterkit.core.config.loader import CONFIG_FILE, ConfigError, Settings, find_config_file, load_settings


class TestDefaults:
    def test_no_file_no_env(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = load_settings(environ={})
        assert settings == Settings()
        assert settings.package_manager == "pnpm"
        assert settings.command_timeout == 300
        assert settings.min_git_tuple == (2, 31, 0)


class TestFile:
    def test_flat_file(self, tmp_path: Path):
        config = tmp_path / CONFIG_FILE
        config.write_text("command_timeout: 60\npackage_manager: npm\n")
        settings = load_settings(config, environ={})
        assert settings.command_timeout == 60
        assert settings.package_manager == "npm"

    def test_nested_under_key(self, tmp_path: Path):
        config = tmp_path / CONFIG_FILE
        config.write_text(textwrap.dedent("""\
            starterkit:
              min_node_major: 20
        """))
        assert load_settings(config, environ={}).min_node_major == 20

    def test_empty_file(self, tmp_path: Path):
        config = tmp_path / CONFIG_FILE
        config.write_text("")
        assert load_settings(config, environ={}) == Settings()

    def test_found_walking_up(self, tmp_path: Path, monkeypatch):
        (tmp_path / CONFIG_FILE).write_text("command_timeout: 42\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert find_config_file() == (tmp_path / CONFIG_FILE).resolve()
        assert load_settings(environ={}).command_timeout == 42

    def test_explicit_missing(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "absent.yml", environ={})

    def test_invalid_yaml(self, tmp_path: Path):
        config = tmp_path / CONFIG_FILE
        config.write_text("command_timeout: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(config, environ={})

    def test_not_a_mapping(self, tmp_path: Path):
        config = tmp_path / CONFIG_FILE
        config.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(config, environ={})

    def test_empty_nested_section(self, tmp_path: Path):
        config = tmp_path / CONFIG_FILE
        config.write_text("starterkit:\n")
        assert load_settings(config, environ={}) == Settings()

    @pytest.mark.parametrize("body", ["starterkit: 5\n", "starterkit: [a, b]\n", "starterkit: text\n"])
    def test_nested_section_not_a_mapping(self, tmp_path: Path, body: str):
        config = tmp_path / CONFIG_FILE
        config.write_text(body)
        with pytest.raises(ConfigError, match="mapping under 'starterkit'"):
            load_settings(config, environ={})

    def test_invalid_value(self, tmp_path: Path):
        config = tmp_path / CONFIG_FILE
        config.write_text("command_timeout: -1\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(config, environ={})

    def test_bad_git_version(self, tmp_path: Path):
        config = tmp_path / CONFIG_FILE
        config.write_text("min_git_version: two.thirty\n")
        with pytest.raises(ConfigError):
            load_settings(config, environ={})


class TestEnvironment:
    def test_override_beats_file(self, tmp_path: Path):
        config = tmp_path / CONFIG_FILE
        config.write_text("command_timeout: 60\n")
        settings = load_settings(config, environ={"STARTERKIT_COMMAND_TIMEOUT": "90"})
        assert settings.command_timeout == 90

    def test_config_env_var(self, tmp_path: Path):
        config = tmp_path / "custom.yml"
        config.write_text("test_projects_dir: /tmp/scenarios\n")
        settings = load_settings(environ={"STARTERKIT_CONFIG": str(config)})
        assert settings.test_projects_dir == "/tmp/scenarios"

    def test_config_env_var_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="STARTERKIT_CONFIG"):
            load_settings(environ={"STARTERKIT_CONFIG": str(tmp_path / "gone.yml")})
