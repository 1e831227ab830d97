"""Tests for gmwrap.config: YAML settings, overrides and profiles."""
from __future__ import annotations

import pytest

from gmwrap.config import BINARY_ENV_VAR, Settings, load_config, resolve_binary, resolve_profile
from gmwrap.options import Bare


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "gmwrap.yaml"
    path.write_text(
        "binary: gm-custom\n"
        "strict: false\n"
        "check_exit_status: true\n"
        "profiles:\n"
        "  thumb:\n"
        "    description: tiny\n"
        "    options: [\"thumbnail=64,64\", strip]\n",
        encoding="utf-8",
    )
    return path


class TestLoadConfig:
    def test_defaults_when_missing(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == Settings()

    def test_defaults_without_path(self):
        assert load_config() == Settings()

    def test_reads_yaml(self, config_file):
        settings = load_config(config_file)
        assert settings.binary == "gm-custom"
        assert settings.strict is False
        assert settings.check_exit_status is True
        profile = settings.profiles["thumb"]
        assert profile.description == "tiny"
        assert [option.render() for option in profile.options] == ['-thumbnail "64x64"', "-strip"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == Settings()

    def test_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- gm\n", encoding="utf-8")
        with pytest.raises(ValueError, match="must be a mapping"):
            load_config(path)

    def test_rejects_string_options(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("profiles:\n  p:\n    options: strip\n", encoding="utf-8")
        with pytest.raises(ValueError, match="iterable 'options'"):
            load_config(path)

    def test_rejects_unknown_profile_option(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("profiles:\n  p:\n    options: [sparkle]\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Unknown option"):
            load_config(path)

    def test_environment_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv(BINARY_ENV_VAR, "gm-from-env")
        assert load_config(config_file).binary == "gm-from-env"

    def test_explicit_binary_overrides_environment(self, config_file, monkeypatch):
        monkeypatch.setenv(BINARY_ENV_VAR, "gm-from-env")
        assert load_config(config_file, binary="gm-explicit").binary == "gm-explicit"


class TestResolve:
    def test_binary_found_on_path(self, monkeypatch):
        monkeypatch.setattr("gmwrap.config.shutil.which", lambda name: f"/usr/local/bin/{name}")
        assert resolve_binary(Settings()) == "/usr/local/bin/gm"

    def test_binary_not_found_keeps_name(self):
        assert resolve_binary(Settings(binary="gm")) == "gm"

    def test_profile(self, config_file):
        settings = load_config(config_file)
        assert resolve_profile("thumb", settings).options[1] == Bare("-strip")

    def test_unknown_profile(self, config_file):
        with pytest.raises(KeyError, match="Available profiles: thumb"):
            resolve_profile("huge", load_config(config_file))


class TestConfigValidation:
    @pytest.mark.parametrize("key", ["strict", "check_exit_status"])
    def test_rejects_non_boolean_flags(self, tmp_path, key):
        path = tmp_path / "flags.yaml"
        path.write_text(f'{key}: "false"\n', encoding="utf-8")
        with pytest.raises(ValueError, match=f"'{key}' must be true or false"):
            load_config(path)

    def test_accepts_boolean_flags(self, tmp_path):
        path = tmp_path / "flags.yaml"
        path.write_text("strict: false\ncheck_exit_status: true\n", encoding="utf-8")
        settings = load_config(path)
        assert settings.strict is False
        assert settings.check_exit_status is True

    def test_invalid_yaml_is_a_value_error(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("binary: [unclosed\n", encoding="utf-8")
        with pytest.raises(ValueError, match="not valid YAML"):
            load_config(path)
