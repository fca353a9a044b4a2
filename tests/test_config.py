"""
Tests for bm/config.py configuration management.

Tests the hierarchical configuration system with sensible defaults,
including file loading, environment variables, and saving.
"""
import pytest
import tomli
from pathlib import Path

from bm.config import BmConfig, get_config, init_config


class TestBmConfigDefaults:
    """Test default configuration values."""

    def test_default_database(self):
        assert BmConfig().database == "./bm.sqlite"

    def test_default_separator(self):
        assert BmConfig().separator == "|"

    def test_default_output_format_is_plain(self):
        assert BmConfig().output_format == "plain"

    def test_default_echo_is_off(self):
        assert BmConfig().database_echo is False

    def test_default_color_output_is_true(self):
        assert BmConfig().color_output is True


class TestConfigLoading:
    """Test configuration loading from files."""

    def test_load_defaults_when_no_files_exist(self, clean_bm_env):
        config = BmConfig.load()

        assert config.database == "./bm.sqlite"
        assert config.output_format == "plain"

    def test_load_from_local_bm_toml(self, clean_bm_env):
        (clean_bm_env / "bm.toml").write_text('database = "custom.sqlite"\nseparator = ","\n')

        config = BmConfig.load()

        assert config.database == "custom.sqlite"
        assert config.separator == ","

    def test_load_from_bmrc(self, clean_bm_env):
        (clean_bm_env / ".bmrc").write_text('database = "bmrc.sqlite"\n')

        assert BmConfig.load().database == "bmrc.sqlite"

    def test_load_from_user_config_file(self, clean_bm_env):
        user_config = clean_bm_env / "home" / ".config" / "bm" / "config.toml"
        user_config.parent.mkdir(parents=True)
        user_config.write_text('database = "user.sqlite"\noutput_format = "table"\n')

        config = BmConfig.load()

        assert config.database == "user.sqlite"
        assert config.output_format == "table"

    def test_local_config_overrides_user_config(self, clean_bm_env):
        user_config = clean_bm_env / "home" / ".config" / "bm" / "config.toml"
        user_config.parent.mkdir(parents=True)
        user_config.write_text('database = "user.sqlite"\nseparator = ";"\n')
        (clean_bm_env / "bm.toml").write_text('database = "local.sqlite"\n')

        config = BmConfig.load()

        assert config.database == "local.sqlite"
        assert config.separator == ";"

    def test_explicit_config_file_overrides_all(self, clean_bm_env):
        (clean_bm_env / "bm.toml").write_text('database = "local.sqlite"\n')
        explicit = clean_bm_env / "explicit.toml"
        explicit.write_text('database = "explicit.sqlite"\n')

        assert BmConfig.load(config_file=explicit).database == "explicit.sqlite"

    def test_unknown_keys_ignored(self, clean_bm_env):
        (clean_bm_env / "bm.toml").write_text('page_size = 50\n')

        config = BmConfig.load()

        assert not hasattr(config, "page_size")

    def test_home_is_expanded(self, clean_bm_env):
        (clean_bm_env / "bm.toml").write_text('database = "~/bm.sqlite"\n')

        config = BmConfig.load()

        assert config.database == str(clean_bm_env / "home" / "bm.sqlite")

    def test_memory_database_not_expanded(self, clean_bm_env):
        (clean_bm_env / "bm.toml").write_text('database = ":memory:"\n')

        assert BmConfig.load().database == ":memory:"


class TestEnvironmentVariables:
    """Test environment variable overrides."""

    def test_env_var_overrides_file_config(self, clean_bm_env, monkeypatch):
        (clean_bm_env / "bm.toml").write_text('database = "local.sqlite"\n')
        monkeypatch.setenv("BM_DATABASE", "env.sqlite")

        assert BmConfig.load().database == "env.sqlite"

    @pytest.mark.parametrize("value,expected", [
        ("true", True), ("1", True), ("yes", True), ("false", False), ("0", False),
    ])
    def test_boolean_env_vars(self, clean_bm_env, monkeypatch, value, expected):
        monkeypatch.setenv("BM_DATABASE_ECHO", value)

        assert BmConfig.load().database_echo is expected

    def test_unknown_env_var_ignored(self, clean_bm_env, monkeypatch):
        monkeypatch.setenv("BM_UNKNOWN_SETTING", "value")

        assert not hasattr(BmConfig.load(), "unknown_setting")


class TestConfigSaving:
    """Test configuration saving."""

    def test_save_to_explicit_path(self, clean_bm_env):
        config = BmConfig(database="saved.sqlite", separator=",")
        path = config.save(clean_bm_env / "out" / "config.toml")

        with open(path, "rb") as f:
            data = tomli.load(f)

        assert data["database"] == "saved.sqlite"
        assert data["separator"] == ","

    def test_save_defaults_to_user_config(self, clean_bm_env):
        path = BmConfig().save()

        assert path == clean_bm_env / "home" / ".config" / "bm" / "config.toml"
        assert path.exists()

    def test_saved_config_loads_back(self, clean_bm_env):
        BmConfig(database="roundtrip.sqlite").save()

        assert BmConfig.load().database == "roundtrip.sqlite"


class TestGlobalConfig:
    """Test get_config() and init_config()."""

    def test_get_config_is_cached(self, clean_bm_env):
        assert get_config(reload=True) is get_config()

    def test_reload_reads_files_again(self, clean_bm_env):
        get_config(reload=True)
        (clean_bm_env / "bm.toml").write_text('database = "later.sqlite"\n')

        assert get_config(reload=True).database == "later.sqlite"

    def test_init_config_overrides(self, clean_bm_env):
        config = init_config(database="cli.sqlite", separator=",", reload=True)

        assert config.database == "cli.sqlite"
        assert config.separator == ","

    def test_init_config_ignores_none(self, clean_bm_env):
        config = init_config(separator=None, reload=True)

        assert config.separator == "|"

    def test_init_config_with_file(self, clean_bm_env):
        explicit = clean_bm_env / "explicit.toml"
        explicit.write_text('output_format = "table"\n')

        assert init_config(config_file=Path(explicit)).output_format == "table"
