import importlib

import pytest

from ratingmatrix.utils import config as cfg


@pytest.fixture()
def reload_config(tmp_path, monkeypatch):
    """Reload utils.config after patching HOME/XDG directories.

    Ensures CONFIG_DIR/FILE constants are recalculated for a temporary home dir
    so tests do not interfere with the real user config.
    """
    fake_home = tmp_path / "home"
    fake_home.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    importlib.reload(cfg)
    return fake_home


def test_env_var_name():
    assert cfg.env_var_name("request.timeout") == "RATINGMATRIX_REQUEST_TIMEOUT"


def test_resolve_setting_cli_over_env_over_config(reload_config, monkeypatch):
    monkeypatch.setenv("RATINGMATRIX_FOO", "from-env")
    cfg.CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    cfg.CONFIG_FILE.write_text('foo = "from-config"\n')

    result = cfg.resolve_setting("foo", default="default", cli_value="from-cli")
    assert result == "from-cli"


def test_resolve_setting_env_over_config(reload_config, monkeypatch):
    monkeypatch.setenv("RATINGMATRIX_BAR", "from-env")
    cfg.CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    cfg.CONFIG_FILE.write_text('bar = "from-config"\n')

    assert cfg.resolve_setting("bar", default="default") == "from-env"


def test_resolve_setting_config_when_no_env(reload_config):
    cfg.CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    cfg.CONFIG_FILE.write_text('baz = "from-config"\n')

    assert cfg.resolve_setting("baz", default="default") == "from-config"


def test_resolve_setting_default_when_missing(reload_config):
    assert cfg.resolve_setting("missing", default="default-value") == "default-value"


def test_resolve_timeout_env_is_float(reload_config, monkeypatch):
    monkeypatch.setenv("RATINGMATRIX_REQUEST_TIMEOUT", "7.5")
    assert cfg.resolve_setting("request.timeout", default=15.0) == 7.5


def test_resolve_retries_from_nested_config(reload_config):
    cfg.CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    cfg.CONFIG_FILE.write_text("[request]\nretries = 4\n")
    assert cfg.resolve_setting("request.retries", default=2) == 4


def test_resolve_bool_env(reload_config, monkeypatch):
    monkeypatch.setenv("RATINGMATRIX_OUTPUT_COMPACT", "yes")
    assert cfg.resolve_setting("output.compact", default=False) is True


def test_resolve_untyped_default_infers_number(reload_config, monkeypatch):
    monkeypatch.setenv("RATINGMATRIX_REQUEST_RETRIES", "3")
    assert cfg.resolve_setting("request.retries", default=None) == 3


def test_resolve_invalid_int_env_falls_back(reload_config, monkeypatch):
    monkeypatch.setenv("RATINGMATRIX_REQUEST_RETRIES", "notanint")
    assert cfg.resolve_setting("request.retries", default=2) == 2


def test_resolve_invalid_float_config_falls_back(reload_config):
    cfg.CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    cfg.CONFIG_FILE.write_text('[request]\ntimeout = "soon"\n')
    assert cfg.resolve_setting("request.timeout", default=15.0) == 15.0
