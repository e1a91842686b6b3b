import time

import pytest

from devreload.config import (
    CONFIG_ENV,
    CONFIG_FILE,
    ConfigError,
    ConfigStore,
    load_config,
    resolve_config_path,
)


def test_explicit_path_wins(tmp_path):
    target = tmp_path / "a.yaml"
    result = resolve_config_path(target, ["-c", "other.yaml"], {CONFIG_ENV: "env.yaml"})
    assert result == str(target)


def test_flag_beats_environment():
    assert resolve_config_path(None, ["-c", "flag.yaml"], {CONFIG_ENV: "env.yaml"}) == "flag.yaml"


def test_environment_beats_default():
    assert resolve_config_path(None, [], {CONFIG_ENV: "env.yaml"}) == "env.yaml"


@pytest.mark.parametrize("environ", [{}, {CONFIG_ENV: ""}])
def test_default_when_nothing_given(environ):
    assert resolve_config_path(None, [], environ) == CONFIG_FILE


def test_reload_reads_yaml(tmp_path):
    target = tmp_path / "config.yaml"
    target.write_text("zap:\n  level: debug\n  show-line: true\n", encoding="utf-8")
    store = ConfigStore(target)
    data = store.reload()
    assert data == {"zap": {"level": "debug", "show-line": True}}
    assert store.data == data


def test_reload_reads_json(tmp_path):
    target = tmp_path / "config.json"
    target.write_text('{"system": {"port": 8888}}', encoding="utf-8")
    assert ConfigStore(target).reload() == {"system": {"port": 8888}}


def test_empty_file_gives_empty_mapping(tmp_path):
    target = tmp_path / "config.yaml"
    target.write_text("", encoding="utf-8")
    assert ConfigStore(target).reload() == {}


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yaml", [], {})


def test_bad_yaml_raises(tmp_path):
    target = tmp_path / "config.yaml"
    target.write_text("key: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        ConfigStore(target).reload()


def test_non_mapping_root_raises(tmp_path):
    target = tmp_path / "config.yaml"
    target.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        ConfigStore(target).reload()


def test_unsupported_extension_raises(tmp_path):
    target = tmp_path / "config.ini"
    target.write_text("[a]\nb=1\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        ConfigStore(target).reload()


def test_load_config_uses_environment(tmp_path):
    target = tmp_path / "config.yaml"
    target.write_text("name: first\n", encoding="utf-8")
    store = load_config(None, [], {CONFIG_ENV: str(target)})
    try:
        assert store.data == {"name": "first"}
    finally:
        store.stop()


def test_watch_picks_up_changes(tmp_path):
    target = tmp_path / "config.yaml"
    target.write_text("name: first\n", encoding="utf-8")
    with load_config(target, [], {}) as store:
        time.sleep(0.3)
        target.write_text("name: second\n", encoding="utf-8")
        deadline = time.monotonic() + 5
        while store.data.get("name") != "second" and time.monotonic() < deadline:
            time.sleep(0.05)
        assert store.data == {"name": "second"}


def test_failed_reload_keeps_previous_data(tmp_path):
    target = tmp_path / "config.yaml"
    target.write_text("name: first\n", encoding="utf-8")
    store = ConfigStore(target)
    store.reload()
    target.write_text("name: [broken\n", encoding="utf-8")
    store._on_change()
    assert store.data == {"name": "first"}