"""Config 로더 및 로깅 설정 테스트"""

import logging

import pytest

from hair_overlay.utils import ColorLog, get_config, get_logger
from hair_overlay.utils.config_loader import Config, merge_dicts


@pytest.fixture
def custom_config(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text(
        "render:\n"
        "  style: fade\n"
        "  opacity: 40\n"
        "snapshot:\n"
        "  directory: shots\n",
        encoding="utf-8",
    )
    return path


def test_default_config_values():
    config = get_config()
    assert config.camera.width == 1280
    assert config.render.style == "buzz"
    assert config.get('controls.scale.max') == 160
    assert config.get('controls.missing.key', 'fallback') == 'fallback'


def test_singleton():
    assert get_config() is get_config()


def test_user_file_overrides_only_given_keys(custom_config):
    config = Config(str(custom_config))
    assert config.render.style == "fade"
    assert config.render.get('opacity') == 40
    # 사용자 파일에 없는 키는 기본값 유지
    assert config.render.scale == 100
    assert config.snapshot.filename == "haircut_%Y%m%d_%H%M%S.png"
    assert config.snapshot.to_dict()['directory'] == "shots"
    assert config.window.name


def test_env_var_selects_user_file(custom_config, monkeypatch):
    monkeypatch.setenv("HAIR_OVERLAY_CONFIG_PATH", str(custom_config))
    assert Config().render.style == "fade"


def test_defaults_only_without_user_file(monkeypatch):
    monkeypatch.delenv("HAIR_OVERLAY_CONFIG_PATH", raising=False)
    config = Config()
    assert config.config_path is None
    assert config.render.opacity == 85


def test_missing_key_names_full_path():
    with pytest.raises(AttributeError, match="render.nope"):
        get_config().render.nope


def test_merge_dicts_is_recursive_and_non_mutating():
    base = {'a': {'b': 1, 'c': 2}, 'd': [1, 2]}
    merged = merge_dicts(base, {'a': {'c': 3}, 'd': [9]})
    assert merged == {'a': {'b': 1, 'c': 3}, 'd': [9]}
    assert base == {'a': {'b': 1, 'c': 2}, 'd': [1, 2]}


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config(str(tmp_path / "nope.yaml"))


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("render: [unclosed\n", encoding="utf-8")
    with pytest.raises(ValueError):
        Config(str(path))


def test_non_mapping_yaml(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        Config(str(path))


def test_reload_picks_up_changes(custom_config):
    config = Config(str(custom_config))
    custom_config.write_text("render:\n  style: long\n", encoding="utf-8")
    config.reload()
    assert config.render.style == "long"
    assert config.render.opacity == 85


def test_logger_handlers_attached_once():
    package = get_logger()
    count = len(package.handlers)
    child = get_logger("hair_overlay.test_logger")
    get_logger("hair_overlay.test_logger")

    assert len(get_logger().handlers) == count >= 1
    assert child.handlers == []
    assert child.getEffectiveLevel() == logging.INFO


def test_foreign_logger_names_nest_under_package():
    assert get_logger("scratch").name == "hair_overlay.scratch"


def test_status_line_shows_tracking_time(capsys):
    ColorLog.status_line(True, "buzz", 29.97, mirror=True, track_ms=14.2)
    out = capsys.readouterr().out
    assert "Tracking" in out
    assert "30.0 fps" in out
    assert "track 14 ms" in out

    ColorLog.status_line(False, "asset", 30.0, mirror=False)
    out = capsys.readouterr().out
    assert "No face" in out and "track" not in out
