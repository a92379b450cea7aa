"""
Configuration Loader Module
패키지 기본 config.yaml 위에 사용자 설정 파일을 덮어써서 로드
"""
import copy
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

ENV_CONFIG_PATH = 'HAIR_OVERLAY_CONFIG_PATH'
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            f"Check the path or unset {ENV_CONFIG_PATH}."
        )
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML format in {path}: {e}")
    if not isinstance(data, dict):
        raise ValueError(f"Top level of {path} must be a mapping, got {type(data).__name__}")
    return data


def merge_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    중첩 딕셔너리 병합 (override 우선)

    양쪽 모두 dict 인 키만 재귀적으로 병합하고, 나머지는 override 값으로 교체한다.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ConfigSection:
    """중첩 딕셔너리를 속성 접근 방식으로 노출"""

    def __init__(self, data: Dict[str, Any], path: str = ""):
        self._data = data
        self._path = path

    def __getattr__(self, name: str):
        if name.startswith('_'):
            raise AttributeError(name)
        if name not in self._data:
            where = f"{self._path}.{name}" if self._path else name
            raise AttributeError(f"Config has no key '{where}'")
        value = self._data[name]
        if isinstance(value, dict):
            return ConfigSection(value, f"{self._path}.{name}" if self._path else name)
        return value

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def __repr__(self):
        return f"ConfigSection({self._path or '<root>'}: {list(self._data.keys())})"


class Config(ConfigSection):
    """
    Configuration Manager

    패키지에 포함된 config.yaml 을 기본값으로 읽고, 사용자 파일이 있으면
    그 위에 병합한다. 사용자 파일에는 바꾸고 싶은 키만 적으면 된다.

    Usage:
        config = Config("my_config.yaml")
        config.render.style            # 'fade' (사용자 값)
        config.get('camera.width')     # 1280 (기본값)
    """

    def __init__(self, config_path: Optional[str] = None, defaults_path: Optional[str] = None):
        """
        Args:
            config_path: 사용자 설정 파일 (None이면 HAIR_OVERLAY_CONFIG_PATH, 없으면 기본값만)
            defaults_path: 기본 설정 파일 (None이면 패키지의 config.yaml)
        """
        if config_path is None and os.environ.get(ENV_CONFIG_PATH):
            config_path = os.environ[ENV_CONFIG_PATH]

        self.defaults_path = Path(defaults_path) if defaults_path else DEFAULT_CONFIG_PATH
        self.config_path = Path(config_path) if config_path else None
        super().__init__({})
        self._load_config()

    def _load_config(self):
        data = _read_yaml(self.defaults_path)
        if self.config_path is not None:
            data = merge_dicts(data, _read_yaml(self.config_path))
        self._data = data

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        점(.) 구분 경로로 값 가져오기

        Example:
            >>> config.get('controls.scale.max')
            160
        """
        value: Any = self._data
        for key in key_path.split('.'):
            if not isinstance(value, dict) or key not in value:
                return default
            value = value[key]
        return value

    def reload(self):
        """설정 파일 다시 로드"""
        self._load_config()

    def __repr__(self):
        return f"Config(defaults={self.defaults_path}, path={self.config_path})"


_global_config: Optional[Config] = None


def get_config() -> Config:
    """전역 Config 인스턴스 (Singleton)"""
    global _global_config

    if _global_config is None:
        _global_config = Config()

    return _global_config


def reload_config():
    """전역 설정 다시 로드"""
    global _global_config
    if _global_config is not None:
        _global_config.reload()
