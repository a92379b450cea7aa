"""
Logging configuration module for hair overlay.
핸들러는 패키지 루트 로거('hair_overlay')에 한 번만 붙이고,
모듈 로거는 propagate 로 그 핸들러를 공유한다.
"""
import logging
import logging.handlers
from pathlib import Path

from .config_loader import get_config

PACKAGE_LOGGER = 'hair_overlay'


def _level(name: str, fallback: int) -> int:
    return getattr(logging, str(name).upper(), fallback)


def setup_logging() -> logging.Logger:
    """
    패키지 루트 로거 설정 (여러 번 호출해도 핸들러는 한 번만 추가)

    Returns:
        logging.Logger: 'hair_overlay' 로거
    """
    root = logging.getLogger(PACKAGE_LOGGER)
    if root.handlers:
        return root

    settings = get_config().logging
    root.setLevel(_level(settings.level, logging.INFO))
    formatter = logging.Formatter(settings.format, datefmt=settings.date_format)

    if settings.console.enabled:
        console = logging.StreamHandler()
        console.setLevel(_level(settings.console.level, logging.INFO))
        console.setFormatter(formatter)
        root.addHandler(console)

    if settings.file.enabled:
        log_dir = Path(settings.file.directory)
        log_dir.mkdir(parents=True, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            log_dir / settings.file.filename,
            maxBytes=settings.file.max_bytes,
            backupCount=settings.file.backup_count,
            encoding='utf-8'
        )
        rotating.setLevel(_level(settings.file.level, logging.DEBUG))
        rotating.setFormatter(formatter)
        root.addHandler(rotating)

    if not root.handlers:
        root.addHandler(logging.NullHandler())

    return root


def get_logger(name: str = None) -> logging.Logger:
    """
    모듈 로거 가져오기

    Args:
        name: 로거 이름 (일반적으로 __name__). 패키지 밖 이름도 'hair_overlay.' 아래로 둔다.
    """
    setup_logging()
    if not name or name == PACKAGE_LOGGER:
        return logging.getLogger(PACKAGE_LOGGER)
    if not name.startswith(PACKAGE_LOGGER + '.'):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
