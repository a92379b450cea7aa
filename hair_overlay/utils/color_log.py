# -*- coding: utf-8 -*-
"""
Color Log Utility
라이브 앱의 중요 이벤트와 한 줄 상태 표시만 컬러로 출력 (상세 로그는 logging)
"""

import sys
from datetime import datetime


class ColorLog:
    """
    컬러 콘솔 출력

    - 이벤트: 타임스탬프 + 아이콘 + 메시지
    - status_line: 같은 줄을 덮어쓰는 실시간 상태
    """

    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    CYAN = '\033[96m'
    RESET = '\033[0m'
    BOLD = '\033[1m'

    STATUS_WIDTH = 100

    @staticmethod
    def timestamp() -> str:
        return datetime.now().strftime("%H:%M:%S")

    @classmethod
    def _emit(cls, color: str, icon: str, msg: str):
        # 상태 줄이 떠 있으면 먼저 지움
        cls.clear_line()
        print(f"{color}{icon} [{cls.timestamp()}] {msg}{cls.RESET}")

    @classmethod
    def success(cls, msg: str):
        cls._emit(cls.GREEN, "✅", msg)

    @classmethod
    def warning(cls, msg: str):
        cls._emit(cls.YELLOW, "⚠️ ", msg)

    @classmethod
    def error(cls, msg: str):
        cls._emit(cls.RED, "❌", msg)

    @classmethod
    def event(cls, msg: str):
        cls._emit(cls.CYAN, "📷", msg)

    @classmethod
    def header(cls, title: str):
        print(f"\n{cls.BOLD}{cls.CYAN}═══ {title} ═══{cls.RESET}\n")

    @classmethod
    def status_line(cls, tracking: bool, style: str, fps: float, mirror: bool,
                    track_ms: float = None):
        """
        실시간 상태 한 줄 (같은 줄 덮어쓰기)

        Args:
            tracking: 얼굴 추적 중 여부
            style: 스타일 이름 (에셋 모드면 'asset')
            fps: 현재 FPS
            mirror: 미러 모드 여부
            track_ms: 랜드마크 추적에 걸린 시간 (ms)
        """
        face = f"{cls.GREEN}Tracking{cls.CYAN}" if tracking else f"{cls.YELLOW}No face{cls.CYAN}"
        line = f"[{cls.timestamp()}] {face} | {style} | mirror {'on' if mirror else 'off'} | {fps:.1f} fps"
        if track_ms is not None:
            line += f" | track {track_ms:.0f} ms"
        sys.stdout.write(f"\r{cls.CYAN}{line}{cls.RESET}")
        sys.stdout.flush()

    @classmethod
    def clear_line(cls):
        sys.stdout.write('\r' + ' ' * cls.STATUS_WIDTH + '\r')
        sys.stdout.flush()
