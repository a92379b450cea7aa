"""
Hair Overlay
MediaPipe FaceMesh 랜드마크 기반 실시간 헤어스타일 오버레이
"""

__version__ = "0.1.0"

from .config.settings import ControlState, RenderConfig
from .core.surface import Surface
from .models import HairStyle, ReferenceFrame, TrackingState
from .processing.frame_orchestrator import FrameOrchestrator

__all__ = [
    'ControlState',
    'RenderConfig',
    'Surface',
    'HairStyle',
    'ReferenceFrame',
    'TrackingState',
    'FrameOrchestrator',
]
