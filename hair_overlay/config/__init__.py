"""Configuration layer"""

from .constants import ANCHOR_INDICES, HEAD_UNIT_FLOOR
from .settings import ControlBounds, ControlState, RenderConfig, TrackerConfig

__all__ = [
    'ANCHOR_INDICES',
    'HEAD_UNIT_FLOOR',
    'ControlBounds',
    'ControlState',
    'RenderConfig',
    'TrackerConfig',
]
