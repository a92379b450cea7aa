"""
Core geometry and drawing surface package.
"""
# FaceTracker 는 mediapipe 의존성 때문에 직접 import
# (from hair_overlay.core.face_tracker import FaceTracker)

from .mirror import MirrorTransform, mirrored
from .projector import project
from .reference_frame import ReferenceFrameBuilder, build_reference_frame, head_unit
from .surface import LinearGradient, Path, Shadow, SolidPaint, Surface

__all__ = [
    'MirrorTransform', 'mirrored',
    'project',
    'ReferenceFrameBuilder', 'build_reference_frame', 'head_unit',
    'LinearGradient', 'Path', 'Shadow', 'SolidPaint', 'Surface',
]
