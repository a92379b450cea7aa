"""라이브 앱 키 처리 / CLI 인자 테스트"""

import numpy as np
import pytest

pytest.importorskip("mediapipe")

from hair_overlay.app import (  # noqa: E402
    OverlayApp,
    build_parser,
    controls_from_args,
    draw_status,
    handle_key,
    main,
)
from hair_overlay.config.settings import ControlState  # noqa: E402
from hair_overlay.models import FrameResult, TrackingState  # noqa: E402
from hair_overlay.utils.exceptions import CameraError  # noqa: E402


@pytest.mark.parametrize("key, style", [
    ('1', "none"), ('2', "buzz"), ('3', "fade"), ('4', "fringe"), ('5', "pompadour"), ('6', "long"),
])
def test_number_keys_select_style(key, style):
    controls = handle_key(ControlState(use_asset=True), ord(key))
    assert controls.style == style
    assert controls.use_asset is False


@pytest.mark.parametrize("key, field, expected", [
    ('m', 'mirror', False),
    ('a', 'use_asset', True),
    ('+', 'scale_pct', 105),
    ('=', 'scale_pct', 105),
    ('-', 'scale_pct', 95),
    (']', 'opacity_pct', 90),
    ('[', 'opacity_pct', 80),
    ('j', 'offset_x', -5),
    ('l', 'offset_x', 5),
    ('i', 'offset_y', -5),
    ('k', 'offset_y', 5),
])
def test_adjustment_keys(key, field, expected):
    controls = handle_key(ControlState(), ord(key))
    assert getattr(controls, field) == expected


def test_color_key_cycles_palette():
    controls = ControlState.from_config()
    assert handle_key(controls, ord('c')).color == controls.bounds.colors[1]


def test_unknown_key_keeps_state():
    controls = ControlState()
    assert handle_key(controls, 255) is controls


def test_controls_from_args():
    args = build_parser().parse_args(
        ["--style", "long", "--color", "#000", "--opacity", "40", "--scale", "130", "--no-mirror"]
    )
    controls = controls_from_args(args, ControlState())
    assert controls.style == "long"
    assert controls.color == "#000"
    assert controls.opacity_pct == 40
    assert controls.scale_pct == 130
    assert controls.mirror is False


def test_controls_from_args_keeps_defaults():
    base = ControlState(style="fade")
    assert controls_from_args(build_parser().parse_args([]), base) == base


def test_draw_status_does_not_resize():
    image = np.zeros((120, 320, 3), dtype=np.uint8)
    result = FrameResult(tracking=TrackingState.NO_FACE, note="Move into frame")
    out = draw_status(image, result, ControlState())
    assert out.shape == (120, 320, 3)
    assert out.any()


def test_main_reports_missing_image(tmp_path):
    assert main(["--image", str(tmp_path / "missing.jpg")]) == 1


class _FixedTracker:
    """항상 같은 랜드마크를 돌려주는 트래커 대역"""

    def __init__(self, landmarks, elapsed_ms=12.5):
        self.landmarks = landmarks
        self.last_processing_time = elapsed_ms

    def track(self, frame):
        return self.landmarks


def test_process_frame_reports_tracking_time(landmarks):
    app = OverlayApp(controls=ControlState(mirror=True))
    frame = np.zeros((180, 320, 3), dtype=np.uint8)

    composed, result = app.process_frame(frame, _FixedTracker(landmarks))

    assert composed.shape == (180, 320, 3)
    assert result.tracking is TrackingState.TRACKING
    assert result.metadata['track_ms'] == 12.5
    assert app.surface.size == (320, 180)


def test_camera_error_names_device():
    error = CameraError("Failed to open camera", device=3)
    assert error.device == 3
    assert str(error) == "Failed to open camera (device 3)"
    assert str(CameraError("Camera frame read failed")) == "Camera frame read failed"
