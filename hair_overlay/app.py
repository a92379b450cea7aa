#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Webcam Haircut Filters - 실시간 헤어 오버레이 앱

Architecture:
- cv2.VideoCapture → FaceTracker (MediaPipe FaceMesh) → FrameOrchestrator → Surface
- Surface 를 (미러된) 카메라 프레임 위에 합성하여 OpenCV 창에 표시

Keys:
  1-6 스타일 선택 (none/buzz/fade/fringe/pompadour/long)
  m 미러, a 에셋 모드, c 색상 변경
  +/- 크기, [/] 투명도, i/j/k/l 위치 이동
  s 스냅샷 저장, q/ESC 종료
"""

import argparse
import sys
import time
from concurrent.futures import Future
from dataclasses import replace
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from .config.settings import ControlState, TrackerConfig
from .core.face_tracker import FaceTracker
from .core.surface import Surface
from .models import FrameResult, HairStyle, TrackingState
from .processing.asset_compositor import AssetLoadResult, load_asset, load_asset_async
from .processing.frame_orchestrator import FrameOrchestrator
from .processing.snapshot import compose_snapshot, save_snapshot
from .utils import ColorLog, get_config, get_logger
from .utils.exceptions import AssetLoadError, CameraError, InvalidImageError

logger = get_logger(__name__)

STYLE_KEYS = {ord(str(i + 1)): style for i, style in enumerate(HairStyle)}


def handle_key(controls: ControlState, key: int) -> ControlState:
    """
    키 입력을 새 ControlState 로 변환 (프레임 사이에만 호출)

    Args:
        controls: 현재 컨트롤 상태
        key: cv2.waitKey 값 (& 0xFF)
    """
    if key in STYLE_KEYS:
        return replace(controls, style=STYLE_KEYS[key].value, use_asset=False)
    if key == ord('m'):
        return controls.toggle_mirror()
    if key == ord('a'):
        return controls.toggle_asset()
    if key == ord('c'):
        return controls.cycle_color()
    if key in (ord('+'), ord('=')):
        return controls.nudge_scale(1)
    if key == ord('-'):
        return controls.nudge_scale(-1)
    if key == ord(']'):
        return controls.nudge_opacity(1)
    if key == ord('['):
        return controls.nudge_opacity(-1)
    if key == ord('j'):
        return controls.nudge_offset(-1, 0)
    if key == ord('l'):
        return controls.nudge_offset(1, 0)
    if key == ord('i'):
        return controls.nudge_offset(0, -1)
    if key == ord('k'):
        return controls.nudge_offset(0, 1)
    return controls


def draw_status(image: np.ndarray, result: FrameResult, controls: ControlState) -> np.ndarray:
    """상태 텍스트 오버레이"""
    color = (122, 208, 49) if result.tracking is TrackingState.TRACKING else (58, 191, 255)
    cv2.putText(image, result.status_text, (10, 30),
                cv2.FONT_HERSHEY_SIMPLEX, 0.8, color, 2)

    labels = controls.labels()
    mode = "asset" if controls.use_asset else controls.style
    info = f"{mode} | opacity {labels['opacity']} | scale {labels['scale']} | x {labels['x']} y {labels['y']}"
    cv2.putText(image, info, (10, 60),
                cv2.FONT_HERSHEY_SIMPLEX, 0.6, (230, 230, 230), 1)

    if result.note:
        cv2.putText(image, result.note, (10, image.shape[0] - 20),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (230, 230, 230), 1)
    return image


class OverlayApp:
    """실시간 카메라 헤어 오버레이"""

    def __init__(
        self,
        camera_id: Optional[int] = None,
        asset_path: Optional[str] = None,
        controls: Optional[ControlState] = None
    ):
        """
        Args:
            camera_id: 카메라 디바이스 ID (None이면 config.camera.index)
            asset_path: 헤어 에셋 PNG 경로 (선택적, 비동기 로드)
            controls: 초기 컨트롤 상태 (None이면 config.render)
        """
        self.config = get_config()
        self.camera_id = self.config.camera.index if camera_id is None else camera_id
        self.controls = controls or ControlState.from_config(self.config)
        self.asset: Optional[np.ndarray] = None
        self._pending_asset: Optional[Future] = load_asset_async(asset_path) if asset_path else None

        width, height = self.config.camera.width, self.config.camera.height
        self.surface = Surface(width, height)
        self.orchestrator = FrameOrchestrator(self.surface)
        self.window_name = self.config.window.name

        self.fps = 0.0
        self._fps_frames = 0
        self._fps_time = None

    def _open_camera(self) -> cv2.VideoCapture:
        cap = cv2.VideoCapture(self.camera_id)
        if not cap.isOpened():
            raise CameraError("Failed to open camera", device=self.camera_id)
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        cap.set(cv2.CAP_PROP_BUFFERSIZE, self.config.camera.buffer_size)
        return cap

    def _poll_asset(self):
        """비동기 에셋 로드 완료 확인 (프레임 사이에서만 상태 변경)"""
        if self._pending_asset is None or not self._pending_asset.done():
            return
        result: AssetLoadResult = self._pending_asset.result()
        self._pending_asset = None
        if result.ok:
            self.asset = result.bitmap
            self.controls = replace(self.controls, use_asset=True)
            ColorLog.success("PNG asset loaded. Use the keys to align it to your head.")
        else:
            ColorLog.warning(f"{result.error}. Make sure it's a valid image.")

    def _update_fps(self):
        now = time.time()
        if self._fps_time is None:
            self._fps_time = now
        self._fps_frames += 1
        if now - self._fps_time >= 1.0:
            self.fps = self._fps_frames / (now - self._fps_time)
            self._fps_time = now
            self._fps_frames = 0

    def process_frame(self, frame: np.ndarray, tracker: FaceTracker):
        """
        프레임 1장 처리

        Returns:
            (display_image, FrameResult)
        """
        render_config = self.controls.to_render_config()
        landmarks = tracker.track(frame)
        h, w = frame.shape[:2]
        result = self.orchestrator.render_frame(
            landmarks, render_config, self.asset, frame_size=(w, h)
        )
        result.metadata['track_ms'] = tracker.last_processing_time
        composed = compose_snapshot(frame, self.surface, render_config.mirror)
        return composed, result

    def run(self):
        """메인 실행 루프"""
        ColorLog.header("Webcam Haircut Filters")
        cap = self._open_camera()
        snapshot_requested = False

        try:
            with FaceTracker(TrackerConfig.from_config(self.config)) as tracker:
                ColorLog.success("Camera running")
                while cap.isOpened():
                    ok, frame = cap.read()
                    if not ok:
                        logger.warning("Camera frame read failed, stopping")
                        break

                    self._poll_asset()
                    composed, result = self.process_frame(frame, tracker)

                    if snapshot_requested:
                        path = save_snapshot(composed)
                        ColorLog.success(f"Snapshot ready: {path}")
                        snapshot_requested = False

                    self._update_fps()
                    ColorLog.status_line(
                        result.tracking is TrackingState.TRACKING,
                        "asset" if self.controls.use_asset else self.controls.style,
                        self.fps,
                        self.controls.mirror,
                        result.metadata['track_ms'],
                    )
                    cv2.imshow(self.window_name, draw_status(composed.copy(), result, self.controls))

                    key = cv2.waitKey(1) & 0xFF
                    if key in (27, ord('q')):
                        break
                    if key == ord('s'):
                        snapshot_requested = True
                    else:
                        self.controls = handle_key(self.controls, key)

        except KeyboardInterrupt:
            ColorLog.warning("Keyboard interrupt")
        finally:
            cap.release()
            cv2.destroyAllWindows()
            ColorLog.clear_line()
            ColorLog.event("Stopped")


def render_image(image_path: str, output_path: str, controls: ControlState,
                 asset_path: Optional[str] = None) -> FrameResult:
    """
    정지 이미지 1장에 오버레이를 그려 저장

    Raises:
        InvalidImageError: 이미지 로드 실패 시
    """
    frame = cv2.imread(str(image_path))
    if frame is None:
        raise InvalidImageError(f"Failed to load image: {image_path}")

    asset = None
    if asset_path:
        asset_result = load_asset(asset_path)
        asset = asset_result.unwrap()
        controls = replace(controls, use_asset=True)

    h, w = frame.shape[:2]
    surface = Surface(w, h)
    orchestrator = FrameOrchestrator(surface)
    render_config = controls.to_render_config()

    with FaceTracker(TrackerConfig.from_config(static_image_mode=True)) as tracker:
        landmarks = tracker.track(frame)

    result = orchestrator.render_frame(landmarks, render_config, asset)
    composed = compose_snapshot(frame, surface, render_config.mirror)
    out_path = Path(output_path)
    out = save_snapshot(composed, directory=str(out_path.parent), filename=out_path.name)
    logger.info(f"Rendered {image_path} → {out} ({result.tracking.value})")
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Webcam haircut filters (MediaPipe FaceMesh)")
    parser.add_argument("--camera", type=int, default=None, help="camera device index")
    parser.add_argument("--style", choices=[s.value for s in HairStyle], default=None)
    parser.add_argument("--color", default=None, help="hair color, e.g. #2b1b12")
    parser.add_argument("--opacity", type=int, default=None, help="opacity percent")
    parser.add_argument("--scale", type=int, default=None, help="scale percent")
    parser.add_argument("--no-mirror", action="store_true", help="disable mirror mode")
    parser.add_argument("--asset", default=None, help="transparent PNG hair asset")
    parser.add_argument("--image", default=None, help="render a still image instead of the camera")
    parser.add_argument("--output", default="snapshots/overlay.png", help="output path for --image")
    return parser


def controls_from_args(args: argparse.Namespace, base: ControlState) -> ControlState:
    overrides = {}
    if args.style is not None:
        overrides['style'] = args.style
    if args.color is not None:
        overrides['color'] = args.color
    if args.opacity is not None:
        overrides['opacity_pct'] = args.opacity
    if args.scale is not None:
        overrides['scale_pct'] = args.scale
    if args.no_mirror:
        overrides['mirror'] = False
    return replace(base, **overrides)


def main(argv=None) -> int:
    """메인 엔트리 포인트"""
    args = build_parser().parse_args(argv)
    controls = controls_from_args(args, ControlState.from_config())

    try:
        if args.image:
            result = render_image(args.image, args.output, controls, args.asset)
            print(f"{result.status_text}: {args.output}")
        else:
            OverlayApp(camera_id=args.camera, asset_path=args.asset, controls=controls).run()
    except CameraError as e:
        ColorLog.error(str(e))
        ColorLog.warning("Check that no other application is using the camera.")
        return 1
    except (AssetLoadError, InvalidImageError) as e:
        ColorLog.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
