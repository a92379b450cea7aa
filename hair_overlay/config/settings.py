"""시스템 설정 클래스 정의"""

from dataclasses import dataclass, replace
from typing import Tuple

from ..models import HairStyle
from ..utils.color import RGB, hex_to_rgb, rgb_to_hex
from ..utils.config_loader import Config, get_config
from ..utils.exceptions import ConfigurationError
from ..utils.validators import validate_unit_interval


@dataclass
class TrackerConfig:
    """얼굴 추적 설정"""

    max_num_faces: int = 1
    refine_landmarks: bool = True
    min_detection_confidence: float = 0.6
    min_tracking_confidence: float = 0.6
    static_image_mode: bool = False  # True: 이미지, False: 비디오

    def __post_init__(self):
        """설정 값 검증"""
        if self.max_num_faces < 1:
            raise ConfigurationError("max_num_faces must be >= 1")
        try:
            validate_unit_interval(self.min_detection_confidence, "min_detection_confidence")
            validate_unit_interval(self.min_tracking_confidence, "min_tracking_confidence")
        except ValueError as e:
            raise ConfigurationError(str(e))

    @classmethod
    def from_config(cls, config: Config = None, static_image_mode: bool = False) -> "TrackerConfig":
        config = config or get_config()
        section = config.tracker
        return cls(
            max_num_faces=section.max_num_faces,
            refine_landmarks=section.refine_landmarks,
            min_detection_confidence=section.min_detection_confidence,
            min_tracking_confidence=section.min_tracking_confidence,
            static_image_mode=static_image_mode,
        )


@dataclass(frozen=True)
class RenderConfig:
    """
    렌더링 설정 스냅샷 (불변)

    Orchestrator가 프레임마다 한 번 읽어 모든 렌더러에 전달한다.
    렌더러는 값을 clamp 하지 않으므로 생성 시점에 범위를 검증한다.
    """

    style: HairStyle = HairStyle.BUZZ
    color: RGB = (43, 27, 18)
    opacity: float = 0.85
    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    mirror: bool = False
    use_asset: bool = False

    def __post_init__(self):
        """설정 값 검증"""
        # 알 수 없는 스타일 문자열은 NONE 으로 정규화
        object.__setattr__(self, "style", HairStyle.parse(self.style))
        validate_unit_interval(self.opacity, "opacity")
        if self.scale <= 0:
            raise ValueError(f"scale must be > 0, got {self.scale}")
        if len(self.color) != 3 or not all(0 <= c <= 255 for c in self.color):
            raise ValueError(f"color must be an (r, g, b) tuple in 0-255, got {self.color}")


@dataclass(frozen=True)
class ControlBounds:
    """UI 슬라이더 범위"""

    opacity: Tuple[int, int] = (0, 100)
    scale: Tuple[int, int] = (60, 160)
    offset: Tuple[int, int] = (-200, 200)
    opacity_step: int = 5
    scale_step: int = 5
    offset_step: int = 5
    colors: Tuple[str, ...] = ("#2b1b12",)

    @classmethod
    def from_config(cls, config: Config = None) -> "ControlBounds":
        config = config or get_config()
        c = config.controls
        return cls(
            opacity=(c.opacity.min, c.opacity.max),
            scale=(c.scale.min, c.scale.max),
            offset=(c.offset.min, c.offset.max),
            opacity_step=c.opacity.step,
            scale_step=c.scale.step,
            offset_step=c.offset.step,
            colors=tuple(c.colors),
        )


def clamp(v, lo, hi):
    return max(lo, min(hi, v))


@dataclass(frozen=True)
class ControlState:
    """
    UI 컨트롤 상태 (슬라이더 값 그대로)

    키 입력 등 이벤트는 프레임 사이에 새 ControlState를 만들고,
    to_render_config()가 범위를 clamp 하여 RenderConfig 스냅샷을 만든다.
    """

    style: str = "buzz"
    color: str = "#2b1b12"
    opacity_pct: int = 85
    scale_pct: int = 100
    offset_x: int = 0
    offset_y: int = 0
    mirror: bool = True
    use_asset: bool = False
    bounds: ControlBounds = ControlBounds()

    @classmethod
    def from_config(cls, config: Config = None) -> "ControlState":
        config = config or get_config()
        r = config.render
        return cls(
            style=r.style,
            color=r.color,
            opacity_pct=r.opacity,
            scale_pct=r.scale,
            offset_x=r.offset_x,
            offset_y=r.offset_y,
            mirror=r.mirror,
            use_asset=r.use_asset,
            bounds=ControlBounds.from_config(config),
        )

    def to_render_config(self) -> RenderConfig:
        """슬라이더 값을 clamp 하여 RenderConfig 생성"""
        b = self.bounds
        opacity = clamp(self.opacity_pct, *b.opacity) / 100
        scale = clamp(self.scale_pct, *b.scale) / 100
        try:
            color = hex_to_rgb(self.color)
        except ValueError as e:
            raise ConfigurationError(str(e))
        return RenderConfig(
            style=HairStyle.parse(self.style),
            color=color,
            opacity=clamp(opacity, 0.0, 1.0),
            scale=max(scale, 0.01),
            offset_x=float(clamp(self.offset_x, *b.offset)),
            offset_y=float(clamp(self.offset_y, *b.offset)),
            mirror=self.mirror,
            use_asset=self.use_asset,
        )

    # 이벤트 핸들러용 헬퍼 (새 상태 반환)

    def with_style(self, style) -> "ControlState":
        return replace(self, style=HairStyle.parse(style).value)

    def cycle_style(self) -> "ControlState":
        styles = list(HairStyle)
        current = HairStyle.parse(self.style)
        return replace(self, style=styles[(styles.index(current) + 1) % len(styles)].value)

    def cycle_color(self) -> "ControlState":
        colors = self.bounds.colors
        try:
            idx = [c.lower() for c in colors].index(self.color.lower())
        except ValueError:
            idx = -1
        return replace(self, color=colors[(idx + 1) % len(colors)])

    def nudge_scale(self, steps: int) -> "ControlState":
        value = self.scale_pct + steps * self.bounds.scale_step
        return replace(self, scale_pct=clamp(value, *self.bounds.scale))

    def nudge_opacity(self, steps: int) -> "ControlState":
        value = self.opacity_pct + steps * self.bounds.opacity_step
        return replace(self, opacity_pct=clamp(value, *self.bounds.opacity))

    def nudge_offset(self, dx_steps: int, dy_steps: int) -> "ControlState":
        step = self.bounds.offset_step
        return replace(
            self,
            offset_x=clamp(self.offset_x + dx_steps * step, *self.bounds.offset),
            offset_y=clamp(self.offset_y + dy_steps * step, *self.bounds.offset),
        )

    def toggle_mirror(self) -> "ControlState":
        return replace(self, mirror=not self.mirror)

    def toggle_asset(self) -> "ControlState":
        return replace(self, use_asset=not self.use_asset)

    def labels(self) -> dict:
        """슬라이더 라벨 텍스트"""
        return {
            'opacity': f"{self.opacity_pct}%",
            'scale': f"{self.scale_pct}%",
            'x': f"{self.offset_x}px",
            'y': f"{self.offset_y}px",
            'color': rgb_to_hex(hex_to_rgb(self.color)),
        }
