"""
헤어스타일 벡터 렌더러 (buzz / fade / fringe / pompadour / long)

모든 렌더러는 render(frame, config, surface) -> None 형태이며 입력에 대해 순수하다.
1. 기본 실루엣: 설정 색상/투명도 + 부드러운 드롭 섀도우 (항상 먼저)
2. 디테일 레이어: 더 진한 톤, 별도 투명도

모든 오프셋은 head_unit * factor * scale 로 계산되어 얼굴 크기/해상도에 무관한 비율을 유지한다.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict

from ..config.constants import DETAIL_ALPHA_BOOST, SHADOW_BLUR, SHADOW_OFFSET_Y
from ..config.settings import RenderConfig
from ..core.surface import LinearGradient, Path, Shadow, SolidPaint, Surface
from ..models import Anchors, HairStyle, Point, ReferenceFrame, midpoint
from ..utils.color import rgba

FRINGE_SPIKES = 9
LONG_STRANDS = 8


@dataclass(frozen=True)
class StyleGeometry:
    """스타일 공통 파생 값"""

    anchors: Anchors       # 오프셋이 적용된 기준점
    head_unit: float
    scale: float
    cx: float              # 머리 중심 x (오프셋 포함)
    left_x: float
    right_x: float
    top_y: float           # 이마 위 볼륨 높이
    hairline_mid: Point

    def k(self, factor: float) -> float:
        """head_unit * factor * scale"""
        return self.head_unit * factor * self.scale


def style_geometry(frame: ReferenceFrame, config: RenderConfig) -> StyleGeometry:
    a = frame.placed
    u, s = frame.head_unit, config.scale
    return StyleGeometry(
        anchors=a,
        head_unit=u,
        scale=s,
        cx=frame.center.x,
        left_x=a.left_temple.x - u * 0.10 * s,
        right_x=a.right_temple.x + u * 0.10 * s,
        top_y=a.forehead_top.y - u * 0.55 * s,
        hairline_mid=midpoint(a.forehead_top, a.nose_bridge),
    )


def _silhouette(surface: Surface, path: Path, config: RenderConfig, shadow_alpha: float):
    surface.fill(
        path,
        SolidPaint(rgba(config.color, config.opacity)),
        shadow=Shadow(alpha=shadow_alpha, blur=SHADOW_BLUR, offset_y=SHADOW_OFFSET_Y),
    )


def _dark_paint(config: RenderConfig) -> SolidPaint:
    return SolidPaint(rgba(config.color, min(1.0, config.opacity + DETAIL_ALPHA_BOOST)))


def _cap(g: StyleGeometry, dip: float, mid_dip: float) -> Path:
    """관자놀이 → 이마 위 → 헤어라인으로 닫히는 기본 캡"""
    lt, rt = g.anchors.left_temple, g.anchors.right_temple
    hm = g.hairline_mid
    return (
        Path()
        .move_to(g.left_x, lt.y)
        .quadratic_to(g.cx, g.top_y, g.right_x, rt.y)
        .quadratic_to(rt.x, hm.y + g.k(dip), g.cx, hm.y + g.k(mid_dip))
        .quadratic_to(lt.x, hm.y + g.k(dip), g.left_x, lt.y)
        .close()
    )


def render_none(frame: ReferenceFrame, config: RenderConfig, surface: Surface):
    """스타일 없음: 아무것도 그리지 않음"""
    return None


def render_buzz(frame: ReferenceFrame, config: RenderConfig, surface: Surface):
    """두피에 밀착된 짧은 캡 + 반투명 스터블 밴드"""
    g = style_geometry(frame, config)
    lt, rt = g.anchors.left_temple, g.anchors.right_temple

    _silhouette(surface, _cap(g, 0.0, 0.10), config, 0.22)

    with surface.saved():
        surface.global_alpha = 0.35 * config.opacity
        band = (
            Path()
            .move_to(g.left_x, lt.y + g.k(0.06))
            .quadratic_to(g.cx, g.top_y + g.k(0.35), g.right_x, rt.y + g.k(0.06))
            .quadratic_to(g.cx, g.hairline_mid.y + g.k(0.22), g.left_x, lt.y + g.k(0.06))
            .close()
        )
        surface.fill(band, _dark_paint(config))


def render_fade(frame: ReferenceFrame, config: RenderConfig, surface: Surface):
    """윗머리 볼륨 + 관자놀이에서 턱까지 옅어지는 옆머리"""
    g = style_geometry(frame, config)
    a = g.anchors
    lt, rt, lj, rj = a.left_temple, a.right_temple, a.left_jaw, a.right_jaw

    _silhouette(surface, _cap(g, 0.05, 0.12), config, 0.28)

    fade_top = (lt.y + rt.y) / 2
    fade_bottom = midpoint(lj, rj, a.chin).y - g.k(0.10)
    stops = (
        (0.0, rgba(config.color, config.opacity * 0.45)),
        (1.0, rgba(config.color, 0.0)),
    )

    with surface.saved():
        # side = -1: 왼쪽, +1: 오른쪽
        for side, temple, jaw in ((-1, lt, lj), (1, rt, rj)):
            panel_x = temple.x + side * g.k(0.35)
            gradient = LinearGradient((panel_x, fade_top), (panel_x, fade_bottom), stops)
            mid_y = (temple.y + jaw.y) / 2
            panel = (
                Path()
                .move_to(temple.x + side * g.k(0.10), temple.y)
                .quadratic_to(temple.x + side * g.k(0.50), mid_y, jaw.x + side * g.k(0.30), jaw.y)
                .line_to(jaw.x + side * g.k(0.10), jaw.y)
                .quadratic_to(temple.x + side * g.k(0.18), mid_y, temple.x, temple.y)
                .close()
            )
            surface.fill(panel, gradient)


def fringe_spikes(g: StyleGeometry) -> list:
    """
    이마 위 앞머리 스파이크 경로

    left_x ~ right_x 사이에 균등 간격, 길이는 사인파로 변조.
    """
    fringe_y = g.hairline_mid.y + g.k(0.14)
    fringe_len = g.k(0.30)
    half_width = g.k(0.06)
    spikes = []
    for i in range(FRINGE_SPIKES):
        t = i / (FRINGE_SPIKES - 1)
        x = g.left_x + (g.right_x - g.left_x) * t
        wobble = math.sin(t * math.pi * 2) * g.k(0.04)
        length = fringe_len * (0.75 + 0.35 * math.sin((t + 0.15) * math.pi * 3))
        spikes.append(
            Path()
            .move_to(x - half_width, fringe_y)
            .quadratic_to(x + wobble, fringe_y + length, x + half_width, fringe_y)
            .close()
        )
    return spikes


def render_fringe(frame: ReferenceFrame, config: RenderConfig, surface: Surface):
    """깊은 헤어라인 캡 + 질감 있는 앞머리 스파이크"""
    g = style_geometry(frame, config)

    _silhouette(surface, _cap(g, 0.10, 0.16), config, 0.30)

    with surface.saved():
        surface.global_alpha = 0.55 * config.opacity
        paint = _dark_paint(config)
        for spike in fringe_spikes(g):
            surface.fill(spike, paint)


def render_pompadour(frame: ReferenceFrame, config: RenderConfig, surface: Surface):
    """앞으로 쓸어 올린 높은 볼륨 + 하이라이트 곡선"""
    g = style_geometry(frame, config)
    lt, rt = g.anchors.left_temple, g.anchors.right_temple
    hm, cx, top_y = g.hairline_mid, g.cx, g.top_y

    sweep = (
        Path()
        .move_to(g.left_x, lt.y + g.k(0.08))
        .bezier_to(
            cx - g.k(0.30), top_y - g.k(0.20),
            cx + g.k(0.55), top_y + g.k(0.05),
            g.right_x, rt.y + g.k(0.02),
        )
        .quadratic_to(rt.x, hm.y + g.k(0.08), cx, hm.y + g.k(0.12))
        .quadratic_to(lt.x, hm.y + g.k(0.08), g.left_x, lt.y + g.k(0.08))
        .close()
    )
    _silhouette(surface, sweep, config, 0.33)

    with surface.saved():
        ridge = (
            Path()
            .move_to(cx - g.k(0.10), top_y + g.k(0.18))
            .bezier_to(
                cx + g.k(0.10), top_y - g.k(0.05),
                cx + g.k(0.55), top_y + g.k(0.18),
                g.right_x - g.k(0.05), rt.y + g.k(0.05),
            )
        )
        surface.stroke(ridge, rgba((255, 255, 255), 0.12 * config.opacity),
                       width=max(2.0, g.k(0.02)))


def render_long(frame: ReferenceFrame, config: RenderConfig, surface: Surface):
    """캡 + 양쪽 관자놀이에서 턱 아래까지 내려오는 드레이프 + 안쪽 가닥"""
    g = style_geometry(frame, config)
    a = g.anchors
    lt, rt, lj, rj, chin = a.left_temple, a.right_temple, a.left_jaw, a.right_jaw, a.chin
    cx = g.cx

    drape = (
        Path()
        .move_to(g.left_x, lt.y)
        .quadratic_to(cx, g.top_y, g.right_x, rt.y)
        # 오른쪽 드레이프
        .bezier_to(
            rt.x + g.k(0.25), rt.y + g.k(0.45),
            rj.x + g.k(0.25), rj.y + g.k(0.65),
            cx + g.k(0.12), chin.y + g.k(0.35),
        )
        # 왼쪽 드레이프
        .bezier_to(
            cx - g.k(0.12), chin.y + g.k(0.35),
            lj.x - g.k(0.25), lj.y + g.k(0.65),
            lt.x - g.k(0.25), lt.y + g.k(0.45),
        )
        .close()
    )
    _silhouette(surface, drape, config, 0.34)

    with surface.saved():
        surface.global_alpha = 0.28 * config.opacity
        color = _dark_paint(config).color
        width = max(1.5, g.k(0.012))
        hm = g.hairline_mid
        for i in range(LONG_STRANDS):
            t = i / (LONG_STRANDS - 1)
            x = g.left_x + (g.right_x - g.left_x) * t
            strand = (
                Path()
                .move_to(x, hm.y + g.k(0.12))
                .bezier_to(
                    x + g.k(0.12), hm.y + g.k(0.55),
                    x - g.k(0.10), chin.y + g.k(0.18),
                    x + g.k(0.06), chin.y + g.k(0.42),
                )
            )
            surface.stroke(strand, color, width=width)


StyleRenderer = Callable[[ReferenceFrame, RenderConfig, Surface], None]

STYLE_RENDERERS: Dict[HairStyle, StyleRenderer] = {
    HairStyle.NONE: render_none,
    HairStyle.BUZZ: render_buzz,
    HairStyle.FADE: render_fade,
    HairStyle.FRINGE: render_fringe,
    HairStyle.POMPADOUR: render_pompadour,
    HairStyle.LONG: render_long,
}


def render_style(frame: ReferenceFrame, config: RenderConfig, surface: Surface):
    """config.style 에 해당하는 렌더러 호출 (알 수 없는 값은 none)"""
    renderer = STYLE_RENDERERS.get(HairStyle.parse(config.style), render_none)
    renderer(frame, config, surface)
