"""
numpy/OpenCV 기반 2D 래스터 드로잉 표면

Canvas 2D 와 같은 방식의 즉시 모드 API:
- 변환 스택 (save/restore, translate, scale) 과 global alpha
- 경로 (move/line/quadratic/cubic/close)
- 단색 또는 선형 그라디언트 채우기, 그림자, 선 그리기
- 비트맵 blit

버퍼는 premultiplied float32 BGRA (OpenCV 채널 순서).
모든 그리기 호출은 장치 좌표로 `operations` 에 기록된다 (clear 시 초기화).
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import cv2
import numpy as np

from ..utils.color import RGBA

# cv2 서브픽셀 좌표용 고정소수점 비트 수
SHIFT_BITS = 4
SHIFT_SCALE = 1 << SHIFT_BITS

# 곡선 1개를 근사하는 선분 수
CURVE_STEPS = 24

# cv2 선 두께 상한 (MAX_THICKNESS)
MAX_THICKNESS = 32767

# 래스터화 전 표면 바깥으로 남겨두는 여백 (px)
CLIP_MARGIN = 4.0


def _clip_polygon(points: np.ndarray, x0: float, y0: float, x1: float, y1: float) -> np.ndarray:
    """
    다각형을 사각형으로 자름 (Sutherland-Hodgman)

    사각형 안쪽의 덮임 영역은 그대로 두고 좌표만 int32 고정소수점 범위 안으로 들인다.
    """
    edges = (
        (lambda p: p[0] >= x0, lambda p, q: _cross_x(p, q, x0)),
        (lambda p: p[0] <= x1, lambda p, q: _cross_x(p, q, x1)),
        (lambda p: p[1] >= y0, lambda p, q: _cross_y(p, q, y0)),
        (lambda p: p[1] <= y1, lambda p, q: _cross_y(p, q, y1)),
    )
    out = [tuple(p) for p in points]
    for inside, cross in edges:
        if not out:
            break
        src, out = out, []
        prev = src[-1]
        for cur in src:
            if inside(cur):
                if not inside(prev):
                    out.append(cross(prev, cur))
                out.append(cur)
            elif inside(prev):
                out.append(cross(prev, cur))
            prev = cur
    return np.asarray(out, dtype=np.float64).reshape(-1, 2)


def _cross_x(p, q, x):
    t = (x - p[0]) / (q[0] - p[0])
    return (x, p[1] + t * (q[1] - p[1]))


def _cross_y(p, q, y):
    t = (y - p[1]) / (q[1] - p[1])
    return (p[0] + t * (q[0] - p[0]), y)


def _clip_segment(p: np.ndarray, q: np.ndarray, x0: float, y0: float,
                  x1: float, y1: float) -> Optional[Tuple[np.ndarray, np.ndarray]]:
    """선분을 사각형으로 자름 (Liang-Barsky). 완전히 밖이면 None"""
    d = q - p
    t0, t1 = 0.0, 1.0
    for num, den in ((p[0] - x0, -d[0]), (x1 - p[0], d[0]),
                     (p[1] - y0, -d[1]), (y1 - p[1], d[1])):
        if den == 0:
            if num < 0:
                return None
            continue
        t = num / den
        if den < 0:
            t0 = max(t0, t)
        else:
            t1 = min(t1, t)
        if t0 > t1:
            return None
    start = p if t0 == 0.0 else p + t0 * d
    end = q if t1 == 1.0 else p + t1 * d
    return start, end


def _clip_polyline(points: np.ndarray, closed: bool, x0: float, y0: float,
                   x1: float, y1: float) -> List[np.ndarray]:
    """열린 폴리라인으로 자름. 사각형 안에서 이어지는 구간끼리 묶어서 반환"""
    if closed:
        points = np.vstack([points, points[:1]])
    runs: List[List[np.ndarray]] = []
    last_end = None
    for p, q in zip(points[:-1], points[1:]):
        clipped = _clip_segment(p, q, x0, y0, x1, y1)
        if clipped is None:
            last_end = None
            continue
        a, b = clipped
        if last_end is not None and np.array_equal(a, last_end):
            runs[-1].append(b)
        else:
            runs.append([a, b])
        last_end = b if np.array_equal(b, q) else None
    return [np.asarray(run) for run in runs]


def _apply(matrix: np.ndarray, points: np.ndarray) -> np.ndarray:
    """(N, 2) 점 배열에 3x3 아핀 행렬 적용"""
    return points @ matrix[:2, :2].T + matrix[:2, 2]


class Path:
    """
    드로잉 경로

    세그먼트는 ('M', p), ('L', p), ('Q', c, p), ('C', c1, c2, p), ('Z',) 형태로 저장.
    """

    def __init__(self):
        self.segments: List[tuple] = []

    def move_to(self, x: float, y: float) -> "Path":
        self.segments.append(('M', (x, y)))
        return self

    def line_to(self, x: float, y: float) -> "Path":
        self.segments.append(('L', (x, y)))
        return self

    def quadratic_to(self, cx: float, cy: float, x: float, y: float) -> "Path":
        self.segments.append(('Q', (cx, cy), (x, y)))
        return self

    def bezier_to(self, c1x: float, c1y: float, c2x: float, c2y: float,
                  x: float, y: float) -> "Path":
        self.segments.append(('C', (c1x, c1y), (c2x, c2y), (x, y)))
        return self

    def close(self) -> "Path":
        self.segments.append(('Z',))
        return self

    @classmethod
    def rect(cls, x: float, y: float, w: float, h: float) -> "Path":
        return cls().move_to(x, y).line_to(x + w, y).line_to(x + w, y + h).line_to(x, y + h).close()

    def control_points(self) -> np.ndarray:
        """모든 끝점/제어점 (N, 2)"""
        pts = [p for seg in self.segments for p in seg[1:]]
        if not pts:
            return np.zeros((0, 2), dtype=np.float64)
        return np.asarray(pts, dtype=np.float64)

    def bounds(self) -> Tuple[float, float, float, float]:
        """
        제어점 외곽 (control hull) 기준 bounding box

        Returns:
            (min_x, min_y, max_x, max_y)
        """
        pts = self.control_points()
        if len(pts) == 0:
            return (0.0, 0.0, 0.0, 0.0)
        (x0, y0), (x1, y1) = pts.min(axis=0), pts.max(axis=0)
        return (float(x0), float(y0), float(x1), float(y1))

    def transformed(self, matrix: np.ndarray) -> "Path":
        """아핀 변환이 적용된 새 경로"""
        out = Path()
        for seg in self.segments:
            if seg[0] == 'Z':
                out.segments.append(seg)
                continue
            pts = _apply(matrix, np.asarray(seg[1:], dtype=np.float64))
            out.segments.append((seg[0],) + tuple((float(x), float(y)) for x, y in pts))
        return out

    def flatten(self, steps: int = CURVE_STEPS) -> List[Tuple[np.ndarray, bool]]:
        """
        곡선을 선분으로 근사

        Returns:
            [(points (N, 2), closed), ...] 서브패스별 폴리라인
        """
        subpaths = []
        current: List[Tuple[float, float]] = []
        closed = False
        t = np.linspace(0.0, 1.0, steps + 1)[1:, None]

        def flush():
            if current:
                subpaths.append((np.asarray(current, dtype=np.float64), closed))

        for seg in self.segments:
            kind = seg[0]
            if kind == 'M':
                flush()
                current = [seg[1]]
                closed = False
            elif kind == 'Z':
                closed = True
            else:
                if not current:
                    current = [seg[1]]
                p0 = np.asarray(current[-1], dtype=np.float64)
                if kind == 'L':
                    current.append(seg[1])
                elif kind == 'Q':
                    c, p = np.asarray(seg[1]), np.asarray(seg[2])
                    pts = (1 - t) ** 2 * p0 + 2 * (1 - t) * t * c + t ** 2 * p
                    current.extend(map(tuple, pts))
                elif kind == 'C':
                    c1, c2, p = np.asarray(seg[1]), np.asarray(seg[2]), np.asarray(seg[3])
                    pts = ((1 - t) ** 3 * p0 + 3 * (1 - t) ** 2 * t * c1
                           + 3 * (1 - t) * t ** 2 * c2 + t ** 3 * p)
                    current.extend(map(tuple, pts))
        flush()
        return subpaths


@dataclass(frozen=True)
class SolidPaint:
    """단색 (r, g, b, a), a: 0.0 ~ 1.0"""
    color: RGBA


@dataclass(frozen=True)
class LinearGradient:
    """선형 그라디언트 (사용자 좌표계 기준 시작/끝점)"""
    start: Tuple[float, float]
    end: Tuple[float, float]
    stops: Tuple[Tuple[float, RGBA], ...]


Paint = Union[SolidPaint, LinearGradient]


@dataclass(frozen=True)
class Shadow:
    """드롭 섀도우 (검은색, 장치 좌표 오프셋)"""
    alpha: float
    blur: float = 18.0
    offset_x: float = 0.0
    offset_y: float = 8.0


@dataclass
class DrawOperation:
    """표면에 그려진 한 번의 호출 기록 (장치 좌표)"""

    kind: str  # 'fill' | 'stroke' | 'image'
    path: Path
    alpha: float
    polylines: List[np.ndarray] = field(default_factory=list)

    def bounds(self) -> Tuple[float, float, float, float]:
        return self.path.bounds()

    def bounding_area(self) -> float:
        x0, y0, x1, y1 = self.bounds()
        return (x1 - x0) * (y1 - y0)

    def centroid(self) -> Tuple[float, float]:
        """폴리라인 정점 평균"""
        pts = np.concatenate(self.polylines) if self.polylines else self.path.control_points()
        cx, cy = pts.mean(axis=0)
        return (float(cx), float(cy))


@dataclass
class _State:
    matrix: np.ndarray
    global_alpha: float = 1.0

    def copy(self) -> "_State":
        return _State(self.matrix.copy(), self.global_alpha)


def _premultiplied(color: RGBA, alpha_scale: float = 1.0) -> np.ndarray:
    """(r, g, b, a) → premultiplied BGRA"""
    r, g, b, a = color
    a = float(a) * alpha_scale
    return np.array([b / 255 * a, g / 255 * a, r / 255 * a, a], dtype=np.float32)


class Surface:
    """래스터 드로잉 표면"""

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self._buffer = np.zeros((self.height, self.width, 4), dtype=np.float32)
        self._state = _State(np.eye(3))
        self._stack: List[_State] = []
        self.operations: List[DrawOperation] = []

    # ------------------------------------------------------------------
    # 크기 / 초기화
    # ------------------------------------------------------------------

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def resize(self, width: int, height: int):
        """버퍼 재할당 (내용은 지워짐)"""
        self.width = int(width)
        self.height = int(height)
        self._buffer = np.zeros((self.height, self.width, 4), dtype=np.float32)
        self.operations.clear()

    def ensure_size(self, width: int, height: int) -> bool:
        """크기가 다를 때만 resize. 변경 여부 반환"""
        if (int(width), int(height)) == self.size:
            return False
        self.resize(width, height)
        return True

    def clear(self):
        """전체 영역 지우기 (변환 상태는 유지)"""
        self._buffer[:] = 0.0
        self.operations.clear()

    @property
    def pixels(self) -> np.ndarray:
        """premultiplied float32 BGRA 버퍼 (읽기 전용 용도)"""
        return self._buffer

    # ------------------------------------------------------------------
    # 상태 스택
    # ------------------------------------------------------------------

    def save(self):
        self._stack.append(self._state.copy())

    def restore(self):
        # Canvas 와 동일하게 빈 스택에서의 restore 는 무시
        if self._stack:
            self._state = self._stack.pop()

    @contextmanager
    def saved(self) -> Iterator["Surface"]:
        """save/restore 쌍을 보장하는 컨텍스트"""
        self.save()
        try:
            yield self
        finally:
            self.restore()

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def matrix(self) -> np.ndarray:
        return self._state.matrix.copy()

    @property
    def global_alpha(self) -> float:
        return self._state.global_alpha

    @global_alpha.setter
    def global_alpha(self, value: float):
        self._state.global_alpha = float(value)

    def translate(self, tx: float, ty: float):
        m = np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]])
        self._state.matrix = self._state.matrix @ m

    def scale(self, sx: float, sy: float):
        m = np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])
        self._state.matrix = self._state.matrix @ m

    # ------------------------------------------------------------------
    # 그리기
    # ------------------------------------------------------------------

    def fill(self, path: Path, paint: Paint, shadow: Optional[Shadow] = None):
        """경로 채우기 (그림자가 있으면 먼저 그림)"""
        device_path = path.transformed(self._state.matrix)
        polylines = [pts for pts, _ in device_path.flatten()]
        alpha = self._state.global_alpha
        self.operations.append(DrawOperation('fill', device_path, alpha, polylines))

        coverage = self._fill_coverage(polylines)
        if coverage is None:
            return

        if shadow is not None:
            paint_alpha = paint.color[3] if isinstance(paint, SolidPaint) else 1.0
            self._composite_shadow(coverage, shadow.alpha * paint_alpha * alpha, shadow)

        if isinstance(paint, SolidPaint):
            color = _premultiplied(paint.color, alpha)
            self._composite(coverage[..., None] * color)
        else:
            self._composite(coverage[..., None] * self._gradient_layer(paint, alpha))

    def stroke(self, path: Path, color: RGBA, width: float = 1.0):
        """경로 외곽선 그리기"""
        matrix = self._state.matrix
        device_path = path.transformed(matrix)
        subpaths = device_path.flatten()
        alpha = self._state.global_alpha
        self.operations.append(
            DrawOperation('stroke', device_path, alpha, [pts for pts, _ in subpaths])
        )

        line_scale = float(np.sqrt(abs(np.linalg.det(matrix[:2, :2]))))
        thickness = int(min(MAX_THICKNESS, max(1, round(width * line_scale))))
        pad = thickness / 2 + CLIP_MARGIN
        bounds = (-pad, -pad, self.width + pad, self.height + pad)

        mask = np.zeros((self.height, self.width), dtype=np.uint8)
        for pts, closed in subpaths:
            if len(pts) < 2:
                continue
            runs = _clip_polyline(pts, closed, *bounds)
            fixed = [np.round(run * SHIFT_SCALE).astype(np.int32) for run in runs]
            if fixed:
                cv2.polylines(mask, fixed, False, 255, thickness, cv2.LINE_AA, SHIFT_BITS)
        coverage = mask.astype(np.float32) / 255.0
        self._composite(coverage[..., None] * _premultiplied(color, alpha))

    def draw_image(self, bitmap: np.ndarray, x: float, y: float, w: float, h: float):
        """
        비트맵을 (x, y, w, h) 박스에 늘려서 그림 (종횡비 보정 없음)

        Args:
            bitmap: uint8 BGR 또는 BGRA 이미지
        """
        matrix = self._state.matrix
        alpha = self._state.global_alpha
        device_path = Path.rect(x, y, w, h).transformed(matrix)
        self.operations.append(
            DrawOperation('image', device_path, alpha, [pts for pts, _ in device_path.flatten()])
        )
        if abs(w) < 1e-9 or abs(h) < 1e-9:
            return

        src = _to_premultiplied_bgra(bitmap)
        bh, bw = src.shape[:2]
        placement = np.array([[w / bw, 0.0, x], [0.0, h / bh, y], [0.0, 0.0, 1.0]])
        device = matrix @ placement
        layer = cv2.warpAffine(
            src, device[:2], (self.width, self.height),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(0, 0, 0, 0),
        )
        self._composite(layer * alpha)

    # ------------------------------------------------------------------
    # 출력
    # ------------------------------------------------------------------

    def to_bgra(self) -> np.ndarray:
        """straight alpha uint8 BGRA 이미지로 변환"""
        a = self._buffer[..., 3:4]
        color = np.divide(self._buffer[..., :3], a, out=np.zeros_like(self._buffer[..., :3]),
                          where=a > 0)
        out = np.concatenate([color, a], axis=2)
        return np.clip(np.round(out * 255), 0, 255).astype(np.uint8)

    def composite_over(self, frame_bgr: np.ndarray) -> np.ndarray:
        """
        BGR 프레임 위에 표면을 합성

        Args:
            frame_bgr: 표면과 같은 크기의 uint8 BGR 이미지
        """
        if frame_bgr.shape[:2] != (self.height, self.width):
            raise ValueError(
                f"Frame size {frame_bgr.shape[1]}x{frame_bgr.shape[0]} does not match "
                f"surface {self.width}x{self.height}"
            )
        base = frame_bgr.astype(np.float32) / 255.0
        a = self._buffer[..., 3:4]
        out = self._buffer[..., :3] + base * (1.0 - a)
        return np.clip(np.round(out * 255), 0, 255).astype(np.uint8)

    # ------------------------------------------------------------------
    # 내부 래스터 처리
    # ------------------------------------------------------------------

    def _fill_coverage(self, polylines: Sequence[np.ndarray]) -> Optional[np.ndarray]:
        bounds = (-CLIP_MARGIN, -CLIP_MARGIN, self.width + CLIP_MARGIN, self.height + CLIP_MARGIN)
        clipped = [_clip_polygon(p, *bounds) for p in polylines if len(p) >= 3]
        polys = [np.round(p * SHIFT_SCALE).astype(np.int32) for p in clipped if len(p) >= 3]
        if not polys:
            return None
        mask = np.zeros((self.height, self.width), dtype=np.uint8)
        cv2.fillPoly(mask, polys, 255, cv2.LINE_AA, SHIFT_BITS)
        return mask.astype(np.float32) / 255.0

    def _composite(self, src: np.ndarray):
        """source-over 합성 (premultiplied)"""
        self._buffer[:] = src + self._buffer * (1.0 - src[..., 3:4])

    def _composite_shadow(self, coverage: np.ndarray, strength: float, shadow: Shadow):
        shift = np.float32([[1, 0, shadow.offset_x], [0, 1, shadow.offset_y]])
        mask = cv2.warpAffine(coverage, shift, (self.width, self.height),
                              borderMode=cv2.BORDER_CONSTANT, borderValue=0)
        if shadow.blur > 0:
            mask = cv2.GaussianBlur(mask, (0, 0), sigmaX=shadow.blur / 2)
        layer = np.zeros((self.height, self.width, 4), dtype=np.float32)
        layer[..., 3] = mask * strength
        self._composite(layer)

    def _gradient_layer(self, gradient: LinearGradient, alpha: float) -> np.ndarray:
        """사용자 좌표계에서 계산한 그라디언트 색 (premultiplied BGRA)"""
        inverse = np.linalg.inv(self._state.matrix)
        xs, ys = np.meshgrid(np.arange(self.width) + 0.5, np.arange(self.height) + 0.5)
        ux = inverse[0, 0] * xs + inverse[0, 1] * ys + inverse[0, 2]
        uy = inverse[1, 0] * xs + inverse[1, 1] * ys + inverse[1, 2]

        (x0, y0), (x1, y1) = gradient.start, gradient.end
        dx, dy = x1 - x0, y1 - y0
        length_sq = dx * dx + dy * dy
        if length_sq == 0:
            t = np.zeros_like(ux)
        else:
            t = np.clip(((ux - x0) * dx + (uy - y0) * dy) / length_sq, 0.0, 1.0)

        offsets = [offset for offset, _ in gradient.stops]
        colors = np.stack([_premultiplied(c, alpha) for _, c in gradient.stops])
        layer = np.empty((self.height, self.width, 4), dtype=np.float32)
        for ch in range(4):
            layer[..., ch] = np.interp(t, offsets, colors[:, ch])
        return layer


def _to_premultiplied_bgra(bitmap: np.ndarray) -> np.ndarray:
    img = bitmap.astype(np.float32) / 255.0
    if img.ndim == 2:
        img = np.dstack([img, img, img])
    if img.shape[2] == 3:
        img = np.dstack([img, np.ones(img.shape[:2], dtype=np.float32)])
    img[..., :3] *= img[..., 3:4]
    return np.ascontiguousarray(img)
