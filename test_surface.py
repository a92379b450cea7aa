"""Surface / Path / MirrorTransform 테스트"""

import numpy as np
import pytest

from hair_overlay.core.mirror import MirrorTransform, mirrored
from hair_overlay.core.surface import LinearGradient, Path, Shadow, SolidPaint, Surface

RED = (255, 0, 0, 1.0)


def test_path_bounds_use_control_hull():
    path = Path().move_to(0, 10).quadratic_to(5, -10, 10, 10).close()
    assert path.bounds() == (0.0, -10.0, 10.0, 10.0)

    (points, closed), = path.flatten()
    assert closed
    # 곡선 정점(t=0.5)은 제어점보다 아래: y = 0.25*10 + 0.5*(-10) + 0.25*10 = 0
    assert points[:, 1].min() == pytest.approx(0.0)
    assert tuple(points[-1]) == pytest.approx((10.0, 10.0))


def test_cubic_flatten_hits_endpoints():
    path = Path().move_to(0, 0).bezier_to(10, 0, 20, 10, 30, 30)
    (points, closed), = path.flatten(steps=10)
    assert not closed
    assert len(points) == 11
    assert tuple(points[0]) == (0.0, 0.0)
    assert tuple(points[-1]) == pytest.approx((30.0, 30.0))


def test_state_stack_and_transforms():
    s = Surface(100, 50)
    s.save()
    s.translate(100, 0)
    s.scale(-1, 1)
    assert s.depth == 1
    np.testing.assert_allclose(s.matrix[:2], [[-1, 0, 100], [0, 1, 0]])
    s.restore()
    assert s.depth == 0
    np.testing.assert_allclose(s.matrix, np.eye(3))

    # 빈 스택에서 restore 는 무시
    s.restore()
    assert s.depth == 0


def test_saved_context_restores_global_alpha():
    s = Surface(10, 10)
    with s.saved():
        s.global_alpha = 0.3
        assert s.global_alpha == 0.3
    assert s.global_alpha == 1.0


def test_fill_solid_rect():
    s = Surface(40, 40)
    s.fill(Path.rect(10, 10, 10, 10), SolidPaint(RED))

    inside = s.pixels[15, 15]
    np.testing.assert_allclose(inside, [0.0, 0.0, 1.0, 1.0], atol=1e-6)
    assert s.pixels[30, 30, 3] == 0.0
    assert s.to_bgra()[15, 15].tolist() == [0, 0, 255, 255]
    assert len(s.operations) == 1
    assert s.operations[0].kind == 'fill'


def test_global_alpha_scales_fill():
    s = Surface(40, 40)
    s.global_alpha = 0.5
    s.fill(Path.rect(10, 10, 10, 10), SolidPaint(RED))
    assert s.pixels[15, 15, 3] == pytest.approx(0.5, abs=1e-6)
    assert s.operations[0].alpha == 0.5


def test_shadow_darkens_below_shape():
    s = Surface(60, 60)
    s.fill(Path.rect(20, 10, 20, 20), SolidPaint((255, 255, 255, 1.0)),
           shadow=Shadow(alpha=0.5, blur=4, offset_y=8))

    # 도형 아래쪽 (shape 밖, 그림자 안)
    below = s.pixels[34, 30]
    assert below[3] > 0.0
    assert below[:3].max() == pytest.approx(0.0)


def test_vertical_linear_gradient_fades_out():
    s = Surface(40, 100)
    gradient = LinearGradient((20, 0), (20, 100), ((0.0, RED), (1.0, (255, 0, 0, 0.0))))
    s.fill(Path.rect(0, 0, 40, 100), gradient)

    top, middle, bottom = s.pixels[5, 20, 3], s.pixels[50, 20, 3], s.pixels[95, 20, 3]
    assert top > middle > bottom
    assert middle == pytest.approx(0.495, abs=0.02)


def test_gradient_follows_mirror_transform():
    s = Surface(100, 10)
    gradient = LinearGradient((0, 5), (100, 5), ((0.0, RED), (1.0, (255, 0, 0, 0.0))))
    with mirrored(s, True):
        s.fill(Path.rect(0, 0, 100, 10), gradient)
    # 사용자 좌표 x=0 (불투명) 이 장치 좌표 오른쪽 끝으로 이동
    assert s.pixels[5, 98, 3] > s.pixels[5, 2, 3]


def test_stroke_marks_line_pixels():
    s = Surface(50, 50)
    s.stroke(Path().move_to(5, 25).line_to(45, 25), RED, width=3)
    assert s.pixels[25, 25, 3] > 0.9
    assert s.pixels[10, 25, 3] == 0.0
    assert s.operations[0].kind == 'stroke'


def test_draw_image_stretches_bitmap():
    s = Surface(64, 64)
    bitmap = np.zeros((2, 4, 3), dtype=np.uint8)
    bitmap[:] = (255, 0, 0)  # BGR 파랑
    s.draw_image(bitmap, 10, 10, 20, 30)

    np.testing.assert_allclose(s.pixels[18, 20], [1.0, 0.0, 0.0, 1.0], atol=1e-3)
    assert s.pixels[50, 50, 3] == 0.0
    assert s.operations[0].bounds() == (10.0, 10.0, 30.0, 40.0)


def test_draw_image_respects_bitmap_alpha():
    s = Surface(32, 32)
    bitmap = np.zeros((4, 4, 4), dtype=np.uint8)
    bitmap[..., 2] = 255
    bitmap[..., 3] = 128
    s.draw_image(bitmap, 0, 0, 32, 32)
    assert s.pixels[16, 16, 3] == pytest.approx(128 / 255, abs=1e-3)


def test_clear_resets_pixels_and_operations():
    s = Surface(20, 20)
    s.fill(Path.rect(0, 0, 10, 10), SolidPaint(RED))
    s.clear()
    assert not s.pixels.any()
    assert s.operations == []


def test_fill_far_outside_matches_clipped_fill():
    far = Surface(40, 40)
    far.fill(Path.rect(10, -1e12, 10, 2e12), SolidPaint(RED))
    near = Surface(40, 40)
    near.fill(Path.rect(10, -10, 10, 60), SolidPaint(RED))

    assert np.array_equal(far.pixels, near.pixels)
    assert far.pixels[20, 15, 3] == 1.0
    # 장치 좌표 기록은 자르지 않은 원래 경로
    assert far.operations[0].bounds() == (10.0, -1e12, 20.0, 1e12)


def test_stroke_far_outside_matches_clipped_stroke():
    far = Surface(40, 40)
    far.stroke(Path().move_to(-1e12, 20).line_to(1e12, 20), RED, width=2)
    near = Surface(40, 40)
    near.stroke(Path().move_to(-10, 20).line_to(50, 20), RED, width=2)

    assert np.array_equal(far.pixels, near.pixels)
    assert far.pixels[20, 20, 3] > 0.9


def test_stroke_wider_than_line_limit():
    s = Surface(40, 40)
    s.stroke(Path().move_to(0, 20).line_to(40, 20), RED, width=1e9)
    assert s.pixels[..., 3].min() > 0.99


def test_stroke_leaving_and_reentering_canvas():
    s = Surface(40, 40)
    path = Path().move_to(5, 5).line_to(1e9, 20).line_to(5, 35)
    s.stroke(path, RED, width=2)
    assert s.pixels[5, 5, 3] > 0.5
    assert s.pixels[35, 5, 3] > 0.5
    assert s.pixels[20, 5, 3] == 0.0


def test_ensure_size_only_resizes_on_change():
    s = Surface(20, 10)
    assert not s.ensure_size(20, 10)
    assert s.ensure_size(40, 30)
    assert s.size == (40, 30)
    assert s.pixels.shape == (30, 40, 4)


def test_composite_over_blends_with_frame():
    s = Surface(10, 10)
    frame = np.full((10, 10, 3), 200, dtype=np.uint8)
    assert np.array_equal(s.composite_over(frame), frame)

    s.global_alpha = 0.5
    s.fill(Path.rect(0, 0, 10, 10), SolidPaint((0, 0, 0, 1.0)))
    assert s.composite_over(frame)[5, 5].tolist() == [100, 100, 100]

    with pytest.raises(ValueError):
        s.composite_over(np.zeros((5, 5, 3), dtype=np.uint8))


def test_mirror_transform_maps_x_to_width_minus_x():
    s = Surface(200, 100)
    with MirrorTransform(s, True):
        s.fill(Path.rect(10, 20, 30, 40), SolidPaint(RED))
    x0, y0, x1, y1 = s.operations[0].bounds()
    assert (x0, x1) == (160.0, 190.0)
    assert (y0, y1) == (20.0, 60.0)
    assert s.depth == 0


def test_mirror_disabled_is_identity_but_still_paired():
    s = Surface(200, 100)
    guard = MirrorTransform(s, False).begin()
    assert s.depth == 1
    np.testing.assert_allclose(s.matrix, np.eye(3))
    guard.end()
    guard.end()  # 두 번째 end 는 무시
    assert s.depth == 0


def test_mirror_restores_on_exception():
    s = Surface(50, 50)
    with pytest.raises(RuntimeError):
        with MirrorTransform(s, True):
            raise RuntimeError("boom")
    assert s.depth == 0
    np.testing.assert_allclose(s.matrix, np.eye(3))


def test_mirror_begin_twice_rejected():
    s = Surface(50, 50)
    guard = MirrorTransform(s, True).begin()
    with pytest.raises(RuntimeError):
        guard.begin()
    guard.end()
