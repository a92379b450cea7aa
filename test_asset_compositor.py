"""헤어 에셋 로드 / 합성 테스트"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import numpy as np
import pytest
from PIL import Image

from hair_overlay.core.reference_frame import build_reference_frame
from hair_overlay.core.surface import Surface
from hair_overlay.processing.asset_compositor import (
    AssetLoadResult,
    asset_box,
    load_asset,
    load_asset_async,
    render_asset,
)
from hair_overlay.utils.exceptions import AssetLoadError


@pytest.fixture
def red_png(tmp_path):
    path = tmp_path / "hair.png"
    Image.new("RGBA", (8, 4), (255, 0, 0, 255)).save(path)
    return path


def test_asset_box_canonical_face(landmarks, config):
    """폭 512, 높이 432 얼굴 → 793.6 x 583.2 박스"""
    frame = build_reference_frame(landmarks, (1280, 720), config)
    x, y, w, h = asset_box(frame, config)
    assert w == pytest.approx(512 * 1.55)
    assert h == pytest.approx(432 * 1.35)
    assert x == pytest.approx(640 - w / 2)
    assert y == pytest.approx(144 - h * 0.42)


def test_asset_box_follows_offset_and_scale(landmarks, config):
    moved = replace(config, offset_x=30.0, offset_y=-12.0, scale=1.2)
    frame = build_reference_frame(landmarks, (1280, 720), moved)
    x, y, w, h = asset_box(frame, moved)
    assert w == pytest.approx(512 * 1.55 * 1.2)
    assert x + w / 2 == pytest.approx(640 + 30)
    assert y == pytest.approx(144 - h * 0.42 - 12)


def test_render_asset_without_bitmap_is_noop(landmarks, config, surface):
    frame = build_reference_frame(landmarks, surface.size, config)
    render_asset(frame, config, None, surface)
    assert surface.operations == []
    assert surface.depth == 0


def test_render_asset_applies_opacity(landmarks, config, surface):
    bitmap = np.zeros((10, 10, 4), dtype=np.uint8)
    bitmap[..., 2] = 255
    bitmap[..., 3] = 255
    frame = build_reference_frame(landmarks, surface.size, config)

    render_asset(frame, replace(config, opacity=0.5), bitmap, surface)

    op, = surface.operations
    assert op.kind == 'image'
    assert op.alpha == 0.5
    assert surface.global_alpha == 1.0
    # 박스 중앙 (640, ~350)
    assert surface.pixels[350, 640, 3] == pytest.approx(0.5, abs=1e-3)


def test_load_asset_decodes_to_bgra(red_png):
    result = load_asset(red_png)
    assert result.ok
    assert result.error is None
    assert result.source == str(red_png)
    assert result.bitmap.shape == (4, 8, 4)
    assert result.bitmap[0, 0].tolist() == [0, 0, 255, 255]


def test_load_asset_converts_rgb_to_opaque(tmp_path):
    path = tmp_path / "solid.jpg"
    Image.new("RGB", (6, 6), (0, 0, 255)).save(path)
    result = load_asset(path)
    assert result.ok
    assert result.bitmap[..., 3].min() == 255


def test_load_asset_missing_file(tmp_path):
    result = load_asset(tmp_path / "nope.png")
    assert not result.ok
    assert result.error.startswith("File not found")


def test_load_asset_garbage_file(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not an image")
    result = load_asset(path)
    assert not result.ok
    assert result.error.startswith("Could not load PNG asset")


def test_unwrap_raises_with_path(tmp_path):
    missing = tmp_path / "nope.png"
    with pytest.raises(AssetLoadError) as excinfo:
        load_asset(missing).unwrap()
    assert excinfo.value.path == str(missing)
    assert str(excinfo.value).startswith("File not found")

    with pytest.raises(AssetLoadError) as excinfo:
        AssetLoadResult().unwrap()
    assert excinfo.value.path is None


def test_load_asset_async(red_png):
    with ThreadPoolExecutor(max_workers=1) as executor:
        result = load_asset_async(red_png, executor).result(timeout=10)
    assert result.ok

    result = load_asset_async(red_png).result(timeout=10)
    assert result.bitmap.shape == (4, 8, 4)


def test_loaded_asset_renders_on_surface(red_png, landmarks, config):
    surface = Surface(1280, 720)
    frame = build_reference_frame(landmarks, surface.size, config)
    render_asset(frame, replace(config, opacity=1.0), load_asset(red_png).unwrap(), surface)
    assert surface.to_bgra()[350, 640].tolist() == [0, 0, 255, 255]
