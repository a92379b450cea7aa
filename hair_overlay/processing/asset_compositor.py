"""사용자 헤어 에셋(투명 PNG) 로드 및 합성"""

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path as FilePath
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..config.constants import ASSET_HEIGHT_FACTOR, ASSET_VERTICAL_BIAS, ASSET_WIDTH_FACTOR
from ..config.settings import RenderConfig
from ..core.surface import Surface
from ..models import ReferenceFrame
from ..utils import get_logger
from ..utils.exceptions import AssetLoadError, InvalidImageError
from ..utils.validators import validate_image

logger = get_logger(__name__)


@dataclass(frozen=True)
class AssetLoadResult:
    """에셋 로드 결과 (bitmap 또는 실패 사유)"""

    bitmap: Optional[np.ndarray] = None
    error: Optional[str] = None
    source: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.bitmap is not None

    def unwrap(self) -> np.ndarray:
        """
        Raises:
            AssetLoadError: 로드 실패 결과인 경우
        """
        if self.bitmap is None:
            raise AssetLoadError(self.error or "Asset not loaded", path=self.source)
        return self.bitmap


def decode_asset(image: Image.Image) -> np.ndarray:
    """PIL 이미지 → uint8 BGRA numpy 배열"""
    rgba = np.asarray(image.convert("RGBA"), dtype=np.uint8)
    return np.ascontiguousarray(rgba[..., [2, 1, 0, 3]])


def load_asset(path: Union[str, FilePath]) -> AssetLoadResult:
    """
    헤어 에셋 이미지 로드

    예외를 던지지 않고 실패 사유를 AssetLoadResult.error 에 담아 반환한다.

    Args:
        path: 이미지 파일 경로 (투명 PNG 권장)
    """
    source = str(path)
    try:
        with Image.open(source) as img:
            bitmap = decode_asset(img)
        validate_image(bitmap)
    except FileNotFoundError:
        logger.warning(f"Asset not found: {source}")
        return AssetLoadResult(error=f"File not found: {source}", source=source)
    except (UnidentifiedImageError, OSError, InvalidImageError) as e:
        logger.warning(f"Could not decode asset {source}: {e}")
        return AssetLoadResult(error=f"Could not load PNG asset: {e}", source=source)

    logger.info(f"Asset loaded: {source} ({bitmap.shape[1]}x{bitmap.shape[0]})")
    return AssetLoadResult(bitmap=bitmap, source=source)


def load_asset_async(
    path: Union[str, FilePath],
    executor: Optional[ThreadPoolExecutor] = None
) -> "Future[AssetLoadResult]":
    """
    별도 스레드에서 에셋 로드

    Args:
        path: 이미지 파일 경로
        executor: 사용할 executor (None이면 1회용 executor 생성)

    Returns:
        AssetLoadResult 를 돌려주는 Future
    """
    if executor is not None:
        return executor.submit(load_asset, path)

    own_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="asset-loader")
    future = own_executor.submit(load_asset, path)
    own_executor.shutdown(wait=False)
    return future


def asset_box(frame: ReferenceFrame, config: RenderConfig) -> Tuple[float, float, float, float]:
    """
    에셋을 그릴 박스 (x, y, w, h)

    가로 중심은 ReferenceFrame.center(오프셋 포함)에 맞추고,
    세로는 이마 위로 h * 0.42 만큼 올린 뒤 offset_y 를 적용한다.
    """
    w = frame.face_width * ASSET_WIDTH_FACTOR * config.scale
    h = frame.face_height * ASSET_HEIGHT_FACTOR * config.scale
    x = frame.center.x - w / 2
    y = frame.anchors.forehead_top.y - h * ASSET_VERTICAL_BIAS + config.offset_y
    return (x, y, w, h)


def render_asset(
    frame: ReferenceFrame,
    config: RenderConfig,
    bitmap: Optional[np.ndarray],
    surface: Surface
):
    """에셋 bitmap 을 global alpha = opacity 로 그림. bitmap 이 없으면 아무것도 하지 않음"""
    if bitmap is None:
        return

    x, y, w, h = asset_box(frame, config)
    with surface.saved():
        surface.global_alpha = config.opacity
        surface.draw_image(bitmap, x, y, w, h)
