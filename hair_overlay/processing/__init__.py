"""Processing layer components"""

from .asset_compositor import AssetLoadResult, load_asset, load_asset_async, render_asset
from .frame_orchestrator import FrameOrchestrator
from .snapshot import compose_snapshot, save_snapshot
from .styles import STYLE_RENDERERS, render_style

__all__ = [
    'AssetLoadResult', 'load_asset', 'load_asset_async', 'render_asset',
    'FrameOrchestrator',
    'compose_snapshot', 'save_snapshot',
    'STYLE_RENDERERS', 'render_style',
]
