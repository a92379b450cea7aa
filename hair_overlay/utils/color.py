"""색상 변환 유틸리티"""

from typing import Tuple

RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, float]


def hex_to_rgb(hex_color: str) -> RGB:
    """
    '#rrggbb' 또는 '#rgb' 문자열을 (r, g, b) 튜플로 변환

    Raises:
        ValueError: 형식이 잘못된 경우
    """
    h = hex_color.replace("#", "").strip()
    if len(h) == 3:
        h = "".join(c + c for c in h)
    if len(h) != 6:
        raise ValueError(f"Invalid hex color: '{hex_color}'")
    n = int(h, 16)
    return ((n >> 16) & 255, (n >> 8) & 255, n & 255)


def rgb_to_hex(rgb: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def rgba(rgb: RGB, alpha: float = 1.0) -> RGBA:
    """RGB 색상에 알파 값을 붙임"""
    r, g, b = rgb
    return (r, g, b, alpha)
