"""
Defaults and lookup tables shared across the optimizer.
"""

from typing import Dict, Tuple

PROG_NAME = 'web-optimizer'

# One bucket per extension
ASSET_EXTENSIONS: Dict[str, str] = {
    'jpg': 'image',
    'jpeg': 'image',
    'png': 'image',
    'webp': 'image',
    'svg': 'svg',
    'mp4': 'video',
    'webm': 'video',
}

ASSET_TYPES: Tuple[str, ...] = ('image', 'svg', 'video')

DEVICE_SIZES: Tuple[int, ...] = (640, 750, 828, 1080, 1200, 1920, 2048, 3840)

DEFAULT_QUALITY = 75
DEFAULT_DESCRIPTOR = 'w'
DEFAULT_FORMAT = 'png'
DEFAULT_CRF = 23

DESCRIPTORS = ('w', 'x')
FORMAT_ALIASES: Dict[str, str] = {
    'jpg': 'jpeg',
    'jpeg': 'jpeg',
    'png': 'png',
    'webp': 'webp',
}
CRF_RANGE = (0, 51)

DENSITY_SCALE = 2

# WebP switches to lossless encoding from this quality up
WEBP_LOSSLESS_QUALITY = 95

SVG_PRECISION = 3
SVG_MAX_PASSES = 10
