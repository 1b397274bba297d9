"""
Raster image variants: re-encode the source and write resized copies.
"""

import os
import shutil
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from PIL import Image

from .constants import DENSITY_SCALE, WEBP_LOSSLESS_QUALITY
from .flags import ImageOptions
from .logger import Logger


@dataclass(frozen=True)
class OutputVariant:
    """One file to write for a source image."""

    source_path: str
    output_path: str
    width: int
    height: int
    format: str
    quality: int
    scale: Optional[int] = None


def output_dir_for(source_path: str, output: Optional[str]) -> str:
    if output:
        return output
    return os.path.dirname(source_path) or '.'


def plan_image_variants(source_path: str, size: Tuple[int, int],
                        options: ImageOptions) -> List[OutputVariant]:
    """
    Work out every output for one source image of the given natural size.

    The first entry is always the base re-encode at the source dimensions.
    Width descriptors add one entry per requested width smaller than the
    source; the density descriptor adds a single 2x entry.
    """
    width, height = size
    out_dir = output_dir_for(source_path, options.output)
    stem = os.path.splitext(os.path.basename(source_path))[0]
    fmt = options.format

    def variant(name: str, w: int, h: int, scale: Optional[int] = None) -> OutputVariant:
        return OutputVariant(
            source_path=source_path,
            output_path=os.path.join(out_dir, f'{name}.{fmt}'),
            width=w,
            height=h,
            format=fmt,
            quality=options.quality,
            scale=scale,
        )

    variants = [variant(stem, width, height)]

    if options.descriptor == 'w':
        for target in options.sizes:
            # Never upscale
            if width > target:
                scaled_height = max(1, round(height * target / width))
                variants.append(variant(f'{stem}-{target}w', target, scaled_height))
    elif options.descriptor == 'x':
        variants.append(variant(
            f'{stem}@{DENSITY_SCALE}x',
            width * DENSITY_SCALE,
            height * DENSITY_SCALE,
            scale=DENSITY_SCALE,
        ))

    return variants


def encode_params(fmt: str, quality: int) -> Dict[str, Any]:
    """Pillow save() arguments for an output format."""
    if fmt == 'jpeg':
        return {
            'format': 'JPEG',
            'quality': quality,
            'optimize': True,
            'progressive': True,
        }
    if fmt == 'png':
        # PNG is lossless, quality only picks the zlib level (1-9)
        return {
            'format': 'PNG',
            'optimize': True,
            'compress_level': max(1, min(9, quality // 10)),
        }
    if fmt == 'webp':
        return {
            'format': 'WEBP',
            'quality': quality,
            'lossless': quality >= WEBP_LOSSLESS_QUALITY,
            'method': 4,  # Good balance of speed/compression
        }
    raise ValueError(f'unsupported output format: {fmt}')


def has_transparency(img: Image.Image) -> bool:
    if img.mode in ('RGBA', 'LA'):
        alpha = np.asarray(img.getchannel('A'))
        return bool(alpha.min() < 255)
    if img.mode == 'P' and 'transparency' in img.info:
        return True
    return False


def normalize_mode(img: Image.Image) -> Image.Image:
    """Convert palette, CMYK and other exotic modes to RGB or RGBA."""
    if img.mode in ('RGB', 'RGBA', 'L'):
        return img
    target = 'RGBA' if has_transparency(img) else 'RGB'
    return img.convert(target)


def flatten_alpha(img: Image.Image, background=(255, 255, 255)) -> Image.Image:
    if img.mode != 'RGBA':
        return img.convert('RGB')
    flat = Image.new('RGB', img.size, background)
    flat.paste(img, mask=img.getchannel('A'))
    return flat


def backup_path_for(source_path: str) -> str:
    stem, ext = os.path.splitext(source_path)
    return f'{stem}.bak{ext}'


def create_backup(source_path: str) -> Tuple[str, bool]:
    """
    Copy the source next to itself and flush it to disk.

    An existing backup holds the original from an earlier run and is never
    overwritten; the flag tells whether a new copy was made.
    """
    backup_path = backup_path_for(source_path)
    if os.path.exists(backup_path):
        return backup_path, False
    shutil.copy2(source_path, backup_path)
    with open(backup_path, 'r+b') as fh:
        os.fsync(fh.fileno())
    return backup_path


def same_file(a: str, b: str) -> bool:
    return os.path.normcase(os.path.abspath(a)) == os.path.normcase(os.path.abspath(b))


class ImageOptimizer:
    """Writes the planned variants of one image at a time."""

    def __init__(self, log: Logger):
        self.log = log

    def load(self, path: str) -> Tuple[Image.Image, Dict[str, Any]]:
        with Image.open(path) as source:
            source.load()
            metadata = {}
            if source.info.get('icc_profile'):
                metadata['icc_profile'] = source.info['icc_profile']
            img = normalize_mode(source.copy())
        return img, metadata

    def optimize(self, path: str, options: ImageOptions) -> List[str]:
        """
        Write every variant of ``path`` and return the written paths.

        The source is fully read into memory first, so the base output may
        replace it. That only happens after the backup copy is on disk.
        """
        img, metadata = self.load(path)
        variants = plan_image_variants(path, img.size, options)

        os.makedirs(output_dir_for(path, options.output), exist_ok=True)

        if options.backup and same_file(variants[0].output_path, path):
            backup, created = create_backup(path)
            if created:
                self.log.info(f'Backed up {path} to {backup}')
            else:
                self.log.info(f'Keeping existing backup {backup}')

        written = []
        for variant in variants:
            self.write_variant(img, variant, metadata)
            written.append(variant.output_path)
        return written

    def write_variant(self, img: Image.Image, variant: OutputVariant,
                      metadata: Dict[str, Any]) -> None:
        if (variant.width, variant.height) != img.size:
            # Use high-quality resampling
            img = img.resize((variant.width, variant.height), Image.Resampling.LANCZOS)

        if variant.format == 'jpeg':
            img = flatten_alpha(img) if img.mode != 'L' else img

        save_params = encode_params(variant.format, variant.quality)
        save_params.update(metadata)

        # Encode next to the target and swap it in, so a failed save never
        # leaves a truncated file where the source used to be
        tmp_path = variant.output_path + '.tmp'
        try:
            img.save(tmp_path, **save_params)
            os.replace(tmp_path, variant.output_path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        size_kb = os.path.getsize(variant.output_path) / 1024.0
        self.log.success(
            f'Wrote {variant.output_path} ({variant.width}x{variant.height}, {size_kb:.1f}KB)'
        )
