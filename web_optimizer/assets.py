"""
Asset classification: sort input paths into image, svg and video buckets.
"""

import os
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .constants import ASSET_EXTENSIONS, ASSET_TYPES
from .errors import (
    AssetNotFoundError,
    MissingExtensionError,
    OptimizerError,
    UnsupportedAssetError,
)
from .logger import Logger


@dataclass(frozen=True)
class SkippedAsset:
    path: str
    reason: str


@dataclass(frozen=True)
class AssetBucket:
    """Classified input paths, in the order they were given."""

    svg: Tuple[str, ...] = ()
    image: Tuple[str, ...] = ()
    video: Tuple[str, ...] = ()
    skipped: Tuple[SkippedAsset, ...] = field(default=())

    def of_type(self, asset_type: str) -> Tuple[str, ...]:
        return getattr(self, asset_type)

    def present(self) -> List[str]:
        """Asset types that have at least one path."""
        return [asset_type for asset_type in ASSET_TYPES if self.of_type(asset_type)]

    def __len__(self) -> int:
        return sum(len(self.of_type(asset_type)) for asset_type in ASSET_TYPES)


def get_file_extension(path: str) -> str:
    """Return the lowercased text after the final '.' of the base name."""
    name = os.path.basename(path)
    _, dot, ext = name.rpartition('.')
    if not dot or not ext:
        raise MissingExtensionError(path)
    return ext.lower()


def asset_type_for(path: str) -> str:
    if not os.path.isfile(path) or not os.access(path, os.R_OK):
        raise AssetNotFoundError(path)

    ext = get_file_extension(path)
    try:
        return ASSET_EXTENSIONS[ext]
    except KeyError:
        raise UnsupportedAssetError(path, ext) from None


def classify_assets(paths: Iterable[str], log: Logger) -> AssetBucket:
    """
    Partition paths by asset type.

    Paths that are missing, unreadable, extensionless or unsupported are
    skipped with a warning; the remaining paths are still classified.
    """
    buckets = {asset_type: [] for asset_type in ASSET_TYPES}
    skipped = []
    seen = set()

    for path in paths:
        if path in seen:
            continue
        seen.add(path)

        try:
            asset_type = asset_type_for(path)
        except OptimizerError as e:
            log.warn(f'Skipping {path}: {e}')
            skipped.append(SkippedAsset(path, str(e)))
            continue

        buckets[asset_type].append(path)

    return AssetBucket(
        svg=tuple(buckets['svg']),
        image=tuple(buckets['image']),
        video=tuple(buckets['video']),
        skipped=tuple(skipped),
    )
