"""
Flag resolution: turn raw CLI values into validated per-asset option sets.

Each flag is checked on its own so that a single run reports every bad
value, not just the first one.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .assets import AssetBucket
from .constants import (
    CRF_RANGE,
    DEFAULT_CRF,
    DEFAULT_DESCRIPTOR,
    DEFAULT_FORMAT,
    DEFAULT_QUALITY,
    DESCRIPTORS,
    DEVICE_SIZES,
    FORMAT_ALIASES,
)
from .errors import FlagValidationError
from .logger import Logger


@dataclass(frozen=True)
class ImageOptions:
    quality: int = DEFAULT_QUALITY
    descriptor: str = DEFAULT_DESCRIPTOR
    sizes: Tuple[int, ...] = DEVICE_SIZES
    format: str = DEFAULT_FORMAT
    output: Optional[str] = None
    backup: bool = True


@dataclass(frozen=True)
class SvgOptions:
    jsx: bool = False
    output: Optional[str] = None


@dataclass(frozen=True)
class VideoOptions:
    crf: int = DEFAULT_CRF
    output: Optional[str] = None


@dataclass
class ResolvedFlags:
    """Option sets for the asset types present, plus every validation error."""

    image: Optional[ImageOptions] = None
    svg: Optional[SvgOptions] = None
    video: Optional[VideoOptions] = None
    errors: List[FlagValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _is_unset(value: Any) -> bool:
    return value is None or value == '' or value == []


def _parse_int(flag: str, value: Any, low: int, high: int) -> int:
    if isinstance(value, bool):
        raise FlagValidationError(flag, value, 'expected an integer')
    try:
        number = int(str(value).strip())
    except ValueError:
        raise FlagValidationError(flag, value, 'expected an integer') from None
    if not low <= number <= high:
        raise FlagValidationError(flag, value, f'must be between {low} and {high}')
    return number


def parse_quality(value: Any) -> int:
    return _parse_int('quality', value, 0, 100)


def parse_crf(value: Any) -> int:
    return _parse_int('crf', value, *CRF_RANGE)


def parse_descriptor(value: Any) -> str:
    descriptor = str(value).strip().lower()
    if descriptor not in DESCRIPTORS:
        raise FlagValidationError('descriptor', value, 'must be "w" or "x"')
    return descriptor


def parse_format(value: Any) -> str:
    fmt = str(value).strip().lower().lstrip('.')
    try:
        return FORMAT_ALIASES[fmt]
    except KeyError:
        choices = ', '.join(FORMAT_ALIASES)
        raise FlagValidationError('format', value, f'expected one of {choices}') from None


def parse_sizes(value: Any) -> Tuple[int, ...]:
    """
    Parse widths given either as one string ("640 750,828") or as a list of
    strings as collected by argparse. Duplicates are dropped, order is kept.
    """
    if isinstance(value, str):
        entries: Sequence[Any] = [value]
    else:
        entries = list(value)

    tokens = []
    for entry in entries:
        tokens.extend(t for t in re.split(r'[\s,]+', str(entry)) if t)

    if not tokens:
        raise FlagValidationError('sizes', value, 'expected at least one width')

    bad = [t for t in tokens if not t.isdigit() or int(t) <= 0]
    if bad:
        raise FlagValidationError('sizes', value, f'not positive integers: {", ".join(bad)}')

    sizes: List[int] = []
    for token in tokens:
        width = int(token)
        if width not in sizes:
            sizes.append(width)
    return tuple(sizes)


class FlagResolver:
    """Resolves the raw flag mapping one asset type at a time."""

    def __init__(self, raw: Mapping[str, Any], log: Logger):
        self.raw = raw
        self.log = log
        self.errors: List[FlagValidationError] = []

    def _value(self, flag: str, parser, default, message: Optional[str] = None):
        value = self.raw.get(flag)
        if _is_unset(value):
            if message:
                self.log.info(message)
            return default
        try:
            return parser(value)
        except FlagValidationError as e:
            self.errors.append(e)
            return default

    def image_options(self) -> ImageOptions:
        # Every field is resolved unconditionally
        quality = self._value(
            'quality', parse_quality, DEFAULT_QUALITY,
            f'No quality flag set, using default value of {DEFAULT_QUALITY}.',
        )
        descriptor = self._value(
            'descriptor', parse_descriptor, DEFAULT_DESCRIPTOR,
            'No descriptor flag set, using width descriptor "w".',
        )
        sizes = self._value(
            'sizes', parse_sizes, DEVICE_SIZES,
            f'No sizes flag set, using default device sizes {list(DEVICE_SIZES)}.',
        )
        fmt = self._value(
            'format', parse_format, DEFAULT_FORMAT,
            f'No format flag set, using default value of "{DEFAULT_FORMAT}".',
        )
        return ImageOptions(
            quality=quality,
            descriptor=descriptor,
            sizes=sizes,
            format=fmt,
            output=self.output(),
            backup=bool(self.raw.get('backup', True)),
        )

    def svg_options(self) -> SvgOptions:
        return SvgOptions(jsx=bool(self.raw.get('jsx', False)), output=self.output())

    def video_options(self) -> VideoOptions:
        crf = self._value('crf', parse_crf, DEFAULT_CRF)
        return VideoOptions(crf=crf, output=self.output())

    def output(self) -> Optional[str]:
        output = self.raw.get('output')
        return None if _is_unset(output) else str(output)


def resolve_flags(raw: Mapping[str, Any], assets: AssetBucket, log: Logger) -> ResolvedFlags:
    """Build one option set per asset type present in ``assets``."""
    resolver = FlagResolver(raw, log)
    resolved = ResolvedFlags()

    if assets.present() and resolver.output() is None:
        log.info('No output directory specified, writing next to each source file.')

    if assets.image:
        resolved.image = resolver.image_options()
    if assets.svg:
        resolved.svg = resolver.svg_options()
    if assets.video:
        resolved.video = resolver.video_options()

    resolved.errors = resolver.errors
    return resolved


def flags_from_namespace(namespace: Any) -> Dict[str, Any]:
    """argparse.Namespace -> plain dict of flag values."""
    return {key: value for key, value in vars(namespace).items() if key != 'assets'}
