"""
Runs the variant generators over every classified asset.

Each asset is handled on its own: a failure is logged, recorded in the
report, and the loop moves on to the next file.
"""

import os
from dataclasses import dataclass, field
from typing import List, Sequence

from PIL import Image

from .assets import AssetBucket
from .errors import OptimizerError, ProcessingError
from .flags import ImageOptions, ResolvedFlags, SvgOptions, VideoOptions
from .images import ImageOptimizer, output_dir_for
from .jsx import DEFAULT_PLUGINS, component_name, svg_to_component
from .logger import Logger
from .svg import minify_svg

# Errors that only affect the asset being processed
ASSET_ERRORS = (OptimizerError, OSError, ValueError, Image.DecompressionBombError)


@dataclass
class ProcessingReport:
    written: List[str] = field(default_factory=list)
    failures: List[ProcessingError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def optimize_images(paths: Sequence[str], options: ImageOptions, log: Logger,
                    report: ProcessingReport) -> None:
    optimizer = ImageOptimizer(log)
    for path in paths:
        log.info(f'Optimizing image {path}')
        try:
            report.written.extend(optimizer.optimize(path, options))
        except ASSET_ERRORS as e:
            failure = ProcessingError(path, e)
            log.error(str(failure))
            report.failures.append(failure)


def optimize_svg(path: str, options: SvgOptions, log: Logger) -> List[str]:
    """Write the minified SVG and, with ``jsx``, a .tsx component."""
    # Bytes go to the parser as-is so the XML declaration picks the encoding
    with open(path, 'rb') as fh:
        source = fh.read()

    out_dir = output_dir_for(path, options.output)
    os.makedirs(out_dir, exist_ok=True)
    stem = os.path.splitext(os.path.basename(path))[0]

    written = []
    optimized_path = os.path.join(out_dir, f'{stem}.optimized.svg')
    optimized = minify_svg(source, multipass=True)
    with open(optimized_path, 'w', encoding='utf-8') as fh:
        fh.write(optimized)
    written.append(optimized_path)

    before = len(source) / 1024.0
    after = len(optimized.encode('utf-8')) / 1024.0
    log.success(f'Wrote {optimized_path} ({before:.1f}KB -> {after:.1f}KB)')

    if options.jsx:
        name = component_name(path)
        component_path = os.path.join(out_dir, f'{name}.tsx')
        code = svg_to_component(source, name, plugins=DEFAULT_PLUGINS)
        with open(component_path, 'w', encoding='utf-8') as fh:
            fh.write(code)
        written.append(component_path)
        log.success(f'Wrote {component_path}')

    return written


def optimize_svgs(paths: Sequence[str], options: SvgOptions, log: Logger,
                  report: ProcessingReport) -> None:
    for path in paths:
        log.info(f'Optimizing svg {path}')
        try:
            report.written.extend(optimize_svg(path, options, log))
        except ASSET_ERRORS as e:
            failure = ProcessingError(path, e)
            log.error(str(failure))
            report.failures.append(failure)


def report_videos(paths: Sequence[str], options: VideoOptions, log: Logger) -> None:
    for path in paths:
        log.warn(f'Video optimization is not available yet, skipping {path} (crf {options.crf})')


def optimize_assets(assets: AssetBucket, flags: ResolvedFlags, log: Logger) -> ProcessingReport:
    """Generate every output for the classified assets, one file at a time."""
    report = ProcessingReport()

    if assets.image and flags.image is not None:
        optimize_images(assets.image, flags.image, log, report)
    if assets.svg and flags.svg is not None:
        optimize_svgs(assets.svg, flags.svg, log, report)
    if assets.video and flags.video is not None:
        report_videos(assets.video, flags.video, log)

    return report
