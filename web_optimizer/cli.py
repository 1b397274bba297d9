#!/usr/bin/env python3
"""
Web Optimizer - resize, recompress and minify web assets from the command line.
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .assets import classify_assets
from .constants import DEFAULT_CRF, DEVICE_SIZES, PROG_NAME
from .flags import flags_from_namespace, resolve_flags
from .logger import Logger
from .optimizer import optimize_assets


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description='A CLI for optimizing web assets (images, SVGs and videos)',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s hero.jpg logo.svg
  %(prog)s hero.jpg --output dist --format webp --quality 80
  %(prog)s hero.png --sizes 640 1080 1920
  %(prog)s avatar.png --descriptor x
  %(prog)s icons/my-icon.svg --jsx --output src/icons
        """
    )

    parser.add_argument('assets', nargs='*',
                        help='A space separated list of assets to optimize')
    parser.add_argument('-o', '--output',
                        help='Directory to write the asset files to '
                             '(default: next to each source file)')
    parser.add_argument('-f', '--format',
                        help='Output image format: png, jpeg, jpg or webp (default: png)')
    parser.add_argument('-s', '--sizes', nargs='+',
                        help='Widths to resize images to with the "w" descriptor '
                             f'(default: {" ".join(str(s) for s in DEVICE_SIZES)})')
    parser.add_argument('-d', '--descriptor',
                        help='"w" for width variants, "x" for a 2x density variant (default: w)')
    parser.add_argument('-q', '--quality',
                        help='Encode quality between 0 and 100 (default: 75)')
    parser.add_argument('--jsx', action='store_true',
                        help='Also write a typed React component (.tsx) for each SVG')
    parser.add_argument('--crf',
                        help=f'Constant Rate Factor for videos, reserved (default: {DEFAULT_CRF})')
    parser.add_argument('--no-backup', dest='backup', action='store_false',
                        help='Do not keep a .bak copy when an image is overwritten in place')
    parser.add_argument('--no-color', dest='color', action='store_false', default=None,
                        help='Disable colored output')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def print_summary(log: Logger, written: int, skipped: int, failed: int) -> None:
    log.rule()
    log.info(f'Files written: {written}')
    if skipped:
        log.warn(f'Inputs skipped: {skipped}')
    if failed:
        log.error(f'Assets failed: {failed}')
    log.rule()


def main(argv: Optional[List[str]] = None) -> int:
    """Main function with command line interface."""
    parser = build_parser()
    args = parser.parse_args(argv)
    log = Logger(color=args.color)

    if not args.assets:
        log.error('No assets given.')
        parser.print_usage()
        return 1

    assets = classify_assets(args.assets, log)
    if not assets.present():
        log.warn('No supported assets to optimize.')
        return 0

    flags = resolve_flags(flags_from_namespace(args), assets, log)
    if not flags.ok:
        for error in flags.errors:
            log.error(str(error))
        return 1

    log.rule()
    log.info(f'Images: {len(assets.image)}  SVGs: {len(assets.svg)}  Videos: {len(assets.video)}')
    log.info(f'Output: {args.output or "next to each source file"}')
    log.rule()

    report = optimize_assets(assets, flags, log)
    print_summary(log, len(report.written), len(assets.skipped), len(report.failures))

    return 0 if report.ok else 1


if __name__ == '__main__':
    sys.exit(main())
