"""
Command Line Interface for the gallery builder.
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .errors import ConfigError, TemplateError
from .gallery_config import CONFIG_FILENAME, GalleryConfig
from .pipeline import Pipeline
from .reporter import Reporter
from .scan_progress import ScanProgress
from .transcode_progress import TranscodeProgress


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('albumgen')


def cmd_build(args: argparse.Namespace) -> int:
    """Execute build command."""
    logger = setup_logging(args.verbose)

    try:
        config = GalleryConfig.load(Path(args.config), logger=logger)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    logger.info(f"Input: {config.input_root}")
    logger.info(f"Output: {config.output_root}")
    logger.info(f"Thumbnail size: {config.thumbnail_box[0]}x{config.thumbnail_box[1]}")
    if config.resize_box:
        logger.info(f"Resize: {config.resize_box[0]}x{config.resize_box[1]}")
    else:
        logger.info("Resize: off (originals are copied)")

    if args.show_files:
        logger.info("Show-files mode: will print each file")

    scan_progress = None
    transcode_progress = None
    if not args.quiet:
        scan_progress = ScanProgress(show_files=args.show_files, logger=logger)
        transcode_progress = TranscodeProgress(show_files=args.show_files, logger=logger)

    try:
        pipeline = Pipeline(
            config,
            workers=args.jobs,
            quality=args.quality,
            dry_run=args.dry_run,
            logger=logger,
        )
        report = pipeline.run(scan_progress=scan_progress, transcode_progress=transcode_progress)
    except ConfigError as e:
        logger.error(str(e))
        return 1
    except TemplateError as e:
        logger.error(f"Build failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Build failed: {e}")
        return 1

    if not args.quiet:
        print()
        Reporter().report_build(report)

    if not report.ok:
        logger.error(f"{report.transcode.errors} image(s) failed to build")
        return 1

    return 0


def cmd_new(args: argparse.Namespace) -> int:
    """Execute new command: write the default configuration."""
    logger = setup_logging(args.verbose)
    path = Path(args.config)

    if path.exists():
        logger.warning(f"Overwriting existing {path}")

    try:
        GalleryConfig.default().save(path)
    except OSError as e:
        logger.error(f"Could not write {path}: {e}")
        return 1

    print(f"Wrote {path}.")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='albumgen',
        description='Static photo gallery generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Workflow:
  1. New:    albumgen new          (writes {CONFIG_FILENAME})
  2. Build:  albumgen build

Only images whose output is missing or older than the source are rebuilt.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    parser.add_argument('-c', '--config', default=CONFIG_FILENAME,
                        help=f'Configuration file (default: {CONFIG_FILENAME})')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Build command
    build_parser = subparsers.add_parser('build', help='Build static gallery')
    build_parser.add_argument('-j', '--jobs', type=int, metavar='N',
                              help='Number of transcode workers (default: number of CPUs)')
    build_parser.add_argument('--quality', type=int, default=85,
                              help='JPEG quality for generated images (default: 85)')
    build_parser.add_argument('-n', '--dry-run', action='store_true', help='Show what would be built')
    build_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    build_parser.add_argument('--show-files', action='store_true',
                              help='Print each file as scanned and built')
    build_parser.add_argument('-v', '--verbose', action='store_true', default=argparse.SUPPRESS,
                              help='Enable verbose logging')

    # New command
    new_parser = subparsers.add_parser('new', help=f'Create new {CONFIG_FILENAME} config')
    new_parser.add_argument('-v', '--verbose', action='store_true', default=argparse.SUPPRESS,
                            help='Enable verbose logging')

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'build':
        return cmd_build(parsed_args)
    elif parsed_args.command == 'new':
        return cmd_new(parsed_args)

    return 1
