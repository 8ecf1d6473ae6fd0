"""
CLI entry point for moddetective.

Usage:
    moddetective check [mods_dir]          Check installed mods for known defects

Options for check:
    --config PATH                          YAML config file
    --class-scan                           Also scan mod sources for 'con tater' menus
    --attribution {class,package}          Attribute class findings to classes or packages
    --json                                 Print the report as JSON
    -v, --verbose                          Debug logging

Exit codes:
    0  no bad mods found
    1  bad mods found (report printed)
    2  configuration or mod loading error
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import DetectiveConfig
from .errors import ConfigError, ModLoaderError

logger = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(levelname)s] %(name)s: %(message)s",
    )


def cmd_check(args):
    """Check installed mods for known defects."""
    from .detect import BadModsFound, collect
    from .detect.driver import SUCCESS_MESSAGE
    from .host import DirectoryModLoader, SourceTreeSubtypeFinder

    try:
        config = DetectiveConfig(Path(args.config) if args.config else None)
        if args.mods_dir:
            config.set("mods_dir", args.mods_dir)
        if args.class_scan:
            config.set("class_scan", True)
        if args.attribution:
            config.set("collision_attribution", args.attribution)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    _setup_logging("DEBUG" if args.verbose else config.log_level)
    if config.config_path:
        logger.debug(f"Using config {config.config_path}")

    finder = SourceTreeSubtypeFinder(config.mappings) if config.class_scan else None

    try:
        with DirectoryModLoader(config.mods_dir, config.metadata_filename) as loader:
            report = collect(loader, finder, config.collision_attribution)
    except ModLoaderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(report.render_json())
        return 0 if report.is_empty() else 1

    try:
        report.raise_if_needed()
    except BadModsFound as e:
        print(e)
        return 1

    print(SUCCESS_MESSAGE)
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="moddetective",
        description="Bad Mod Detective",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    moddetective check ~/.minecraft/mods
    moddetective check mods --class-scan --attribution package
    moddetective check --config moddetective.yaml --json
"""
    )
    parser.add_argument('--version', action='version', version=f'moddetective {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # check
    check_p = subparsers.add_parser('check', help='Check installed mods')
    check_p.add_argument('mods_dir', nargs='?', help='Mods directory (default from config)')
    check_p.add_argument('--config', help='YAML config file')
    check_p.add_argument('--class-scan', action='store_true', help='Scan mod sources for misnamed menus')
    check_p.add_argument('--attribution', choices=('class', 'package'), help='Class finding attribution')
    check_p.add_argument('--json', action='store_true', help='Print report as JSON')
    check_p.add_argument('-v', '--verbose', action='store_true')
    check_p.set_defaults(func=cmd_check)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
