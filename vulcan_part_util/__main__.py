"""
Entry point for the Vulcan partition table utility.

Allows running as: python -m vulcan_part_util
"""

import argparse
import sys

from . import __version__
from .commands import cmd_analyze, cmd_build, cmd_convert
from .config import DEFAULT_PRESET, DRIVE_PRESETS
from .formatter import OutputFormatter
from .logging_config import setup_logging, QUIET, NORMAL, VERBOSE


def _int_arg(value: str) -> int:
    """Parse decimal, 0x-prefixed hex or $-prefixed hex."""
    try:
        if value.startswith('$'):
            return int(value[1:], 16)
        return int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog='vulcan_part_util',
        description='Applied Engineering Vulcan partition table utility',
    )

    # Global options
    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Show detailed output')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Suppress non-essential output')
    parser.add_argument('--json', action='store_true', help='Output in JSON format')

    subparsers = parser.add_subparsers(dest='command', required=True)

    # Analyze command
    analyze_parser = subparsers.add_parser('analyze', help='Decode and check the partition table',
                                           epilog='Use -v for a field-by-field dump.')
    analyze_parser.add_argument('path', help='Drive image (CF card dump or hard disk image)')

    # Build command
    build_parser = subparsers.add_parser('build', help='Create a new partition table')
    build_parser.add_argument('output', help='Output file (new sector file, or image with --update)')
    build_parser.add_argument('-p', '--preset', choices=sorted(DRIVE_PRESETS), default=DEFAULT_PRESET,
                              help=f'Drive preset (default: {DEFAULT_PRESET})')
    build_parser.add_argument('-c', '--config', help='JSON drive profile merged over the preset')
    build_parser.add_argument('-n', '--partitions', type=_int_arg,
                              help='Number of maximum-size ProDOS partitions')
    build_parser.add_argument('--drive-type', type=_int_arg, help='Drive id shown by the manager')
    build_parser.add_argument('--blocks', type=_int_arg, help='Total block count')
    build_parser.add_argument('--cylinders', type=_int_arg, help='Cylinder count')
    build_parser.add_argument('--heads', type=_int_arg, help='Head count')
    build_parser.add_argument('--sectors', type=_int_arg, help='Sectors per track')
    build_parser.add_argument('--interleave', type=_int_arg, help='Interleave factor')
    build_parser.add_argument('--boot', type=_int_arg, help='Boot partition index (0-based)')
    build_parser.add_argument('-u', '--update', action='store_true',
                              help='Overwrite block 0 of an existing image')
    build_parser.add_argument('-f', '--force', action='store_true',
                              help='Overwrite existing file')

    # Convert command
    convert_parser = subparsers.add_parser('convert', help='Convert the table sector byte order')
    convert_parser.add_argument('input', help='Input image or sector file')
    convert_parser.add_argument('output', help='Output sector file')
    convert_parser.add_argument('--to', required=True, choices=['logical', 'physical'],
                                help='Target byte order')

    args = parser.parse_args(argv)

    # Configure logging based on verbosity flags
    if args.quiet:
        setup_logging(level=QUIET)
    elif args.verbose:
        setup_logging(level=VERBOSE)
    else:
        setup_logging(level=NORMAL)

    formatter = OutputFormatter(json_mode=args.json)

    match args.command:
        case 'analyze':
            return cmd_analyze(args, formatter)
        case 'build':
            return cmd_build(args, formatter)
        case 'convert':
            return cmd_convert(args, formatter)
        case _:
            formatter.error(f"Unknown command: {args.command}")
            return 1


if __name__ == '__main__':
    sys.exit(main())
