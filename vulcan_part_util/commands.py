"""
Command handlers for the Vulcan partition table utility.
"""

import os

from .analyzer import analyze_table
from .builder import build_partition_table
from .config import DEFAULT_PRESET, apply_overrides, get_preset, load_drive_config
from .disk import load_table_sector, store_table_sector
from .exceptions import VulcanError
from .formatter import OutputFormatter, format_report
from .interleave import deinterleave, interleave
from .logging_config import get_logger

log = get_logger('commands')


def read_table(image_path: str):
    """Load block 0 of an image and analyze it."""
    physical = load_table_sector(image_path)
    return analyze_table(deinterleave(physical))


def cmd_analyze(args, formatter: OutputFormatter) -> int:
    """Handle the 'analyze' command."""
    try:
        report = read_table(args.path)
        formatter.report(report, source=args.path, verbose=getattr(args, 'verbose', False))
        return 0

    except VulcanError as e:
        formatter.error(str(e))
        return 1


def _build_config(args):
    config = get_preset(getattr(args, 'preset', None) or DEFAULT_PRESET)

    config_path = getattr(args, 'config', None)
    if config_path:
        config = load_drive_config(config_path, base=config)

    return apply_overrides(
        config,
        drive_type=getattr(args, 'drive_type', None),
        full_partitions=getattr(args, 'partitions', None),
        block_count=getattr(args, 'blocks', None),
        cylinders=getattr(args, 'cylinders', None),
        heads=getattr(args, 'heads', None),
        sectors=getattr(args, 'sectors', None),
        interleave=getattr(args, 'interleave', None),
        boot_partition=getattr(args, 'boot', None),
    )


def cmd_build(args, formatter: OutputFormatter) -> int:
    """Handle the 'build' command."""
    output_path = args.output
    update = getattr(args, 'update', False)

    if update and not os.path.exists(output_path):
        formatter.error(f"Image not found: {output_path}")
        return 1
    if not update and os.path.exists(output_path) and not getattr(args, 'force', False):
        formatter.error(f"File already exists: {output_path}. Use --force to overwrite or --update to patch block 0.")
        return 1

    try:
        config = _build_config(args)
        log.debug("Drive configuration: %s", config)
        result = build_partition_table(config)
        store_table_sector(output_path, interleave(result.block), update=update)

        # Re-read what was written and check it
        report = read_table(output_path)

        warnings = [w.message for w in result.warnings + list(report.violations)]
        if formatter.json_mode:
            formatter.success(
                f"Created Vulcan partition table: {output_path}",
                checksum=report.header.checksum,
                block_count=report.header.block_count,
                partitions=sum(1 for e in report.entries if e.size),
                active=len(report.active_entries),
                warnings=warnings,
            )
        else:
            formatter.success(f"Created Vulcan partition table: {output_path}")
            if getattr(args, 'verbose', False):
                print()
                print(format_report(report, verbose=True))
        return 0

    except VulcanError as e:
        formatter.error(str(e))
        return 1


def cmd_convert(args, formatter: OutputFormatter) -> int:
    """Handle the 'convert' command (physical <-> logical byte order)."""
    try:
        data = load_table_sector(args.input)
        if args.to == 'logical':
            converted = deinterleave(data)
        else:
            converted = interleave(data)
        store_table_sector(args.output, converted)

        formatter.success(f"Converted {args.input} to {args.to} order: {args.output}")
        return 0

    except VulcanError as e:
        formatter.error(str(e))
        return 1
