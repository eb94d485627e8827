"""
Output formatting for the Vulcan partition table utility.

Rendering is a pure function of a TableReport; nothing here inspects raw
blocks.
"""

import json
import sys

from .codec import hex_bytes
from .models import FieldValue, TableReport


def _format_field(fv: FieldValue) -> str:
    if isinstance(fv.value, bytes):
        return f"{fv.label}: {hex_bytes(fv.value, 0, fv.width, skip_zero=True)}"
    digits = fv.width * 2
    if fv.name in ('magic', 'checksum'):
        return f"{fv.label}: 0x{fv.value:0{digits}X}"
    return f"{fv.label}: 0x{fv.value:0{digits}X} ({fv.value})"


def format_report(report: TableReport, verbose: bool = False) -> str:
    """
    Format an analysis report as human-readable text.

    Args:
        report: Result of analyze_table()
        verbose: Include the field-by-field header dump

    Returns:
        Formatted string
    """
    header = report.header
    lines = []

    lines.append(f"Drive: {header.drive_name} (id 0x{header.drive_type:02X})")
    lines.append(f"Blocks: 0x{header.block_count:06X} ({header.block_count})")
    lines.append(
        f"Geometry: {header.cylinders} cylinders, {header.heads} heads, "
        f"{header.sectors} sectors, interleave {header.interleave}"
    )
    slots = ', '.join(str(s + 1) for s in header.active_slots) or 'none'
    lines.append(f"Active ProDOS slots: {slots}")

    if verbose:
        lines.append("")
        lines.append("Partition block data:")
        for fv in report.fields:
            lines.append(f"  ofs: 0x{fv.offset:02X} size: 0x{fv.width:02X}  {_format_field(fv)}")

    lines.append("")
    if report.calculated_cylinders is not None:
        lines.append(f"Calculated cylinder count: 0x{report.calculated_cylinders:04X} ({report.calculated_cylinders})")
    lines.append(f"Calculated logical drive size (by blocks): {report.logical_size_mb}MB")
    lines.append(f"Calculated native drive size (by cylinders): {report.native_size_mb}MB")
    lines.append(f"Calculated checksum: 0x{report.calculated_checksum:04X} (stored 0x{header.checksum:04X})")

    lines.append("")
    lines.append("Partition table entries:")
    lines.append("  INDEX      LOCK  NAME        START     SIZE                 ON  TYPE    BOOT")
    for entry in report.entries:
        lines.append(
            f"  0x{entry.index:02X} ({entry.index + 1:2d})  "
            f"{'*' if entry.is_locked else ' ':<4}  "
            f"{entry.name:<10}  "
            f"0x{entry.start:06X}  "
            f"0x{entry.size:04X} ({entry.size_kb:>7}K)  "
            f"{'*' if entry.is_active else ' ':<2}  "
            f"{entry.kind_label:<6}  "
            f"{'*' if report.is_boot_entry(entry) else ''}"
        )

    lines.append("")
    if report.violations:
        lines.append(f"Warnings ({len(report.violations)}):")
        for violation in report.violations:
            tag = 'ERROR' if violation.fatal else 'WARNING'
            lines.append(f"  {tag}: {violation.message}")
    else:
        lines.append("Partition table check: PASSED")

    return '\n'.join(lines)


def report_to_dict(report: TableReport) -> dict:
    """Convert a report to JSON-serializable data."""
    header = report.header
    return {
        'header': {
            'magic': header.magic,
            'checksum': header.checksum,
            'drive_type': header.drive_type,
            'drive_name': header.drive_name,
            'block_count': header.block_count,
            'cylinders': header.cylinders,
            'heads': header.heads,
            'sectors': header.sectors,
            'interleave': header.interleave,
            'boot_partition': header.boot_partition,
            'prodos_slots': list(header.prodos_slots),
            'reserved': {name: data.hex() for name, data in header.reserved.items()},
        },
        'entries': [
            {
                'index': e.index,
                'name': e.name,
                'start': e.start,
                'size': e.size,
                'size_kb': str(e.size_kb),
                'type_flags': e.type_flags,
                'kind': e.kind_label,
                'active': e.is_active,
                'locked': e.is_locked,
                'boot': report.is_boot_entry(e),
            }
            for e in report.entries
        ],
        'calculated_checksum': report.calculated_checksum,
        'partitioned_blocks': report.partitioned_blocks,
        'calculated_cylinders': report.calculated_cylinders,
        'logical_size_mb': str(report.logical_size_mb),
        'native_size_mb': str(report.native_size_mb),
        'valid': report.is_valid,
        'violations': [v.to_dict() for v in report.violations],
    }


class OutputFormatter:
    """Handle output formatting (text or JSON)."""

    def __init__(self, json_mode: bool = False):
        self.json_mode = json_mode

    def success(self, message: str, **data) -> None:
        """Output success message."""
        if self.json_mode:
            output = {"status": "success", "message": message, **data}
            print(json.dumps(output))
        else:
            print(message)

    def error(self, message: str) -> None:
        """Output error message."""
        if self.json_mode:
            output = {"status": "error", "message": message}
            print(json.dumps(output))
        else:
            print(f"Error: {message}", file=sys.stderr)

    def report(self, report: TableReport, source: str = "", verbose: bool = False) -> None:
        """Output a partition table analysis."""
        if self.json_mode:
            output = {"status": "success", "image": source, **report_to_dict(report)}
            print(json.dumps(output))
        else:
            if source:
                print(f"Vulcan partition table in {source}")
                print()
            print(format_report(report, verbose=verbose))
