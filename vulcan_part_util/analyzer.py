"""
Partition table analysis.

Walks a logical block field by field, decodes every header field and
partition entry, and cross-checks the table. Structural faults raise
TableAssertionError; everything the partition manager is known to tolerate is
collected as an advisory Violation on the returned report.
"""

from dataclasses import dataclass, field

from .builder import calculate_checksum
from .constants import (
    BLOCK_SIZE,
    MAGIC_NUMBER,
    PARTITION_ENTRY_COUNT,
    PARTITION_ENTRY_SIZE,
    PARTITION_TABLE_END,
    PARTITION_TABLE_OFFSET,
    PARTITION_TABLE_START_BLOCK,
    PRODOS_MAX_ACTIVE_PARTITIONS,
    RESERVED_BLOCKS,
)
from .exceptions import MagicMismatchError, TableAssertionError
from .layout import ENTRY_FIELDS, HEADER_BY_NAME, HEADER_FIELDS
from .logging_config import get_logger, log_violation
from .models import FieldValue, PartitionEntry, TableHeader, TableReport, Violation, bytes_to_mb

log = get_logger('analyzer')


@dataclass
class _Findings:
    """Advisory findings collected during one analysis pass."""
    violations: list[Violation] = field(default_factory=list)

    def add_warning(self, code: str, message: str, entry: int | None = None):
        violation = Violation(code=code, message=message, entry=entry)
        log_violation(log, violation)
        self.violations.append(violation)


def _fatal(cls, code: str, message: str):
    violation = Violation(code=code, message=message, fatal=True)
    log_violation(log, violation)
    return cls(message, violation)


def _check_cursor(cursor: int, expected: int, where: str) -> None:
    if cursor != expected:
        raise _fatal(
            TableAssertionError, 'layout-offset',
            f"Expected offset 0x{expected:03X} {where}, cursor at 0x{cursor:03X}"
        )


def _read_header_fields(block) -> tuple[list[FieldValue], int]:
    cursor = 0
    values = []
    for spec in HEADER_FIELDS:
        _check_cursor(cursor, spec.offset, f"for field {spec.name}")
        values.append(FieldValue(
            name=spec.name,
            offset=spec.offset,
            width=spec.width,
            label=spec.label,
            value=spec.read(block),
        ))
        cursor += spec.width
    return values, cursor


def _read_entries(block, cursor: int, findings: _Findings) -> tuple[list[PartitionEntry], int, int]:
    entries = []
    next_block = PARTITION_TABLE_START_BLOCK
    partitioned = RESERVED_BLOCKS

    for index in range(PARTITION_ENTRY_COUNT):
        base = PARTITION_TABLE_OFFSET + index * PARTITION_ENTRY_SIZE
        _check_cursor(cursor, base, f"for partition entry {index}")
        for spec in ENTRY_FIELDS:
            _check_cursor(cursor, base + spec.offset, f"for entry {index} field {spec.name}")
            cursor += spec.width

        entry = PartitionEntry.from_bytes(block, index)
        if entry.start != next_block:
            findings.add_warning(
                'partition-not-contiguous',
                f"Partition {index + 1} starts at block 0x{entry.start:06X}, "
                f"expected 0x{next_block:06X}",
                entry=index,
            )
        # Expected start is block 1 plus the sizes of all earlier entries
        next_block += entry.size
        partitioned += entry.size
        entries.append(entry)

    return entries, cursor, partitioned


def _check_trailing_space(block) -> None:
    for i in range(PARTITION_TABLE_END, len(block)):
        if block[i] != 0:
            raise _fatal(
                TableAssertionError, 'trailing-data',
                f"Buffer space after partition table not zero at offset 0x{i:X}"
            )


def analyze_table(block) -> TableReport:
    """
    Analyze a logical partition table block.

    Args:
        block: Logical block (512 bytes, or a larger zero-padded buffer)

    Returns:
        TableReport with decoded fields, entries, derived sizes and warnings

    Raises:
        MagicMismatchError: If the block is not a Vulcan partition table
        TableAssertionError: On any structural fault
    """
    if len(block) < BLOCK_SIZE:
        raise _fatal(
            TableAssertionError, 'short-block',
            f"Partition table block too small: {len(block)} bytes"
        )

    magic = HEADER_BY_NAME['magic'].read(block)
    if magic != MAGIC_NUMBER:
        raise _fatal(
            MagicMismatchError, 'magic-mismatch',
            f"Expected magic 0x{MAGIC_NUMBER:04X}, found 0x{magic:04X}"
        )

    findings = _Findings()

    fields, cursor = _read_header_fields(block)
    _check_cursor(cursor, PARTITION_TABLE_OFFSET, "after header")
    header = TableHeader.from_bytes(block)

    entries, cursor, partitioned = _read_entries(block, cursor, findings)
    _check_cursor(cursor, PARTITION_TABLE_END, "after partition entries")

    _check_trailing_space(block)

    checksum = calculate_checksum(block)
    if header.checksum != checksum:
        findings.add_warning(
            'checksum-mismatch',
            f"Stored checksum 0x{header.checksum:04X} differs from calculated 0x{checksum:04X}"
        )

    if partitioned != header.block_count:
        findings.add_warning(
            'block-count-mismatch',
            f"Partitioned blocks 0x{partitioned:06X} differ from drive block count "
            f"0x{header.block_count:06X}"
        )

    calculated_cylinders = None
    if header.heads and header.sectors:
        calculated_cylinders = header.block_count // header.heads // header.sectors
        if calculated_cylinders > header.cylinders:
            findings.add_warning(
                'cylinder-count-mismatch',
                f"Block count needs {calculated_cylinders} cylinders, "
                f"drive declares {header.cylinders}"
            )
    else:
        findings.add_warning(
            'geometry-incomplete',
            f"Cannot derive cylinders from {header.heads} heads and {header.sectors} sectors"
        )

    active = sum(1 for e in entries if e.is_active)
    if active > PRODOS_MAX_ACTIVE_PARTITIONS:
        findings.add_warning(
            'too-many-active',
            f"{active} partitions flagged active, manager supports {PRODOS_MAX_ACTIVE_PARTITIONS}"
        )

    native_bytes = header.cylinders * header.heads * header.sectors * BLOCK_SIZE

    log.debug("Analyzed partition table: %d entries, %d warning(s)",
              len(entries), len(findings.violations))

    return TableReport(
        header=header,
        fields=tuple(fields),
        entries=tuple(entries),
        violations=tuple(findings.violations),
        calculated_checksum=checksum,
        partitioned_blocks=partitioned,
        calculated_cylinders=calculated_cylinders,
        logical_size_mb=bytes_to_mb(header.block_count * BLOCK_SIZE),
        native_size_mb=bytes_to_mb(native_bytes),
    )
