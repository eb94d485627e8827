"""
Data model classes for the Vulcan partition table.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal

from .constants import (
    BLOCK_SIZE,
    DRIVE_TYPE_NAMES,
    KILOBYTE,
    MEGABYTE,
    PART_ACTIVE,
    PART_KIND_MASK,
    PART_LOCKED,
    PARTITION_ENTRY_SIZE,
    PARTITION_KIND_LABELS,
    PARTITION_TABLE_OFFSET,
    PRODOS_SLOT_UNUSED,
)
from .layout import ENTRY_FIELDS, HEADER_BY_NAME, OPAQUE_FIELDS, PRODOS_SLOT_FIELDS

ONE_DIGIT = Decimal('0.1')


def blocks_to_kb(blocks: int) -> Decimal:
    """Partition size in KB, one fractional digit, half-to-even."""
    return (Decimal(blocks * BLOCK_SIZE) / Decimal(KILOBYTE)).quantize(ONE_DIGIT, rounding=ROUND_HALF_EVEN)


def bytes_to_mb(size_bytes: int) -> Decimal:
    """Drive size in MB, one fractional digit, half-up."""
    return (Decimal(size_bytes) / Decimal(MEGABYTE)).quantize(ONE_DIGIT, rounding=ROUND_HALF_UP)


def drive_type_name(code: int) -> str:
    """Name the partition manager shows for a drive id."""
    return DRIVE_TYPE_NAMES.get(code, f"DRIVE ID = ${code:02X}")


def partition_kind_label(type_flags: int) -> str:
    """Label for the kind nibble; unknown kinds carry the raw type byte."""
    kind = type_flags & PART_KIND_MASK
    if kind in PARTITION_KIND_LABELS:
        return PARTITION_KIND_LABELS[kind]
    return f"UNKNOWN: 0x{type_flags:02X}"


@dataclass(frozen=True)
class PartitionEntry:
    """Represents a 16-byte partition table entry."""
    index: int
    start: int       # first block, absolute
    size: int        # block count
    type_flags: int  # kind nibble plus active/locked bits
    name: str        # 10 chars, decoded with bit 7 stripped

    @classmethod
    def from_bytes(cls, block, index: int) -> 'PartitionEntry':
        """Parse entry `index` from a logical block."""
        base = PARTITION_TABLE_OFFSET + index * PARTITION_ENTRY_SIZE
        values = {spec.name: spec.read(block, base) for spec in ENTRY_FIELDS}
        return cls(index=index, **values)

    def write(self, block: bytearray) -> None:
        """Serialize into slot `index` of a logical block."""
        base = PARTITION_TABLE_OFFSET + self.index * PARTITION_ENTRY_SIZE
        for spec in ENTRY_FIELDS:
            spec.write(block, getattr(self, spec.name), base)

    def to_bytes(self) -> bytes:
        """Serialize to the 16-byte entry record."""
        data = bytearray(PARTITION_ENTRY_SIZE)
        for spec in ENTRY_FIELDS:
            spec.write(data, getattr(self, spec.name))
        return bytes(data)

    @property
    def kind(self) -> int:
        return self.type_flags & PART_KIND_MASK

    @property
    def kind_label(self) -> str:
        return partition_kind_label(self.type_flags)

    @property
    def is_active(self) -> bool:
        return bool(self.type_flags & PART_ACTIVE)

    @property
    def is_locked(self) -> bool:
        return bool(self.type_flags & PART_LOCKED)

    @property
    def end(self) -> int:
        """Block following the last block of this partition."""
        return self.start + self.size

    @property
    def size_kb(self) -> Decimal:
        return blocks_to_kb(self.size)


@dataclass(frozen=True)
class TableHeader:
    """Drive geometry and bookkeeping fields from the first half of the block."""
    magic: int
    checksum: int
    drive_type: int
    block_count: int
    cylinders: int
    heads: int
    sectors: int
    interleave: int
    boot_partition: int
    prodos_slots: tuple[int, ...]
    reserved: dict[str, bytes] = field(default_factory=dict)

    @classmethod
    def from_bytes(cls, block) -> 'TableHeader':
        """Parse the header fields from a logical block."""
        def read(name):
            return HEADER_BY_NAME[name].read(block)

        return cls(
            magic=read('magic'),
            checksum=read('checksum'),
            drive_type=read('drive_type'),
            block_count=read('block_count'),
            cylinders=read('cylinders'),
            heads=read('heads'),
            sectors=read('sectors'),
            interleave=read('interleave'),
            boot_partition=read('boot_partition'),
            prodos_slots=tuple(spec.read(block) for spec in PRODOS_SLOT_FIELDS),
            reserved={spec.name: spec.read(block) for spec in OPAQUE_FIELDS},
        )

    @property
    def drive_name(self) -> str:
        return drive_type_name(self.drive_type)

    @property
    def active_slots(self) -> list[int]:
        """ProDOS slots that name a partition."""
        return [slot for slot in self.prodos_slots if slot != PRODOS_SLOT_UNUSED]


@dataclass(frozen=True)
class FieldValue:
    """A decoded header field, in layout order."""
    name: str
    offset: int
    width: int
    label: str
    value: int | bytes


@dataclass(frozen=True)
class Violation:
    """A discrepancy found while building or analyzing a table."""
    code: str
    message: str
    fatal: bool = False
    entry: int | None = None

    def to_dict(self) -> dict:
        return {
            'code': self.code,
            'message': self.message,
            'fatal': self.fatal,
            'entry': self.entry,
        }


@dataclass(frozen=True)
class TableReport:
    """Result of analyzing one logical block. Built once, never modified."""
    header: TableHeader
    fields: tuple[FieldValue, ...]
    entries: tuple[PartitionEntry, ...]
    violations: tuple[Violation, ...]
    calculated_checksum: int
    partitioned_blocks: int
    calculated_cylinders: int | None
    logical_size_mb: Decimal
    native_size_mb: Decimal

    @property
    def is_valid(self) -> bool:
        """True when no discrepancy of any kind was found."""
        return not self.violations

    @property
    def active_entries(self) -> list[PartitionEntry]:
        return [e for e in self.entries if e.is_active]

    def is_boot_entry(self, entry: PartitionEntry) -> bool:
        return entry.index == self.header.boot_partition
