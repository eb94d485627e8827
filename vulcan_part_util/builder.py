"""
Partition table creation for Vulcan drives.

Synthesizes a complete logical block from drive geometry and a partition
sizing policy: a number of ProDOS partitions of maximum size, the rest of the
16 slots taking whatever is left of the free pool.
"""

from dataclasses import dataclass, field

from .constants import (
    BLOCK_SIZE,
    CHECKSUM_OFFSET,
    CYLINDER_DISPLAY_OFFSET,
    DRIVE_TYPE_SWIFT_200,
    MAGIC_NUMBER,
    PART_ACTIVE,
    PART_CLEAR,
    PARTITION_ENTRY_COUNT,
    PARTITION_NAME_LENGTH,
    PARTITION_NAME_PREFIX,
    PARTITION_TABLE_START_BLOCK,
    PRODOS_MAX_ACTIVE_PARTITIONS,
    PRODOS_MAX_PARTITION_BLOCKS,
    PRODOS_SLOT_UNUSED,
    RESERVED_BLOCKS,
)
from .exceptions import ConfigError
from .layout import HEADER_BY_NAME, PRODOS_SLOT_FIELDS
from .logging_config import get_logger, log_violation
from .models import PartitionEntry, Violation

log = get_logger('builder')

# Opaque bytes present on working Vulcan media. Their meaning is unknown.
OPAQUE_DEFAULTS = {
    'reserved_08': b'\x00',
    'reserved_0f': b'\xFF\xFF',
    'reserved_15': b'\xFF' * 8,
    'reserved_b6': b'\x00\x80\x01',
}


@dataclass
class DriveConfig:
    """Drive geometry and partition sizing policy for a new table."""
    drive_type: int = DRIVE_TYPE_SWIFT_200
    block_count: int = 5 * (PRODOS_MAX_PARTITION_BLOCKS + 1)
    cylinders: int = 1405
    heads: int = 6
    sectors: int = 39
    interleave: int = 1
    boot_partition: int = 0
    full_partitions: int = 5
    max_active: int = PRODOS_MAX_ACTIVE_PARTITIONS
    max_partition_blocks: int = PRODOS_MAX_PARTITION_BLOCKS
    # True when block_count and cylinders came from for_partitions()
    derived_counts: bool = field(default=False, compare=False)

    def __post_init__(self):
        for name in ('drive_type', 'block_count', 'cylinders', 'heads', 'sectors',
                     'interleave', 'boot_partition', 'full_partitions',
                     'max_active', 'max_partition_blocks'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")

    @classmethod
    def for_partitions(
        cls,
        full_partitions: int,
        heads: int = 6,
        sectors: int = 39,
        **overrides
    ) -> 'DriveConfig':
        """
        Derive block and cylinder counts for `full_partitions` maxed-out
        ProDOS partitions.

        The cylinder count gets five extra cylinders because the partition
        manager subtracts five when it displays the geometry.
        """
        max_blocks = overrides.get('max_partition_blocks', PRODOS_MAX_PARTITION_BLOCKS)
        for name, value in (('full_partitions', full_partitions), ('heads', heads),
                            ('sectors', sectors), ('max_partition_blocks', max_blocks)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        if heads <= 0 or sectors <= 0:
            raise ConfigError("heads and sectors must be positive to derive cylinders")
        block_count = full_partitions * (max_blocks + 1)
        cylinders = CYLINDER_DISPLAY_OFFSET + block_count // heads // sectors
        values = {
            'block_count': block_count,
            'cylinders': cylinders,
            'heads': heads,
            'sectors': sectors,
            'full_partitions': full_partitions,
            'derived_counts': True,
        }
        values.update(overrides)
        if {'block_count', 'cylinders'} & set(overrides):
            values['derived_counts'] = False
        return cls(**values)

    @property
    def pool_blocks(self) -> int:
        """Blocks handed out to partitions."""
        return (self.max_partition_blocks + 1) * self.full_partitions - RESERVED_BLOCKS


@dataclass
class BuildResult:
    """A freshly built logical block plus any advisory findings."""
    block: bytearray
    warnings: list[Violation] = field(default_factory=list)


def calculate_checksum(block) -> int:
    """
    Compute the table checksum.

    Even bytes are XORed into the low byte and odd bytes into the high byte,
    over the first 512 bytes, skipping the checksum field itself. The partition
    manager does not appear to verify this value, and it does not match
    checksums the manager writes after edits.
    """
    low = 0
    high = 0
    for i in range(0, BLOCK_SIZE, 2):
        if i == CHECKSUM_OFFSET:
            continue
        low ^= block[i]
        high ^= block[i + 1]
    return (high << 8) | low


def write_checksum(block: bytearray) -> int:
    """Recompute and store the checksum. Returns the new value."""
    checksum = calculate_checksum(block)
    HEADER_BY_NAME['checksum'].write(block, checksum)
    return checksum


def partition_name(index: int) -> str:
    """Default name for slot `index`: 'AE1', 'AE2', ... padded to 10 chars."""
    return f"{PARTITION_NAME_PREFIX}{index + 1}".ljust(PARTITION_NAME_LENGTH)[:PARTITION_NAME_LENGTH]


def plan_partitions(config: DriveConfig) -> list[PartitionEntry]:
    """
    Lay out all 16 slots contiguously from block 1.

    Each slot takes min(remaining pool, max partition size). The first slot
    and every maximum-sized slot are flagged active while the slot index is
    below the active limit. No partition kind is assigned; the manager types
    partitions when they are formatted.
    """
    entries = []
    free_blocks = max(config.pool_blocks, 0)
    start = PARTITION_TABLE_START_BLOCK

    for index in range(PARTITION_ENTRY_COUNT):
        size = min(free_blocks, config.max_partition_blocks)
        free_blocks -= size

        type_flags = PART_CLEAR
        if (index == 0 or size == config.max_partition_blocks) and index < config.max_active:
            type_flags |= PART_ACTIVE

        entries.append(PartitionEntry(
            index=index,
            start=start,
            size=size,
            type_flags=type_flags,
            name=partition_name(index),
        ))
        start += size

    return entries


def build_partition_table(config: DriveConfig | None = None, buffer_size: int = BLOCK_SIZE) -> BuildResult:
    """
    Build a logical partition table block.

    Args:
        config: Drive geometry and sizing policy (defaults to DriveConfig())
        buffer_size: Size of the returned buffer; bytes past 512 stay zero

    Returns:
        BuildResult holding the logical block and advisory warnings
    """
    if config is None:
        config = DriveConfig()
    if buffer_size < BLOCK_SIZE:
        raise ConfigError(f"Buffer size must be at least {BLOCK_SIZE} bytes")

    log.debug("Building partition table: %s", config)
    result = BuildResult(block=bytearray(buffer_size))
    block = result.block

    HEADER_BY_NAME['magic'].write(block, MAGIC_NUMBER)

    for name, value in OPAQUE_DEFAULTS.items():
        HEADER_BY_NAME[name].write(block, value)

    for name in ('drive_type', 'block_count', 'cylinders', 'heads', 'sectors',
                 'interleave', 'boot_partition'):
        HEADER_BY_NAME[name].write(block, getattr(config, name))

    for spec in PRODOS_SLOT_FIELDS:
        spec.write(block, PRODOS_SLOT_UNUSED)

    if config.block_count != config.pool_blocks + RESERVED_BLOCKS:
        warning = Violation(
            code='block-count-mismatch',
            message=(
                f"Drive block count 0x{config.block_count:06X} does not match "
                f"partition pool 0x{config.pool_blocks:06X} plus reserved block"
            ),
        )
        log_violation(log, warning)
        result.warnings.append(warning)

    for entry in plan_partitions(config):
        entry.write(block)

    checksum = write_checksum(block)
    log.info("Built partition table for %d blocks (checksum 0x%04X)", config.block_count, checksum)

    return result
