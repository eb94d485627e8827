"""
Vulcan Partition Table Utility

A Python package for reading, building and checking the partition table
of Applied Engineering Vulcan hard disks and CF cards for the Apple II.
"""

from .constants import (
    BLOCK_SIZE,
    MAGIC_NUMBER,
    PART_ACTIVE,
    PART_CLEAR,
    PART_CPM,
    PART_DOS33,
    PART_LOCKED,
    PART_PASCAL,
    PART_PRODOS,
    PARTITION_ENTRY_COUNT,
    PARTITION_ENTRY_SIZE,
    PARTITION_TABLE_OFFSET,
    PRODOS_MAX_ACTIVE_PARTITIONS,
    PRODOS_MAX_PARTITION_BLOCKS,
)
from .exceptions import (
    ConfigError,
    DiskError,
    MagicMismatchError,
    OutOfRangeError,
    TableAssertionError,
    VulcanError,
)
from .codec import get_text, get_u8, get_u16, get_u24, set_text, set_u8, set_u16, set_u24
from .interleave import deinterleave, interleave
from .models import FieldValue, PartitionEntry, TableHeader, TableReport, Violation
from .builder import BuildResult, DriveConfig, build_partition_table, calculate_checksum, write_checksum
from .analyzer import analyze_table
from .config import DRIVE_PRESETS, get_preset, load_drive_config
from .disk import VulcanImage, load_table_sector, store_table_sector
from .formatter import OutputFormatter, format_report, report_to_dict
from .commands import cmd_analyze, cmd_build, cmd_convert

__version__ = "1.0.0"

__all__ = [
    # Core operations
    "deinterleave",
    "interleave",
    "build_partition_table",
    "calculate_checksum",
    "write_checksum",
    "analyze_table",
    # Data models
    "DriveConfig",
    "BuildResult",
    "PartitionEntry",
    "TableHeader",
    "FieldValue",
    "Violation",
    "TableReport",
    # Byte codec
    "get_u8",
    "get_u16",
    "get_u24",
    "set_u8",
    "set_u16",
    "set_u24",
    "get_text",
    "set_text",
    # Configuration
    "DRIVE_PRESETS",
    "get_preset",
    "load_drive_config",
    # Image I/O
    "VulcanImage",
    "load_table_sector",
    "store_table_sector",
    # Exceptions
    "VulcanError",
    "OutOfRangeError",
    "TableAssertionError",
    "MagicMismatchError",
    "DiskError",
    "ConfigError",
    # Commands
    "cmd_analyze",
    "cmd_build",
    "cmd_convert",
    # Output
    "OutputFormatter",
    "format_report",
    "report_to_dict",
    # Constants
    "BLOCK_SIZE",
    "MAGIC_NUMBER",
    "PARTITION_TABLE_OFFSET",
    "PARTITION_ENTRY_SIZE",
    "PARTITION_ENTRY_COUNT",
    "PRODOS_MAX_ACTIVE_PARTITIONS",
    "PRODOS_MAX_PARTITION_BLOCKS",
    "PART_CLEAR",
    "PART_PRODOS",
    "PART_DOS33",
    "PART_PASCAL",
    "PART_CPM",
    "PART_ACTIVE",
    "PART_LOCKED",
]
