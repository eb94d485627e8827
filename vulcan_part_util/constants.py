"""
Constants for the Vulcan partition table utility.
"""

# Partition table sector
BLOCK_SIZE = 512
MAGIC_NUMBER = 0xAEAE  # "Applied Engineering"
CHECKSUM_OFFSET = 0x02
RESERVED_BLOCKS = 1    # block 0 holds the table itself

# Partition entry table
PARTITION_TABLE_OFFSET = 0x100
PARTITION_TABLE_START_BLOCK = 1
PARTITION_ENTRY_SIZE = 16
PARTITION_ENTRY_COUNT = 16
PARTITION_TABLE_END = PARTITION_TABLE_OFFSET + PARTITION_ENTRY_SIZE * PARTITION_ENTRY_COUNT
PARTITION_NAME_LENGTH = 10
PARTITION_NAME_PREFIX = 'AE'

# ProDOS limits enforced by the partition manager
PRODOS_MAX_ACTIVE_PARTITIONS = 4
PRODOS_MAX_PARTITION_BLOCKS = 0xFFFF  # 32767.5 KB
PRODOS_SLOT_COUNT = 4
PRODOS_SLOT_UNUSED = 0xFF

# Partition kinds (low nibble of the type byte)
PART_CLEAR = 0x00
PART_PRODOS = 0x01
PART_DOS33 = 0x02
PART_PASCAL = 0x03
PART_CPM = 0x04
PART_KIND_MASK = 0x0F

# Partition flags (high bits of the type byte)
PART_ACTIVE = 0x40
PART_LOCKED = 0x80

PARTITION_KIND_LABELS = {
    PART_CLEAR: 'CLEAR',
    PART_PRODOS: 'PRODOS',
    PART_DOS33: 'DOS3.3',
    PART_PASCAL: 'PASCAL',
    PART_CPM: 'CP/M',
}

# Printable range used when decoding high-bit ASCII names
TEXT_MIN = 0x20
TEXT_MAX = 0x7E
TEXT_PLACEHOLDER = '_'

# Drive ids as listed by the partition manager's drive menu.
# Ids above 0x1D produce garbage names in the manager.
DRIVE_TYPE_SWIFT_200 = 0x10
DRIVE_TYPE_CONNER_30104 = 0x1D

DRIVE_TYPE_NAMES = {
    0x01: 'WESTERN DIGITAL 93028',
    0x02: 'WESTERN DIGITAL 93048',
    0x03: 'SWIFT',
    0x04: 'SEAGATE 125',
    0x05: 'CONNER 3104',
    0x06: 'QUANTUM',
    0x07: 'RODIME 100',
    0x08: 'MINISCRIBE 8051',
    0x09: 'WESTERN DIGITAL 93044',
    0x0A: 'CONNER 344',
    0x0B: 'SEAGATE 157',
    0x0C: 'MINISCRIBE 8225',
    0x0D: 'MINISCRIBE 8450',
    0x0E: 'CONNER 3024',
    0x0F: 'SWIFT 230',
    0x10: 'SWIFT 200',
    0x11: 'SWIFT 126',
    0x12: 'SWIFT 090',
    0x13: 'QUANTUM',
    0x14: 'MAXTOR',
    0x15: 'CONNER',
    0x16: 'MICROSCI',
    0x17: 'WESTERN DIGITAL AC280',
    0x18: 'KYOCERA',
    0x19: 'KYOCERA',
    0x1A: 'WESTERN DIGITAL 93024',
    0x1B: 'WD CAVIAR 140',
    0x1C: 'WD CAVIAR 280',
    0x1D: 'CONNER 30104',
}

# The manager shows five cylinders fewer than stored in the table
CYLINDER_DISPLAY_OFFSET = 5

# Size units for reporting
KILOBYTE = 1024
MEGABYTE = 1024 * 1024
