"""
Declarative layout of the logical partition table block.

Both the builder and the analyzer walk these tables, so offsets live in one
place. Opaque fields have no known meaning; they are carried as raw bytes and
must survive a round trip unchanged.
"""

from dataclasses import dataclass

from .codec import get_bytes, get_text, get_u8, get_u16, get_u24, set_bytes, set_text, set_u8, set_u16, set_u24
from .constants import PARTITION_NAME_LENGTH, PRODOS_SLOT_COUNT

U8 = 'u8'
U16 = 'u16'
U24 = 'u24'
TEXT = 'text'
OPAQUE = 'opaque'


@dataclass(frozen=True)
class FieldSpec:
    """One fixed-offset field."""
    name: str
    offset: int
    width: int
    kind: str
    label: str

    def read(self, buf, base: int = 0):
        """Decode this field from `buf` at `base + offset`."""
        ofs = base + self.offset
        match self.kind:
            case 'u8':
                return get_u8(buf, ofs)
            case 'u16':
                return get_u16(buf, ofs)
            case 'u24':
                return get_u24(buf, ofs)
            case 'text':
                return get_text(buf, ofs, self.width)
            case _:
                return get_bytes(buf, ofs, self.width)

    def write(self, buf: bytearray, value, base: int = 0) -> None:
        """Encode `value` into `buf`. Integers wrap to the field width."""
        ofs = base + self.offset
        match self.kind:
            case 'u8':
                set_u8(buf, ofs, value)
            case 'u16':
                set_u16(buf, ofs, value)
            case 'u24':
                set_u24(buf, ofs, value)
            case 'text':
                set_text(buf, ofs, value, self.width)
            case _:
                if len(value) != self.width:
                    raise ValueError(
                        f"Opaque field {self.name} needs {self.width} bytes, got {len(value)}"
                    )
                set_bytes(buf, ofs, value)


HEADER_FIELDS = (
    FieldSpec('magic', 0x00, 2, U16, 'magic'),
    FieldSpec('checksum', 0x02, 2, U16, 'chksum'),
    FieldSpec('drive_type', 0x04, 1, U8, 'drv-id'),
    FieldSpec('block_count', 0x05, 3, U24, 'blocks'),
    FieldSpec('reserved_08', 0x08, 1, OPAQUE, 'unknown'),
    FieldSpec('cylinders', 0x09, 2, U16, 'cylinders'),
    FieldSpec('heads', 0x0B, 1, U8, 'heads'),
    FieldSpec('sectors', 0x0C, 1, U8, 'sectors'),
    FieldSpec('interleave', 0x0D, 1, U8, 'interleave'),
    FieldSpec('boot_partition', 0x0E, 1, U8, 'boot-partition'),
    FieldSpec('reserved_0f', 0x0F, 2, OPAQUE, 'unknown'),
    FieldSpec('prodos_slot_1', 0x11, 1, U8, 'ProDOS-partition1'),
    FieldSpec('prodos_slot_2', 0x12, 1, U8, 'ProDOS-partition2'),
    FieldSpec('prodos_slot_3', 0x13, 1, U8, 'ProDOS-partition3'),
    FieldSpec('prodos_slot_4', 0x14, 1, U8, 'ProDOS-partition4'),
    FieldSpec('reserved_15', 0x15, 8, OPAQUE, 'unknown'),
    # Filled with a skew sequence when the interleave factor is above 1
    FieldSpec('sector_skew', 0x1D, 113, OPAQUE, 'sector skew list'),
    FieldSpec('reserved_8e', 0x8E, 6, OPAQUE, 'unknown'),
    FieldSpec('reserved_94', 0x94, 6, OPAQUE, 'unknown'),
    FieldSpec('reserved_9a', 0x9A, 6, OPAQUE, 'unknown'),
    FieldSpec('reserved_a0', 0xA0, 2, OPAQUE, 'unknown'),
    FieldSpec('reserved_a2', 0xA2, 6, OPAQUE, 'unknown'),
    FieldSpec('reserved_a8', 0xA8, 6, OPAQUE, 'unknown'),
    FieldSpec('reserved_ae', 0xAE, 6, OPAQUE, 'unknown'),
    FieldSpec('reserved_b4', 0xB4, 2, OPAQUE, 'unknown'),
    FieldSpec('reserved_b6', 0xB6, 3, OPAQUE, 'unknown'),
    FieldSpec('empty_b9', 0xB9, 7, OPAQUE, 'empty'),
    FieldSpec('empty_c0', 0xC0, 64, OPAQUE, 'empty'),
)

# Offsets relative to the start of a 16-byte entry
ENTRY_FIELDS = (
    FieldSpec('start', 0, 3, U24, 'start'),
    FieldSpec('size', 3, 2, U16, 'size'),
    FieldSpec('type_flags', 5, 1, U8, 'type'),
    FieldSpec('name', 6, PARTITION_NAME_LENGTH, TEXT, 'name'),
)

HEADER_BY_NAME = {spec.name: spec for spec in HEADER_FIELDS}

PRODOS_SLOT_FIELDS = tuple(HEADER_BY_NAME[f'prodos_slot_{i}'] for i in range(1, PRODOS_SLOT_COUNT + 1))
OPAQUE_FIELDS = tuple(spec for spec in HEADER_FIELDS if spec.kind == OPAQUE)
