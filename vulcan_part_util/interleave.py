"""
Byte interleaving between the physical sector and the logical table block.

The sector is treated as 256 two-byte units. Physical unit u holds the logical
bytes at 2*(u // 2) + 256*(u % 2), so the physical stream alternates between
the header half (0x000-0x0FF) and the partition-entry half (0x100-0x1FF) of
the logical block.

Buffers may be larger than one block (scratch space); anything past the first
512 bytes must be zero. Any violation here is a fatal TableAssertionError.
"""

from .constants import BLOCK_SIZE
from .exceptions import TableAssertionError
from .logging_config import get_logger

UNIT_SIZE = 2
UNIT_COUNT = BLOCK_SIZE // UNIT_SIZE
HALF_BLOCK = BLOCK_SIZE // 2

log = get_logger('interleave')


def physical_to_logical(unit: int) -> int:
    """Return the logical byte offset stored in physical unit `unit`."""
    if unit < 0 or unit >= UNIT_COUNT:
        raise TableAssertionError(f"Interleave unit out of range: {unit}")
    return UNIT_SIZE * (unit // 2) + HALF_BLOCK * (unit % 2)


# (physical offset, logical offset) for every two-byte unit
UNIT_MAP = tuple(
    (UNIT_SIZE * unit, physical_to_logical(unit)) for unit in range(UNIT_COUNT)
)


def _check_buffer(buf, what: str) -> None:
    if len(buf) < BLOCK_SIZE:
        raise TableAssertionError(
            f"{what} buffer too small: {len(buf)} bytes, need {BLOCK_SIZE}"
        )
    for i in range(BLOCK_SIZE, len(buf)):
        if buf[i] != 0:
            raise TableAssertionError(f"{what} buffer padding not zero at offset {i}")


def _permute(source, to_logical: bool) -> bytearray:
    target = bytearray(len(source))
    written = bytearray(BLOCK_SIZE)

    for phys, logical in UNIT_MAP:
        src, dst = (phys, logical) if to_logical else (logical, phys)
        if dst + UNIT_SIZE > BLOCK_SIZE or src + UNIT_SIZE > BLOCK_SIZE:
            raise TableAssertionError(
                f"Interleave index out of range: src=0x{src:03X} dst=0x{dst:03X}"
            )
        target[dst:dst + UNIT_SIZE] = source[src:src + UNIT_SIZE]
        written[dst] += 1
        written[dst + 1] += 1

    if any(count != 1 for count in written):
        raise TableAssertionError("Interleave mapping is not a permutation of the block")

    return target


def deinterleave(physical) -> bytearray:
    """Convert a physical sector (as stored on the medium) to a logical block."""
    _check_buffer(physical, 'Physical')
    log.debug("De-interleaving %d byte buffer", len(physical))
    return _permute(physical, to_logical=True)


def interleave(logical) -> bytearray:
    """Convert a logical block back to physical sector byte order."""
    _check_buffer(logical, 'Logical')
    log.debug("Interleaving %d byte buffer", len(logical))
    return _permute(logical, to_logical=False)
