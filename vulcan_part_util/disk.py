"""
Vulcan drive image access.

The partition table lives in block 0 of the image, stored in physical
(interleaved) byte order. This module only moves that sector between the image
and memory; interpretation happens elsewhere.
"""

import os
from typing import BinaryIO

from .constants import BLOCK_SIZE
from .exceptions import DiskError
from .logging_config import get_logger

TABLE_BLOCK = 0

log = get_logger('disk')


class VulcanImage:
    """
    Raw drive image (CF card dump or hard disk image) opened for block I/O.

    Short reads past the end of the file are zero-padded to a full block.
    """

    def __init__(self, image_path: str, readonly: bool = True):
        self.image_path = image_path
        self.readonly = readonly
        self._file: BinaryIO | None = None

        mode = 'rb' if readonly else 'r+b'
        try:
            self._file = open(image_path, mode)
        except OSError as e:
            raise DiskError(f"Cannot open disk image: {e}")

    def read_block(self, block_num: int = TABLE_BLOCK) -> bytes:
        """Read a single block from the image."""
        if self._file is None:
            raise DiskError("Disk image not open")

        try:
            self._file.seek(block_num * BLOCK_SIZE)
            data = self._file.read(BLOCK_SIZE)
        except OSError as e:
            raise DiskError(f"Cannot read block {block_num}: {e}")

        if len(data) < BLOCK_SIZE:
            data = data + bytes(BLOCK_SIZE - len(data))

        return data

    def write_block(self, data: bytes, block_num: int = TABLE_BLOCK) -> None:
        """Write a single block to the image."""
        if self._file is None:
            raise DiskError("Disk image not open")
        if self.readonly:
            raise DiskError("Disk image opened in read-only mode")
        if len(data) != BLOCK_SIZE:
            raise DiskError(f"Invalid block size: {len(data)}")

        try:
            self._file.seek(block_num * BLOCK_SIZE)
            self._file.write(data)
        except OSError as e:
            raise DiskError(f"Cannot write block {block_num}: {e}")

    def flush(self) -> None:
        if self._file:
            try:
                self._file.flush()
            except OSError as e:
                raise DiskError(f"Cannot flush disk image: {e}")

    def close(self) -> None:
        """Close the disk image."""
        if self._file:
            try:
                self.flush()
            finally:
                self._file.close()
                self._file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def load_table_sector(image_path: str, buffer_size: int = BLOCK_SIZE) -> bytearray:
    """
    Load the physical partition table sector.

    Returns a buffer of `buffer_size` bytes: the sector followed by zeros.
    """
    if buffer_size < BLOCK_SIZE:
        raise DiskError(f"Buffer size must be at least {BLOCK_SIZE} bytes")

    with VulcanImage(image_path, readonly=True) as image:
        data = image.read_block(TABLE_BLOCK)

    log.info("Read %d bytes from %s", len(data), os.path.basename(image_path))
    buf = bytearray(buffer_size)
    buf[:BLOCK_SIZE] = data
    return buf


def store_table_sector(image_path: str, data, update: bool = False) -> None:
    """
    Store a physical partition table sector.

    With update, block 0 of an existing image is overwritten and the rest of
    the image is left alone. Otherwise a new file holding just the sector is
    written. Only the first 512 bytes of `data` are stored.
    """
    sector = bytes(data[:BLOCK_SIZE])
    if len(sector) != BLOCK_SIZE:
        raise DiskError(f"Partition table sector must be {BLOCK_SIZE} bytes, got {len(sector)}")

    if update:
        with VulcanImage(image_path, readonly=False) as image:
            image.write_block(sector, TABLE_BLOCK)
    else:
        try:
            with open(image_path, 'wb') as f:
                f.write(sector)
        except OSError as e:
            raise DiskError(f"Failed to write partition table: {e}")

    log.info("Written %d bytes to %s", BLOCK_SIZE, os.path.basename(image_path))
