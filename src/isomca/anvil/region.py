"""Region file handling for the Anvil world format.

Region files (r.<rx>.<rz>.mca) hold up to 32x32 chunks:
- Location table: 1024 x 4-byte big-endian entries; high 3 bytes are the
  sector offset (x 4096 bytes), low byte the sector count
- Timestamp table: 1024 x 4-byte big-endian last-modified times
- Chunk data: 4096-byte aligned sectors

Each chunk payload is framed as:
- 4 bytes: payload length (big-endian), including the compression byte
- 1 byte: compression type (2 = zlib)
- N bytes: compressed NBT

A zero offset means the chunk was never generated.
"""

import logging
import struct
import zlib
from pathlib import Path
from typing import BinaryIO, List, Optional, Tuple

from .chunk import Chunk, DecodeError, decode_chunk
from .constants import (
    CHUNK_HEADER_SIZE,
    COMPRESSION_ZLIB,
    LOCATION_TABLE_SIZE,
    REGION_CHUNK_COUNT,
    SECTOR_SIZE,
    SUPPORTED_COMPRESSION,
    TIMESTAMP_TABLE_SIZE,
)
from .coords import RegionCoord, WorldChunkCoord

logger = logging.getLogger(__name__)


class RegionDecodeError(DecodeError):
    """A region header or chunk frame could not be read."""


def parse_location(entry: int) -> Tuple[int, int]:
    """Split a location table entry into (byte offset, sector count)."""
    return (entry >> 8) * SECTOR_SIZE, entry & 0xFF


def _read_table(f: BinaryIO, size: int, name: str) -> List[int]:
    data = f.read(size)
    if len(data) != size:
        raise RegionDecodeError(f"Truncated {name}: {len(data)} of {size} bytes")
    return list(struct.unpack(f">{REGION_CHUNK_COUNT}I", data))


class RegionFile:
    """Reads chunks from one region file.

    The location and timestamp tables are read when the file is opened;
    chunk payloads are read on demand.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._file: BinaryIO = open(self.path, "rb")
        try:
            self._locations = _read_table(self._file, LOCATION_TABLE_SIZE, "location table")
            self._timestamps = _read_table(self._file, TIMESTAMP_TABLE_SIZE, "timestamp table")
        except BaseException:
            self._file.close()
            raise

    @property
    def region_coord(self) -> Optional[RegionCoord]:
        """Region coordinate parsed from the filename, if it follows r.X.Z.mca."""
        return RegionCoord.from_file_name(self.path.name)

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "RegionFile":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def location(self, coord: WorldChunkCoord) -> Tuple[int, int]:
        """Get (byte offset, sector count) of a chunk; offset 0 if absent."""
        return parse_location(self._locations[coord.region_index()])

    def timestamp(self, coord: WorldChunkCoord) -> int:
        """Get the last-modified timestamp of a chunk."""
        return self._timestamps[coord.region_index()]

    def latest_timestamp(self) -> int:
        """Get the newest last-modified timestamp of any stored chunk, 0 if none."""
        return max((self._timestamps[i] for i in self.chunk_indexes()), default=0)

    def chunk_indexes(self) -> set[int]:
        """Get the set of location table indexes that hold a chunk."""
        return {i for i, entry in enumerate(self._locations) if entry >> 8}

    def read_chunk_payload(self, coord: WorldChunkCoord) -> Optional[bytes]:
        """Read and decompress a chunk's NBT payload.

        Args:
            coord: World chunk coordinate (only its position in the region is used)

        Returns:
            Decompressed NBT bytes, or None if the chunk doesn't exist

        Raises:
            RegionDecodeError: If the frame is truncated, uses an unsupported
                compression type or fails to decompress
        """
        offset, sectors = self.location(coord)
        if offset == 0:
            return None
        logger.debug("Chunk %s at offset %d (%d sectors) in %s", coord, offset, sectors, self.path.name)

        self._file.seek(offset)
        header = self._file.read(CHUNK_HEADER_SIZE)
        if len(header) != CHUNK_HEADER_SIZE:
            raise RegionDecodeError(f"Truncated header for chunk {coord} in {self.path.name}")
        length, compression = struct.unpack(">IB", header)
        if compression not in SUPPORTED_COMPRESSION:
            raise RegionDecodeError(
                f"Unsupported compression type {compression} for chunk {coord} in {self.path.name}"
            )
        if length < 1:
            raise RegionDecodeError(f"Invalid payload length {length} for chunk {coord}")

        compressed = self._file.read(length - 1)
        if len(compressed) != length - 1:
            raise RegionDecodeError(
                f"Truncated payload for chunk {coord} in {self.path.name}: "
                f"{len(compressed)} of {length - 1} bytes"
            )
        if compression == COMPRESSION_ZLIB:
            try:
                return zlib.decompress(compressed)
            except zlib.error as e:
                raise RegionDecodeError(f"Corrupt zlib data for chunk {coord}: {e}") from e
        raise RegionDecodeError(f"Unhandled compression type {compression}")

    def read_chunk(self, coord: WorldChunkCoord) -> Optional[Chunk]:
        """Read and decode a chunk.

        Returns:
            The Chunk, or None if it doesn't exist in this region

        Raises:
            DecodeError: If the chunk frame or its NBT is malformed
        """
        payload = self.read_chunk_payload(coord)
        if payload is None:
            return None
        return decode_chunk(payload)
