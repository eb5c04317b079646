"""Anvil (.mca) world format decoding."""

from .constants import (
    CHUNK_SIZE,
    SECTION_HEIGHT,
    BLOCKS_PER_SECTION,
    REGION_SIZE,
    SECTOR_SIZE,
    FULL_BRIGHTNESS,
    index_block,
    x_from_index,
    y_from_index,
    z_from_index,
)
from .coords import ChunkLocalBlockCoord, RegionCoord, WorldBlockCoord, WorldChunkCoord
from .painters import BlockPaintersRange, ChunkPaintersRange
from .palette import (
    bits_per_value,
    decodable_count,
    nibble_at,
    pack_block_states,
    unpack_block_states,
)
from .section import BlockStates, PaletteEntry, Section, SectionStateError
from .chunk import Chunk, ChunkDecodeError, DecodeError, chunk_from_nbt, decode_chunk
from .region import RegionDecodeError, RegionFile
from .store import ChunkStore
from .blocks import is_air_block, is_complex_geometry, strip_namespace
from .world import LoadStats, World

__all__ = [
    # Constants
    "CHUNK_SIZE",
    "SECTION_HEIGHT",
    "BLOCKS_PER_SECTION",
    "REGION_SIZE",
    "SECTOR_SIZE",
    "FULL_BRIGHTNESS",
    "index_block",
    "x_from_index",
    "y_from_index",
    "z_from_index",
    # Coordinates
    "ChunkLocalBlockCoord",
    "RegionCoord",
    "WorldBlockCoord",
    "WorldChunkCoord",
    "BlockPaintersRange",
    "ChunkPaintersRange",
    # Palette
    "bits_per_value",
    "decodable_count",
    "nibble_at",
    "pack_block_states",
    "unpack_block_states",
    # Section
    "BlockStates",
    "PaletteEntry",
    "Section",
    "SectionStateError",
    # Chunk
    "Chunk",
    "ChunkDecodeError",
    "DecodeError",
    "chunk_from_nbt",
    "decode_chunk",
    # Region
    "RegionDecodeError",
    "RegionFile",
    # Store
    "ChunkStore",
    # Blocks
    "is_air_block",
    "is_complex_geometry",
    "strip_namespace",
    # World
    "LoadStats",
    "World",
]
