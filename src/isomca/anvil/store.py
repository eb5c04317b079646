"""In-memory chunk store with point queries.

The store is filled single-threaded before rendering starts and is only read
afterwards, so queries take no locks.
"""

from typing import Dict, Iterator, Optional, Tuple

from .chunk import Chunk
from .constants import DEFAULT_Y_RANGE, FULL_BRIGHTNESS, SECTION_HEIGHT
from .coords import ChunkLocalBlockCoord, WorldBlockCoord, WorldChunkCoord
from .section import Section


class ChunkStore:
    """Decoded chunks keyed by world chunk coordinate."""

    def __init__(self):
        self._chunks: Dict[WorldChunkCoord, Chunk] = {}

    def insert(self, coord: WorldChunkCoord, chunk: Chunk) -> None:
        """Unpack a chunk's sections and store it, replacing any previous chunk."""
        chunk.ensure_unpacked()
        self._chunks[coord] = chunk

    def get(self, coord: WorldChunkCoord) -> Optional[Chunk]:
        """Get a chunk by coordinate."""
        return self._chunks.get(coord)

    def coords(self) -> Iterator[WorldChunkCoord]:
        return iter(self._chunks)

    def __contains__(self, coord: WorldChunkCoord) -> bool:
        return coord in self._chunks

    def __len__(self) -> int:
        return len(self._chunks)

    def _section(self, block: WorldBlockCoord) -> Optional[Section]:
        chunk = self._chunks.get(block.chunk_coord())
        if chunk is None:
            return None
        return chunk.section_at(block.section_index())

    def get_block_at(self, block: WorldBlockCoord) -> Optional[str]:
        """Get the block name at world coordinates, or None (air)."""
        section = self._section(block)
        if section is None:
            return None
        entry = section.block_at(block.local_coord())
        return entry.name if entry is not None else None

    def get_block_light_at(self, block: WorldBlockCoord) -> Optional[int]:
        """Get block light at world coordinates, or None if not stored."""
        section = self._section(block)
        if section is None:
            return None
        return section.block_light_at(block.local_coord())

    def get_sky_light_at(self, block: WorldBlockCoord) -> int:
        """Get sky light at world coordinates.

        Sections without sky light take the value from the bottom row of the
        nearest section above that has it. Anything above the loaded sections
        is open sky.
        """
        chunk = self._chunks.get(block.chunk_coord())
        if chunk is None:
            return FULL_BRIGHTNESS
        section = chunk.section_at(block.section_index())
        if section is None:
            return FULL_BRIGHTNESS

        local = block.local_coord()
        sky_light = section.sky_light_at(local)
        if sky_light is not None:
            return sky_light

        bottom = ChunkLocalBlockCoord(local.lx, 0, local.lz)
        while True:
            section = chunk.section_at(section.y + 1)
            if section is None:
                return FULL_BRIGHTNESS
            sky_light = section.sky_light_at(bottom)
            if sky_light is not None:
                return sky_light

    def get_y_range(self) -> Tuple[int, int]:
        """Get (min_y, max_y) spanned by all stored sections; max_y is exclusive."""
        indexes = [section.y for chunk in self._chunks.values() for section in chunk.sections]
        if not indexes:
            return DEFAULT_Y_RANGE
        return min(indexes) * SECTION_HEIGHT, (max(indexes) + 1) * SECTION_HEIGHT
