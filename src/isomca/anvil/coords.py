"""Coordinate types for world, chunk, section and region space.

World space extends to negative coordinates on every axis, so every
conversion here uses floor division and Euclidean remainder. Truncating
division would place chunk -1 in chunk 0.

    world block (x, y, z)
        -> world chunk (x // 16, z // 16)
        -> region (cx // 32, cz // 32), table index (cx % 32) + (cz % 32) * 32
        -> section index y // 16, local (x % 16, y % 16, z % 16)
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import CHUNK_SIZE, REGION_SIZE, SECTION_HEIGHT, index_block

RE_REGION_FILENAME = re.compile(r"^r\.(-?\d+)\.(-?\d+)\.mca$")


@dataclass(frozen=True)
class ChunkLocalBlockCoord:
    """Block position inside a 16x16x16 section."""
    lx: int
    ly: int
    lz: int

    def index(self) -> int:
        """Flat index into block-state and light arrays (Y, then Z, then X)."""
        return index_block(self.lx, self.ly, self.lz)


@dataclass(frozen=True)
class RegionCoord:
    """Region coordinate; one region file holds 32x32 chunks."""
    rx: int
    rz: int

    def file_name(self) -> str:
        """Get the region filename."""
        return f"r.{self.rx}.{self.rz}.mca"

    @classmethod
    def from_file_name(cls, name: str) -> Optional["RegionCoord"]:
        """Parse a region filename, returning None if it doesn't match."""
        match = RE_REGION_FILENAME.match(name)
        if match is None:
            return None
        return cls(int(match.group(1)), int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.rx},{self.rz}"


@dataclass(frozen=True)
class WorldChunkCoord:
    """Chunk coordinate in world space."""
    cx: int
    cz: int

    def region_coord(self) -> RegionCoord:
        """Get the region containing this chunk."""
        return RegionCoord(self.cx // REGION_SIZE, self.cz // REGION_SIZE)

    def region_local(self) -> Tuple[int, int]:
        """Get the chunk position within its region (0-31 on both axes)."""
        return self.cx % REGION_SIZE, self.cz % REGION_SIZE

    def region_index(self) -> int:
        """Get the chunk's index in the region location table (0-1023)."""
        local_x, local_z = self.region_local()
        return local_x + local_z * REGION_SIZE

    def block_min(self, y: int) -> "WorldBlockCoord":
        """Lowest-x, lowest-z block of this chunk at height y."""
        return WorldBlockCoord(self.cx * CHUNK_SIZE, y, self.cz * CHUNK_SIZE)

    def block_max(self, y: int) -> "WorldBlockCoord":
        """Highest-x, highest-z block of this chunk at height y."""
        return WorldBlockCoord(
            self.cx * CHUNK_SIZE + CHUNK_SIZE - 1,
            y,
            self.cz * CHUNK_SIZE + CHUNK_SIZE - 1,
        )

    def painters_range_to(self, other: "WorldChunkCoord"):
        """Iterate the chunk box spanned with other in painter's order."""
        from .painters import ChunkPaintersRange
        return ChunkPaintersRange(self, other)

    def __str__(self) -> str:
        return f"{self.cx},{self.cz}"


@dataclass(frozen=True)
class WorldBlockCoord:
    """Block coordinate in world space."""
    x: int
    y: int
    z: int

    def chunk_coord(self) -> WorldChunkCoord:
        """Get the chunk containing this block."""
        return WorldChunkCoord(self.x // CHUNK_SIZE, self.z // CHUNK_SIZE)

    def local_coord(self) -> ChunkLocalBlockCoord:
        """Get the position of this block inside its section."""
        return ChunkLocalBlockCoord(
            self.x % CHUNK_SIZE,
            self.y % SECTION_HEIGHT,
            self.z % CHUNK_SIZE,
        )

    def section_index(self) -> int:
        """Get the vertical index of the section containing this block."""
        return self.y // SECTION_HEIGHT

    def above(self) -> "WorldBlockCoord":
        return WorldBlockCoord(self.x, self.y + 1, self.z)

    def east(self) -> "WorldBlockCoord":
        return WorldBlockCoord(self.x + 1, self.y, self.z)

    def south(self) -> "WorldBlockCoord":
        return WorldBlockCoord(self.x, self.y, self.z + 1)

    def painters_range_to(self, other: "WorldBlockCoord"):
        """Iterate the block box spanned with other in painter's order."""
        from .painters import BlockPaintersRange
        return BlockPaintersRange(self, other)

    def __str__(self) -> str:
        return f"{self.x},{self.y},{self.z}"
