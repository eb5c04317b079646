"""Section records for the Anvil world format.

A section is a 16x16x16 cube of blocks within a chunk. Its block states are
palette-compressed and its light levels are packed 4 bits per block.

Sections have a two-phase lifecycle:
1. Decoded from the chunk's NBT, block states still packed
2. ensure_unpacked() is called once by the owner (the chunk store does it on
   insert); from then on the section is only read

Looking up a block before step 2 is a programming error.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from .coords import ChunkLocalBlockCoord
from .palette import LongArrayLike, bits_per_value, nibble_at, unpack_block_states


class SectionStateError(RuntimeError):
    """A section was queried before unpacking, or past its decoded data."""


@dataclass(frozen=True)
class PaletteEntry:
    """One block state referenced by a section's palette."""
    name: str
    properties: Optional[Dict[str, str]] = field(default=None, compare=False, hash=False)


@dataclass
class BlockStates:
    """Palette plus packed palette indices.

    Attributes:
        palette: Distinct block states in this section
        data: Packed indices, or None if every block is palette[0]
    """
    palette: List[PaletteEntry]
    data: Optional[LongArrayLike] = None

    @property
    def bits(self) -> int:
        """Bits per packed index."""
        return bits_per_value(len(self.palette), len(self.data) if self.data is not None else 0)

    def is_uniform(self) -> bool:
        """True if the whole section is a single palette entry."""
        return self.data is None or len(self.data) == 0


@dataclass
class Section:
    """A 16x16x16 section of a chunk.

    Attributes:
        y: Vertical section index (block y // 16)
        block_states: Palette and packed indices; None means all air
        block_light: 2048 bytes of block light nibbles, if present
        sky_light: 2048 bytes of sky light nibbles, if present
    """
    y: int
    block_states: Optional[BlockStates] = None
    block_light: Optional[bytes] = None
    sky_light: Optional[bytes] = None
    _unpacked: Optional[np.ndarray] = field(default=None, init=False, repr=False, compare=False)

    @property
    def is_unpacked(self) -> bool:
        """True once palette indices are available for lookups."""
        if self.block_states is None or self.block_states.is_uniform():
            return True
        return self._unpacked is not None

    def ensure_unpacked(self) -> Optional[np.ndarray]:
        """Unpack the block-state indices, once.

        Returns:
            The unpacked index array (the same object on every call), or None
            when the section has no packed data
        """
        if self._unpacked is not None:
            return self._unpacked
        if self.block_states is None or self.block_states.is_uniform():
            return None
        indices = unpack_block_states(self.block_states.data, self.block_states.bits)
        indices.flags.writeable = False
        self._unpacked = indices
        return indices

    def palette_index(self, local: ChunkLocalBlockCoord) -> int:
        """Get the palette index of a block."""
        if self.block_states is None:
            raise SectionStateError(f"Section {self.y} has no block states")
        if self.block_states.is_uniform():
            return 0
        if self._unpacked is None:
            raise SectionStateError(f"Section {self.y} was read before being unpacked")
        index = local.index()
        if not 0 <= index < len(self._unpacked):
            raise SectionStateError(
                f"Block index {index} outside unpacked data of section {self.y} "
                f"({len(self._unpacked)} values)"
            )
        return int(self._unpacked[index])

    def block_at(self, local: ChunkLocalBlockCoord) -> Optional[PaletteEntry]:
        """Get the palette entry of a block, or None if there is none."""
        if self.block_states is None or not self.block_states.palette:
            return None
        palette_index = self.palette_index(local)
        if palette_index >= len(self.block_states.palette):
            return None
        return self.block_states.palette[palette_index]

    def block_light_at(self, local: ChunkLocalBlockCoord) -> Optional[int]:
        """Get block light (0-15), or None if the section has none."""
        if self.block_light is None:
            return None
        return nibble_at(self.block_light, local.index())

    def sky_light_at(self, local: ChunkLocalBlockCoord) -> Optional[int]:
        """Get sky light (0-15), or None if the section has none."""
        if self.sky_light is None:
            return None
        return nibble_at(self.sky_light, local.index())
