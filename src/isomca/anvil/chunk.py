"""Chunk records and decoding from NBT.

A chunk is a 16x16 column of blocks divided into 16-block-high sections.
Chunks are stored in region files as zlib-compressed NBT; nbtlib parses the
tree and this module maps its tags onto Chunk and Section records.
"""

from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, Dict, List, Mapping, Optional

import nbtlib
import numpy as np

from .constants import BLOCKS_PER_SECTION, LIGHT_ARRAY_SIZE
from .coords import WorldChunkCoord
from .palette import decodable_count
from .section import BlockStates, PaletteEntry, Section


class DecodeError(ValueError):
    """Malformed world data; recoverable by skipping the chunk or file."""


class ChunkDecodeError(DecodeError):
    """A chunk payload could not be turned into a Chunk."""


@dataclass
class Chunk:
    """A decoded chunk.

    Attributes:
        data_version: Minecraft data version that wrote the chunk
        x_pos: Chunk X coordinate
        z_pos: Chunk Z coordinate
        y_pos: Lowest section index (-4 in modern worlds, meaning y=-64)
        status: Generation status, "minecraft:full" when fully generated
        sections: Sections in file order
    """
    data_version: int
    x_pos: int
    z_pos: int
    y_pos: int
    status: str
    sections: List[Section] = field(default_factory=list)
    _by_y: Dict[int, Section] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._by_y = {section.y: section for section in self.sections}

    @property
    def coord(self) -> WorldChunkCoord:
        return WorldChunkCoord(self.x_pos, self.z_pos)

    def section_at(self, index: int) -> Optional[Section]:
        """Get the section with vertical index, or None."""
        return self._by_y.get(index)

    def ensure_unpacked(self) -> None:
        """Unpack block states of every section."""
        for section in self.sections:
            section.ensure_unpacked()


def _light_array(tag: Any, name: str) -> Optional[bytes]:
    if tag is None:
        return None
    data = np.asarray(tag).astype(np.int8, copy=False).tobytes()
    if len(data) != LIGHT_ARRAY_SIZE:
        raise ChunkDecodeError(f"{name} has {len(data)} bytes, expected {LIGHT_ARRAY_SIZE}")
    return data


def _palette_entry(tag: Mapping[str, Any]) -> PaletteEntry:
    properties = tag.get("Properties")
    if properties is not None:
        properties = {str(key): str(value) for key, value in properties.items()}
    return PaletteEntry(str(tag["Name"]), properties)


def _block_states(tag: Optional[Mapping[str, Any]]) -> Optional[BlockStates]:
    if tag is None:
        return None
    palette = [_palette_entry(entry) for entry in tag.get("palette", [])]
    data = tag.get("data")
    if data is not None:
        data = np.asarray(data).astype(np.int64)
    states = BlockStates(palette=palette, data=data)
    if not states.is_uniform():
        count = decodable_count(len(data), states.bits)
        if count < BLOCKS_PER_SECTION:
            raise ChunkDecodeError(
                f"block_states data holds {count} of {BLOCKS_PER_SECTION} {states.bits}-bit indices "
                f"({len(data)} longs)"
            )
    return states


def section_from_nbt(tag: Mapping[str, Any]) -> Section:
    """Build a Section from its NBT compound."""
    return Section(
        y=int(tag["Y"]),
        block_states=_block_states(tag.get("block_states")),
        block_light=_light_array(tag.get("BlockLight"), "BlockLight"),
        sky_light=_light_array(tag.get("SkyLight"), "SkyLight"),
    )


def chunk_from_nbt(root: Mapping[str, Any]) -> Chunk:
    """Build a Chunk from the root NBT compound of a chunk payload."""
    try:
        sections = [section_from_nbt(tag) for tag in root.get("sections", [])]
        y_pos = root.get("yPos")
        if y_pos is None:
            y_pos = min((section.y for section in sections), default=0)
        return Chunk(
            data_version=int(root["DataVersion"]),
            x_pos=int(root["xPos"]),
            z_pos=int(root["zPos"]),
            y_pos=int(y_pos),
            status=str(root.get("Status", "")),
            sections=sections,
        )
    except ChunkDecodeError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ChunkDecodeError(f"Invalid chunk structure: {e!r}") from e


def decode_chunk(data: bytes) -> Chunk:
    """Decode a decompressed chunk payload.

    Args:
        data: Uncompressed NBT bytes

    Returns:
        Decoded Chunk (sections still packed)

    Raises:
        ChunkDecodeError: If the NBT is malformed or lacks required fields
    """
    try:
        root = nbtlib.File.parse(BytesIO(data))
    except Exception as e:
        raise ChunkDecodeError(f"Invalid chunk NBT: {e!r}") from e
    # Older nbtlib releases keep the unnamed root compound as a single child.
    if "DataVersion" not in root and len(root) == 1:
        root = next(iter(root.values()))
    return chunk_from_nbt(root)
