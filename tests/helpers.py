"""Builders for NBT chunks, region files and texture packs used by the tests."""

import math
import struct
import zlib
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

import nbtlib
import numpy as np
from nbtlib.tag import Byte, ByteArray, Compound, Int, List as TagList, LongArray, String
from PIL import Image

from isomca.anvil.constants import LIGHT_ARRAY_SIZE, SECTOR_SIZE
from isomca.anvil.palette import bits_per_value, pack_block_states


def light_bytes(fill: int = 0, levels: Optional[Dict[int, int]] = None) -> bytes:
    """Build a 2048-byte light array with every nibble = fill, then overrides."""
    array = bytearray([(fill & 0xF) | (fill & 0xF) << 4] * LIGHT_ARRAY_SIZE)
    for index, level in (levels or {}).items():
        byte = array[index >> 1]
        if index & 1:
            array[index >> 1] = (byte & 0x0F) | (level & 0xF) << 4
        else:
            array[index >> 1] = (byte & 0xF0) | (level & 0xF)
    return bytes(array)


def section_nbt(
    y: int,
    palette: Sequence[str],
    indices: Optional[Sequence[int]] = None,
    block_light: Optional[bytes] = None,
    sky_light: Optional[bytes] = None,
) -> Compound:
    """Build a section compound; indices are packed at the palette's width."""
    states = Compound({
        "palette": TagList[Compound]([Compound({"Name": String(name)}) for name in palette]),
    })
    if indices is not None:
        bits = bits_per_value(len(palette), 0)
        states["data"] = LongArray(pack_block_states(indices, bits))
    tag = Compound({"Y": Byte(y), "block_states": states})
    if block_light is not None:
        tag["BlockLight"] = ByteArray(np.frombuffer(block_light, dtype=np.int8))
    if sky_light is not None:
        tag["SkyLight"] = ByteArray(np.frombuffer(sky_light, dtype=np.int8))
    return tag


def truncated_section_nbt(y: int, long_count: int = 10) -> Compound:
    """Build a two-entry section whose data array is too short for 4096 indices."""
    tag = section_nbt(y, ["minecraft:air", "minecraft:stone"])
    tag["block_states"]["data"] = LongArray([0] * long_count)
    return tag


def chunk_nbt(cx: int, cz: int, sections: Iterable[Compound], y_pos: Optional[int] = -4) -> nbtlib.File:
    """Build the root compound of a chunk payload."""
    root = {
        "DataVersion": Int(3953),
        "xPos": Int(cx),
        "zPos": Int(cz),
        "Status": String("minecraft:full"),
        "sections": TagList[Compound](list(sections)),
    }
    if y_pos is not None:
        root["yPos"] = Int(y_pos)
    return nbtlib.File(root)


def nbt_bytes(tag: nbtlib.File, tmp_path: Path) -> bytes:
    """Serialize an NBT file to uncompressed bytes."""
    path = tmp_path / "chunk.nbt"
    tag.save(path, gzipped=False)
    return path.read_bytes()


def chunk_frame(payload: bytes, compression: int = 2) -> bytes:
    """Compress a payload and frame it with its length and compression type."""
    compressed = zlib.compress(payload) if compression == 2 else payload
    return struct.pack(">IB", len(compressed) + 1, compression) + compressed


def write_region(path: Path, frames: Dict[int, bytes], timestamp: int = 1700000000) -> Path:
    """Write a region file holding framed chunks at the given table indexes."""
    locations = bytearray(SECTOR_SIZE)
    timestamps = bytearray(SECTOR_SIZE)
    body = bytearray()
    sector = 2
    for index, frame in sorted(frames.items()):
        sectors = max(1, math.ceil(len(frame) / SECTOR_SIZE))
        struct.pack_into(">I", locations, index * 4, (sector << 8) | sectors)
        struct.pack_into(">I", timestamps, index * 4, timestamp)
        body += frame + b"\0" * (sectors * SECTOR_SIZE - len(frame))
        sector += sectors
    path.write_bytes(bytes(locations) + bytes(timestamps) + bytes(body))
    return path


def solid_texture(color, size=(16, 16)) -> Image.Image:
    return Image.new("RGBA", size, color)


def write_textures(assets_dir: Path, textures: Dict[str, Image.Image]) -> Path:
    """Write block textures into an assets directory layout."""
    block_dir = assets_dir / "minecraft" / "textures" / "block"
    block_dir.mkdir(parents=True, exist_ok=True)
    for name, img in textures.items():
        img.save(block_dir / f"{name}.png")
    return assets_dir


def uniform_indices(value: int) -> List[int]:
    return [value] * 4096
