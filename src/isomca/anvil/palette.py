"""Block-state and light array codecs.

Block states are stored as indices into a per-section palette, packed into
64-bit longs:
- Each index uses `bits` bits, at least 4
- floor(64 / bits) indices fit in one long; leftover high bits are padding
- Indices fill each long from the least-significant bits upwards
- 4096 indices per section, in Y, Z, X order

Light arrays hold one 4-bit level per block, two blocks per byte, the
even-indexed block in the low nibble.
"""

import math
from typing import Optional, Sequence, Union

import numpy as np

from .constants import BLOCKS_PER_SECTION, LONG_BITS, MIN_BITS_PER_VALUE

LongArrayLike = Union[np.ndarray, Sequence[int]]

_MASK_64 = (1 << LONG_BITS) - 1


def bits_per_value(palette_size: Optional[int], long_count: int) -> int:
    """Get the packed width of one palette index.

    The palette size decides the width whenever it is known. The data-length
    rule max(4, ceil(long_count * 64 / 4096)) is only a fallback for a missing
    palette size: it reads real 5- to 7-bit data as one bit too wide, since
    padding leaves those arrays longer than 4096 * bits / 64 longs.

    Args:
        palette_size: Number of palette entries, or None if unknown
        long_count: Number of longs in the packed array

    Returns:
        Bits per packed index
    """
    if palette_size:
        return max(MIN_BITS_PER_VALUE, (palette_size - 1).bit_length())
    return max(MIN_BITS_PER_VALUE, math.ceil(long_count * LONG_BITS / BLOCKS_PER_SECTION))


def values_per_long(bits: int) -> int:
    """Number of indices packed in one 64-bit long."""
    return LONG_BITS // bits


def decodable_count(long_count: int, bits: int) -> int:
    """Number of indices an array of long_count longs can hold (max 4096)."""
    return min(BLOCKS_PER_SECTION, long_count * values_per_long(bits))


def as_unsigned_longs(data: LongArrayLike) -> np.ndarray:
    """Reinterpret signed or unsigned 64-bit values as a uint64 array."""
    if isinstance(data, np.ndarray):
        return np.asarray(data).astype(np.int64, copy=False).view(np.uint64)
    return np.array([value & _MASK_64 for value in data], dtype=np.uint64)


def unpack_block_states(data: LongArrayLike, bits: int) -> np.ndarray:
    """Unpack a long array into palette indices.

    Args:
        data: Packed longs (nbtlib LongArray, numpy array or ints)
        bits: Bits per index

    Returns:
        int64 array of length min(4096, len(data) * (64 // bits))
    """
    longs = as_unsigned_longs(data)
    per_long = values_per_long(bits)
    shifts = np.arange(per_long, dtype=np.uint64) * np.uint64(bits)
    mask = np.uint64((1 << bits) - 1)
    indices = (longs[:, np.newaxis] >> shifts[np.newaxis, :]) & mask
    count = decodable_count(len(longs), bits)
    return indices.reshape(-1)[:count].astype(np.int64)


def pack_block_states(indices: Sequence[int], bits: int) -> np.ndarray:
    """Pack palette indices into longs (the inverse of unpack_block_states).

    Returns:
        int64 array, the on-disk representation
    """
    per_long = values_per_long(bits)
    long_count = math.ceil(len(indices) / per_long)
    longs = [0] * long_count
    for i, value in enumerate(indices):
        longs[i // per_long] |= (int(value) & ((1 << bits) - 1)) << ((i % per_long) * bits)
    return np.array(longs, dtype=np.uint64).view(np.int64)


def nibble_at(array: Union[bytes, bytearray], index: int) -> int:
    """Get the 4-bit value for block index from a packed light array."""
    byte = array[index >> 1]
    if index & 1:
        return (byte >> 4) & 0x0F
    return byte & 0x0F
