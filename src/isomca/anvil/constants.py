"""Constants for the Anvil (.mca) world format."""

# Chunk dimensions
CHUNK_SIZE = 16  # 16x16 blocks horizontally

# Section/Height
SECTION_HEIGHT = 16  # Blocks per section vertically
BLOCKS_PER_SECTION = 4096  # 16*16*16
DEFAULT_Y_RANGE = (0, 256)

# Region file format
REGION_SIZE = 32  # 32x32 chunks per region
REGION_CHUNK_COUNT = 1024  # 32*32 chunks
SECTOR_SIZE = 4096
LOCATION_TABLE_SIZE = 4096
TIMESTAMP_TABLE_SIZE = 4096
CHUNK_HEADER_SIZE = 5  # 4-byte length + 1-byte compression type

# Compression type of zlib chunk payloads, the only one decoded
COMPRESSION_ZLIB = 2
SUPPORTED_COMPRESSION = (COMPRESSION_ZLIB,)

# Block states
MIN_BITS_PER_VALUE = 4
LONG_BITS = 64

# Light arrays (4 bits per block)
LIGHT_ARRAY_SIZE = BLOCKS_PER_SECTION // 2
FULL_BRIGHTNESS = 0xF


def index_block(x: int, y: int, z: int) -> int:
    """Calculate block index within a section from local x,y,z coordinates.

    Y occupies bits 8-11, Z occupies bits 4-7, X occupies bits 0-3. This is
    the order block states and light arrays are stored on disk.
    """
    return (y & 0xF) << 8 | (z & 0xF) << 4 | (x & 0xF)


def x_from_index(index: int) -> int:
    """Extract x coordinate from block index."""
    return index & 0xF


def y_from_index(index: int) -> int:
    """Extract y coordinate from block index."""
    return (index >> 8) & 0xF


def z_from_index(index: int) -> int:
    """Extract z coordinate from block index."""
    return (index >> 4) & 0xF
