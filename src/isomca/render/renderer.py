"""Isometric rendering of chunk ranges.

Blocks are drawn back to front with the painter's algorithm: each chunk is
rendered to its own image by walking its blocks in painter's order, then the
chunk images are composited in chunk painter's order. Chunk images don't
depend on each other, so they render on a thread pool.

Screen projection for a block inside a box (world_min, world_max):
    sx = (rel_x - rel_z + span_z - 1) * 12
    sy = (rel_x + rel_z) * 6 + (world_max.y - y + 1) * 12
where rel_* is relative to world_min and span_z is the box depth in blocks.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from PIL import Image

from ..anvil.blocks import is_air_block, is_complex_geometry
from ..anvil.constants import CHUNK_SIZE
from ..anvil.coords import WorldBlockCoord, WorldChunkCoord
from ..anvil.store import ChunkStore
from .cube import render_cube
from .light import LightData
from .textures import AssetCache
from .transforms import SPRITE_SIZE, empty_sprite, overlay

logger = logging.getLogger(__name__)

# Screen offset of one block step along x or z, and of one step in y
HALF_SPRITE = SPRITE_SIZE // 2
QUARTER_SPRITE = SPRITE_SIZE // 4


@dataclass
class ChunkRender:
    """Rendered image of one chunk."""
    coord: WorldChunkCoord
    image: Image.Image


def screen_position(
    world_min: WorldBlockCoord,
    world_max: WorldBlockCoord,
    block: WorldBlockCoord,
) -> Tuple[int, int]:
    """Get the top-left pixel of a block's sprite in an image covering a box."""
    rel_x = block.x - world_min.x
    rel_z = block.z - world_min.z
    span_z = world_max.z - world_min.z + 1
    screen_x = (rel_x - rel_z + span_z - 1) * HALF_SPRITE
    screen_y = (rel_x + rel_z) * QUARTER_SPRITE + (world_max.y - block.y + 1) * HALF_SPRITE
    return screen_x, screen_y


def chunk_image_size(min_y: int, max_y: int) -> Tuple[int, int]:
    """Size of one chunk's image for an inclusive Y range."""
    height = max_y - min_y + 1
    return (
        CHUNK_SIZE * SPRITE_SIZE,
        CHUNK_SIZE * HALF_SPRITE + height * HALF_SPRITE + SPRITE_SIZE,
    )


def world_image_size(
    chunk_min: WorldChunkCoord,
    chunk_max: WorldChunkCoord,
    min_y: int,
    max_y: int,
) -> Tuple[int, int]:
    """Size of the composited image for a chunk box and inclusive Y range."""
    chunks_x = abs(chunk_max.cx - chunk_min.cx) + 1
    chunks_z = abs(chunk_max.cz - chunk_min.cz) + 1
    height = max_y - min_y + 1
    xz_span = CHUNK_SIZE * (chunks_x + chunks_z)
    return (
        xz_span * HALF_SPRITE,
        xz_span * QUARTER_SPRITE + height * HALF_SPRITE + SPRITE_SIZE,
    )


def face_light(store: ChunkStore, block: WorldBlockCoord, use_sky_light: bool = True) -> int:
    """Light level inside a block, as seen by the face looking into it."""
    block_light = store.get_block_light_at(block) or 0
    if not use_sky_light:
        return block_light
    return max(block_light, store.get_sky_light_at(block))


def light_data_at(store: ChunkStore, block: WorldBlockCoord, use_sky_light: bool = True) -> LightData:
    """Sample the light reaching the three visible faces of a block."""
    return LightData(
        top=face_light(store, block.above(), use_sky_light),
        east=face_light(store, block.east(), use_sky_light),
        south=face_light(store, block.south(), use_sky_light),
    )


def render_chunk(
    cache: AssetCache,
    store: ChunkStore,
    coord: WorldChunkCoord,
    min_y: int,
    max_y: int,
    use_sky_light: bool = True,
    skip_complex_geometry: bool = True,
) -> ChunkRender:
    """Render one chunk.

    Args:
        cache: Shared asset cache
        store: Populated chunk store (read only)
        coord: Chunk to render
        min_y: Lowest block Y to draw
        max_y: Highest block Y to draw (inclusive)
        use_sky_light: Light faces by max(block light, sky light)
        skip_complex_geometry: Leave out blocks that aren't full cubes

    Returns:
        ChunkRender with an image of chunk_image_size(min_y, max_y)
    """
    world_min = coord.block_min(min_y)
    world_max = coord.block_max(max_y)
    img = empty_sprite(*chunk_image_size(min_y, max_y))

    drawn = 0
    for block in world_min.painters_range_to(world_max):
        name = store.get_block_at(block)
        if name is None or is_air_block(name):
            continue
        if skip_complex_geometry and is_complex_geometry(name):
            continue
        sprite = render_cube(cache, name, light_data_at(store, block, use_sky_light))
        if sprite is None:
            continue
        overlay(img, sprite, *screen_position(world_min, world_max, block))
        drawn += 1

    logger.debug("Chunk %s: drew %d blocks", coord, drawn)
    return ChunkRender(coord, img)


def render_world(
    cache: AssetCache,
    store: ChunkStore,
    chunk_min: WorldChunkCoord,
    chunk_max: WorldChunkCoord,
    min_y: int,
    max_y: int,
    parallel: bool = True,
    workers: Optional[int] = None,
    use_sky_light: bool = True,
    skip_complex_geometry: bool = True,
    on_chunk: Optional[Callable[[ChunkRender, int, int], None]] = None,
) -> Image.Image:
    """Render a box of chunks into one image.

    Args:
        cache: Shared asset cache
        store: Populated chunk store (read only)
        chunk_min: One corner of the chunk box
        chunk_max: The opposite corner
        min_y: Lowest block Y to draw
        max_y: Highest block Y to draw (inclusive)
        parallel: Render chunks on a thread pool
        workers: Thread count (defaults to the CPU count)
        use_sky_light: Light faces by max(block light, sky light)
        skip_complex_geometry: Leave out blocks that aren't full cubes
        on_chunk: Optional callable(render, done, total) after each composite

    Returns:
        RGBA image of world_image_size(...)
    """
    low = WorldChunkCoord(min(chunk_min.cx, chunk_max.cx), min(chunk_min.cz, chunk_max.cz))
    high = WorldChunkCoord(max(chunk_min.cx, chunk_max.cx), max(chunk_min.cz, chunk_max.cz))
    world_min = low.block_min(min_y)
    world_max = high.block_max(max_y)

    width, height = world_image_size(low, high, min_y, max_y)
    logger.info("Rendering chunks (%s) to (%s), y %d..%d", low, high, min_y, max_y)
    logger.info("Output image size: %dx%d", width, height)
    img = empty_sprite(width, height)

    coords = list(low.painters_range_to(high))
    total = len(coords)

    def render_one(coord: WorldChunkCoord) -> ChunkRender:
        return render_chunk(
            cache, store, coord, min_y, max_y,
            use_sky_light=use_sky_light,
            skip_complex_geometry=skip_complex_geometry,
        )

    def composite(done: int, render: ChunkRender) -> None:
        anchor = render.coord.block_min(min_y)
        world_x, world_y = screen_position(world_min, world_max, anchor)
        chunk_x, chunk_y = screen_position(anchor, render.coord.block_max(max_y), anchor)
        overlay(img, render.image, world_x - chunk_x, world_y - chunk_y)
        if on_chunk:
            on_chunk(render, done, total)

    if parallel and total > 1:
        max_workers = workers or os.cpu_count() or 1
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            # map yields in submission order, which is painter's order
            for done, render in enumerate(executor.map(render_one, coords), start=1):
                composite(done, render)
    else:
        for done, coord in enumerate(coords, start=1):
            composite(done, render_one(coord))

    return img
