from isomca.anvil import (
    ChunkLocalBlockCoord,
    RegionCoord,
    WorldBlockCoord,
    WorldChunkCoord,
    index_block,
    x_from_index,
    y_from_index,
    z_from_index,
)


def test_region_index_in_range_and_stable_under_region_translation():
    for cx in range(-70, 70, 3):
        for cz in range(-70, 70, 7):
            index = WorldChunkCoord(cx, cz).region_index()
            assert 0 <= index <= 1023
            assert index == (cx % 32) + (cz % 32) * 32
            assert WorldChunkCoord(cx + 32, cz).region_index() == index
            assert WorldChunkCoord(cx, cz - 64).region_index() == index


def test_negative_chunks_map_to_negative_regions():
    assert WorldChunkCoord(-1, -1).region_coord() == RegionCoord(-1, -1)
    assert WorldChunkCoord(-1, -1).region_local() == (31, 31)
    assert WorldChunkCoord(-32, 31).region_coord() == RegionCoord(-1, 0)
    assert WorldChunkCoord(-33, 32).region_coord() == RegionCoord(-2, 1)


def test_block_to_chunk_uses_floor_division():
    assert WorldBlockCoord(-1, 0, -16).chunk_coord() == WorldChunkCoord(-1, -1)
    assert WorldBlockCoord(-17, 0, 15).chunk_coord() == WorldChunkCoord(-2, 0)
    assert WorldBlockCoord(16, 0, 0).chunk_coord() == WorldChunkCoord(1, 0)


def test_local_coord_and_section_index():
    block = WorldBlockCoord(-1, -64, 17)
    assert block.local_coord() == ChunkLocalBlockCoord(15, 0, 1)
    assert block.section_index() == -4
    assert WorldBlockCoord(0, 79, 0).section_index() == 4
    assert WorldBlockCoord(0, -1, 0).local_coord().ly == 15


def test_index_block_layout():
    assert index_block(1, 0, 0) == 1
    assert index_block(0, 0, 1) == 16
    assert index_block(0, 1, 0) == 256
    assert ChunkLocalBlockCoord(15, 15, 15).index() == 4095
    index = index_block(3, 9, 12)
    assert (x_from_index(index), y_from_index(index), z_from_index(index)) == (3, 9, 12)


def test_region_file_name_round_trip():
    assert RegionCoord(-1, 2).file_name() == "r.-1.2.mca"
    assert RegionCoord.from_file_name("r.-1.2.mca") == RegionCoord(-1, 2)
    assert RegionCoord.from_file_name("r.0.0.mcr") is None
    assert RegionCoord.from_file_name("level.dat") is None


def test_chunk_block_bounds():
    chunk = WorldChunkCoord(-1, 2)
    assert chunk.block_min(-64) == WorldBlockCoord(-16, -64, 32)
    assert chunk.block_max(319) == WorldBlockCoord(-1, 319, 47)


def test_neighbours():
    block = WorldBlockCoord(4, 5, 6)
    assert block.above() == WorldBlockCoord(4, 6, 6)
    assert block.east() == WorldBlockCoord(5, 5, 6)
    assert block.south() == WorldBlockCoord(4, 5, 7)
    assert str(block) == "4,5,6"
