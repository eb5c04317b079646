import logging

from isomca.anvil import ChunkStore, RegionCoord, World, WorldBlockCoord, WorldChunkCoord

from helpers import chunk_frame, chunk_nbt, nbt_bytes, section_nbt, truncated_section_nbt, write_region


def build_region(tmp_path, region_dir, region, chunks, extra_frames=None):
    frames = {}
    for cx, cz in chunks:
        payload = nbt_bytes(chunk_nbt(cx, cz, [section_nbt(4, ["minecraft:stone"])]), tmp_path)
        frames[WorldChunkCoord(cx, cz).region_index()] = chunk_frame(payload)
    frames.update(extra_frames or {})
    return write_region(region_dir / region.file_name(), frames)


def test_region_files(tmp_path):
    region_dir = tmp_path / "region"
    region_dir.mkdir()
    build_region(tmp_path, region_dir, RegionCoord(0, 0), [(0, 0)])
    build_region(tmp_path, region_dir, RegionCoord(-1, 0), [(-1, 0)])
    (region_dir / "notes.txt").write_text("not a region")

    regions = World(region_dir).region_files()
    assert set(regions) == {RegionCoord(0, 0), RegionCoord(-1, 0)}
    assert regions[RegionCoord(-1, 0)].name == "r.-1.0.mca"


def test_region_files_of_missing_directory(tmp_path):
    assert World(tmp_path / "nope").region_files() == {}


def test_load_range_across_regions(tmp_path):
    region_dir = tmp_path / "region"
    region_dir.mkdir()
    build_region(tmp_path, region_dir, RegionCoord(0, 0), [(0, 0), (0, 1)])
    build_region(tmp_path, region_dir, RegionCoord(-1, 0), [(-1, 0), (-1, 1)])

    store = ChunkStore()
    seen = []
    stats = World(region_dir).load_range(
        WorldChunkCoord(-1, 0), WorldChunkCoord(0, 1), store,
        on_chunk=lambda coord, s: seen.append(coord),
    )

    assert (stats.loaded, stats.missing, stats.failed) == (4, 0, 0)
    assert len(store) == 4
    assert sorted(seen, key=lambda c: (c.cx, c.cz)) == [
        WorldChunkCoord(-1, 0), WorldChunkCoord(-1, 1), WorldChunkCoord(0, 0), WorldChunkCoord(0, 1),
    ]
    assert store.get_block_at(WorldBlockCoord(-5, 70, 20)) == "minecraft:stone"


def test_missing_region_and_chunk_are_skipped(tmp_path, caplog):
    region_dir = tmp_path / "region"
    region_dir.mkdir()
    build_region(tmp_path, region_dir, RegionCoord(0, 0), [(0, 0)])

    store = ChunkStore()
    with caplog.at_level(logging.WARNING, logger="isomca.anvil.world"):
        stats = World(region_dir).load_range(WorldChunkCoord(-1, 0), WorldChunkCoord(1, 0), store)

    # (-1, 0) lives in a region file that doesn't exist; (1, 0) isn't in r.0.0
    assert (stats.loaded, stats.missing, stats.failed) == (1, 2, 0)
    assert WorldChunkCoord(0, 0) in store
    assert "r.-1.0.mca" in caplog.text


def test_corrupt_chunk_does_not_stop_the_range(tmp_path, caplog):
    region_dir = tmp_path / "region"
    region_dir.mkdir()
    bad_frame = chunk_frame(b"\x0a\x00\x00\xff\xff")
    build_region(
        tmp_path, region_dir, RegionCoord(0, 0), [(0, 0), (2, 0)],
        extra_frames={WorldChunkCoord(1, 0).region_index(): bad_frame},
    )

    store = ChunkStore()
    with caplog.at_level(logging.WARNING, logger="isomca.anvil.world"):
        stats = World(region_dir).load_range(WorldChunkCoord(0, 0), WorldChunkCoord(2, 0), store)

    assert (stats.loaded, stats.missing, stats.failed) == (2, 0, 1)
    assert WorldChunkCoord(1, 0) not in store
    assert "Skipping chunk 1,0" in caplog.text


def test_unreadable_region_counts_as_failed(tmp_path):
    region_dir = tmp_path / "region"
    region_dir.mkdir()
    (region_dir / "r.0.0.mca").write_bytes(b"\0" * 100)

    stats = World(region_dir).load_range(WorldChunkCoord(0, 0), WorldChunkCoord(1, 0), ChunkStore())
    assert (stats.loaded, stats.missing, stats.failed) == (0, 0, 2)
    assert stats.total == 2


def test_chunk_with_short_block_states_is_skipped(tmp_path, caplog):
    region_dir = tmp_path / "region"
    region_dir.mkdir()
    short = chunk_frame(nbt_bytes(chunk_nbt(1, 0, [truncated_section_nbt(4)]), tmp_path))
    build_region(
        tmp_path, region_dir, RegionCoord(0, 0), [(0, 0)],
        extra_frames={WorldChunkCoord(1, 0).region_index(): short},
    )

    store = ChunkStore()
    with caplog.at_level(logging.WARNING, logger="isomca.anvil.world"):
        stats = World(region_dir).load_range(WorldChunkCoord(0, 0), WorldChunkCoord(1, 0), store)

    assert (stats.loaded, stats.missing, stats.failed) == (1, 0, 1)
    assert WorldChunkCoord(1, 0) not in store
    assert "Skipping chunk 1,0" in caplog.text
