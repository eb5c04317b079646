import numpy as np
import pytest

from isomca.anvil import (
    BlockStates,
    ChunkLocalBlockCoord,
    PaletteEntry,
    Section,
    SectionStateError,
    bits_per_value,
    decodable_count,
    nibble_at,
    pack_block_states,
    unpack_block_states,
)


def test_nibble_extraction_low_then_high():
    light = bytes([0x3B, 0xF0])
    assert nibble_at(light, 0) == 0xB
    assert nibble_at(light, 1) == 0x3
    assert nibble_at(light, 2) == 0x0
    assert nibble_at(light, 3) == 0xF


@pytest.mark.parametrize("palette_size,bits", [(1, 4), (2, 4), (16, 4), (17, 5), (32, 5), (33, 6), (64, 6), (65, 7), (300, 9)])
def test_bits_per_value_from_palette(palette_size, bits):
    assert bits_per_value(palette_size, 0) == bits


def test_bits_per_value_falls_back_to_data_length():
    assert bits_per_value(None, 256) == 4
    assert bits_per_value(None, 512) == 8
    assert bits_per_value(0, 0) == 4


@pytest.mark.parametrize("long_count,bits,count", [(256, 4, 4096), (342, 5, 4096), (10, 5, 120), (456, 9, 3192), (1024, 16, 4096)])
def test_decodable_count(long_count, bits, count):
    assert decodable_count(long_count, bits) == count


def test_unpack_hand_packed_longs():
    # 4-bit indices 0..15 in the first long, all 1s in the second
    first = sum(i << (4 * i) for i in range(16))
    second = sum(1 << (4 * i) for i in range(16))
    indices = unpack_block_states([first, second], 4)
    assert list(indices) == list(range(16)) + [1] * 16


def test_unpack_ignores_padding_bits():
    # 5 bits: 12 values per long, top 4 bits are padding
    value = (0b11111 << 0) | (0b00001 << 5) | (0xF << 60)
    indices = unpack_block_states([value], 5)
    assert len(indices) == 12
    assert indices[0] == 31
    assert indices[1] == 1
    assert all(v == 0 for v in indices[2:])


def test_unpack_accepts_signed_longs():
    # All bits set is -1 as a signed long
    indices = unpack_block_states(np.array([-1], dtype=np.int64), 4)
    assert list(indices) == [15] * 16


def test_pack_unpack_matches_for_odd_width():
    rng = np.random.default_rng(7)
    indices = rng.integers(0, 40, size=4096)
    packed = pack_block_states(indices, 6)
    assert len(packed) == 410
    assert np.array_equal(unpack_block_states(packed, 6), indices)


def test_single_palette_section_is_uniform():
    section = Section(y=0, block_states=BlockStates([PaletteEntry("minecraft:stone")]))
    assert section.ensure_unpacked() is None
    assert section.is_unpacked
    for index in range(4096):
        local = ChunkLocalBlockCoord(index & 0xF, (index >> 8) & 0xF, (index >> 4) & 0xF)
        assert section.block_at(local) == PaletteEntry("minecraft:stone")


def test_unpack_is_memoised_and_read_only():
    palette = [PaletteEntry("minecraft:air"), PaletteEntry("minecraft:dirt")]
    indices = [i % 2 for i in range(4096)]
    section = Section(y=0, block_states=BlockStates(palette, pack_block_states(indices, 4)))
    assert not section.is_unpacked

    first = section.ensure_unpacked()
    second = section.ensure_unpacked()
    assert first is second
    assert not first.flags.writeable
    assert section.block_at(ChunkLocalBlockCoord(1, 0, 0)).name == "minecraft:dirt"
    assert section.block_at(ChunkLocalBlockCoord(0, 0, 0)).name == "minecraft:air"


def test_lookup_before_unpack_is_an_error():
    palette = [PaletteEntry("minecraft:air"), PaletteEntry("minecraft:dirt")]
    section = Section(y=0, block_states=BlockStates(palette, pack_block_states([1] * 4096, 4)))
    with pytest.raises(SectionStateError):
        section.block_at(ChunkLocalBlockCoord(0, 0, 0))


def test_lookup_past_short_data_is_an_error():
    palette = [PaletteEntry("minecraft:air"), PaletteEntry("minecraft:dirt")]
    section = Section(y=0, block_states=BlockStates(palette, pack_block_states([1] * 32, 4)))
    section.ensure_unpacked()
    assert section.block_at(ChunkLocalBlockCoord(15, 0, 1)).name == "minecraft:dirt"
    with pytest.raises(SectionStateError):
        section.block_at(ChunkLocalBlockCoord(0, 0, 2))


def test_section_without_block_states_is_air():
    section = Section(y=3)
    assert section.block_at(ChunkLocalBlockCoord(0, 0, 0)) is None
    assert section.block_light_at(ChunkLocalBlockCoord(0, 0, 0)) is None


@pytest.mark.parametrize("bits,palette_size", [(5, 32), (6, 64), (7, 128)])
def test_palette_size_decides_width_of_padded_data(bits, palette_size):
    long_count = -(-4096 // (64 // bits))
    # The data length alone would suggest one bit more
    assert bits_per_value(None, long_count) == bits + 1
    assert bits_per_value(palette_size, long_count) == bits
