import pytest
from PIL import Image
from typer.testing import CliRunner

from isomca import __version__
from isomca.anvil import WorldChunkCoord
from isomca.cli import app
from isomca.render import world_image_size

from helpers import chunk_frame, chunk_nbt, nbt_bytes, section_nbt, solid_texture, write_region, write_textures

runner = CliRunner()

CHUNK_OPTIONS = ["--min-cx", "0", "--min-cz", "0", "--max-cx", "1", "--max-cz", "0"]


@pytest.fixture
def region_dir(tmp_path):
    region_dir = tmp_path / "region"
    region_dir.mkdir()
    frames = {}
    for cx in (0, 1):
        payload = nbt_bytes(chunk_nbt(cx, 0, [section_nbt(4, ["minecraft:stone"])]), tmp_path)
        frames[WorldChunkCoord(cx, 0).region_index()] = chunk_frame(payload)
    write_region(region_dir / "r.0.0.mca", frames)
    return region_dir


@pytest.fixture
def assets(tmp_path):
    return write_textures(tmp_path / "assets", {"stone": solid_texture((128, 128, 128, 255))})


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"isomca version {__version__}" in result.output


def test_info(region_dir):
    (region_dir / "r.5.5.mca").write_bytes(b"\0" * 10)
    result = runner.invoke(app, ["info", str(region_dir)])
    assert result.exit_code == 0
    assert "Regions: 2" in result.output
    assert "Chunks: 2" in result.output


def test_info_of_missing_directory(tmp_path):
    result = runner.invoke(app, ["info", str(tmp_path / "nope")])
    assert result.exit_code == 1
    assert "Not a directory" in result.output


def test_render(region_dir, assets, tmp_path):
    output = tmp_path / "map.png"
    result = runner.invoke(app, [
        "render", str(region_dir), str(assets), *CHUNK_OPTIONS,
        "--min-y", "64", "--max-y", "66", "-o", str(output), "--no-parallel",
    ])
    assert result.exit_code == 0, result.output
    assert "Success!" in result.output
    with Image.open(output) as img:
        assert img.size == world_image_size(WorldChunkCoord(0, 0), WorldChunkCoord(1, 0), 64, 65)


def test_render_requires_chunk_range(region_dir, assets):
    result = runner.invoke(app, ["render", str(region_dir), str(assets), "--min-cx", "0"])
    assert result.exit_code == 1
    assert "--min-cz, --max-cx, --max-cz" in result.output


def test_render_rejects_inverted_range(region_dir, assets):
    result = runner.invoke(app, [
        "render", str(region_dir), str(assets),
        "--min-cx", "2", "--min-cz", "0", "--max-cx", "0", "--max-cz", "0",
    ])
    assert result.exit_code == 1
    assert "must not exceed" in result.output


def test_render_warns_when_nothing_loads(region_dir, assets, tmp_path):
    result = runner.invoke(app, [
        "render", str(region_dir), str(assets),
        "--min-cx", "40", "--min-cz", "40", "--max-cx", "40", "--max-cz", "40",
        "-o", str(tmp_path / "empty.png"),
    ])
    assert result.exit_code == 0, result.output
    assert "no chunks were loaded" in result.output


def test_saved_config_can_be_reused(region_dir, assets, tmp_path):
    config_path = tmp_path / "render.json"
    first = runner.invoke(app, [
        "render", str(region_dir), str(assets), *CHUNK_OPTIONS,
        "--min-y", "64", "--max-y", "65", "-o", str(tmp_path / "a.png"),
        "--save-config", str(config_path),
    ])
    assert first.exit_code == 0, first.output
    assert config_path.is_file()

    second = runner.invoke(app, [
        "render", str(region_dir), str(assets), "--config", str(config_path),
        "--max-cx", "0", "-o", str(tmp_path / "b.png"),
    ])
    assert second.exit_code == 0, second.output
    with Image.open(tmp_path / "b.png") as img:
        assert img.size == world_image_size(WorldChunkCoord(0, 0), WorldChunkCoord(0, 0), 64, 64)


def test_unreadable_config(region_dir, assets, tmp_path):
    config_path = tmp_path / "render.json"
    config_path.write_text("{not json")
    result = runner.invoke(app, ["render", str(region_dir), str(assets), "--config", str(config_path)])
    assert result.exit_code == 1
    assert "Could not load config" in result.output


def test_render_reports_empty_y_range(region_dir, assets, tmp_path):
    result = runner.invoke(app, [
        "render", str(region_dir), str(assets), *CHUNK_OPTIONS,
        "--min-y", "100", "-o", str(tmp_path / "map.png"),
    ])
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "is empty" in result.output
    assert not (tmp_path / "map.png").exists()
