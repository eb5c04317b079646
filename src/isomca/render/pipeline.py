"""Render pipeline from region files to an isometric PNG."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Callable, Tuple
import logging
import time

from ..config import RenderConfig, ChunkRange
from ..anvil import ChunkStore, LoadStats, World, WorldChunkCoord
from .renderer import ChunkRender, render_world, world_image_size
from .textures import AssetCache

logger = logging.getLogger(__name__)


@dataclass
class RenderProgress:
    """Progress information for rendering."""
    phase: str
    current: int
    total: int
    message: str = ""

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 0.0
        return 100.0 * self.current / self.total


ProgressCallback = Callable[[RenderProgress], None]


class RenderPipeline:
    """Loads a chunk range, renders it and writes the image."""

    def __init__(self, config: RenderConfig):
        """Initialize the pipeline.

        Args:
            config: Render configuration

        Raises:
            ValueError: If the configuration is invalid
        """
        self.config = config
        config.validate()

        self.world = World(config.region_dir)
        self.store = ChunkStore()
        self.cache = AssetCache(config.assets_dir)
        self.load_stats: Optional[LoadStats] = None

    def resolve_y_range(self) -> Tuple[int, int]:
        """Get the (min_y, max_y) to draw, max_y inclusive.

        Bounds missing from the config come from the loaded sections.

        Raises:
            ValueError: If the resolved range holds no layer
        """
        store_min, store_max = self.store.get_y_range()
        min_y = self.config.min_y if self.config.min_y is not None else store_min
        max_y = self.config.max_y if self.config.max_y is not None else store_max
        if min_y >= max_y:
            raise ValueError(
                f"Y range {min_y}..{max_y - 1} is empty; "
                f"loaded sections span y {store_min}..{store_max - 1}"
            )
        return min_y, max_y - 1

    def run(
        self,
        progress_callback: Optional[ProgressCallback] = None
    ) -> Path:
        """Run the full render pipeline.

        Args:
            progress_callback: Optional callback for progress updates

        Returns:
            Path to the written image

        Raises:
            ValueError: If the Y range left after loading is empty
        """
        def report_progress(phase: str, current: int, total: int, message: str = ""):
            if progress_callback:
                progress_callback(RenderProgress(phase, current, total, message))

        chunks = self.config.chunks

        # Phase 1: Load chunks
        total_chunks = chunks.count
        report_progress("load", 0, total_chunks, f"Loading {total_chunks} chunks...")
        start_time = time.perf_counter()

        def on_loaded(coord: WorldChunkCoord, stats: LoadStats) -> None:
            report_progress("load", stats.total, total_chunks, f"Chunk ({coord})")

        self.load_stats = self.world.load_range(chunks.min, chunks.max, self.store, on_chunk=on_loaded)
        elapsed = time.perf_counter() - start_time
        report_progress(
            "load",
            total_chunks,
            total_chunks,
            f"Loaded {self.load_stats.loaded} chunks in {elapsed:.2f}s "
            f"({self.load_stats.missing} missing, {self.load_stats.failed} failed)",
        )

        # Phase 2: Render
        min_y, max_y = self.resolve_y_range()
        width, height = world_image_size(chunks.min, chunks.max, min_y, max_y)
        report_progress("render", 0, total_chunks, f"Rendering {width}x{height} image (y {min_y}..{max_y})...")
        start_time = time.perf_counter()

        def on_rendered(render: ChunkRender, done: int, total: int) -> None:
            report_progress("render", done, total, f"Chunk ({render.coord}) rendered")

        image = render_world(
            self.cache,
            self.store,
            chunks.min,
            chunks.max,
            min_y,
            max_y,
            parallel=self.config.parallel,
            workers=self.config.workers,
            use_sky_light=self.config.use_sky_light,
            skip_complex_geometry=self.config.skip_complex_geometry,
            on_chunk=on_rendered,
        )
        elapsed = time.perf_counter() - start_time
        report_progress(
            "render",
            total_chunks,
            total_chunks,
            f"Rendered {total_chunks} chunks in {elapsed:.2f}s "
            f"({len(self.cache.cubes)} cube sprites)",
        )

        # Phase 3: Save image
        output = Path(self.config.output)
        report_progress("save", 0, 1, f"Saving {output}...")
        output.parent.mkdir(parents=True, exist_ok=True)
        image.save(output)
        logger.info("Wrote %s", output)
        report_progress("save", 1, 1, f"Image saved to {output}")

        return output


def render_region(
    source_dir: Path,
    assets_dir: Path,
    chunks: ChunkRange,
    output: Path,
    progress_callback: Optional[ProgressCallback] = None,
    **kwargs
) -> Path:
    """Convenience function to render a chunk range.

    Args:
        source_dir: Region directory
        assets_dir: Resource pack assets directory
        chunks: Chunk range to render
        output: Output PNG path
        progress_callback: Optional progress callback
        **kwargs: Additional RenderConfig options

    Returns:
        Path to the written image
    """
    config = RenderConfig(
        source_dir=source_dir,
        assets_dir=assets_dir,
        chunks=chunks,
        output=output,
        **kwargs
    )

    pipeline = RenderPipeline(config)
    return pipeline.run(progress_callback)
