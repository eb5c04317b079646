"""World directory access.

World structure:
{world}/region/
    r.{X}.{Z}.mca        # Region files, 32x32 chunks each

A World only reads: it scans a region directory and loads chunk ranges into
a ChunkStore. A missing region, a missing chunk or one malformed chunk is
logged and skipped; the rest of the range still loads.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .chunk import DecodeError
from .coords import RegionCoord, WorldChunkCoord
from .region import RegionFile
from .store import ChunkStore

logger = logging.getLogger(__name__)


@dataclass
class LoadStats:
    """Outcome of loading a chunk range."""
    loaded: int = 0
    missing: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.loaded + self.missing + self.failed


class World:
    """A directory of region files.

    Attributes:
        region_dir: Directory containing r.X.Z.mca files
    """

    def __init__(self, region_dir: Path):
        self.region_dir = Path(region_dir)

    def region_path(self, region: RegionCoord) -> Path:
        """Get the path where a region's file would be."""
        return self.region_dir / region.file_name()

    def region_files(self) -> Dict[RegionCoord, Path]:
        """Scan the directory for region files."""
        regions = {}
        if not self.region_dir.is_dir():
            return regions
        for path in sorted(self.region_dir.iterdir()):
            coord = RegionCoord.from_file_name(path.name)
            if coord is not None and path.is_file():
                regions[coord] = path
        return regions

    def load_range(
        self,
        chunk_min: WorldChunkCoord,
        chunk_max: WorldChunkCoord,
        store: ChunkStore,
        on_chunk=None,
    ) -> LoadStats:
        """Load every chunk in an inclusive chunk box into the store.

        Args:
            chunk_min: One corner of the box
            chunk_max: The opposite corner
            store: Store to insert chunks into
            on_chunk: Optional callable(coord, stats) invoked after each chunk

        Returns:
            Counts of loaded, missing and failed chunks
        """
        by_region: Dict[RegionCoord, List[WorldChunkCoord]] = defaultdict(list)
        for cx in range(min(chunk_min.cx, chunk_max.cx), max(chunk_min.cx, chunk_max.cx) + 1):
            for cz in range(min(chunk_min.cz, chunk_max.cz), max(chunk_min.cz, chunk_max.cz) + 1):
                coord = WorldChunkCoord(cx, cz)
                by_region[coord.region_coord()].append(coord)

        stats = LoadStats()
        for region_coord, coords in by_region.items():
            path = self.region_path(region_coord)
            region = None
            if not path.exists():
                logger.warning("Region file %s not found", path.name)
                stats.missing += len(coords)
            else:
                region = self._open_region(path)
                if region is None:
                    stats.failed += len(coords)
            if region is None:
                for coord in coords:
                    if on_chunk:
                        on_chunk(coord, stats)
                continue
            with region:
                for coord in coords:
                    self._load_chunk(region, coord, store, stats)
                    if on_chunk:
                        on_chunk(coord, stats)

        logger.info(
            "Loaded %d chunks (%d missing, %d failed) from %s",
            stats.loaded, stats.missing, stats.failed, self.region_dir,
        )
        return stats

    def _open_region(self, path: Path) -> Optional[RegionFile]:
        try:
            return RegionFile(path)
        except (DecodeError, OSError) as e:
            logger.warning("Skipping region %s: %s", path.name, e)
            return None

    def _load_chunk(
        self,
        region: RegionFile,
        coord: WorldChunkCoord,
        store: ChunkStore,
        stats: LoadStats,
    ) -> None:
        try:
            chunk = region.read_chunk(coord)
        except (DecodeError, OSError) as e:
            logger.warning("Skipping chunk %s: %s", coord, e)
            stats.failed += 1
            return
        if chunk is None:
            logger.debug("Chunk %s not present in %s", coord, region.path.name)
            stats.missing += 1
            return
        store.insert(coord, chunk)
        stats.loaded += 1
