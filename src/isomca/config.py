"""Configuration classes for isomca rendering."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any
import json

from .anvil.coords import WorldChunkCoord


@dataclass
class ChunkRange:
    """Inclusive box of chunk coordinates."""
    min_cx: int
    min_cz: int
    max_cx: int
    max_cz: int

    def validate(self) -> None:
        """Validate the chunk range."""
        if self.min_cx > self.max_cx:
            raise ValueError(f"min_cx ({self.min_cx}) must not exceed max_cx ({self.max_cx})")
        if self.min_cz > self.max_cz:
            raise ValueError(f"min_cz ({self.min_cz}) must not exceed max_cz ({self.max_cz})")

    @property
    def min(self) -> WorldChunkCoord:
        """Get the lowest corner."""
        return WorldChunkCoord(self.min_cx, self.min_cz)

    @property
    def max(self) -> WorldChunkCoord:
        """Get the highest corner."""
        return WorldChunkCoord(self.max_cx, self.max_cz)

    @property
    def width(self) -> int:
        """Get width in chunks along X."""
        return self.max_cx - self.min_cx + 1

    @property
    def height(self) -> int:
        """Get depth in chunks along Z."""
        return self.max_cz - self.min_cz + 1

    @property
    def count(self) -> int:
        return self.width * self.height

    def to_dict(self) -> Dict[str, int]:
        return {
            "min_cx": self.min_cx,
            "min_cz": self.min_cz,
            "max_cx": self.max_cx,
            "max_cz": self.max_cz,
        }


@dataclass
class RenderConfig:
    """Configuration for a render run."""
    # Region directory (or a world directory containing region/)
    source_dir: Path

    # Resource pack assets directory (contains minecraft/textures/block)
    assets_dir: Path

    # Chunks to render
    chunks: ChunkRange

    # Output PNG
    output: Path = field(default_factory=lambda: Path("output.png"))

    # Y range; max_y is exclusive. None means the span of the loaded sections
    min_y: Optional[int] = None
    max_y: Optional[int] = None

    # Processing options
    parallel: bool = True
    workers: Optional[int] = None

    # Rendering options
    use_sky_light: bool = True
    skip_complex_geometry: bool = True

    def validate(self) -> None:
        """Validate the configuration."""
        self.chunks.validate()
        if self.min_y is not None and self.max_y is not None and self.min_y >= self.max_y:
            raise ValueError(f"min_y ({self.min_y}) must be less than max_y ({self.max_y})")
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"workers must be positive: {self.workers}")
        if not Path(self.source_dir).is_dir():
            raise ValueError(f"Source directory not found: {self.source_dir}")
        if not Path(self.assets_dir).is_dir():
            raise ValueError(f"Assets directory not found: {self.assets_dir}")

    @property
    def region_dir(self) -> Path:
        """Get the directory holding r.X.Z.mca files."""
        nested = Path(self.source_dir) / "region"
        if nested.is_dir():
            return nested
        return Path(self.source_dir)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "source_dir": str(self.source_dir),
            "assets_dir": str(self.assets_dir),
            "chunks": self.chunks.to_dict(),
            "output": str(self.output),
            "min_y": self.min_y,
            "max_y": self.max_y,
            "parallel": self.parallel,
            "workers": self.workers,
            "use_sky_light": self.use_sky_light,
            "skip_complex_geometry": self.skip_complex_geometry,
        }

    def save(self, filepath: Path) -> None:
        """Save configuration to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: Path) -> "RenderConfig":
        """Load configuration from JSON file."""
        with open(filepath) as f:
            data = json.load(f)

        chunks = ChunkRange(
            min_cx=data["chunks"]["min_cx"],
            min_cz=data["chunks"]["min_cz"],
            max_cx=data["chunks"]["max_cx"],
            max_cz=data["chunks"]["max_cz"],
        )

        return cls(
            source_dir=Path(data["source_dir"]),
            assets_dir=Path(data["assets_dir"]),
            chunks=chunks,
            output=Path(data.get("output", "output.png")),
            min_y=data.get("min_y"),
            max_y=data.get("max_y"),
            parallel=data.get("parallel", True),
            workers=data.get("workers"),
            use_sky_light=data.get("use_sky_light", True),
            skip_complex_geometry=data.get("skip_complex_geometry", True),
        )
