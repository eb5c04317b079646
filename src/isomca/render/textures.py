"""Texture loading and the shared sprite caches.

Rendering threads share one AssetCache. Each of its caches is a dict read
without locking; a miss computes the value outside the lock and inserts it
under the lock, keeping whichever value landed first. Two threads missing
the same key at once may both compute it, which is harmless because every
value is a pure function of its key.

Cached images are shared between threads and must not be modified.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

from PIL import Image

from .faces import BlockFace
from .light import LightData
from .transforms import TEXTURE_SIZE, missing_texture

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SpriteCache(Generic[K, V]):
    """Thread-shared memo table."""

    def __init__(self):
        self._items: Dict[K, V] = {}
        self._lock = threading.Lock()

    def get(self, key: K) -> Optional[V]:
        return self._items.get(key)

    def get_or_create(self, key: K, factory: Callable[[], V]) -> V:
        """Get a cached value, computing and inserting it on a miss."""
        value = self._items.get(key)
        if value is not None:
            return value
        value = factory()
        with self._lock:
            return self._items.setdefault(key, value)

    def __contains__(self, key: K) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)


@dataclass(frozen=True)
class FaceKey:
    """Oriented face sprite: which face, drawn from which texture."""
    face: BlockFace
    texture: str


@dataclass(frozen=True)
class CubeKey:
    """Finished cube sprite: light levels plus normalized block name."""
    light: LightData
    name: str


class AssetCache:
    """Textures and sprites for one render run.

    Attributes:
        assets_dir: Resource pack "assets" directory
        textures: 16x16 RGBA textures by name
        faces: Transformed face sprites by FaceKey
        cubes: 24x24 cube sprites by CubeKey
    """

    def __init__(self, assets_dir: Path):
        self.assets_dir = Path(assets_dir)
        self.textures: SpriteCache[str, Image.Image] = SpriteCache()
        self.faces: SpriteCache[FaceKey, Image.Image] = SpriteCache()
        self.cubes: SpriteCache[CubeKey, Image.Image] = SpriteCache()

    def texture_path(self, name: str) -> Path:
        """Get the path of a block texture."""
        return self.assets_dir / "minecraft" / "textures" / "block" / f"{name}.png"

    def load_texture(self, name: str) -> Image.Image:
        """Get a block texture as a 16x16 RGBA image.

        Textures that can't be found or read are replaced by the missing
        texture checkerboard.
        """
        return self.textures.get_or_create(name, lambda: self._read_texture(name))

    def _read_texture(self, name: str) -> Image.Image:
        path = self.texture_path(name)
        if not path.is_file():
            logger.warning("Missing texture: %s", name)
            return missing_texture()
        try:
            with Image.open(path) as img:
                texture = img.convert("RGBA")
        except OSError as e:
            logger.warning("Unreadable texture %s: %s", path, e)
            return missing_texture()

        # Animated textures are frames stacked vertically; keep the first
        width, height = texture.size
        if height > width:
            texture = texture.crop((0, 0, width, width))
        if texture.size != (TEXTURE_SIZE, TEXTURE_SIZE):
            texture = texture.resize((TEXTURE_SIZE, TEXTURE_SIZE), Image.Resampling.NEAREST)
        logger.debug("Loaded texture %s", name)
        return texture
