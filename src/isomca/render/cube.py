"""Cube sprite assembly.

A cube sprite is 24x24: the top face at (0, 0), the south face at (0, 6) and
the east face at (12, 6). Face sprites are cached per (face, texture) at full
brightness; finished cubes are cached per (light levels, block name).
"""

from typing import Optional

from PIL import Image

from .faces import BlockFace, normalize_name, plan_faces, texture_tint
from .light import LightData
from .textures import AssetCache, CubeKey, FaceKey
from .transforms import darken, empty_sprite, overlay, tint, transform_side, transform_top

# Where each face lands inside the cube sprite
FACE_OFFSETS = (
    (BlockFace.TOP, (0, 0)),
    (BlockFace.SOUTH, (0, 6)),
    (BlockFace.EAST, (12, 6)),
)


def build_face(texture: Image.Image, face: BlockFace) -> Image.Image:
    """Transform a texture into the sprite of one face."""
    if face is BlockFace.TOP:
        return transform_top(texture)
    return transform_side(texture, east=face is BlockFace.EAST)


def load_face(cache: AssetCache, face: BlockFace, texture_name: str) -> Image.Image:
    """Get the full-brightness sprite of a face, building it on a miss."""
    def create() -> Image.Image:
        texture = cache.load_texture(texture_name)
        color = texture_tint(texture_name)
        if color is not None:
            texture = tint(texture, color)
        return build_face(texture, face)

    return cache.faces.get_or_create(FaceKey(face, texture_name), create)


def render_cube(cache: AssetCache, block_name: str, light: LightData) -> Optional[Image.Image]:
    """Get the 24x24 sprite of a block under the given light.

    Args:
        cache: Shared asset cache
        block_name: Block name, with or without namespace
        light: Light levels reaching each face

    Returns:
        The cube sprite, or None for air
    """
    plan = plan_faces(block_name)
    if plan is None:
        return None

    def create() -> Image.Image:
        img = empty_sprite()
        for face, (x, y) in FACE_OFFSETS:
            sprite = load_face(cache, face, plan.texture(face))
            overlay(img, darken(sprite, light.factor(face)), x, y)
        return img

    return cache.cubes.get_or_create(CubeKey(light, normalize_name(block_name)), create)
