"""Image primitives for isometric block sprites.

All images are RGBA. A 16x16 block texture becomes:
- a 24x12 top face (rotated 45 degrees, Y squashed by half)
- a 12x18 side face (sheared down by half a pixel per column)

Three faces composite into a 24x24 cube sprite.
"""

import math
from typing import Tuple

import numpy as np
from PIL import Image, ImageChops, ImageEnhance

TEXTURE_SIZE = 16
SPRITE_SIZE = 24
TOP_FACE_SIZE = (24, 12)
SIDE_FACE_SIZE = (12, 18)

# Side faces are shaded before lighting is applied
SOUTH_SHADE = 0.9
EAST_SHADE = 0.8

MISSING_COLORS = ((255, 0, 255, 255), (0, 0, 0, 255))


def _affine(matrix: np.ndarray) -> Tuple[float, ...]:
    """Flatten a 3x3 output->input matrix into Pillow's AFFINE data."""
    return tuple(float(v) for v in np.asarray(matrix)[:2, :].ravel())


def darken(img: Image.Image, factor: float) -> Image.Image:
    """Scale RGB channels by factor (0.0 = black, 1.0 = unchanged), keeping alpha."""
    if factor == 1.0:
        return img
    alpha = img.getchannel("A")
    result = ImageEnhance.Brightness(img).enhance(factor)
    result.putalpha(alpha)
    return result


def tint(img: Image.Image, color: Tuple[int, int, int]) -> Image.Image:
    """Multiply RGB channels by an RGB color, keeping alpha."""
    overlay_color = Image.new("RGBA", img.size, tuple(color) + (255,))
    return ImageChops.multiply(img, overlay_color)


def transform_top(texture: Image.Image) -> Image.Image:
    """Rotate a texture 45 degrees and halve its height.

    Returns:
        24x12 top face
    """
    # 17x17 rotated by 45 degrees is about 24 pixels across
    img = texture.resize((17, 17), Image.Resampling.BILINEAR)

    ratio = math.cos(math.pi / 4)
    transform = np.identity(3)
    transform = transform @ np.array([[1, 0, 8.5], [0, 1, 8.5], [0, 0, 1]])
    transform = transform @ np.array([[ratio, ratio, 0], [-ratio, ratio, 0], [0, 0, 1]])
    transform = transform @ np.array([[1, 0, -12], [0, 1, -12], [0, 0, 1]])
    transform = transform @ np.array([[1, 0, 0], [0, 2, 0], [0, 0, 1]])

    return img.transform(TOP_FACE_SIZE, Image.Transform.AFFINE, _affine(transform))


def transform_side(texture: Image.Image, east: bool = False) -> Image.Image:
    """Shear a texture into a side face.

    The south (left) face is shaded by SOUTH_SHADE. The east (right) face is
    shaded by EAST_SHADE and mirrored.

    Returns:
        12x18 side face
    """
    img = texture.resize((12, 12), Image.Resampling.BILINEAR)

    transform = np.array([[1, 0, 0], [-0.5, 1, 0], [0, 0, 1]])
    img = img.transform(SIDE_FACE_SIZE, Image.Transform.AFFINE, _affine(transform))

    if east:
        return darken(img, EAST_SHADE).transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    return darken(img, SOUTH_SHADE)


def overlay(dest: Image.Image, src: Image.Image, x: int, y: int) -> None:
    """Alpha-composite src onto dest at (x, y), in place.

    Parts of src falling outside dest are clipped.
    """
    source_x = max(0, -x)
    source_y = max(0, -y)
    if source_x >= src.width or source_y >= src.height:
        return
    if x >= dest.width or y >= dest.height:
        return
    dest.alpha_composite(src, dest=(max(0, x), max(0, y)), source=(source_x, source_y))


def missing_texture() -> Image.Image:
    """Magenta and black checkerboard used when a texture can't be found."""
    ys, xs = np.mgrid[0:TEXTURE_SIZE, 0:TEXTURE_SIZE]
    checker = ((xs // 8 + ys // 8) % 2).astype(np.uint8)
    pixels = np.array(MISSING_COLORS, dtype=np.uint8)[checker]
    return Image.fromarray(pixels)


def empty_sprite(width: int = SPRITE_SIZE, height: int = SPRITE_SIZE) -> Image.Image:
    """Fully transparent image."""
    return Image.new("RGBA", (width, height), (0, 0, 0, 0))
