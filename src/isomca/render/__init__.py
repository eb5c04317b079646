"""Isometric rendering of decoded chunks."""

from .faces import BlockFace, FaceNaming, FacePlan, FaceRule, plan_faces, texture_tint
from .light import LightData, light_factor
from .textures import AssetCache, CubeKey, FaceKey, SpriteCache
from .cube import load_face, render_cube
from .renderer import (
    ChunkRender,
    chunk_image_size,
    render_chunk,
    render_world,
    screen_position,
    world_image_size,
)
from .pipeline import RenderPipeline, RenderProgress, ProgressCallback, render_region

__all__ = [
    # Faces
    "BlockFace",
    "FaceNaming",
    "FacePlan",
    "FaceRule",
    "plan_faces",
    "texture_tint",
    # Light
    "LightData",
    "light_factor",
    # Caches
    "AssetCache",
    "CubeKey",
    "FaceKey",
    "SpriteCache",
    # Sprites
    "load_face",
    "render_cube",
    # Renderer
    "ChunkRender",
    "chunk_image_size",
    "render_chunk",
    "render_world",
    "screen_position",
    "world_image_size",
    # Pipeline
    "RenderPipeline",
    "RenderProgress",
    "ProgressCallback",
    "render_region",
]
