"""Texture selection for the three visible faces of a cube.

Every block name maps to one naming strategy. Most blocks reuse their own
name for every face; the exceptions live in FACE_RULES and SUFFIX_RULES so
the renderer never branches on block types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from ..anvil.blocks import is_air_block, strip_namespace

WAXED_PREFIX = "waxed_"


class BlockFace(Enum):
    """Faces visible from the isometric camera."""
    TOP = "top"
    EAST = "east"
    SOUTH = "south"


class FaceNaming(Enum):
    """How a block name turns into texture names."""
    DIRECT = "direct"  # {name} on every face
    TOP_SIDE = "top_side"  # {name}_top on top, {name}_side on the sides
    LOG = "log"  # {name}_top on top, {name} on the sides
    OVERRIDE = "override"  # fixed texture names


@dataclass(frozen=True)
class FaceRule:
    """A naming strategy plus the fixed names OVERRIDE needs."""
    naming: FaceNaming
    top: Optional[str] = None
    side: Optional[str] = None

    def texture(self, name: str, face: BlockFace) -> str:
        """Get the texture name for one face of block `name`."""
        is_top = face is BlockFace.TOP
        if self.naming is FaceNaming.TOP_SIDE:
            return f"{name}_top" if is_top else f"{name}_side"
        if self.naming is FaceNaming.LOG:
            return f"{name}_top" if is_top else name
        if self.naming is FaceNaming.OVERRIDE:
            texture = self.top if is_top else self.side
            return texture if texture is not None else name
        return name


def override(top: str, side: Optional[str] = None) -> FaceRule:
    """Rule using fixed textures; side defaults to top."""
    return FaceRule(FaceNaming.OVERRIDE, top, side if side is not None else top)


DIRECT = FaceRule(FaceNaming.DIRECT)
TOP_SIDE = FaceRule(FaceNaming.TOP_SIDE)
LOG = FaceRule(FaceNaming.LOG)

FACE_RULES: Dict[str, FaceRule] = {
    # Fluids and animated textures
    "lava": override("lava_still"),
    "water": override("water_still"),
    # Distinct top and side textures
    "grass_block": TOP_SIDE,
    "dirt_path": TOP_SIDE,
    "bell": TOP_SIDE,
    "cauldron": TOP_SIDE,
    "stonecutter": TOP_SIDE,
    "composter": TOP_SIDE,
    "loom": TOP_SIDE,
    "hay_block": TOP_SIDE,
    "pumpkin": TOP_SIDE,
    "bee_nest": TOP_SIDE,
    "sculk_catalyst": TOP_SIDE,
    "sculk_sensor": TOP_SIDE,
    "sculk_shrieker": TOP_SIDE,
    "barrel": TOP_SIDE,
    "bone_block": TOP_SIDE,
    # Fixed texture names
    "snow_block": override("snow"),
    "stripped_oak_wood": override("stripped_oak_log_top", "stripped_oak_log"),
    "vault": override("vault_top", "vault_front_off"),
    "hopper": override("hopper_top", "hopper_outside"),
    "dispenser": override("dispenser_front"),
    "glass_pane": override("glass"),
    "oak_door": override("oak_door_top"),
    "oxidized_copper_door": override("oxidized_copper_door_top"),
    "mushroom_stem": override("mushroom_block_inside", "mushroom_stem"),
    # Tall plants show one half
    "lilac": override("lilac_top"),
    "peony": override("peony_top"),
    "rose_bush": override("rose_bush_bottom"),
    "tall_seagrass": override("tall_seagrass_bottom"),
    # Crops at full growth
    "wheat": override("wheat_stage7"),
    "carrots": override("carrots_stage3"),
    "beetroots": override("beetroots_stage3"),
    "potatoes": override("potatoes_stage3"),
    # Stairs, slabs and other shapes drawn as a cube of their material
    "cobblestone_stairs": override("cobblestone"),
    "cobblestone_wall": override("cobblestone"),
    "oak_stairs": override("oak_planks"),
    "oak_slab": override("oak_planks"),
    "oak_fence": override("oak_planks"),
    "oak_fence_gate": override("oak_planks"),
    "oak_pressure_plate": override("oak_planks"),
    "oak_button": override("oak_planks"),
    "stone_brick_stairs": override("stone_bricks"),
    "stone_brick_slab": override("stone_bricks"),
    "mossy_stone_brick_stairs": override("mossy_stone_bricks"),
    "mossy_stone_brick_slab": override("mossy_stone_bricks"),
    "oxidized_cut_copper_stairs": override("oxidized_cut_copper"),
    "oxidized_cut_copper_slab": override("oxidized_cut_copper"),
}

# Checked in order when a name has no entry in FACE_RULES
SUFFIX_RULES: Tuple[Tuple[str, FaceNaming], ...] = (
    ("_log", FaceNaming.LOG),
    ("_stem", FaceNaming.LOG),
)

# Bark blocks use the side texture of their log on every face
BARK_SUFFIXES: Tuple[Tuple[str, str], ...] = (
    ("_wood", "_log"),
    ("_hyphae", "_stem"),
)

# Colormap-tinted textures get a fixed color
TEXTURE_TINTS: Dict[str, Tuple[int, int, int]] = {
    "grass_block_top": (124, 189, 107),
    "water_still": (63, 118, 228),
}
LEAVES_TINT = (100, 180, 80)


@dataclass(frozen=True)
class FacePlan:
    """Texture names for the three visible faces."""
    top: str
    south: str
    east: str

    def texture(self, face: BlockFace) -> str:
        if face is BlockFace.TOP:
            return self.top
        if face is BlockFace.SOUTH:
            return self.south
        return self.east


def normalize_name(block_name: str) -> str:
    """Strip the namespace and the waxed_ prefix."""
    name = strip_namespace(block_name)
    if name.startswith(WAXED_PREFIX):
        name = name[len(WAXED_PREFIX):]
    return name


def face_rule(name: str) -> FaceRule:
    """Find the rule for a normalized block name."""
    rule = FACE_RULES.get(name)
    if rule is not None:
        return rule
    for suffix, naming in SUFFIX_RULES:
        if name.endswith(suffix):
            return FaceRule(naming)
    for suffix, log_suffix in BARK_SUFFIXES:
        if name.endswith(suffix):
            return override(name[: -len(suffix)] + log_suffix)
    return DIRECT


def plan_faces(block_name: str) -> Optional[FacePlan]:
    """Translate a block name into its three face textures.

    Returns:
        FacePlan, or None for air
    """
    if is_air_block(block_name):
        return None
    name = normalize_name(block_name)
    rule = face_rule(name)
    return FacePlan(
        top=rule.texture(name, BlockFace.TOP),
        south=rule.texture(name, BlockFace.SOUTH),
        east=rule.texture(name, BlockFace.EAST),
    )


def texture_tint(texture: str) -> Optional[Tuple[int, int, int]]:
    """Get the fixed tint color for a texture, if it has one."""
    color = TEXTURE_TINTS.get(texture)
    if color is None and texture.endswith("_leaves"):
        return LEAVES_TINT
    return color
