"""Block name classification.

Block names are namespaced ("minecraft:stone"). Only full cubes are drawn;
blocks whose model isn't a cube (plants, rails, torches, ...) are treated as
complex geometry and skipped by the renderer.
"""

NAMESPACE = "minecraft:"

AIR_BLOCKS = frozenset({
    "minecraft:air",
    "minecraft:cave_air",
    "minecraft:void_air",
})

# Substrings marking non-cube models, with substrings that cancel the match
COMPLEX_GEOMETRY_MARKERS = (
    ("litter", ()),
    ("sapling", ()),
    ("flower", ()),
    ("grass", ("block",)),
    ("fern", ()),
    ("dead_bush", ()),
    ("seagrass", ()),
    ("kelp", ()),
    ("vine", ()),
    ("lily_pad", ()),
    ("torch", ()),
    ("fire", ()),
    ("redstone_wire", ()),
    ("rail", ()),
    ("ladder", ()),
    ("lever", ()),
    ("button", ()),
    ("pressure_plate", ()),
    ("tripwire", ()),
    ("string", ()),
    ("carpet", ("moss",)),
    ("fence", ("gate",)),
    ("wall", ("sign",)),
    ("bars", ()),
    ("chain", ()),
    ("lantern", ()),
    ("candle", ()),
    ("rod", ()),
    ("banner", ()),
    ("sign", ()),
    ("head", ()),
    ("skull", ()),
    ("dripstone", ()),
    ("pointed", ()),
    ("amethyst_cluster", ()),
    ("amethyst_bud", ()),
)


def strip_namespace(name: str) -> str:
    """Remove the "minecraft:" prefix if present."""
    if name.startswith(NAMESPACE):
        return name[len(NAMESPACE):]
    return name


def is_air_block(name: str) -> bool:
    """Check if a block name is one of the air variants."""
    return name in AIR_BLOCKS or NAMESPACE + name in AIR_BLOCKS


def is_complex_geometry(name: str) -> bool:
    """Check if a block has a non-cube model."""
    for marker, exclusions in COMPLEX_GEOMETRY_MARKERS:
        if marker in name and not any(exclusion in name for exclusion in exclusions):
            return True
    return False
