"""isomca: isometric renderer for Minecraft Anvil worlds."""

__version__ = "0.1.0"
