#!/usr/bin/env python3
"""
isomca - Render an isometric image of a Minecraft world.

Usage:
    python3 main.py render <region dir> <assets dir> --min-cx 0 --min-cz 0 --max-cx 1 --max-cz 1
    python3 main.py info <region dir>
    python3 main.py --help

Runs the same CLI as the installed `isomca` command, straight from a checkout.
"""

import sys
from pathlib import Path

# Add src to path so we can run without installing
sys.path.insert(0, str(Path(__file__).parent / "src"))

from isomca.cli import app  # noqa: E402


if __name__ == "__main__":
    app()
