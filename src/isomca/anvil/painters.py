"""Painter's-order traversal over block and chunk boxes.

The isometric projection draws a block at screen depth (x + z, y): larger
x + z is nearer to the viewer and larger y is higher. Drawing in ascending
order of those keys lets later sprites correctly cover earlier ones without
a depth buffer.

Both iterators hold nothing but their bounds and the current position.
Creating a new iterator from the same bounds yields the same sequence.
"""

from typing import Optional

from .coords import WorldBlockCoord, WorldChunkCoord


class BlockPaintersRange:
    """Iterate an inclusive block box bottom-to-top, back-to-front.

    Order: y ascending, then diagonal x + z ascending, then x ascending.
    """

    def __init__(self, a: WorldBlockCoord, b: WorldBlockCoord):
        self.min = WorldBlockCoord(min(a.x, b.x), min(a.y, b.y), min(a.z, b.z))
        self.max = WorldBlockCoord(max(a.x, b.x), max(a.y, b.y), max(a.z, b.z))
        self._y = self.min.y
        self._sum = self.min.x + self.min.z
        self._x = self._first_x(self._sum)

    def _first_x(self, diagonal: int) -> int:
        return max(self.min.x, diagonal - self.max.z)

    def _last_x(self, diagonal: int) -> int:
        return min(self.max.x, diagonal - self.min.z)

    def _advance(self) -> None:
        self._x += 1
        if self._x > self._last_x(self._sum):
            self._sum += 1
            if self._sum > self.max.x + self.max.z:
                self._y += 1
                self._sum = self.min.x + self.min.z
            self._x = self._first_x(self._sum)

    def __iter__(self) -> "BlockPaintersRange":
        return self

    def __next__(self) -> WorldBlockCoord:
        if self._y > self.max.y:
            raise StopIteration
        coord = WorldBlockCoord(self._x, self._y, self._sum - self._x)
        self._advance()
        return coord

    @property
    def total(self) -> int:
        """Number of coordinates in the whole box."""
        return (
            (self.max.x - self.min.x + 1)
            * (self.max.y - self.min.y + 1)
            * (self.max.z - self.min.z + 1)
        )


class ChunkPaintersRange:
    """Iterate an inclusive chunk box along back-to-front diagonals.

    Diagonal d holds every chunk with (cx - min.cx) + (cz - min.cz) == d.
    Each diagonal is walked with cx ascending and cz descending. While d is
    smaller than the number of cz rows the diagonal starts at min.cx; past
    that point its start moves right by one per diagonal. The end of each
    diagonal is clipped by max.cx and min.cz.
    """

    def __init__(self, a: WorldChunkCoord, b: WorldChunkCoord):
        self.min = WorldChunkCoord(min(a.cx, b.cx), min(a.cz, b.cz))
        self.max = WorldChunkCoord(max(a.cx, b.cx), max(a.cz, b.cz))
        self._width = self.max.cx - self.min.cx + 1
        self._height = self.max.cz - self.min.cz + 1
        self._diagonal = 0
        self._current: Optional[WorldChunkCoord] = self._diagonal_start(0)

    def _diagonal_start(self, diagonal: int) -> Optional[WorldChunkCoord]:
        if diagonal > (self._width - 1) + (self._height - 1):
            return None
        dx = max(0, diagonal - (self._height - 1))
        return WorldChunkCoord(self.min.cx + dx, self.min.cz + diagonal - dx)

    def _advance(self) -> None:
        current = self._current
        cx = current.cx + 1
        cz = current.cz - 1
        if cx > self.max.cx or cz < self.min.cz:
            self._diagonal += 1
            self._current = self._diagonal_start(self._diagonal)
        else:
            self._current = WorldChunkCoord(cx, cz)

    def __iter__(self) -> "ChunkPaintersRange":
        return self

    def __next__(self) -> WorldChunkCoord:
        if self._current is None:
            raise StopIteration
        coord = self._current
        self._advance()
        return coord

    @property
    def total(self) -> int:
        """Number of coordinates in the whole box."""
        return self._width * self._height
