"""Square or rectangular bit matrices built from rows of bit sets."""

from __future__ import annotations

from typing import List, Optional

from .bitset import BitSet


class BitMatrix:
    """A matrix of bits stored as ``height`` rows of ``width``-bit sets.

    A bit at ``(x, y)`` lives in row ``y`` at position ``x``. Read as a
    relation, row ``y`` lists every ``x`` that ``y`` maps to.
    """

    __hash__ = None  # mutable

    def __init__(self, width: int = 0, height: int = 0) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"matrix dimensions must not be negative, got {width}x{height}")
        self.width = width
        self.height = height
        self.rows: List[BitSet] = [BitSet(width) for _ in range(height)]

    def copy(self) -> BitMatrix:
        res = BitMatrix.__new__(BitMatrix)
        res.width = self.width
        res.height = self.height
        res.rows = [row.copy() for row in self.rows]
        return res

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitMatrix):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.rows == other.rows
        )

    def get_bit(self, x: int, y: int) -> bool:
        """Return the bit at ``(x, y)``; positions outside the matrix read as False."""
        if not 0 <= y < self.height:
            return False
        return self.rows[y].get_bit(x)

    def set_bit(self, x: int, y: int, value: bool = True) -> None:
        """Set or clear the bit at ``(x, y)``; positions outside are ignored."""
        if not 0 <= y < self.height:
            return
        self.rows[y].set_bit(x, value)

    def transpose(self) -> BitMatrix:
        res = BitMatrix(self.height, self.width)
        for y, row in enumerate(self.rows):
            for x in row:
                res.set_bit(y, x, True)
        return res

    def transform(self, input_set: Optional[BitSet]) -> BitSet:
        """Return the union of the rows selected by the bits of ``input_set``."""
        res = BitSet(self.width)
        if input_set is None:
            return res
        for y in input_set:
            if 0 <= y < self.height:
                res.union_in_place(self.rows[y])
        return res

    def complete(self) -> None:
        """Merge every row into each other row it overlaps with."""
        for i, ri in enumerate(self.rows):
            for j, rj in enumerate(self.rows):
                if i != j and ri.intersects_with(rj):
                    rj.union_in_place(ri)

    def format_bits(self) -> str:
        body = "".join(f"\n\t{row.format_bits()}," for row in self.rows)
        return f"({body}\n)"

    def longest_path(self) -> int:
        """Return how many steps it takes, at most, to reach every column.

        Starting from each single column, the matrix is applied repeatedly
        until the whole set is reached. Returns -1 if the matrix is not
        square or no start reaches the full set.
        """
        if self.width != self.height:
            return -1
        all_set = BitSet(self.width, True)
        longest = -1
        for start in range(self.width):
            cur = BitSet(self.width)
            cur.set_bit(start, True)
            for path_len in range(1, self.width):
                cur = self.transform(cur)
                if cur == all_set:
                    longest = max(longest, path_len)
                    break
        return longest

    def row(self, index: int) -> BitSet:
        """Return row ``index`` itself (not a copy)."""
        if not 0 <= index < len(self.rows):
            raise IndexError(f"row index {index} out of range for {len(self.rows)} rows")
        return self.rows[index]

    def __repr__(self) -> str:
        return f"BitMatrix(width={self.width}, height={self.height})"