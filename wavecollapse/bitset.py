"""Fixed-size bit set used to store the domain of a cell."""

from __future__ import annotations

from typing import Iterator, List, Optional

BITS_PER_INT = 64
STATIC_ELEMS = 2
STATIC_BITS = BITS_PER_INT * STATIC_ELEMS
MAX_INT_VAL = 9223372036854775807
DEFAULT_COUNT_LIMIT = 2147483647

ONLY_BIT_MORE_BITS_SET = -2
ONLY_BIT_NO_BITS_SET = -1

_WORD_MASK = (1 << BITS_PER_INT) - 1


def _low_bits(n: int) -> int:
    return (1 << n) - 1


def _is_power_of_two(x: int) -> bool:
    return x != 0 and (x & (x - 1)) == 0


def _to_signed(word: int) -> int:
    return word - (1 << BITS_PER_INT) if word >> (BITS_PER_INT - 1) else word


class BitSet:
    """A set of small non-negative integers below a fixed size.

    Bits are stored in 64-bit words. The first two words always exist,
    further words are allocated as the size requires.
    """

    ONLY_BIT_MORE_BITS_SET = ONLY_BIT_MORE_BITS_SET
    ONLY_BIT_NO_BITS_SET = ONLY_BIT_NO_BITS_SET

    __hash__ = None  # mutable

    def __init__(self, size: int = 0, fill: bool = False) -> None:
        if size < 0:
            raise ValueError(f"bit set size must not be negative, got {size}")
        self._size = size
        total = -(-size // BITS_PER_INT)
        self._words: List[int] = [0] * max(STATIC_ELEMS, total)
        if fill:
            self.set_all()

    @property
    def size(self) -> int:
        """Number of bits the set can hold."""
        return self._size

    def set_all(self) -> None:
        """Set every bit below the size."""
        full, rest = divmod(self._size, BITS_PER_INT)
        for i in range(full):
            self._words[i] = _WORD_MASK
        if rest:
            self._words[full] = _low_bits(rest)

    def copy(self) -> BitSet:
        res = BitSet.__new__(BitSet)
        res._size = self._size
        res._words = list(self._words)
        return res

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitSet):
            return NotImplemented
        return self._size == other._size and self._words == other._words

    def union_in_place(self, other: BitSet) -> None:
        for i, word in enumerate(other._words[: len(self._words)]):
            self._words[i] |= word

    def union(self, other: BitSet) -> BitSet:
        """Return a new set holding the bits of both; sized like the larger."""
        if other._size > self._size:
            return other.union(self)
        res = self.copy()
        res.union_in_place(other)
        return res

    def intersect_in_place(self, other: BitSet) -> None:
        theirs = other._words
        self._words = [
            word & theirs[i] if i < len(theirs) else 0
            for i, word in enumerate(self._words)
        ]

    def intersect(self, other: BitSet) -> BitSet:
        """Return a new set holding the common bits; sized like the smaller."""
        if other._size < self._size:
            return other.intersect(self)
        res = self.copy()
        res.intersect_in_place(other)
        return res

    def xor_in_place(self, other: BitSet) -> None:
        for i, word in enumerate(other._words[: len(self._words)]):
            self._words[i] ^= word

    def xor(self, other: BitSet) -> BitSet:
        res = self.copy()
        res.xor_in_place(other)
        return res

    def invert(self) -> BitSet:
        """Return the complement within the set's size."""
        res = BitSet(self._size, True)
        res.xor_in_place(self)
        return res

    def is_superset_of(self, subset: BitSet) -> bool:
        theirs = subset._words
        for i, word in enumerate(self._words):
            sub = theirs[i] if i < len(theirs) else 0
            if word & sub != sub:
                return False
        return True

    def get_bit(self, bit_num: int) -> bool:
        if not 0 <= bit_num < self._size:
            return False
        index, offset = divmod(bit_num, BITS_PER_INT)
        if index >= len(self._words):
            return False
        return bool(self._words[index] >> offset & 1)

    def set_bit(self, bit_num: int, value: bool = True) -> None:
        """Set or clear one bit; positions outside the size are ignored."""
        if not 0 <= bit_num < self._size:
            return
        index, offset = divmod(bit_num, BITS_PER_INT)
        if index >= len(self._words):
            return
        if value:
            self._words[index] |= 1 << offset
        else:
            self._words[index] &= ~(1 << offset) & _WORD_MASK

    def get_only_set_bit(self) -> int:
        """Return the single set bit, or one of the ONLY_BIT_* markers."""
        found: Optional[int] = None
        for index, word in enumerate(self._words):
            if word == 0:
                continue
            if found is not None or not _is_power_of_two(word):
                return ONLY_BIT_MORE_BITS_SET
            found = index
        if found is None:
            return ONLY_BIT_NO_BITS_SET
        return self._words[found].bit_length() - 1 + found * BITS_PER_INT

    def is_empty(self) -> bool:
        return not any(self._words)

    def intersects_with(self, other: BitSet) -> bool:
        return any(a & b for a, b in zip(self._words, other._words))

    def get_elem(self, n: int) -> int:
        """Return storage word ``n`` as a signed 64-bit value (0 if absent)."""
        if n < 0:
            raise IndexError(f"word index must not be negative, got {n}")
        if n >= len(self._words):
            return 0
        return _to_signed(self._words[n])

    def to_list(self) -> List[int]:
        return list(self)

    def __iter__(self) -> Iterator[int]:
        return (i for i in range(self._size) if self.get_bit(i))

    def count_set_bits(self, pass_if_more_than: int = DEFAULT_COUNT_LIMIT) -> int:
        """Count set bits, stopping early once the count passes the limit."""
        res = self._words[0].bit_count()
        if self._size > BITS_PER_INT and res <= pass_if_more_than:
            res += self._words[1].bit_count()
            if self._size > STATIC_BITS and res <= pass_if_more_than:
                for word in self._words[STATIC_ELEMS:]:
                    res += word.bit_count()
                    if res > pass_if_more_than:
                        break
        return res

    def format_bits(self) -> str:
        return "(" + "".join("1, " if self.get_bit(i) else "0, " for i in range(self._size)) + ")"

    def __repr__(self) -> str:
        return f"BitSet(size={self._size}, bits={self.to_list()})"