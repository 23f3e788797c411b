import pytest

from wavecollapse.bitmatrix import BitMatrix
from wavecollapse.bitset import BitSet


def _bits(size, *bits):
    res = BitSet(size)
    for b in bits:
        res.set_bit(b)
    return res


def test_new_matrix_is_empty():
    m = BitMatrix(4, 3)
    assert m.width == 4
    assert m.height == 3
    assert all(row.is_empty() for row in m.rows)
    assert all(row.size == 4 for row in m.rows)


def test_negative_dimensions_rejected():
    with pytest.raises(ValueError):
        BitMatrix(-1, 2)


def test_set_and_get_bit():
    m = BitMatrix(3, 3)
    m.set_bit(2, 1)
    assert m.get_bit(2, 1)
    assert not m.get_bit(1, 2)
    m.set_bit(2, 1, False)
    assert not m.get_bit(2, 1)


def test_out_of_range_rows_are_ignored():
    m = BitMatrix(3, 2)
    m.set_bit(0, 5)
    assert not m.get_bit(0, 5)
    assert not m.get_bit(0, -1)
    assert all(row.is_empty() for row in m.rows)


def test_copy_is_independent():
    m = BitMatrix(3, 3)
    m.set_bit(1, 1)
    c = m.copy()
    assert c == m
    c.set_bit(0, 0)
    assert not m.get_bit(0, 0)
    assert c != m


def test_transpose_swaps_coordinates():
    m = BitMatrix(5, 3)
    m.set_bit(4, 0)
    m.set_bit(1, 2)
    t = m.transpose()
    assert (t.width, t.height) == (3, 5)
    assert t.get_bit(0, 4)
    assert t.get_bit(2, 1)
    assert not t.get_bit(4, 0)


def test_double_transpose_round_trips():
    m = BitMatrix(4, 6)
    for x, y in [(0, 0), (3, 5), (2, 1), (1, 4)]:
        m.set_bit(x, y)
    assert m.transpose().transpose() == m


def test_transform_unions_selected_rows():
    m = BitMatrix(4, 4)
    m.set_bit(2, 0)
    m.set_bit(3, 1)
    m.set_bit(0, 2)
    result = m.transform(_bits(4, 0, 1))
    assert result == _bits(4, 2, 3)


def test_transform_of_none_is_empty():
    m = BitMatrix(4, 4)
    m.set_bit(1, 1)
    result = m.transform(None)
    assert result.is_empty()
    assert result.size == 4


def test_complete_merges_overlapping_rows():
    m = BitMatrix(4, 3)
    m.set_bit(0, 0)
    m.set_bit(1, 0)
    m.set_bit(1, 1)
    m.set_bit(2, 1)
    m.set_bit(3, 2)
    m.complete()
    assert m.row(1).is_superset_of(_bits(4, 0, 1, 2))
    assert m.row(2) == _bits(4, 3)


def test_format_bits_layout():
    m = BitMatrix(2, 1)
    m.set_bit(0, 0)
    assert m.format_bits() == "(\n\t(1, 0, ),\n)"


def test_format_bits_contains_each_row():
    m = BitMatrix(3, 2)
    m.set_bit(2, 1)
    text = m.format_bits()
    for row in m.rows:
        assert row.format_bits() in text
    assert text.startswith("(") and text.endswith("\n)")


def test_longest_path_non_square():
    assert BitMatrix(2, 3).longest_path() == -1


def test_longest_path_identity_never_fills():
    m = BitMatrix(3, 3)
    for i in range(3):
        m.set_bit(i, i)
    assert m.longest_path() == -1


def test_longest_path_full_matrix():
    m = BitMatrix(3, 3)
    for x in range(3):
        for y in range(3):
            m.set_bit(x, y)
    assert m.longest_path() == 1


def test_row_returns_live_row():
    m = BitMatrix(3, 2)
    m.row(1).set_bit(2)
    assert m.get_bit(2, 1)


def test_row_out_of_range():
    with pytest.raises(IndexError):
        BitMatrix(3, 2).row(2)