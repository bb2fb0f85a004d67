"""Tests for the identifier index."""

import pytest

from src.recommender.ids import NOT_FOUND, IdentifierIndex


def test_dense_ids_follow_first_encounter_order():
    """Test that dense ids are contiguous and assigned on first appearance."""
    index = IdentifierIndex([30, 10, 30, 20, 10])

    assert len(index) == 3
    assert index.to_dense_id(30) == 0
    assert index.to_dense_id(10) == 1
    assert index.to_dense_id(20) == 2
    assert list(index) == [30, 10, 20]


def test_mapping_is_a_bijection():
    """Test that dense and external ids round-trip over [0, N)."""
    ids = ["alice", "bob", "carol", "dave"]
    index = IdentifierIndex(ids)

    dense = [index.to_dense_id(x) for x in ids]
    assert sorted(dense) == list(range(len(ids)))
    assert [index.to_sparse_id(d) for d in dense] == ids


def test_unknown_ids_return_sentinel():
    """Test that unseen ids always map to NOT_FOUND."""
    index = IdentifierIndex([1, 2, 3])

    assert index.to_dense_id(4) == NOT_FOUND
    assert index.to_dense_id("1") == NOT_FOUND
    assert index.to_dense_id([1]) == NOT_FOUND
    assert 4 not in index
    assert 2 in index


def test_lookups_are_idempotent():
    """Test that repeated lookups give the same answer."""
    index = IdentifierIndex(["x", "y"])

    assert [index.to_dense_id("y") for _ in range(3)] == [1, 1, 1]
    assert [index.to_dense_id("z") for _ in range(3)] == [NOT_FOUND] * 3


def test_sentinel_is_never_a_valid_index():
    """Test that the sentinel lies outside every dense range."""
    index = IdentifierIndex(range(100))

    assert NOT_FOUND not in [index.to_dense_id(i) for i in range(100)]
    with pytest.raises(IndexError):
        index.to_sparse_id(NOT_FOUND)


def test_out_of_range_dense_id_raises():
    """Test that looking up a dense id outside [0, N) raises IndexError."""
    index = IdentifierIndex([5])

    with pytest.raises(IndexError, match="out of bounds"):
        index.to_sparse_id(1)


def test_empty_index():
    """Test an index built from no ids."""
    index = IdentifierIndex()

    assert len(index) == 0
    assert index.to_dense_id(0) == NOT_FOUND
