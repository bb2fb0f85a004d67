"""Tests for in-memory training sets and rating file loaders."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from src.recommender.dataset import (
    TrainingSet,
    load_data_from_csv,
    load_data_from_netflix_style,
)
from src.recommender.ids import NOT_FOUND


@pytest.fixture
def small_set() -> TrainingSet:
    """Fixture providing four ratings over three users and two items."""
    return TrainingSet(
        ["u1", "u1", "u2", "u3"],
        ["i1", "i2", "i1", "i2"],
        [5, 3, 4, 2],
    )


def test_counts_and_statistics(small_set: TrainingSet) -> None:
    """Test the size, count and aggregate accessors."""
    assert len(small_set) == 4
    assert small_set.user_count() == 3
    assert small_set.item_count() == 2
    assert small_set.mean() == pytest.approx(3.5)
    assert small_set.global_mean == pytest.approx(3.5)
    assert small_set.stddev() == pytest.approx(np.sqrt(1.25))
    assert small_set.min() == 2.0
    assert small_set.max() == 5.0


def test_get_dense_follows_native_order(small_set: TrainingSet) -> None:
    """Test that dense rows keep input order and first-encounter ids."""
    rows = [small_set.get_dense(i) for i in range(len(small_set))]

    assert rows == [(0, 0, 5.0), (0, 1, 3.0), (1, 0, 4.0), (2, 1, 2.0)]
    assert small_set.get(3) == ("u3", "i2", 2.0)


def test_id_indexes(small_set: TrainingSet) -> None:
    """Test that the user and item indexes cover the observed ids."""
    assert small_set.user_index.to_dense_id("u2") == 1
    assert small_set.item_index.to_dense_id("i2") == 1
    assert small_set.user_index.to_dense_id("u9") == NOT_FOUND


def test_dense_item_ratings(small_set: TrainingSet) -> None:
    """Test grouping ratings per dense item and per dense user."""
    per_item = small_set.dense_item_ratings
    per_user = small_set.dense_user_ratings

    assert [r.tolist() for r in per_item] == [[5.0, 4.0], [3.0, 2.0]]
    assert [r.tolist() for r in per_user] == [[5.0, 3.0], [4.0], [2.0]]


def test_length_mismatch_raises() -> None:
    """Test that parallel sequences must have equal length."""
    with pytest.raises(ValueError, match="same length"):
        TrainingSet([1, 2], [1], [3.0, 4.0])


def test_non_numeric_ratings_raise() -> None:
    """Test that ratings must be numeric."""
    with pytest.raises(ValueError):
        TrainingSet([1], [1], ["good"])


def test_empty_set_statistics() -> None:
    """Test that an empty set has no ids and nan statistics."""
    empty = TrainingSet([], [], [])

    assert len(empty) == 0
    assert empty.user_count() == 0
    assert np.isnan(empty.mean())
    assert empty.dense_item_ratings == []


def test_subset_reindexes_rows(small_set: TrainingSet) -> None:
    """Test that a subset is a new set with its own dense ids."""
    sub = small_set.subset([2, 3])

    assert len(sub) == 2
    assert sub.user_count() == 2
    assert sub.user_index.to_dense_id("u2") == 0
    assert sub.user_index.to_dense_id("u1") == NOT_FOUND
    assert sub.mean() == pytest.approx(3.0)


def test_to_csr(small_set: TrainingSet) -> None:
    """Test the sparse user x item matrix."""
    matrix = small_set.to_csr()

    assert matrix.shape == (3, 2)
    assert matrix.nnz == 4
    assert matrix[0, 0] == 5.0
    assert matrix[2, 1] == 2.0


def test_from_dataframe() -> None:
    """Test building a set from a DataFrame with custom column names."""
    df = pd.DataFrame({"uid": [1, 2], "iid": [7, 7], "score": [4.5, 2.5]})

    data = TrainingSet.from_dataframe(df, "uid", "iid", "score")

    assert len(data) == 2
    assert data.item_count() == 1
    assert data.get(0) == (1, 7, 4.5)
    assert isinstance(data.get(0)[0], int)


def test_from_dataframe_missing_columns() -> None:
    """Test that required columns are validated."""
    df = pd.DataFrame({"user_id": [1], "rating": [3.0]})

    with pytest.raises(ValueError, match="missing required columns"):
        TrainingSet.from_dataframe(df)


def test_load_data_from_csv(tmp_path: Path) -> None:
    """Test loading a tab-separated file without header."""
    path = tmp_path / "u.data"
    path.write_text("196\t242\t3\t881250949\n186\t302\t3\t891717742\n196\t377\t1\t878887116\n")

    data = load_data_from_csv(path, sep="\t")

    assert len(data) == 3
    assert data.user_count() == 2
    assert data.item_count() == 3
    assert data.get(2) == (196, 377, 1.0)


def test_load_data_from_csv_multichar_separator_and_header(tmp_path: Path) -> None:
    """Test a '::'-separated file whose first line is a header."""
    path = tmp_path / "ratings.dat"
    path.write_text("user::item::rating\n1::10::5\n2::10::4\n")

    data = load_data_from_csv(path, sep="::", header=True)

    assert len(data) == 2
    assert data.mean() == pytest.approx(4.5)


def test_load_data_from_csv_missing_file(tmp_path: Path) -> None:
    """Test that a missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_data_from_csv(tmp_path / "nope.csv")


def test_load_data_from_csv_empty_file(tmp_path: Path) -> None:
    """Test that an empty file raises ValueError."""
    path = tmp_path / "empty.csv"
    path.write_text("")

    with pytest.raises(ValueError, match="empty"):
        load_data_from_csv(path)


def test_load_data_from_csv_too_few_columns(tmp_path: Path) -> None:
    """Test that files without a rating column are rejected."""
    path = tmp_path / "pairs.csv"
    path.write_text("1,2\n3,4\n")

    with pytest.raises(ValueError, match="at least 3 columns"):
        load_data_from_csv(path)


def test_load_data_from_csv_blank_rating(tmp_path: Path) -> None:
    """Test that a blank rating field is rejected instead of loaded as NaN."""
    path = tmp_path / "ratings.csv"
    path.write_text("1,10,4\n2,10,\n2,11,5\n")

    with pytest.raises(ValueError, match="data row 2"):
        load_data_from_csv(path)


@pytest.mark.parametrize(
    "content",
    [
        "1,10,4\n,10,3\n",
        "user,item,rating\n1,10,4\n2,,3\n",
    ],
)
def test_load_data_from_csv_blank_ids(tmp_path: Path, content: str) -> None:
    """Test that blank user or item fields are rejected."""
    path = tmp_path / "ratings.csv"
    path.write_text(content)

    with pytest.raises(ValueError, match="Missing user, item or rating"):
        load_data_from_csv(path, header=content.startswith("user"))


def test_load_data_from_netflix_style(tmp_path: Path) -> None:
    """Test parsing item blocks of user,rating,date lines."""
    path = tmp_path / "training_set.txt"
    path.write_text(
        "1:\n1488844,3,2005-09-06\n822109,5,2005-05-13\n\n2:\n1488844,4,2005-10-01\n"
    )

    data = load_data_from_netflix_style(path)

    assert len(data) == 3
    assert data.user_count() == 2
    assert data.item_count() == 2
    assert data.get(2) == (1488844, 2, 4.0)


def test_load_data_from_netflix_style_malformed(tmp_path: Path) -> None:
    """Test that a rating line before any item header is rejected."""
    path = tmp_path / "bad.txt"
    path.write_text("1488844,3,2005-09-06\n")

    with pytest.raises(ValueError, match="Malformed line 1"):
        load_data_from_netflix_style(path)
