"""In-memory rating datasets.

This module provides the ``TrainingSet`` consumed by every estimator, plus
loaders that build one from delimited text files. A training set holds
``(user, item, rating)`` observations, indexes the external ids densely and
exposes the aggregate statistics the estimators need.
"""

import logging
from functools import cached_property
from pathlib import Path
from typing import Hashable, Iterable, List, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from scipy.sparse import csr_matrix

from src.recommender.ids import IdentifierIndex

# Configure module logger
logger = logging.getLogger(__name__)

DEFAULT_USER_COL = "user_id"
DEFAULT_ITEM_COL = "item_id"
DEFAULT_RATING_COL = "rating"


def _as_list(values: Iterable[Hashable]) -> List[Hashable]:
    # NumPy/pandas scalars become plain Python values
    if isinstance(values, (np.ndarray, pd.Series, pd.Index)):
        return values.tolist()
    return list(values)


class TrainingSet:
    """Sparse rating observations with dense user/item indexing.

    Observations keep the order in which they were given. Dense ids are
    assigned to users and items in order of first appearance, and iterating
    ``get_dense(i)`` for ``i in range(len(ts))`` visits the rows in that same
    native order.

    Attributes:
        user_index: IdentifierIndex over observed user ids.
        item_index: IdentifierIndex over observed item ids.
        global_mean: Mean of all ratings (``nan`` for an empty set).
    """

    def __init__(
        self,
        users: Iterable[Hashable],
        items: Iterable[Hashable],
        ratings: Iterable[float],
    ):
        """Build a training set from parallel sequences.

        Args:
            users: External user id of each observation.
            items: External item id of each observation.
            ratings: Rating of each observation.

        Raises:
            ValueError: If the sequences differ in length or ratings are
                not numeric.
        """
        self._users = _as_list(users)
        self._items = _as_list(items)
        self._ratings = np.asarray(_as_list(ratings), dtype=np.float64)

        if not (len(self._users) == len(self._items) == len(self._ratings)):
            raise ValueError(
                "users, items and ratings must have the same length, got "
                f"{len(self._users)}, {len(self._items)}, {len(self._ratings)}"
            )

        self.user_index = IdentifierIndex(self._users)
        self.item_index = IdentifierIndex(self._items)

        n = len(self._ratings)
        self._dense_users = np.fromiter(
            (self.user_index.to_dense_id(u) for u in self._users),
            dtype=np.int64,
            count=n,
        )
        self._dense_items = np.fromiter(
            (self.item_index.to_dense_id(i) for i in self._items),
            dtype=np.int64,
            count=n,
        )
        self.global_mean = self.mean()

        logger.debug(
            "Built training set",
            extra={
                "num_ratings": n,
                "num_users": self.user_count(),
                "num_items": self.item_count(),
            },
        )

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        user_col: str = DEFAULT_USER_COL,
        item_col: str = DEFAULT_ITEM_COL,
        rating_col: str = DEFAULT_RATING_COL,
    ) -> "TrainingSet":
        """Build a training set from a DataFrame, keeping its row order.

        Raises:
            ValueError: If the DataFrame is missing required columns.
        """
        required_columns = {user_col, item_col, rating_col}
        if not required_columns.issubset(df.columns):
            missing = required_columns - set(df.columns)
            raise ValueError(f"DataFrame missing required columns: {missing}")

        return cls(df[user_col], df[item_col], df[rating_col])

    def user_count(self) -> int:
        return len(self.user_index)

    def item_count(self) -> int:
        return len(self.item_index)

    def __len__(self) -> int:
        return len(self._ratings)

    def get_dense(self, i: int) -> Tuple[int, int, float]:
        """Return ``(dense_user, dense_item, rating)`` of the i-th row."""
        return (
            int(self._dense_users[i]),
            int(self._dense_items[i]),
            float(self._ratings[i]),
        )

    def get(self, i: int) -> Tuple[Hashable, Hashable, float]:
        """Return ``(user_id, item_id, rating)`` of the i-th row."""
        return self._users[i], self._items[i], float(self._ratings[i])

    @property
    def dense_users(self) -> np.ndarray:
        return self._dense_users

    @property
    def dense_items(self) -> np.ndarray:
        return self._dense_items

    @property
    def ratings(self) -> np.ndarray:
        return self._ratings

    def mean(self) -> float:
        if len(self) == 0:
            return float("nan")
        return float(np.mean(self._ratings))

    def stddev(self) -> float:
        """Population standard deviation (the maximum-likelihood estimate)."""
        if len(self) == 0:
            return float("nan")
        return float(np.std(self._ratings))

    def min(self) -> float:
        if len(self) == 0:
            return float("nan")
        return float(np.min(self._ratings))

    def max(self) -> float:
        if len(self) == 0:
            return float("nan")
        return float(np.max(self._ratings))

    @cached_property
    def dense_item_ratings(self) -> List[np.ndarray]:
        """Ratings of each dense item, in native row order."""
        return self._group_ratings(self._dense_items, self.item_count())

    @cached_property
    def dense_user_ratings(self) -> List[np.ndarray]:
        """Ratings given by each dense user, in native row order."""
        return self._group_ratings(self._dense_users, self.user_count())

    def _group_ratings(self, keys: np.ndarray, size: int) -> List[np.ndarray]:
        if size == 0:
            return []
        order = np.argsort(keys, kind="stable")
        counts = np.bincount(keys, minlength=size)
        return np.split(self._ratings[order], np.cumsum(counts)[:-1])

    def subset(self, indices: Sequence[int]) -> "TrainingSet":
        """Build a new, independently indexed training set from some rows."""
        rows = np.asarray(indices, dtype=np.int64)
        return TrainingSet(
            [self._users[i] for i in rows],
            [self._items[i] for i in rows],
            self._ratings[rows],
        )

    def to_csr(self) -> csr_matrix:
        """Return the user x item rating matrix.

        Duplicate (user, item) observations are summed.
        """
        return csr_matrix(
            (self._ratings, (self._dense_users, self._dense_items)),
            shape=(self.user_count(), self.item_count()),
            dtype=np.float64,
        )

    def __repr__(self) -> str:
        return (
            f"TrainingSet(ratings={len(self)}, users={self.user_count()}, "
            f"items={self.item_count()})"
        )


def load_data_from_csv(
    path: Union[str, Path],
    sep: str = ",",
    header: bool = False,
) -> TrainingSet:
    """Load ratings from a delimited text file.

    The first three columns are read as user id, item id and rating; any
    further columns (timestamps and so on) are ignored.

    Args:
        path: Path to the ratings file.
        sep: Field separator. Multi-character separators such as ``::``
            are supported.
        header: If True, the first line is a header and is skipped.

    Returns:
        TrainingSet with the file's rows in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is empty, has fewer than three columns,
            has a blank user, item or rating field or holds non-numeric
            ratings.

    Example:
        >>> data = load_data_from_csv("ml-100k/u.data", sep="\\t")
        >>> print(f"Loaded {len(data)} ratings")
    """
    csv_file = Path(path)
    if not csv_file.exists():
        raise FileNotFoundError(f"Ratings file not found: {path}")

    logger.info(f"Loading ratings from {path}")
    try:
        df = pd.read_csv(
            csv_file,
            sep=sep,
            header=0 if header else None,
            engine="python" if len(sep) > 1 else "c",
        )
    except pd.errors.EmptyDataError:
        raise ValueError(f"Cannot load ratings from empty file: {path}") from None

    if df.shape[1] < 3:
        raise ValueError(
            f"Expected at least 3 columns (user, item, rating), got {df.shape[1]}"
        )
    if df.empty:
        raise ValueError(f"Cannot load ratings from empty file: {path}")

    # Blank fields come back as NaN rather than failing to parse
    missing = df.iloc[:, :3].isna().any(axis=1).to_numpy()
    if missing.any():
        row = int(missing.argmax()) + 1
        raise ValueError(
            f"Missing user, item or rating in data row {row} of {path}"
        )

    ratings = pd.to_numeric(df.iloc[:, 2], errors="raise")
    data = TrainingSet(df.iloc[:, 0], df.iloc[:, 1], ratings)

    logger.info(f"Loaded {len(data)} ratings")
    logger.info(f"Unique users: {data.user_count()}")
    logger.info(f"Unique items: {data.item_count()}")
    return data


def load_data_from_netflix_style(
    path: Union[str, Path],
    sep: str = ",",
    header: bool = False,
) -> TrainingSet:
    """Load ratings stored in the Netflix prize layout.

    Each block starts with an ``<item_id>:`` line followed by one
    ``<user_id>,<rating>[,<date>]`` line per rating of that item.

    Args:
        path: Path to the ratings file.
        sep: Field separator of rating lines.
        header: Accepted for loader compatibility; the format has no header.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a line cannot be parsed or no ratings were found.
    """
    ratings_file = Path(path)
    if not ratings_file.exists():
        raise FileNotFoundError(f"Ratings file not found: {path}")

    logger.info(f"Loading Netflix-style ratings from {path}")
    users: List[int] = []
    items: List[int] = []
    ratings: List[float] = []
    item_id = None

    with ratings_file.open("r", encoding="utf-8") as fh:
        for line_no, raw in enumerate(fh, start=1):
            line = raw.strip()
            if not line:
                continue
            try:
                if line.endswith(":"):
                    item_id = int(line[:-1])
                    continue
                if item_id is None:
                    raise ValueError("rating line before any item header")
                fields = line.split(sep)
                users.append(int(fields[0]))
                ratings.append(float(fields[1]))
                items.append(item_id)
            except (ValueError, IndexError) as e:
                raise ValueError(
                    f"Malformed line {line_no} in {path}: {line!r} ({e})"
                ) from e

    if not ratings:
        raise ValueError(f"No ratings found in {path}")

    data = TrainingSet(users, items, ratings)
    logger.info(f"Loaded {len(data)} ratings")
    return data
