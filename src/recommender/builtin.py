"""Registry of built-in rating datasets and their on-disk locations.

Datasets are not downloaded here. ``load_builtin`` reads the already
unpacked ratings file from the dataset directory of a ``DataDirs`` value,
which the caller constructs explicitly.

Example:
    >>> dirs = DataDirs.from_home()
    >>> data = load_builtin("ml-100k", dirs)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from src.recommender.dataset import (
    TrainingSet,
    load_data_from_csv,
    load_data_from_netflix_style,
)
from src.recommender.exceptions import UnknownDataSetError

# Configure module logger
logger = logging.getLogger(__name__)

DATA_ROOT_NAME = ".gorse"

Loader = Callable[[Union[str, Path], str, bool], TrainingSet]


@dataclass(frozen=True)
class BuiltInDataSet:
    """Where a built-in dataset comes from and how to read it.

    Attributes:
        url: Remote archive location.
        path: Ratings file path relative to the dataset directory.
        sep: Field separator of the ratings file.
        header: Whether the ratings file starts with a header line.
        loader: Function building a TrainingSet from the ratings file.
    """

    url: str
    path: str
    sep: str = ","
    header: bool = False
    loader: Loader = load_data_from_csv


BUILTIN_DATASETS: Dict[str, BuiltInDataSet] = {
    "ml-100k": BuiltInDataSet(
        url="https://cdn.sine-x.com/datasets/movielens/ml-100k.zip",
        path="ml-100k/u.data",
        sep="\t",
    ),
    "ml-1m": BuiltInDataSet(
        url="https://cdn.sine-x.com/datasets/movielens/ml-1m.zip",
        path="ml-1m/ratings.dat",
        sep="::",
    ),
    "ml-10m": BuiltInDataSet(
        url="https://cdn.sine-x.com/datasets/movielens/ml-10m.zip",
        path="ml-10M100K/ratings.dat",
        sep="::",
    ),
    "ml-20m": BuiltInDataSet(
        url="https://cdn.sine-x.com/datasets/movielens/ml-20m.zip",
        path="ml-20m/ratings.csv",
        sep=",",
        header=True,
    ),
    "netflix": BuiltInDataSet(
        url="https://cdn.sine-x.com/datasets/netflix/netflix-prize-data.zip",
        path="netflix/training_set.txt",
        loader=load_data_from_netflix_style,
    ),
    "filmtrust": BuiltInDataSet(
        url="https://cdn.sine-x.com/datasets/filmtrust/filmtrust.zip",
        path="filmtrust/ratings.txt",
        sep=" ",
    ),
    "epinions": BuiltInDataSet(
        url="https://cdn.sine-x.com/datasets/epinions/epinions.zip",
        path="epinions/ratings_data.txt",
        sep=" ",
        header=True,
    ),
}


@dataclass(frozen=True)
class DataDirs:
    """Filesystem locations for downloads, datasets and scratch files."""

    root: Path

    @classmethod
    def from_home(cls, home: Optional[Union[str, Path]] = None) -> "DataDirs":
        """Place the data root under ``home`` (default: the user's home)."""
        base = Path(home) if home is not None else Path.home()
        return cls(root=base / DATA_ROOT_NAME)

    @property
    def download_dir(self) -> Path:
        return self.root / "download"

    @property
    def dataset_dir(self) -> Path:
        return self.root / "datasets"

    @property
    def temp_dir(self) -> Path:
        return self.root / "temp"


def get_builtin(name: str) -> BuiltInDataSet:
    """Look up a registry entry.

    Raises:
        UnknownDataSetError: If ``name`` is not registered.
    """
    try:
        return BUILTIN_DATASETS[name]
    except KeyError:
        raise UnknownDataSetError(name, list(BUILTIN_DATASETS)) from None


def load_builtin(name: str, dirs: DataDirs) -> TrainingSet:
    """Load an unpacked built-in dataset.

    Args:
        name: Registry name, e.g. ``"ml-100k"``.
        dirs: Data directories to read from.

    Returns:
        TrainingSet built by the dataset's loader.

    Raises:
        UnknownDataSetError: If ``name`` is not registered.
        FileNotFoundError: If the dataset has not been unpacked into
            ``dirs.dataset_dir``.
    """
    dataset = get_builtin(name)
    data_path = dirs.dataset_dir / dataset.path
    if not data_path.exists():
        raise FileNotFoundError(
            f"Dataset '{name}' not found at {data_path}. "
            f"Download it from {dataset.url} and unpack it into {dirs.dataset_dir}."
        )

    logger.info(f"Loading built-in dataset {name} from {data_path}")
    return dataset.loader(data_path, dataset.sep, dataset.header)
