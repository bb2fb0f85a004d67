"""Runtime options passed to ``fit``.

Options are small callables that update a ``FitOptions`` value, so ``fit``
can take any number of them::

    model.fit(data, with_verbose(True), with_n_jobs(4))
"""

from dataclasses import dataclass, replace
from typing import Callable, Iterable

DEFAULT_VERBOSE = False
DEFAULT_N_JOBS = 1


@dataclass(frozen=True)
class FitOptions:
    """Runtime options of a single fit.

    Attributes:
        verbose: Log training progress.
        n_jobs: Number of jobs a model may use.
    """

    verbose: bool = DEFAULT_VERBOSE
    n_jobs: int = DEFAULT_N_JOBS

    @classmethod
    def from_options(cls, options: Iterable["FitOption"] = ()) -> "FitOptions":
        """Apply option values in order over the defaults."""
        result = cls()
        for option in options:
            result = option(result)
        return result


FitOption = Callable[[FitOptions], FitOptions]


def with_verbose(verbose: bool) -> FitOption:
    """Option enabling or disabling progress logging."""
    return lambda opts: replace(opts, verbose=bool(verbose))


def with_n_jobs(n_jobs: int) -> FitOption:
    """Option setting the number of jobs."""
    if n_jobs < 1:
        raise ValueError(f"n_jobs must be positive, got {n_jobs}")
    return lambda opts: replace(opts, n_jobs=int(n_jobs))
