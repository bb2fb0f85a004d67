"""Hyperparameter container for estimators.

A ``ParamSet`` maps a fixed vocabulary of parameter names to scalar values
(integers, booleans, floats or enumerated strings). Typed accessors never
raise: a missing key returns the caller's default, and a key holding a value
of the wrong kind returns the default and logs a warning.

Example:
    >>> params = ParamSet({ParamName.LR: 0.01, "n_epochs": 50})
    >>> params.get_float(ParamName.LR, 0.005)
    0.01
    >>> params.get_int(ParamName.N_EPOCHS, 20)
    50
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional, Union

import numpy as np

# Configure module logger
logger = logging.getLogger(__name__)

INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1

_MISSING = object()


class ParamName(str, Enum):
    """Names of estimator hyperparameters."""

    LR = "lr"
    REG = "reg"
    N_EPOCHS = "n_epochs"
    N_FACTORS = "n_factors"
    RANDOM_STATE = "random_state"
    USE_BIAS = "use_bias"
    INIT_MEAN = "init_mean"
    INIT_STD_DEV = "init_std_dev"
    INIT_LOW = "init_low"
    INIT_HIGH = "init_high"
    N_USER_CLUSTERS = "n_user_clusters"
    N_ITEM_CLUSTERS = "n_item_clusters"
    TYPE = "knn_type"
    USER_BASED = "user_based"
    SIMILARITY = "knn_similarity"
    K = "k"
    MIN_K = "min_k"
    TARGET = "loss"
    SHRINKAGE = "shrinkage"
    ALPHA = "alpha"


class ParamString(str, Enum):
    """Enumerated string values for hyperparameters."""

    # Values for ParamName.TYPE
    BASIC = "basic"
    CENTERED = "centered"
    Z_SCORE = "z_score"
    BASELINE = "baseline"
    # Values for ParamName.TARGET
    REGRESSION = "regression"
    BPR = "bpr"
    # Values for ParamName.SIMILARITY
    PEARSON = "pearson"
    COSINE = "cosine"
    MSD = "msd"


ParamValue = Union[int, bool, float, ParamString]
KeyLike = Union[ParamName, str]


def _to_name(key: KeyLike) -> ParamName:
    try:
        return ParamName(key)
    except ValueError:
        raise ValueError(f"Unknown hyperparameter name: {key!r}") from None


def _is_integer(value: Any) -> bool:
    # bool is a subclass of int but is its own kind here
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, np.integer))


class ParamSet:
    """Typed, defaulted, mergeable bag of hyperparameters."""

    def __init__(self, values: Optional[Mapping[KeyLike, Any]] = None):
        self._values: Dict[ParamName, Any] = {}
        for key, value in (values or {}).items():
            self._values[_to_name(key)] = value

    def _lookup(self, name: KeyLike) -> Any:
        try:
            return self._values.get(ParamName(name), _MISSING)
        except ValueError:
            return _MISSING

    def _mistyped(self, name: KeyLike, expected: str, value: Any) -> None:
        logger.warning(
            f"Expect {getattr(name, 'value', name)} to be {expected}, "
            f"but get {type(value).__name__}",
            extra={"param": str(getattr(name, "value", name)), "expected": expected},
        )

    def get_int(self, name: KeyLike, default: int) -> int:
        """Get a 32-bit integer parameter."""
        value = self._lookup(name)
        if value is _MISSING:
            return default
        if _is_integer(value) and INT32_MIN <= int(value) <= INT32_MAX:
            return int(value)
        self._mistyped(name, "int32", value)
        return default

    def get_int64(self, name: KeyLike, default: int) -> int:
        """Get a 64-bit integer parameter. 32-bit values are promoted."""
        value = self._lookup(name)
        if value is _MISSING:
            return default
        if _is_integer(value) and INT64_MIN <= int(value) <= INT64_MAX:
            return int(value)
        self._mistyped(name, "int64", value)
        return default

    def get_bool(self, name: KeyLike, default: bool) -> bool:
        """Get a boolean parameter."""
        value = self._lookup(name)
        if value is _MISSING:
            return default
        if isinstance(value, (bool, np.bool_)):
            return bool(value)
        self._mistyped(name, "bool", value)
        return default

    def get_float(self, name: KeyLike, default: float) -> float:
        """Get a float parameter. Integers are promoted."""
        value = self._lookup(name)
        if value is _MISSING:
            return default
        if isinstance(value, (float, np.floating)) or _is_integer(value):
            return float(value)
        self._mistyped(name, "float", value)
        return default

    def get_string(self, name: KeyLike, default: ParamString) -> ParamString:
        """Get an enumerated string parameter."""
        value = self._lookup(name)
        if value is _MISSING:
            return default
        if isinstance(value, str):
            try:
                return ParamString(value)
            except ValueError:
                pass
        self._mistyped(name, "ParamString", value)
        return default

    def copy(self) -> "ParamSet":
        """Return an independent shallow copy."""
        return ParamSet(self._values)

    def merge(self, other: Union["ParamSet", Mapping[KeyLike, Any]]) -> None:
        """Overwrite current values with every key present in ``other``."""
        items = other._values if isinstance(other, ParamSet) else other
        for key, value in items.items():
            self._values[_to_name(key)] = value

    def __getitem__(self, name: KeyLike) -> Any:
        return self._values[_to_name(name)]

    def __setitem__(self, name: KeyLike, value: Any) -> None:
        self._values[_to_name(name)] = value

    def __contains__(self, name: object) -> bool:
        return self._lookup(name) is not _MISSING

    def __iter__(self) -> Iterator[ParamName]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParamSet):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        body = ", ".join(f"{k.value}={v!r}" for k, v in self._values.items())
        return f"ParamSet({body})"

