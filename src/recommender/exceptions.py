"""Custom exceptions for the recommender package.

Defines specific exception types for wiring errors and dataset lookups.
Data problems (bad CSV files, mismatched arrays) use the built-in
``ValueError`` and ``FileNotFoundError`` instead.
"""

from typing import Any, Dict, Optional


class RecommenderError(Exception):
    """Base exception for recommender errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnimplementedError(RecommenderError, NotImplementedError):
    """Raised when an estimator method was not overridden by a subclass."""

    def __init__(self, method: str, estimator: str):
        message = f"{estimator}.{method}() not implemented"
        super().__init__(
            message=message,
            details={"method": method, "estimator": estimator},
        )


class NotConfiguredError(RecommenderError, RuntimeError):
    """Raised when an estimator is initialized before set_params()."""

    def __init__(self, estimator: str):
        message = (
            f"{estimator}.set_params() was not called before init(). "
            "This is a wiring bug, not a data problem."
        )
        super().__init__(message=message, details={"estimator": estimator})


class UnknownDataSetError(RecommenderError, KeyError):
    """Raised when a built-in dataset name is not registered."""

    def __init__(self, name: str, available: Optional[list] = None):
        message = f"Unknown built-in dataset '{name}'"
        if available:
            message += f". Available: {', '.join(sorted(available))}"
        super().__init__(
            message=message,
            details={"name": name, "available": sorted(available or [])},
        )

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.message


class NotFittedError(RecommenderError, RuntimeError):
    """Raised when predict() is called before fit()."""

    def __init__(self, estimator: str):
        message = f"{estimator} is not fitted. Call fit() before predict()."
        super().__init__(message=message, details={"estimator": estimator})
