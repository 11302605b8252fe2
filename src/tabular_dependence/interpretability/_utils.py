# Licensed under the Apache License, Version 2.0
from __future__ import annotations

from decimal import Decimal
from numbers import Integral
from typing import Any, Sequence

import numpy as np
import pandas as pd
from pandas.api import types as ptypes


def find_unused_column_name(prefix: str, df: pd.DataFrame) -> str:
    """Return ``prefix`` or ``prefix_<n>`` such that it is not a column of ``df``."""
    name = prefix
    counter = 1
    while name in df.columns:
        name = f"{prefix}_{counter}"
        counter += 1
    return name


def is_positive_integer(value: Any) -> bool:
    """Positive Python or numpy integer; booleans are rejected."""
    return (
        isinstance(value, Integral)
        and not isinstance(value, (bool, np.bool_))
        and value > 0
    )


def is_integral(series: pd.Series) -> bool:
    return ptypes.is_integer_dtype(series.dtype) and not ptypes.is_bool_dtype(
        series.dtype
    )


def is_decimal(series: pd.Series) -> bool:
    """Object columns whose observed values are all ``decimal.Decimal``."""
    if not ptypes.is_object_dtype(series.dtype):
        return False
    observed = series.dropna()
    if observed.empty:
        return False
    return bool(observed.map(lambda v: isinstance(v, Decimal)).all())


def is_categorical_type(series: pd.Series) -> bool:
    if isinstance(series.dtype, pd.CategoricalDtype):
        return True
    if ptypes.is_bool_dtype(series.dtype) or is_integral(series):
        return True
    return ptypes.is_string_dtype(series) and not is_decimal(series)


def is_numeric_type(series: pd.Series) -> bool:
    return ptypes.is_float_dtype(series.dtype) or is_decimal(series)


def create_splits(n: int, start: float, stop: float) -> list[float]:
    """``n + 1`` evenly spaced points from ``start`` to ``stop`` inclusive."""
    step = (stop - start) / n
    return [step * i + start for i in range(n + 1)]


def integer_range(start: int, stop: int) -> list[float]:
    return [float(v) for v in range(start, stop + 1)]


def cast_values(values: Sequence[Any], series: pd.Series) -> pd.Series:
    """Cast a value grid to the dtype of ``series``."""
    if is_decimal(series):
        return pd.Series([Decimal(repr(float(v))) for v in values], dtype=object)
    return pd.Series(list(values), dtype=object).astype(series.dtype)


def to_python_scalar(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    return value


def mean_target(values: Sequence[Any]) -> Any:
    """Mean of scalar targets, or element-wise mean of vector targets."""
    stacked = np.stack([np.asarray(v, dtype=float) for v in values])
    mean = stacked.mean(axis=0)
    if mean.ndim == 0:
        return float(mean)
    return mean


def object_column(values: Sequence[Any]) -> np.ndarray:
    """1D object array holding ``values`` as-is, even when they are equal-length sequences."""
    column = np.empty(len(values), dtype=object)
    for i, value in enumerate(values):
        column[i] = value
    return column
