# Licensed under the Apache License, Version 2.0
"""Feature specifications and their value grids.

A feature to explain is either a :class:`CategoricalFeature`, whose grid is
made of its most frequent observed values, or a :class:`NumericFeature`,
whose grid is a set of evenly spaced split points over a value range.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Union

import pandas as pd

from ._utils import (
    create_splits,
    integer_range,
    is_integral,
    is_positive_integer,
    to_python_scalar,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoricalFeature:
    """A categorical feature explained over its ``top_value_count`` most frequent values."""

    name: str
    top_value_count: int = 100
    output_col: str | None = None

    @property
    def output_col_name(self) -> str:
        return self.output_col or f"{self.name}_dependence"

    def validate(self) -> list[str]:
        problems = []
        if not isinstance(self.name, str) or not self.name:
            problems.append(f"Feature name must be a non-empty string, got {self.name!r}.")
        if not is_positive_integer(self.top_value_count):
            problems.append(
                f"top_value_count for categorical feature {self.name!r} must be a "
                f"positive integer, got {self.top_value_count!r}."
            )
        return problems

    def build_grid(self, df: pd.DataFrame) -> list[Any]:
        """Most frequent values of the feature, by descending count.

        Values with equal counts keep the order in which they first appear
        in ``df``. Missing values are never part of the grid.
        """
        counts = df.groupby(self.name, sort=False, dropna=True, observed=True).size()
        counts = counts.sort_values(ascending=False, kind="stable")
        return [to_python_scalar(v) for v in counts.index[: self.top_value_count]]


@dataclass(frozen=True)
class NumericFeature:
    """A numeric feature explained over ``split_count + 1`` evenly spaced values.

    ``range_min`` and ``range_max`` bound the grid. A bound left as ``None``
    is taken from the background dataset. On integer columns a range holding
    at most ``split_count + 1`` integers yields every integer in it; this only
    happens when ``build_grid`` is called directly, since ``ICETransformer``
    accepts float and decimal columns only for numeric features.
    """

    name: str
    split_count: int = 10
    range_min: float | None = None
    range_max: float | None = None
    output_col: str | None = None

    @property
    def output_col_name(self) -> str:
        return self.output_col or f"{self.name}_dependence"

    def validate(self) -> list[str]:
        problems = []
        if not isinstance(self.name, str) or not self.name:
            problems.append(f"Feature name must be a non-empty string, got {self.name!r}.")
        if not is_positive_integer(self.split_count):
            problems.append(
                f"split_count for numeric feature {self.name!r} must be a positive "
                f"integer, got {self.split_count!r}."
            )
        if (
            self.range_min is not None
            and self.range_max is not None
            and self.range_min > self.range_max
        ):
            problems.append(
                f"range_min ({self.range_min}) must not exceed range_max "
                f"({self.range_max}) for numeric feature {self.name!r}."
            )
        return problems

    def build_grid(self, df: pd.DataFrame) -> list[float]:
        column = df[self.name]
        integral = is_integral(column)

        if self.range_min is not None and self.range_max is not None:
            start, stop = self.range_min, self.range_max
        else:
            observed_min, observed_max = column.min(), column.max()
            if pd.isna(observed_min) or pd.isna(observed_max):
                logger.warning(
                    "Numeric feature %r has no observed values; its value grid is empty.",
                    self.name,
                )
                return []
            start = self.range_min if self.range_min is not None else observed_min
            stop = self.range_max if self.range_max is not None else observed_max

        if integral:
            start, stop = int(start), int(stop)
            # No more splits than there are distinct integers in the range.
            if stop - start <= self.split_count:
                return integer_range(start, stop)
        else:
            start, stop = float(start), float(stop)
            if math.isnan(start) or math.isnan(stop):
                return []

        return create_splits(self.split_count, start, stop)


FeatureSpec = Union[CategoricalFeature, NumericFeature]
