# Licensed under the Apache License, Version 2.0
from __future__ import annotations

from enum import Enum
from functools import reduce
from typing import TYPE_CHECKING, Any, Sequence

import pandas as pd

from ._utils import mean_target, to_python_scalar

if TYPE_CHECKING:
    from .features import FeatureSpec

COLUMN_NAMINGS = ("output", "feature")


class DependenceKind(str, Enum):
    """Shape of the dependence output.

    ``AVERAGE`` is the partial dependence (PDP): one row with the mean target
    per feature value. ``INDIVIDUAL`` is the ICE: one row per instance with
    that instance's target per feature value.
    """

    AVERAGE = "average"
    INDIVIDUAL = "individual"

    @classmethod
    def parse(cls, value: DependenceKind | str) -> DependenceKind:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        allowed = ", ".join(repr(k.value) for k in cls)
        raise ValueError(f"kind must be one of {allowed}, got {value!r}.")

    def dependence(
        self,
        predicted: pd.DataFrame,
        *,
        id_col: str,
        feature: str,
        target_col: str,
        output_col: str,
        ids: Sequence[Any],
    ) -> pd.DataFrame:
        """Reduce exploded predictions of one feature to a dependence table."""
        if self is DependenceKind.AVERAGE:
            # 1 row x 1 column: feature value -> mean target
            grouped = predicted.groupby(feature, sort=False, observed=True)[target_col]
            mapping = {
                to_python_scalar(value): mean_target(targets.tolist())
                for value, targets in grouped
            }
            return pd.DataFrame({output_col: [mapping]})

        # n rows x 2 columns: id + (feature value -> target) for that instance
        mappings: dict[Any, dict[Any, Any]] = {}
        for id_value, value, target in zip(
            predicted[id_col].tolist(),
            predicted[feature].tolist(),
            predicted[target_col].tolist(),
        ):
            mappings.setdefault(id_value, {})[to_python_scalar(value)] = target
        return pd.DataFrame(
            {
                id_col: list(ids),
                output_col: [mappings.get(i, {}) for i in ids],
            }
        )

    def combine(
        self,
        tables: Sequence[pd.DataFrame],
        *,
        background: pd.DataFrame,
        id_col: str,
        features: Sequence[FeatureSpec],
        column_naming: str = "output",
    ) -> pd.DataFrame:
        """Merge the per-feature dependence tables into the output table."""
        if self is DependenceKind.AVERAGE:
            return reduce(lambda left, right: left.merge(right, how="cross"), tables)

        dependence = reduce(
            lambda left, right: left.merge(right, on=id_col, how="inner"), tables
        )
        result = background.merge(dependence, on=id_col, how="inner").drop(
            columns=id_col
        )
        result.index = background.index
        if column_naming == "feature":
            for feature in features:
                # assigning to an existing column keeps its position
                result[feature.name] = result.pop(feature.output_col_name)
        return result
