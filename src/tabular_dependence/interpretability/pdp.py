# Licensed under the Apache License, Version 2.0
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from ._kinds import DependenceKind
from .features import CategoricalFeature, NumericFeature
from .ice_transformer import ICETransformer

if TYPE_CHECKING:
    import pandas as pd
    from sklearn.base import BaseEstimator


def _as_specs(features: Iterable[Any], spec_type: type) -> list[Any]:
    return [spec_type(f) if isinstance(f, str) else f for f in features]


def _explain(
    estimator: BaseEstimator,
    X: pd.DataFrame,
    kind: DependenceKind,
    categorical_features: Iterable[CategoricalFeature | str],
    numeric_features: Iterable[NumericFeature | str],
    **kwargs,
) -> pd.DataFrame:
    transformer = ICETransformer(
        estimator,
        kind=kind,
        categorical_features=_as_specs(categorical_features, CategoricalFeature),
        numeric_features=_as_specs(numeric_features, NumericFeature),
        **kwargs,
    )

    # Some estimators expose `show_progress`; silence it while scoring the grid
    restore_progress = None
    if hasattr(estimator, "show_progress"):
        restore_progress = estimator.show_progress
        try:
            estimator.show_progress = False
        except AttributeError:
            restore_progress = None

    try:
        return transformer.explain(X)
    finally:
        if restore_progress is not None:
            estimator.show_progress = restore_progress


def partial_dependence(
    estimator: BaseEstimator,
    X: pd.DataFrame,
    *,
    categorical_features: Iterable[CategoricalFeature | str] = (),
    numeric_features: Iterable[NumericFeature | str] = (),
    **kwargs,
) -> pd.DataFrame:
    """
    Partial dependence (PDP) of ``estimator`` on one or more features.

    Args:
        estimator: fitted estimator
        X: background dataset
        categorical_features: specs or column names of categorical features
        numeric_features: specs or column names of numeric features
        **kwargs: forwarded to ICETransformer (e.g. num_samples, target_classes)

    Returns:
        A single-row DataFrame with one ``{value: mean target}`` column per feature.
    """
    return _explain(
        estimator,
        X,
        DependenceKind.AVERAGE,
        categorical_features,
        numeric_features,
        **kwargs,
    )


def individual_conditional_expectation(
    estimator: BaseEstimator,
    X: pd.DataFrame,
    *,
    categorical_features: Iterable[CategoricalFeature | str] = (),
    numeric_features: Iterable[NumericFeature | str] = (),
    **kwargs,
) -> pd.DataFrame:
    """
    Individual conditional expectation (ICE) of ``estimator`` on one or more features.

    Takes the same arguments as :func:`partial_dependence` and returns the rows
    of ``X`` with one ``{value: target}`` column per feature.
    """
    return _explain(
        estimator,
        X,
        DependenceKind.INDIVIDUAL,
        categorical_features,
        numeric_features,
        **kwargs,
    )
