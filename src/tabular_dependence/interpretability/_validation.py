# Licensed under the Apache License, Version 2.0
from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any, Sequence

from ._kinds import COLUMN_NAMINGS, DependenceKind
from ._utils import is_categorical_type, is_numeric_type, is_positive_integer
from .features import CategoricalFeature, NumericFeature

if TYPE_CHECKING:
    import pandas as pd
    from sklearn.base import BaseEstimator

    from .target import TargetExtractor


class ICEConfigurationError(ValueError):
    """Raised before any computation when the explainer is misconfigured.

    ``problems`` holds every issue that was found, in the order checked.
    """

    def __init__(self, problems: Sequence[str]) -> None:
        self.problems = list(problems)
        super().__init__(
            "Invalid ICE configuration:\n" + "\n".join(f"  - {p}" for p in self.problems)
        )


def _check_feature_list(
    features: Any, expected: type, label: str, problems: list[str]
) -> list[Any]:
    valid = []
    for feature in features:
        if not isinstance(feature, expected):
            problems.append(
                f"{label} features must be {expected.__name__} instances, "
                f"got {type(feature).__name__}."
            )
            continue
        problems.extend(feature.validate())
        valid.append(feature)
    return valid


def validate_configuration(
    X: pd.DataFrame,
    *,
    model: BaseEstimator,
    kind: Any,
    categorical_features: Sequence[CategoricalFeature],
    numeric_features: Sequence[NumericFeature],
    num_samples: Any,
    target_extractor: TargetExtractor,
    target_classes_col: str | None,
    individual_column_naming: str,
) -> DependenceKind:
    """Check the explainer configuration against ``X``.

    Returns the parsed aggregation kind. Raises :class:`ICEConfigurationError`
    listing all problems otherwise.
    """
    problems: list[str] = []

    parsed_kind = None
    try:
        parsed_kind = DependenceKind.parse(kind)
    except ValueError as err:
        problems.append(str(err))

    if num_samples is not None and not is_positive_integer(num_samples):
        problems.append(f"num_samples must be a positive integer, got {num_samples!r}.")

    if individual_column_naming not in COLUMN_NAMINGS:
        problems.append(
            f"individual_column_naming must be one of {COLUMN_NAMINGS}, "
            f"got {individual_column_naming!r}."
        )

    if target_extractor.resolve_response_method(model) is None:
        problems.append(
            f"Model {type(model).__name__} does not provide response method "
            f"{target_extractor.response_method!r}."
        )

    if target_classes_col is not None and target_classes_col not in X.columns:
        problems.append(
            f"target_classes_col {target_classes_col!r} is not a column of the dataset."
        )

    categorical = _check_feature_list(
        categorical_features, CategoricalFeature, "Categorical", problems
    )
    numeric = _check_feature_list(numeric_features, NumericFeature, "Numeric", problems)

    for feature in categorical:
        if feature.name not in X.columns:
            problems.append(f"Categorical feature {feature.name!r} is not a column of the dataset.")
        elif not is_categorical_type(X[feature.name]):
            problems.append(
                f"Categorical feature {feature.name!r} has dtype {X[feature.name].dtype}; "
                "categorical features must be string, boolean, integer or category typed."
            )

    for feature in numeric:
        if feature.name not in X.columns:
            problems.append(f"Numeric feature {feature.name!r} is not a column of the dataset.")
        elif not is_numeric_type(X[feature.name]):
            problems.append(
                f"Numeric feature {feature.name!r} has dtype {X[feature.name].dtype}; "
                "numeric features must be float or decimal typed."
            )

    all_features = categorical + numeric
    if not categorical_features and not numeric_features:
        problems.append(
            "No categorical or numeric features are set. Pass categorical_features "
            "or numeric_features to choose the features to explain."
        )

    duplicates = [
        name for name, count in Counter(f.name for f in all_features).items() if count > 1
    ]
    if duplicates:
        problems.append(f"Duplicate features specified: {', '.join(duplicates)}")

    output_cols = list({f.name: f.output_col_name for f in all_features}.values())
    duplicate_outputs = [
        name for name, count in Counter(output_cols).items() if count > 1
    ]
    if duplicate_outputs:
        problems.append(f"Duplicate output columns: {', '.join(duplicate_outputs)}")

    if parsed_kind is DependenceKind.INDIVIDUAL:
        clashes = [name for name in output_cols if name in X.columns]
        if clashes:
            problems.append(
                f"Output columns clash with dataset columns: {', '.join(clashes)}"
            )

    if problems:
        raise ICEConfigurationError(problems)
    return parsed_kind
