"""Configuration checks run by ICETransformer before any computation."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from sklearn.base import BaseEstimator

from tabular_dependence.interpretability import (
    CategoricalFeature,
    ICEConfigurationError,
    ICETransformer,
    NumericFeature,
)


class ExplodingModel(BaseEstimator):
    def predict(self, X):
        raise AssertionError("the model must not be called on invalid configurations")


@pytest.fixture
def df():
    return pd.DataFrame(
        {
            "x": [0.1, 0.2, 0.3],
            "n": [1, 2, 3],
            "s": ["a", "b", "c"],
            "flag": [True, False, True],
        }
    )


def explain(df, **kwargs):
    return ICETransformer(ExplodingModel(), **kwargs).explain(df)


def test_configuration_error_is_value_error():
    assert issubclass(ICEConfigurationError, ValueError)


def test_no_features(df):
    with pytest.raises(ICEConfigurationError, match="No categorical or numeric features"):
        explain(df)


def test_duplicate_across_kinds(df):
    with pytest.raises(ICEConfigurationError) as exc_info:
        explain(
            df,
            categorical_features=[CategoricalFeature("n")],
            numeric_features=[NumericFeature("n")],
        )
    assert "Duplicate features specified: n" in str(exc_info.value)


def test_duplicates_are_reported_together(df):
    with pytest.raises(ICEConfigurationError) as exc_info:
        explain(
            df,
            categorical_features=[CategoricalFeature("s"), CategoricalFeature("s")],
            numeric_features=[NumericFeature("x"), NumericFeature("x")],
        )
    duplicate_messages = [p for p in exc_info.value.problems if p.startswith("Duplicate features")]
    assert duplicate_messages == ["Duplicate features specified: s, x"]


def test_numeric_feature_on_string_column(df):
    with pytest.raises(ICEConfigurationError, match="Numeric feature 's'"):
        explain(df, numeric_features=[NumericFeature("s")])


def test_numeric_feature_on_integer_column(df):
    with pytest.raises(ICEConfigurationError, match="float or decimal"):
        explain(df, numeric_features=[NumericFeature("n")])


def test_categorical_feature_on_float_column(df):
    with pytest.raises(ICEConfigurationError, match="Categorical feature 'x'"):
        explain(df, categorical_features=[CategoricalFeature("x")])


@pytest.mark.parametrize("column", ["n", "s", "flag"])
def test_allowed_categorical_columns(df, column):
    with pytest.raises(AssertionError, match="must not be called"):
        explain(df, categorical_features=[CategoricalFeature(column)])


def test_missing_column(df):
    with pytest.raises(ICEConfigurationError, match="'missing' is not a column"):
        explain(df, numeric_features=[NumericFeature("missing")])


def test_invalid_kind(df):
    with pytest.raises(ICEConfigurationError, match="kind must be one of"):
        explain(df, kind="both", numeric_features=[NumericFeature("x")])


@pytest.mark.parametrize("num_samples", [0, -5, 2.5, np.int64(0), True])
def test_invalid_num_samples(df, num_samples):
    with pytest.raises(ICEConfigurationError, match="num_samples"):
        explain(df, num_samples=num_samples, numeric_features=[NumericFeature("x")])


@pytest.mark.parametrize("count", [np.int64(2), np.int32(1), np.uint8(4)])
def test_numpy_integers_are_accepted(df, count):
    with pytest.raises(AssertionError, match="must not be called"):
        explain(
            df,
            num_samples=count,
            categorical_features=[CategoricalFeature("s", top_value_count=count)],
            numeric_features=[NumericFeature("x", split_count=count)],
        )


def test_invalid_feature_config(df):
    with pytest.raises(ICEConfigurationError, match="split_count"):
        explain(df, numeric_features=[NumericFeature("x", split_count=0)])

    with pytest.raises(ICEConfigurationError, match="range_min"):
        explain(
            df,
            numeric_features=[NumericFeature("x", range_min=1.0, range_max=0.0)],
        )


def test_wrong_spec_type(df):
    with pytest.raises(ICEConfigurationError, match="NumericFeature instances"):
        explain(df, numeric_features=[CategoricalFeature("s")])


def test_model_without_response_method(df):
    with pytest.raises(ICEConfigurationError, match="response method"):
        ICETransformer(object(), numeric_features=[NumericFeature("x")]).explain(df)


def test_requested_response_method_missing(df):
    with pytest.raises(ICEConfigurationError, match="predict_proba"):
        explain(df, response_method="predict_proba", numeric_features=[NumericFeature("x")])


def test_unknown_target_classes_col(df):
    with pytest.raises(ICEConfigurationError, match="target_classes_col"):
        explain(df, target_classes_col="classes", numeric_features=[NumericFeature("x")])


def test_unknown_column_naming(df):
    with pytest.raises(ICEConfigurationError, match="individual_column_naming"):
        explain(
            df,
            individual_column_naming="renamed",
            numeric_features=[NumericFeature("x")],
        )


def test_output_column_clash_in_individual_mode(df):
    with pytest.raises(ICEConfigurationError, match="clash"):
        explain(df, numeric_features=[NumericFeature("x", output_col="s")])


def test_duplicate_output_columns(df):
    with pytest.raises(ICEConfigurationError, match="Duplicate output columns: out"):
        explain(
            df,
            kind="average",
            categorical_features=[CategoricalFeature("s", output_col="out")],
            numeric_features=[NumericFeature("x", output_col="out")],
        )


def test_all_problems_are_reported(df):
    with pytest.raises(ICEConfigurationError) as exc_info:
        explain(
            df,
            kind="sideways",
            num_samples=0,
            categorical_features=[CategoricalFeature("x", top_value_count=0)],
            numeric_features=[NumericFeature("s")],
        )

    problems = exc_info.value.problems
    assert len(problems) == 5
    message = str(exc_info.value)
    for fragment in ("kind", "num_samples", "top_value_count", "'x'", "'s'"):
        assert fragment in message


def test_decimal_column_is_numeric():
    from decimal import Decimal

    df = pd.DataFrame({"d": [Decimal("1.0"), Decimal("2.5")], "other": np.zeros(2)})
    with pytest.raises(AssertionError, match="must not be called"):
        explain(df, numeric_features=[NumericFeature("d")])
