# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import logging
import warnings
from typing import Any, ClassVar, Sequence

import numpy as np
import pandas as pd
import tqdm
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils import check_random_state

from ._kinds import DependenceKind
from ._utils import cast_values, find_unused_column_name, object_column
from ._validation import validate_configuration
from .features import CategoricalFeature, FeatureSpec, NumericFeature
from .target import TargetExtractor

logger = logging.getLogger(__name__)


class ICETransformer(TransformerMixin, BaseEstimator):
    """Explains how a model's output depends on individual features.

    Each explained feature is replaced, in every row of a background dataset,
    by each value of its value grid. The model scores the resulting rows and
    the scores are gathered per feature value, either per instance
    (``kind="individual"``, ICE) or averaged over the dataset
    (``kind="average"``, partial dependence). Only one-way dependence is
    computed: several features can be explained in one call, but each is
    varied on its own.

    Args:
        model: fitted estimator with ``predict_proba``, ``decision_function`` or
            ``predict``. It receives DataFrames with the columns of the
            background dataset.
        kind: "individual" or "average" (case insensitive).
        categorical_features: :class:`CategoricalFeature` specs to explain.
        numeric_features: :class:`NumericFeature` specs to explain.
        num_samples: if set, explain a random sample of at most this many rows.
            Value grids are always computed on the full dataset.
        random_state: seed or ``RandomState`` used for sampling.
        response_method: see :class:`TargetExtractor`.
        target_classes: output columns to explain for 2D model outputs.
        target_classes_col: column of the background holding the output
            columns to explain per row; overrides ``target_classes``.
        individual_column_naming: in individual mode, "output" adds one
            ``<output column>`` per feature next to the original columns;
            "feature" replaces each explained feature's column with its
            dependence mapping.
        verbose: 0 logs warnings only, 1 logs progress, 2 logs debug details.
    """

    _required_parameters: ClassVar[list[str]] = ["model"]

    def __init__(
        self,
        model: BaseEstimator,
        *,
        kind: DependenceKind | str = DependenceKind.INDIVIDUAL,
        categorical_features: Sequence[CategoricalFeature] = (),
        numeric_features: Sequence[NumericFeature] = (),
        num_samples: int | None = None,
        random_state: int | np.random.RandomState | None = None,
        response_method: str = "auto",
        target_classes: Sequence[int] | None = None,
        target_classes_col: str | None = None,
        individual_column_naming: str = "output",
        verbose: int = 0,
    ) -> None:
        self.model = model
        self.kind = kind
        self.categorical_features = categorical_features
        self.numeric_features = numeric_features
        self.num_samples = num_samples
        self.random_state = random_state
        self.response_method = response_method
        self.target_classes = target_classes
        self.target_classes_col = target_classes_col
        self.individual_column_naming = individual_column_naming
        self.verbose = verbose

    def _set_verbosity(self) -> None:
        level = (
            logging.WARNING
            if self.verbose <= 0
            else logging.INFO
            if self.verbose == 1
            else logging.DEBUG
        )
        logging.getLogger(__package__).setLevel(level)

    def _target_extractor(self) -> TargetExtractor:
        return TargetExtractor(
            response_method=self.response_method,
            target_classes=self.target_classes,
        )

    def fit(self, X: Any = None, y: Any = None) -> ICETransformer:
        """No-op; the explained model is already fitted."""
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        return self.explain(X)

    def explain(self, X: pd.DataFrame) -> pd.DataFrame:
        """Compute the dependence of the model on the configured features.

        Returns:
            For ``kind="individual"``, the (sampled) rows of ``X`` with one
            mapping column per feature, ``{feature value: target}``. For
            ``kind="average"``, a single row holding one mapping column per
            feature, ``{feature value: mean target}``.
        """
        if not isinstance(X, pd.DataFrame):
            raise TypeError(
                f"ICETransformer expects a pandas DataFrame, got {type(X).__name__}."
            )
        self._set_verbosity()

        categorical_features = list(self.categorical_features or ())
        numeric_features = list(self.numeric_features or ())
        extractor = self._target_extractor()
        kind = validate_configuration(
            X,
            model=self.model,
            kind=self.kind,
            categorical_features=categorical_features,
            numeric_features=numeric_features,
            num_samples=self.num_samples,
            target_extractor=extractor,
            target_classes_col=self.target_classes_col,
            individual_column_naming=self.individual_column_naming,
        )

        id_col = find_unused_column_name("idCol", X)
        target_classes_col = find_unused_column_name("targetClasses", X)
        df = X.copy()
        df[id_col] = np.arange(len(df))
        if self.target_classes_col is not None:
            df[target_classes_col] = object_column(X[self.target_classes_col].tolist())
        else:
            df[target_classes_col] = object_column([extractor.default_classes()] * len(df))

        sampled = self._sample(df)

        features: list[FeatureSpec] = [*categorical_features, *numeric_features]
        tables = []
        for feature in tqdm.tqdm(
            features, desc="Explaining features", disable=self.verbose <= 0
        ):
            # grids are always built from the full background
            values = feature.build_grid(df)
            logger.info(
                "Feature %r: %d grid value(s) over %d row(s)",
                feature.name,
                len(values),
                len(sampled),
            )
            tables.append(
                self.calculate_dependence(
                    sampled,
                    id_col,
                    target_classes_col,
                    feature.name,
                    values,
                    feature.output_col_name,
                    kind=kind,
                    extractor=extractor,
                )
            )

        return kind.combine(
            tables,
            background=sampled.drop(columns=target_classes_col),
            id_col=id_col,
            features=features,
            column_naming=self.individual_column_naming,
        )

    def _sample(self, df: pd.DataFrame) -> pd.DataFrame:
        if self.num_samples is None:
            return df
        if self.num_samples > len(df):
            warnings.warn(
                f"num_samples={self.num_samples} exceeds the {len(df)} available rows; "
                "explaining all rows.",
                UserWarning,
                stacklevel=3,
            )
        rng = check_random_state(self.random_state)
        return df.sample(n=min(int(self.num_samples), len(df)), random_state=rng)

    def calculate_dependence(
        self,
        df: pd.DataFrame,
        id_col: str,
        target_classes_col: str,
        feature: str,
        values: Sequence[Any],
        output_col: str,
        *,
        kind: DependenceKind,
        extractor: TargetExtractor | None = None,
    ) -> pd.DataFrame:
        """Dependence table of one feature over ``values``.

        Every row of ``df`` is repeated once per value with ``feature``
        replaced by that value, the repeated rows are scored by the model and
        the scores are reduced according to ``kind``.
        """
        extractor = extractor or self._target_extractor()
        grid = cast_values(values, df[feature])
        n_values = len(grid)

        exploded = df.iloc[np.repeat(np.arange(len(df)), n_values)].reset_index(drop=True)
        exploded[feature] = grid.iloc[np.tile(np.arange(n_values), len(df))].to_numpy()
        exploded[feature] = exploded[feature].astype(df[feature].dtype)

        target_col = find_unused_column_name("target", exploded)
        if exploded.empty:
            exploded[target_col] = pd.Series(dtype=object)
        else:
            model_input = exploded[self._model_columns(df, id_col, target_classes_col)]
            predictions = extractor.predict(self.model, model_input)
            logger.debug(
                "Shapes | background=%s exploded=%s predictions=%s",
                df.shape,
                exploded.shape,
                predictions.shape,
            )
            exploded[target_col] = object_column(
                extractor.extract(predictions, exploded[target_classes_col].tolist())
            )

        return kind.dependence(
            exploded,
            id_col=id_col,
            feature=feature,
            target_col=target_col,
            output_col=output_col,
            ids=df[id_col].tolist(),
        )

    def _model_columns(
        self, df: pd.DataFrame, id_col: str, target_classes_col: str
    ) -> list[str]:
        excluded = {id_col, target_classes_col, self.target_classes_col}
        return [c for c in df.columns if c not in excluded]
