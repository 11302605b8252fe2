# Licensed under the Apache License, Version 2.0
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

import numpy as np

if TYPE_CHECKING:
    import pandas as pd
    from sklearn.base import BaseEstimator

RESPONSE_METHODS = ("predict_proba", "decision_function", "predict")


class TargetExtractor:
    """Selects the model output that a dependence curve explains.

    Args:
        response_method: "auto", "predict_proba", "decision_function" or "predict".
            With "auto", ``predict_proba`` is preferred, then ``decision_function``,
            then ``predict``.
        target_classes: for 2D outputs, the column indices to report. ``None``
            or an empty sequence reports every column.
    """

    def __init__(
        self,
        response_method: str = "auto",
        target_classes: Sequence[int] | None = None,
    ) -> None:
        self.response_method = response_method
        self.target_classes = target_classes

    def resolve_response_method(self, model: BaseEstimator) -> str | None:
        """Name of the method used for inference, or ``None`` if the model has none."""
        if self.response_method == "auto":
            for method in RESPONSE_METHODS:
                if hasattr(model, method):
                    return method
            return None
        if self.response_method in RESPONSE_METHODS and hasattr(
            model, self.response_method
        ):
            return self.response_method
        return None

    def predict(self, model: BaseEstimator, X: pd.DataFrame) -> np.ndarray:
        method = self.resolve_response_method(model)
        if method is None:
            raise ValueError(
                f"Model {type(model).__name__} does not provide response method "
                f"{self.response_method!r}."
            )
        return np.asarray(getattr(model, method)(X))

    def default_classes(self) -> list[int]:
        return [] if self.target_classes is None else list(self.target_classes)

    def extract(
        self, predictions: np.ndarray, classes_column: Sequence[Any]
    ) -> list[Any]:
        """One target per prediction row.

        1D predictions give floats. 2D predictions give float vectors holding
        the columns listed by the row's entry in ``classes_column``.
        """
        if predictions.ndim == 2 and predictions.shape[1] == 1:
            predictions = predictions[:, 0]
        if predictions.ndim == 1:
            return [float(v) for v in predictions]
        if predictions.ndim != 2:
            raise ValueError(
                f"Model output must be 1D or 2D, got shape {predictions.shape}."
            )

        width = predictions.shape[1]
        targets = []
        for row, classes in zip(predictions, classes_column):
            indices = [] if classes is None else np.atleast_1d(classes).astype(int).tolist()
            for index in indices:
                if not 0 <= index < width:
                    raise ValueError(
                        f"Target class index {index} is out of range for a model "
                        f"output with {width} columns."
                    )
            targets.append(
                np.asarray(row[indices] if indices else row, dtype=float)
            )
        return targets
