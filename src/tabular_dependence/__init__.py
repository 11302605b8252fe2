from .interpretability import (
    CategoricalFeature,
    DependenceKind,
    ICEConfigurationError,
    ICETransformer,
    NumericFeature,
    TargetExtractor,
    individual_conditional_expectation,
    partial_dependence,
)

__version__ = "0.1.0"

__all__ = [
    "CategoricalFeature",
    "DependenceKind",
    "ICEConfigurationError",
    "ICETransformer",
    "NumericFeature",
    "TargetExtractor",
    "individual_conditional_expectation",
    "partial_dependence",
]
