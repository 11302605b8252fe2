from ._kinds import DependenceKind
from ._validation import ICEConfigurationError
from .features import CategoricalFeature, FeatureSpec, NumericFeature
from .ice_transformer import ICETransformer
from .pdp import individual_conditional_expectation, partial_dependence
from .target import TargetExtractor

__all__ = [
    "CategoricalFeature",
    "DependenceKind",
    "FeatureSpec",
    "ICEConfigurationError",
    "ICETransformer",
    "NumericFeature",
    "TargetExtractor",
    "individual_conditional_expectation",
    "partial_dependence",
]
