from .base import BaseInferenceEngine, BasePhonemizer

__all__ = [
    "BaseInferenceEngine",
    "BasePhonemizer",
]
