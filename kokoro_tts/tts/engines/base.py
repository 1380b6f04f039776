import abc
from typing import List, Sequence

import numpy as np


class BasePhonemizer(abc.ABC):
    """Grapheme-to-phoneme boundary: text in, ordered phoneme segments out."""

    @abc.abstractmethod
    def phonemize(self, text: str, language: str) -> List[str]:
        raise NotImplementedError()


class BaseInferenceEngine(abc.ABC):
    """Acoustic model boundary: one token window in, float samples out."""

    @abc.abstractmethod
    def infer(self, tokens: Sequence[int], style: np.ndarray, speed: float) -> np.ndarray:
        raise NotImplementedError()
