"""espeak-ng phonemizer binding via the `phonemizer` package."""
import logging
from typing import List

from phonemizer import phonemize as _phonemize
from phonemizer.separator import Separator

from ..errors import PhonemizationError
from .base import BasePhonemizer

logger = logging.getLogger(__name__)

WORD_SEPARATOR = Separator(word=" ", syllable="", phone="")


class EspeakPhonemizer(BasePhonemizer):
    def __init__(self, backend: str = "espeak"):
        self.backend = backend

    def phonemize(self, text: str, language: str) -> List[str]:
        """Return one phoneme segment per input line, punctuation and stress kept."""
        segments = text.splitlines() or [text]
        try:
            result = _phonemize(
                segments,
                language=language,
                backend=self.backend,
                separator=WORD_SEPARATOR,
                strip=False,
                preserve_punctuation=True,
                with_stress=True,
            )
        except Exception as e:
            # espeak missing, unsupported language or a backend crash
            logger.debug(
                f"Phonemizer failed for language '{language}'",
                extra={"subsys": "tts.phonemizer", "event": "phonemize.error"},
                exc_info=True,
            )
            raise PhonemizationError(f"Phonemization failed: {e}", language=language) from e

        if isinstance(result, str):
            return [result]
        return list(result)
