# -*- coding: utf-8 -*-
"""
Phoneme cleanup between the phonemizer and the tokenizer.

espeak output needs a few repairs before Kokoro sees it: segment joins and
punctuation spacing are reflowed, known mispronunciations and dialect symbols
are rewritten, and anything outside the model vocabulary is dropped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Sequence

from .engines.base import BasePhonemizer
from .normalize import normalize_text
from .vocab import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

# Ordered; applied as plain substring replacements
PHONEME_SUBSTITUTIONS = (
    ("kəkˈoːɹoʊ", "kˈoʊkəɹoʊ"),  # "Kokoro", US
    ("kəkˈɔːɹəʊ", "kˈəʊkəɹəʊ"),  # "Kokoro", GB
    ("ʲ", "j"),
    ("r", "ɹ"),
    ("x", "k"),
    ("ɬ", "l"),
)

_SEGMENT_END_RE = re.compile(r"[,.!?;:]$")
_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_AFTER_PUNCT_RE = re.compile(r"([,.!?;:])(?!\s)")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([,.!?;:])")
_HUNDRED_RE = re.compile(r"(?<=[a-zɹː])(?=hˈʌndɹɪd)")
_TRAILING_Z_RE = re.compile(r' z(?=[;:,.!?¡¿—…"«»“” ]|$)')
_NINETY_RE = re.compile(r"(?<=nˈaɪn)ti(?!ː)")


def join_segments(segments: Sequence[str]) -> str:
    parts: List[str] = []
    last = len(segments) - 1
    for i, segment in enumerate(segments):
        parts.append(segment)
        if i < last and not _SEGMENT_END_RE.search(segment.strip()):
            parts.append(" ")
    return "".join(parts)


def reflow_punctuation(phonemes: str) -> str:
    """One space after each punctuation mark, none before it."""
    phonemes = _WHITESPACE_RE.sub(" ", phonemes)
    phonemes = _SPACE_AFTER_PUNCT_RE.sub(r"\1 ", phonemes)
    phonemes = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", phonemes)
    return phonemes.strip()


def repair_phonemes(phonemes: str, language: str) -> str:
    for source, target in PHONEME_SUBSTITUTIONS:
        phonemes = phonemes.replace(source, target)

    phonemes = _HUNDRED_RE.sub(" ", phonemes, count=1)
    phonemes = _TRAILING_Z_RE.sub("z", phonemes, count=1)
    if language == "en-us":
        phonemes = _NINETY_RE.sub("di", phonemes, count=1)
    return phonemes


class PhonemePostProcessor:
    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    def process(self, segments: Sequence[str], language: str = "en-us") -> str:
        joined = join_segments(segments)
        reflowed = reflow_punctuation(joined)
        logger.debug(f"Reconstructed phonemes: {reflowed}", extra={"subsys": "tts.phonemes"})
        repaired = repair_phonemes(reflowed, language)
        return self.vocabulary.filter(repaired)


@dataclass(frozen=True)
class PhonemeResult:
    text: str
    phonemes: str
    tokens: List[int] = field(default_factory=list)


def phonemes_to_tokens(
    text: str,
    phonemizer: BasePhonemizer,
    language: str = "en-us",
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> PhonemeResult:
    """Normalize, phonemize, repair and tokenize one utterance.

    Phonemizer failures are not handled here; they reach the caller as
    PhonemizationError.
    """
    normalized = normalize_text(text)
    segments = phonemizer.phonemize(normalized, language)
    logger.debug(f"Raw phoneme result: {segments!r}", extra={"subsys": "tts.phonemes"})

    phonemes = PhonemePostProcessor(vocabulary).process(segments, language)
    logger.debug(f"Final phonemes: {phonemes}", extra={"subsys": "tts.phonemes"})
    return PhonemeResult(text=text, phonemes=phonemes, tokens=vocabulary.tokenize(phonemes))
