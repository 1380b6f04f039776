# -*- coding: utf-8 -*-
"""
Kokoro symbol vocabulary and tokenizer.

The table is the concatenation PAD + PUNCTUATION + LETTERS + LETTERS_IPA and
each symbol's position is its token ID, exactly as the model was trained.
ID 0 (the pad symbol) doubles as the start/end sentinel around every
utterance.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, List, Mapping, Tuple

logger = logging.getLogger(__name__)

PAD = "$"
PUNCTUATION = ';:,.!?¡¿—…"«»“” '
LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
LETTERS_IPA = (
    "ɑɐɒæɓʙβɔɕçɗɖðʤəɘɚɛɜɝɞɟʄɡɠɢʛɦɧħɥʜɨɪʝɭɬɫɮʟɱɯɰŋɳɲɴøɵɸθœɶʘɹɺɾɻʀʁɽʂʃʈʧʉʊʋⱱʌɣɤʍχʎʏʑʐʒʔʡʕʢǀǁǂǃ"
    "ˈˌːˑʼʴʰʱʲʷˠˤ˞↓↑→↗↘'̩'ᵻ"
)

PAD_ID = 0


class Vocabulary:
    """Immutable symbol <-> token ID table.

    When a symbol occurs twice in the source table (the apostrophe does), the
    later position is its canonical ID, matching the mapping the model saw in
    training. The earlier position stays in ``symbols`` but is never emitted.
    """

    __slots__ = ("_symbols", "_ids")

    def __init__(self, symbols: Iterable[str]):
        self._symbols: Tuple[str, ...] = tuple(symbols)
        ids = {}
        for index, symbol in enumerate(self._symbols):
            ids[symbol] = index
        self._ids: Mapping[str, int] = MappingProxyType(ids)

    @property
    def symbols(self) -> Tuple[str, ...]:
        return self._symbols

    @property
    def ids(self) -> Mapping[str, int]:
        return self._ids

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._ids

    def __repr__(self) -> str:
        return f"Vocabulary(size={len(self)}, unique={len(self._ids)})"

    def id_of(self, symbol: str) -> int:
        return self._ids[symbol]

    def symbol_of(self, token_id: int) -> str:
        if not 0 <= token_id < len(self._symbols):
            raise KeyError(token_id)
        return self._symbols[token_id]

    def filter(self, phonemes: str) -> str:
        """Drop every character that has no token ID, preserving order."""
        return "".join(ch for ch in phonemes if ch in self._ids)

    def tokenize(self, phonemes: str) -> List[int]:
        """Map each character to its ID; unknown characters are silently skipped."""
        ids = self._ids
        return [ids[ch] for ch in phonemes if ch in ids]


def build_vocabulary() -> Vocabulary:
    vocab = Vocabulary([PAD, *PUNCTUATION, *LETTERS, *LETTERS_IPA])
    logger.debug("Built vocabulary: %d symbols, %d unique", len(vocab), len(vocab.ids))
    return vocab


DEFAULT_VOCABULARY = build_vocabulary()
