"""
Tests for phoneme reflow, repairs and tokenization.
"""
import pytest
from unittest.mock import MagicMock

from conftest import FakePhonemizer
from kokoro_tts.tts.errors import PhonemizationError
from kokoro_tts.tts.phonemes import (
    PhonemePostProcessor,
    join_segments,
    phonemes_to_tokens,
    reflow_punctuation,
    repair_phonemes,
)
from kokoro_tts.tts.vocab import DEFAULT_VOCABULARY


def test_join_segments_adds_space_only_after_unpunctuated_segments():
    assert join_segments(["həlˈoʊ", "wˈɜːld."]) == "həlˈoʊ wˈɜːld."
    assert join_segments(["hˈaɪ.", "ðˈɛɹ"]) == "hˈaɪ.ðˈɛɹ"
    assert join_segments(["ɐ"]) == "ɐ"
    assert join_segments([]) == ""


def test_reflow_punctuation_spacing():
    assert reflow_punctuation("hˈaɪ.ðˈɛɹ") == "hˈaɪ. ðˈɛɹ"
    assert reflow_punctuation("ɐ , b  !") == "ɐ, b!"
    assert reflow_punctuation("  wʌn \n tˈuː  ") == "wʌn tˈuː"


def test_substitutions_rewrite_dialect_symbols():
    assert repair_phonemes("rˈɛd", "en-us") == "ɹˈɛd"
    assert repair_phonemes("lɔx", "en-us") == "lɔk"
    assert repair_phonemes("ɬan", "en-gb") == "lan"
    assert repair_phonemes("mʲa", "en-us") == "mja"


def test_kokoro_pronunciation_fix():
    assert repair_phonemes("kəkˈoːɹoʊ", "en-us") == "kˈoʊkəɹoʊ"
    assert repair_phonemes("kəkˈɔːɹəʊ", "en-gb") == "kˈəʊkəɹəʊ"


def test_space_before_hundred():
    assert repair_phonemes("wʌnhˈʌndɹɪd", "en-us") == "wʌn hˈʌndɹɪd"
    # Only the first occurrence is split
    assert repair_phonemes("wʌnhˈʌndɹɪd tuːhˈʌndɹɪd", "en-us") == "wʌn hˈʌndɹɪd tuːhˈʌndɹɪd"


def test_trailing_z_is_attached():
    assert repair_phonemes("kˈæts z.", "en-us") == "kˈætsz."
    assert repair_phonemes("kˈæts z", "en-us") == "kˈætsz"
    assert repair_phonemes("kˈæts zˈuː", "en-us") == "kˈæts zˈuː"


def test_ninety_flap_is_us_only():
    assert repair_phonemes("nˈaɪnti", "en-us") == "nˈaɪndi"
    assert repair_phonemes("nˈaɪnti", "en-gb") == "nˈaɪnti"
    assert repair_phonemes("nˈaɪntiːn", "en-us") == "nˈaɪntiːn"


def test_post_processor_drops_out_of_vocabulary_symbols():
    processor = PhonemePostProcessor(DEFAULT_VOCABULARY)
    phonemes = processor.process(["həlˈoʊ☃", "wˈɜːld."], "en-us")
    assert phonemes == "həlˈoʊ wˈɜːld."
    assert all(ch in DEFAULT_VOCABULARY for ch in phonemes)


def test_phonemes_to_tokens_normalizes_before_phonemizing():
    phonemizer = FakePhonemizer()
    result = phonemes_to_tokens("Dr. Smith", phonemizer, "en-us")

    assert phonemizer.calls == [("Doctor Smith", "en-us")]
    assert result.text == "Dr. Smith"
    assert result.phonemes == "doctoɹ smith"
    assert result.tokens == DEFAULT_VOCABULARY.tokenize("doctoɹ smith")


def test_phonemes_to_tokens_matches_known_ids():
    result = phonemes_to_tokens("hello", FakePhonemizer(["həlˈoʊ wˈɜːld."]))
    assert len(result.tokens) == 14
    assert result.tokens[0] == DEFAULT_VOCABULARY.id_of("h")
    assert result.tokens[-1] == DEFAULT_VOCABULARY.id_of(".")


def test_empty_text_gives_no_tokens():
    result = phonemes_to_tokens("", FakePhonemizer([""]))
    assert result.phonemes == ""
    assert result.tokens == []


def test_phonemizer_failure_propagates():
    phonemizer = MagicMock()
    phonemizer.phonemize.side_effect = PhonemizationError("no such voice", language="xx")

    with pytest.raises(PhonemizationError) as excinfo:
        phonemes_to_tokens("hello", phonemizer, "xx")
    assert excinfo.value.language == "xx"
