"""
Kokoro text-to-speech pipeline.

KokoroTTS owns the loaded model and voicepack for one synthesis request and
drives: normalize -> phonemize -> tokenize -> plan chunks -> infer each chunk
in order -> trim/join -> int16 PCM -> WAV.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import numpy as np

from ..config import DEFAULT_MAX_CHUNK_TOKENS, DEFAULT_TRIM_SAMPLES, SAMPLE_RATE, TTSConfig
from .audio import AudioAssembler
from .chunking import plan_chunks
from .engines.base import BaseInferenceEngine, BasePhonemizer
from .errors import ConfigurationError
from .phonemes import phonemes_to_tokens
from .vocab import DEFAULT_VOCABULARY, Vocabulary
from .voicepack import VoicePack
from .wav import encode_wav, write_wav

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpeechResult:
    sample_rate: int
    pcm: np.ndarray
    phonemes: str
    tokens: List[int]

    @property
    def duration(self) -> float:
        return self.pcm.size / float(self.sample_rate)


class KokoroTTS:
    def __init__(
        self,
        phonemizer: Optional[BasePhonemizer] = None,
        engine: Optional[BaseInferenceEngine] = None,
        voicepack: Optional[VoicePack] = None,
        *,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        max_chunk_tokens: int = DEFAULT_MAX_CHUNK_TOKENS,
        trim_samples: int = DEFAULT_TRIM_SAMPLES,
        sample_rate: int = SAMPLE_RATE,
    ):
        self.phonemizer = phonemizer
        self.engine = engine
        self.voicepack = voicepack
        self.vocabulary = vocabulary
        self.max_chunk_tokens = max_chunk_tokens
        self.trim_samples = trim_samples
        self.sample_rate = sample_rate

    @classmethod
    def from_config(cls, config: TTSConfig, phonemizer: Optional[BasePhonemizer] = None) -> "KokoroTTS":
        """Build a pipeline and load model + voicepack from ``config`` paths."""
        config.validate()
        if phonemizer is None:
            from .engines.espeak import EspeakPhonemizer
            phonemizer = EspeakPhonemizer()
        tts = cls(
            phonemizer=phonemizer,
            max_chunk_tokens=config.max_chunk_tokens,
            trim_samples=config.trim_samples,
            sample_rate=config.sample_rate,
        )
        tts.load_model(config.model_path)
        tts.load_voicepack(config.voice_path)
        return tts

    def load_model(self, model_path: Path | str) -> None:
        from .engines.onnx import OnnxInferenceEngine

        logger.info(f"Loading model from: {model_path}", extra={"subsys": "tts", "event": "model.load"})
        self.engine = OnnxInferenceEngine.load(model_path)

    def load_voicepack(self, voicepack_path: Path | str) -> None:
        logger.info(f"Loading voicepack from: {voicepack_path}", extra={"subsys": "tts", "event": "voicepack.load"})
        self.voicepack = VoicePack.load(voicepack_path)

    def _require_loaded(self) -> None:
        if self.engine is None or self.voicepack is None:
            raise ConfigurationError("Model and voicepack must be loaded before generating speech")
        if self.phonemizer is None:
            raise ConfigurationError("A phonemizer is required before generating speech")

    def generate_speech(self, text: str, language: str = "en-us", speed: float = 1.0) -> SpeechResult:
        self._require_loaded()

        result = phonemes_to_tokens(text, self.phonemizer, language, self.vocabulary)
        chunks = plan_chunks(result.tokens, self.voicepack, speed, self.max_chunk_tokens)
        pcm = AudioAssembler(self.engine, self.trim_samples).assemble(chunks)

        logger.debug(
            f"Synthesized {pcm.size} samples from {len(result.tokens)} tokens in {len(chunks)} chunk(s)",
            extra={"subsys": "tts", "event": "synthesized"},
        )
        return SpeechResult(
            sample_rate=self.sample_rate,
            pcm=pcm,
            phonemes=result.phonemes,
            tokens=result.tokens,
        )

    def generate(self, text: str, language: str = "en-us", speed: float = 1.0) -> bytes:
        """Synthesize ``text`` and return a complete WAV file as bytes."""
        speech = self.generate_speech(text, language, speed)
        return encode_wav(speech.pcm, speech.sample_rate)

    def generate_and_save(
        self, text: str, output_path: Path | str, language: str = "en-us", speed: float = 1.0
    ) -> Path:
        path = write_wav(output_path, self.generate(text, language, speed))
        logger.info(f"Saved audio to {path}", extra={"subsys": "tts", "event": "saved"})
        return path
