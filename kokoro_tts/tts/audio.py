"""
Per-chunk synthesis and float-to-PCM conversion.

Chunks are synthesized strictly in order. Every chunk except the last loses a
fixed tail of samples, which is where the model leaves an audible artifact at
an internal boundary. The joined signal is then quantized to 16-bit PCM with a
gain that can only attenuate.
"""
from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from .chunking import InferenceChunk
from .engines.base import BaseInferenceEngine
from .errors import InferenceError

logger = logging.getLogger(__name__)

PCM_MAX = 32767


def trim_tail(samples: np.ndarray, trim_samples: int) -> np.ndarray:
    if trim_samples <= 0:
        return samples
    return samples[:max(samples.size - trim_samples, 0)]


def synthesize_chunks(
    chunks: Sequence[InferenceChunk],
    engine: BaseInferenceEngine,
    trim_samples: int,
) -> np.ndarray:
    """Run the engine over ``chunks`` in order and join the trimmed outputs."""
    pieces: List[np.ndarray] = []
    for chunk in chunks:
        try:
            audio = engine.infer(chunk.tokens, chunk.style, chunk.speed)
        except InferenceError as e:
            if e.chunk_index is None:
                e.chunk_index = chunk.index
            raise
        except Exception as e:
            raise InferenceError(
                f"Inference failed on chunk {chunk.index}: {e}", chunk_index=chunk.index
            ) from e

        audio = np.asarray(audio, dtype=np.float32).reshape(-1)
        if not chunk.is_last:
            audio = trim_tail(audio, trim_samples)
        logger.debug(
            f"Chunk {chunk.index}: {len(chunk)} tokens -> {audio.size} samples",
            extra={"subsys": "tts.audio", "event": "chunk"},
        )
        pieces.append(audio)

    if not pieces:
        return np.zeros(0, dtype=np.float32)
    return np.concatenate(pieces)


def quantize_pcm16(samples: np.ndarray) -> np.ndarray:
    """Map float samples (full scale = 1.0) to int16 without ever amplifying.

    Gain is ``min(1, 1 / peak)``; silence keeps gain 1. Dividing by the peak
    makes the peak sample exactly +-1.0, so it lands on +-32767.
    """
    audio = np.asarray(samples, dtype=np.float64).reshape(-1)
    peak = float(np.max(np.abs(audio))) if audio.size else 0.0
    if peak > 1.0:
        audio = audio / peak
    pcm = np.floor(audio * PCM_MAX)
    return np.clip(pcm, -PCM_MAX - 1, PCM_MAX).astype(np.int16)


class AudioAssembler:
    def __init__(self, engine: BaseInferenceEngine, trim_samples: int):
        self.engine = engine
        self.trim_samples = trim_samples

    def assemble(self, chunks: Sequence[InferenceChunk]) -> np.ndarray:
        return quantize_pcm16(synthesize_chunks(chunks, self.engine, self.trim_samples))
