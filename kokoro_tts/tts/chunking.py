"""
Chunk planning for long utterances.

The model cannot take arbitrarily long token tensors, so the wrapped sequence
is cut into fixed-size windows that are synthesized one after another. The
style vector is chosen once from the full wrapped length and shared by every
window, so the voice stays constant across chunk boundaries.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError
from .vocab import PAD_ID
from .voicepack import VoicePack

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InferenceChunk:
    index: int
    tokens: Tuple[int, ...]
    style: np.ndarray
    speed: float
    is_last: bool

    def __len__(self) -> int:
        return len(self.tokens)


def wrap_tokens(tokens: Sequence[int]) -> List[int]:
    return [PAD_ID, *tokens, PAD_ID]


def plan_chunks(
    tokens: Sequence[int],
    voicepack: VoicePack,
    speed: float,
    max_chunk_size: int,
) -> List[InferenceChunk]:
    """Split ``tokens`` (unwrapped) into inference windows sharing one style vector.

    Raises IndexRangeError when the wrapped sequence is longer than the
    voicepack has rows for.
    """
    if max_chunk_size < 1:
        raise ConfigurationError(f"max_chunk_size must be at least 1, got {max_chunk_size}")

    wrapped = wrap_tokens(tokens)
    style = voicepack.style_for(len(wrapped))

    starts = range(0, len(wrapped), max_chunk_size)
    last = len(starts) - 1
    chunks = [
        InferenceChunk(
            index=i,
            tokens=tuple(wrapped[start:start + max_chunk_size]),
            style=style,
            speed=speed,
            is_last=i == last,
        )
        for i, start in enumerate(starts)
    ]
    logger.debug(
        f"Planned {len(chunks)} chunk(s) for {len(wrapped)} tokens (style row {len(wrapped) - 1})",
        extra={"subsys": "tts.chunking", "event": "plan"},
    )
    return chunks
