"""Mono 16-bit PCM WAV serialization."""
from __future__ import annotations

import io
import logging
from pathlib import Path

import numpy as np
import soundfile as sf

from ..config import SAMPLE_RATE
from .errors import TTSWriteError

logger = logging.getLogger(__name__)


def encode_wav(pcm: np.ndarray, sample_rate: int = SAMPLE_RATE) -> bytes:
    pcm = np.asarray(pcm, dtype=np.int16).reshape(-1)
    buf = io.BytesIO()
    sf.write(buf, pcm, int(sample_rate), format="WAV", subtype="PCM_16")
    return buf.getvalue()


def write_wav(path: Path | str, wav_bytes: bytes) -> Path:
    """Write an encoded WAV to ``path``, creating parent directories."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(wav_bytes)
    except OSError as e:
        raise TTSWriteError(f"Failed to write WAV to {path}: {e}") from e
    logger.debug(
        f"Saved audio to {path} ({len(wav_bytes)} bytes)",
        extra={"subsys": "tts.wav", "event": "write"},
    )
    return path
