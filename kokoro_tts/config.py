"""Configuration loading and environment setup."""
from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .tts.errors import ConfigurationError
from .utils.env import get_float, get_int, get_str
from .utils.logging import get_logger

logger = get_logger(__name__)

SAMPLE_RATE = 24000
STYLE_DIM = 256

DEFAULT_MODEL_PATH = "models/kokoro-v0_19.onnx"
DEFAULT_VOICE_PATH = "static/af.npy"
DEFAULT_LANGUAGE = "en-us"
DEFAULT_SPEED = 1.0
DEFAULT_MAX_CHUNK_TOKENS = 150
# ~10 ms of tail artifact at the model's 24 kHz output
DEFAULT_TRIM_SAMPLES = 240


@dataclass(frozen=True)
class TTSConfig:
    model_path: Path = Path(DEFAULT_MODEL_PATH)
    voice_path: Path = Path(DEFAULT_VOICE_PATH)
    language: str = DEFAULT_LANGUAGE
    speed: float = DEFAULT_SPEED
    max_chunk_tokens: int = DEFAULT_MAX_CHUNK_TOKENS
    trim_samples: int = DEFAULT_TRIM_SAMPLES
    sample_rate: int = SAMPLE_RATE

    def validate(self) -> "TTSConfig":
        if self.speed <= 0:
            raise ConfigurationError(f"speed must be positive, got {self.speed}")
        if self.max_chunk_tokens < 1:
            raise ConfigurationError(
                f"max_chunk_tokens must be at least 1, got {self.max_chunk_tokens}"
            )
        if self.trim_samples < 0:
            raise ConfigurationError(
                f"trim_samples must not be negative, got {self.trim_samples}"
            )
        if not self.language:
            raise ConfigurationError("language must not be empty")
        return self

    def with_overrides(self, **overrides) -> "TTSConfig":
        """Return a copy with every non-None override applied (CLI flags win over env)."""
        values = {k: v for k, v in overrides.items() if v is not None}
        for key in ("model_path", "voice_path"):
            if key in values:
                values[key] = Path(values[key])
        return replace(self, **values)


def load_config(dotenv_path: Optional[Path] = None) -> TTSConfig:
    """Build a TTSConfig from the environment, reading .env first when present."""
    load_dotenv(dotenv_path=dotenv_path or Path.cwd() / ".env", verbose=False)

    config = TTSConfig(
        model_path=Path(get_str("KOKORO_MODEL_PATH", DEFAULT_MODEL_PATH)),
        voice_path=Path(get_str("KOKORO_VOICE_PATH", DEFAULT_VOICE_PATH)),
        language=get_str("TTS_LANGUAGE", DEFAULT_LANGUAGE),
        speed=get_float("TTS_SPEED", DEFAULT_SPEED),
        max_chunk_tokens=get_int("KOKORO_MAX_CHUNK_TOKENS", DEFAULT_MAX_CHUNK_TOKENS),
        trim_samples=get_int("KOKORO_TRIM_SAMPLES", DEFAULT_TRIM_SAMPLES),
    )
    logger.debug(
        "Loaded TTS configuration",
        extra={"subsys": "config", "event": "loaded", "detail": {
            "model_path": str(config.model_path),
            "voice_path": str(config.voice_path),
            "language": config.language,
            "max_chunk_tokens": config.max_chunk_tokens,
            "trim_samples": config.trim_samples,
        }},
    )
    return config
