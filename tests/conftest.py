"""
Shared fixtures for the Kokoro TTS tests.

The phonemizer and inference engine are replaced by deterministic fakes so the
pipeline can run without espeak-ng or model files.
"""

import logging
import os

import numpy as np
import pytest

# No JSONL file sink during tests
os.environ["LOG_JSONL_PATH"] = ""

from kokoro_tts.tts.engines.base import BaseInferenceEngine, BasePhonemizer
from kokoro_tts.tts.voicepack import VoicePack


class FakePhonemizer(BasePhonemizer):
    """Returns fixed segments, or the lowercased input when none are given."""

    def __init__(self, segments=None):
        self.segments = segments
        self.calls = []

    def phonemize(self, text, language):
        self.calls.append((text, language))
        if self.segments is None:
            return [text.lower()]
        return list(self.segments)


class RampEngine(BaseInferenceEngine):
    """Returns a -0.5..0.5 ramp with ``samples_per_token`` samples per input token."""

    def __init__(self, samples_per_token=100):
        self.samples_per_token = samples_per_token
        self.calls = []

    def infer(self, tokens, style, speed):
        self.calls.append((tuple(tokens), style, speed))
        return np.linspace(-0.5, 0.5, len(tokens) * self.samples_per_token, dtype=np.float32)


@pytest.fixture
def fake_phonemizer():
    return FakePhonemizer()


@pytest.fixture
def ramp_engine():
    return RampEngine()


def make_voicepack(rows=64):
    # Row i is filled with i * 256 + column so the selected row is easy to identify
    return VoicePack(np.arange(rows * 256, dtype=np.float32).reshape(rows, 256))


@pytest.fixture
def voicepack():
    return make_voicepack()


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """init_logging() replaces root handlers; put the originals back after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
