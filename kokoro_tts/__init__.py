"""Kokoro ONNX text-to-speech: text in, 24 kHz mono WAV out."""

__version__ = "0.1.0"
