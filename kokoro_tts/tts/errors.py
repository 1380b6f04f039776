"""Custom exceptions for the TTS pipeline."""


class TTSError(Exception):
    """Base class for TTS errors"""
    pass


class ConfigurationError(TTSError):
    """Invalid TTS configuration, or synthesis requested before assets are loaded"""
    pass


class EngineLoadError(TTSError):
    """Error loading the ONNX model or the voicepack from disk"""
    pass


class PhonemizationError(TTSError):
    """The external phonemizer failed or does not support the requested language"""

    def __init__(self, message: str, language: str = "en-us"):
        super().__init__(message)
        self.language = language


class IndexRangeError(TTSError, IndexError):
    """Raised when an utterance is too long for the loaded voicepack.

    The style vector is selected by total token count, so a sequence longer
    than the voicepack's row count has no style to condition on.
    """

    def __init__(self, length: int, rows: int):
        self.length = length
        self.rows = rows
        super().__init__(
            f"Token sequence of length {length} exceeds voicepack rows ({rows})"
        )


class SynthesisError(TTSError):
    """Error during audio synthesis"""
    pass


class InferenceError(SynthesisError):
    """The inference engine failed while processing a chunk."""

    def __init__(self, message: str, chunk_index: int | None = None):
        super().__init__(message)
        self.chunk_index = chunk_index


class TTSWriteError(TTSError):
    """Exception raised when TTS fails to write output file."""
    pass
