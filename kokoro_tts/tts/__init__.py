"""
Kokoro text-to-speech pipeline.

Heavy modules (onnxruntime, phonemizer) load lazily so that importing the
package for its error types or the normalizer stays cheap.
"""

__all__ = [
    "KokoroTTS",
    "SpeechResult",
]


def __getattr__(name):
    if name in __all__:
        from . import kokoro
        return getattr(kokoro, name)
    raise AttributeError(name)
