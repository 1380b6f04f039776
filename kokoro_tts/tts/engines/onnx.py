import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np
import onnxruntime as ort

from ...config import STYLE_DIM
from ..errors import EngineLoadError, InferenceError
from .base import BaseInferenceEngine

logger = logging.getLogger(__name__)

TOKEN_INPUT_NAMES = ["tokens", "input_ids", "phoneme_ids"]
STYLE_INPUT_NAMES = ["style", "ref_s", "speaker_embedding"]
SPEED_INPUT_NAMES = ["speed", "rate"]
AUDIO_OUTPUT_NAME = "audio"


class OnnxInferenceEngine(BaseInferenceEngine):
    """Kokoro acoustic model + vocoder behind an onnxruntime session."""

    def __init__(self, session: ort.InferenceSession):
        self.sess = session
        input_names: List[str] = [i.name for i in session.get_inputs()]
        output_names: List[str] = [o.name for o in session.get_outputs()]

        def _pick(names: List[str], fallback: str) -> str:
            for n in names:
                if n in input_names:
                    return n
            return fallback

        self.token_name = _pick(TOKEN_INPUT_NAMES, "tokens")
        self.style_name = _pick(STYLE_INPUT_NAMES, "style")
        self.speed_name = _pick(SPEED_INPUT_NAMES, "speed")
        self.output_names: Optional[List[str]] = (
            [AUDIO_OUTPUT_NAME] if AUDIO_OUTPUT_NAME in output_names else None
        )

    @classmethod
    def load(cls, model_path: Path | str) -> "OnnxInferenceEngine":
        """Create the ONNX session once with providers and options."""
        if not Path(model_path).exists():
            raise EngineLoadError(f"ONNX model not found: {model_path}")

        session_options = ort.SessionOptions()
        session_options.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_EXTENDED
        session_options.enable_cpu_mem_arena = True

        # Prefer CUDA if available
        providers = []
        if "CUDAExecutionProvider" in ort.get_available_providers():
            providers.append("CUDAExecutionProvider")
        providers.append("CPUExecutionProvider")

        try:
            session = ort.InferenceSession(str(model_path), session_options, providers=providers)
        except Exception as e:
            raise EngineLoadError(f"Failed to initialize ONNX session: {e}") from e

        logger.debug(
            f"Initialized ONNX session with providers: {providers}",
            extra={"subsys": "tts.onnx", "event": "session.init"},
        )
        return cls(session)

    def infer(self, tokens: Sequence[int], style: np.ndarray, speed: float) -> np.ndarray:
        feeds: Dict[str, np.ndarray] = {
            self.token_name: np.asarray([list(tokens)], dtype=np.int64),
            self.style_name: np.asarray(style, dtype=np.float32).reshape(1, STYLE_DIM),
            self.speed_name: np.asarray([speed], dtype=np.float32),
        }
        try:
            outputs = self.sess.run(self.output_names, feeds)
        except Exception as e:
            raise InferenceError(f"ONNX inference failed: {e}") from e
        return np.asarray(outputs[0], dtype=np.float32).reshape(-1)
