"""
Voicepack loading and style vector lookup.

A voicepack holds one 256-dim style vector per utterance length; the row for
a wrapped token sequence of length L is ``L - 1``.
"""
from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from ..config import STYLE_DIM
from .errors import EngineLoadError, IndexRangeError

logger = logging.getLogger(__name__)


class VoicePack:
    def __init__(self, table: np.ndarray):
        table = np.asarray(table, dtype=np.float32)
        # Stored as (rows, 1, 256) by the upstream export; flatten the middle axis
        if table.ndim == 3 and table.shape[1] == 1:
            table = table[:, 0, :]
        if table.ndim != 2 or table.shape[1] != STYLE_DIM:
            raise EngineLoadError(
                f"Voicepack must have shape (rows, {STYLE_DIM}), got {tuple(table.shape)}"
            )
        self.table = table

    @property
    def rows(self) -> int:
        return int(self.table.shape[0])

    @classmethod
    def load(cls, path: Path | str) -> "VoicePack":
        path = Path(path)
        if not path.exists():
            raise EngineLoadError(f"Voicepack not found: {path}")
        try:
            table = np.load(path, allow_pickle=False)
        except (OSError, ValueError) as e:
            raise EngineLoadError(f"Failed to read voicepack {path}: {e}") from e
        if isinstance(table, np.lib.npyio.NpzFile):
            table.close()
            raise EngineLoadError(f"Voicepack must be a single .npy array, got an archive: {path}")

        pack = cls(table)
        logger.debug(
            f"Loaded voicepack {path.name} with shape {pack.table.shape}",
            extra={"subsys": "tts.voicepack", "event": "loaded"},
        )
        return pack

    def style_for(self, length: int) -> np.ndarray:
        """Return the (1, 256) style vector for a wrapped sequence of ``length`` tokens."""
        if length < 1 or length > self.rows:
            raise IndexRangeError(length, self.rows)
        return self.table[length - 1].reshape(1, STYLE_DIM)
