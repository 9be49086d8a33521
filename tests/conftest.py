"""Shared fixtures: stages with hand-placed obstacles instead of noise."""

from __future__ import annotations

from typing import Any, Callable

import numpy as np
import pytest

from environment.stage import Stage


class MaskStage(Stage):
    """Stage whose terrain value is 1 inside ``blocked`` and 0 elsewhere."""

    def __init__(self, width: int, height: int, blocked: Callable[[np.ndarray, np.ndarray], Any], **kwargs: Any) -> None:
        super().__init__(width, height, threshold=0.5, **kwargs)
        self._blocked = blocked

    def value(self, x: Any, y: Any = None) -> Any:
        if y is None:
            x, y = x
        result = np.where(
            self._blocked(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64)),
            1.0,
            0.0,
        )
        if result.ndim == 0:
            return float(result)
        return result


@pytest.fixture
def mask_stage() -> Callable[..., Stage]:
    def build(width: int, height: int, blocked: Callable[[np.ndarray, np.ndarray], Any], **kwargs: Any) -> Stage:
        return MaskStage(width, height, blocked, **kwargs)

    return build
