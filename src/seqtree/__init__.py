"""Sequential pattern decision engine over quantized OHLCV returns."""

__version__ = "0.1.0"

from .core import EngineConfig, load_config
from .data import Bar, bars_from_frame, load_bars_csv
from .engine import Engine
from .model import (
    Decision,
    NodeView,
    PrefixDecisionTree,
    Quantizer,
    Side,
    TreeSnapshot,
)

__all__ = [
    "Bar",
    "Decision",
    "Engine",
    "EngineConfig",
    "NodeView",
    "PrefixDecisionTree",
    "Quantizer",
    "Side",
    "TreeSnapshot",
    "bars_from_frame",
    "load_bars_csv",
    "load_config",
]
