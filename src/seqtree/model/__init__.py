"""Quantizer, prefix decision tree and their value types."""

from .quantizer import Quantizer
from .snapshot import SnapshotNode, TreeSnapshot
from .tree import NodeObserver, PrefixDecisionTree
from .types import HOLD_RATIO, Decision, NodeStats, NodeView, Side, decide

__all__ = [
    "HOLD_RATIO",
    "Decision",
    "NodeObserver",
    "NodeStats",
    "NodeView",
    "PrefixDecisionTree",
    "Quantizer",
    "Side",
    "SnapshotNode",
    "TreeSnapshot",
    "decide",
]
