"""Decision labels, node statistics and read-only node views."""

from dataclasses import dataclass
from enum import Enum

# Ratio above which a non-confident node still reports HOLD
HOLD_RATIO = 0.4


class Decision(Enum):
    """Decision cached at a tree node."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"
    NONE = "NONE"

    def __str__(self) -> str:
        return self.value


class Side(Enum):
    """Trade direction checked by the profitability oracle."""

    BUY = "buy"
    SELL = "sell"


@dataclass
class NodeStats:
    """Outcome counters for insertions that ended at a node."""

    buy_wins: int = 0
    sell_wins: int = 0
    hold_count: int = 0

    def record(self, buy_profitable: bool, sell_profitable: bool) -> None:
        """Record one labeled outcome.

        Both flags may be set; hold is counted only when neither is.
        """
        if buy_profitable:
            self.buy_wins += 1
        if sell_profitable:
            self.sell_wins += 1
        if not buy_profitable and not sell_profitable:
            self.hold_count += 1

    def to_dict(self) -> dict:
        return {
            "buy_wins": self.buy_wins,
            "sell_wins": self.sell_wins,
            "hold_count": self.hold_count,
        }


@dataclass(frozen=True)
class NodeView:
    """Snapshot of a tree node, safe to keep after the tree grows.

    Args:
        id: Node id (root is 0)
        symbol: Edge symbol (-1 at root)
        weight: Insertions that passed through the node
        synthesis: Decision label as its output string
        buy_wins: Terminal insertions where buying was profitable
        sell_wins: Terminal insertions where selling was profitable
        hold_count: Terminal insertions where neither side was
    """

    id: int
    symbol: int
    weight: int
    synthesis: str
    buy_wins: int
    sell_wins: int
    hold_count: int

    def to_dict(self) -> dict:
        """Observer payload."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "weight": self.weight,
            "synthesis": self.synthesis,
            "stats": {
                "buy_wins": self.buy_wins,
                "sell_wins": self.sell_wins,
                "hold_count": self.hold_count,
            },
        }


def decide(weight: int, buy_wins: int, sell_wins: int, threshold: float) -> Decision:
    """Derive a node's decision from its counters.

    BUY is tested before SELL, so it wins when both ratios clear the threshold.

    Args:
        weight: Insertions that passed through the node
        buy_wins: Profitable buy outcomes
        sell_wins: Profitable sell outcomes
        threshold: Confidence threshold for BUY/SELL

    Returns:
        Decision label
    """
    if weight == 0:
        return Decision.NONE

    buy_ratio = buy_wins / weight
    sell_ratio = sell_wins / weight

    if buy_ratio > threshold:
        return Decision.BUY
    if sell_ratio > threshold:
        return Decision.SELL
    if buy_ratio > HOLD_RATIO or sell_ratio > HOLD_RATIO:
        return Decision.HOLD
    return Decision.NONE
