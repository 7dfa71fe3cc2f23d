"""Parsed form of the tree JSON snapshot."""

import json
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from .types import Decision, NodeStats


@dataclass
class SnapshotNode:
    """One node of a parsed snapshot."""

    id: int
    symbol: int
    weight: int
    synthesis: Decision
    stats: NodeStats
    children: list["SnapshotNode"] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "weight": self.weight,
            "synthesis": str(self.synthesis),
            "stats": self.stats.to_dict(),
            "children": [c.to_dict() for c in self.children],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SnapshotNode":
        """Create SnapshotNode from dictionary.

        Raises:
            ValueError: If a field is missing or has the wrong shape
        """
        try:
            stats = data["stats"]
            return cls(
                id=int(data["id"]),
                symbol=int(data["symbol"]),
                weight=int(data["weight"]),
                synthesis=Decision(data["synthesis"]),
                stats=NodeStats(
                    buy_wins=int(stats["buy_wins"]),
                    sell_wins=int(stats["sell_wins"]),
                    hold_count=int(stats["hold_count"]),
                ),
                children=[cls.from_dict(c) for c in data["children"]],
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed snapshot node: {e}") from e

    def iter_nodes(self) -> Iterator["SnapshotNode"]:
        """Pre-order traversal starting at this node."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def find(self, sequence: Sequence[int]) -> "SnapshotNode | None":
        """Descendant reached by following ``sequence`` from this node."""
        current = self
        for symbol in sequence:
            current = next((c for c in current.children if c.symbol == symbol), None)
            if current is None:
                return None
        return current


@dataclass
class TreeSnapshot:
    """Whole-tree snapshot, ``{"root": <node>}`` on the wire."""

    root: SnapshotNode

    def node_count(self) -> int:
        return sum(1 for _ in self.root.iter_nodes())

    def to_dict(self) -> dict:
        return {"root": self.root.to_dict()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: dict) -> "TreeSnapshot":
        if not isinstance(data, dict) or "root" not in data:
            raise ValueError("Snapshot must be an object with a 'root' node")
        return cls(root=SnapshotNode.from_dict(data["root"]))

    @classmethod
    def from_json(cls, text: str) -> "TreeSnapshot":
        """Parse a snapshot produced by ``PrefixDecisionTree.to_json``.

        Raises:
            ValueError: If the text is not valid JSON or not a tree snapshot
        """
        return cls.from_dict(json.loads(text))
