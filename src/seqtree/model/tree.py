"""Prefix tree of symbol windows with per-node outcome statistics."""

import json
import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .types import Decision, NodeStats, NodeView, decide

logger = logging.getLogger(__name__)

ROOT_ID = 0
ROOT_SYMBOL = -1

NodeObserver = Callable[[NodeView], None]


@dataclass
class TreeNode:
    """Arena record for one node. Children map symbol -> child id."""

    id: int
    symbol: int
    weight: int = 0
    children: dict[int, int] = field(default_factory=dict)
    stats: NodeStats = field(default_factory=NodeStats)
    synthesis: Decision = Decision.NONE

    def view(self) -> NodeView:
        return NodeView(
            id=self.id,
            symbol=self.symbol,
            weight=self.weight,
            synthesis=str(self.synthesis),
            buy_wins=self.stats.buy_wins,
            sell_wins=self.stats.sell_wins,
            hold_count=self.stats.hold_count,
        )


class PrefixDecisionTree:
    """Prefix tree keyed by symbol sequences.

    Nodes live in a list indexed by id, so ids are dense and assigned in
    creation order. The tree only grows.

    Weight is incremented on every node an insertion walks through, but
    outcome stats and the decision are only updated at the node where the
    insertion ends. Decisions at interior nodes are therefore not meaningful;
    query at the trained depth.

    ``to_dict`` walks the tree without recursion, but ``to_json`` and
    ``TreeSnapshot.from_json`` go through the json module, which nests one
    level per node. Engine configs cap sequence length for that reason.
    """

    def __init__(self, confidence_threshold: float = 0.70) -> None:
        self.confidence_threshold = confidence_threshold
        self._nodes: list[TreeNode] = [TreeNode(id=ROOT_ID, symbol=ROOT_SYMBOL)]
        self._observer: NodeObserver | None = None

    def set_observer(self, observer: NodeObserver | None) -> None:
        """Set callback invoked with a view of every newly created node."""
        self._observer = observer

    def node_count(self) -> int:
        """Total nodes, including the root."""
        return len(self._nodes)

    @property
    def root(self) -> NodeView:
        return self._nodes[ROOT_ID].view()

    def insert(
        self,
        sequence: Sequence[int],
        buy_profitable: bool,
        sell_profitable: bool,
    ) -> None:
        """Insert a symbol sequence with its outcome labels.

        Args:
            sequence: Symbols along the path (empty is a no-op)
            buy_profitable: A buy at the sequence end would have hit its target
            sell_profitable: A sell at the sequence end would have hit its target
        """
        if not sequence:
            return

        current = self._nodes[ROOT_ID]
        for symbol in sequence:
            child_id = current.children.get(symbol)
            if child_id is None:
                current = self._create_child(current, symbol)
            else:
                current = self._nodes[child_id]
            current.weight += 1

        current.stats.record(buy_profitable, sell_profitable)
        current.synthesis = decide(
            current.weight,
            current.stats.buy_wins,
            current.stats.sell_wins,
            self.confidence_threshold,
        )

    def query(self, sequence: Sequence[int]) -> Decision:
        """Decision cached at the node reached by ``sequence``.

        Returns NONE for an empty sequence or one the tree has never seen.
        """
        if not sequence:
            return Decision.NONE
        node = self._walk(sequence)
        if node is None:
            return Decision.NONE
        return node.synthesis

    def find(self, sequence: Sequence[int]) -> NodeView | None:
        """View of the node reached by ``sequence`` (root if empty)."""
        node = self._walk(sequence)
        return node.view() if node is not None else None

    def to_dict(self) -> dict:
        """Snapshot as nested dicts, children in ascending symbol order."""
        root = self._nodes[ROOT_ID]
        root_dict = self._node_dict(root)

        stack = [(root, root_dict)]
        while stack:
            node, node_dict = stack.pop()
            for symbol in sorted(node.children):
                child = self._nodes[node.children[symbol]]
                child_dict = self._node_dict(child)
                node_dict["children"].append(child_dict)
                stack.append((child, child_dict))

        return {"root": root_dict}

    def to_json(self) -> str:
        """Compact JSON snapshot."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    def _create_child(self, parent: TreeNode, symbol: int) -> TreeNode:
        node = TreeNode(id=len(self._nodes), symbol=symbol)
        self._nodes.append(node)
        parent.children[symbol] = node.id

        if self._observer is not None:
            try:
                self._observer(node.view())
            except Exception as e:
                logger.exception(f"Node observer error: {e}")

        return node

    def _walk(self, sequence: Sequence[int]) -> TreeNode | None:
        current = self._nodes[ROOT_ID]
        for symbol in sequence:
            child_id = current.children.get(symbol)
            if child_id is None:
                return None
            current = self._nodes[child_id]
        return current

    def _node_dict(self, node: TreeNode) -> dict:
        return {
            "id": node.id,
            "symbol": node.symbol,
            "weight": node.weight,
            "synthesis": str(node.synthesis),
            "stats": node.stats.to_dict(),
            "children": [],
        }
