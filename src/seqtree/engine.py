"""Engine tying bars, the quantizer and the prefix tree together."""

import logging
from collections import deque
from pathlib import Path
from typing import Iterable

import pandas as pd

from .core import EngineConfig
from .data import Bar, bars_from_frame, load_bars_csv
from .model import Decision, NodeObserver, PrefixDecisionTree, Quantizer, Side

logger = logging.getLogger(__name__)


class Engine:
    """Trains a prefix decision tree on history and scores streamed bars.

    Training slides a window of ``sequence_length`` symbols over the history
    and labels each window by whether a buy or sell entered at the next bar's
    close would have touched the take-profit level within ``lookahead_days``.
    Streaming keeps the last ``sequence_length`` symbols and looks them up.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()

        errors = self.config.validate()
        if errors:
            raise ValueError(f"Invalid engine config: {'; '.join(errors)}")

        self.quantizer = Quantizer(self.config.num_bins)
        self.tree = PrefixDecisionTree(self.config.confidence_threshold)

        self._bars: list[Bar] = []
        self._symbols: list[int] = []
        self._window: deque[int] = deque(maxlen=self.config.sequence_length)

    @property
    def bars(self) -> list[Bar]:
        return list(self._bars)

    @property
    def symbols(self) -> list[int]:
        """Symbol per bar transition (one fewer than bars)."""
        return list(self._symbols)

    @property
    def window(self) -> list[int]:
        """Most recent streamed symbols, oldest first."""
        return list(self._window)

    def set_node_observer(self, observer: NodeObserver | None) -> None:
        """Forward node-creation events from the tree to ``observer``."""
        self.tree.set_observer(observer)

    def tree_json(self) -> str:
        return self.tree.to_json()

    def load_bars(self, source: str | Path) -> bool:
        """Load history from a CSV file and fit the quantizer.

        Args:
            source: CSV path (header, then date,open,high,low,close,volume)

        Returns:
            True if at least one bar was loaded
        """
        try:
            bars = load_bars_csv(source)
        except OSError as e:
            logger.error(f"Failed to open bar file {source}: {e}")
            return False

        if not bars:
            logger.error(f"No bars loaded from {source}")
            return False

        return self.set_bars(bars)

    def set_bars(self, bars: Iterable[Bar] | pd.DataFrame) -> bool:
        """Replace history with in-memory bars and fit the quantizer.

        Args:
            bars: Bars in chronological order, or a DataFrame with OHLCV columns

        Returns:
            True if at least one bar was provided
        """
        if isinstance(bars, pd.DataFrame):
            bars = bars_from_frame(bars)
        bars = list(bars)

        if not bars:
            logger.error("No bars provided")
            return False

        self._bars = bars
        self.quantizer.fit(self._bars)
        self._symbols = self.quantizer.symbolize(self._bars)
        self._window.clear()

        logger.info(f"Loaded {len(self._bars)} bars")
        return True

    def profitable(self, anchor: int, side: Side) -> bool:
        """Whether a trade entered at ``anchor``'s close hits its target.

        Scans the closes after the anchor, up to ``lookahead_days`` bars from
        it, and succeeds on the first touch of the take-profit level.

        Args:
            anchor: Index of the entry bar
            side: Trade direction

        Returns:
            True if any close in the horizon reaches the target
        """
        if not isinstance(side, Side):
            raise ValueError(f"Unknown side: {side!r}")
        if anchor < 0 or anchor >= len(self._bars):
            return False

        if not self._bars[anchor].has_valid_close:
            return False
        entry = self._bars[anchor].close

        target = self.config.take_profit_threshold
        end = min(anchor + self.config.lookahead_days, len(self._bars))

        for i in range(anchor + 1, end):
            return_pct = (self._bars[i].close - entry) / entry
            if side is Side.BUY and return_pct >= target:
                return True
            if side is Side.SELL and return_pct <= -target:
                return True

        return False

    def train(self) -> int:
        """Insert every labeled window of the loaded history into the tree.

        Returns:
            Number of windows inserted (0 if there is not enough data)
        """
        length = self.config.sequence_length
        if len(self._bars) < self.config.min_training_bars:
            logger.warning(
                f"Insufficient data for training: {len(self._bars)} bars, "
                f"need {self.config.min_training_bars}"
            )
            return 0

        self._symbols = self.quantizer.symbolize(self._bars)

        inserted = 0
        for i in range(len(self._symbols) - length):
            window = self._symbols[i : i + length]
            anchor = i + length
            self.tree.insert(
                window,
                self.profitable(anchor, Side.BUY),
                self.profitable(anchor, Side.SELL),
            )
            inserted += 1

        logger.info(
            f"Trained on {inserted} windows, tree has {self.tree.node_count()} nodes"
        )
        return inserted

    def process_new_bar(self, bar: Bar) -> Decision:
        """Append a bar and return the decision for the latest window.

        Returns NONE until ``sequence_length`` symbols have been streamed.
        """
        self._bars.append(bar)
        if len(self._bars) < 2:
            return Decision.NONE

        log_return = Quantizer.log_return(self._bars[-2].close, bar.close)
        symbol = self.quantizer.transform(log_return)
        self._symbols.append(symbol)
        self._window.append(symbol)

        if len(self._window) == self.config.sequence_length:
            return self.tree.query(list(self._window))
        return Decision.NONE

    def process_new_bars(self, bars: Iterable[Bar]) -> list[Decision]:
        """Stream several bars, returning one decision per bar."""
        return [self.process_new_bar(bar) for bar in bars]
