"""Quantile binning of close-to-close log-returns into discrete symbols."""

import logging
import math
from typing import Sequence

import numpy as np

from ..data import Bar

logger = logging.getLogger(__name__)


class Quantizer:
    """Maps log-returns to symbols in ``[0, num_bins)``.

    Bin edges are quantiles of the log-returns seen by ``fit``. Until then all
    edges are zero, so any finite return lands in bin 0 (negative) or the last
    bin (zero or positive).
    """

    def __init__(self, num_bins: int = 10) -> None:
        self.num_bins = num_bins
        self._edges = np.zeros(max(num_bins - 1, 0))
        self._fitted = False

    @staticmethod
    def log_return(prev_close: float, curr_close: float) -> float:
        """Natural log of curr/prev, or 0.0 if either price is unusable."""
        if not (math.isfinite(prev_close) and math.isfinite(curr_close)):
            return 0.0
        if prev_close <= 0 or curr_close <= 0:
            return 0.0
        return math.log(curr_close / prev_close)

    @property
    def edges(self) -> np.ndarray:
        """Copy of the current bin edges (non-decreasing)."""
        return self._edges.copy()

    @property
    def is_fitted(self) -> bool:
        return self._fitted

    def fit(self, bars: Sequence[Bar]) -> None:
        """Set bin edges from the quantiles of consecutive log-returns.

        Edge ``i`` is the sorted return at index ``floor(i / K * N)``. Repeated
        values may produce duplicate edges; that is kept as-is. Fewer than two
        bars leaves the edges unchanged.

        Args:
            bars: Historical bars in chronological order
        """
        if len(bars) < 2:
            return

        returns = np.array(
            [self.log_return(prev.close, curr.close) for prev, curr in zip(bars[:-1], bars[1:])]
        )
        returns = np.sort(returns[np.isfinite(returns)])
        n = len(returns)
        if n == 0:
            return

        edges = []
        for i in range(1, self.num_bins):
            index = min(int(i / self.num_bins * n), n - 1)
            edges.append(returns[index])

        self._edges = np.array(edges, dtype=float)
        self._fitted = True
        logger.debug(f"Fitted {self.num_bins} bins on {n} returns: {self._edges.tolist()}")

    def transform(self, log_return: float) -> int:
        """Bin index for a log-return.

        Returns the number of edges ``<= log_return``, so a value equal to an
        edge falls in the bin above it. Non-finite input maps to the middle bin.
        """
        if not math.isfinite(log_return):
            return self.num_bins // 2
        return int(np.searchsorted(self._edges, log_return, side="right"))

    def symbolize(self, bars: Sequence[Bar]) -> list[int]:
        """Symbols for every consecutive pair of bars (one fewer than bars)."""
        return [
            self.transform(self.log_return(prev.close, curr.close))
            for prev, curr in zip(bars[:-1], bars[1:])
        ]
