"""Tests for log-return quantizer."""

import math

import numpy as np
import pytest

from seqtree.data import Bar
from seqtree.model import Quantizer


def make_bars(closes: list[float], volume: float = 1000.0) -> list[Bar]:
    """Create bars from close prices."""
    return [
        Bar(open=c, high=c * 1.01, low=c * 0.99, close=c, volume=volume)
        for c in closes
    ]


class TestLogReturn:
    """Tests for Quantizer.log_return."""

    def test_known_value(self) -> None:
        assert Quantizer.log_return(100.0, 105.0) == pytest.approx(0.04879016417, abs=1e-6)

    @pytest.mark.parametrize(
        "prev,curr",
        [(100.0, 105.0), (50.0, 25.0), (1.0, 1.0), (0.001, 1000.0), (123.45, 123.46)],
    )
    def test_matches_natural_log(self, prev: float, curr: float) -> None:
        assert abs(Quantizer.log_return(prev, curr) - math.log(curr / prev)) < 1e-9

    @pytest.mark.parametrize(
        "prev,curr",
        [
            (0.0, 100.0),
            (100.0, 0.0),
            (-1.0, 100.0),
            (100.0, -5.0),
            (math.nan, 1.0),
            (1.0, math.inf),
        ],
    )
    def test_invalid_prices_return_zero(self, prev: float, curr: float) -> None:
        assert Quantizer.log_return(prev, curr) == 0.0


class TestFit:
    """Tests for quantile edge fitting."""

    def test_initial_edges_are_zero(self) -> None:
        q = Quantizer(10)
        assert q.edges.tolist() == [0.0] * 9
        assert not q.is_fitted

    def test_quantile_indexing(self) -> None:
        returns = [0.01, -0.02, 0.03, -0.04, 0.05, -0.06, 0.07, -0.08]
        closes = [100.0]
        for r in returns:
            closes.append(closes[-1] * math.exp(r))

        q = Quantizer(4)
        q.fit(make_bars(closes))

        # sorted: -0.08 -0.06 -0.04 -0.02 0.01 0.03 0.05 0.07 -> indices 2, 4, 6
        assert q.edges == pytest.approx([-0.04, 0.01, 0.05])
        assert q.is_fitted

    def test_edges_non_decreasing(self) -> None:
        closes = [100 + i + (i % 10) for i in range(100)]
        q = Quantizer(10)
        q.fit(make_bars(closes))
        assert np.all(np.diff(q.edges) >= 0)

    def test_too_few_bars_is_noop(self) -> None:
        q = Quantizer(5)
        q.fit(make_bars([100.0]))
        q.fit([])
        assert q.edges.tolist() == [0.0] * 4
        assert not q.is_fitted

    def test_refit_is_idempotent(self) -> None:
        bars = make_bars([100 + i + (i % 7) for i in range(50)])
        q = Quantizer(10)
        q.fit(bars)
        first = q.edges
        q.fit(bars)
        assert q.edges.tolist() == first.tolist()

    def test_flat_prices_give_duplicate_edges(self) -> None:
        q = Quantizer(5)
        q.fit(make_bars([100.0] * 20))
        assert q.edges.tolist() == [0.0] * 4
        assert q.transform(0.0) == 4
        assert q.transform(-1e-9) == 0

    def test_rising_prices_put_zero_in_lowest_bin(self) -> None:
        q = Quantizer(10)
        q.fit(make_bars([float(c) for c in range(100, 200)]))
        assert np.all(q.edges > 0)
        assert q.transform(0.0) == 0


class TestTransform:
    """Tests for mapping returns to symbols."""

    def test_symbol_range(self) -> None:
        bars = make_bars([100 + i + (i % 10) for i in range(100)])
        q = Quantizer(10)
        q.fit(bars)
        for prev, curr in zip(bars[:-1], bars[1:]):
            symbol = q.transform(Quantizer.log_return(prev.close, curr.close))
            assert 0 <= symbol < 10

    def test_determinism(self) -> None:
        q = Quantizer(10)
        q.fit(make_bars([103.0 + i for i in range(100)]))
        assert q.transform(0.05) == q.transform(0.05)

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_maps_to_middle(self, value: float) -> None:
        assert Quantizer(10).transform(value) == 5
        assert Quantizer(7).transform(value) == 3

    def test_value_on_edge_goes_to_upper_bin(self) -> None:
        returns = [0.01, -0.02, 0.03, -0.04, 0.05, -0.06, 0.07, -0.08]
        closes = [100.0]
        for r in returns:
            closes.append(closes[-1] * math.exp(r))
        q = Quantizer(4)
        q.fit(make_bars(closes))

        edges = q.edges
        assert q.transform(edges[0]) == 1
        assert q.transform(edges[0] - 1e-6) == 0
        assert q.transform(edges[-1]) == 3
        assert q.transform(10.0) == 3
        assert q.transform(-10.0) == 0

    def test_unfitted_splits_on_zero(self) -> None:
        q = Quantizer(10)
        assert q.transform(-0.01) == 0
        assert q.transform(0.0) == 9
        assert q.transform(0.01) == 9

    def test_symbolize_length(self) -> None:
        bars = make_bars([100.0, 101.0, 99.0, 102.0])
        q = Quantizer(4)
        q.fit(bars)
        symbols = q.symbolize(bars)
        assert len(symbols) == 3
        assert all(0 <= s < 4 for s in symbols)
