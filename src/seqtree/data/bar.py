"""Bar OHLCV data type."""

import math
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Bar:
    """Single OHLCV bar."""

    open: float
    high: float
    low: float
    close: float
    volume: float
    timestamp: str = ""  # Opaque, display only

    @property
    def has_valid_close(self) -> bool:
        """True if close can be used in a log-return."""
        return math.isfinite(self.close) and self.close > 0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)
