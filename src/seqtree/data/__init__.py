"""Bar data type and loaders."""

from .bar import Bar
from .loader import bars_from_frame, load_bars_csv

__all__ = [
    "Bar",
    "bars_from_frame",
    "load_bars_csv",
]
