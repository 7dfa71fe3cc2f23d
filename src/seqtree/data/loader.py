"""Bar loading from CSV files and DataFrames."""

import logging
from pathlib import Path

import numpy as np
import pandas as pd

from .bar import Bar

logger = logging.getLogger(__name__)

OHLCV_COLUMNS = ["open", "high", "low", "close", "volume"]


def _valid_rows(values: np.ndarray) -> np.ndarray:
    """Mask of rows whose OHLCV fields are all finite and non-negative."""
    with np.errstate(invalid="ignore"):
        return np.isfinite(values).all(axis=1) & (values >= 0).all(axis=1)


def _to_bars(values: np.ndarray, timestamps: list[str]) -> list[Bar]:
    return [
        Bar(
            open=float(row[0]),
            high=float(row[1]),
            low=float(row[2]),
            close=float(row[3]),
            volume=float(row[4]),
            timestamp=ts,
        )
        for row, ts in zip(values, timestamps)
    ]


def load_bars_csv(path: str | Path) -> list[Bar]:
    """Load bars from a CSV file.

    The file has a header row followed by one bar per line with positional
    fields: date, open, high, low, close, volume. Malformed rows are skipped.

    Args:
        path: CSV file path

    Returns:
        Bars in file order (empty if the file holds no usable rows or
        cannot be decoded or tokenized)

    Raises:
        OSError: If the file cannot be opened
    """
    path = Path(path)
    try:
        df = pd.read_csv(path, dtype=str, on_bad_lines="skip", skipinitialspace=True)
    except pd.errors.EmptyDataError:
        logger.warning(f"Empty bar file: {path}")
        return []
    except (UnicodeDecodeError, pd.errors.ParserError) as e:
        logger.warning(f"Unreadable bar file {path}: {e}")
        return []

    if df.shape[1] < 6:
        logger.warning(f"Expected 6 columns in {path}, found {df.shape[1]}")
        return []

    values = df.iloc[:, 1:6].apply(pd.to_numeric, errors="coerce").to_numpy(dtype=float)
    valid = _valid_rows(values)

    skipped = int((~valid).sum())
    if skipped:
        logger.warning(f"Skipped {skipped} malformed rows in {path}")

    timestamps = df.iloc[:, 0].fillna("").astype(str).to_numpy()[valid].tolist()
    return _to_bars(values[valid], timestamps)


def bars_from_frame(df: pd.DataFrame) -> list[Bar]:
    """Convert a DataFrame with OHLCV columns to bars.

    Column names are matched case-insensitively. A ``timestamp`` or ``date``
    column, if present, is carried into ``Bar.timestamp``.

    Args:
        df: Source frame, one row per bar in chronological order

    Returns:
        Bars for every row with finite, non-negative OHLCV values

    Raises:
        ValueError: If any OHLCV column is missing
    """
    columns = {str(c).lower(): c for c in df.columns}
    missing = [c for c in OHLCV_COLUMNS if c not in columns]
    if missing:
        raise ValueError(f"Missing columns: {', '.join(missing)}")

    values = (
        df[[columns[c] for c in OHLCV_COLUMNS]]
        .apply(pd.to_numeric, errors="coerce")
        .to_numpy(dtype=float)
    )
    valid = _valid_rows(values)

    skipped = int((~valid).sum())
    if skipped:
        logger.warning(f"Skipped {skipped} malformed rows in frame")

    ts_column = columns.get("timestamp", columns.get("date"))
    if ts_column is not None:
        timestamps = df[ts_column].astype(str).to_numpy()[valid].tolist()
    else:
        timestamps = [""] * int(valid.sum())

    return _to_bars(values[valid], timestamps)
