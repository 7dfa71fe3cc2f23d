"""
Pytest configuration and fixtures for testing.
"""

from pathlib import Path

import pytest

ENV_VARS = [
    "SEQTREE_NUM_BINS",
    "SEQTREE_SEQUENCE_LENGTH",
    "SEQTREE_CONFIDENCE_THRESHOLD",
    "SEQTREE_LOOKAHEAD_DAYS",
    "SEQTREE_TAKE_PROFIT_THRESHOLD",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path: Path):
    """Run with no SEQTREE_* variables and an empty working directory.

    Variables set during the test (including by load_dotenv) are removed
    afterwards.
    """
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def write_csv(tmp_path: Path):
    """Write CSV text to a temp file and return its path."""

    def _write(text: str, name: str = "bars.csv") -> Path:
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write


def csv_text(closes: list[float]) -> str:
    """CSV with a header and one bar per close."""
    lines = ["Date,Open,High,Low,Close,Volume"]
    for i, c in enumerate(closes):
        lines.append(f"2024-01-{i + 1:02d},{c},{c * 1.01},{c * 0.99},{c},1000")
    return "\n".join(lines) + "\n"


@pytest.fixture
def closes_csv(write_csv):
    """Write a bar CSV built from close prices."""

    def _write(closes: list[float], name: str = "bars.csv") -> Path:
        return write_csv(csv_text(closes), name)

    return _write


@pytest.fixture
def undecodable_csv(tmp_path: Path) -> Path:
    """Bar CSV with a row that is not valid UTF-8."""
    path = tmp_path / "undecodable.csv"
    path.write_bytes(
        b"Date,Open,High,Low,Close,Volume\n"
        b"2024-01-01,100,105,98,103,1000\n"
        b"\xff\xfe,1,1,1,1,1\n"
    )
    return path


@pytest.fixture
def unterminated_quote_csv(write_csv) -> Path:
    """Bar CSV whose last row opens a quoted field and never closes it."""
    return write_csv(
        "Date,Open,High,Low,Close,Volume\n"
        "2024-01-01,100,105,98,103,1000\n"
        '"2024-01-02,101,106,99,104,1000\n',
        name="unterminated.csv",
    )
