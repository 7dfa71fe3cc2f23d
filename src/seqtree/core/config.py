"""Engine configuration dataclass and environment loading."""

import os
from dataclasses import asdict, dataclass
from pathlib import Path

from dotenv import load_dotenv

# Snapshots nest one JSON object per tree level
MAX_SEQUENCE_LENGTH = 128


@dataclass(frozen=True)
class EngineConfig:
    """Sequence engine parameters.

    Args:
        num_bins: Alphabet size for quantized log-returns
        sequence_length: Symbols per window (tree depth trained and queried)
        confidence_threshold: Win ratio required for BUY/SELL
        lookahead_days: Bars scanned after the entry bar for profitability
        take_profit_threshold: Favorable move required, as a fraction of entry
    """

    num_bins: int = 10
    sequence_length: int = 5
    confidence_threshold: float = 0.70
    lookahead_days: int = 5
    take_profit_threshold: float = 0.02  # 2% target

    @property
    def min_training_bars(self) -> int:
        """Bars needed before training does anything."""
        return self.sequence_length + self.lookahead_days

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    def validate(self) -> list[str]:
        """Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.num_bins < 2:
            errors.append(f"num_bins must be >= 2, got {self.num_bins}")
        if not 1 <= self.sequence_length <= MAX_SEQUENCE_LENGTH:
            errors.append(
                f"sequence_length must be in [1, {MAX_SEQUENCE_LENGTH}], "
                f"got {self.sequence_length}"
            )
        if not 0 < self.confidence_threshold < 1:
            errors.append(
                f"confidence_threshold must be in (0, 1), got {self.confidence_threshold}"
            )
        if self.lookahead_days < 1:
            errors.append(f"lookahead_days must be >= 1, got {self.lookahead_days}")
        if self.take_profit_threshold <= 0:
            errors.append(
                f"take_profit_threshold must be > 0, got {self.take_profit_threshold}"
            )

        return errors

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables.

        Environment variables:
            SEQTREE_NUM_BINS: Alphabet size (default: 10)
            SEQTREE_SEQUENCE_LENGTH: Window length (default: 5)
            SEQTREE_CONFIDENCE_THRESHOLD: BUY/SELL gate (default: 0.70)
            SEQTREE_LOOKAHEAD_DAYS: Profitability horizon in bars (default: 5)
            SEQTREE_TAKE_PROFIT_THRESHOLD: Required move (default: 0.02)

        Returns:
            EngineConfig instance

        Raises:
            ValueError: If a variable is set but not a number
        """
        defaults = cls()
        return cls(
            num_bins=int(os.getenv("SEQTREE_NUM_BINS", defaults.num_bins)),
            sequence_length=int(os.getenv("SEQTREE_SEQUENCE_LENGTH", defaults.sequence_length)),
            confidence_threshold=float(
                os.getenv("SEQTREE_CONFIDENCE_THRESHOLD", defaults.confidence_threshold)
            ),
            lookahead_days=int(os.getenv("SEQTREE_LOOKAHEAD_DAYS", defaults.lookahead_days)),
            take_profit_threshold=float(
                os.getenv("SEQTREE_TAKE_PROFIT_THRESHOLD", defaults.take_profit_threshold)
            ),
        )


def load_config(env_path: Path | None = None) -> EngineConfig:
    """Load engine configuration from a .env file and the environment.

    Args:
        env_path: Path to .env file, defaults to .env in current directory

    Returns:
        Engine configuration
    """
    load_dotenv(env_path or Path(".env"))
    return EngineConfig.from_env()
