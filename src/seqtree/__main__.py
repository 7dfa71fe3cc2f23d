"""CLI entry point for training and replay.

Usage:
    python -m seqtree --data data/history.csv
    python -m seqtree --data data/history.csv --replay data/latest.csv
    python -m seqtree --data data/history.csv --sequence-length 4 --output tree.json
"""

import argparse
import json
import logging
import sys
from collections import Counter
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from .core import load_config
from .data import load_bars_csv
from .engine import Engine

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="seqtree",
        description="Train a prefix decision tree on bar history and replay new bars",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m seqtree --data data/history.csv
  python -m seqtree --data data/history.csv --replay data/latest.csv
  python -m seqtree --data data/history.csv --sequence-length 4 --output tree.json
        """,
    )

    parser.add_argument(
        "--data",
        type=str,
        required=True,
        help="CSV with history (date,open,high,low,close,volume)",
    )
    parser.add_argument(
        "--replay",
        type=str,
        default=None,
        help="CSV of new bars to stream after training",
    )
    parser.add_argument("--num-bins", type=int, default=None, help="Alphabet size")
    parser.add_argument(
        "--sequence-length", type=int, default=None, help="Symbols per window"
    )
    parser.add_argument(
        "--confidence", type=float, default=None, help="BUY/SELL confidence threshold"
    )
    parser.add_argument(
        "--lookahead", type=int, default=None, help="Profitability horizon in bars"
    )
    parser.add_argument(
        "--take-profit", type=float, default=None, help="Required move (0.02 = 2%%)"
    )
    parser.add_argument(
        "--env",
        type=str,
        default=None,
        help="Path to .env file with SEQTREE_* settings (default: .env)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write tree snapshot JSON to this path",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(Path(args.env) if args.env else None)
    except ValueError as e:
        logger.error(f"Config error: {e}")
        return 1

    overrides = {
        "num_bins": args.num_bins,
        "sequence_length": args.sequence_length,
        "confidence_threshold": args.confidence,
        "lookahead_days": args.lookahead,
        "take_profit_threshold": args.take_profit,
    }
    config = replace(config, **{k: v for k, v in overrides.items() if v is not None})

    errors = config.validate()
    if errors:
        for err in errors:
            logger.error(f"Config error: {err}")
        return 1

    engine = Engine(config)
    if not engine.load_bars(args.data):
        return 1

    windows = engine.train()

    decisions = []
    if args.replay:
        try:
            replay_bars = load_bars_csv(args.replay)
        except OSError as e:
            logger.error(f"Failed to open replay file {args.replay}: {e}")
            return 1
        for bar in replay_bars:
            decision = engine.process_new_bar(bar)
            decisions.append({**bar.to_dict(), "decision": str(decision)})

    result = {
        "config": config.to_dict(),
        "nodes": engine.tree.node_count(),
        "windows_trained": windows,
        "decisions": decisions,
        "decision_counts": dict(Counter(d["decision"] for d in decisions)),
        "meta": {
            "run_time": datetime.now().isoformat(),
            "bars_loaded": len(engine.bars) - len(decisions),
            "bars_replayed": len(decisions),
        },
    }

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(engine.tree_json())
        logger.info(f"Tree snapshot saved to {args.output}")

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
