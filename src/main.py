from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence, TextIO

from pydantic import ValidationError

from config import LOG_LEVELS, AppSettings, config
from domain.account_engine import AccountEngine
from importers.transactions_csv import TransactionsCsvImporter, TransactionsImportError
from utils.account_summary import render_accounts

logger = logging.getLogger(__name__)


def build_engine(settings: AppSettings) -> AccountEngine:
    return AccountEngine(
        reject_duplicate_tx_ids=settings.reject_duplicate_tx_ids,
        lock_blocks_disputes=settings.lock_blocks_disputes,
    )


def run(csv_path: Path, *, settings: AppSettings | None = None, stream: TextIO | None = None) -> None:
    engine = build_engine(settings or config())
    importer = TransactionsCsvImporter(csv_path)

    # Nothing is rendered unless the whole input was read.
    engine.apply_all(importer.iter_events())
    snapshots = engine.snapshot()
    logger.info("Applied %d transactions to %d accounts", len(engine.ledger), len(snapshots))
    render_accounts(snapshots, stream)


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Apply a transactions CSV and print final account balances.")
    parser.add_argument("csv", type=Path, help="CSV with a 'type, client, tx, amount' header")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Overrides LEDGER_LOG_LEVEL (default WARNING)",
    )
    args = parser.parse_args(argv)

    try:
        settings = config()
    except ValidationError as exc:
        parser.error(f"invalid LEDGER_* settings: {exc.errors()[0]['msg']}")
    logging.basicConfig(
        level=args.log_level or settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )

    try:
        run(args.csv, settings=settings)
    except (OSError, TransactionsImportError) as exc:
        logger.error("Cannot process %s: %s", args.csv, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
