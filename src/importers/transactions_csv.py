from __future__ import annotations

import csv
import logging
from csv import DictReader
from pathlib import Path
from typing import Iterable, Iterator

from pydantic import ValidationError

from domain.ledger import EVENT_ADAPTER, Event, EventType

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"type", "client", "tx"}


class TransactionsImportError(Exception):
    def __init__(self, message: str, *, line: int | None = None) -> None:
        super().__init__(message if line is None else f"{message} (line {line})")
        self.line = line


class MalformedRowError(ValueError):
    pass


def _row_payload(row: dict[str | None, str | list[str] | None]) -> dict[str, str]:
    def field(name: str) -> str:
        value = row.get(name)
        if isinstance(value, str):
            return value.strip()
        return ""

    row_type = field("type")
    try:
        EventType(row_type)
    except ValueError:
        raise MalformedRowError(f"unknown transaction type {row_type!r}") from None

    payload = {"type": row_type, "account_id": field("client"), "tx_id": field("tx")}
    amount = field("amount")
    if amount:
        payload["amount"] = amount
    return payload


def _describe(exc: ValidationError) -> str:
    return "; ".join(f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors())


def parse_events(lines: Iterable[str]) -> Iterator[Event]:
    """Yield events from CSV text with a ``type, client, tx, amount`` header.

    Rows with an unknown type or invalid fields are logged and skipped.
    Whitespace around headers and fields is ignored, and the amount column may be
    empty or missing for dispute, resolve and chargeback rows.
    """

    reader = DictReader(lines, skipinitialspace=True)
    try:
        fieldnames = reader.fieldnames
    except (csv.Error, UnicodeDecodeError) as exc:
        raise TransactionsImportError(f"Cannot read CSV header: {exc}", line=reader.line_num) from exc
    if fieldnames is None:
        raise TransactionsImportError("Transactions CSV is empty or missing headers")

    reader.fieldnames = [name.strip() for name in fieldnames]
    missing = REQUIRED_COLUMNS - set(reader.fieldnames)
    if missing:
        raise TransactionsImportError(f"Transactions CSV missing required columns: {', '.join(sorted(missing))}")

    skipped = 0
    accepted = 0
    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except (csv.Error, UnicodeDecodeError) as exc:
            raise TransactionsImportError(f"Cannot read CSV row: {exc}", line=reader.line_num) from exc

        try:
            event = EVENT_ADAPTER.validate_python(_row_payload(row))
        except MalformedRowError as exc:
            skipped += 1
            logger.warning("Skipping line %d: %s", reader.line_num, exc)
            continue
        except ValidationError as exc:
            skipped += 1
            logger.warning("Skipping line %d: %s", reader.line_num, _describe(exc))
            continue

        accepted += 1
        yield event

    logger.info("Transactions CSV: parsed %d rows, skipped %d malformed rows", accepted, skipped)


class TransactionsCsvImporter:
    def __init__(self, source_path: str | Path) -> None:
        self._source_path = Path(source_path)

    def iter_events(self) -> Iterator[Event]:
        with self._source_path.open(encoding="utf-8", newline="") as handle:
            yield from parse_events(handle)

    def load_events(self) -> list[Event]:
        return list(self.iter_events())
