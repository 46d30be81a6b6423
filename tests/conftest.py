from pathlib import Path
from typing import Callable, Generator

import pytest

from config import config
from domain.account_engine import AccountEngine
from tests.constants import TRANSACTIONS_HEADER


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    # Keep a developer's .env and LEDGER_* variables out of the tests.
    monkeypatch.chdir(tmp_path)
    for name in ("LEDGER_LOG_LEVEL", "LEDGER_REJECT_DUPLICATE_TX_IDS", "LEDGER_LOCK_BLOCKS_DISPUTES"):
        monkeypatch.delenv(name, raising=False)
    config.cache_clear()
    yield
    config.cache_clear()


@pytest.fixture(scope="function")
def engine() -> AccountEngine:
    return AccountEngine()


@pytest.fixture(scope="function")
def write_transactions(tmp_path: Path) -> Callable[..., Path]:
    def _write(*rows: str, name: str = "transactions.csv", header: str = TRANSACTIONS_HEADER) -> Path:
        path = tmp_path / name
        path.write_text("\n".join([header, *rows]) + "\n", encoding="utf-8")
        return path

    return _write
