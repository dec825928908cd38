"""Tests for src.ledger: JSON loading and the reference window."""

import json
import logging

import pytest

from src.dedup.models import LedgerTransaction
from src.ledger import load_reference_ledger, load_transactions, most_recent


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _txn(date, description="x") -> LedgerTransaction:
    return LedgerTransaction(date=date, description=description, amount=1.0)


class TestLoadTransactions:
    def test_bare_list(self, tmp_path):
        f = _write(tmp_path / "c.json", [
            {"date": "2025-11-30", "description": "HPY*PHYTONUT", "amount": 27.5},
        ])
        txns = load_transactions(f)
        assert len(txns) == 1
        assert txns[0].description == "HPY*PHYTONUT"

    def test_transactions_key(self, tmp_path):
        f = _write(tmp_path / "c.json", {"transactions": [{"amount": 1}, {"amount": 2}]})
        assert [t.amount for t in load_transactions(f)] == [1.0, 2.0]

    def test_rows_key(self, tmp_path):
        f = _write(tmp_path / "l.json", {"rows": [{"amount": 3}]})
        assert load_transactions(f)[0].amount == 3.0

    def test_description_fields(self, tmp_path):
        f = _write(tmp_path / "r.json", [{"amount": 1500, "source": "Salary"}])
        txns = load_transactions(f, ["description", "source"])
        assert txns[0].description == "Salary"

    def test_skips_non_objects(self, tmp_path, caplog):
        f = _write(tmp_path / "c.json", [{"amount": 1}, "junk", 3])
        with caplog.at_level(logging.WARNING):
            txns = load_transactions(f)
        assert len(txns) == 1
        assert "Skipped 2" in caplog.text

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Transactions file not found"):
            load_transactions(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        f = tmp_path / "bad.json"
        f.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_transactions(f)

    def test_not_a_list(self, tmp_path):
        f = _write(tmp_path / "c.json", {"ok": True})
        with pytest.raises(ValueError, match="Expected a list"):
            load_transactions(f)


class TestLoadReferenceLedger:
    def test_loads(self, tmp_path):
        f = _write(tmp_path / "l.json", {"rows": [{"amount": 3}]})
        assert len(load_reference_ledger(f)) == 1

    def test_missing_file_is_empty(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            assert load_reference_ledger(tmp_path / "missing.json") == []
        assert "Reference ledger unavailable" in caplog.text

    def test_invalid_amount_is_empty(self, tmp_path):
        f = _write(tmp_path / "l.json", [{"amount": "n/a"}])
        assert load_reference_ledger(f) == []


class TestMostRecent:
    def test_newest_first_and_limited(self):
        txns = [_txn("2025-01-01"), _txn("2025-03-01"), _txn("02/02/2025")]
        result = most_recent(txns, 2)
        assert [t.date for t in result] == ["2025-03-01", "02/02/2025"]

    def test_undated_last(self):
        txns = [_txn("???"), _txn("2025-01-01")]
        assert [t.date for t in most_recent(txns, 5)] == ["2025-01-01", "???"]

    def test_stable_for_equal_dates(self):
        txns = [_txn("2025-01-01", "a"), _txn("2025-01-01", "b"), _txn("2025-01-01", "c")]
        assert [t.description for t in most_recent(txns, 3)] == ["a", "b", "c"]

    def test_zero_limit(self):
        assert most_recent([_txn("2025-01-01")], 0) == []

    def test_does_not_mutate_input(self):
        txns = [_txn("2025-01-01"), _txn("2025-03-01")]
        most_recent(txns, 1)
        assert [t.date for t in txns] == ["2025-01-01", "2025-03-01"]
