"""Tests for the local JSON document ledger."""

import csv
from datetime import date
from decimal import Decimal

import pytest

from faktura.documents.builder import build_document
from faktura.storage.local_json import LocalJsonStorage


@pytest.fixture
def storage(tmp_path):
    return LocalJsonStorage(tmp_path / "documents.json")


@pytest.fixture
def invoice(at_seller, de_business_client, two_lines):
    return build_document(at_seller, de_business_client, two_lines, number="RE-2026-001",
                          date=date(2026, 3, 1))


class TestLocalJsonStorage:
    def test_empty_ledger(self, storage):
        assert storage.load_all() == []
        assert storage.find_by_id("abc") is None

    def test_save_and_load_round_trip(self, storage, invoice):
        storage.save(invoice)
        loaded = storage.load_all()

        assert len(loaded) == 1
        assert loaded[0].number == "RE-2026-001"
        assert loaded[0].total_gross == Decimal("250.00")
        assert loaded[0].legal_notes == invoice.legal_notes

    def test_save_upserts_by_id(self, storage, invoice):
        storage.save(invoice)
        storage.save(invoice.model_copy(update={"notes": "Danke!"}))

        loaded = storage.load_all()
        assert len(loaded) == 1
        assert loaded[0].notes == "Danke!"

    def test_find_by_id_prefix_and_number(self, storage, invoice):
        storage.save(invoice)
        assert storage.find_by_id(invoice.id[:5]).id == invoice.id
        assert storage.find_by_number("RE-2026-001").id == invoice.id
        assert storage.find_by_number("RE-2026-999") is None

    def test_delete(self, storage, invoice):
        storage.save(invoice)
        assert storage.delete(invoice.id) is True
        assert storage.delete(invoice.id) is False
        assert storage.load_all() == []

    def test_csv_mirror(self, storage, invoice):
        storage.save(invoice)
        with open(storage.csv_path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))

        assert rows[0]["number"] == "RE-2026-001"
        assert rows[0]["tax_scheme"] == "REVERSE_CHARGE"
        assert rows[0]["client_country"] == "DE"

    def test_corrupt_ledger_reads_as_empty(self, storage):
        storage.path.write_text("{not json", encoding="utf-8")
        assert storage.load_all() == []
