"""Local JSON ledger with file locking, mirrored to a flat CSV."""

import csv
import fcntl
import json
from pathlib import Path

from faktura.config import LEDGER_PATH
from faktura.logging_config import get_logger
from faktura.models.document import Document
from faktura.storage.adapter import DocumentStorage

logger = get_logger("storage.local_json")

CSV_FIELDS = [
    "id", "type", "number", "date", "due_date",
    "seller", "client", "client_country", "currency",
    "tax_scheme", "subtotal_net", "tax_total", "total_gross",
    "legal_notes",
]


def _read_json_locked(path: Path) -> list[dict]:
    if not path.exists():
        return []
    with open(path, "r", encoding="utf-8") as f:
        fcntl.flock(f, fcntl.LOCK_SH)
        try:
            data = json.load(f)
        except json.JSONDecodeError:
            logger.warning("ledger_unreadable", extra={"path": str(path)})
            data = []
        finally:
            fcntl.flock(f, fcntl.LOCK_UN)
    return data


def _write_json_locked(path: Path, records: list[dict]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        fcntl.flock(f, fcntl.LOCK_EX)
        try:
            json.dump(records, f, indent=2, ensure_ascii=False)
        finally:
            fcntl.flock(f, fcntl.LOCK_UN)


def csv_row(record: dict) -> dict:
    client = record.get("client") or {}
    return {
        "id": record.get("id", ""),
        "type": record.get("type", ""),
        "number": record.get("number", ""),
        "date": record.get("date") or "",
        "due_date": record.get("due_date") or "",
        "seller": (record.get("seller") or {}).get("display_name", ""),
        "client": client.get("name", ""),
        "client_country": client.get("country") or "",
        "currency": record.get("currency", ""),
        "tax_scheme": record.get("tax_scheme", ""),
        "subtotal_net": record.get("subtotal_net", ""),
        "tax_total": record.get("tax_total", ""),
        "total_gross": record.get("total_gross", ""),
        "legal_notes": " | ".join(record.get("legal_notes", [])),
    }


def write_csv(records: list[dict], path: Path) -> None:
    """Write records to a CSV file, sorted by date."""
    sorted_records = sorted(records, key=lambda r: r.get("date") or "")
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for r in sorted_records:
            writer.writerow(csv_row(r))


class LocalJsonStorage(DocumentStorage):
    def __init__(self, path: Path | None = None):
        self.path = path or LEDGER_PATH
        self.path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def csv_path(self) -> Path:
        return self.path.with_suffix(".csv")

    def _write(self, records: list[dict]) -> None:
        _write_json_locked(self.path, records)
        write_csv(records, self.csv_path)

    def load_all(self) -> list[Document]:
        return [Document.model_validate(r) for r in _read_json_locked(self.path)]

    def save(self, document: Document) -> None:
        records = _read_json_locked(self.path)
        dump = document.model_dump(mode="json")
        for i, r in enumerate(records):
            if r.get("id") == document.id:
                records[i] = dump
                break
        else:
            records.append(dump)
        self._write(records)
        logger.info("document_saved", extra={"document_id": document.id, "number": document.number})

    def save_all(self, documents: list[Document]) -> None:
        self._write([d.model_dump(mode="json") for d in documents])

    def find_by_id(self, document_id: str) -> Document | None:
        for r in _read_json_locked(self.path):
            if r.get("id", "").startswith(document_id):
                return Document.model_validate(r)
        return None

    def find_by_number(self, number: str) -> Document | None:
        for r in _read_json_locked(self.path):
            if r.get("number") == number:
                return Document.model_validate(r)
        return None

    def delete(self, document_id: str) -> bool:
        records = _read_json_locked(self.path)
        new_records = [r for r in records if not r.get("id", "").startswith(document_id)]
        if len(new_records) < len(records):
            self._write(new_records)
            logger.info("document_deleted", extra={"document_id": document_id})
            return True
        return False
