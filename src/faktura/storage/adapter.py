"""Document ledger interface.

The ledger holds issued invoices and quotes. A document is keyed by its
12-character hex id; numbers (``RE-2026-001``) are unique per prefix and year
and are what users quote, so both lookups are offered. The CLI derives the
next sequence number from the ledger, so backends must return every stored
document from ``load_all``.
"""

from abc import ABC, abstractmethod

from faktura.models.document import Document


class DocumentStorage(ABC):
    @abstractmethod
    def load_all(self) -> list[Document]:
        """Every stored document, invoices and quotes alike, in insertion order."""

    @abstractmethod
    def save(self, document: Document) -> None:
        """Insert a new document or replace the stored one with the same id."""

    @abstractmethod
    def save_all(self, documents: list[Document]) -> None:
        """Overwrite the ledger with exactly these documents."""

    @abstractmethod
    def find_by_id(self, document_id: str) -> Document | None:
        """First document whose id starts with ``document_id`` (short ids work)."""

    @abstractmethod
    def find_by_number(self, number: str) -> Document | None:
        """Document issued under this exact number, e.g. ``AN-2026-004``."""

    @abstractmethod
    def delete(self, document_id: str) -> bool:
        """Remove documents whose id starts with ``document_id``; False if none matched."""
