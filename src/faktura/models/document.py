"""Pydantic models for priced lines, totals, parties and documents."""

import datetime as _dt
import uuid
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from faktura.models.countries import normalize_country
from faktura.models.enums import BusinessType, DocType, Language, TaxScheme


class DocLine(BaseModel):
    """One priced line of a document. Ranges are checked by the calling layer."""

    qty: Decimal
    unit_price: Decimal
    tax_rate: Decimal = Decimal("0")
    discount_pct: Optional[Decimal] = None
    item_id: Optional[str] = None
    title: str = ""
    description: str = ""
    unit: str = "Stk"

    model_config = {"frozen": True}


class TaxBreakdownItem(BaseModel):
    rate: Decimal
    base: Decimal
    tax: Decimal

    model_config = {"frozen": True}


class TotalsResult(BaseModel):
    subtotal_net: Decimal
    tax_total: Decimal
    total_gross: Decimal
    tax_breakdown: list[TaxBreakdownItem] = Field(default_factory=list)

    model_config = {"frozen": True}


class Numbering(BaseModel):
    invoice_prefix: str = "RE-"
    invoice_next: int = 1
    quote_prefix: str = "AN-"
    quote_next: int = 1


def _normalize_optional_country(value):
    if isinstance(value, str) and value.strip():
        return normalize_country(value)
    return value


class CompanyProfile(BaseModel):
    """The seller. Fields default to empty so forms can be validated before saving."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    display_name: str = ""
    legal_name: str = ""
    email: str = ""
    phone: str = ""
    street: str = ""
    zip: str = ""
    city: str = ""
    country: str = ""
    vat_id: str = ""
    tax_number: str = ""
    iban: str = ""
    bic: str = ""
    website: str = ""
    currency: str = "EUR"
    language: Language = Language.DE
    numbering: Numbering = Field(default_factory=Numbering)
    premium: bool = False
    small_business_flag: bool = False
    business_type_default: Optional[BusinessType] = None

    normalize_country_code = field_validator("country", mode="before")(_normalize_optional_country)


class Client(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    name: str = ""
    email: str = ""
    phone: str = ""
    street: str = ""
    zip: str = ""
    city: str = ""
    country: Optional[str] = None
    vat_id: str = ""
    notes: str = ""
    default_currency: Optional[str] = None
    business_type: Optional[BusinessType] = None

    normalize_country_code = field_validator("country", mode="before")(_normalize_optional_country)


class Document(BaseModel):
    """An invoice or quote with its resolved scheme, totals and legal notes."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    type: DocType = DocType.INVOICE
    number: str = ""
    date: Optional[_dt.date] = None
    due_date: Optional[_dt.date] = None
    place_of_supply: str = ""
    seller: CompanyProfile
    client: Optional[Client] = None
    currency: str = "EUR"
    language: Language = Language.DE
    tax_scheme: TaxScheme = TaxScheme.STANDARD
    lines: list[DocLine] = Field(default_factory=list)
    subtotal_net: Decimal = Decimal("0")
    tax_total: Decimal = Decimal("0")
    total_gross: Decimal = Decimal("0")
    tax_breakdown: list[TaxBreakdownItem] = Field(default_factory=list)
    legal_notes: list[str] = Field(default_factory=list)
    notes: str = ""
    created_at: _dt.datetime = Field(default_factory=_dt.datetime.now)
    updated_at: _dt.datetime = Field(default_factory=_dt.datetime.now)
