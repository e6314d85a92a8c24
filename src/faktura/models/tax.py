"""Tax resolution inputs and outputs, plus the per-country rules schema."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from faktura.models.countries import normalize_country
from faktura.models.enums import BusinessType, Language, ServiceCategory, TaxScheme


class TaxContext(BaseModel):
    """Everything the resolver needs to know about one transaction."""

    seller_country: str = Field(min_length=2)
    buyer_country: str = Field(min_length=2)
    business_type: BusinessType
    seller_vat_id: Optional[str] = None
    buyer_vat_id: Optional[str] = None
    small_business_flag: bool = False
    # Reserved for rate effective-dating; not used for selection yet
    invoice_date_iso: str = ""
    currency: str = "EUR"
    language: Language = Language.DE
    # Scheme the user declared in a form; only checked by validate_tax_context
    scheme: Optional[TaxScheme] = None
    service_category: Optional[ServiceCategory] = None

    model_config = {"frozen": True}

    @field_validator("seller_country", "buyer_country", mode="before")
    @classmethod
    def _normalize_country(cls, value: str) -> str:
        if isinstance(value, str):
            return normalize_country(value)
        return value


class TaxBadge(BaseModel):
    label: str
    color: str

    model_config = {"frozen": True}


class TaxRates(BaseModel):
    standard: Decimal
    reduced: Optional[list[Decimal]] = None

    model_config = {"frozen": True}


class CountryTaxRule(BaseModel):
    """One entry of the static rules table (rules.json)."""

    currency: str = Field(pattern=r"^[A-Z]{3}$")
    rates: Optional[TaxRates] = None
    small_business_note_key: Optional[str] = None
    reverse_charge_enabled: bool = False

    model_config = {"frozen": True}
