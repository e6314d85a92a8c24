"""Enumerations shared by the tax resolver, totals calculator and documents."""

from enum import Enum


class TaxScheme(str, Enum):
    STANDARD = "STANDARD"
    REVERSE_CHARGE = "REVERSE_CHARGE"
    EXEMPT = "EXEMPT"


class TaxRegion(str, Enum):
    DOMESTIC = "DOMESTIC"
    INTRA_EU = "INTRA_EU"
    EXTRA_EU = "EXTRA_EU"


class BusinessType(str, Enum):
    B2B = "B2B"
    B2C = "B2C"


class Language(str, Enum):
    DE = "de"
    EN = "en"


class DocType(str, Enum):
    INVOICE = "INVOICE"
    QUOTE = "QUOTE"


class ServiceCategory(str, Enum):
    SERVICE = "SERVICE"
    DIGITAL = "DIGITAL"
    GOODS = "GOODS"
