"""Configuration: paths, defaults, tax table location."""

import os
from pathlib import Path

# Base directory for the document ledger
DATA_DIR = Path(os.environ.get("FAKTURA_DATA_DIR", Path.cwd() / "data"))
LEDGER_PATH = DATA_DIR / "documents.json"

# Rules table and message dictionaries (rules.json, messages.<lang>.json, notes.json)
TAX_CONFIG_DIR = Path(
    os.environ.get("FAKTURA_TAX_CONFIG_DIR", Path(__file__).parent / "data" / "tax")
)

DEFAULT_LANGUAGE = os.environ.get("FAKTURA_LANGUAGE", "de")
DEFAULT_CURRENCY = os.environ.get("FAKTURA_CURRENCY", "EUR")

LOG_LEVEL = os.environ.get("FAKTURA_LOG_LEVEL", "WARNING")
