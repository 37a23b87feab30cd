"""Registry loaders for the IANA sources.

SMI Numbers and LDAP Parameters share one XML layout and one loader;
the Private Enterprise Numbers registry is a plain text file with its
own line scanner.
"""

from radit.ingestion.pen import PenRecord, PenRegistryLoader, scan_pen_lines
from radit.ingestion.records import RawRecord, RecordValue, parse_value
from radit.ingestion.smi import (
    LoadStats,
    SMIDocument,
    SMIRegistryLoader,
    decode_note,
    description_and_oid,
    parse_smi_document,
)

__all__ = [
    "LoadStats",
    "PenRecord",
    "PenRegistryLoader",
    "RawRecord",
    "RecordValue",
    "SMIDocument",
    "SMIRegistryLoader",
    "decode_note",
    "description_and_oid",
    "parse_smi_document",
    "parse_value",
    "scan_pen_lines",
]
