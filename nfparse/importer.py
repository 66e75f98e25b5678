from __future__ import annotations

import dataclasses
import hashlib
import logging
from pathlib import Path
from typing import Iterable, Iterator

import pandas as pd

from nfparse.errors import InvoiceParseError
from nfparse.parsing.nfse import (
    InvoiceFact,
    extract_issuer_tax_id_fallback,
    parse_invoice_xml,
)
from nfparse.parsing.utils import decode_text_bytes

log = logging.getLogger(__name__)

BASE_COLUMNS = ["file", "hash", "status", "error"]


def content_hash(data: bytes) -> str:
    """SHA-256 hex digest used to detect the same file imported twice."""
    return hashlib.sha256(data).hexdigest()


def read_xml_text(path: str | Path) -> str:
    return decode_text_bytes(Path(path).read_bytes())


def parse_text_with_fallback(text: str) -> InvoiceFact:
    """Parse and fill a missing issuer CNPJ from the fallback search."""
    fact = parse_invoice_xml(text)
    if not fact.issuer_tax_id:
        cnpj = extract_issuer_tax_id_fallback(text)
        if cnpj:
            log.info("Issuer CNPJ for document %s taken from fallback", fact.document_number)
            fact = dataclasses.replace(fact, issuer_tax_id=cnpj)
    return fact


def parse_invoice_file(path: str | Path) -> InvoiceFact:
    """Read, decode and parse one XML file."""
    return parse_text_with_fallback(read_xml_text(path))


def iter_xml_files(paths: Iterable[str | Path]) -> Iterator[Path]:
    """Yield files as given; folders are searched recursively for ``*.xml``."""
    for p in paths:
        path = Path(p)
        if path.is_dir():
            for xml_file in sorted(path.rglob("*")):
                if xml_file.is_file() and xml_file.suffix.lower() == ".xml":
                    yield xml_file
        else:
            yield path


def _import(paths: Iterable[str | Path]) -> tuple[list[dict], list[InvoiceFact]]:
    rows: list[dict] = []
    facts: list[InvoiceFact] = []
    seen: set[str] = set()
    for xml_file in iter_xml_files(paths):
        data = xml_file.read_bytes()
        digest = content_hash(data)
        row = {"file": str(xml_file), "hash": digest, "status": "ok", "error": ""}
        if digest in seen:
            row["status"] = "duplicate"
            rows.append(row)
            continue
        seen.add(digest)
        try:
            fact = parse_text_with_fallback(decode_text_bytes(data))
        except InvoiceParseError as exc:
            log.warning("Failed to parse %s: %s", xml_file, exc)
            row["status"] = "error"
            row["error"] = str(exc)
        else:
            row.update(fact.to_dict())
            facts.append(fact)
        rows.append(row)
    return rows, facts


def import_invoices(paths: Iterable[str | Path]) -> pd.DataFrame:
    """Parse a batch of invoice files into a DataFrame.

    Each file yields one row with ``status`` ``ok``, ``duplicate`` (same
    content hash seen earlier in the batch) or ``error``.  Parse errors are
    reported in the ``error`` column and do not stop the batch.
    """
    rows, _ = _import(paths)
    if not rows:
        return pd.DataFrame(columns=BASE_COLUMNS)
    return pd.DataFrame(rows, dtype=object)


def load_invoices(paths: Iterable[str | Path]) -> list[InvoiceFact]:
    """Successfully parsed, de-duplicated facts of a batch."""
    _, facts = _import(paths)
    return facts
