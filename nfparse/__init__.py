"""nfparse – leitura de notas fiscais (NFS-e / NF-e) e extratos OFX."""

from nfparse.errors import (
    InvoiceParseError,
    MalformedXml,
    StatementParseError,
    UnrecognizedDocument,
)
from nfparse.parsing.codes import Dialect, RetentionBasis
from nfparse.parsing.nfse import InvoiceFact, Withholding, parse_invoice_xml

__all__ = [
    "Dialect",
    "InvoiceFact",
    "InvoiceParseError",
    "MalformedXml",
    "RetentionBasis",
    "StatementParseError",
    "UnrecognizedDocument",
    "Withholding",
    "parse_invoice_xml",
]
