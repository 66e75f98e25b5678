"""Match suggestions between bank credits and parsed invoices."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence

import pandas as pd

from nfparse.constants import (
    DEFAULT_TOLERANCE,
    HIGH_CONFIDENCE_DAYS,
    MEDIUM_CONFIDENCE_DAYS,
    MISSING_DATE_DAYS,
)
from nfparse.parsing.codes import Confidence
from nfparse.parsing.nfse import InvoiceFact
from nfparse.parsing.ofx import BankTransaction

log = logging.getLogger(__name__)

_RANK = {Confidence.HIGH: 0, Confidence.MEDIUM: 1, Confidence.LOW: 2}


@dataclass(frozen=True)
class MatchSuggestion:
    transaction: BankTransaction
    invoice: InvoiceFact
    match_amount: Decimal
    match_date: str
    days_apart: int
    confidence: Confidence

    @property
    def description(self) -> str:
        return f"NF {self.invoice.document_number} - {self.invoice.issuer_name}"


def _as_date(value: datetime | date | None) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(settlement: str, when: datetime | date | None) -> int:
    """Whole days between an ISO settlement date and a transaction date."""
    tx_date = _as_date(when)
    if not settlement or tx_date is None:
        return MISSING_DATE_DAYS
    try:
        expected = date.fromisoformat(settlement)
    except ValueError:
        return MISSING_DATE_DAYS
    return abs((expected - tx_date).days)


def confidence_for(days: int) -> Confidence:
    if days <= HIGH_CONFIDENCE_DAYS:
        return Confidence.HIGH
    if days <= MEDIUM_CONFIDENCE_DAYS:
        return Confidence.MEDIUM
    return Confidence.LOW


def suggest_match(
    transaction: BankTransaction,
    invoices: Iterable[InvoiceFact],
    *,
    tolerance: Decimal = DEFAULT_TOLERANCE,
) -> Optional[MatchSuggestion]:
    """Best open invoice for a bank credit, or ``None``.

    Only exact amounts (net value within ``tolerance``) qualify.  Among them
    the best confidence tier wins, then the smaller day distance, then the
    earlier candidate.
    """
    if transaction.kind != "credit":
        return None

    best: Optional[MatchSuggestion] = None
    for invoice in invoices:
        if abs(invoice.net_value_as_declared - transaction.amount) >= tolerance:
            continue
        days = days_between(invoice.expected_settlement_date, transaction.date)
        candidate = MatchSuggestion(
            transaction=transaction,
            invoice=invoice,
            match_amount=invoice.net_value_as_declared,
            match_date=invoice.expected_settlement_date,
            days_apart=days,
            confidence=confidence_for(days),
        )
        if best is None or (_RANK[candidate.confidence], candidate.days_apart) < (
            _RANK[best.confidence],
            best.days_apart,
        ):
            best = candidate
    if best is not None:
        log.debug(
            "Transaction %s matched %s (%s)",
            transaction.id,
            best.description,
            best.confidence.value,
        )
    return best


def suggest_matches(
    transactions: Sequence[BankTransaction],
    invoices: Sequence[InvoiceFact],
) -> pd.DataFrame:
    """One row per transaction with its suggestion (empty columns when none)."""
    rows = []
    for tx in transactions:
        suggestion = suggest_match(tx, invoices)
        rows.append(
            {
                "transaction_id": tx.id,
                "date": tx.date.date().isoformat() if tx.date else "",
                "kind": tx.kind,
                "amount": tx.amount,
                "description": tx.description,
                "match": suggestion.description if suggestion else "",
                "match_amount": suggestion.match_amount if suggestion else None,
                "match_date": suggestion.match_date if suggestion else "",
                "confidence": suggestion.confidence.value if suggestion else "",
            }
        )
    return pd.DataFrame(rows, dtype=object)
