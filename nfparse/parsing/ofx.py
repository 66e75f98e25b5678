# File: nfparse/parsing/ofx.py
"""OFX/OFC bank statement parser (SGML and XML flavours used by Brazilian banks).

Parsing is done by :mod:`ofxparse`.  Files exported by Brazilian banks often
break it, so the text first goes through a small clean-up pass:

* the header is rewritten to declare ``UNICODE`` (UTF-8); banks write
  ``USASCII`` and ``1252`` and then put accented text in the memo;
* amounts written as ``1.234,56`` are turned into ``1234.56``;
* the ``[-03:EST]`` time zone suffix is dropped so dates stay in the
  bank's local time.

Transactions without ``FITID``, ``TRNAMT`` or a valid ``DTPOSTED`` are
discarded by ofxparse and logged.
"""
from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ofxparse import OfxParser
from ofxparse.ofxparse import OfxParserException

from nfparse.constants import DEFAULT_CURRENCY
from nfparse.errors import StatementParseError
from .money import parse_decimal

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BankTransaction:
    id: str  # FITID
    date: Optional[datetime]  # DTPOSTED
    amount: Decimal  # absolute value
    kind: str  # "credit" | "debit"
    description: str
    raw_type: str = "OTHER"
    check_number: Optional[str] = None


@dataclass(frozen=True)
class AccountInfo:
    bank_id: Optional[str] = None
    branch_id: Optional[str] = None
    account_id: Optional[str] = None
    account_type: Optional[str] = None


@dataclass
class Statement:
    account: AccountInfo
    transactions: list[BankTransaction] = field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    currency: str = DEFAULT_CURRENCY
    balance: Optional[Decimal] = None
    balance_date: Optional[datetime] = None


_UTF8_HEADER = (
    "OFXHEADER:100\n"
    "DATA:OFXSGML\n"
    "VERSION:102\n"
    "SECURITY:NONE\n"
    "ENCODING:UNICODE\n"
    "CHARSET:NONE\n"
    "COMPRESSION:NONE\n"
    "OLDFILEUID:NONE\n"
    "NEWFILEUID:NONE\n"
    "\n"
)
_OFX_START_RE = re.compile(r"<OFX[\s>]", re.IGNORECASE)
_AMOUNT_RE = re.compile(r"(<(?:TRNAMT|BALAMT)>)([^<\r\n]+)", re.IGNORECASE)
_TZ_RE = re.compile(r"(<DT\w+>[^<\[\r\n]*)\[[^\]\r\n]*\]", re.IGNORECASE)


def _normalize_amount(match: re.Match) -> str:
    return match.group(1) + str(parse_decimal(match.group(2)))


def _prepare(content: str) -> bytes:
    """Rewrite ``content`` into something ofxparse reads reliably."""
    text = content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    m = _OFX_START_RE.search(text)
    body = text[m.start():] if m else text
    body = _AMOUNT_RE.sub(_normalize_amount, body)
    body = _TZ_RE.sub(r"\1", body)
    return (_UTF8_HEADER + body).encode("utf-8")


def _opt_str(value) -> Optional[str]:
    return (value or "").strip() or None


def _opt_date(value) -> Optional[datetime]:
    return value if isinstance(value, datetime) else None


def _transaction(trn) -> BankTransaction:
    amount = trn.amount if trn.amount is not None else Decimal("0")
    raw_type = (trn.type or "").strip().upper()
    description = (
        _opt_str(trn.memo) or _opt_str(trn.payee) or raw_type or "Sem descrição"
    )
    return BankTransaction(
        id=trn.id.strip(),
        date=_opt_date(trn.date),
        amount=abs(amount),
        kind="credit" if amount >= 0 else "debit",
        description=description,
        raw_type=raw_type or "OTHER",
        check_number=_opt_str(trn.checknum),
    )


def is_valid_ofx(content: str) -> bool:
    has_header = "OFXHEADER" in content or "<OFX>" in content or "<OFX " in content
    has_transactions = "STMTTRN" in content or "BANKTRANLIST" in content
    return has_header or has_transactions


def parse_ofx(content: str) -> Statement:
    """Parse an OFX statement; transactions are returned newest first.

    Only the first account's header fields are reported; transactions from
    every account in the file are merged.
    """
    if not is_valid_ofx(content or ""):
        raise StatementParseError("Arquivo OFX inválido.")

    with io.BytesIO(_prepare(content)) as bio:
        try:
            ofx = OfxParser.parse(bio, fail_fast=False)
        except (OfxParserException, ValueError) as e:
            log.debug("ofxparse failed: %s", e)
            raise StatementParseError("Arquivo OFX inválido.") from e

    accounts = list(getattr(ofx, "accounts", None) or [])
    if not accounts:
        log.debug("OFX without statement blocks")
        return Statement(account=AccountInfo())

    acct = accounts[0]
    stmt = acct.statement
    transactions: list[BankTransaction] = []
    for account in accounts:
        if account.statement is None:
            continue
        for entry in account.statement.discarded_entries:
            log.warning("OFX transaction discarded: %s", entry.get("error"))
        transactions.extend(_transaction(t) for t in account.statement.transactions)
    transactions.sort(key=lambda t: t.date or datetime.min, reverse=True)

    balance = getattr(stmt, "balance", None) if stmt is not None else None
    statement = Statement(
        account=AccountInfo(
            bank_id=_opt_str(acct.routing_number),
            branch_id=_opt_str(acct.branch_id),
            account_id=_opt_str(acct.account_id),
            account_type=_opt_str(acct.account_type),
        ),
        transactions=transactions,
        start_date=_opt_date(getattr(stmt, "start_date", None)),
        end_date=_opt_date(getattr(stmt, "end_date", None)),
        currency=(_opt_str(getattr(stmt, "currency", None)) or DEFAULT_CURRENCY).upper(),
        balance=Decimal(balance) if balance is not None else None,
        balance_date=_opt_date(getattr(stmt, "balance_date", None)),
    )
    log.debug(
        "OFX account=%s transactions=%d",
        statement.account.account_id,
        len(transactions),
    )
    return statement
