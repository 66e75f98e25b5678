# File: nfparse/parsing/utils.py
"""Utility helpers for parsers."""
from __future__ import annotations

import calendar
import re
from datetime import datetime


def normalize_date(date_str: str | None) -> str:
    """Convert ``DD/MM/YYYY`` or ISO date/time strings into ``YYYY-MM-DD``.

    Any time component (after ``T`` or a space) is dropped.  Input that does
    not yield a valid calendar date gives ``""``.
    """
    s = (date_str or "").strip()
    if not s:
        return ""
    s = re.split(r"[T\s]", s, maxsplit=1)[0]
    if "/" in s:
        parts = s.split("/")
        if len(parts) == 3 and len(parts[0]) <= 2:
            d, mth, y = parts
            s = f"{y}-{mth.zfill(2)}-{d.zfill(2)}"
    try:
        datetime.strptime(s, "%Y-%m-%d")
    except ValueError:
        return ""
    return s if re.fullmatch(r"\d{4}-\d{2}-\d{2}", s) else ""


def last_day_of_month(date_str: str) -> str:
    """Return the last calendar day of the month of ``YYYY-MM[-DD]``."""
    m = re.match(r"(\d{4})-(\d{1,2})", date_str or "")
    if not m:
        return ""
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        return ""
    last = calendar.monthrange(year, month)[1]
    return f"{year:04d}-{month:02d}-{last:02d}"


def only_digits(value: str | None) -> str:
    """Strip punctuation from a CNPJ/CPF."""
    return re.sub(r"\D", "", value or "")


def decode_text_bytes(data: bytes) -> str:
    """Decode file contents (UTF-8, with or without BOM; Latin-1 fallback)."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")
