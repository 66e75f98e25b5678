# File: nfparse/parsing/money.py
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from nfparse.constants import DEFAULT_TOLERANCE
from .codes import IssFlag, RetentionBasis

DEC2 = Decimal("0.01")
# at most 15 integer digits so dec2() stays within the context precision
_PLAIN_DECIMAL_RE = re.compile(r"[+-]?(\d{1,15}(\.\d*)?|\.\d+)")


def parse_decimal(value: str | None) -> Decimal:
    """Parse a monetary amount written as ``1.234,56`` or ``1234.56``.

    When the text contains a comma, dots are thousands separators and the
    comma is the decimal point.  Empty or non-numeric input gives ``0``, and
    so does anything that is not plain positional notation (``1E+30``,
    ``Infinity``) or has more integer digits than any invoice amount.
    """
    txt = (value or "").strip()
    if not txt:
        return Decimal("0")
    txt = txt.replace("\xa0", "").replace(" ", "")
    if "," in txt:
        txt = txt.replace(".", "").replace(",", ".")
    if not _PLAIN_DECIMAL_RE.fullmatch(txt):
        return Decimal("0")
    try:
        result = Decimal(txt)
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return result if result.is_finite() else Decimal("0")


def dec2(x: Decimal) -> Decimal:
    """Quantize value to two decimal places using ``ROUND_HALF_UP``."""
    return x.quantize(DEC2, rounding=ROUND_HALF_UP)


def rate_percent(part: Decimal, whole: Decimal) -> Decimal:
    """Return ``part`` as a percentage of ``whole`` (0 when ``whole`` is 0)."""
    if whole <= 0:
        return Decimal("0")
    return dec2(part / whole * Decimal("100"))


def infer_iss_retention(
    gross: Decimal,
    federal_withholding: Decimal,
    iss_value: Decimal,
    declared_net: Decimal,
    flag: IssFlag = IssFlag.UNKNOWN,
    *,
    tolerance: Decimal = DEFAULT_TOLERANCE,
) -> tuple[bool, RetentionBasis]:
    """Decide whether ISS was deducted from the declared net value.

    An explicit document flag always wins.  Otherwise, when there is ISS to
    withhold, the two candidate nets (``gross - federal - iss`` and
    ``gross - federal``) are compared with ``declared_net``.  A single match
    within ``tolerance`` decides; with no single match the nearer candidate
    wins and the basis is reported as :attr:`RetentionBasis.NEAREST`.
    """
    if flag is IssFlag.WITHHELD:
        return True, RetentionBasis.EXPLICIT
    if flag is IssFlag.NOT_WITHHELD:
        return False, RetentionBasis.EXPLICIT
    if iss_value <= tolerance:
        return False, RetentionBasis.NOT_APPLICABLE

    net_if_withheld = gross - federal_withholding - iss_value
    net_if_not_withheld = gross - federal_withholding
    diff_withheld = abs(declared_net - net_if_withheld)
    diff_not_withheld = abs(declared_net - net_if_not_withheld)
    matches_withheld = diff_withheld < tolerance
    matches_not_withheld = diff_not_withheld < tolerance

    if matches_withheld != matches_not_withheld:
        return matches_withheld, RetentionBasis.MATCHED
    return diff_withheld < diff_not_withheld, RetentionBasis.NEAREST
