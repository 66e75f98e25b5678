"""Project-wide constants."""

from decimal import Decimal
from os import getenv


def _env_bool(name: str, default: str | None = None) -> bool:
    """Return a boolean flag read from the environment."""

    value = getenv(name)
    if value is None:
        value = default if default is not None else "0"
    value = str(value).strip().lower()
    return value not in {"0", "false", "no", "off", ""}


def _env_decimal(name: str, default: Decimal | str) -> Decimal:
    """Return a non-negative :class:`Decimal` read from the environment."""

    fallback = Decimal(str(default))
    raw = getenv(name)
    if raw is None or str(raw).strip() == "":
        return abs(fallback)
    try:
        normalized = str(raw).strip().replace(",", ".")
        value = Decimal(normalized)
    except Exception:
        return abs(fallback)
    return abs(value) if value.is_finite() else abs(fallback)


def _env_int(name: str, default: int) -> int:
    """Return a non-negative ``int`` read from the environment."""

    raw = getenv(name)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return abs(int(str(raw).strip()))
    except ValueError:
        return default


# Currency rounding tolerance (ISS inference, reconciliation amount match).
DEFAULT_TOLERANCE = _env_decimal("NFP_TOLERANCE", "0.01")
# Federal withholding above this counts as an effective retention.
WITHHOLDING_THRESHOLD = _env_decimal("NFP_WITHHOLDING_THRESHOLD", "0.01")

# Reconciliation date-proximity tiers (days).
HIGH_CONFIDENCE_DAYS = _env_int("NFP_HIGH_CONFIDENCE_DAYS", 5)
MEDIUM_CONFIDENCE_DAYS = _env_int("NFP_MEDIUM_CONFIDENCE_DAYS", 15)
# Distance used when an invoice has no expected settlement date.
MISSING_DATE_DAYS = 999

TRACE = _env_bool("NFP_TRACE", "0")

DEFAULT_CURRENCY = (getenv("NFP_DEFAULT_CURRENCY") or "BRL").strip() or "BRL"
