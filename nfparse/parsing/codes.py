"""Enumerations used while parsing fiscal documents."""

from enum import Enum


class Dialect(str, Enum):
    """Structural XML dialect of an invoice document."""

    NFSE_NACIONAL_SPED = "NFSE_NACIONAL_SPED"
    NFSE_SAO_PAULO = "NFSE_SAO_PAULO"
    ABRASF = "ABRASF"
    NFE_TRADICIONAL = "NFE_TRADICIONAL"


class IssFlag(Enum):
    """ISS retention as stated by the document itself."""

    UNKNOWN = "unknown"
    WITHHELD = "withheld"
    NOT_WITHHELD = "not_withheld"


class RetentionBasis(str, Enum):
    """How ``is_municipal_tax_withheld`` was decided."""

    EXPLICIT = "explicit"
    MATCHED = "matched"
    NEAREST = "nearest"
    NOT_APPLICABLE = "not_applicable"


class Confidence(str, Enum):
    """Reconciliation suggestion confidence tiers."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# SPED tpRetISSQN: 1 = não retido, 2 = retido pelo tomador,
# 3 = retido pelo intermediário
SPED_ISS_NOT_WITHHELD = {"1"}
SPED_ISS_WITHHELD = {"2", "3"}

# ABRASF IssRetido: 1 = retido, 2 = não retido
ABRASF_ISS_WITHHELD = {"1"}
ABRASF_ISS_NOT_WITHHELD = {"2"}

# São Paulo ISSRetido is boolean-valued
SP_ISS_WITHHELD = {"true", "1"}
SP_ISS_NOT_WITHHELD = {"false", "0"}
