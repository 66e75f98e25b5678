from decimal import Decimal

from nfparse.parsing.codes import IssFlag, RetentionBasis
from nfparse.parsing.money import infer_iss_retention

GROSS = Decimal("1000.00")
FEDERAL = Decimal("36.50")
ISS = Decimal("50.00")


def test_explicit_flag_wins_over_arithmetic():
    # the declared net says "not withheld", the flag says otherwise
    withheld, basis = infer_iss_retention(
        GROSS, FEDERAL, ISS, Decimal("963.50"), IssFlag.WITHHELD
    )
    assert withheld is True
    assert basis is RetentionBasis.EXPLICIT

    withheld, basis = infer_iss_retention(
        GROSS, FEDERAL, ISS, Decimal("913.50"), IssFlag.NOT_WITHHELD
    )
    assert withheld is False
    assert basis is RetentionBasis.EXPLICIT


def test_no_iss_is_not_applicable():
    withheld, basis = infer_iss_retention(GROSS, FEDERAL, Decimal("0"), GROSS)
    assert (withheld, basis) == (False, RetentionBasis.NOT_APPLICABLE)

    withheld, basis = infer_iss_retention(GROSS, FEDERAL, Decimal("0.01"), GROSS)
    assert (withheld, basis) == (False, RetentionBasis.NOT_APPLICABLE)


def test_single_match_withheld():
    withheld, basis = infer_iss_retention(GROSS, FEDERAL, ISS, Decimal("913.50"))
    assert (withheld, basis) == (True, RetentionBasis.MATCHED)


def test_single_match_not_withheld():
    withheld, basis = infer_iss_retention(GROSS, FEDERAL, ISS, Decimal("963.50"))
    assert (withheld, basis) == (False, RetentionBasis.MATCHED)


def test_tolerance_is_strict():
    # exactly one cent off is not a match
    withheld, basis = infer_iss_retention(GROSS, FEDERAL, ISS, Decimal("913.51"))
    assert basis is RetentionBasis.NEAREST
    assert withheld is True

    withheld, basis = infer_iss_retention(
        GROSS, FEDERAL, ISS, Decimal("913.51"), tolerance=Decimal("0.02")
    )
    assert (withheld, basis) == (True, RetentionBasis.MATCHED)


def test_nearest_when_nothing_matches():
    withheld, basis = infer_iss_retention(GROSS, FEDERAL, ISS, Decimal("920.00"))
    assert (withheld, basis) == (True, RetentionBasis.NEAREST)

    withheld, basis = infer_iss_retention(GROSS, FEDERAL, ISS, Decimal("960.00"))
    assert (withheld, basis) == (False, RetentionBasis.NEAREST)


def test_equidistant_prefers_not_withheld():
    withheld, basis = infer_iss_retention(GROSS, FEDERAL, ISS, Decimal("938.50"))
    assert (withheld, basis) == (False, RetentionBasis.NEAREST)
