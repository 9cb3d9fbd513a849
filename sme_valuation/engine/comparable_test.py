import pytest

from sme_valuation.domain.errors import MissingBasisError
from sme_valuation.domain.types import MultipleType
from sme_valuation.engine.comparable import compute_comparable


class TestComputeComparable:
  """Tests for compute_comparable function."""

  def test_revenue_multiple(self):
    """Revenue 50M at the retail midpoint 0.55 -> 27.5M."""
    result = compute_comparable(MultipleType.REVENUE, 0.55, 50_000_000)

    assert result.value == pytest.approx(27_500_000)
    assert result.basis == 50_000_000
    assert result.multiple == 0.55
    assert result.multiple_type == MultipleType.REVENUE

  def test_ebitda_multiple(self):
    """EBITDA 7.5M at 3.25 -> 24.375M."""
    result = compute_comparable('ebitda', 3.25, 50_000_000, ebitda=7_500_000)

    assert result.value == pytest.approx(24_375_000)
    assert result.multiple_type == MultipleType.EBITDA

  def test_earnings_multiple(self):
    result = compute_comparable(MultipleType.EARNINGS, 6.0, 50_000_000,
                                net_income=1_000_000)

    assert result.value == pytest.approx(6_000_000)
    assert result.basis == 1_000_000

  def test_missing_ebitda(self):
    with pytest.raises(MissingBasisError) as exc_info:
      compute_comparable(MultipleType.EBITDA, 3.25, 50_000_000)
    assert exc_info.value.method == 'ebitda'

  def test_missing_net_income(self):
    with pytest.raises(MissingBasisError):
      compute_comparable(MultipleType.EARNINGS, 6.0, 50_000_000, ebitda=1.0)

  def test_unknown_multiple_type(self):
    with pytest.raises(ValueError):
      compute_comparable('arr', 5.0, 50_000_000)
