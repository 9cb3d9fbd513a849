import pytest

from sme_valuation.domain.errors import InvalidAssumptionError
from sme_valuation.domain.errors import OutOfRangeError
from sme_valuation.engine.dcf import compute_dcf
from sme_valuation.engine.dcf import estimate_fcf
from sme_valuation.engine.dcf import validate_dcf_assumptions


class TestComputeDCF:
  """Tests for compute_dcf function."""

  def test_reference_retail_case(self):
    """Five-year projection of KES 4M FCF at 10% growth, 18% WACC.

    Manual calculation (q = 1.10 / 1.18):
    PV explicit = 4M * (q + q^2 + q^3 + q^4 + q^5) = 4M * 4.07043 = 16.282M
    FCF5 = 4M * 1.1^5 = 6.442M
    TV = 6.442M * 1.04 / (0.18 - 0.04) = 47.855M
    PV(TV) = 47.855M / 1.18^5 = 20.918M
    EV = 37.200M
    """
    result = compute_dcf(
        free_cash_flow=4_000_000,
        growth_rate=0.10,
        discount_rate=0.18,
        projection_years=5,
        terminal_growth=0.04,
    )

    assert result.present_value == pytest.approx(16_281_718, rel=1e-4)
    assert result.terminal_value == pytest.approx(47_855_154, rel=1e-4)
    assert result.discounted_terminal_value == pytest.approx(20_917_929,
                                                             rel=1e-4)
    assert result.enterprise_value == pytest.approx(37_200_000, rel=1e-3)
    assert result.enterprise_value == pytest.approx(
        result.present_value + result.discounted_terminal_value)

  def test_breakdown_per_year(self):
    """Breakdown exposes each projected year.

    Year 1: FCF = 4.4M, factor = 1.18, PV = 3.7288M
    """
    result = compute_dcf(4_000_000, 0.10, 0.18, 5, 0.04)

    assert [y.year for y in result.breakdown] == [1, 2, 3, 4, 5]
    first = result.breakdown[0]
    assert first.fcf == pytest.approx(4_400_000)
    assert first.discount_factor == pytest.approx(1.18)
    assert first.present_value == pytest.approx(3_728_813.6, abs=1)
    assert sum(y.present_value for y in result.breakdown) == pytest.approx(
        result.present_value)

  def test_zero_growth_perpetuity(self):
    """No growth anywhere collapses to a plain perpetuity.

    PV explicit = 100/1.1 + 100/1.21 + 100/1.331 = 248.685
    TV = 100 / 0.10 = 1000, PV(TV) = 1000 / 1.331 = 751.315
    EV = 1000 (= 100 / 0.10)
    """
    result = compute_dcf(100.0, 0.0, 0.10, 3, 0.0)

    assert result.present_value == pytest.approx(248.685, abs=0.001)
    assert result.terminal_value == pytest.approx(1000.0)
    assert result.enterprise_value == pytest.approx(1000.0)

  def test_single_year(self):
    """One-year horizon.

    FCF1 = 110, PV = 100
    TV = 110 * 1.02 / 0.08 = 1402.5, PV(TV) = 1275
    """
    result = compute_dcf(100.0, 0.10, 0.10, 1, 0.02)

    assert result.present_value == pytest.approx(100.0)
    assert result.terminal_value == pytest.approx(1402.5)
    assert result.enterprise_value == pytest.approx(1375.0)

  def test_terminal_value_positive(self):
    """Positive FCF and non-negative growth give a positive terminal value."""
    for r in (0.01, 0.10, 0.25, 0.5):
      for g in (0.0, 0.005, 0.03, 0.05):
        if r <= g:
          continue
        for growth in (0.0, 0.1, 0.5):
          result = compute_dcf(1_000.0, growth, r, 5, g)
          assert result.terminal_value > 0

  def test_longer_horizon_discounts_terminal_more(self):
    """Same rates, longer horizon: explicit PV share grows."""
    short = compute_dcf(100.0, 0.05, 0.15, 3, 0.03)
    long = compute_dcf(100.0, 0.05, 0.15, 10, 0.03)

    assert long.present_value > short.present_value
    assert len(long.breakdown) == 10

  def test_breakdown_frame(self):
    """Breakdown as DataFrame."""
    frame = compute_dcf(100.0, 0.05, 0.15, 4, 0.03).breakdown_frame()

    assert list(frame.columns) == [
        'year', 'fcf', 'discount_factor', 'present_value'
    ]
    assert len(frame) == 4
    assert frame['year'].tolist() == [1, 2, 3, 4]

  def test_zero_projection_years(self):
    """Empty horizon is rejected."""
    with pytest.raises(OutOfRangeError):
      compute_dcf(100.0, 0.05, 0.15, 0, 0.03)


class TestValidateDCFAssumptions:
  """Tests for validate_dcf_assumptions function."""

  def test_valid_rates(self):
    validate_dcf_assumptions(0.18, 0.04, 0.10)

  def test_discount_equals_terminal_growth(self):
    """r == g makes the Gordon denominator zero."""
    with pytest.raises(InvalidAssumptionError,
                       match='must exceed terminal growth'):
      validate_dcf_assumptions(0.04, 0.04, 0.10)

  def test_discount_below_terminal_growth(self):
    with pytest.raises(InvalidAssumptionError):
      validate_dcf_assumptions(0.03, 0.05, 0.10)

  def test_terminal_growth_too_high(self):
    with pytest.raises(OutOfRangeError) as exc_info:
      validate_dcf_assumptions(0.20, 0.06, 0.10)
    assert exc_info.value.parameter == 'terminal_growth'

  def test_negative_terminal_growth(self):
    with pytest.raises(OutOfRangeError):
      validate_dcf_assumptions(0.20, -0.01, 0.10)

  def test_discount_rate_too_high(self):
    with pytest.raises(OutOfRangeError) as exc_info:
      validate_dcf_assumptions(0.6, 0.04, 0.10)
    assert exc_info.value.parameter == 'discount_rate'
    assert exc_info.value.upper == 0.5

  def test_discount_rate_upper_bound_inclusive(self):
    validate_dcf_assumptions(0.5, 0.04, 0.10)

  def test_growth_rate_out_of_range(self):
    with pytest.raises(OutOfRangeError) as exc_info:
      validate_dcf_assumptions(0.20, 0.04, 0.6)
    assert exc_info.value.parameter == 'growth_rate'

  def test_negative_growth_rate(self):
    with pytest.raises(OutOfRangeError):
      validate_dcf_assumptions(0.20, 0.04, -0.05)

  def test_compute_checks_before_math(self):
    """compute_dcf fails fast on invalid rates."""
    with pytest.raises(InvalidAssumptionError):
      compute_dcf(100.0, 0.10, 0.04, 5, 0.04)


class TestEstimateFCF:
  """Tests for estimate_fcf function."""

  def test_ebitda_only(self):
    assert estimate_fcf(7_500_000) == 7_500_000

  def test_with_taxes(self):
    """Composite engine deducts 30% of EBITDA as taxes."""
    assert estimate_fcf(7_500_000, 0, 2_250_000) == 5_250_000

  def test_all_deductions(self):
    fcf = estimate_fcf(1_000, depreciation_amortization=100, taxes=200,
                       capex=150, change_in_working_capital=50)
    assert fcf == 500
