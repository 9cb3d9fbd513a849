import math

import pytest

from sme_valuation.domain.errors import OutOfRangeError
from sme_valuation.domain.errors import ValuationError
from sme_valuation.domain.types import AssetAdjustments
from sme_valuation.domain.types import MethodKind
from sme_valuation.domain.types import MethodResult
from sme_valuation.domain.types import MultipleRange
from sme_valuation.domain.types import ValuationInputs


class TestValuationInputs:
  """Tests for ValuationInputs validation and parsing."""

  def test_defaults(self, revenue_only_inputs):
    assert revenue_only_inputs.terminal_growth_rate == 0.04
    assert revenue_only_inputs.projection_years == 5
    assert revenue_only_inputs.ebitda is None
    assert revenue_only_inputs.normalized_discount_rate is None

  @pytest.mark.parametrize('revenue', [0, -1_000, math.nan, math.inf])
  def test_revenue_must_be_positive(self, revenue):
    with pytest.raises(OutOfRangeError) as exc_info:
      ValuationInputs(business_name='Duka', sector='retail',
                      annual_revenue=revenue)
    assert exc_info.value.parameter == 'annual_revenue'

  def test_missing_sector(self):
    with pytest.raises(ValueError, match='sector'):
      ValuationInputs(business_name='Duka', sector=' ', annual_revenue=1.0)

  def test_missing_name(self):
    with pytest.raises(ValueError, match='business_name'):
      ValuationInputs(business_name='', sector='retail', annual_revenue=1.0)

  def test_non_finite_optional(self):
    with pytest.raises(OutOfRangeError) as exc_info:
      ValuationInputs(business_name='Duka', sector='retail',
                      annual_revenue=1.0, ebitda=math.nan)
    assert exc_info.value.parameter == 'ebitda'

  @pytest.mark.parametrize('years', [0, 11, True, 5.0])
  def test_projection_years_bounds(self, years):
    with pytest.raises(OutOfRangeError):
      ValuationInputs(business_name='Duka', sector='retail',
                      annual_revenue=1.0, projection_years=years)

  def test_projection_years_limits_accepted(self):
    for years in (1, 10):
      inputs = ValuationInputs(business_name='Duka', sector='retail',
                               annual_revenue=1.0, projection_years=years)
      assert inputs.projection_years == years

  def test_errors_are_value_errors(self):
    """Callers can catch every validation failure as ValueError."""
    assert issubclass(OutOfRangeError, ValuationError)
    assert issubclass(ValuationError, ValueError)

  @pytest.mark.parametrize('given,expected', [
      (0.18, 0.18),
      (18, 0.18),
      (1.0, 1.0),
      (25.5, 0.255),
  ])
  def test_normalized_discount_rate(self, given, expected):
    inputs = ValuationInputs(business_name='Duka', sector='retail',
                             annual_revenue=1.0, discount_rate=given)

    assert inputs.normalized_discount_rate == pytest.approx(expected)

  def test_from_dict_camel_case(self):
    inputs = ValuationInputs.from_dict({
        'businessName': 'Duka Supermarket',
        'sector': 'retail',
        'annualRevenue': 50_000_000,
        'ebitda': 7_500_000,
        'netIncome': None,
        'freeCashFlow': 4_000_000,
        'totalAssets': 25_000_000,
        'totalLiabilities': 10_000_000,
        'discountRate': 18,
        'terminalGrowth': 0.03,
        'projectionYears': 7,
        'businessDescription': 'Neighbourhood supermarket',
    })

    assert inputs.business_name == 'Duka Supermarket'
    assert inputs.net_income is None
    assert inputs.free_cash_flow == 4_000_000
    assert inputs.normalized_discount_rate == pytest.approx(0.18)
    assert inputs.terminal_growth_rate == 0.03
    assert inputs.projection_years == 7
    assert inputs.business_description == 'Neighbourhood supermarket'

  def test_from_dict_asset_adjustments(self):
    inputs = ValuationInputs.from_dict({
        'business_name': 'Duka',
        'sector': 'retail',
        'annual_revenue': 1_000_000,
        'assetAdjustments': {
            'realEstateValue': 500_000,
            'intangibles': -100_000,
        },
    })

    assert inputs.asset_adjustments == AssetAdjustments(
        real_estate_value=500_000, intangibles=-100_000)

  def test_from_dict_unknown_key(self):
    with pytest.raises(TypeError):
      ValuationInputs.from_dict({
          'business_name': 'Duka',
          'sector': 'retail',
          'annual_revenue': 1.0,
          'employees': 12,
      })

  def test_frozen(self, retail_inputs):
    with pytest.raises(AttributeError):
      retail_inputs.ebitda = 1.0


class TestAssetAdjustments:
  """Tests for AssetAdjustments."""

  def test_summary_skips_empty(self):
    adjustments = AssetAdjustments(real_estate_value=2.0, other=0.0)

    assert adjustments.summary() == {'real_estate': 2.0}
    assert adjustments.total() == 2.0

  def test_empty(self):
    assert AssetAdjustments().total() == 0


class TestSmallTypes:
  """Tests for MultipleRange and MethodResult."""

  def test_midpoint(self):
    assert MultipleRange(2.5, 4.0).midpoint == pytest.approx(3.25)

  def test_method_result_to_dict(self):
    result = MethodResult(kind=MethodKind.COMPARABLE_REVENUE,
                          value=27_500_000.0,
                          assumptions={'multiple': 0.55},
                          multiple=0.55)

    assert result.to_dict() == {
        'type': 'comparable_revenue',
        'value': 27_500_000.0,
        'assumptions': {'multiple': 0.55},
        'multiple': 0.55,
    }

  def test_method_result_assumptions_copied(self):
    """Later changes to the source dict do not reach the result."""
    assumptions = {'multiple': 0.55}
    result = MethodResult(kind=MethodKind.COMPARABLE_REVENUE,
                          value=1.0,
                          assumptions=assumptions)
    assumptions['multiple'] = 9.0

    assert result.assumptions['multiple'] == 0.55
    with pytest.raises(TypeError):
      result.assumptions['multiple'] = 9.0

  def test_method_result_without_multiple(self):
    data = MethodResult(kind=MethodKind.DCF, value=1.0).to_dict()

    assert 'multiple' not in data
    assert data['type'] == 'dcf'
