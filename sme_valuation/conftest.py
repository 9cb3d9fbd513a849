import pytest

from sme_valuation.domain.types import MultipleRange
from sme_valuation.domain.types import RiskTier
from sme_valuation.domain.types import SectorProfile
from sme_valuation.domain.types import ValuationInputs
from sme_valuation.sectors.registry import SectorRegistry


@pytest.fixture
def retail_inputs() -> ValuationInputs:
  """Retail business with every financial field reported."""
  return ValuationInputs(
      business_name='Duka Supermarket',
      sector='retail',
      annual_revenue=50_000_000,
      ebitda=7_500_000,
      net_income=5_000_000,
      free_cash_flow=4_000_000,
      total_assets=25_000_000,
      total_liabilities=10_000_000,
      discount_rate=0.18,
      terminal_growth_rate=0.04,
      projection_years=5,
  )


@pytest.fixture
def revenue_only_inputs() -> ValuationInputs:
  """Business that reports nothing but revenue."""
  return ValuationInputs(
      business_name='Mama Mboga',
      sector='retail',
      annual_revenue=2_000_000,
  )


@pytest.fixture
def widget_profile() -> SectorProfile:
  """Small synthetic sector with round numbers."""
  return SectorProfile(
      key='widgets',
      name='Widget Makers',
      description='Synthetic sector for tests',
      risk_tier=RiskTier.MODERATE,
      base_discount_rate=0.15,
      risk_premium=0.05,
      ebitda_multiple=MultipleRange(4.0, 6.0),
      revenue_multiple=MultipleRange(1.0, 2.0),
      key_factors=('Throughput',),
  )


@pytest.fixture
def widget_registry(widget_profile) -> SectorRegistry:
  """Registry holding only the synthetic sector."""
  return SectorRegistry({'widgets': widget_profile}, version='test')
