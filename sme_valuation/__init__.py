'''
Valuation engine for small and medium businesses.

Estimates what a business is worth from its financials using three
methods (discounted cash flow, market comparables, net asset value),
combines them into one weighted estimate, and derives conservative / base /
upside scenarios plus sector-specific value drivers.

Usage:
  from sme_valuation.domain.types import ValuationInputs
  from sme_valuation.run import compute_valuation

  inputs = ValuationInputs(business_name='Duka Ltd', sector='retail',
                           annual_revenue=50_000_000, ebitda=7_500_000)
  report = compute_valuation(inputs)
'''
