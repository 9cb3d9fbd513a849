"""
Sensitivity analysis for DCF valuation.

This module provides tools to generate 2D sensitivity tables that show
how DCF enterprise value varies across discount rates and terminal
growth rates.

CLI Usage:
  python -m sme_valuation.analysis.sensitivity \\
      --fcf 4000000 \\
      --discount-rates 0.16,0.18,0.20 \\
      --terminal-growth-rates 0.02,0.03,0.04
"""

import argparse
import logging
from typing import List, Sequence

import pandas as pd

from sme_valuation.domain.errors import ValuationError
from sme_valuation.engine.dcf import compute_dcf

logger = logging.getLogger(__name__)


class SensitivityTableBuilder:
  """
  Build 2D sensitivity tables for DCF enterprise value.

  Varies discount rate and terminal growth while keeping the base cash
  flow, explicit-period growth and horizon fixed.
  """

  def __init__(
      self,
      free_cash_flow: float,
      growth_rate: float = 0.10,
      projection_years: int = 5,
  ):
    """
    Initialize sensitivity table builder.

    Args:
        free_cash_flow: Current annual free cash flow
        growth_rate: Explicit-period growth rate
        projection_years: Explicit forecast horizon
    """
    self.free_cash_flow = free_cash_flow
    self.growth_rate = growth_rate
    self.projection_years = projection_years

  def enterprise_value(self, discount_rate: float,
                       terminal_growth: float) -> float:
    """DCF enterprise value, or NaN when the rate pair is invalid."""
    try:
      result = compute_dcf(
          free_cash_flow=self.free_cash_flow,
          growth_rate=self.growth_rate,
          discount_rate=discount_rate,
          projection_years=self.projection_years,
          terminal_growth=terminal_growth,
      )
    except ValuationError as e:
      logger.debug('No value at r=%.4f g=%.4f: %s', discount_rate,
                   terminal_growth, e)
      return float('nan')
    return result.enterprise_value

  def build(
      self,
      discount_rates: Sequence[float],
      terminal_growth_rates: Sequence[float],
  ) -> pd.DataFrame:
    """
    Build enterprise value table.

    Args:
        discount_rates: Row values
        terminal_growth_rates: Column values

    Returns:
        DataFrame indexed by discount rate with one column per terminal
        growth rate
    """
    data = [[self.enterprise_value(r, g)
             for g in terminal_growth_rates]
            for r in discount_rates]
    table = pd.DataFrame(data,
                         index=pd.Index(list(discount_rates),
                                        name='discount_rate'),
                         columns=pd.Index(list(terminal_growth_rates),
                                          name='terminal_growth'))
    return table


def _parse_rates(text: str) -> List[float]:
  return [float(x) for x in text.split(',') if x.strip()]


def main() -> None:
  """CLI entrypoint."""
  parser = argparse.ArgumentParser(
      description='DCF sensitivity to discount and terminal growth rates')
  parser.add_argument('--fcf', type=float, required=True,
                      help='Current annual free cash flow')
  parser.add_argument('--growth-rate', type=float, default=0.10,
                      help='Explicit-period growth rate (default: 0.10)')
  parser.add_argument('--years', type=int, default=5,
                      help='Projection years (default: 5)')
  parser.add_argument('--discount-rates', type=str,
                      default='0.16,0.18,0.20,0.22,0.24',
                      help='Comma-separated discount rates')
  parser.add_argument('--terminal-growth-rates', type=str,
                      default='0.02,0.03,0.04,0.05',
                      help='Comma-separated terminal growth rates')
  args = parser.parse_args()

  logging.basicConfig(level=logging.INFO, format='%(message)s')

  builder = SensitivityTableBuilder(args.fcf, args.growth_rate, args.years)
  table = builder.build(_parse_rates(args.discount_rates),
                        _parse_rates(args.terminal_growth_rates))

  logger.info('\nEnterprise value (rows: discount rate, '
              'columns: terminal growth)')
  logger.info('%s', table.map(lambda v: f'{v:,.0f}').to_string())


if __name__ == '__main__':
  main()
