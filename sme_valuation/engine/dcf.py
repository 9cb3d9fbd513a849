"""
Discounted cash flow calculator.

Projects free cash flow at a constant growth rate over an explicit horizon,
discounts each year, and adds a Gordon Growth terminal value.

Key functions:
  validate_dcf_assumptions: Precondition checks, run before any math
  compute_dcf: Main entry point, returns DCFResult with yearly breakdown
  estimate_fcf: Approximates FCF from EBITDA when FCF is not reported
"""

from dataclasses import dataclass
from typing import Tuple

import pandas as pd

from sme_valuation.domain.errors import InvalidAssumptionError
from sme_valuation.domain.errors import OutOfRangeError

MAX_DISCOUNT_RATE = 0.5
MAX_TERMINAL_GROWTH = 0.05
MAX_GROWTH_RATE = 0.5


@dataclass(frozen=True)
class DCFYear:
  '''One projected year of the DCF breakdown.'''
  year: int
  fcf: float
  discount_factor: float
  present_value: float


@dataclass(frozen=True)
class DCFResult:
  '''
  DCF valuation with year-by-year breakdown.

  Attributes:
    present_value: Sum of discounted explicit-period cash flows
    terminal_value: Undiscounted Gordon Growth terminal value
    discounted_terminal_value: Terminal value discounted to today
    enterprise_value: present_value + discounted_terminal_value
    breakdown: Projected cash flow and discounting per year
  '''
  present_value: float
  terminal_value: float
  discounted_terminal_value: float
  enterprise_value: float
  breakdown: Tuple[DCFYear, ...]

  def breakdown_frame(self) -> pd.DataFrame:
    '''Breakdown as a DataFrame with one row per projected year.'''
    return pd.DataFrame(
        [(y.year, y.fcf, y.discount_factor, y.present_value)
         for y in self.breakdown],
        columns=['year', 'fcf', 'discount_factor', 'present_value'],
    )


def validate_dcf_assumptions(
    discount_rate: float,
    terminal_growth: float,
    growth_rate: float = 0.0,
) -> None:
  """
  Check DCF rate assumptions.

  Args:
    discount_rate: Required return (WACC) as a fraction
    terminal_growth: Perpetual growth rate as a fraction
    growth_rate: Explicit-period growth rate as a fraction

  Raises:
    InvalidAssumptionError: If discount_rate <= terminal_growth
    OutOfRangeError: If a rate falls outside its domain
  """
  if discount_rate <= terminal_growth:
    raise InvalidAssumptionError(
        f'Discount rate must exceed terminal growth '
        f'(discount_rate={discount_rate}, terminal_growth={terminal_growth})')

  if not 0 <= terminal_growth <= MAX_TERMINAL_GROWTH:
    raise OutOfRangeError('terminal_growth', terminal_growth, 0.0,
                          MAX_TERMINAL_GROWTH)

  if not 0 < discount_rate <= MAX_DISCOUNT_RATE:
    raise OutOfRangeError('discount_rate', discount_rate, 0.0,
                          MAX_DISCOUNT_RATE)

  if not 0 <= growth_rate <= MAX_GROWTH_RATE:
    raise OutOfRangeError('growth_rate', growth_rate, 0.0, MAX_GROWTH_RATE)


def compute_dcf(
    free_cash_flow: float,
    growth_rate: float,
    discount_rate: float,
    projection_years: int,
    terminal_growth: float,
) -> DCFResult:
  """
  Compute enterprise value from projected free cash flow.

  Args:
    free_cash_flow: Current annual free cash flow (FCF0)
    growth_rate: Annual FCF growth over the explicit period
    discount_rate: Required return (WACC)
    projection_years: Number of explicit forecast years
    terminal_growth: Perpetual growth after the explicit period

  Returns:
    DCFResult with enterprise value and yearly breakdown

  Raises:
    InvalidAssumptionError: If discount_rate <= terminal_growth
    OutOfRangeError: If a rate or the horizon is out of range
  """
  validate_dcf_assumptions(discount_rate, terminal_growth, growth_rate)
  if projection_years < 1:
    raise OutOfRangeError('projection_years', projection_years,
                          message='projection_years must be at least 1')

  breakdown = []
  pv = 0.0
  for year in range(1, projection_years + 1):
    fcf = free_cash_flow * (1.0 + growth_rate)**year
    discount_factor = (1.0 + discount_rate)**year
    year_pv = fcf / discount_factor
    breakdown.append(DCFYear(year, fcf, discount_factor, year_pv))
    pv += year_pv

  final_fcf = free_cash_flow * (1.0 + growth_rate)**projection_years
  tv = final_fcf * (1.0 + terminal_growth) / (discount_rate - terminal_growth)
  discounted_tv = tv / (1.0 + discount_rate)**projection_years

  return DCFResult(
      present_value=pv,
      terminal_value=tv,
      discounted_terminal_value=discounted_tv,
      enterprise_value=pv + discounted_tv,
      breakdown=tuple(breakdown),
  )


def estimate_fcf(
    ebitda: float,
    depreciation_amortization: float = 0.0,
    taxes: float = 0.0,
    capex: float = 0.0,
    change_in_working_capital: float = 0.0,
) -> float:
  """Approximate free cash flow from EBITDA and its usual deductions."""
  return (ebitda - depreciation_amortization - taxes - capex -
          change_in_working_capital)
