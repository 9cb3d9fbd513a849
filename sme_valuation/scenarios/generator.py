'''
Conservative / base / upside scenario generation.

The base scenario passes the composite valuation through unchanged. The
other two rescale each method value, floor it at zero, and recombine with
their own 0.4 / 0.3 / 0.3 weights. Method components of every scenario,
and the weighted values of the non-base ones, are rounded to whole
currency units.

Ordering conservative <= base <= upside is typical but not guaranteed:
the recombination weights differ from the composite engine's.
'''

import logging
from typing import List, Optional

import pandas as pd

from sme_valuation.domain.types import CompositeValuationResult
from sme_valuation.domain.types import MethodKind
from sme_valuation.domain.types import Scenario
from sme_valuation.domain.types import ScenarioSet
from sme_valuation.scenarios.config import BASE_PERSPECTIVE
from sme_valuation.scenarios.config import ScenarioPolicy

logger = logging.getLogger(__name__)

# (WACC shift, indicative value multiplier, label)
SENSITIVITY_STEPS = [
    (-0.02, 1.15, '+15%'),
    (-0.01, 1.08, '+8%'),
    (0.0, 1.00, 'Base'),
    (0.01, 0.92, '-8%'),
    (0.02, 0.85, '-15%'),
]


def _floor(value: float) -> float:
  return max(value, 0.0)


def _whole(value: float) -> float:
  return float(round(value))


def _shift(base: float, adjustment: float) -> float:
  '''Apply a rate adjustment; downward shifts stop at zero.'''
  if adjustment < 0:
    return _floor(base + adjustment)
  return base + adjustment


def apply_policy(
    policy: ScenarioPolicy,
    dcf_value: float,
    comparable_value: float,
    asset_value: float,
    base_wacc: float,
    base_terminal_growth: float,
) -> Scenario:
  '''
  Derive one scenario from base method values.

  Args:
    policy: Adjustments to apply
    dcf_value: Base DCF value
    comparable_value: Base comparable value
    asset_value: Base asset-based value
    base_wacc: Base discount rate
    base_terminal_growth: Base terminal growth

  Returns:
    Scenario with rounded component and weighted values
  '''
  dcf = _whole(_floor(dcf_value * policy.dcf_multiplier))
  comparable = _whole(_floor(comparable_value * policy.comparable_multiplier))
  asset = _whole(_floor(asset_value * policy.asset_multiplier))

  weighted = _whole(dcf * policy.dcf_weight +
                    comparable * policy.comparable_weight +
                    asset * policy.asset_weight)

  return Scenario(
      name=policy.name,
      perspective=policy.perspective,
      weighted_value=weighted,
      dcf=dcf,
      comparable=comparable,
      asset_based=asset,
      assumptions={
          'wacc': _shift(base_wacc, policy.wacc_adjustment),
          'terminal_growth': _shift(base_terminal_growth,
                                    policy.terminal_growth_adjustment),
          'growth_multiplier': policy.dcf_multiplier,
      },
  )


def generate_scenarios(
    dcf_value: float,
    comparable_value: float,
    asset_value: float,
    final_valuation: float,
    base_wacc: float,
    base_terminal_growth: float,
) -> ScenarioSet:
  '''
  Build the conservative, base and upside scenarios.

  Args:
    dcf_value: Base DCF value
    comparable_value: Base comparable value
    asset_value: Base asset-based value
    final_valuation: Composite valuation, used verbatim for the base case
    base_wacc: Discount rate of the base case
    base_terminal_growth: Terminal growth of the base case

  Returns:
    ScenarioSet with all three scenarios
  '''
  conservative = apply_policy(ScenarioPolicy.conservative(), dcf_value,
                              comparable_value, asset_value, base_wacc,
                              base_terminal_growth)
  upside = apply_policy(ScenarioPolicy.upside(), dcf_value, comparable_value,
                        asset_value, base_wacc, base_terminal_growth)
  base = Scenario(
      name='base',
      perspective=BASE_PERSPECTIVE,
      weighted_value=final_valuation,
      dcf=_whole(dcf_value),
      comparable=_whole(comparable_value),
      asset_based=_whole(asset_value),
      assumptions={
          'wacc': base_wacc,
          'terminal_growth': base_terminal_growth,
          'growth_multiplier': 1.0,
      },
  )

  ordered = (conservative.weighted_value <= base.weighted_value <=
             upside.weighted_value)
  if not ordered:
    logger.debug('Scenarios out of order: %.0f / %.0f / %.0f',
                 conservative.weighted_value, base.weighted_value,
                 upside.weighted_value)

  return ScenarioSet(conservative=conservative, base=base, upside=upside)


def _first_value(result: CompositeValuationResult,
                 *kinds: MethodKind) -> Optional[float]:
  for kind in kinds:
    value = result.value_of(kind)
    if value is not None:
      return value
  return None


def scenarios_from_composite(result: CompositeValuationResult) -> ScenarioSet:
  '''
  Build scenarios from a composite result.

  Methods that did not run are replaced by the composite final valuation.
  The comparable component prefers the revenue multiple and falls back to
  the EBITDA multiple.
  '''
  final = result.final_valuation
  dcf = _first_value(result, MethodKind.DCF)
  comparable = _first_value(result, MethodKind.COMPARABLE_REVENUE,
                            MethodKind.COMPARABLE_EBITDA)
  asset = _first_value(result, MethodKind.ASSET_BASED)

  return generate_scenarios(
      dcf_value=final if dcf is None else dcf,
      comparable_value=final if comparable is None else comparable,
      asset_value=final if asset is None else asset,
      final_valuation=final,
      base_wacc=result.discount_rate,
      base_terminal_growth=result.terminal_growth,
  )


def wacc_sensitivity(base_value: float, base_wacc: float) -> pd.DataFrame:
  '''
  Indicative value range around the base WACC.

  Returns:
    DataFrame with columns wacc, value, change (one row per step)
  '''
  rows: List[dict] = []
  for shift, multiplier, label in SENSITIVITY_STEPS:
    rows.append({
        'wacc': _floor(base_wacc + shift),
        'value': _whole(base_value * multiplier),
        'change': label,
    })
  return pd.DataFrame(rows, columns=['wacc', 'value', 'change'])
