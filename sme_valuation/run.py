'''
Single-business valuation entrypoint.

This module provides the main entry point for running valuations. It:
1. Runs the composite engine (DCF, comparables, asset-based)
2. Derives conservative / base / upside scenarios
3. Attaches sector value drivers
4. Returns a ValuationReport the caller can persist or render

Usage:
  from sme_valuation.domain.types import ValuationInputs
  from sme_valuation.run import compute_valuation

  report = compute_valuation(ValuationInputs(
      business_name='Duka Ltd',
      sector='retail',
      annual_revenue=50_000_000,
      ebitda=7_500_000,
  ))
  if report.insufficient_input:
    ...
  print(f'Value: KES {report.final_valuation:,.0f}')

CLI:
  python -m sme_valuation.run --input business.json --json
  python -m sme_valuation.run --name "Duka Ltd" --sector retail \\
      --revenue 50000000 --ebitda 7500000 --fcf 4000000
'''

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any, Dict, List, Optional

from sme_valuation.domain.types import ValuationInputs
from sme_valuation.domain.types import ValuationReport
from sme_valuation.engine.composite import CompositeValuationEngine
from sme_valuation.engine.composite import EngineConfig
from sme_valuation.scenarios.generator import scenarios_from_composite
from sme_valuation.sectors.registry import SectorRegistry
from sme_valuation.sectors.value_drivers import recommend_value_drivers

logger = logging.getLogger(__name__)


def compute_valuation(
    inputs: ValuationInputs,
    registry: Optional[SectorRegistry] = None,
    config: Optional[EngineConfig] = None,
) -> ValuationReport:
  '''
  Value one business.

  Args:
    inputs: Validated valuation inputs
    registry: Sector registry (default: bundled reference tables)
    config: Engine policy constants (default: EngineConfig.default())

  Returns:
    ValuationReport. When no method could run, report.insufficient_input
    is True and final_valuation must not be presented as an estimate.

  Raises:
    OutOfRangeError: If the discount rate or terminal growth is invalid
  '''
  engine = CompositeValuationEngine(registry=registry, config=config)
  composite = engine.evaluate(inputs)
  scenarios = scenarios_from_composite(composite)
  drivers = recommend_value_drivers(inputs.sector)

  if composite.is_sufficient:
    logger.info('Valued %s business with %d of 4 methods', inputs.sector,
                composite.method_count)
  else:
    logger.warning('Insufficient input to value %s business', inputs.sector)

  return ValuationReport(composite=composite,
                         scenarios=scenarios,
                         value_drivers=drivers)


def _inputs_from_args(args: argparse.Namespace) -> ValuationInputs:
  if args.input:
    payload = json.loads(Path(args.input).read_text(encoding='utf-8'))
    return ValuationInputs.from_dict(payload)

  if not args.sector or args.revenue is None:
    raise SystemExit('--sector and --revenue are required without --input')

  data: Dict[str, Any] = {
      'business_name': args.name,
      'sector': args.sector,
      'annual_revenue': args.revenue,
      'ebitda': args.ebitda,
      'net_income': args.net_income,
      'free_cash_flow': args.fcf,
      'total_assets': args.assets,
      'total_liabilities': args.liabilities,
      'discount_rate': args.discount_rate,
      'terminal_growth_rate': args.terminal_growth,
      'projection_years': args.years,
  }
  return ValuationInputs.from_dict(data)


def _log_report(report: ValuationReport) -> None:
  separator = '=' * 70
  composite = report.composite
  profile = composite.sector_profile

  logger.info(separator)
  logger.info('SME Valuation - %s',
              profile.name if profile else 'Unknown sector')
  logger.info('Discount rate: %.2f%%  Terminal growth: %.2f%%',
              composite.discount_rate * 100, composite.terminal_growth * 100)
  logger.info(separator)

  logger.info('\nMethods (%d of 4):', composite.method_count)
  for method in composite.methods:
    logger.info('  %-20s KES %s', method.kind.value, f'{method.value:,.0f}')
  for exclusion in composite.exclusions:
    logger.info('  skipped: %s', exclusion.reason)

  if report.insufficient_input:
    logger.info('\nInsufficient input: no valuation could be computed')
    logger.info(separator)
    return

  logger.info('\nFinal valuation: KES %s', f'{report.final_valuation:,.0f}')

  logger.info('\nScenarios:')
  for scenario in report.scenarios:
    logger.info('  %-13s KES %s  (WACC %.2f%%)', scenario.name,
                f'{scenario.weighted_value:,.0f}',
                scenario.assumptions['wacc'] * 100)

  if report.value_drivers:
    logger.info('\nValue drivers:')
    for driver in report.value_drivers:
      logger.info('  +%2d%%  %s', driver.impact, driver.action)

  logger.info(separator)


def main(argv: Optional[List[str]] = None) -> int:
  '''CLI entrypoint.'''
  parser = argparse.ArgumentParser(description='Run SME valuation')
  parser.add_argument('--input', type=Path, help='JSON file with inputs')
  parser.add_argument('--name', type=str, default='Unnamed business',
                      help='Business name')
  parser.add_argument('--sector', type=str, help='Sector key')
  parser.add_argument('--revenue', type=float, help='Annual revenue')
  parser.add_argument('--ebitda', type=float, help='Annual EBITDA')
  parser.add_argument('--net-income', type=float, help='Annual net income')
  parser.add_argument('--fcf', type=float, help='Annual free cash flow')
  parser.add_argument('--assets', type=float, help='Total assets')
  parser.add_argument('--liabilities', type=float, help='Total liabilities')
  parser.add_argument('--discount-rate', type=float,
                      help='Discount rate override (0.18 or 18)')
  parser.add_argument('--terminal-growth', type=float,
                      help='Terminal growth rate (default: 0.04)')
  parser.add_argument('--years', type=int, help='Projection years (default: 5)')
  parser.add_argument('--config', type=Path,
                      help='JSON file with engine config overrides')
  parser.add_argument('--sectors', type=Path,
                      help='JSON file with an alternative sector table')
  parser.add_argument('--json', action='store_true',
                      help='Print the report as JSON')
  parser.add_argument('-v', '--verbose', action='store_true',
                      help='Verbose output')
  args = parser.parse_args(argv)

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(message)s',
  )

  try:
    config = None
    if args.config:
      config = EngineConfig.from_json(
          args.config.read_text(encoding='utf-8'))
    registry = None
    if args.sectors:
      registry = SectorRegistry.from_json(
          args.sectors.read_text(encoding='utf-8'))

    inputs = _inputs_from_args(args)
    report = compute_valuation(inputs, registry=registry, config=config)
  except (OSError, KeyError, ValueError, TypeError) as e:
    logger.error('Valuation failed: %s', e)
    return 1

  if args.json:
    print(json.dumps(report.to_dict(), indent=2))
  else:
    _log_report(report)

  return 1 if report.insufficient_input else 0


if __name__ == '__main__':
  sys.exit(main())
