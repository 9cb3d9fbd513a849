'''
Batch valuation for many businesses at once.

This module provides tools to:
1. Run valuations for every row of a CSV / DataFrame
2. Compare valuations across businesses and sectors
3. Export results to CSV for further analysis

Input columns use the snake_case names of ValuationInputs
(business_name, sector, annual_revenue, ebitda, ...); empty cells are
treated as not reported.

Usage (CLI):
  python -m sme_valuation.analysis.batch_valuation \
    --input data/businesses.csv \
    --output results/valuations.csv \
    -v

Usage (Python API):
  from sme_valuation.analysis.batch_valuation import batch_valuation

  df = batch_valuation(pd.read_csv('businesses.csv'))
  df.to_csv('results.csv', index=False)
'''

import argparse
import logging
import traceback
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import pandas as pd

from sme_valuation.domain.types import MethodKind
from sme_valuation.domain.types import ValuationInputs
from sme_valuation.domain.types import ValuationReport
from sme_valuation.engine.composite import EngineConfig
from sme_valuation.run import compute_valuation
from sme_valuation.sectors.registry import SectorRegistry

logger = logging.getLogger(__name__)

INPUT_COLUMNS = [
    'business_name', 'sector', 'annual_revenue', 'ebitda', 'net_income',
    'free_cash_flow', 'total_assets', 'total_liabilities', 'discount_rate',
    'terminal_growth_rate', 'projection_years'
]


def _clean_record(record: Mapping[str, Any]) -> Dict[str, Any]:
  '''Drop NaN cells and columns that are not valuation inputs.'''
  cleaned: Dict[str, Any] = {}
  for key in INPUT_COLUMNS:
    value = record.get(key)
    if value is None or (isinstance(value, float) and pd.isna(value)):
      continue
    cleaned[key] = value
  if 'projection_years' in cleaned:
    cleaned['projection_years'] = int(cleaned['projection_years'])
  if 'business_name' in cleaned:
    cleaned['business_name'] = str(cleaned['business_name'])
  return cleaned


def _report_to_dict(business_name: str, sector: str,
                    report: ValuationReport) -> dict:
  '''Convert ValuationReport to flat dictionary for DataFrame row.'''
  composite = report.composite
  row: Dict[str, Any] = {
      'business_name': business_name,
      'sector': sector,
      'status': 'insufficient_input' if report.insufficient_input else 'ok',
      'final_valuation': (composite.final_valuation
                          if composite.is_sufficient else None),
      'method_count': composite.method_count,
      'discount_rate': composite.discount_rate,
      'terminal_growth': composite.terminal_growth,
  }
  for kind in MethodKind:
    row[kind.value] = composite.value_of(kind)
  for scenario in report.scenarios:
    row[f'{scenario.name}_value'] = scenario.weighted_value
  row['error'] = None
  return row


def batch_valuation(
    businesses: Union[pd.DataFrame, Iterable[Mapping[str, Any]]],
    registry: Optional[SectorRegistry] = None,
    config: Optional[EngineConfig] = None,
    verbose: bool = False,
) -> pd.DataFrame:
  '''
  Run valuation for every business.

  Args:
    businesses: DataFrame or iterable of records with input columns
    registry: Sector registry (default: bundled reference tables)
    config: Engine policy constants
    verbose: Enable verbose logging

  Returns:
    DataFrame with one row per business:
    - business_name, sector: Identification
    - status: 'ok', 'insufficient_input' or 'error'
    - final_valuation: Composite value (None unless status is 'ok')
    - method_count: Number of methods that ran
    - dcf, comparable_revenue, comparable_ebitda, asset_based: Method values
    - conservative_value, base_value, upside_value: Scenario values
    - error: Error message for rows that failed

  Raises:
    ValueError: If no business could be valued
  '''
  if isinstance(businesses, pd.DataFrame):
    records = businesses.to_dict(orient='records')
  else:
    records = list(businesses)

  rows = []
  succeeded = 0
  for i, record in enumerate(records, 1):
    name = str(record.get('business_name', f'row {i}'))
    sector = str(record.get('sector', ''))
    if verbose:
      logger.info('[%d/%d] Processing %s business...', i, len(records),
                  sector)

    try:
      inputs = ValuationInputs.from_dict(_clean_record(record))
      report = compute_valuation(inputs, registry=registry, config=config)
    except (ValueError, TypeError) as e:
      logger.warning('Failed to value row %d (%s): %s', i, sector, e)
      if verbose:
        logger.debug('%s', traceback.format_exc())
      rows.append({
          'business_name': name,
          'sector': sector,
          'status': 'error',
          'error': str(e),
      })
      continue

    rows.append(_report_to_dict(name, sector, report))
    if not report.insufficient_input:
      succeeded += 1
      if verbose:
        logger.info('  Value: KES %s (%d methods)',
                    f'{report.final_valuation:,.0f}',
                    report.composite.method_count)

  if succeeded == 0:
    raise ValueError(f'No successful valuations out of {len(records)} rows')

  return pd.DataFrame(rows)


def _print_summary(df: pd.DataFrame) -> None:
  '''Print summary statistics for batch valuation results.'''
  valued = df[df['status'] == 'ok']

  logger.info('')
  logger.info('=' * 70)
  logger.info('Summary Statistics')
  logger.info('=' * 70)
  logger.info('Total businesses: %d', len(df))
  logger.info('Valued: %d', len(valued))
  logger.info('Insufficient input: %d',
              (df['status'] == 'insufficient_input').sum())
  logger.info('Errors: %d', (df['status'] == 'error').sum())
  logger.info('')

  if len(valued) > 0:
    values = valued['final_valuation'].astype(float)
    logger.info('Final Valuation:')
    logger.info('  Mean:   KES %s', f'{values.mean():,.0f}')
    logger.info('  Median: KES %s', f'{values.median():,.0f}')
    logger.info('')

    logger.info('By sector (median):')
    by_sector = valued.groupby('sector')['final_valuation'].median()
    for sector, value in by_sector.items():
      logger.info('  %-15s KES %s', sector, f'{value:,.0f}')

  logger.info('=' * 70)


def main() -> None:
  '''CLI entrypoint for batch valuation.'''
  parser = argparse.ArgumentParser(
      description='Batch valuation for multiple businesses',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog=__doc__,
  )
  parser.add_argument('--input',
                      type=Path,
                      required=True,
                      help='Input CSV with one business per row')
  parser.add_argument('--output',
                      type=Path,
                      required=True,
                      help='Output CSV file path')
  parser.add_argument('--sectors',
                      type=Path,
                      help='JSON file with an alternative sector table')
  parser.add_argument('-v',
                      '--verbose',
                      action='store_true',
                      help='Verbose output')
  args = parser.parse_args()

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(asctime)s [%(levelname)s] %(message)s',
      datefmt='%Y-%m-%d %H:%M:%S',
  )

  registry = None
  if args.sectors:
    registry = SectorRegistry.from_json(
        args.sectors.read_text(encoding='utf-8'))

  businesses = pd.read_csv(args.input)
  logger.info('Loaded %d businesses from %s', len(businesses), args.input)

  results = batch_valuation(businesses,
                            registry=registry,
                            verbose=args.verbose)

  args.output.parent.mkdir(parents=True, exist_ok=True)
  results.to_csv(args.output, index=False)

  logger.info('')
  logger.info('Saved %d results to %s', len(results), args.output)

  _print_summary(results)


if __name__ == '__main__':
  main()
