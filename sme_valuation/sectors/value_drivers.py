'''
Sector-specific value driver recommendations.

Each sector has a fixed, ordered list of improvement actions with an
estimated percentage impact on enterprise value.
'''

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from sme_valuation.domain.types import ValueDriver
from sme_valuation.sectors import profiles

DriverTable = Mapping[str, Sequence[ValueDriver]]


def _build_table(
    raw: Mapping[str, List[Tuple[str, int]]],
) -> Dict[str, Tuple[ValueDriver, ...]]:
  return {
      sector: tuple(ValueDriver(action=a, impact=i) for a, i in rows)
      for sector, rows in raw.items()
  }


DEFAULT_DRIVERS: Dict[str, Tuple[ValueDriver, ...]] = _build_table(
    profiles.VALUE_DRIVERS)


def recommend_value_drivers(
    sector: str,
    table: Optional[DriverTable] = None,
) -> Tuple[ValueDriver, ...]:
  '''
  Value drivers for a sector in table order.

  Unknown sectors yield an empty tuple rather than an error.
  '''
  if table is None:
    table = DEFAULT_DRIVERS
  return tuple(table.get(sector, ()))


def top_value_drivers(
    sector: str,
    n: int = 3,
    table: Optional[DriverTable] = None,
) -> Tuple[ValueDriver, ...]:
  '''Highest-impact drivers first; ties keep table order.'''
  drivers = recommend_value_drivers(sector, table)
  ranked = sorted(drivers, key=lambda d: d.impact, reverse=True)
  return tuple(ranked[:n])
