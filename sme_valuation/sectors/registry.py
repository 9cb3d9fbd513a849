"""
Sector profile registry.

Maps sector keys to risk parameters and benchmark multiple ranges. A
registry is immutable once built, so any number of engines (or tests) can
share one instance or hold independent ones built from different tables.

Usage:
  registry = default_registry()
  registry.get_wacc('retail')                      # 0.28
  registry.get_multiple_range('retail', 'ebitda')  # MultipleRange(2.5, 4.0)

  # Alternative versioned table supplied as configuration
  registry = SectorRegistry.from_json(path.read_text())
"""

from functools import lru_cache
import json
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from sme_valuation.domain.errors import UnknownSectorError
from sme_valuation.domain.types import MultipleRange
from sme_valuation.domain.types import MultipleType
from sme_valuation.domain.types import SectorProfile
from sme_valuation.sectors import profiles

logger = logging.getLogger(__name__)

MultiplesTable = Mapping[str, Mapping[MultipleType, MultipleRange]]


class SectorRegistry:
  """
  Read-only lookup of sector profiles and transaction multiples.

  Attributes:
    version: Version tag of the reference table
    unknown_sector_rate: Discount rate returned for unregistered sectors
  """

  def __init__(
      self,
      sector_profiles: Mapping[str, SectorProfile],
      multiples: Optional[MultiplesTable] = None,
      version: str = profiles.TABLE_VERSION,
      unknown_sector_rate: float = profiles.UNKNOWN_SECTOR_RATE,
  ):
    """
    Initialize registry.

    Args:
      sector_profiles: Profiles keyed by sector key
      multiples: Transaction multiples keyed by sector then multiple type.
        Defaults to the EBITDA/revenue ranges of each profile.
      version: Version tag of the reference table
      unknown_sector_rate: Discount rate for unregistered sectors
    """
    for key, profile in sector_profiles.items():
      if key != profile.key:
        raise ValueError(
            f"Profile registered as '{key}' has key '{profile.key}'")

    if multiples is None:
      multiples = {
          key: {
              MultipleType.REVENUE: p.revenue_multiple,
              MultipleType.EBITDA: p.ebitda_multiple,
          } for key, p in sector_profiles.items()
      }

    self._profiles = MappingProxyType(dict(sector_profiles))
    self._multiples = MappingProxyType({
        key: MappingProxyType(dict(ranges))
        for key, ranges in multiples.items()
    })
    self.version = version
    self.unknown_sector_rate = unknown_sector_rate

  def __contains__(self, sector: object) -> bool:
    return sector in self._profiles

  def __len__(self) -> int:
    return len(self._profiles)

  def sectors(self) -> Tuple[str, ...]:
    """Registered sector keys in table order."""
    return tuple(self._profiles)

  def get_profile(self, sector: str) -> Optional[SectorProfile]:
    """Profile for a sector, or None when the sector is unknown."""
    return self._profiles.get(sector)

  def require_profile(self, sector: str) -> SectorProfile:
    """
    Profile for a sector.

    Raises:
      UnknownSectorError: If the sector is not registered
    """
    profile = self._profiles.get(sector)
    if profile is None:
      raise UnknownSectorError(
          f"Unknown sector: '{sector}'. Available: {list(self._profiles)}")
    return profile

  def get_wacc(self, sector: str, risk_adjustment: float = 0.0) -> float:
    """
    Discount rate for a sector.

    Args:
      sector: Sector key
      risk_adjustment: Extra premium added to the sector rate

    Returns:
      base_discount_rate + risk_premium + risk_adjustment, or the fixed
      unknown-sector rate when the sector is not registered. The
      adjustment is not applied to the unknown-sector rate.
    """
    profile = self._profiles.get(sector)
    if profile is None:
      logger.debug('Unknown sector %r, using default rate %.2f', sector,
                   self.unknown_sector_rate)
      return self.unknown_sector_rate
    return profile.base_discount_rate + profile.risk_premium + risk_adjustment

  def get_multiple_range(
      self,
      sector: str,
      multiple_type: Union[MultipleType, str],
  ) -> Optional[MultipleRange]:
    """Multiple range for a sector and basis, or None if not registered."""
    try:
      multiple_type = MultipleType(multiple_type)
    except ValueError:
      return None
    ranges = self._multiples.get(sector)
    if ranges is None:
      return None
    return ranges.get(multiple_type)

  def to_dict(self) -> Dict[str, Any]:
    """Convert to a JSON-friendly dictionary (inverse of from_dict)."""
    result: Dict[str, Any] = {
        'version': self.version,
        'unknown_sector_rate': self.unknown_sector_rate,
        'profiles': {},
        'multiples': {},
    }
    for key, profile in self._profiles.items():
      data = profile.to_dict()
      del data['key']
      result['profiles'][key] = data
    for key, ranges in self._multiples.items():
      result['multiples'][key] = {
          t.value: r.to_dict() for t, r in ranges.items()
      }
    return result

  @classmethod
  def from_dict(cls, data: Mapping[str, Any]) -> 'SectorRegistry':
    """
    Create from dictionary.

    Expected keys: 'profiles' (required), 'multiples', 'version',
    'unknown_sector_rate'.
    """
    sector_profiles = {
        key: SectorProfile.from_dict(key, body)
        for key, body in data['profiles'].items()
    }
    multiples = None
    if data.get('multiples') is not None:
      multiples = {
          key: {
              MultipleType(t): MultipleRange(**r) for t, r in ranges.items()
          } for key, ranges in data['multiples'].items()
      }
    return cls(
        sector_profiles,
        multiples=multiples,
        version=data.get('version', profiles.TABLE_VERSION),
        unknown_sector_rate=float(
            data.get('unknown_sector_rate', profiles.UNKNOWN_SECTOR_RATE)),
    )

  @classmethod
  def from_json(cls, json_str: str) -> 'SectorRegistry':
    """Create from JSON string."""
    return cls.from_dict(json.loads(json_str))

  def to_json(self) -> str:
    """Serialize to JSON string."""
    return json.dumps(self.to_dict(), indent=2)


@lru_cache(maxsize=None)
def default_registry() -> SectorRegistry:
  """Registry built from the bundled reference tables."""
  return SectorRegistry.from_dict({
      'version': profiles.TABLE_VERSION,
      'unknown_sector_rate': profiles.UNKNOWN_SECTOR_RATE,
      'profiles': profiles.SECTOR_PROFILES,
      'multiples': profiles.TRANSACTION_MULTIPLES,
  })


def macro_risk_adjustment(factors: Optional[Iterable[str]] = None) -> float:
  """
  Sum of macro risk premiums to add on top of a sector WACC.

  Args:
    factors: Names of factors to include (default: all of them)

  Returns:
    Total premium as a fraction

  Raises:
    KeyError: If a factor name is not known
  """
  if factors is None:
    return sum(profiles.MACRO_RISK_FACTORS.values())

  total = 0.0
  for name in factors:
    try:
      total += profiles.MACRO_RISK_FACTORS[name]
    except KeyError as e:
      raise KeyError(f"Unknown macro risk factor: '{name}'. "
                     f'Available: {list(profiles.MACRO_RISK_FACTORS)}') from e
  return total
