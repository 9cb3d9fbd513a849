'''
Domain types for the SME valuation engine.

These dataclasses provide typed interfaces between components: the sector
reference data, the validated request inputs, per-method results and the
composite report handed back to callers.
'''

from dataclasses import dataclass, field
from enum import Enum
from math import isfinite
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from sme_valuation.domain.errors import InsufficientInputError
from sme_valuation.domain.errors import OutOfRangeError

MAX_PROJECTION_YEARS = 10


class RiskTier(str, Enum):
  '''Qualitative risk classification of a sector.'''
  LOW = 'low'
  MODERATE = 'moderate'
  HIGH = 'high'
  VERY_HIGH = 'very-high'


class MultipleType(str, Enum):
  '''Financial basis a market multiple is applied to.'''
  REVENUE = 'revenue'
  EBITDA = 'ebitda'
  EARNINGS = 'earnings'


class MethodKind(str, Enum):
  '''The four valuation methods the composite engine can combine.'''
  DCF = 'dcf'
  COMPARABLE_REVENUE = 'comparable_revenue'
  COMPARABLE_EBITDA = 'comparable_ebitda'
  ASSET_BASED = 'asset_based'


@dataclass(frozen=True)
class MultipleRange:
  '''Observed min/max range of a market multiple.'''
  min: float
  max: float

  @property
  def midpoint(self) -> float:
    return (self.min + self.max) / 2

  def to_dict(self) -> Dict[str, float]:
    return {'min': self.min, 'max': self.max}


@dataclass(frozen=True)
class SectorProfile:
  '''
  Risk parameters and benchmark multiples for one sector.

  Attributes:
    key: Sector identifier (e.g. 'retail')
    name: Display name
    description: Businesses covered by the sector
    risk_tier: Qualitative risk tier
    base_discount_rate: Sector base discount rate (fraction)
    risk_premium: Additional sector risk premium (fraction)
    ebitda_multiple: Typical EV/EBITDA multiple range
    revenue_multiple: Typical EV/revenue multiple range
    key_factors: Qualitative value factors for the sector
  '''
  key: str
  name: str
  description: str
  risk_tier: RiskTier
  base_discount_rate: float
  risk_premium: float
  ebitda_multiple: MultipleRange
  revenue_multiple: MultipleRange
  key_factors: Tuple[str, ...] = ()

  @property
  def wacc(self) -> float:
    '''Base discount rate plus sector risk premium.'''
    return self.base_discount_rate + self.risk_premium

  def to_dict(self) -> Dict[str, Any]:
    return {
        'key': self.key,
        'name': self.name,
        'description': self.description,
        'risk_tier': self.risk_tier.value,
        'base_discount_rate': self.base_discount_rate,
        'risk_premium': self.risk_premium,
        'ebitda_multiple': self.ebitda_multiple.to_dict(),
        'revenue_multiple': self.revenue_multiple.to_dict(),
        'key_factors': list(self.key_factors),
    }

  @classmethod
  def from_dict(cls, key: str, data: Mapping[str, Any]) -> 'SectorProfile':
    return cls(
        key=key,
        name=data['name'],
        description=data.get('description', ''),
        risk_tier=RiskTier(data['risk_tier']),
        base_discount_rate=float(data['base_discount_rate']),
        risk_premium=float(data['risk_premium']),
        ebitda_multiple=MultipleRange(**data['ebitda_multiple']),
        revenue_multiple=MultipleRange(**data['revenue_multiple']),
        key_factors=tuple(data.get('key_factors', ())),
    )


@dataclass(frozen=True)
class AssetAdjustments:
  '''Fair-value adjustments applied on top of book net assets.'''
  real_estate_value: Optional[float] = None
  intangibles: Optional[float] = None
  other: Optional[float] = None

  def summary(self) -> Dict[str, float]:
    '''Non-zero adjustments keyed by name.'''
    items = {
        'real_estate': self.real_estate_value,
        'intangibles': self.intangibles,
        'other': self.other,
    }
    return {k: v for k, v in items.items() if v}

  def total(self) -> float:
    return sum(self.summary().values())


_CAMEL_CASE_KEYS = {
    'businessName': 'business_name',
    'businessDescription': 'business_description',
    'annualRevenue': 'annual_revenue',
    'netIncome': 'net_income',
    'freeCashFlow': 'free_cash_flow',
    'totalAssets': 'total_assets',
    'totalLiabilities': 'total_liabilities',
    'discountRate': 'discount_rate',
    'terminalGrowthRate': 'terminal_growth_rate',
    'terminalGrowth': 'terminal_growth_rate',
    'projectionYears': 'projection_years',
    'assetAdjustments': 'asset_adjustments',
    'realEstateValue': 'real_estate_value',
}

_OPTIONAL_AMOUNTS = ('ebitda', 'net_income', 'free_cash_flow', 'total_assets',
                     'total_liabilities', 'discount_rate')


@dataclass(frozen=True)
class ValuationInputs:
  '''
  Validated financial inputs for one valuation request.

  Optional fields are None when the business did not report them. The
  discount rate override may be given as a fraction (0.18) or a percentage
  (18); see normalized_discount_rate.

  Attributes:
    business_name: Name of the business being valued
    sector: Sector key used for registry lookups
    annual_revenue: Trailing annual revenue (must be positive)
    ebitda: Annual EBITDA
    net_income: Annual net income
    free_cash_flow: Annual free cash flow
    total_assets: Book value of total assets
    total_liabilities: Book value of total liabilities
    discount_rate: Optional discount rate override
    terminal_growth_rate: Perpetual growth for the terminal value
    projection_years: Explicit DCF projection horizon
    asset_adjustments: Optional fair-value adjustments to net assets
    business_description: Free-text description of the business
  '''
  business_name: str
  sector: str
  annual_revenue: float
  ebitda: Optional[float] = None
  net_income: Optional[float] = None
  free_cash_flow: Optional[float] = None
  total_assets: Optional[float] = None
  total_liabilities: Optional[float] = None
  discount_rate: Optional[float] = None
  terminal_growth_rate: float = 0.04
  projection_years: int = 5
  asset_adjustments: Optional[AssetAdjustments] = None
  business_description: Optional[str] = None

  def __post_init__(self):
    if not self.business_name or not self.business_name.strip():
      raise ValueError('business_name is required')
    if not self.sector or not self.sector.strip():
      raise ValueError('sector is required')

    if not isfinite(self.annual_revenue) or self.annual_revenue <= 0:
      raise OutOfRangeError(
          'annual_revenue', self.annual_revenue,
          message=f'annual_revenue must be positive, got '
          f'{self.annual_revenue!r}')

    for name in _OPTIONAL_AMOUNTS:
      value = getattr(self, name)
      if value is not None and not isfinite(value):
        raise OutOfRangeError(name, value,
                              message=f'{name} must be a finite number')

    if not isfinite(self.terminal_growth_rate):
      raise OutOfRangeError('terminal_growth_rate', self.terminal_growth_rate,
                            message='terminal_growth_rate must be finite')

    if (isinstance(self.projection_years, bool) or
        not isinstance(self.projection_years, int) or
        not 1 <= self.projection_years <= MAX_PROJECTION_YEARS):
      raise OutOfRangeError('projection_years', self.projection_years, 1,
                            MAX_PROJECTION_YEARS)

  @property
  def normalized_discount_rate(self) -> Optional[float]:
    '''
    Discount rate override as a fraction.

    Values above 1 are read as percentages (18 -> 0.18). A genuine
    fractional rate above 1.0 cannot be expressed; such rates are outside
    the DCF domain anyway.
    '''
    if self.discount_rate is None:
      return None
    if self.discount_rate > 1:
      return self.discount_rate / 100
    return self.discount_rate

  @classmethod
  def from_dict(cls, data: Mapping[str, Any]) -> 'ValuationInputs':
    '''
    Build inputs from a request payload.

    Accepts snake_case keys as well as the camelCase keys used by the web
    layer. Keys with None values fall back to the field defaults; unknown
    keys raise TypeError.
    '''
    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
      if value is None:
        continue
      kwargs[_CAMEL_CASE_KEYS.get(key, key)] = value

    adjustments = kwargs.get('asset_adjustments')
    if isinstance(adjustments, Mapping):
      kwargs['asset_adjustments'] = AssetAdjustments(**{
          _CAMEL_CASE_KEYS.get(k, k): v for k, v in adjustments.items()
      })
    return cls(**kwargs)


@dataclass(frozen=True)
class MethodResult:
  '''
  Value produced by one valuation method.

  Attributes:
    kind: Which method produced the value
    value: Computed value in currency units
    assumptions: Inputs and intermediate figures used by the method
    multiple: Market multiple applied (comparable methods only)
  '''
  kind: MethodKind
  value: float
  assumptions: Mapping[str, Any] = field(default_factory=dict)
  multiple: Optional[float] = None

  def __post_init__(self):
    object.__setattr__(self, 'assumptions',
                       MappingProxyType(dict(self.assumptions)))

  def to_dict(self) -> Dict[str, Any]:
    result: Dict[str, Any] = {
        'type': self.kind.value,
        'value': self.value,
        'assumptions': dict(self.assumptions),
    }
    if self.multiple is not None:
      result['multiple'] = self.multiple
    return result


@dataclass(frozen=True)
class ExclusionReason:
  '''
  Reason why a valuation method was skipped.

  Attributes:
    reason: Human-readable explanation
    code: Machine-readable code (e.g., 'missing_basis', 'invalid_assumption')
    details: Additional context
  '''
  reason: str
  code: str
  details: Mapping[str, Any] = field(default_factory=dict)

  def __post_init__(self):
    object.__setattr__(self, 'details', MappingProxyType(dict(self.details)))


@dataclass(frozen=True)
class CompositeValuationResult:
  '''
  Weighted combination of every method that could run.

  Attributes:
    methods: Method results in run order
    final_valuation: Weighted average over the methods that ran
    total_weight: Sum of the weights of the methods that ran
    sector_profile: Profile used, None for an unknown sector
    discount_rate: Resolved discount rate (WACC) as a fraction
    terminal_growth: Terminal growth rate used
    exclusions: Why each omitted method did not run
  '''
  methods: Tuple[MethodResult, ...]
  final_valuation: float
  total_weight: float
  sector_profile: Optional[SectorProfile]
  discount_rate: float
  terminal_growth: float
  exclusions: Tuple[ExclusionReason, ...] = ()

  @property
  def is_sufficient(self) -> bool:
    '''False when no method could run and final_valuation is meaningless.'''
    return self.total_weight > 0

  @property
  def method_count(self) -> int:
    return len(self.methods)

  def value_of(self, kind: MethodKind) -> Optional[float]:
    for method in self.methods:
      if method.kind == kind:
        return method.value
    return None

  def require_estimate(self) -> float:
    '''
    Return final_valuation, refusing degenerate results.

    Raises:
      InsufficientInputError: If no method could run
    '''
    if not self.is_sufficient:
      raise InsufficientInputError(
          'Insufficient input: no valuation method could be applied')
    return self.final_valuation


@dataclass(frozen=True)
class Scenario:
  '''
  One risk-adjusted view of the business value.

  Attributes:
    name: 'conservative', 'base' or 'upside'
    perspective: Whose view the scenario represents
    weighted_value: Recombined value for the scenario
    dcf: Scenario DCF component
    comparable: Scenario comparable component
    asset_based: Scenario asset-based component
    assumptions: wacc, terminal_growth and growth_multiplier used
  '''
  name: str
  perspective: str
  weighted_value: float
  dcf: float
  comparable: float
  asset_based: float
  assumptions: Mapping[str, float] = field(default_factory=dict)

  def __post_init__(self):
    object.__setattr__(self, 'assumptions',
                       MappingProxyType(dict(self.assumptions)))

  def to_dict(self) -> Dict[str, Any]:
    return {
        'name': self.name,
        'perspective': self.perspective,
        'weighted_value': self.weighted_value,
        'dcf': self.dcf,
        'comparable': self.comparable,
        'asset_based': self.asset_based,
        'assumptions': dict(self.assumptions),
    }


@dataclass(frozen=True)
class ScenarioSet:
  '''The three scenarios, always produced together.'''
  conservative: Scenario
  base: Scenario
  upside: Scenario

  def __iter__(self) -> Iterator[Scenario]:
    return iter((self.conservative, self.base, self.upside))

  def to_dict(self) -> Dict[str, Dict[str, Any]]:
    return {
        'conservative': self.conservative.to_dict(),
        'base': self.base.to_dict(),
        'upside': self.upside.to_dict(),
    }


@dataclass(frozen=True)
class ValueDriver:
  '''Recommended improvement action and its estimated value impact (%).'''
  action: str
  impact: int

  def to_dict(self) -> Dict[str, Any]:
    return {'action': self.action, 'impact': self.impact}


@dataclass(frozen=True)
class ValuationReport:
  '''
  Everything the engine hands back for one request.

  Attributes:
    composite: Composite valuation across methods
    scenarios: Conservative/base/upside scenarios
    value_drivers: Sector-specific improvement actions
  '''
  composite: CompositeValuationResult
  scenarios: ScenarioSet
  value_drivers: Tuple[ValueDriver, ...] = ()

  @property
  def insufficient_input(self) -> bool:
    return not self.composite.is_sufficient

  @property
  def final_valuation(self) -> float:
    return self.composite.final_valuation

  def to_dict(self) -> Dict[str, Any]:
    '''Plain data structure for persistence and report rendering.'''
    profile = self.composite.sector_profile
    return {
        'valuations': [m.to_dict() for m in self.composite.methods],
        'final_valuation': self.composite.final_valuation,
        'total_weight': self.composite.total_weight,
        'method_count': self.composite.method_count,
        'insufficient_input': self.insufficient_input,
        'discount_rate': self.composite.discount_rate,
        'terminal_growth': self.composite.terminal_growth,
        'exclusions': [{
            'code': e.code,
            'reason': e.reason,
            'details': dict(e.details),
        } for e in self.composite.exclusions],
        'scenarios': self.scenarios.to_dict(),
        'value_drivers': [d.to_dict() for d in self.value_drivers],
        'sector': profile.to_dict() if profile else None,
    }
