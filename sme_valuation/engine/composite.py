'''
Composite valuation engine.

Runs every valuation method the inputs support, then combines them into a
weighted average:

  final_valuation = sum(value * weight) / sum(weight)

over the methods that actually ran. Weights of omitted methods are not
redistributed. When no method can run the result is flagged as
insufficient (total_weight == 0) instead of reporting 0 as an estimate.

Usage:
  engine = CompositeValuationEngine()
  result = engine.evaluate(inputs)
  if result.is_sufficient:
    print(result.final_valuation)
'''

from dataclasses import dataclass, field
import json
import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

from sme_valuation.domain.errors import InvalidAssumptionError
from sme_valuation.domain.errors import MissingBasisError
from sme_valuation.domain.errors import OutOfRangeError
from sme_valuation.domain.types import CompositeValuationResult
from sme_valuation.domain.types import ExclusionReason
from sme_valuation.domain.types import MethodKind
from sme_valuation.domain.types import MethodResult
from sme_valuation.domain.types import MultipleType
from sme_valuation.domain.types import ValuationInputs
from sme_valuation.engine.asset_based import compute_asset_based
from sme_valuation.engine.comparable import compute_comparable
from sme_valuation.engine.dcf import compute_dcf
from sme_valuation.engine.dcf import estimate_fcf
from sme_valuation.engine.dcf import MAX_DISCOUNT_RATE
from sme_valuation.engine.dcf import MAX_TERMINAL_GROWTH
from sme_valuation.sectors.registry import default_registry
from sme_valuation.sectors.registry import SectorRegistry

logger = logging.getLogger(__name__)

DEFAULT_METHOD_WEIGHTS: Dict[str, float] = {
    MethodKind.DCF.value: 0.4,
    MethodKind.COMPARABLE_REVENUE.value: 0.25,
    MethodKind.COMPARABLE_EBITDA.value: 0.25,
    MethodKind.ASSET_BASED.value: 0.2,
}


@dataclass(frozen=True)
class EngineConfig:
  '''
  Policy constants for the composite engine.

  Serializable to JSON so a run can be reproduced with the exact weights
  and defaults it used.

  Attributes:
    method_weights: Weight per method kind (must cover every MethodKind)
    default_growth_rate: Explicit-period FCF growth fed to the DCF
    tax_rate_estimate: Tax share of EBITDA deducted when estimating FCF
      for businesses that report net income
    risk_adjustment: Extra premium added to the sector WACC when no
      discount rate override is given
  '''
  method_weights: Mapping[str, float] = field(
      default_factory=lambda: dict(DEFAULT_METHOD_WEIGHTS))
  default_growth_rate: float = 0.10
  tax_rate_estimate: float = 0.30
  risk_adjustment: float = 0.0

  def __post_init__(self):
    object.__setattr__(self, 'method_weights',
                       MappingProxyType(dict(self.method_weights)))
    kinds = [k.value for k in MethodKind]
    missing = [k for k in kinds if k not in self.method_weights]
    if missing:
      raise ValueError(f'method_weights missing entries for: {missing}')
    unknown = set(self.method_weights) - set(kinds)
    if unknown:
      raise ValueError(
          f'method_weights has unknown methods: {sorted(unknown)}')
    negative = [k for k, w in self.method_weights.items() if w < 0]
    if negative:
      raise ValueError(f'method_weights must be non-negative: {negative}')

  def weight_for(self, kind: MethodKind) -> float:
    '''Weight of a method kind.'''
    return self.method_weights[MethodKind(kind).value]

  @classmethod
  def default(cls) -> 'EngineConfig':
    return cls()

  def to_dict(self) -> Dict[str, Any]:
    return {
        'method_weights': dict(self.method_weights),
        'default_growth_rate': self.default_growth_rate,
        'tax_rate_estimate': self.tax_rate_estimate,
        'risk_adjustment': self.risk_adjustment,
    }

  def to_json(self) -> str:
    return json.dumps(self.to_dict(), indent=2)

  @classmethod
  def from_dict(cls, data: Mapping[str, Any]) -> 'EngineConfig':
    return cls(**data)

  @classmethod
  def from_json(cls, json_str: str) -> 'EngineConfig':
    return cls.from_dict(json.loads(json_str))


class CompositeValuationEngine:
  '''
  Orchestrates the per-method calculators for one request at a time.

  The engine holds only read-only collaborators (registry and config), so a
  single instance can evaluate any number of requests concurrently.
  '''

  def __init__(
      self,
      registry: Optional[SectorRegistry] = None,
      config: Optional[EngineConfig] = None,
  ):
    self.registry = registry if registry is not None else default_registry()
    self.config = config if config is not None else EngineConfig.default()

  def resolve_discount_rate(self, inputs: ValuationInputs) -> float:
    '''
    Normalized override if given, else the sector WACC.

    An override of 0 counts as not given.
    '''
    override = inputs.normalized_discount_rate
    if override:
      return override
    return self.registry.get_wacc(inputs.sector, self.config.risk_adjustment)

  def evaluate(self, inputs: ValuationInputs) -> CompositeValuationResult:
    '''
    Run all applicable methods and combine them.

    Args:
      inputs: Validated valuation inputs

    Returns:
      CompositeValuationResult; check is_sufficient before using
      final_valuation

    Raises:
      OutOfRangeError: If the discount rate or terminal growth is outside
        its domain. The whole request is rejected.
    '''
    wacc = self.resolve_discount_rate(inputs)
    terminal_growth = inputs.terminal_growth_rate
    self._check_rates(wacc, terminal_growth)

    logger.debug('Valuing %s business (wacc=%.4f, terminal_growth=%.4f)',
                 inputs.sector, wacc, terminal_growth)

    methods: List[MethodResult] = []
    exclusions: List[ExclusionReason] = []

    steps: List[Callable[[ValuationInputs, float], Optional[MethodResult]]] = [
        self._run_dcf,
        self._run_comparable_revenue,
        self._run_comparable_ebitda,
        self._run_asset_based,
    ]
    for step in steps:
      try:
        result = step(inputs, wacc)
      except MissingBasisError as e:
        logger.info('Skipping %s for %s: %s', e.method, inputs.sector, e)
        exclusions.append(
            ExclusionReason(reason=str(e),
                            code='missing_basis',
                            details={'method': e.method}))
        continue
      except InvalidAssumptionError as e:
        logger.warning('Skipping dcf for %s: %s', inputs.sector, e)
        exclusions.append(
            ExclusionReason(reason=str(e),
                            code='invalid_assumption',
                            details={
                                'method': MethodKind.DCF.value,
                                'discount_rate': wacc,
                                'terminal_growth': terminal_growth,
                            }))
        continue
      if result is not None:
        methods.append(result)

    weighted_sum = 0.0
    total_weight = 0.0
    for method in methods:
      weight = self.config.weight_for(method.kind)
      weighted_sum += method.value * weight
      total_weight += weight

    if total_weight > 0:
      final_valuation = weighted_sum / total_weight
    else:
      final_valuation = 0.0
      logger.warning('No valuation method applicable for %s business',
                     inputs.sector)

    logger.debug('Composite of %d methods: %.2f', len(methods),
                 final_valuation)

    return CompositeValuationResult(
        methods=tuple(methods),
        final_valuation=final_valuation,
        total_weight=total_weight,
        sector_profile=self.registry.get_profile(inputs.sector),
        discount_rate=wacc,
        terminal_growth=terminal_growth,
        exclusions=tuple(exclusions),
    )

  @staticmethod
  def _check_rates(wacc: float, terminal_growth: float) -> None:
    if not 0 <= terminal_growth <= MAX_TERMINAL_GROWTH:
      raise OutOfRangeError('terminal_growth', terminal_growth, 0.0,
                            MAX_TERMINAL_GROWTH)
    if not 0 < wacc <= MAX_DISCOUNT_RATE:
      raise OutOfRangeError('discount_rate', wacc, 0.0, MAX_DISCOUNT_RATE)

  def _run_dcf(self, inputs: ValuationInputs,
               wacc: float) -> Optional[MethodResult]:
    '''DCF on reported FCF, or FCF estimated from EBITDA.'''
    if not inputs.free_cash_flow and not inputs.ebitda:
      raise MissingBasisError(MethodKind.DCF.value,
                              'DCF needs free cash flow or EBITDA')

    fcf_estimated = not inputs.free_cash_flow
    if fcf_estimated:
      taxes = (inputs.ebitda * self.config.tax_rate_estimate
               if inputs.net_income else 0.0)
      fcf = estimate_fcf(inputs.ebitda, 0.0, taxes)
    else:
      fcf = inputs.free_cash_flow

    growth_rate = self.config.default_growth_rate
    dcf = compute_dcf(
        free_cash_flow=fcf,
        growth_rate=growth_rate,
        discount_rate=wacc,
        projection_years=inputs.projection_years,
        terminal_growth=inputs.terminal_growth_rate,
    )
    return MethodResult(
        kind=MethodKind.DCF,
        value=dcf.enterprise_value,
        assumptions={
            'free_cash_flow': fcf,
            'fcf_estimated': fcf_estimated,
            'growth_rate': growth_rate,
            'discount_rate': wacc,
            'projection_years': inputs.projection_years,
            'terminal_growth': inputs.terminal_growth_rate,
            'present_value': dcf.present_value,
            'terminal_value': dcf.terminal_value,
            'discounted_terminal_value': dcf.discounted_terminal_value,
            'breakdown': [{
                'year': y.year,
                'fcf': y.fcf,
                'discount_factor': y.discount_factor,
                'present_value': y.present_value,
            } for y in dcf.breakdown],
        },
    )

  def _run_comparable(
      self,
      inputs: ValuationInputs,
      kind: MethodKind,
      multiple_type: MultipleType,
  ) -> MethodResult:
    multiple_range = self.registry.get_multiple_range(inputs.sector,
                                                      multiple_type)
    if multiple_range is None:
      raise MissingBasisError(
          kind.value, f'No {multiple_type.value} multiple registered for '
          f"sector '{inputs.sector}'")

    multiple = multiple_range.midpoint
    comparable = compute_comparable(
        multiple_type=multiple_type,
        multiple=multiple,
        annual_revenue=inputs.annual_revenue,
        ebitda=inputs.ebitda,
        net_income=inputs.net_income,
    )
    return MethodResult(
        kind=kind,
        value=comparable.value,
        multiple=multiple,
        assumptions={
            multiple_type.value: comparable.basis,
            'multiple': multiple,
            'multiple_range': multiple_range.to_dict(),
        },
    )

  def _run_comparable_revenue(self, inputs: ValuationInputs,
                              wacc: float) -> Optional[MethodResult]:
    del wacc
    return self._run_comparable(inputs, MethodKind.COMPARABLE_REVENUE,
                                MultipleType.REVENUE)

  def _run_comparable_ebitda(self, inputs: ValuationInputs,
                             wacc: float) -> Optional[MethodResult]:
    del wacc
    if not inputs.ebitda:
      raise MissingBasisError(MethodKind.COMPARABLE_EBITDA.value,
                              'EBITDA multiple needs EBITDA')
    return self._run_comparable(inputs, MethodKind.COMPARABLE_EBITDA,
                                MultipleType.EBITDA)

  def _run_asset_based(self, inputs: ValuationInputs,
                       wacc: float) -> Optional[MethodResult]:
    del wacc
    if inputs.total_assets is None or inputs.total_liabilities is None:
      raise MissingBasisError(MethodKind.ASSET_BASED.value,
                              'Asset-based valuation needs total assets '
                              'and total liabilities')

    assets = compute_asset_based(inputs.total_assets,
                                 inputs.total_liabilities,
                                 inputs.asset_adjustments)
    return MethodResult(
        kind=MethodKind.ASSET_BASED,
        value=assets.adjusted_net_asset_value,
        assumptions={
            'total_assets': inputs.total_assets,
            'total_liabilities': inputs.total_liabilities,
            'net_asset_value': assets.net_asset_value,
            'adjustments': assets.adjustment_summary,
        },
    )
