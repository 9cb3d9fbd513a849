'''Valuation method calculators and the composite engine.'''

from sme_valuation.engine.asset_based import compute_asset_based
from sme_valuation.engine.comparable import compute_comparable
from sme_valuation.engine.composite import CompositeValuationEngine
from sme_valuation.engine.composite import EngineConfig
from sme_valuation.engine.dcf import (
    compute_dcf,
    estimate_fcf,
    validate_dcf_assumptions,
)

__all__ = [
    'CompositeValuationEngine',
    'EngineConfig',
    'compute_asset_based',
    'compute_comparable',
    'compute_dcf',
    'estimate_fcf',
    'validate_dcf_assumptions',
]
