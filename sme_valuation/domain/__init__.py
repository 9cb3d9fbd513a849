"""Domain types and errors for the valuation engine."""

from sme_valuation.domain.errors import InsufficientInputError
from sme_valuation.domain.errors import InvalidAssumptionError
from sme_valuation.domain.errors import MissingBasisError
from sme_valuation.domain.errors import OutOfRangeError
from sme_valuation.domain.errors import UnknownSectorError
from sme_valuation.domain.errors import ValuationError
from sme_valuation.domain.types import AssetAdjustments
from sme_valuation.domain.types import CompositeValuationResult
from sme_valuation.domain.types import ExclusionReason
from sme_valuation.domain.types import MethodKind
from sme_valuation.domain.types import MethodResult
from sme_valuation.domain.types import MultipleRange
from sme_valuation.domain.types import MultipleType
from sme_valuation.domain.types import RiskTier
from sme_valuation.domain.types import Scenario
from sme_valuation.domain.types import ScenarioSet
from sme_valuation.domain.types import SectorProfile
from sme_valuation.domain.types import ValuationInputs
from sme_valuation.domain.types import ValuationReport
from sme_valuation.domain.types import ValueDriver

__all__ = [
    'AssetAdjustments',
    'CompositeValuationResult',
    'ExclusionReason',
    'MethodKind',
    'MethodResult',
    'MultipleRange',
    'MultipleType',
    'RiskTier',
    'Scenario',
    'ScenarioSet',
    'SectorProfile',
    'ValuationInputs',
    'ValuationReport',
    'ValueDriver',
    'InsufficientInputError',
    'InvalidAssumptionError',
    'MissingBasisError',
    'OutOfRangeError',
    'UnknownSectorError',
    'ValuationError',
]
