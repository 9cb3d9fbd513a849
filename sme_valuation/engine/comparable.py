'''
Market multiple (comparable transactions) calculator.

Applies a multiple to the financial basis selected by the multiple type.
The calculator does not know where the multiple comes from; the composite
engine supplies the midpoint of the sector range.
'''

from dataclasses import dataclass
from typing import Optional, Union

from sme_valuation.domain.errors import MissingBasisError
from sme_valuation.domain.types import MultipleType


@dataclass(frozen=True)
class ComparableResult:
  '''Value implied by a multiple and the basis it was applied to.'''
  value: float
  multiple_type: MultipleType
  multiple: float
  basis: float


def compute_comparable(
    multiple_type: Union[MultipleType, str],
    multiple: float,
    annual_revenue: float,
    ebitda: Optional[float] = None,
    net_income: Optional[float] = None,
) -> ComparableResult:
  '''
  Value a business as basis x multiple.

  Args:
    multiple_type: revenue, ebitda or earnings
    multiple: Market multiple to apply
    annual_revenue: Basis for revenue multiples
    ebitda: Basis for EBITDA multiples
    net_income: Basis for earnings multiples

  Returns:
    ComparableResult with the implied value

  Raises:
    MissingBasisError: If the basis for the multiple type is absent
  '''
  multiple_type = MultipleType(multiple_type)
  bases = {
      MultipleType.REVENUE: annual_revenue,
      MultipleType.EBITDA: ebitda,
      MultipleType.EARNINGS: net_income,
  }
  basis = bases[multiple_type]
  if not basis:
    raise MissingBasisError(multiple_type.value,
                            f'Missing basis for {multiple_type.value} multiple')

  return ComparableResult(
      value=basis * multiple,
      multiple_type=multiple_type,
      multiple=multiple,
      basis=basis,
  )
