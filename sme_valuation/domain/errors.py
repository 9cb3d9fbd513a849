"""
Failure signals raised by the valuation engine.

All engine errors derive from ValuationError (itself a ValueError) so a
caller can map them to its own transport-specific format in one place.
"""

from typing import Any, Optional


class ValuationError(ValueError):
  """Base class for precondition violations detected by the engine."""


class OutOfRangeError(ValuationError):
  """
  A rate or amount parameter falls outside its documented domain.

  Attributes:
    parameter: Name of the offending parameter
    value: Value that was supplied
    lower: Lower bound of the accepted domain (None if unbounded)
    upper: Upper bound of the accepted domain (None if unbounded)
  """

  def __init__(
      self,
      parameter: str,
      value: Any,
      lower: Optional[float] = None,
      upper: Optional[float] = None,
      message: Optional[str] = None,
  ):
    self.parameter = parameter
    self.value = value
    self.lower = lower
    self.upper = upper
    if message is None:
      message = f'{parameter}={value!r} is out of range'
      if lower is not None and upper is not None:
        message += f' (expected {lower} to {upper})'
    super().__init__(message)


class InvalidAssumptionError(ValuationError):
  """Parameters are individually valid but jointly inconsistent."""


class MissingBasisError(ValuationError):
  """
  A method was requested but its required financial basis is absent.

  Attributes:
    method: Method or multiple type that could not run
  """

  def __init__(self, method: str, message: Optional[str] = None):
    self.method = method
    super().__init__(message or f'Missing basis for {method} valuation')


class InsufficientInputError(ValuationError):
  """No valuation method could run with the supplied inputs."""


class UnknownSectorError(KeyError):
  """Strict sector lookup for a key that is not registered."""
