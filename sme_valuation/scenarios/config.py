"""
Scenario adjustment policies.

ScenarioPolicy describes how one non-base scenario shifts the discount and
terminal growth rates and scales each method value before recombining them.
The presets are fixed; they are dataclasses so a report can record exactly
which adjustments produced each scenario.
"""

from dataclasses import asdict
from dataclasses import dataclass
import json
from typing import Any, Dict


@dataclass(frozen=True)
class ScenarioPolicy:
  """
  Adjustments that derive one scenario from the base valuation.

  Attributes:
    name: Scenario key ('conservative', 'upside')
    perspective: Whose view the scenario represents
    wacc_adjustment: Added to the base WACC (result floored at 0)
    terminal_growth_adjustment: Added to base terminal growth (floored at 0)
    dcf_multiplier: Scale applied to the DCF value
    comparable_multiplier: Scale applied to the comparable value
    asset_multiplier: Scale applied to the asset-based value
    dcf_weight: Recompose weight for the DCF component
    comparable_weight: Recompose weight for the comparable component
    asset_weight: Recompose weight for the asset-based component
  """
  name: str
  perspective: str
  wacc_adjustment: float
  terminal_growth_adjustment: float
  dcf_multiplier: float
  comparable_multiplier: float
  asset_multiplier: float
  dcf_weight: float = 0.4
  comparable_weight: float = 0.3
  asset_weight: float = 0.3

  @classmethod
  def conservative(cls) -> 'ScenarioPolicy':
    """Lender view: higher discount rate, haircut on every method."""
    return cls(
        name='conservative',
        perspective='Bank/Lender view - Lower risk tolerance',
        wacc_adjustment=0.02,
        terminal_growth_adjustment=-0.01,
        dcf_multiplier=0.9,
        comparable_multiplier=0.85,
        asset_multiplier=0.85,
    )

  @classmethod
  def upside(cls) -> 'ScenarioPolicy':
    """Strategic buyer view: growth plus synergy premium."""
    return cls(
        name='upside',
        perspective='Strategic buyer view - Growth + synergy potential',
        wacc_adjustment=-0.01,
        terminal_growth_adjustment=0.01,
        dcf_multiplier=1.15,
        comparable_multiplier=1.25,
        asset_multiplier=1.1,
    )

  def to_dict(self) -> Dict[str, Any]:
    """Convert to dictionary."""
    return asdict(self)

  def to_json(self) -> str:
    """Serialize to JSON string."""
    return json.dumps(self.to_dict(), indent=2)


BASE_PERSPECTIVE = 'Market view - Realistic assumptions'
