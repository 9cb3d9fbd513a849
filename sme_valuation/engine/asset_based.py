'''Net asset value calculator for asset-heavy or early-stage businesses.'''

from dataclasses import dataclass, field
from typing import Dict, Optional

from sme_valuation.domain.types import AssetAdjustments


@dataclass(frozen=True)
class AssetBasedResult:
  net_asset_value: float
  adjusted_net_asset_value: float
  adjustment_summary: Dict[str, float] = field(default_factory=dict)


def compute_asset_based(
    total_assets: float,
    total_liabilities: float,
    adjustments: Optional[AssetAdjustments] = None,
) -> AssetBasedResult:
  '''
  Net assets plus fair-value adjustments.

  Negative results are returned as-is; no sign clamping is applied.
  '''
  net_asset_value = total_assets - total_liabilities
  if adjustments is None:
    adjustments = AssetAdjustments()

  return AssetBasedResult(
      net_asset_value=net_asset_value,
      adjusted_net_asset_value=net_asset_value + adjustments.total(),
      adjustment_summary=adjustments.summary(),
  )
