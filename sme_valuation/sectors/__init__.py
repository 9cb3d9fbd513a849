"""Sector reference data: risk profiles, multiples and value drivers."""

from sme_valuation.sectors.registry import default_registry
from sme_valuation.sectors.registry import macro_risk_adjustment
from sme_valuation.sectors.registry import SectorRegistry
from sme_valuation.sectors.value_drivers import recommend_value_drivers
from sme_valuation.sectors.value_drivers import top_value_drivers

__all__ = [
    'SectorRegistry',
    'default_registry',
    'macro_risk_adjustment',
    'recommend_value_drivers',
    'top_value_drivers',
]
