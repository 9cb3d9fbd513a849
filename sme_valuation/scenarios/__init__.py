"""Scenario policies and generation."""

from sme_valuation.scenarios.config import ScenarioPolicy
from sme_valuation.scenarios.generator import generate_scenarios
from sme_valuation.scenarios.generator import scenarios_from_composite
from sme_valuation.scenarios.generator import wacc_sensitivity

__all__ = [
    'ScenarioPolicy',
    'generate_scenarios',
    'scenarios_from_composite',
    'wacc_sensitivity',
]
