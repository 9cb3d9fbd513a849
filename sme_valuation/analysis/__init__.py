'''
Valuation analysis utilities.

Note: To avoid RuntimeWarning when using -m flag, import directly:
  from sme_valuation.analysis.batch_valuation import batch_valuation
  from sme_valuation.analysis.sensitivity import SensitivityTableBuilder
'''
