"""
Gaussian External= bridge to Q-Chem.

Exports the public API:
- Calculation
- ParsedResult
- format_driver_report
- translate
"""
from .gaussian.request import Calculation
from .qchem.parse import ParsedResult
from .gaussian.report import format_driver_report
from .workflow.translate import translate

__version__ = "0.1.0"
