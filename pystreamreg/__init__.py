"""
PyStreamReg: streaming least-squares regression for Python.

Fits linear models by updating an orthogonal reduction one observation
at a time, so data sets larger than memory, or data still arriving, can
be regressed without revisiting old rows.

Submodules:
    regression: Updating regression engine and one-shot fit()
    core: Data sources, result envelope, validation, numeric utilities
"""

__version__ = "0.1.0"

from pystreamreg import regression
from pystreamreg.core import DataSource
from pystreamreg.regression import UpdatingRegression, fit

__all__ = [
    "__version__",
    "regression",
    "DataSource",
    "UpdatingRegression",
    "fit",
]
