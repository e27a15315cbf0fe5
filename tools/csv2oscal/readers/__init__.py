"""
Row readers for csv2oscal

Readers convert tabular control listings (CSV, XLSX) to Canonical Intermediate
Representation (CIR) rows with source attribution.
"""

from .base_reader import BaseReader
from .control_reader import ControlReader

__all__ = [
    'BaseReader',
    'ControlReader'
]
