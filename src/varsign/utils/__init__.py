"""
Utility modules for the varsign package.

This module contains utility functions ported from MATLAB's VAR-Toolbox Utils directory.
"""

from .var import VARUtils

__all__ = [
    'VARUtils'
]
