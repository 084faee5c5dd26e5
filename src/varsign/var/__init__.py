"""
VAR (Vector Autoregression) module for sign restriction analysis.

This module provides VAR estimation, impulse responses, variance and
historical decompositions, and their identification with sign restrictions.
"""

from .var_model import VARModel, var_update
from .var_options import var_option
from .var_ir import var_ir
from .var_vd import var_vd
from .var_hd import HistoricalDecomposition, var_hd
from .var_drawpost import var_drawpost
from .sign_restrictions import sign_restrictions
from .sr import SROutput, sr

__all__ = [
    'VARModel', 'var_update', 'var_option', 'var_ir', 'var_vd',
    'HistoricalDecomposition', 'var_hd', 'var_drawpost',
    'sign_restrictions', 'SROutput', 'sr'
]
