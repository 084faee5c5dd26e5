"""
Compute forecast error variance decompositions (VDs) for a VAR model.

Corresponds to the original VARvd.m.
"""

from typing import Dict
import numpy as np
from .var_ir import var_ir


def var_vd(var_results: Dict, var_options: Dict) -> np.ndarray:
    """Compute the forecast error variance decomposition of a VAR.

    The share of the h-step forecast error variance of variable i due to
    shock j is the ratio between the MSE built from column j of B only and
    the total MSE built from sigma.

    Args:
        var_results: Dictionary with VAR estimation results
        var_options: Dictionary with VAR options

    Returns:
        VD: array of shape (nsteps, nvar, nvar) with VD[t, i, j] the
            percentage of the variance of variable i explained by shock j
    """
    if not var_results:
        raise ValueError('You need to provide VAR results')
    if not var_options:
        raise ValueError('You need to provide VAR options')

    nsteps = var_options['nsteps']
    nvar = var_results['nvar']
    sigma = var_results['sigma']

    # Wold multipliers and structural impact matrix
    _, var_ir_results = var_ir(var_results, var_options)
    PSI = var_ir_results['PSI']
    B = var_ir_results['B']

    # Total mean squared error
    MSE = np.zeros((nsteps, nvar, nvar))
    MSE[0] = sigma
    for kk in range(1, nsteps):
        MSE[kk] = MSE[kk-1] + PSI[:, :, kk] @ sigma @ PSI[:, :, kk].T
    total = np.diagonal(MSE, axis1=1, axis2=2)

    VD = np.zeros((nsteps, nvar, nvar))
    for mm in range(nvar):
        column = B[:, [mm]]
        MSE_j = np.zeros((nsteps, nvar, nvar))
        MSE_j[0] = column @ column.T
        for kk in range(1, nsteps):
            MSE_j[kk] = MSE_j[kk-1] + PSI[:, :, kk] @ (column @ column.T) @ PSI[:, :, kk].T
        VD[:, :, mm] = np.diagonal(MSE_j, axis1=1, axis2=2) / total

    return VD * 100
