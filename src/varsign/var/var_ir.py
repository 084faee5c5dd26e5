"""
Compute impulse responses (IRs) for a VAR model.

This module implements impulse response functions with three identification schemes:
- zero contemporaneous restrictions ('short')
- zero long-run restrictions ('long')
- sign restrictions ('sign')
"""

from typing import Dict, Tuple
import numpy as np
from ..utils.var import VARUtils


def get_structural_matrix(var_results: Dict, var_options: Dict) -> np.ndarray:
    """Recover the structural impact matrix B for the chosen identification."""
    ident = var_options['ident']
    if ident == 'short':
        # B matrix is recovered with Cholesky decomposition
        return VARUtils.get_cholesky_identification_short(var_results['sigma'])
    elif ident == 'long':
        # B matrix is recovered with Cholesky on cumulative IR to infinity
        return VARUtils.get_cholesky_identification_long(var_results['sigma'], var_results['Fcomp'])
    elif ident == 'sign':
        # B matrix is recovered with sign restrictions
        if var_results.get('B') is None:
            raise ValueError('You need to provide the B matrix with sign restrictions')
        return var_results['B']
    raise ValueError(
        'Identification incorrectly specified.\n'
        'Choose one of the following options:\n'
        '- short: zero contemporaneous restrictions\n'
        '- long:  zero long-run restrictions\n'
        '- sign:  sign restrictions'
    )


def var_ir(var_results: Dict, var_options: Dict) -> Tuple[np.ndarray, Dict]:
    """Compute impulse responses (IRs) for a VAR model.

    Args:
        var_results: Dictionary with VAR estimation results
        var_options: Dictionary with VAR options

    Returns:
        tuple:
            - IR: array of shape (nsteps, nvar, nvar) with impulse responses,
              IR[t, i, j] being the response of variable i to shock j at step t
            - var_results: Copy of the VAR results with B, PSI and Fp filled in
    """
    # Check inputs
    if not var_results:
        raise ValueError('You need to provide VAR results')
    if not var_options:
        raise ValueError('You need to provide VAR options')

    # Retrieve and initialize variables
    var_results = dict(var_results)
    nsteps = var_options['nsteps']
    impact = var_options.get('impact', 0)  # Default to 0 (one stdev shock)
    shut = var_options.get('shut', 0)  # Default to 0 (no shut)
    recurs = var_options.get('recurs', 'wold')  # Default to 'wold'
    Fcomp = var_results['Fcomp'].copy()
    nvar = var_results['nvar']
    nlag = var_results['nlag']
    IR = np.full((nsteps, nvar, nvar), np.nan)

    # Compute Wold representation
    var_results['Fp'] = VARUtils.get_lag_coefs_matrices(var_results['F'], nvar, nlag, var_results['const'])
    PSI = VARUtils.compute_wold_matrices(var_results['Fp'], nsteps)
    var_results['PSI'] = PSI

    # Identification: Recover B matrix
    B = get_structural_matrix(var_results, var_options)

    # Set to zero a row of the companion matrix if "shut" is selected
    if shut != 0:
        Fcomp[shut-1, :] = 0

    for mm in range(nvar):
        response = np.zeros((nvar, nsteps))
        impulse = VARUtils.get_unitary_shock(B, impact, mm)

        # First period impulse response (=impulse vector)
        response[:, 0] = B @ impulse

        # Shut down the response if "shut" is selected
        if shut != 0:
            response[shut-1, 0] = 0

        # Recursive computation of impulse response
        if recurs == 'wold':
            for kk in range(1, nsteps):
                response[:, kk] = PSI[:, :, kk] @ B @ impulse
        elif recurs == 'comp':
            for kk in range(1, nsteps):
                Fcomp_n = np.linalg.matrix_power(Fcomp, kk)
                response[:, kk] = Fcomp_n[:nvar, :nvar] @ response[:, 0]
        else:
            raise ValueError(f"Invalid recurs value: {recurs}. Must be 'wold' or 'comp'.")

        IR[:, :, mm] = response.T  # Store responses of all variables to shock mm

    # Update VAR with structural impact matrix
    var_results['B'] = B

    return IR, var_results
