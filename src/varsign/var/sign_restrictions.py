"""
Find a rotation of the reduced-form covariance that satisfies sign restrictions.

Corresponds to the original SignRestrictions.m. The SIGN matrix has dimension
(nvar, nshocks). With three variables and one shock that has a positive
impact on the first variable, a negative impact on the second and an
unrestricted impact on the third, SIGN reads:

             shock1
    SIGN = [   1       # VAR1
              -1       # VAR2
               0 ]     # VAR3

That is: column j holds the signs of the responses of all variables to shock j.
"""

from typing import Dict, Optional
import numpy as np
from ..auxiliary import orth_norm
from ..utils.var import VARUtils


def check_sign(sign: np.ndarray, nvar: int) -> np.ndarray:
    """Validate a SIGN matrix and pad it with unrestricted shocks up to nvar columns."""
    sign = np.asarray(sign)
    if sign.ndim == 1:
        sign = sign.reshape(-1, 1)
    if sign.ndim != 2:
        raise ValueError(f'SIGN must be a 2-D matrix (nvar x nshocks), got {sign.ndim} dimensions')
    if sign.shape[0] != nvar:
        raise ValueError(f'SIGN must have one row per variable ({nvar}), got {sign.shape[0]}')
    if sign.shape[1] > nvar:
        raise ValueError(f'SIGN cannot have more shocks ({sign.shape[1]}) than variables ({nvar})')
    if not np.isin(sign, (-1, 0, 1)).all():
        raise ValueError('SIGN entries must be -1, 0 or 1')
    padded = np.zeros((nvar, nvar), dtype=int)
    padded[:, :sign.shape[1]] = sign
    return padded


def sign_restrictions(sign: np.ndarray,
                      var_results: Dict,
                      var_options: Dict,
                      rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Draw a structural impact matrix B whose IRs satisfy the SIGN matrix.

    Candidate impact matrices are rotations P @ Q of the Cholesky factor P
    of sigma, with Q uniform over orthonormal matrices. Each column of a
    candidate is assigned to the first restricted shock whose sign pattern it
    matches (or matches after flipping its sign) over the first `sr_hor`
    horizons. When every restricted shock has a column, B is returned with
    those columns at the shock positions and the leftover columns filling
    the unrestricted ones, so that B @ B.T = sigma.

    Args:
        sign: Sign restrictions (nvar x nshocks), entries in {-1, 0, 1}
        var_results: Dictionary with VAR estimation results
        var_options: Dictionary with VAR options (uses sr_hor and sr_rot)
        rng: Random number generator (a fresh default_rng if None)

    Returns:
        B: structural impact matrix (nvar x nvar)
    """
    if sign is None:
        raise ValueError('You have not provided sign restrictions (SIGN)')
    if not var_options:
        raise ValueError('You need to provide VAR options')
    if rng is None:
        rng = np.random.default_rng()

    nvar = var_results['nvar']
    nlag = var_results['nlag']
    sr_hor = var_options.get('sr_hor', 1)
    sr_rot = var_options.get('sr_rot', 500)
    if sr_hor < 1:
        raise ValueError('sr_hor must be at least 1')
    sign = check_sign(sign, nvar)

    # Responses over the restricted horizons are PSI[:, :, h] @ B
    Fp = VARUtils.get_lag_coefs_matrices(var_results['F'], nvar, nlag, var_results['const'])
    PSI = VARUtils.compute_wold_matrices(Fp, sr_hor)
    P = VARUtils.get_cholesky_identification_short(var_results['sigma'])

    restricted = [jj for jj in range(nvar) if np.any(sign[:, jj] != 0)]

    for _ in range(sr_rot):
        C = P @ orth_norm(nvar, rng)
        # (sr_hor, nvar, nvar) responses of each variable to each candidate column
        resp = np.einsum('ijh,jk->hik', PSI, C)
        resp_sign = np.sign(resp)

        assigned = {}
        used = set()
        for kk in range(nvar):
            for jj in restricted:
                if jj in assigned:
                    continue
                rows = sign[:, jj] != 0
                if np.all(resp_sign[:, rows, kk] == sign[rows, jj]):
                    assigned[jj] = C[:, kk]
                elif np.all(resp_sign[:, rows, kk] == -sign[rows, jj]):
                    assigned[jj] = -C[:, kk]
                else:
                    continue
                used.add(kk)
                break

        if len(assigned) == len(restricted):
            leftover = iter([kk for kk in range(nvar) if kk not in used])
            B = np.zeros((nvar, nvar))
            for jj in range(nvar):
                B[:, jj] = assigned[jj] if jj in assigned else C[:, next(leftover)]
            return B

    raise RuntimeError(
        f'Could not find a rotation satisfying the sign restrictions in {sr_rot} draws. '
        'Increase sr_rot or check the SIGN matrix'
    )
