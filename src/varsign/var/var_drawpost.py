"""
Draw VAR coefficients and covariance from their posterior distribution.

Corresponds to the original VARdrawpost.m: with a diffuse (Jeffreys) prior,
the residual covariance is inverse-Wishart and, conditional on it, the
coefficients are matrix normal around the OLS estimates.
"""

from typing import Dict, Optional, Tuple
import numpy as np
from scipy.stats import invwishart
from ..utils.var import VARUtils


def var_drawpost(var_results: Dict,
                 rng: Optional[np.random.Generator] = None,
                 max_tries: int = 1000) -> Tuple[np.ndarray, np.ndarray]:
    """Draw (sigma, Ft) from the posterior of a VAR estimated with OLS.

    sigma ~ IW(resid' resid, nobs)
    vec(Ft) | sigma ~ N(vec(Ft_hat), sigma ⊗ (X'X)^-1)

    Coefficient draws implying an explosive VAR (largest eigenvalue of the
    companion matrix >= 1) are discarded and drawn again.

    Args:
        var_results: Dictionary with VAR estimation results
        rng: Random number generator (a fresh default_rng if None)
        max_tries: Maximum number of draws to obtain a stable VAR

    Returns:
        tuple:
            - sigma_draw: Residual covariance draw (nvar x nvar)
            - Ft_draw: Coefficient draw (ntotcoeff x nvar)
    """
    if not var_results:
        raise ValueError('You need to provide VAR results')
    if rng is None:
        rng = np.random.default_rng()

    nvar = var_results['nvar']
    nlag = var_results['nlag']
    const = var_results['const']
    nobs = var_results['nobs']
    Ft = var_results['Ft']
    X = var_results['X']
    resid = var_results['Y'] - X @ Ft

    # Cholesky factor of (X'X)^-1, shared by all draws
    XXi = np.linalg.inv(X.T @ X)
    L_x = np.linalg.cholesky((XXi + XXi.T) / 2)

    for _ in range(max_tries):
        # Draw sigma from the inverse Wishart
        sigma_draw = np.atleast_2d(invwishart.rvs(df=nobs, scale=resid.T @ resid, random_state=rng))

        # Draw Ft from the matrix normal
        L_s = np.linalg.cholesky(sigma_draw)
        Ft_draw = Ft + L_x @ rng.standard_normal(Ft.shape) @ L_s.T

        # Keep only stable draws
        Fcomp = VARUtils.compute_companion_matrix(Ft_draw.T, nvar, nlag, const)
        if np.max(np.abs(np.linalg.eigvals(Fcomp))) < 1:
            return sigma_draw, Ft_draw

    raise RuntimeError(f'Could not draw a stable VAR from the posterior in {max_tries} attempts')
