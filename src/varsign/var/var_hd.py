"""
Compute the historical decomposition (HD) of a VAR model.

Corresponds to the original VARhd.m. The observed path of each endogenous
variable is split into the contribution of each structural shock, of the
initial condition, of the deterministic terms and of the exogenous variables.
"""

from dataclasses import dataclass, fields
from typing import Dict
import numpy as np
from .var_ir import get_structural_matrix


@dataclass
class HistoricalDecomposition:
    """Historical decomposition of a VAR, one array per component.

    Arrays are indexed by (time, variable[, shock or exogenous variable]) and
    have nobs + nlag rows, aligned with the data used in estimation. An
    ensemble of draws carries one more trailing axis indexing the draw.
    """
    shock: np.ndarray   # (T, nvar, nvar) contribution of each structural shock
    init: np.ndarray    # (T, nvar) initial condition
    const: np.ndarray   # (T, nvar) constant
    trend: np.ndarray   # (T, nvar) linear trend
    trend2: np.ndarray  # (T, nvar) quadratic trend
    endo: np.ndarray    # (T, nvar) sum of all components
    exo: np.ndarray     # (T, nvar, nvar_ex) contribution of each exogenous variable

    @classmethod
    def zeros(cls, nobs: int, nlag: int, nvar: int, nvar_ex: int, ndraws: int) -> 'HistoricalDecomposition':
        """Preallocate storage for `ndraws` decompositions (draw axis last)."""
        T = nobs + nlag
        return cls(
            shock=np.zeros((T, nvar, nvar, ndraws)),
            init=np.zeros((T, nvar, ndraws)),
            const=np.zeros((T, nvar, ndraws)),
            trend=np.zeros((T, nvar, ndraws)),
            trend2=np.zeros((T, nvar, ndraws)),
            endo=np.zeros((T, nvar, ndraws)),
            exo=np.zeros((T, nvar, nvar_ex, ndraws)),
        )

    def store(self, jj: int, hd: 'HistoricalDecomposition') -> None:
        """Write a single decomposition into slot `jj` of the draw axis."""
        for f in fields(self):
            target = getattr(self, f.name)
            if target.size:
                target[..., jj] = getattr(hd, f.name)


def var_hd(var_results: Dict, var_options: Dict) -> HistoricalDecomposition:
    """Compute the historical decomposition of a VAR.

    Args:
        var_results: Dictionary with VAR estimation results
        var_options: Dictionary with VAR options

    Returns:
        HistoricalDecomposition whose first nlag rows are NaN (nlag-1 for init)
    """
    if not var_results:
        raise ValueError('You need to provide VAR results')
    if not var_options:
        raise ValueError('You need to provide VAR options')

    # Retrieve and initialize variables
    Fcomp = var_results['Fcomp']
    const = var_results['const']
    F = var_results['F']
    nvar = var_results['nvar']
    nvar_ex = var_results['nvar_ex']
    nlag = var_results['nlag']
    nlag_ex = var_results['nlag_ex']
    nvarXeq = nvar * nlag
    X = var_results['X'][:, const:const+nvarXeq]
    nobs = X.shape[0]
    B = get_structural_matrix(var_results, var_options)

    # Structural errors
    eps = np.linalg.solve(B, var_results['resid'].T)  # (nvar, nobs)

    # Contribution of each shock
    invA_big = np.zeros((nvarXeq, nvar))
    invA_big[:nvar, :] = B
    Icomp = np.hstack([np.eye(nvar), np.zeros((nvar, (nlag-1)*nvar))])
    HDshock = np.zeros((nvar, nobs+1, nvar))
    for j in range(nvar):
        state = np.zeros(nvarXeq)
        eps_big = np.zeros((nvar, nobs+1))
        eps_big[j, 1:] = eps[j, :]
        for i in range(1, nobs+1):
            state = invA_big @ eps_big[:, i] + Fcomp @ state
            HDshock[:, i, j] = Icomp @ state

    # Initial value
    HDinit = np.zeros((nvar, nobs+1))
    state = X[0, :].copy()
    HDinit[:, 0] = Icomp @ state
    for i in range(1, nobs+1):
        state = Fcomp @ state
        HDinit[:, i] = Icomp @ state

    # Deterministic terms: column k of F scaled by (t^power) with power 0, 1, 2
    def deterministic(k: int, power: int) -> np.ndarray:
        out = np.zeros((nvar, nobs+1))
        if const <= k:
            return out
        CC = np.zeros(nvarXeq)
        CC[:nvar] = F[:, k]
        state = np.zeros(nvarXeq)
        for i in range(1, nobs+1):
            state = CC * (i**power) + Fcomp @ state
            out[:, i] = Icomp @ state
        return out

    HDconst = deterministic(0, 0)
    HDtrend = deterministic(1, 1)
    HDtrend2 = deterministic(2, 2)

    # Exogenous variables, summing over their lags
    HDexo = np.zeros((nvar, nobs+1, nvar_ex))
    if nvar_ex > 0:
        EXO = F[:, const+nvarXeq:]
        X_EX = var_results['X_EX']
        for ii in range(nvar_ex):
            cols = [ii + ll*nvar_ex for ll in range(nlag_ex+1)]
            state = np.zeros(nvarXeq)
            for i in range(1, nobs+1):
                impulse = np.zeros(nvarXeq)
                impulse[:nvar] = EXO[:, cols] @ X_EX[i-1, cols]
                state = impulse + Fcomp @ state
                HDexo[:, i, ii] = Icomp @ state

    # All decompositions must add up to the original data
    HDendo = HDinit + HDconst + HDtrend + HDtrend2 + HDexo.sum(axis=2) + HDshock.sum(axis=2)

    # Reshape to (time, variable[, component]) and pad the presample with NaN
    def pad(a: np.ndarray, n: int) -> np.ndarray:
        a = np.moveaxis(a, 0, 1)
        return np.concatenate([np.full((n,) + a.shape[1:], np.nan), a], axis=0)

    return HistoricalDecomposition(
        shock=pad(HDshock[:, 1:, :], nlag),
        init=pad(HDinit, nlag-1),
        const=pad(HDconst[:, 1:], nlag),
        trend=pad(HDtrend[:, 1:], nlag),
        trend2=pad(HDtrend2[:, 1:], nlag),
        endo=pad(HDendo[:, 1:], nlag),
        exo=pad(HDexo[:, 1:, :], nlag),
    )
