"""
Vector Autoregression (VAR) Model Implementation.

This module implements the main VAR model class, corresponding to the original VARmodel.m
"""

from typing import Dict, Optional, Union

import numpy as np
import pandas as pd
import statsmodels.api as sm

from .var_options import var_option
from ..utils.var import VARUtils


class VARModel:
    """Vector Autoregression (VAR) Model.

    Estimates a reduced-form VAR equation by equation with OLS. The results
    are stored in a dictionary (`self.results`) mirroring the VAR structure
    of the MATLAB toolbox, which is what the identification routines consume.
    """

    def __init__(self,
                 endo: Union[pd.DataFrame, np.ndarray],
                 nlag: int,
                 const: int = 1,
                 exog: Optional[Union[pd.DataFrame, np.ndarray]] = None,
                 nlag_ex: int = 0):
        """Initialize VAR model.

        Args:
            endo: DataFrame of endogenous variables (nobs x nvar)
            nlag: Number of lags
            const: Type of deterministic terms
                  0: no constant
                  1: constant
                  2: constant and trend
                  3: constant and trend^2
            exog: Optional DataFrame of exogenous variables (nobs x nvar_ex)
            nlag_ex: Number of lags for exogenous variables
        """
        if not isinstance(endo, pd.DataFrame):
            endo = np.asarray(endo, dtype=float)
            endo = pd.DataFrame(endo, columns=[f'var{i+1}' for i in range(endo.shape[1])])
        if exog is not None and not isinstance(exog, pd.DataFrame):
            exog = np.asarray(exog, dtype=float)
            if exog.ndim == 1:
                exog = exog.reshape(-1, 1)
            exog = pd.DataFrame(exog, columns=[f'exog{i+1}' for i in range(exog.shape[1])])

        # Store inputs
        self.endo = endo
        self.nlag = nlag
        self.const = const
        self.exog = exog
        self.nlag_ex = nlag_ex if exog is not None else 0

        # Get dimensions
        self.nobs, self.nvar = endo.shape
        self.nvar_ex = exog.shape[1] if exog is not None else 0

        # Validate inputs
        self._validate_inputs()

        # Create options
        self.options = var_option()
        self.options['vnames'] = list(endo.columns)
        if exog is not None:
            self.options['vnames_ex'] = list(exog.columns)

        # Compute effective sample size
        self.nobse = self.nobs - max(self.nlag, self.nlag_ex)

        # Compute number of coefficients
        self.ncoeff = self.nvar * self.nlag
        self.ncoeff_ex = self.nvar_ex * (self.nlag_ex + 1)
        self.ntotcoeff = self.ncoeff + self.ncoeff_ex + self.const

        if self.nobse <= self.ntotcoeff:
            raise ValueError(
                f'Not enough observations ({self.nobse}) to estimate {self.ntotcoeff} coefficients per equation'
            )

        # Initialize results dictionary with model attributes
        self.results = {
            'ENDO': self.endo.values.astype(float),
            'EXOG': self.exog.values.astype(float) if self.exog is not None else None,
            'nvar': self.nvar,
            'nvar_ex': self.nvar_ex,
            'nlag': self.nlag,
            'nlag_ex': self.nlag_ex,
            'const': self.const,
            'nobs': self.nobse,  # Use effective sample size
            'ncoeff': self.ncoeff,
            'ncoeff_ex': self.ncoeff_ex,
            'ntotcoeff': self.ntotcoeff
        }

        # Estimate VAR
        self._estimate()

    def _validate_inputs(self):
        """Validate input data."""
        if self.nlag < 1:
            raise ValueError('The VAR needs at least one lag (nlag >= 1)')
        if self.const not in (0, 1, 2, 3):
            raise ValueError(f'Invalid const value: {self.const}. Must be 0, 1, 2, or 3.')
        if self.nlag_ex < 0:
            raise ValueError('nlag_ex must be non-negative')
        if self.endo.isna().any().any():
            raise ValueError('Endogenous variables contain missing values')
        if self.exog is not None:
            if len(self.exog) != len(self.endo):
                raise ValueError('Endogenous and exogenous variables must have same number of observations')
            if self.exog.isna().any().any():
                raise ValueError('Exogenous variables contain missing values')

    def _estimate(self):
        """Estimate the VAR equation by equation with statsmodels OLS."""
        Y, X, X_EX = VARUtils.var_make_xy(self.endo, self.nlag, self.const, self.exog, self.nlag_ex)

        # Store data matrices
        self.results['Y'] = Y
        self.results['X'] = X
        self.results['X_EX'] = X_EX

        Ft = np.zeros((self.ntotcoeff, self.nvar))
        for j in range(self.nvar):
            fit = sm.OLS(Y[:, j], X).fit()

            # Store results for this equation
            self.results[f'eq{j+1}'] = {
                'beta': fit.params,
                'stderr': fit.bse,
                'tstat': fit.tvalues,
                'pval': fit.pvalues,
                'resid': fit.resid,
                'yhat': fit.fittedvalues,
                'y': Y[:, j],
                'r2': fit.rsquared,
                'r2_adj': fit.rsquared_adj,
                'sigma2': fit.scale
            }
            Ft[:, j] = fit.params

        sigma = self._residual_covariance(Y - X @ Ft)
        self.results.update(var_update(self.results, Ft, sigma))

        # Initialize identification results
        self.results.update({
            'B': None,      # structural impact matrix
            'PSI': None,    # Wold multipliers
            'Fp': None,     # Recursive F by lag
        })

    def _residual_covariance(self, resid: np.ndarray) -> np.ndarray:
        return (resid.T @ resid) / (self.nobse - self.ntotcoeff)

    @property
    def coefficients(self) -> pd.DataFrame:
        """Estimated coefficients (ntotcoeff x nvar) labelled by regressor."""
        X_cols = []
        if self.const >= 1:
            X_cols.append('const')
        if self.const >= 2:
            X_cols.append('trend')
        if self.const >= 3:
            X_cols.append('trend2')
        for lag in range(1, self.nlag + 1):
            for col in self.endo.columns:
                X_cols.append(f"{col}_lag{lag}")
        if self.exog is not None:
            for lag in range(self.nlag_ex + 1):
                for col in self.exog.columns:
                    X_cols.append(f"{col}_lag{lag}" if lag > 0 else str(col))
        return pd.DataFrame(self.results['Ft'], index=X_cols, columns=self.endo.columns)


def var_update(var_results: Dict, Ft: np.ndarray, sigma: np.ndarray) -> Dict:
    """Return a copy of var_results carrying new coefficients and covariance.

    Everything derived from Ft is recomputed (F, residuals, companion matrix
    and its largest eigenvalue) so the copy stays internally consistent.

    Args:
        var_results: Dictionary with VAR estimation results
        Ft: Coefficient matrix (ntotcoeff x nvar)
        sigma: Residual covariance matrix (nvar x nvar)

    Returns:
        Updated copy of var_results
    """
    out = dict(var_results)
    nvar = var_results['nvar']
    nlag = var_results['nlag']
    const = var_results['const']

    F = Ft.T
    Fcomp = VARUtils.compute_companion_matrix(F, nvar, nlag, const)
    out.update({
        'Ft': Ft,
        'F': F,
        'sigma': sigma,
        'resid': var_results['Y'] - var_results['X'] @ Ft,
        'Fcomp': Fcomp,
        'maxEig': np.max(np.abs(np.linalg.eigvals(Fcomp))),
    })
    return out
