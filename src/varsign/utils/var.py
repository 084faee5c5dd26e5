import numpy as np
import pandas as pd
from typing import Optional, Tuple, Union


class VARUtils:
    """Utility functions for VAR models."""

    @staticmethod
    def var_make_lags(data: Union[np.ndarray, pd.DataFrame], lag: int) -> np.ndarray:
        """Create matrix of current and lagged values, following VARmakelags.m.

        For data = [x1 x2] and lag = 1 the output is [x1 x2 x1(-1) x2(-1)],
        trimmed of the first `lag` observations.

        Args:
            data: Matrix containing the original data (nobs x nvar)
            lag: Lag order

        Returns:
            Matrix of current and lagged values ((nobs-lag) x nvar*(lag+1))
        """
        if isinstance(data, pd.DataFrame):
            data = data.values
        data = np.asarray(data, dtype=float)
        if data.ndim == 1:
            data = data.reshape(-1, 1)

        nobs = len(data)
        return np.hstack([data[lag-jj:nobs-jj] for jj in range(lag + 1)])

    @staticmethod
    def var_make_xy(endo: Union[np.ndarray, pd.DataFrame],
                    nlag: int,
                    const: int,
                    exog: Optional[Union[np.ndarray, pd.DataFrame]] = None,
                    nlag_ex: int = 0) -> Tuple[np.ndarray, np.ndarray, Optional[np.ndarray]]:
        """Create matrices Y and X for VAR estimation, following VARmakexy.m.

        The columns of X are ordered as [deterministic terms, endogenous lags
        1..nlag, exogenous lags 0..nlag_ex]. When nlag and nlag_ex differ, the
        sample starts at max(nlag, nlag_ex) so all blocks share the same rows.

        Args:
            endo: Endogenous data (nobs x nvar)
            nlag: Lag order of the VAR
            const: Type of deterministic terms
                   0: no constant, no trend
                   1: constant, no trend
                   2: constant, trend
                   3: constant, trend^2
            exog: Optional exogenous data (nobs x nvar_ex)
            nlag_ex: Lag order of the exogenous variables

        Returns:
            tuple:
                - Y: VAR dependent variable
                - X: VAR independent variable
                - X_EX: block of X holding the exogenous variables (None if no exog)
        """
        if isinstance(endo, pd.DataFrame):
            endo = endo.values
        endo = np.asarray(endo, dtype=float)

        nobs = len(endo)
        start = max(nlag, nlag_ex) if exog is not None else nlag
        nobse = nobs - start

        # Y matrix
        Y = endo[start:]

        # Endogenous lags, lag 1 first
        X = np.hstack([endo[start-jj:nobs-jj] for jj in range(1, nlag + 1)])

        # Add deterministic terms
        trend = np.arange(1, nobse + 1).reshape(-1, 1)
        if const == 0:
            pass  # No constant, no trend
        elif const == 1:  # constant
            X = np.hstack([np.ones((nobse, 1)), X])
        elif const == 2:  # time trend and constant
            X = np.hstack([np.ones((nobse, 1)), trend, X])
        elif const == 3:  # linear time trend, squared time trend, and constant
            X = np.hstack([np.ones((nobse, 1)), trend, trend**2, X])
        else:
            raise ValueError(f"Invalid const value: {const}. Must be 0, 1, 2, or 3.")

        X_EX = None
        if exog is not None:
            X_EX = VARUtils.var_make_lags(exog, nlag_ex)[start-nlag_ex:]
            X = np.hstack([X, X_EX])

        return Y, X, X_EX

    @staticmethod
    def compute_companion_matrix(F: np.ndarray, nvar: int, nlag: int, const: int) -> np.ndarray:
        """Compute the companion matrix for the VAR model.

        The companion matrix transforms a VAR(p) into a VAR(1) in a higher dimension.
        For a VAR with n variables and p lags, it creates an (n*p)×(n*p) matrix:

        | A₁ A₂ ... Aₚ₋₁ Aₚ |
        | I  0  ... 0    0  |
        | 0  I  ... 0    0  |
        | ⋮  ⋮  ⋱  ⋮    ⋮  |
        | 0  0  ... I    0  |

        Args:
            F: Coefficient matrix (nvar x ntotcoeff), deterministic terms first
            nvar: Number of variables (n)
            nlag: Number of lags (p)
            const: Number of deterministic columns in F

        Returns:
            np.ndarray: Companion matrix ((n*p) × (n*p))
        """
        n_companion = nvar * nlag
        companion = np.zeros((n_companion, n_companion))

        # Fill in the first block row with VAR coefficients
        companion[:nvar, :] = F[:, const:const + n_companion]

        # Fill in the identity matrices in the lower blocks
        if nlag > 1:
            companion[nvar:, :-nvar] = np.eye(nvar * (nlag - 1))

        return companion

    @staticmethod
    def get_lag_coefs_matrices(F: np.ndarray, nvar: int, nlag: int, const: int) -> np.ndarray:
        """Extract lag coefficient matrices from F.

        Fp[:, :, lag-1][i, j] is the effect of variable j lagged by `lag`
        periods on variable i.

        Returns:
            np.ndarray: (nvar x nvar x nlag) array of lag matrices
        """
        Fp = np.zeros((nvar, nvar, nlag))
        i = const
        for ii in range(nlag):
            Fp[:, :, ii] = F[:, i:i+nvar]
            i += nvar
        return Fp

    @staticmethod
    def compute_wold_matrices(Fp: np.ndarray, nsteps: int) -> np.ndarray:
        """Compute Wold moving average representation matrices.

        The Wold representation expresses a VAR model as an infinite MA process:
        y_t = ε_t + Ψ₁ε_{t-1} + Ψ₂ε_{t-2} + ...

        The Ψ (PSI) matrices are computed recursively:
        Ψ₀ = I (identity matrix)
        Ψₛ = ∑ᵢ₌₁ᵖ Ψₛ₋ᵢFᵢ for s > 0, where p is the VAR lag order

        PSI[:, :, step][i, j] is the effect of a unit reduced-form shock to
        variable j at time t on variable i at time t+step, so impulse
        responses follow as IR_step = PSI[:, :, step] @ B @ impulse.

        Args:
            Fp: Lag coefficient matrices from get_lag_coefs_matrices
            nsteps: Number of steps to compute

        Returns:
            np.ndarray: (nvar x nvar x nsteps) array of Wold multipliers
        """
        nvar, _, nlag = Fp.shape
        PSI = np.zeros((nvar, nvar, nsteps))
        PSI[:, :, 0] = np.eye(nvar)
        for step in range(1, nsteps):
            aux = np.zeros((nvar, nvar))
            for jj in range(min(step, nlag)):
                aux += PSI[:, :, step-jj-1] @ Fp[:, :, jj]
            PSI[:, :, step] = aux
        return PSI

    @staticmethod
    def get_cholesky_identification_short(sigma: np.ndarray) -> np.ndarray:
        """Lower triangular B with B @ B.T = sigma (rows = variables, columns = shocks)."""
        try:
            B = np.linalg.cholesky(sigma)
        except np.linalg.LinAlgError:
            raise ValueError('VCV is not positive definite')
        return B

    @staticmethod
    def get_cholesky_identification_long(sigma: np.ndarray, Fcomp: np.ndarray) -> np.ndarray:
        """B such that the cumulative response to infinity is lower triangular."""
        nvar = sigma.shape[0]
        Finf_big = np.linalg.inv(np.eye(len(Fcomp)) - Fcomp)
        Finf = Finf_big[:nvar, :nvar]
        try:
            D = np.linalg.cholesky(Finf @ sigma @ Finf.T)
        except np.linalg.LinAlgError:
            raise ValueError('VCV is not positive definite')
        B = np.linalg.solve(Finf, D)
        return B

    @staticmethod
    def get_unitary_shock(B: np.ndarray, impact: int, shock: int) -> np.ndarray:
        """Create an impulse vector for computing impulse responses.

        The shock size is determined by the 'impact' parameter:
        - impact=0: one standard deviation shock (uses the B matrix directly)
        - impact=1: unitary shock (scales by 1/B[shock, shock])

        Args:
            B: Structural impact matrix
            impact: Type of shock (0=one std dev, 1=unitary)
            shock: Position of the shock

        Returns:
            np.ndarray: Impulse vector for the specified shock
        """
        impulse = np.zeros(B.shape[1])

        # Set the size of the shock
        if impact == 0:
            impulse[shock] = 1  # one stdev shock
        elif impact == 1:
            impulse[shock] = 1/B[shock, shock]  # unitary shock
        else:
            raise ValueError('Impact must be either 0 or 1')
        return impulse
