"""Auxiliary functions ported from MATLAB's VAR-Toolbox Auxiliary folder."""

from typing import Optional, Sequence, Union

import numpy as np
from scipy import linalg


def orth_norm(n: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Draw a random orthonormal matrix, following OrthNorm.m.

    The QR decomposition of a matrix of standard normal draws gives an
    orthonormal Q; flipping the columns where R has a negative diagonal makes
    Q uniformly distributed over the orthogonal group (Haar measure).

    Args:
        n: Dimension of the matrix
        rng: Random number generator (a fresh default_rng if None)

    Returns:
        Orthonormal matrix (n x n)
    """
    if rng is None:
        rng = np.random.default_rng()
    X = rng.standard_normal((n, n))
    Q, R = linalg.qr(X)
    d = np.sign(np.diag(R))
    d[d == 0] = 1.0
    return Q * d


def prctile(x: np.ndarray, p: Union[float, Sequence[float]], axis: int = -1) -> np.ndarray:
    """Percentiles of a sample, following MATLAB's prctile.

    MATLAB places the i-th sorted observation at the 100*(i-0.5)/n
    percentile and interpolates linearly in between, clamping outside
    that range. This is numpy's 'hazen' method.

    Args:
        x: Input array
        p: Percentile or sequence of percentiles in [0, 100]
        axis: Axis along which the percentiles are computed

    Returns:
        Percentiles; when p is a sequence, its axis comes first
    """
    return np.percentile(x, p, axis=axis, method='hazen')
