"""Pytest configuration and fixtures for varsign tests."""

import numpy as np
import pandas as pd
import pytest
from numpy.random import default_rng

from varsign.var import VARModel, var_option

A1 = np.array([[0.5, 0.1],
               [0.2, 0.4]])
A2 = np.array([[0.1, 0.0],
               [0.0, 0.1]])
B_TRUE = np.array([[1.0, 0.3],
                   [-0.5, 0.8]])
C_TRUE = np.array([0.2, -0.1])


def simulate_var(nobs: int, seed: int, exog: np.ndarray = None, G: np.ndarray = None) -> pd.DataFrame:
    """Simulate a stable bivariate VAR(2) with constant and optional exogenous inputs."""
    rng = default_rng(seed)
    y = np.zeros((nobs, 2))
    for t in range(2, nobs):
        y[t] = C_TRUE + A1 @ y[t-1] + A2 @ y[t-2] + B_TRUE @ rng.standard_normal(2)
        if exog is not None:
            y[t] += G @ exog[t]
    return pd.DataFrame(y, columns=['output', 'prices'])


@pytest.fixture
def endo() -> pd.DataFrame:
    return simulate_var(150, seed=0)


@pytest.fixture
def var_model(endo) -> VARModel:
    return VARModel(endo=endo, nlag=2, const=1)


@pytest.fixture
def var_results(var_model) -> dict:
    return var_model.results


@pytest.fixture
def exog_model() -> VARModel:
    rng = default_rng(11)
    exog = rng.standard_normal((150, 1))
    endo = simulate_var(150, seed=1, exog=exog, G=np.array([[0.5], [-0.3]]))
    return VARModel(endo=endo, nlag=2, const=3, exog=pd.DataFrame(exog, columns=['oil']), nlag_ex=1)


@pytest.fixture
def options() -> dict:
    opts = var_option()
    opts.update({'nsteps': 6, 'ndraws': 5, 'mult': 2, 'pctg': 68, 'sr_mod': 0})
    return opts
