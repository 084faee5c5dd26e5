"""
Sign restriction identification on simulated data.

A three-variable VAR(1) is simulated from known structural shocks, estimated
by OLS, and identified with a demand shock (output up, prices up, rate up)
and a supply shock (output up, prices down).
"""

import argparse
from pathlib import Path

import numpy as np
import pandas as pd

from varsign.var import VARModel, sr
from varsign.var.plotter import SRPlotter


def simulate_data(nobs: int, rng: np.random.Generator) -> pd.DataFrame:
    """Simulate a stable VAR(1) with a known structural impact matrix."""
    A = np.array([[0.5, 0.1, 0.0],
                  [0.1, 0.4, 0.1],
                  [0.2, 0.2, 0.6]])
    B = np.array([[1.0, 0.8, 0.2],
                  [0.5, -0.6, 0.1],
                  [0.4, 0.1, 0.9]])
    y = np.zeros((nobs, 3))
    for t in range(1, nobs):
        y[t] = A @ y[t-1] + B @ rng.standard_normal(3)
    index = pd.date_range('1990-01-01', periods=nobs, freq='QS')
    return pd.DataFrame(y, index=index, columns=['output', 'prices', 'rate'])


def main():
    parser = argparse.ArgumentParser(description='Sign restriction VAR on simulated data')
    parser.add_argument('--nobs', type=int, default=200, help='number of simulated observations')
    parser.add_argument('--ndraws', type=int, default=200, help='number of accepted rotations')
    parser.add_argument('--seed', type=int, default=42, help='seed of the random number generator')
    parser.add_argument('--plot', type=Path, default=None, help='folder where the IR plot is saved')
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    endo = simulate_data(args.nobs, rng)

    model = VARModel(endo=endo, nlag=1, const=1)
    print(model.coefficients.round(3))

    options = model.options.copy()
    options.update({'nsteps': 20, 'ndraws': args.ndraws, 'mult': 50, 'pctg': 68, 'sr_mod': 1})

    #        demand  supply
    SIGN = np.array([[1,  1],    # output
                     [1, -1],    # prices
                     [1,  0]])   # rate
    out = sr(model.results, SIGN, options, rng=rng)

    print('Median impact matrix:')
    print(pd.DataFrame(out.Bmed, index=endo.columns).round(3))
    print(f'Draw closest to the median: {out.sel}')
    print('Impact responses of the selected draw:')
    print(pd.DataFrame(out.IR[0], index=endo.columns).round(3))

    if args.plot is not None:
        plotter = SRPlotter(list(endo.columns), ['Demand', 'Supply'])
        plotter.plot_irf(out, output_path=args.plot)


if __name__ == "__main__":
    main()
