"""
Identify a VAR with sign restrictions and collect IRs, VDs and HDs.

Corresponds to the original SR.m. Rotations that satisfy the SIGN matrix are
drawn until `ndraws` of them are accepted; for each one the impulse
responses, variance decompositions and historical decompositions are stored.
The output reports the whole set of draws, their pointwise medians and
percentile bands, and the results implied by the single draw whose B matrix
is closest to the median B.
"""

from dataclasses import dataclass
from numbers import Integral, Real
from typing import Dict, List, Optional, Tuple

import numpy as np
from tqdm.auto import tqdm

from .sign_restrictions import check_sign, sign_restrictions
from .var_drawpost import var_drawpost
from .var_hd import HistoricalDecomposition, var_hd
from .var_ir import var_ir
from .var_model import var_update
from .var_vd import var_vd
from ..auxiliary import prctile

_REQUIRED_OPTIONS = ('nsteps', 'ndraws', 'pctg', 'mult', 'sr_hor', 'sr_rot', 'sr_mod')


@dataclass
class SROutput:
    """Results of the sign restriction routine.

    Draws are stacked along the last axis.
    """
    IRall: np.ndarray   # (nsteps, nvar, nvar, ndraws) accepted IRs
    IRmed: np.ndarray   # median of IRall
    IRinf: np.ndarray   # lower percentile of IRall
    IRsup: np.ndarray   # upper percentile of IRall
    VDall: np.ndarray   # (nsteps, nvar, nvar, ndraws) accepted VDs
    VDmed: np.ndarray   # median of VDall
    VDinf: np.ndarray   # lower percentile of VDall
    VDsup: np.ndarray   # upper percentile of VDall
    Ball: np.ndarray    # (nvar, nvar, ndraws) accepted B matrices
    Bmed: np.ndarray    # median of Ball
    B: np.ndarray       # accepted B closest to Bmed
    HDall: HistoricalDecomposition  # accepted HDs
    sel: int            # position of B in the draws
    IR: np.ndarray      # IR of the draw closest to the median
    VD: np.ndarray      # VD of the draw closest to the median
    HD: HistoricalDecomposition  # HD of the draw closest to the median

    @property
    def ndraws(self) -> int:
        return self.Ball.shape[-1]


def closest_to_median(Ball: np.ndarray) -> Tuple[np.ndarray, int]:
    """Median B and the position of the draw closest to it.

    Distance is the sum of squared elementwise deviations; ties go to the
    earliest draw.
    """
    Bmed = np.median(Ball, axis=2)
    aux = np.sum((Ball - Bmed[:, :, None])**2, axis=(0, 1))
    return Bmed, int(np.argmin(aux))


def _check_inputs(var_results: Dict, sign: np.ndarray, var_options: Dict) -> None:
    if sign is None:
        raise ValueError('You have not provided sign restrictions (SIGN)')
    if not var_options:
        raise ValueError('You need to provide VAR options (var_option from VARModel)')
    if not var_results:
        raise ValueError('You need to provide VAR results')

    for key in ('nvar', 'nlag', 'nobs'):
        if var_results[key] <= 0:
            raise ValueError(f'VAR {key} must be positive, got {var_results[key]}')
    if var_results['nvar_ex'] < 0:
        raise ValueError(f"VAR nvar_ex must be non-negative, got {var_results['nvar_ex']}")
    check_sign(sign, var_results['nvar'])

    missing = [key for key in _REQUIRED_OPTIONS if key not in var_options]
    if missing:
        raise ValueError(f"VAR options are missing {', '.join(missing)}")

    for key in ('nsteps', 'ndraws', 'mult', 'sr_hor', 'sr_rot'):
        value = var_options[key]
        if isinstance(value, bool) or not isinstance(value, Integral) or value <= 0:
            raise ValueError(f'{key} must be a positive integer, got {value}')
    pctg = var_options['pctg']
    if isinstance(pctg, bool) or not isinstance(pctg, Real) or not 0 < pctg < 100:
        raise ValueError(f'pctg must be a number between 0 and 100, got {pctg}')


def sr(var_results: Dict,
       sign: np.ndarray,
       var_options: Dict,
       rng: Optional[np.random.Generator] = None) -> SROutput:
    """Compute IRs, VDs, and HDs for a VAR identified with sign restrictions.

    Args:
        var_results: Dictionary with VAR estimation results (VARModel.results)
        sign: Sign restrictions (nvar x nshocks), entries in {-1, 0, 1}
        var_options: Dictionary with VAR options (see var_option)
        rng: Random number generator (a fresh default_rng if None)

    Returns:
        SROutput with all accepted draws and their summary statistics
    """
    # Check inputs
    _check_inputs(var_results, sign, var_options)
    if rng is None:
        rng = np.random.default_rng()

    # Retrieve parameters and preallocate variables
    nvar = var_results['nvar']
    nvar_ex = var_results['nvar_ex']
    nobs = var_results['nobs']
    nlag = var_results['nlag']
    nsteps = var_options['nsteps']
    ndraws = var_options['ndraws']
    pctg = var_options['pctg']
    mult = var_options['mult']
    var_options = dict(var_options, ident='sign')

    IRall = np.full((nsteps, nvar, nvar, ndraws), np.nan)
    VDall = np.full((nsteps, nvar, nvar, ndraws), np.nan)
    Ball = np.full((nvar, nvar, ndraws), np.nan)
    HDall = HistoricalDecomposition.zeros(nobs, nlag, nvar, nvar_ex, ndraws)
    var_draws: List[Dict] = []

    # Sign restriction routine
    jj = 0  # accepted draws
    ww = 1  # index for printing on screen
    pbar = tqdm(total=ndraws, desc="Sign restriction draws", leave=False)
    while jj < ndraws:
        # Only identification uncertainty
        var_draw = dict(var_results)
        # Identification + model uncertainty
        if var_options['sr_mod'] == 1:
            sigma_draw, Ft_draw = var_drawpost(var_results, rng=rng)
            var_draw = var_update(var_draw, Ft_draw, sigma_draw)

        # Compute rotated B matrix and store it
        B = sign_restrictions(sign, var_draw, var_options, rng=rng)
        Ball[:, :, jj] = B
        var_draw['B'] = B

        # Compute and store IR, VD, HD
        IRall[:, :, :, jj], var_draw = var_ir(var_draw, var_options)
        VDall[:, :, :, jj] = var_vd(var_draw, var_options)
        HDall.store(jj, var_hd(var_draw, var_options))
        var_draws.append(var_draw)
        jj += 1
        pbar.update(1)

        # Display number of loops
        if jj == mult * ww:
            tqdm.write(f'Rotation: {jj} / {ndraws}')
            ww += 1

    pbar.close()
    print('-- Done!')
    print(' ')

    # B matrix that is closest to the median
    Bmed, sel = closest_to_median(Ball)

    # IR and VD bands based on all rotations
    pctg_inf = (100 - pctg) / 2
    pctg_sup = 100 - (100 - pctg) / 2
    IRinf, IRsup = prctile(IRall, [pctg_inf, pctg_sup], axis=3)
    VDinf, VDsup = prctile(VDall, [pctg_inf, pctg_sup], axis=3)

    # IR, VD, and HD based on the draw that is closest to the median B matrix
    var_sel = var_draws[sel]
    IR, _ = var_ir(var_sel, var_options)
    VD = var_vd(var_sel, var_options)
    HD = var_hd(var_sel, var_options)

    return SROutput(
        IRall=IRall,
        IRmed=np.median(IRall, axis=3),
        IRinf=IRinf,
        IRsup=IRsup,
        VDall=VDall,
        VDmed=np.median(VDall, axis=3),
        VDinf=VDinf,
        VDsup=VDsup,
        Ball=Ball,
        Bmed=Bmed,
        B=Ball[:, :, sel],
        HDall=HDall,
        sel=sel,
        IR=IR,
        VD=VD,
        HD=HD,
    )
