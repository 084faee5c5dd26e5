"""
VAR model options.

This module implements the options for VAR models, corresponding to the original VARoption.m
"""

def var_option() -> dict:
    """Optional inputs for VAR analysis.

    This function is run automatically by VARModel; callers copy the
    dictionary and override the entries they need.

    Returns:
        Dictionary with VAR options
    """
    return {
        'vnames': None,      # endogenous variables names
        'vnames_ex': None,   # exogenous variables names
        'snames': None,      # shocks names
        'nsteps': 40,        # number of steps for computation of IRFs and FEVDs
        'impact': 0,         # size of the shock for IRFs: 0=1stdev, 1=unit shock
        'shut': 0,           # forces the IRF of one variable to zero
        'ident': 'short',    # identification method for IRFs ('short' zero short-run restr, 'long' zero long-run restr, 'sign' sign restr)
        'recurs': 'wold',    # method for computation of recursive stuff ('wold' form MA representation, 'comp' for companion form)
        'ndraws': 1000,      # number of draws for sign restrictions
        'mult': 10,          # multiple of draws to be printed at screen
        'pctg': 95,          # confidence level for error bands
        'sr_hor': 1,         # number of periods that sign restrictions are imposed on
        'sr_rot': 500,       # max number of rotations for finding sign restrictions
        'sr_mod': 1,         # model uncertainty for sign restrictions (1=yes, 0=no)
    }
