"""Sign restriction identification of VAR models, ported from MATLAB's VAR-Toolbox."""

__version__ = "0.1.0"
