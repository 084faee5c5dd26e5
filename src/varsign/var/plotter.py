"""
Plotting utilities for sign restriction analysis.
"""

from pathlib import Path
from typing import List, Optional

import numpy as np
import matplotlib.pyplot as plt
from colorama import init, Fore, Style

from .sr import SROutput

# Initialize colorama for colored console output
init(autoreset=True)


class SRPlotter:
    """Class for plotting impulse responses identified with sign restrictions."""

    def __init__(self, var_names: List[str], shock_names: Optional[List[str]] = None):
        self.var_names = var_names
        self.shock_names = shock_names or [f'Shock {jj+1}' for jj in range(len(var_names))]

    def plot_irf(self,
                 sr_out: SROutput,
                 output_path: Optional[Path] = None,
                 filename: str = 'irf_sr.pdf') -> Path:
        """Plot median IRs with percentile bands, one panel per (variable, shock).

        Parameters
        ----------
        sr_out : SROutput
            Output of the sign restriction routine
        output_path : Path, optional
            Folder where the plot is saved. If None, uses './figures'
        filename : str
            Name of the saved file

        Returns
        -------
        Path of the saved figure
        """
        nvar = len(self.var_names)
        nshocks = len(self.shock_names)
        nsteps = sr_out.IRmed.shape[0]

        fig, axes = plt.subplots(nvar, nshocks, figsize=(5 * nshocks, 3.5 * nvar), squeeze=False)
        for jj in range(nshocks):
            for ii in range(nvar):
                ax = axes[ii, jj]
                self._plot_band(ax, sr_out.IRmed[:, ii, jj], sr_out.IRinf[:, ii, jj], sr_out.IRsup[:, ii, jj])

                # Plot zero line
                ax.plot(np.zeros(nsteps), '-k', linewidth=0.5, zorder=0)
                self._setup_axis(ax, f'{self.var_names[ii]} to {self.shock_names[jj]}')
                if ii == nvar - 1:
                    ax.set_xlabel('Steps')

        fig.tight_layout()
        return self._save_plot(fig, filename, output_path)

    def _plot_band(self, ax, med: np.ndarray, inf: np.ndarray, sup: np.ndarray) -> None:
        """Plot a median line with a shaded band and dashed band boundaries."""
        ax.plot(med, '-r', linewidth=2, label='Median', zorder=3)
        ax.fill_between(range(len(med)), inf, sup, color='r', alpha=0.1, zorder=1)
        ax.plot(inf, '--r', linewidth=1, alpha=0.5, zorder=2)
        ax.plot(sup, '--r', linewidth=1, alpha=0.5, zorder=2)

    def _setup_axis(self, ax, title: str):
        """Setup common axis properties."""
        ax.grid(True, alpha=0.3)
        ax.spines['top'].set_visible(False)
        ax.spines['right'].set_visible(False)
        ax.set_title(title, fontsize=12, pad=10)
        ax.tick_params(axis='both', which='major', labelsize=10)

    def _save_plot(self, fig, filename: str, output_path: Optional[Path] = None) -> Path:
        """Save plot to file."""
        if output_path is None:
            output_path = Path('figures')
        output_path = Path(output_path)
        output_path.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path / filename, dpi=300, bbox_inches='tight')
        plt.close(fig)
        print(f"{Fore.GREEN}Plot saved as {filename}{Style.RESET_ALL}")
        return output_path / filename
