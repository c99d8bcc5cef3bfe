"""Read-only spectra produced by a source theory motion."""

from typing import NamedTuple

import numpy as np
import numpy.typing as npt
import pandas as pd


def _read_only(values: npt.ArrayLike) -> npt.NDArray[np.float64]:
    array = np.array(values, dtype=np.float64)
    array.setflags(write=False)
    return array


class FourierSpectrum(NamedTuple):
    """Fourier amplitude spectrum of ground acceleration."""

    freqs: npt.NDArray[np.float64]
    """Frequencies (Hz)."""
    amplitudes: npt.NDArray[np.float64]
    """Fourier amplitudes (g-s)."""

    @classmethod
    def create(
        cls, freqs: npt.ArrayLike, amplitudes: npt.ArrayLike
    ) -> "FourierSpectrum":
        """Create a spectrum holding read-only copies of the given arrays.

        Parameters
        ----------
        freqs : array-like
            Frequencies (Hz).
        amplitudes : array-like
            Fourier amplitudes (g-s).

        Returns
        -------
        FourierSpectrum
            The spectrum.
        """
        return cls(_read_only(freqs), _read_only(amplitudes))

    def to_dataframe(self) -> pd.DataFrame:
        """Tabulate the spectrum.

        Returns
        -------
        pd.DataFrame
            A dataframe indexed by frequency ("freq") with column "fourier_amp".
        """
        return pd.DataFrame(
            {"freq": self.freqs, "fourier_amp": self.amplitudes}
        ).set_index("freq")


class ResponseSpectrum(NamedTuple):
    """Pseudo-spectral acceleration response spectrum."""

    periods: npt.NDArray[np.float64]
    """Oscillator periods (s)."""
    sa: npt.NDArray[np.float64]
    """Spectral acceleration (g)."""
    damping: float
    """Oscillator damping (percent of critical)."""

    @classmethod
    def create(
        cls, periods: npt.ArrayLike, sa: npt.ArrayLike, damping: float
    ) -> "ResponseSpectrum":
        """Create a spectrum holding read-only copies of the given arrays.

        Parameters
        ----------
        periods : array-like
            Oscillator periods (s).
        sa : array-like
            Spectral acceleration (g).
        damping : float
            Oscillator damping (percent of critical).

        Returns
        -------
        ResponseSpectrum
            The spectrum.
        """
        return cls(_read_only(periods), _read_only(sa), float(damping))

    @property
    def freqs(self) -> npt.NDArray[np.float64]:  # numpydoc ignore=RT01
        """np.ndarray: Oscillator frequencies (Hz)."""
        return 1 / self.periods

    def to_dataframe(self) -> pd.DataFrame:
        """Tabulate the spectrum.

        Returns
        -------
        pd.DataFrame
            A dataframe indexed by period ("period") with column "sa".
        """
        return pd.DataFrame({"period": self.periods, "sa": self.sa}).set_index(
            "period"
        )
