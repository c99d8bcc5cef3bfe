"""Random vibration theory (RVT) estimates of oscillator peak response.

The peak response of a single-degree-of-freedom oscillator is estimated
from the Fourier amplitude spectrum (FAS) of the ground motion and its
duration, without simulating a time series. The FAS is filtered by the
oscillator transfer function, the spectral moments of the response are
integrated, and a peak factor relates the root-mean-square (rms) response
to its expected maximum.

Functions
---------
calc_sdof_tf(freqs, osc_freq, osc_damping)
    Acceleration transfer function of a damped oscillator.
spectral_moments(freqs, fourier_amps, orders)
    Spectral moments of a Fourier amplitude spectrum.
calc_peak(duration, freqs, fourier_amps, ...)
    Expected peak of a response given its Fourier amplitudes.
calc_response_spectrum(freqs, fourier_amps, duration, ...)
    RVT pseudo-spectral acceleration response spectrum.

References
----------
.. [0] Boore, D. M. (2003). Simulation of ground motion using the
       stochastic method. Pure and Applied Geophysics, 160(3), 635-676.
.. [1] Vanmarcke, E. H. (1975). On the distribution of the first-passage
       time for normal stationary random processes. Journal of Applied
       Mechanics, 42(1), 215-220.
.. [2] Cartwright, D. E., & Longuet-Higgins, M. S. (1956). The statistical
       distribution of the maxima of a random function. Proceedings of the
       Royal Society of London A, 237(1209), 212-232.
.. [3] Boore, D. M., & Joyner, W. B. (1984). A note on the use of random
       vibration theory to predict peak amplitudes of transient signals.
       Bulletin of the Seismological Society of America, 74(5), 2035-2039.
.. [4] Davenport, A. G. (1964). Note on the distribution of the largest
       value of a random function with application to gust loading.
       Proceedings of the Institution of Civil Engineers, 28(2), 187-196.
"""

import functools
import warnings
from enum import StrEnum, auto
from typing import NamedTuple

import numpy as np
import numpy.typing as npt
import scipy as sp

from source_theory.dimension import validate_axis
from source_theory.errors import NumericDegeneracyWarning
from source_theory.spectra import ResponseSpectrum

DEFAULT_DAMPING = 5.0
DEFAULT_PERIODS = np.geomspace(0.01, 10.0, 100)

# Smallest ground motion duration (s) used in RVT calculations.
MIN_DURATION = 1e-3
# Smallest number of zero crossings, below this the peak statistics break down.
MIN_ZERO_CROSSINGS = 1.33
_EULER_GAMMA = 0.5772156649


class PeakCalculator(StrEnum):
    """Enumeration of peak factor calculation methods."""

    VANMARCKE_1975 = auto()
    CARTWRIGHT_LONGUET_HIGGINS_1965 = auto()
    DAVENPORT_1964 = auto()


class PeakResult(NamedTuple):
    """Expected peak response of a signal."""

    peak: float
    """Expected maximum absolute value."""
    peak_factor: float
    """Ratio of the peak to the rms value. Zero for degenerate spectra."""
    rms: float
    """Root-mean-square value."""


def calc_sdof_tf(
    freqs: npt.ArrayLike, osc_freq: float, osc_damping: float
) -> npt.NDArray[np.complex128]:
    """Compute the pseudo-acceleration transfer function of an oscillator.

    Parameters
    ----------
    freqs : array-like
        Frequencies (Hz) to evaluate the transfer function at.
    osc_freq : float
        Natural frequency of the oscillator (Hz).
    osc_damping : float
        Fractional damping of the oscillator (e.g. 0.05).

    Returns
    -------
    np.ndarray
        Complex transfer function, equal to 1 at zero frequency.
    """
    freqs = np.asarray(freqs, dtype=np.float64)
    return -(osc_freq**2) / (
        freqs**2 - osc_freq**2 - 2j * osc_damping * osc_freq * freqs
    )


def spectral_moments(
    freqs: npt.ArrayLike, fourier_amps: npt.ArrayLike, orders: tuple[int, ...]
) -> npt.NDArray[np.float64]:
    """Compute spectral moments of a Fourier amplitude spectrum.

    The moment of order k is 2 ∫ (2πf)^k |A(f)|^2 df. The integral uses
    the trapezoidal rule over the actual, possibly non-uniform, frequency
    spacing.

    Parameters
    ----------
    freqs : array-like
        Strictly increasing frequencies (Hz).
    fourier_amps : array-like
        Fourier amplitudes at each frequency.
    orders : tuple of int
        The moment orders to compute.

    Returns
    -------
    np.ndarray
        The moment of each order.
    """
    freqs = np.asarray(freqs, dtype=np.float64)
    squared_amps = np.abs(np.asarray(fourier_amps)) ** 2
    angular_freqs = 2 * np.pi * freqs
    return np.array(
        [
            2 * sp.integrate.trapezoid(angular_freqs**order * squared_amps, x=freqs)
            for order in orders
        ]
    )


def _vanmarcke_ccdf(x: float, num_zero_crossings: float, bandwidth_eff: float) -> float:
    if x <= 0:
        return 1.0
    with np.errstate(over="ignore"):
        return 1 - (1 - np.exp(-(x**2) / 2)) * np.exp(
            -num_zero_crossings
            * (1 - np.exp(-np.sqrt(np.pi / 2) * bandwidth_eff * x))
            / np.expm1(x**2 / 2)
        )


def vanmarcke_peak_factor(duration: float, m0: float, m1: float, m2: float) -> float:
    """Peak factor from the Vanmarcke (1975) [1]_ first-passage distribution.

    Parameters
    ----------
    duration : float
        Duration of the stationary process (s).
    m0, m1, m2 : float
        Spectral moments of order 0, 1 and 2.

    Returns
    -------
    float
        The expected ratio of the peak to the rms value.
    """
    num_zero_crossings = max(duration * np.sqrt(m2 / m0) / np.pi, MIN_ZERO_CROSSINGS)
    bandwidth = np.sqrt(max(1 - m1**2 / (m0 * m2), 0.0))
    bandwidth_eff = bandwidth**1.2
    return sp.integrate.quad(
        _vanmarcke_ccdf, 0, np.inf, args=(num_zero_crossings, bandwidth_eff)
    )[0]


def cartwright_longuet_higgins_peak_factor(
    duration: float, m0: float, m2: float, m4: float
) -> float:
    """Peak factor from the Cartwright & Longuet-Higgins [2]_ distribution of maxima.

    Parameters
    ----------
    duration : float
        Duration of the stationary process (s).
    m0, m2, m4 : float
        Spectral moments of order 0, 2 and 4.

    Returns
    -------
    float
        The expected ratio of the peak to the rms value.
    """
    num_zero_crossings = max(duration * np.sqrt(m2 / m0) / np.pi, MIN_ZERO_CROSSINGS)
    num_extrema = max(duration * np.sqrt(m4 / m2) / np.pi, num_zero_crossings)
    bandwidth = min(num_zero_crossings / num_extrema, 1.0)
    return np.sqrt(2) * sp.integrate.quad(
        lambda z: 1 - (1 - bandwidth * np.exp(-(z**2))) ** num_extrema, 0, np.inf
    )[0]


def davenport_peak_factor(duration: float, m0: float, m2: float) -> float:
    """Asymptotic peak factor of Davenport (1964) [4]_.

    Parameters
    ----------
    duration : float
        Duration of the stationary process (s).
    m0, m2 : float
        Spectral moments of order 0 and 2.

    Returns
    -------
    float
        The expected ratio of the peak to the rms value.
    """
    num_zero_crossings = max(duration * np.sqrt(m2 / m0) / np.pi, MIN_ZERO_CROSSINGS)
    scale = np.sqrt(2 * np.log(num_zero_crossings))
    return scale + _EULER_GAMMA / scale


def oscillator_rms_duration(
    duration: float, osc_freq: float, osc_damping: float
) -> float:
    """Extend the ground motion duration for the oscillator response [3]_.

    Parameters
    ----------
    duration : float
        Ground motion duration (s).
    osc_freq : float
        Natural frequency of the oscillator (Hz).
    osc_damping : float
        Fractional damping of the oscillator.

    Returns
    -------
    float
        Duration (s) used to compute the rms response.
    """
    osc_duration = 1 / (2 * np.pi * osc_damping * osc_freq)
    ratio = duration * osc_freq
    return duration + osc_duration * ratio**3 / (ratio**3 + 1 / 3)


def _floor_duration(duration: float) -> float:
    if not duration > MIN_DURATION:
        warnings.warn(
            f"Duration of {duration} s is too short, using {MIN_DURATION} s.",
            NumericDegeneracyWarning,
        )
        return MIN_DURATION
    return duration


def calc_peak(
    duration: float,
    freqs: npt.ArrayLike,
    fourier_amps: npt.ArrayLike,
    method: PeakCalculator = PeakCalculator.VANMARCKE_1975,
    osc_freq: float | None = None,
    osc_damping: float | None = None,
) -> PeakResult:
    """Compute the expected peak of a signal from its Fourier amplitudes.

    Parameters
    ----------
    duration : float
        Ground motion duration (s). Non-positive durations are floored to
        `MIN_DURATION`.
    freqs : array-like
        Strictly increasing frequencies (Hz).
    fourier_amps : array-like
        Fourier amplitudes of the signal at each frequency.
    method : PeakCalculator, optional
        The peak factor method. Defaults to Vanmarcke (1975).
    osc_freq : float, optional
        Natural frequency of the oscillator (Hz), if the signal is an
        oscillator response. Used by methods that correct the rms duration.
    osc_damping : float, optional
        Fractional damping of the oscillator.

    Returns
    -------
    PeakResult
        The expected peak, peak factor and rms value. If the zeroth or
        second moment is not positive the spectrum is degenerate and all
        values are zero.

    Warns
    -----
    NumericDegeneracyWarning
        If the duration is not positive.
    """
    duration = _floor_duration(duration)
    m0, m1, m2, m4 = spectral_moments(freqs, fourier_amps, (0, 1, 2, 4))
    if not (np.isfinite(m0) and m0 > 0 and np.isfinite(m2) and m2 > 0):
        return PeakResult(0.0, 0.0, 0.0)

    rms_duration = duration
    method = PeakCalculator(method)
    if method == PeakCalculator.VANMARCKE_1975:
        peak_factor = vanmarcke_peak_factor(duration, m0, m1, m2)
    elif method == PeakCalculator.CARTWRIGHT_LONGUET_HIGGINS_1965:
        peak_factor = cartwright_longuet_higgins_peak_factor(duration, m0, m2, m4)
        if osc_freq is not None and osc_damping is not None:
            rms_duration = oscillator_rms_duration(duration, osc_freq, osc_damping)
    else:
        peak_factor = davenport_peak_factor(duration, m0, m2)

    # The expected peak of a stationary process never falls below its rms.
    peak_factor = max(float(peak_factor), 1.0)
    rms = float(np.sqrt(m0 / rms_duration))
    return PeakResult(peak_factor * rms, peak_factor, rms)


def calc_response_spectrum(
    freqs: npt.ArrayLike,
    fourier_amps: npt.ArrayLike,
    duration: float,
    periods: npt.ArrayLike = DEFAULT_PERIODS,
    damping: float = DEFAULT_DAMPING,
    method: PeakCalculator = PeakCalculator.VANMARCKE_1975,
) -> ResponseSpectrum:
    """Compute a pseudo-spectral acceleration response spectrum with RVT.

    Parameters
    ----------
    freqs : array-like
        Strictly increasing frequencies (Hz) of the Fourier amplitude spectrum.
    fourier_amps : array-like
        Fourier amplitudes of ground acceleration (g-s).
    duration : float
        Ground motion duration (s).
    periods : array-like, optional
        Oscillator periods (s). Defaults to 100 log-spaced periods between
        0.01 and 10 s.
    damping : float, optional
        Oscillator damping (percent of critical). Defaults to 5%.
    method : PeakCalculator, optional
        The peak factor method. Defaults to Vanmarcke (1975).

    Returns
    -------
    ResponseSpectrum
        Spectral acceleration (g) at each period.

    Raises
    ------
    InvalidFrequencyAxisError
        If `freqs` is empty or not strictly increasing.
    ValueError
        If a period or the damping is not positive, or the amplitudes do not
        match the frequencies.
    """
    freqs = np.asarray(freqs, dtype=np.float64)
    validate_axis(freqs)
    fourier_amps = np.asarray(fourier_amps, dtype=np.float64)
    if fourier_amps.shape != freqs.shape:
        raise ValueError(
            f"Expected {len(freqs)} Fourier amplitudes, got {fourier_amps.shape}."
        )
    periods = np.atleast_1d(np.asarray(periods, dtype=np.float64))
    if np.any(periods <= 0):
        raise ValueError("Oscillator periods must be positive.")
    if damping <= 0:
        raise ValueError(f"Oscillator damping must be positive, got {damping}.")

    duration = _floor_duration(duration)
    osc_damping = damping / 100
    peak = functools.partial(calc_peak, duration, freqs, method=method)
    sa = [
        peak(
            np.abs(calc_sdof_tf(freqs, 1 / period, osc_damping)) * fourier_amps,
            osc_freq=1 / period,
            osc_damping=osc_damping,
        ).peak
        for period in periods
    ]
    return ResponseSpectrum.create(periods, sa, damping)
