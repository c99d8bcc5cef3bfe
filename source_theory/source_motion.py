"""Point-source stochastic ground motion.

The Fourier amplitude spectrum (FAS) of ground acceleration at a site is
modelled as the product of a Brune single-corner source spectrum,
geometric spreading, anelastic path attenuation, site attenuation (kappa)
and crustal amplification [0]_. Together with a duration estimate, the FAS
is converted into a response spectrum with random vibration theory.

References
----------
.. [0] Boore, D. M. (2003). Simulation of ground motion using the
       stochastic method. Pure and Applied Geophysics, 160(3), 635-676.
.. [1] Campbell, K. W. (2003). Prediction of strong ground motion using the
       hybrid empirical method and its use in the development of
       ground-motion (attenuation) relations in eastern North America.
       Bulletin of the Seismological Society of America, 93(3), 1012-1033.
"""

import dataclasses
import warnings
from typing import NamedTuple

import numpy as np
import numpy.typing as npt

from source_theory import regions, rvt
from source_theory.crustal_amplification import (
    AmplificationModel,
    CrustalAmplification,
)
from source_theory.dimension import Dimension
from source_theory.errors import ParameterRangeWarning
from source_theory.regions import Region
from source_theory.spectra import FourierSpectrum, ResponseSpectrum

DEFAULT_FREQ_MIN = 0.05
DEFAULT_FREQ_MAX = 50.0
DEFAULT_FREQ_COUNT = 1024

# Standard gravity (cm/s^2).
GRAVITY = 980.665

# Average radiation pattern, free surface amplification and partition of
# energy into horizontal components.
RADIATION_COEFF = 0.55
FREE_SURFACE_FACTOR = 2.0
PARTITION_FACTOR = 0.707

PARAMETER_BOUNDS = {
    "magnitude": (4.0, 9.0),
    "distance": (0.0, 2000.0),
    "depth": (0.0, 20.0),
    "stress_drop": (5.0, 500.0),
    "geo_atten": (0.0, 1.0),
    "path_dur_coeff": (0.0, 0.20),
    "path_atten_coeff": (50.0, 10000.0),
    "path_atten_power": (0.0, 1.0),
    "shear_velocity": (2.0, 5.0),
    "density": (2.4, 3.5),
    "site_atten": (0.001, 0.10),
}


@dataclasses.dataclass(frozen=True)
class SourceParameters:
    """Source, path and site parameters of a point-source scenario.

    The defaults are a magnitude 6.5 event 20 km from the site with
    the western US coefficients of Campbell (2003).
    """

    magnitude: float = 6.5
    """Moment magnitude."""
    distance: float = 20.0
    """Epicentral distance (km)."""
    depth: float = 8.0
    """Hypocentral depth (km)."""
    stress_drop: float = 100.0
    """Brune stress drop (bars)."""
    geo_atten: float = 0.05
    """Geometric attenuation factor applied to the source spectrum."""
    path_dur_coeff: float = 0.05
    """Path duration coefficient (s/km)."""
    path_atten_coeff: float = 180.0
    """Coefficient a of Q(f) = a f^b."""
    path_atten_power: float = 0.45
    """Power b of Q(f) = a f^b."""
    shear_velocity: float = 3.5
    """Shear-wave velocity in the source region (km/s)."""
    density: float = 2.8
    """Density in the source region (g/cm^3)."""
    site_atten: float = 0.04
    """Site attenuation kappa (s)."""

    @property
    def hypo_distance(self) -> float:  # numpydoc ignore=RT01
        """float: Hypocentral distance (km)."""
        return hypocentral_distance(self.distance, self.depth)

    def clamped(self) -> "SourceParameters":
        """Clamp every parameter into its physical range.

        Returns
        -------
        SourceParameters
            A copy of the parameters with out-of-range values replaced by
            the nearest bound. Non-finite values are replaced by the lower
            bound.

        Warns
        -----
        ParameterRangeWarning
            For each parameter that was changed.
        """
        changes = {}
        for name in PARAMETER_BOUNDS:
            value = getattr(self, name)
            clamped_value = clamp_value(name, value)
            if clamped_value == value:
                continue
            lower, upper = PARAMETER_BOUNDS[name]
            warnings.warn(
                f"{name} = {value} outside of [{lower}, {upper}], using {clamped_value}.",
                ParameterRangeWarning,
            )
            changes[name] = clamped_value
        return dataclasses.replace(self, **changes)

    def scenario_distance(self) -> float:
        """Hypocentral distance (km) of the clamped epicentral distance and depth.

        Returns
        -------
        float
            The hypocentral distance used to derive preset coefficients.
        """
        return hypocentral_distance(
            clamp_value("distance", self.distance), clamp_value("depth", self.depth)
        )


def clamp_value(name: str, value: float) -> float:
    """Clamp a parameter value into its physical range.

    Parameters
    ----------
    name : str
        The parameter name, a key of `PARAMETER_BOUNDS`.
    value : float
        The value to clamp.

    Returns
    -------
    float
        The nearest value within the bounds. Non-finite values are
        replaced by the lower bound.
    """
    lower, upper = PARAMETER_BOUNDS[name]
    if not np.isfinite(value):
        return lower
    return min(max(value, lower), upper)


def seismic_moment(magnitude: float) -> float:
    """Convert moment magnitude to seismic moment.

    Parameters
    ----------
    magnitude : float
        Moment magnitude.

    Returns
    -------
    float
        Seismic moment (dyne-cm).
    """
    return 10 ** (1.5 * magnitude + 16.05)


def corner_frequency(
    shear_velocity: float, stress_drop: float, moment: float
) -> float:
    """Compute the Brune corner frequency.

    Parameters
    ----------
    shear_velocity : float
        Shear-wave velocity in the source region (km/s).
    stress_drop : float
        Stress drop (bars).
    moment : float
        Seismic moment (dyne-cm).

    Returns
    -------
    float
        Corner frequency (Hz).
    """
    return 4.906e6 * shear_velocity * np.cbrt(stress_drop / moment)


def hypocentral_distance(distance: float, depth: float) -> float:
    """Compute the hypocentral distance from epicentral distance and depth.

    Parameters
    ----------
    distance : float
        Epicentral distance (km).
    depth : float
        Hypocentral depth (km).

    Returns
    -------
    float
        Hypocentral distance (km).
    """
    return float(np.hypot(distance, depth))


def source_spectrum(
    freqs: npt.ArrayLike,
    moment: float,
    corner_freq: float,
    density: float,
    shear_velocity: float,
) -> npt.NDArray[np.float64]:
    """Brune omega-squared displacement source spectrum at a reference distance of 1 km.

    Parameters
    ----------
    freqs : array-like
        Frequencies (Hz).
    moment : float
        Seismic moment (dyne-cm).
    corner_freq : float
        Corner frequency (Hz).
    density : float
        Density in the source region (g/cm^3).
    shear_velocity : float
        Shear-wave velocity in the source region (km/s).

    Returns
    -------
    np.ndarray
        Displacement spectrum (cm-s).
    """
    freqs = np.asarray(freqs, dtype=np.float64)
    # The 1e-20 converts dyne-cm / (g/cm^3 (km/s)^3 km) into cm-s.
    const = (
        RADIATION_COEFF
        * FREE_SURFACE_FACTOR
        * PARTITION_FACTOR
        / (4 * np.pi * density * shear_velocity**3)
        * 1e-20
    )
    return const * moment / (1 + (freqs / corner_freq) ** 2)


def path_attenuation(
    freqs: npt.ArrayLike,
    distance: float,
    path_atten_coeff: float,
    path_atten_power: float,
    shear_velocity: float,
) -> npt.NDArray[np.float64]:
    """Anelastic attenuation along the path with Q(f) = a f^b.

    Parameters
    ----------
    freqs : array-like
        Frequencies (Hz).
    distance : float
        Hypocentral distance (km).
    path_atten_coeff : float
        Coefficient a of Q(f).
    path_atten_power : float
        Power b of Q(f).
    shear_velocity : float
        Shear-wave velocity (km/s).

    Returns
    -------
    np.ndarray
        The attenuation exp(-π f R / (Q(f) β)) at each frequency.
    """
    freqs = np.asarray(freqs, dtype=np.float64)
    # f / Q(f) written as f^(1 - b) / a is finite at f = 0.
    return np.exp(
        -np.pi
        * np.power(freqs, 1 - path_atten_power)
        * distance
        / (path_atten_coeff * shear_velocity)
    )


def site_attenuation(freqs: npt.ArrayLike, site_atten: float) -> npt.NDArray[np.float64]:
    """High frequency site attenuation exp(-π κ f).

    Parameters
    ----------
    freqs : array-like
        Frequencies (Hz).
    site_atten : float
        Kappa (s).

    Returns
    -------
    np.ndarray
        The attenuation at each frequency.
    """
    return np.exp(-np.pi * site_atten * np.asarray(freqs, dtype=np.float64))


def calc_duration(params: SourceParameters) -> float:
    """Ground motion duration as the sum of source and path durations.

    Parameters
    ----------
    params : SourceParameters
        Scenario parameters.

    Returns
    -------
    float
        1 / fc + path_dur_coeff * R (s), at least `rvt.MIN_DURATION`.
    """
    corner_freq = corner_frequency(
        params.shear_velocity, params.stress_drop, seismic_moment(params.magnitude)
    )
    duration = 1 / corner_freq + params.path_dur_coeff * params.hypo_distance
    return max(float(duration), rvt.MIN_DURATION)


def calc_fourier_amps(
    freqs: npt.ArrayLike,
    params: SourceParameters,
    crustal_amp: CrustalAmplification,
) -> npt.NDArray[np.float64]:
    """Compute the Fourier amplitude spectrum of ground acceleration.

    Parameters
    ----------
    freqs : array-like
        Frequencies (Hz).
    params : SourceParameters
        Scenario parameters, assumed to be within their physical range.
    crustal_amp : CrustalAmplification
        Crustal amplification between the source and the site.

    Returns
    -------
    np.ndarray
        Fourier amplitudes of acceleration (g-s).
    """
    freqs = np.asarray(freqs, dtype=np.float64)
    moment = seismic_moment(params.magnitude)
    corner_freq = corner_frequency(params.shear_velocity, params.stress_drop, moment)

    displacement = source_spectrum(
        freqs, moment, corner_freq, params.density, params.shear_velocity
    )
    path = params.geo_atten * path_attenuation(
        freqs,
        params.hypo_distance,
        params.path_atten_coeff,
        params.path_atten_power,
        params.shear_velocity,
    )
    site = site_attenuation(freqs, params.site_atten) * crustal_amp.amplification(
        freqs
    )
    return (2 * np.pi * freqs) ** 2 * displacement * path * site / GRAVITY


class _Results(NamedTuple):
    params: SourceParameters
    duration: float
    fourier_spectrum: FourierSpectrum
    response_spectrum: ResponseSpectrum


class SourceTheoryMotion:
    """A point-source ground motion and its RVT response spectrum.

    Derived quantities (Fourier spectrum, duration and response spectrum)
    are recomputed by `calculate()`. Any change to the parameters, region,
    frequency axis, oscillator settings or crustal amplification marks them
    stale, and reading a stale quantity recomputes it.

    Parameters
    ----------
    region : Region, optional
        The parameter region. Preset regions overwrite the region fields of
        `params`. Defaults to `Region.WUS`.
    params : SourceParameters, optional
        Initial parameters. Defaults to `SourceParameters()`.
    freq_dimension : Dimension, optional
        Frequency axis of the Fourier spectrum. Defaults to 1024
        log-spaced frequencies between 0.05 and 50 Hz.
    periods : array-like, optional
        Oscillator periods (s) of the response spectrum.
    damping : float, optional
        Oscillator damping (percent of critical).
    peak_calculator : rvt.PeakCalculator, optional
        The RVT peak factor method.
    crustal_amp : CrustalAmplification, optional
        Crustal amplification, defaults to the region's model.

    Examples
    --------
    >>> motion = SourceTheoryMotion(Region.WUS)
    >>> motion.set_params(magnitude=7.0, distance=30.0)
    >>> spectrum = motion.response_spectrum
    >>> spectrum.to_dataframe().head()  # doctest: +SKIP
    """

    def __init__(
        self,
        region: Region = Region.WUS,
        params: SourceParameters | None = None,
        freq_dimension: Dimension | None = None,
        periods: npt.ArrayLike = rvt.DEFAULT_PERIODS,
        damping: float = rvt.DEFAULT_DAMPING,
        peak_calculator: rvt.PeakCalculator = rvt.PeakCalculator.VANMARCKE_1975,
        crustal_amp: CrustalAmplification | None = None,
    ):
        self._params = params if params is not None else SourceParameters()
        self._freq_dimension = (
            freq_dimension
            if freq_dimension is not None
            else Dimension(DEFAULT_FREQ_MIN, DEFAULT_FREQ_MAX, DEFAULT_FREQ_COUNT)
        )
        self._crustal_amp = (
            crustal_amp if crustal_amp is not None else CrustalAmplification()
        )
        self._periods = np.array(periods, dtype=np.float64)
        self._periods.setflags(write=False)
        self._damping = float(damping)
        self._peak_calculator = rvt.PeakCalculator(peak_calculator)
        self._results: _Results | None = None
        self._stale = True
        self._calculated_freqs: npt.NDArray[np.float64] | None = None
        self._calculated_amp_revision: tuple[int, int] | None = None
        self._region = Region.CUSTOM
        self.set_region(region)

    @property
    def region(self) -> Region:  # numpydoc ignore=RT01
        """Region: The selected parameter region."""
        return self._region

    @property
    def params(self) -> SourceParameters:  # numpydoc ignore=RT01
        """SourceParameters: The current (unclamped) parameters."""
        return self._params

    @property
    def crustal_amp(self) -> CrustalAmplification:  # numpydoc ignore=RT01
        """CrustalAmplification: The crustal amplification of the motion."""
        return self._crustal_amp

    @property
    def freq_dimension(self) -> Dimension:  # numpydoc ignore=RT01
        """Dimension: The frequency axis of the Fourier spectrum."""
        return self._freq_dimension

    @property
    def periods(self) -> npt.NDArray[np.float64]:  # numpydoc ignore=RT01
        """np.ndarray: Oscillator periods (s) of the response spectrum."""
        return self._periods

    @property
    def damping(self) -> float:  # numpydoc ignore=RT01
        """float: Oscillator damping (percent of critical)."""
        return self._damping

    @property
    def peak_calculator(self) -> rvt.PeakCalculator:  # numpydoc ignore=RT01
        """rvt.PeakCalculator: The RVT peak factor method."""
        return self._peak_calculator

    def is_customizable(self) -> bool:
        """Check if the region parameters can be edited.

        Returns
        -------
        bool
            True if the region is `Region.CUSTOM`.
        """
        return regions.is_customizable(self._region)

    def editable_fields(self) -> frozenset[str]:
        """Return the names of the parameters that can currently be edited.

        Returns
        -------
        frozenset[str]
            The editable parameter names.
        """
        return regions.editable_fields(self._region)

    def _with_preset(self, params: SourceParameters) -> SourceParameters:
        # Distance dependent coefficients follow the distance that will be
        # used in the calculation, not an out-of-range user value.
        return dataclasses.replace(
            params, **regions.preset_values(self._region, params.scenario_distance())
        )

    @property
    def is_stale(self) -> bool:  # numpydoc ignore=RT01
        """bool: True if the derived spectra need to be recomputed."""
        return (
            self._stale
            or self._results is None
            or self._calculated_freqs is not self._freq_dimension.values
            or self._calculated_amp_revision != self._crustal_amp.revision
        )

    def set_region(self, region: Region | int) -> None:
        """Select a parameter region.

        Preset regions overwrite the stress drop, attenuation, velocity,
        density, duration and crustal amplification parameters. Selecting
        `Region.CUSTOM` keeps the current values and unlocks them.

        Parameters
        ----------
        region : Region or int
            The region, or its index in `regions.region_list()`.
        """
        self._region = Region(region)
        self._crustal_amp.locked = False
        if not self.is_customizable():
            self._params = self._with_preset(self._params)
            self._crustal_amp.set_model(
                regions.PRESETS[self._region].amplification_model
            )
            self._crustal_amp.locked = True
        self._stale = True

    def set_params(self, **changes: float) -> None:
        """Change one or more parameters.

        In preset regions, changing the distance or depth also updates the
        distance dependent geometric attenuation and path duration
        coefficient.

        Parameters
        ----------
        **changes : float
            New parameter values, keyed by `SourceParameters` field name.

        Raises
        ------
        ValueError
            If a field cannot be edited in the current region.
        TypeError
            If a field name is unknown.
        """
        unknown = set(changes) - set(PARAMETER_BOUNDS)
        if unknown:
            raise TypeError(f"Unknown source parameters: {sorted(unknown)}.")
        locked = set(changes) - self.editable_fields()
        if locked:
            raise ValueError(
                f"Parameters {sorted(locked)} cannot be edited in the "
                f"{self._region.name} region."
            )
        self._params = dataclasses.replace(self._params, **changes)
        if not self.is_customizable():
            self._params = self._with_preset(self._params)
        self._stale = True

    def set_amplification_model(self, model: AmplificationModel | int) -> None:
        """Switch the crustal amplification model.

        Parameters
        ----------
        model : AmplificationModel or int
            The new model.

        Raises
        ------
        ValueError
            If the region is not customizable.
        """
        if "amplification_model" not in self.editable_fields():
            raise ValueError(
                f"Crustal amplification cannot be edited in the {self._region.name} region."
            )
        self._crustal_amp.set_model(model)
        self._stale = True

    def set_freq_dimension(self, freq_dimension: Dimension) -> None:
        """Replace the frequency axis of the Fourier spectrum.

        Parameters
        ----------
        freq_dimension : Dimension
            The new frequency axis.
        """
        self._freq_dimension = freq_dimension
        self._stale = True

    def set_oscillator(
        self,
        periods: npt.ArrayLike | None = None,
        damping: float | None = None,
        peak_calculator: rvt.PeakCalculator | None = None,
    ) -> None:
        """Change the response spectrum oscillator settings.

        Parameters
        ----------
        periods : array-like, optional
            New oscillator periods (s).
        damping : float, optional
            New damping (percent of critical).
        peak_calculator : rvt.PeakCalculator, optional
            New peak factor method.
        """
        if periods is not None:
            self._periods = np.array(periods, dtype=np.float64)
            self._periods.setflags(write=False)
        if damping is not None:
            self._damping = float(damping)
        if peak_calculator is not None:
            self._peak_calculator = rvt.PeakCalculator(peak_calculator)
        self._stale = True

    def calculate(self) -> None:
        """Recompute the Fourier spectrum, duration and response spectrum.

        Parameters are clamped into their physical range before use. The
        calculation is deterministic, repeated calls with unchanged inputs
        give identical results.

        Raises
        ------
        InvalidFrequencyAxisError
            If the frequency axis is empty or not strictly increasing.

        Warns
        -----
        ParameterRangeWarning
            If a parameter is clamped.
        ModelMismatchWarning
            If calculated crustal amplification has no crustal model.
        """
        freqs = self._freq_dimension.values
        amp_revision = self._crustal_amp.revision
        params = self._params.clamped()
        if not self.is_customizable():
            params = self._with_preset(params)

        fourier_amps = calc_fourier_amps(freqs, params, self._crustal_amp)
        duration = calc_duration(params)
        response_spectrum = rvt.calc_response_spectrum(
            freqs,
            fourier_amps,
            duration,
            self._periods,
            self._damping,
            self._peak_calculator,
        )
        self._results = _Results(
            params,
            duration,
            FourierSpectrum.create(freqs, fourier_amps),
            response_spectrum,
        )
        self._calculated_freqs = freqs
        self._calculated_amp_revision = amp_revision
        self._stale = False

    def recompute_all(self) -> None:
        """Recompute every derived quantity, equivalent to `calculate()`."""
        self.calculate()

    def _fresh_results(self) -> _Results:
        if self.is_stale:
            self.calculate()
        return self._results

    @property
    def fourier_spectrum(self) -> FourierSpectrum:  # numpydoc ignore=RT01
        """FourierSpectrum: Fourier amplitude spectrum of acceleration (g-s)."""
        return self._fresh_results().fourier_spectrum

    @property
    def response_spectrum(self) -> ResponseSpectrum:  # numpydoc ignore=RT01
        """ResponseSpectrum: RVT response spectrum (g)."""
        return self._fresh_results().response_spectrum

    @property
    def duration(self) -> float:  # numpydoc ignore=RT01
        """float: Ground motion duration (s)."""
        return self._fresh_results().duration

    @property
    def seismic_moment(self) -> float:  # numpydoc ignore=RT01
        """float: Seismic moment (dyne-cm) of the clamped parameters."""
        return seismic_moment(self._fresh_results().params.magnitude)

    @property
    def corner_freq(self) -> float:  # numpydoc ignore=RT01
        """float: Brune corner frequency (Hz) of the clamped parameters."""
        params = self._fresh_results().params
        return corner_frequency(
            params.shear_velocity, params.stress_drop, seismic_moment(params.magnitude)
        )

    @property
    def hypo_distance(self) -> float:  # numpydoc ignore=RT01
        """float: Hypocentral distance (km) of the clamped parameters."""
        return self._fresh_results().params.hypo_distance
