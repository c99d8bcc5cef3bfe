"""Regional parameter presets for the point-source model.

Each preset bundles the source, path and site coefficients recommended by
Campbell (2003) [0]_ for a tectonic region: stress drop, Q(f), crustal
velocity and density, kappa, the piecewise geometric spreading and path
duration models, and the generic rock amplification curve of the region.
Selecting a preset overwrites those parameters and locks them; the `CUSTOM`
region unlocks every field.

References
----------
.. [0] Campbell, K. W. (2003). Prediction of strong ground motion using the
       hybrid empirical method and its use in the development of
       ground-motion (attenuation) relations in eastern North America.
       Bulletin of the Seismological Society of America, 93(3), 1012-1033.
"""

import dataclasses
from enum import IntEnum

from source_theory.crustal_amplification import AmplificationModel

# Distances below this (km) are treated as this distance by geometric spreading.
NEAR_FIELD_DISTANCE = 1.0


class Region(IntEnum):
    """Enumeration of parameter regions, in display order (custom last)."""

    WUS = 0
    CEUS = 1
    CUSTOM = 2


# A piecewise model is a sequence of (coefficient, end distance) segments,
# the last segment has an end distance of None and extends to infinity.
Segments = tuple[tuple[float, float | None], ...]


@dataclasses.dataclass(frozen=True)
class RegionPreset:
    """Canonical parameter set for a region."""

    name: str
    stress_drop: float
    """Stress drop (bars)."""
    path_atten_coeff: float
    """Coefficient a of Q(f) = a f^b."""
    path_atten_power: float
    """Power b of Q(f) = a f^b."""
    shear_velocity: float
    """Shear-wave velocity in the source region (km/s)."""
    density: float
    """Density in the source region (g/cm^3)."""
    site_atten: float
    """Site attenuation kappa (s)."""
    geometric_spreading: Segments
    """Piecewise (exponent, end distance km) geometric spreading model."""
    path_duration: Segments
    """Piecewise (coefficient s/km, end distance km) path duration model."""
    amplification_model: AmplificationModel


PRESETS = {
    Region.WUS: RegionPreset(
        name="WUS",
        stress_drop=100.0,
        path_atten_coeff=180.0,
        path_atten_power=0.45,
        shear_velocity=3.5,
        density=2.8,
        site_atten=0.04,
        geometric_spreading=((1.0, 40.0), (0.5, None)),
        path_duration=((0.05, None),),
        amplification_model=AmplificationModel.WUS,
    ),
    Region.CEUS: RegionPreset(
        name="CEUS",
        stress_drop=150.0,
        path_atten_coeff=680.0,
        path_atten_power=0.36,
        shear_velocity=3.6,
        density=2.8,
        site_atten=0.006,
        geometric_spreading=((1.0, 70.0), (0.0, 130.0), (0.5, None)),
        path_duration=((0.0, 10.0), (0.16, 70.0), (-0.03, 130.0), (0.04, None)),
        amplification_model=AmplificationModel.CEUS,
    ),
}

# Fields that can always be edited, regardless of region.
SCENARIO_FIELDS = frozenset({"magnitude", "distance", "depth"})

# Fields supplied by a region preset.
REGION_FIELDS = frozenset(
    {
        "stress_drop",
        "geo_atten",
        "path_dur_coeff",
        "path_atten_coeff",
        "path_atten_power",
        "shear_velocity",
        "density",
        "site_atten",
        "amplification_model",
    }
)


def region_list() -> list[str]:
    """Human readable names of the regions, indexable by `Region` value.

    Returns
    -------
    list[str]
        The region names, custom last.
    """
    return ["WUS", "CEUS", "Custom"]


def is_customizable(region: Region) -> bool:
    """Check if the region parameters can be edited.

    Parameters
    ----------
    region : Region
        The selected region.

    Returns
    -------
    bool
        True only for the `CUSTOM` region.
    """
    return Region(region) == Region.CUSTOM


def editable_fields(region: Region) -> frozenset[str]:
    """Return the names of the parameters that can be edited in a region.

    Parameters
    ----------
    region : Region
        The selected region.

    Returns
    -------
    frozenset[str]
        The editable parameter names.
    """
    if is_customizable(region):
        return SCENARIO_FIELDS | REGION_FIELDS
    return SCENARIO_FIELDS


def geometric_spreading(distance: float, segments: Segments) -> float:
    """Evaluate a piecewise power-law geometric spreading model.

    Within each segment the amplitude decays as R^-b, and the segments are
    joined continuously. For example, WUS spreading ((1, 40), (0.5, None))
    is 1/R up to 40 km and (1/40) sqrt(40/R) beyond.

    Parameters
    ----------
    distance : float
        Hypocentral distance (km). Distances below `NEAR_FIELD_DISTANCE` are
        treated as `NEAR_FIELD_DISTANCE`.
    segments : Segments
        The (exponent, end distance) segments.

    Returns
    -------
    float
        The geometric attenuation factor.
    """
    distance = max(distance, NEAR_FIELD_DISTANCE)
    start = NEAR_FIELD_DISTANCE
    # Amplitude at the start of the current segment, 1/R at the near field.
    amplitude = 1 / NEAR_FIELD_DISTANCE
    for exponent, end in segments:
        if end is None or distance <= end:
            return amplitude * (distance / start) ** -exponent
        amplitude *= (end / start) ** -exponent
        start = end
    return amplitude


def path_duration(distance: float, segments: Segments) -> float:
    """Evaluate a piecewise linear path duration model.

    The duration accumulates the coefficient of each distance band over the
    part of the path inside that band, e.g. the CEUS model contributes
    nothing for the first 10 km and 0.16 s/km between 10 and 70 km.

    Parameters
    ----------
    distance : float
        Hypocentral distance (km).
    segments : Segments
        The (coefficient s/km, end distance km) segments.

    Returns
    -------
    float
        The path duration (s).
    """
    duration = 0.0
    start = 0.0
    for coeff, end in segments:
        stop = distance if end is None else min(distance, end)
        if stop > start:
            duration += coeff * (stop - start)
        if end is None or distance <= end:
            break
        start = end
    return duration


def path_duration_coeff(distance: float, segments: Segments) -> float:
    """Return the average path duration coefficient over a path.

    Parameters
    ----------
    distance : float
        Hypocentral distance (km).
    segments : Segments
        The (coefficient s/km, end distance km) segments.

    Returns
    -------
    float
        The coefficient (s/km) such that coefficient * distance equals the
        path duration. At zero distance, the coefficient of the first
        segment.
    """
    if distance <= 0:
        return segments[0][0]
    return path_duration(distance, segments) / distance


def preset_values(region: Region, hypo_distance: float) -> dict[str, float]:
    """Compute the parameter values a preset assigns at a hypocentral distance.

    Parameters
    ----------
    region : Region
        A preset region (not `CUSTOM`).
    hypo_distance : float
        Hypocentral distance (km), selects the distance dependent
        geometric attenuation and path duration coefficient.

    Returns
    -------
    dict[str, float]
        Mapping of parameter name to value for every region field except
        the amplification model.

    Raises
    ------
    KeyError
        If `region` is `CUSTOM`.
    """
    preset = PRESETS[Region(region)]
    return {
        "stress_drop": preset.stress_drop,
        "path_atten_coeff": preset.path_atten_coeff,
        "path_atten_power": preset.path_atten_power,
        "shear_velocity": preset.shear_velocity,
        "density": preset.density,
        "site_atten": preset.site_atten,
        "geo_atten": geometric_spreading(hypo_distance, preset.geometric_spreading),
        "path_dur_coeff": path_duration_coeff(hypo_distance, preset.path_duration),
    }
