"""Compute the Fourier and RVT response spectra of a point-source scenario."""

from pathlib import Path
from typing import Annotated, Optional

import numpy as np
import typer

from source_theory import regions, rvt
from source_theory.dimension import Dimension, Spacing
from source_theory.regions import Region
from source_theory.source_motion import (
    SourceParameters,
    SourceTheoryMotion,
    hypocentral_distance,
)

# 1/R spreading at all distances.
SPHERICAL_SPREADING = ((1.0, None),)


def compute_spectra(
    output_directory: Annotated[
        Path,
        typer.Argument(
            help="Directory to write fourier_spectrum.csv and response_spectrum.csv to.",
            file_okay=False,
        ),
    ],
    magnitude: Annotated[float, typer.Option(help="Moment magnitude.")] = 6.5,
    distance: Annotated[float, typer.Option(help="Epicentral distance (km).")] = 20.0,
    depth: Annotated[float, typer.Option(help="Hypocentral depth (km).")] = 8.0,
    region: Annotated[
        str,
        typer.Option(help="Parameter region (WUS, CEUS or CUSTOM)."),
    ] = Region.WUS.name,
    stress_drop: Annotated[
        float, typer.Option(help="Stress drop (bars), CUSTOM region only.")
    ] = 100.0,
    site_atten: Annotated[
        float, typer.Option(help="Site attenuation kappa (s), CUSTOM region only.")
    ] = 0.04,
    geo_atten: Annotated[
        Optional[float],
        typer.Option(
            help="Geometric attenuation factor, CUSTOM region only. Defaults to 1/R."
        ),
    ] = None,
    path_dur_coeff: Annotated[
        float, typer.Option(help="Path duration coefficient (s/km), CUSTOM region only.")
    ] = 0.05,
    path_atten_coeff: Annotated[
        float, typer.Option(help="Coefficient a of Q(f) = a f^b, CUSTOM region only.")
    ] = 180.0,
    path_atten_power: Annotated[
        float, typer.Option(help="Power b of Q(f) = a f^b, CUSTOM region only.")
    ] = 0.45,
    shear_velocity: Annotated[
        float, typer.Option(help="Source shear-wave velocity (km/s), CUSTOM region only.")
    ] = 3.5,
    density: Annotated[
        float, typer.Option(help="Source density (g/cm^3), CUSTOM region only.")
    ] = 2.8,
    damping: Annotated[
        float, typer.Option(help="Oscillator damping (percent of critical).")
    ] = rvt.DEFAULT_DAMPING,
    peak_calculator: Annotated[
        rvt.PeakCalculator, typer.Option(help="RVT peak factor method.")
    ] = rvt.PeakCalculator.VANMARCKE_1975,
    freq_min: Annotated[float, typer.Option(help="Minimum frequency (Hz).")] = 0.05,
    freq_max: Annotated[float, typer.Option(help="Maximum frequency (Hz).")] = 50.0,
    freq_count: Annotated[int, typer.Option(help="Number of frequencies.")] = 1024,
    period_min: Annotated[float, typer.Option(help="Minimum period (s).")] = 0.01,
    period_max: Annotated[float, typer.Option(help="Maximum period (s).")] = 10.0,
    period_count: Annotated[int, typer.Option(help="Number of periods.")] = 100,
) -> None:
    """Compute the spectra of a scenario and write them as CSV tables."""
    try:
        selected_region = Region[region.upper()]
    except KeyError:
        raise typer.BadParameter(
            f"Unknown region {region}, expected one of {[r.name for r in Region]}."
        )

    if geo_atten is None:
        geo_atten = regions.geometric_spreading(
            hypocentral_distance(distance, depth), SPHERICAL_SPREADING
        )

    motion = SourceTheoryMotion(
        region=Region.CUSTOM,
        params=SourceParameters(
            magnitude=magnitude,
            distance=distance,
            depth=depth,
            stress_drop=stress_drop,
            geo_atten=geo_atten,
            path_dur_coeff=path_dur_coeff,
            path_atten_coeff=path_atten_coeff,
            path_atten_power=path_atten_power,
            shear_velocity=shear_velocity,
            density=density,
            site_atten=site_atten,
        ),
        freq_dimension=Dimension(freq_min, freq_max, freq_count, Spacing.LOG),
        periods=np.geomspace(period_min, period_max, period_count),
        damping=damping,
        peak_calculator=peak_calculator,
    )
    motion.set_region(selected_region)
    motion.calculate()

    output_directory.mkdir(parents=True, exist_ok=True)
    motion.fourier_spectrum.to_dataframe().to_csv(
        output_directory / "fourier_spectrum.csv"
    )
    motion.response_spectrum.to_dataframe().to_csv(
        output_directory / "response_spectrum.csv"
    )

    response_spectrum = motion.response_spectrum
    peak_index = int(np.argmax(response_spectrum.sa))
    typer.echo(
        f"Duration {motion.duration:.2f} s, corner frequency {motion.corner_freq:.3f} Hz, "
        f"peak SA {response_spectrum.sa[peak_index]:.4f} g "
        f"at {response_spectrum.periods[peak_index]:.3f} s."
    )


def main():
    typer.run(compute_spectra)


if __name__ == "__main__":
    main()
