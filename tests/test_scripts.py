from pathlib import Path

import numpy as np
import pandas as pd
import pytest
import typer

from source_theory import rvt
from source_theory.scripts import compute_spectra


@pytest.mark.parametrize("region", ["WUS", "ceus", "Custom"])
def test_compute_spectra(tmp_path: Path, region: str):
    """Check that the spectra script writes both spectra for every region."""
    output_directory = tmp_path / "spectra"
    compute_spectra.compute_spectra(
        output_directory,
        magnitude=6.0,
        distance=15.0,
        region=region,
        freq_count=128,
        period_count=20,
    )

    fourier_spectrum_df = pd.read_csv(
        output_directory / "fourier_spectrum.csv", index_col="freq"
    )
    assert len(fourier_spectrum_df) == 128
    assert fourier_spectrum_df.index[0] == pytest.approx(0.05)
    assert fourier_spectrum_df.index[-1] == pytest.approx(50.0)
    assert np.all(fourier_spectrum_df["fourier_amp"] > 0)

    response_spectrum_df = pd.read_csv(
        output_directory / "response_spectrum.csv", index_col="period"
    )
    assert len(response_spectrum_df) == 20
    assert np.all(response_spectrum_df["sa"] > 0)


def test_compute_spectra_peak_calculators_differ(tmp_path: Path):
    sa = {}
    for method in [
        rvt.PeakCalculator.VANMARCKE_1975,
        rvt.PeakCalculator.DAVENPORT_1964,
    ]:
        compute_spectra.compute_spectra(
            tmp_path / method, peak_calculator=method, freq_count=128, period_count=10
        )
        sa[method] = pd.read_csv(tmp_path / method / "response_spectrum.csv")["sa"]
    assert not np.allclose(
        sa[rvt.PeakCalculator.VANMARCKE_1975], sa[rvt.PeakCalculator.DAVENPORT_1964]
    )


def test_compute_spectra_unknown_region(tmp_path: Path):
    with pytest.raises(typer.BadParameter):
        compute_spectra.compute_spectra(tmp_path, region="Mars")
    assert not (tmp_path / "fourier_spectrum.csv").exists()


def read_fourier_amps(output_directory: Path) -> pd.Series:
    return pd.read_csv(output_directory / "fourier_spectrum.csv", index_col="freq")[
        "fourier_amp"
    ]


def test_compute_spectra_custom_geometric_attenuation(tmp_path: Path):
    """Custom runs default to 1/R spreading and scale with an explicit factor."""
    default_directory = tmp_path / "default"
    compute_spectra.compute_spectra(
        default_directory, distance=15.0, depth=8.0, region="CUSTOM", freq_count=64
    )
    spherical_directory = tmp_path / "spherical"
    compute_spectra.compute_spectra(
        spherical_directory,
        distance=15.0,
        depth=8.0,
        region="CUSTOM",
        geo_atten=1 / np.hypot(15.0, 8.0),
        freq_count=64,
    )
    doubled_directory = tmp_path / "doubled"
    compute_spectra.compute_spectra(
        doubled_directory,
        distance=15.0,
        depth=8.0,
        region="CUSTOM",
        geo_atten=2 / np.hypot(15.0, 8.0),
        freq_count=64,
    )

    default_amps = read_fourier_amps(default_directory)
    assert np.allclose(default_amps, read_fourier_amps(spherical_directory))
    assert np.allclose(2 * default_amps, read_fourier_amps(doubled_directory))


@pytest.mark.parametrize(
    "option",
    [
        {"path_dur_coeff": 0.1},
        {"path_atten_coeff": 500.0},
        {"path_atten_power": 0.8},
        {"shear_velocity": 3.0},
        {"density": 2.5},
    ],
)
def test_compute_spectra_custom_options_change_spectra(tmp_path: Path, option: dict):
    compute_spectra.compute_spectra(
        tmp_path / "base", region="CUSTOM", freq_count=64, period_count=10
    )
    compute_spectra.compute_spectra(
        tmp_path / "changed", region="CUSTOM", freq_count=64, period_count=10, **option
    )
    base = pd.read_csv(tmp_path / "base" / "response_spectrum.csv")["sa"]
    changed = pd.read_csv(tmp_path / "changed" / "response_spectrum.csv")["sa"]
    assert not np.allclose(base, changed)
