import pytest
from hypothesis import given
from hypothesis import strategies as st

from source_theory import regions
from source_theory.crustal_amplification import AmplificationModel
from source_theory.regions import PRESETS, Region
from source_theory.source_motion import PARAMETER_BOUNDS


def test_region_list_puts_custom_last():
    names = regions.region_list()
    assert names == ["WUS", "CEUS", "Custom"]
    assert names[Region.CUSTOM] == "Custom"


@pytest.mark.parametrize(
    "region, customizable", [(Region.WUS, False), (Region.CEUS, False), (Region.CUSTOM, True)]
)
def test_is_customizable(region: Region, customizable: bool):
    assert regions.is_customizable(region) == customizable


def test_editable_fields():
    assert regions.editable_fields(Region.WUS) == {"magnitude", "distance", "depth"}
    custom_fields = regions.editable_fields(Region.CUSTOM)
    assert "stress_drop" in custom_fields
    assert "amplification_model" in custom_fields
    assert set(PARAMETER_BOUNDS) <= custom_fields


@pytest.mark.parametrize(
    "distance, expected",
    [
        (0.5, 1.0),
        (20.0, 1 / 20),
        (40.0, 1 / 40),
        (160.0, 1 / 80),
    ],
)
def test_wus_geometric_spreading(distance: float, expected: float):
    segments = PRESETS[Region.WUS].geometric_spreading
    assert regions.geometric_spreading(distance, segments) == pytest.approx(expected)


@pytest.mark.parametrize(
    "distance, expected",
    [
        (50.0, 1 / 50),
        (100.0, 1 / 70),
        (260.0, 1 / 70 * (130 / 260) ** 0.5),
    ],
)
def test_ceus_geometric_spreading(distance: float, expected: float):
    segments = PRESETS[Region.CEUS].geometric_spreading
    assert regions.geometric_spreading(distance, segments) == pytest.approx(expected)


@given(distance=st.floats(0.0, 2000.0), region=st.sampled_from([Region.WUS, Region.CEUS]))
def test_geometric_spreading_is_continuous_and_decreasing(distance: float, region: Region):
    segments = PRESETS[region].geometric_spreading
    near = regions.geometric_spreading(distance, segments)
    far = regions.geometric_spreading(distance + 1e-6, segments)
    assert far <= near
    assert far == pytest.approx(near, rel=1e-5)


@pytest.mark.parametrize(
    "distance, expected",
    [
        (5.0, 0.0),
        (70.0, 9.6),
        (100.0, 8.7),
        (200.0, 10.6),
    ],
)
def test_ceus_path_duration(distance: float, expected: float):
    segments = PRESETS[Region.CEUS].path_duration
    assert regions.path_duration(distance, segments) == pytest.approx(expected)


def test_path_duration_coeff_is_average():
    segments = PRESETS[Region.CEUS].path_duration
    assert regions.path_duration_coeff(100.0, segments) == pytest.approx(0.087)
    assert regions.path_duration_coeff(0.0, segments) == 0.0
    assert regions.path_duration_coeff(
        50.0, PRESETS[Region.WUS].path_duration
    ) == pytest.approx(0.05)


@given(distance=st.floats(0.0, 2000.0), region=st.sampled_from([Region.WUS, Region.CEUS]))
def test_preset_values_are_in_range(distance: float, region: Region):
    """Presets never produce values that would be clamped."""
    for name, value in regions.preset_values(region, distance).items():
        lower, upper = PARAMETER_BOUNDS[name]
        assert lower <= value <= upper, name


def test_preset_values_for_custom_raises():
    with pytest.raises(KeyError):
        regions.preset_values(Region.CUSTOM, 10.0)


def test_preset_amplification_models():
    assert PRESETS[Region.WUS].amplification_model == AmplificationModel.WUS
    assert PRESETS[Region.CEUS].amplification_model == AmplificationModel.CEUS
