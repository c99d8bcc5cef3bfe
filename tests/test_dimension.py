import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from source_theory.dimension import Dimension, Spacing, validate_axis
from source_theory.errors import InvalidFrequencyAxisError


@given(
    minimum=st.floats(1e-3, 10),
    ratio=st.floats(1.5, 1e4),
    size=st.integers(2, 2000),
    spacing=st.sampled_from([Spacing.LINEAR, Spacing.LOG]),
)
def test_dimension_is_strictly_increasing(
    minimum: float, ratio: float, size: int, spacing: Spacing
):
    """Dimensions are strictly increasing and span [minimum, maximum]."""
    dimension = Dimension(minimum, minimum * ratio, size, spacing)
    values = dimension.values
    assert len(values) == size
    assert np.all(np.diff(values) > 0)
    assert values[0] == pytest.approx(minimum)
    assert values[-1] == pytest.approx(minimum * ratio)


def test_log_spacing_has_constant_ratio():
    dimension = Dimension(0.1, 100, 4)
    assert dimension.spacing == Spacing.LOG
    assert dimension.values == pytest.approx([0.1, 1, 10, 100])


def test_linear_spacing_has_constant_step():
    dimension = Dimension(0, 3, 4, Spacing.LINEAR)
    assert dimension.values == pytest.approx([0, 1, 2, 3])


def test_values_are_read_only():
    dimension = Dimension(0.1, 100, 4)
    with pytest.raises(ValueError):
        dimension.values[0] = 1.0


def test_rebuild_regenerates_values():
    dimension = Dimension(0.1, 100, 4)
    previous = dimension.values
    dimension.rebuild(maximum=1000, size=5)
    assert dimension.values is not previous
    assert dimension.values == pytest.approx([0.1, 1, 10, 100, 1000])


def test_setter_regenerates_values():
    dimension = Dimension(1, 4, 4, Spacing.LINEAR)
    previous = dimension.values
    dimension.minimum = 0
    assert dimension.values is not previous
    assert dimension.values[0] == 0


def test_values_are_cached():
    dimension = Dimension(0.1, 100, 4)
    assert dimension.values is dimension.values


def test_from_values():
    dimension = Dimension.from_values([0.5, 1.0, 4.0])
    assert dimension.values == pytest.approx([0.5, 1.0, 4.0])
    assert dimension.minimum == 0.5
    assert dimension.maximum == 4.0
    assert len(dimension) == 3


@pytest.mark.parametrize(
    "values",
    [[], [1.0, 1.0, 2.0], [3.0, 2.0, 1.0], [1.0, np.nan], [[1.0, 2.0]]],
)
def test_invalid_values_raise(values: list):
    with pytest.raises(InvalidFrequencyAxisError):
        Dimension.from_values(values)


@pytest.mark.parametrize(
    "minimum, maximum, size, spacing",
    [
        (0.0, 10.0, 10, Spacing.LOG),
        (-1.0, 10.0, 10, Spacing.LOG),
        (0.1, 10.0, 0, Spacing.LOG),
        (10.0, 0.1, 10, Spacing.LINEAR),
    ],
)
def test_invalid_dimension_raises_on_generation(
    minimum: float, maximum: float, size: int, spacing: Spacing
):
    dimension = Dimension(minimum, maximum, size, spacing)
    with pytest.raises(InvalidFrequencyAxisError):
        dimension.values


def test_single_value_axis_is_valid():
    validate_axis(np.array([1.0]))


def test_user_values_survive_rebuild():
    dimension = Dimension.from_values([0.1, 0.5, 1.0, 5.0])
    assert dimension.spacing == Spacing.USER
    previous = dimension.values
    dimension.rebuild()
    assert dimension.values is not previous
    assert dimension.values == pytest.approx([0.1, 0.5, 1.0, 5.0])


def test_user_dimension_limits_cannot_be_changed():
    dimension = Dimension.from_values([0.1, 0.5, 1.0, 5.0])
    with pytest.raises(ValueError):
        dimension.rebuild(size=10)
    with pytest.raises(ValueError):
        dimension.maximum = 10.0
    assert dimension.values == pytest.approx([0.1, 0.5, 1.0, 5.0])


def test_user_dimension_switches_to_generated_spacing():
    dimension = Dimension.from_values([0.1, 0.5, 1.0, 10.0])
    dimension.spacing = Spacing.LOG
    assert dimension.values == pytest.approx(np.geomspace(0.1, 10.0, 4))

    dimension.spacing = Spacing.USER
    assert dimension.values == pytest.approx([0.1, 0.5, 1.0, 10.0])


def test_user_spacing_needs_values():
    dimension = Dimension(0.1, 10.0, 4)
    with pytest.raises(ValueError):
        dimension.spacing = Spacing.USER
    with pytest.raises(InvalidFrequencyAxisError):
        Dimension(0.1, 10.0, 4, Spacing.USER).values
