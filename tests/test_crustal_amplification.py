import warnings

import numpy as np
import pytest

from source_theory.crustal_amplification import (
    CEUS_AMPLIFICATION,
    WUS_AMPLIFICATION,
    AmplificationModel,
    CrustalAmplification,
    interpolate_log_log,
    model_list,
)
from source_theory.crustal_model import CrustalModel
from source_theory.errors import ModelMismatchWarning


def test_log_log_interpolation_midpoint():
    """Halfway between 1 and 100 Hz in log space is 10 Hz, halfway between 1 and 4 is 2."""
    amps = interpolate_log_log([10.0], np.array([1.0, 100.0]), np.array([1.0, 4.0]))
    assert amps[0] == pytest.approx(2.0)


def test_log_log_interpolation_holds_boundary_values():
    amps = interpolate_log_log(
        [0.0, 0.1, 1000.0], np.array([1.0, 100.0]), np.array([1.0, 4.0])
    )
    assert amps == pytest.approx([1.0, 1.0, 4.0])


def test_model_list_is_indexable_by_model():
    names = model_list()
    assert len(names) == len(AmplificationModel)
    assert names[AmplificationModel.CUSTOM] == "Custom"
    assert names[AmplificationModel.CEUS] == "Default CEUS"


@pytest.mark.parametrize(
    "model, table",
    [
        (AmplificationModel.WUS, WUS_AMPLIFICATION),
        (AmplificationModel.CEUS, CEUS_AMPLIFICATION),
    ],
)
def test_built_in_models_reproduce_their_table(
    model: AmplificationModel, table: tuple[np.ndarray, np.ndarray]
):
    crustal_amp = CrustalAmplification(model)
    assert crustal_amp.read_only
    assert crustal_amp.amplification(table[0]) == pytest.approx(table[1])


def test_built_in_table_is_read_only():
    crustal_amp = CrustalAmplification(AmplificationModel.WUS)
    with pytest.raises(ValueError):
        crustal_amp.set_table([1.0, 10.0], [1.0, 2.0])


def test_custom_model_keeps_current_curve():
    crustal_amp = CrustalAmplification(AmplificationModel.CEUS)
    crustal_amp.set_model(AmplificationModel.CUSTOM)
    assert not crustal_amp.read_only
    assert crustal_amp.amps == pytest.approx(CEUS_AMPLIFICATION[1])

    crustal_amp.set_table([1.0, 100.0], [1.0, 4.0])
    assert crustal_amp.amplification([10.0])[0] == pytest.approx(2.0)


@pytest.mark.parametrize(
    "freqs, amps",
    [
        ([1.0, 10.0], [1.0]),
        ([], []),
        ([0.0, 10.0], [1.0, 2.0]),
        ([10.0, 1.0], [1.0, 2.0]),
        ([1.0, 10.0], [1.0, -2.0]),
    ],
)
def test_invalid_table_raises(freqs: list[float], amps: list[float]):
    crustal_amp = CrustalAmplification(AmplificationModel.CUSTOM)
    with pytest.raises(ValueError):
        crustal_amp.set_table(freqs, amps)


def test_calculated_model_without_crustal_model_warns():
    crustal_amp = CrustalAmplification(AmplificationModel.CALCULATED)
    assert crustal_amp.needs_crustal_model
    assert crustal_amp.stale
    with pytest.warns(ModelMismatchWarning):
        amps = crustal_amp.amplification([0.1, 1.0, 10.0])
    assert amps == pytest.approx([1.0, 1.0, 1.0])


def test_calculated_model_uses_crustal_model():
    crustal_model = CrustalModel([(1.0, 1.0, 2.0), (np.inf, 3.5, 2.8)])
    crustal_amp = CrustalAmplification(AmplificationModel.CALCULATED, crustal_model)
    assert not crustal_amp.stale
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        amps = crustal_amp.amplification([0.5, 100.0])
    assert amps == pytest.approx(crustal_model.quarter_wavelength_amplification([0.5, 100.0]))
    assert crustal_amp.amps is crustal_amp.amps


def test_calculated_amps_follow_crustal_model_edits():
    crustal_model = CrustalModel([(1.0, 1.0, 2.0), (np.inf, 3.5, 2.8)])
    crustal_amp = CrustalAmplification(AmplificationModel.CALCULATED, crustal_model)
    revision = crustal_amp.revision
    amps = crustal_amp.amps

    crustal_model.set_layer(0, shear_velocity=2.0)
    assert crustal_amp.revision != revision
    assert not np.allclose(crustal_amp.amps, amps)


def test_revision_changes_on_edits():
    crustal_amp = CrustalAmplification(AmplificationModel.CUSTOM)
    revisions = {crustal_amp.revision}
    crustal_amp.set_table([1.0, 10.0], [1.0, 2.0])
    revisions.add(crustal_amp.revision)
    crustal_amp.set_model(AmplificationModel.WUS)
    revisions.add(crustal_amp.revision)
    crustal_amp.crustal_model = CrustalModel([(np.inf, 3.5, 2.8)])
    revisions.add(crustal_amp.revision)
    assert len(revisions) == 4
