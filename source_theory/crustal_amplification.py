"""Crustal amplification of Fourier amplitudes between the source and the site.

The amplification is either tabulated (built-in generic rock curves or a
user table) or calculated from a `CrustalModel` with the quarter-wavelength
method. Tabulated curves are interpolated linearly in log-log space and held
constant beyond the first and last control points.

References
----------
.. [0] Boore, D. M., & Joyner, W. B. (1997). Site amplifications for
       generic rock sites. Bulletin of the Seismological Society of
       America, 87(2), 327-341.
.. [1] Campbell, K. W. (2003). Prediction of strong ground motion using the
       hybrid empirical method and its use in the development of
       ground-motion (attenuation) relations in eastern North America.
       Bulletin of the Seismological Society of America, 93(3), 1012-1033.
"""

import warnings
from enum import IntEnum

import numpy as np
import numpy.typing as npt

from source_theory.crustal_model import CrustalModel
from source_theory.errors import ModelMismatchWarning


class AmplificationModel(IntEnum):
    """Enumeration of crustal amplification models, in display order."""

    CUSTOM = 0
    CALCULATED = 1
    WUS = 2
    CEUS = 3


# Generic rock amplification for western US sites (Vs30 = 620 m/s) from
# Boore & Joyner (1997) [0]_, held at its high frequency trend to 100 Hz.
WUS_AMPLIFICATION = (
    np.array([0.01, 0.09, 0.16, 0.51, 0.84, 1.25, 2.26, 3.17, 6.05, 16.6, 61.2, 100.0]),
    np.array([1.00, 1.10, 1.18, 1.42, 1.58, 1.74, 2.06, 2.25, 2.58, 3.13, 4.00, 4.40]),
)

# Generic hard rock amplification for central and eastern US sites
# (Vs = 2.8 km/s), after Campbell (2003) [1]_.
CEUS_AMPLIFICATION = (
    np.array(
        [0.01, 0.10, 0.20, 0.30, 0.50, 0.90, 1.25, 1.80, 3.00, 5.30, 8.00, 14.0, 100.0]
    ),
    np.array(
        [1.00, 1.02, 1.03, 1.05, 1.07, 1.09, 1.11, 1.12, 1.13, 1.14, 1.15, 1.15, 1.15]
    ),
)

_BUILT_IN_TABLES = {
    AmplificationModel.WUS: WUS_AMPLIFICATION,
    AmplificationModel.CEUS: CEUS_AMPLIFICATION,
}


def model_list() -> list[str]:
    """Human readable names of the amplification models, in display order.

    Returns
    -------
    list[str]
        The model names, indexable by `AmplificationModel` value.
    """
    return ["Custom", "Calculated", "Default WUS", "Default CEUS"]


def interpolate_log_log(
    freqs: npt.ArrayLike,
    table_freqs: npt.NDArray[np.floating],
    table_amps: npt.NDArray[np.floating],
) -> npt.NDArray[np.float64]:
    """Interpolate an amplification table linearly in log-log space.

    Parameters
    ----------
    freqs : array-like
        Frequencies (Hz) to interpolate at.
    table_freqs : np.ndarray
        Strictly increasing, positive control point frequencies (Hz).
    table_amps : np.ndarray
        Positive amplification at each control point.

    Returns
    -------
    np.ndarray
        Interpolated amplification. Values beyond the table (including
        non-positive frequencies) hold the boundary amplification.
    """
    freqs = np.atleast_1d(np.asarray(freqs, dtype=np.float64))
    amps = np.full_like(freqs, table_amps[0])
    positive = freqs > 0
    amps[positive] = np.exp(
        np.interp(np.log(freqs[positive]), np.log(table_freqs), np.log(table_amps))
    )
    return amps


def _check_table(freqs: npt.ArrayLike, amps: npt.ArrayLike):
    freqs = np.array(freqs, dtype=np.float64)
    amps = np.array(amps, dtype=np.float64)
    if freqs.shape != amps.shape or freqs.ndim != 1 or len(freqs) == 0:
        raise ValueError(
            "Amplification table needs matching, non-empty frequency and amplitude arrays."
        )
    if np.any(freqs <= 0) or np.any(np.diff(freqs) <= 0):
        raise ValueError(
            "Amplification frequencies must be positive and strictly increasing."
        )
    if np.any(amps <= 0) or not np.all(np.isfinite(amps)):
        raise ValueError("Amplification values must be positive and finite.")
    freqs.setflags(write=False)
    amps.setflags(write=False)
    return freqs, amps


class CrustalAmplification:
    """Frequency dependent crustal amplification.

    Parameters
    ----------
    model : AmplificationModel, optional
        The amplification model. Defaults to the WUS generic rock curve.
    crustal_model : CrustalModel, optional
        The crustal model used by the `CALCULATED` model. Defaults to an
        empty model.
    """

    def __init__(
        self,
        model: AmplificationModel = AmplificationModel.WUS,
        crustal_model: CrustalModel | None = None,
    ):
        self._crustal_model = crustal_model if crustal_model is not None else CrustalModel()
        self._model = AmplificationModel.CUSTOM
        self._freqs, self._amps = _check_table(*WUS_AMPLIFICATION)
        self._revision = 0
        self._calculated_cache: tuple[int, npt.NDArray[np.float64]] | None = None
        # Set while a region preset owns the model, `set_model` then raises.
        self.locked = False
        self.set_model(model)

    @property
    def model(self) -> AmplificationModel:  # numpydoc ignore=RT01
        """AmplificationModel: The current amplification model."""
        return self._model

    @property
    def crustal_model(self) -> CrustalModel:  # numpydoc ignore=RT01
        """CrustalModel: The crustal model used by the `CALCULATED` model."""
        return self._crustal_model

    @crustal_model.setter
    def crustal_model(self, crustal_model: CrustalModel):  # numpydoc ignore=GL08
        self._crustal_model = crustal_model
        self._calculated_cache = None
        self._revision += 1

    @property
    def read_only(self) -> bool:  # numpydoc ignore=RT01
        """bool: True if the amplification table cannot be edited directly."""
        return self._model != AmplificationModel.CUSTOM

    @property
    def needs_crustal_model(self) -> bool:  # numpydoc ignore=RT01
        """bool: True if the amplification is calculated from the crustal model."""
        return self._model == AmplificationModel.CALCULATED

    @property
    def stale(self) -> bool:  # numpydoc ignore=RT01
        """bool: True if calculated amplification cannot be computed (empty crustal model)."""
        return self.needs_crustal_model and self._crustal_model.is_empty

    @property
    def revision(self) -> tuple[int, int]:  # numpydoc ignore=RT01
        """tuple[int, int]: Changes whenever the amplification curve may have changed."""
        return self._revision, self._crustal_model.revision

    @property
    def freqs(self) -> npt.NDArray[np.float64]:  # numpydoc ignore=RT01
        """np.ndarray: The frequencies (Hz) of the amplification table."""
        return self._freqs

    @property
    def amps(self) -> npt.NDArray[np.float64]:  # numpydoc ignore=RT01
        """np.ndarray: The amplification at each table frequency."""
        if not self.needs_crustal_model:
            return self._amps
        if (
            self._calculated_cache is None
            or self._calculated_cache[0] != self._crustal_model.revision
        ):
            amps = self.amplification(self._freqs)
            amps.setflags(write=False)
            self._calculated_cache = (self._crustal_model.revision, amps)
        return self._calculated_cache[1]

    def set_model(self, model: AmplificationModel | int) -> None:
        """Switch the amplification model.

        Switching to `CUSTOM` keeps the current curve as the editable table,
        switching to `CALCULATED` keeps the current table frequencies.

        Parameters
        ----------
        model : AmplificationModel or int
            The new model, or its index in `model_list()`.

        Raises
        ------
        ValueError
            If the model is locked by a region preset.
        """
        model = AmplificationModel(model)
        if self.locked:
            raise ValueError(
                "Amplification model is locked by the selected parameter region."
            )
        if model == AmplificationModel.CUSTOM:
            self._freqs, self._amps = _check_table(self._freqs, self.amps)
        elif model in _BUILT_IN_TABLES:
            self._freqs, self._amps = _check_table(*_BUILT_IN_TABLES[model])
        self._model = model
        self._calculated_cache = None
        self._revision += 1

    def set_table(self, freqs: npt.ArrayLike, amps: npt.ArrayLike) -> None:
        """Replace the user amplification table.

        Parameters
        ----------
        freqs : array-like
            Strictly increasing, positive frequencies (Hz).
        amps : array-like
            Positive amplification at each frequency.

        Raises
        ------
        ValueError
            If the model is not `CUSTOM` or the table is malformed.
        """
        if self.read_only:
            raise ValueError(
                f"Amplification table is read only for the {self._model.name} model."
            )
        self._freqs, self._amps = _check_table(freqs, amps)
        self._revision += 1

    def amplification(self, freqs: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Compute the crustal amplification at arbitrary frequencies.

        Parameters
        ----------
        freqs : array-like
            Frequencies (Hz) to evaluate.

        Returns
        -------
        np.ndarray
            Amplification at each frequency.

        Warns
        -----
        ModelMismatchWarning
            If the model is `CALCULATED` but the crustal model has no
            layers. Unit amplification is returned.
        """
        if self.needs_crustal_model:
            if self._crustal_model.is_empty:
                warnings.warn(
                    "Calculated crustal amplification requires a crustal model, "
                    "using unit amplification.",
                    ModelMismatchWarning,
                )
                return np.ones_like(np.atleast_1d(np.asarray(freqs, dtype=np.float64)))
            return self._crustal_model.quarter_wavelength_amplification(freqs)
        return interpolate_log_log(freqs, self._freqs, self._amps)
