"""Layered crustal velocity models and quarter-wavelength amplification.

A crustal model is a stack of horizontal layers, ordered from the surface
down. Every layer but the last has a finite thickness; the last layer is an
infinite half-space representing the source region.

References
----------
.. [0] Boore, D. M., & Joyner, W. B. (1997). Site amplifications for
       generic rock sites. Bulletin of the Seismological Society of
       America, 87(2), 327-341.
"""

from collections.abc import Iterable
from typing import NamedTuple

import numpy as np
import numpy.typing as npt
import pandas as pd

HALF_SPACE_THICKNESS = np.inf


class Layer(NamedTuple):
    """A single layer of a crustal model."""

    thickness: float
    """Layer thickness (km). `inf` for the half-space."""
    shear_velocity: float
    """Shear-wave velocity (km/s)."""
    density: float
    """Mass density (g/cm^3)."""


def _check_layer(layer: Layer, half_space: bool) -> Layer:
    if layer.shear_velocity <= 0:
        raise ValueError(
            f"Layer shear velocity must be positive, got {layer.shear_velocity}."
        )
    if layer.density <= 0:
        raise ValueError(f"Layer density must be positive, got {layer.density}.")
    if half_space:
        return layer._replace(thickness=HALF_SPACE_THICKNESS)
    if not np.isfinite(layer.thickness) or layer.thickness <= 0:
        raise ValueError(
            "Only the last layer may be a half-space, other layers need a "
            f"positive finite thickness (got {layer.thickness})."
        )
    return layer


class CrustalModel:
    """A 1D layered crustal model.

    Parameters
    ----------
    layers : iterable of Layer or tuple
        Layers ordered from the surface down. The thickness of the last
        layer is ignored, it is always treated as a half-space.

    Raises
    ------
    ValueError
        If a layer has a non-positive velocity, density or (non half-space)
        thickness.

    Examples
    --------
    >>> model = CrustalModel([(1.0, 1.5, 2.2), (np.inf, 3.5, 2.8)])
    >>> model.half_space.shear_velocity
    3.5
    """

    def __init__(self, layers: Iterable[Layer | tuple[float, float, float]] = ()):
        layers = [Layer(*layer) for layer in layers]
        self._layers = [
            _check_layer(layer, i == len(layers) - 1) for i, layer in enumerate(layers)
        ]
        self._revision = 0

    @classmethod
    def from_dataframe(cls, velocity_model_df: pd.DataFrame) -> "CrustalModel":
        """Create a crustal model from a table of layers.

        Parameters
        ----------
        velocity_model_df : pd.DataFrame
            columns:
              - "thickness" (km) or "depth" (km, depth to the top of the layer),
              - "vs": The shear wave velocity (km/s),
              - "rho": The density (g/cm^3).

        Returns
        -------
        CrustalModel
            The crustal model described by the table.
        """
        if "thickness" in velocity_model_df:
            thickness = velocity_model_df["thickness"].to_numpy(dtype=float)
        else:
            depth = velocity_model_df["depth"].to_numpy(dtype=float)
            thickness = np.append(np.diff(depth), HALF_SPACE_THICKNESS)
        return cls(
            zip(
                thickness,
                velocity_model_df["vs"].to_numpy(dtype=float),
                velocity_model_df["rho"].to_numpy(dtype=float),
            )
        )

    def to_dataframe(self) -> pd.DataFrame:
        """Tabulate the layers of the model.

        Returns
        -------
        pd.DataFrame
            A dataframe with columns "depth", "thickness", "vs" and "rho",
            one row per layer.
        """
        return pd.DataFrame(
            {
                "depth": self.depth_to_top,
                "thickness": [layer.thickness for layer in self._layers],
                "vs": [layer.shear_velocity for layer in self._layers],
                "rho": [layer.density for layer in self._layers],
            }
        )

    @property
    def layers(self) -> tuple[Layer, ...]:  # numpydoc ignore=RT01
        """tuple[Layer, ...]: The layers, ordered from the surface down."""
        return tuple(self._layers)

    @property
    def revision(self) -> int:  # numpydoc ignore=RT01
        """int: Counter incremented on every structural change of the model."""
        return self._revision

    @property
    def is_empty(self) -> bool:  # numpydoc ignore=RT01
        """bool: True if the model has no layers."""
        return not self._layers

    @property
    def half_space(self) -> Layer:  # numpydoc ignore=RT01
        """Layer: The bedrock half-space at the bottom of the model."""
        if self.is_empty:
            raise ValueError("Crustal model has no layers.")
        return self._layers[-1]

    @property
    def depth_to_top(self) -> npt.NDArray[np.float64]:  # numpydoc ignore=RT01
        """np.ndarray: The depth (km) to the top of each layer."""
        thickness = np.array([layer.thickness for layer in self._layers[:-1]])
        return np.concatenate(([0.0], np.cumsum(thickness)))[: len(self._layers)]

    def __len__(self) -> int:
        return len(self._layers)

    def _rebuild(self, layers: list[Layer]) -> None:
        self._layers = [
            _check_layer(Layer(*layer), i == len(layers) - 1)
            for i, layer in enumerate(layers)
        ]
        self._revision += 1

    def add_layer(
        self, thickness: float, shear_velocity: float, density: float
    ) -> None:
        """Add a layer directly above the half-space.

        If the model is empty the new layer becomes the half-space.

        Parameters
        ----------
        thickness : float
            Thickness of the new layer (km).
        shear_velocity : float
            Shear-wave velocity of the new layer (km/s).
        density : float
            Density of the new layer (g/cm^3).
        """
        self.insert_layer(
            max(len(self._layers) - 1, 0), thickness, shear_velocity, density
        )

    def insert_layer(
        self, index: int, thickness: float, shear_velocity: float, density: float
    ) -> None:
        """Insert a layer above the layer at `index`.

        Parameters
        ----------
        index : int
            Position of the new layer.
        thickness : float
            Thickness of the new layer (km).
        shear_velocity : float
            Shear-wave velocity of the new layer (km/s).
        density : float
            Density of the new layer (g/cm^3).
        """
        layers = list(self._layers)
        layers.insert(index, Layer(thickness, shear_velocity, density))
        self._rebuild(layers)

    def set_layer(
        self,
        index: int,
        thickness: float | None = None,
        shear_velocity: float | None = None,
        density: float | None = None,
    ) -> None:
        """Modify the properties of the layer at `index`.

        Parameters
        ----------
        index : int
            Layer to modify.
        thickness : float, optional
            New thickness (km).
        shear_velocity : float, optional
            New shear-wave velocity (km/s).
        density : float, optional
            New density (g/cm^3).
        """
        layers = list(self._layers)
        changes = {
            name: value
            for name, value in [
                ("thickness", thickness),
                ("shear_velocity", shear_velocity),
                ("density", density),
            ]
            if value is not None
        }
        layers[index] = layers[index]._replace(**changes)
        self._rebuild(layers)

    def remove_layer(self, index: int) -> None:
        """Remove the layer at `index`.

        Parameters
        ----------
        index : int
            Layer to remove.
        """
        layers = list(self._layers)
        del layers[index]
        self._rebuild(layers)

    def quarter_wavelength_amplification(
        self, freqs: npt.ArrayLike
    ) -> npt.NDArray[np.float64]:
        """Compute crustal amplification with the quarter-wavelength method [0]_.

        For each frequency the depth z at which the vertical shear-wave travel
        time equals a quarter period is found. The amplification is the
        square root of the impedance ratio between the half-space and the
        travel-time averaged velocity and depth-averaged density above z.

        Parameters
        ----------
        freqs : array-like
            Frequencies (Hz) to compute the amplification at.

        Returns
        -------
        np.ndarray
            The amplification at each frequency. Non-positive frequencies
            are given unit amplification.

        Raises
        ------
        ValueError
            If the model has no layers.
        """
        if self.is_empty:
            raise ValueError("Crustal model has no layers.")

        freqs = np.atleast_1d(np.asarray(freqs, dtype=np.float64))
        thickness = np.array([layer.thickness for layer in self._layers])
        velocity = np.array([layer.shear_velocity for layer in self._layers])
        density = np.array([layer.density for layer in self._layers])

        top_depth = self.depth_to_top
        top_travel_time = np.concatenate(
            ([0.0], np.cumsum(thickness[:-1] / velocity[:-1]))
        )
        top_mass = np.concatenate(([0.0], np.cumsum(thickness[:-1] * density[:-1])))

        amps = np.ones_like(freqs)
        positive = freqs > 0
        travel_time = 1 / (4 * freqs[positive])
        index = np.searchsorted(top_travel_time, travel_time, side="right") - 1
        depth = top_depth[index] + (travel_time - top_travel_time[index]) * velocity[index]
        mass = top_mass[index] + (depth - top_depth[index]) * density[index]

        avg_velocity = depth / travel_time
        avg_density = mass / depth
        amps[positive] = np.sqrt(
            (self.half_space.density * self.half_space.shear_velocity)
            / (avg_density * avg_velocity)
        )
        return amps
