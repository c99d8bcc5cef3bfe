"""Monotonic axis generators for frequency and period dimensions."""

from enum import StrEnum, auto

import numpy as np
import numpy.typing as npt

from source_theory.errors import InvalidFrequencyAxisError


class Spacing(StrEnum):
    """Enumeration of axis spacings."""

    LINEAR = auto()
    LOG = auto()
    USER = auto()


class Dimension:
    """A monotonically increasing axis, e.g. the frequencies of a spectrum.

    The axis is described by a minimum, maximum, number of points and a
    spacing. The values are generated lazily and cached until one of the
    describing properties changes. A `Spacing.USER` axis holds explicit
    values, created with `from_values`, which are kept when it is rebuilt.

    Parameters
    ----------
    minimum : float
        First value of the axis.
    maximum : float
        Last value of the axis.
    size : int
        Number of values.
    spacing : Spacing, optional
        Spacing of the values. Defaults to log spacing.

    Examples
    --------
    >>> freqs = Dimension(0.05, 50, 1024)
    >>> len(freqs)
    1024
    """

    def __init__(
        self,
        minimum: float,
        maximum: float,
        size: int,
        spacing: Spacing = Spacing.LOG,
    ):
        self._minimum = float(minimum)
        self._maximum = float(maximum)
        self._size = int(size)
        self._spacing = Spacing(spacing)
        self._user_values: npt.NDArray[np.float64] | None = None
        self._values: npt.NDArray[np.float64] | None = None

    @classmethod
    def from_values(cls, values: npt.ArrayLike) -> "Dimension":
        """Create a user defined dimension from explicit values.

        Parameters
        ----------
        values : array-like
            Strictly increasing axis values.

        Returns
        -------
        Dimension
            A `Spacing.USER` dimension whose values are exactly `values`.

        Raises
        ------
        InvalidFrequencyAxisError
            If the values are empty or not strictly increasing.
        """
        values = np.array(values, dtype=np.float64)
        validate_axis(values)
        values.setflags(write=False)
        dimension = cls(values[0], values[-1], len(values), Spacing.USER)
        dimension._user_values = values
        return dimension

    @property
    def minimum(self) -> float:  # numpydoc ignore=RT01
        """float: The first value of the axis."""
        return self._minimum

    @minimum.setter
    def minimum(self, minimum: float):  # numpydoc ignore=GL08
        self.rebuild(minimum=minimum)

    @property
    def maximum(self) -> float:  # numpydoc ignore=RT01
        """float: The last value of the axis."""
        return self._maximum

    @maximum.setter
    def maximum(self, maximum: float):  # numpydoc ignore=GL08
        self.rebuild(maximum=maximum)

    @property
    def size(self) -> int:  # numpydoc ignore=RT01
        """int: The number of values in the axis."""
        return self._size

    @size.setter
    def size(self, size: int):  # numpydoc ignore=GL08
        self.rebuild(size=size)

    @property
    def spacing(self) -> Spacing:  # numpydoc ignore=RT01
        """Spacing: The spacing of the axis values."""
        return self._spacing

    @spacing.setter
    def spacing(self, spacing: Spacing):  # numpydoc ignore=GL08
        self.rebuild(spacing=spacing)

    @property
    def values(self) -> npt.NDArray[np.float64]:  # numpydoc ignore=RT01
        """np.ndarray: The (read-only) axis values."""
        if self._values is None:
            self._values = self._generate()
            self._values.setflags(write=False)
        return self._values

    def rebuild(
        self,
        minimum: float | None = None,
        maximum: float | None = None,
        size: int | None = None,
        spacing: Spacing | None = None,
    ) -> None:
        """Update any of the axis parameters and regenerate the values.

        A user defined axis is regenerated from its explicit values. To
        change its limits or size, also pass a generated `spacing`.

        Parameters
        ----------
        minimum : float, optional
            New first value.
        maximum : float, optional
            New last value.
        size : int, optional
            New number of values.
        spacing : Spacing, optional
            New spacing.

        Raises
        ------
        ValueError
            If the limits or size of a user defined axis are changed, or the
            spacing is set to `Spacing.USER` on an axis without explicit
            values.
        """
        spacing = self._spacing if spacing is None else Spacing(spacing)
        if spacing == Spacing.USER:
            if self._user_values is None:
                raise ValueError(
                    "User spaced dimensions must be created with Dimension.from_values."
                )
            if minimum is not None or maximum is not None or size is not None:
                raise ValueError(
                    "The limits and size of a user spaced dimension are set by its values."
                )
            self._minimum = float(self._user_values[0])
            self._maximum = float(self._user_values[-1])
            self._size = len(self._user_values)
        else:
            if minimum is not None:
                self._minimum = float(minimum)
            if maximum is not None:
                self._maximum = float(maximum)
            if size is not None:
                self._size = int(size)
        self._spacing = spacing
        self._values = None

    def _generate(self) -> npt.NDArray[np.float64]:
        if self._spacing == Spacing.USER:
            if self._user_values is None:
                raise InvalidFrequencyAxisError("User spaced dimension has no values.")
            return self._user_values.copy()
        if self._size < 1:
            raise InvalidFrequencyAxisError(
                f"Dimension must have at least one value, got size={self._size}."
            )
        if self._spacing == Spacing.LOG:
            if self._minimum <= 0 or self._maximum <= 0:
                raise InvalidFrequencyAxisError(
                    "Log spaced dimensions require positive limits, got "
                    f"[{self._minimum}, {self._maximum}]."
                )
            values = np.geomspace(self._minimum, self._maximum, self._size)
        else:
            values = np.linspace(self._minimum, self._maximum, self._size)
        validate_axis(values)
        return values

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        return (
            f"Dimension(minimum={self._minimum}, maximum={self._maximum}, "
            f"size={self._size}, spacing={self._spacing})"
        )


def validate_axis(values: npt.NDArray[np.floating]) -> None:
    """Check that an axis is non-empty, finite and strictly increasing.

    Parameters
    ----------
    values : np.ndarray
        The axis values to check.

    Raises
    ------
    InvalidFrequencyAxisError
        If any of the checks fail.
    """
    if values.ndim != 1 or len(values) == 0:
        raise InvalidFrequencyAxisError("Axis must be a non-empty 1D array.")
    if not np.all(np.isfinite(values)):
        raise InvalidFrequencyAxisError("Axis values must be finite.")
    if len(values) > 1 and not np.all(np.diff(values) > 0):
        raise InvalidFrequencyAxisError("Axis values must be strictly increasing.")
