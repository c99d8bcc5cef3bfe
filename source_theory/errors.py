"""Warnings and errors raised while computing source theory motions.

Recoverable conditions are reported with `warnings.warn` and resolved to a
safe numeric default. Malformed inputs raise `ValueError`, with
`InvalidFrequencyAxisError` for an unusable frequency axis.
"""


class ParameterRangeWarning(UserWarning):
    """A source parameter was outside its physical range and has been clamped."""


class NumericDegeneracyWarning(UserWarning):
    """A non-positive value fed a log or square root and was floored."""


class ModelMismatchWarning(UserWarning):
    """Calculated crustal amplification was requested without a crustal model."""


class InvalidFrequencyAxisError(ValueError):
    """The frequency axis is empty, non-finite or not strictly increasing."""
