"""Source Theory

The source theory package computes ground motion spectra for a point-source
earthquake scenario using the stochastic method and random vibration theory.

Fourier Amplitude Spectrum
--------------------------

The `source_theory.source_motion` module models the Fourier amplitude
spectrum of ground acceleration at a site as the product of:

- A Brune single-corner source spectrum,
- Geometric spreading and anelastic path attenuation Q(f),
- Site attenuation (kappa),
- Crustal amplification (`source_theory.crustal_amplification`), either
  tabulated or calculated from a layered crustal model
  (`source_theory.crustal_model`) with the quarter-wavelength method.

Regional coefficients (western and central/eastern North America) are
provided by `source_theory.regions`.

Response Spectrum
-----------------

The `source_theory.rvt` module converts a Fourier amplitude spectrum and a
duration into a pseudo-spectral acceleration response spectrum with random
vibration theory, using one of several peak factor methods.

Axes and Results
----------------

Frequency axes are described by `source_theory.dimension.Dimension`, and
results are returned as the read-only containers in `source_theory.spectra`."""
