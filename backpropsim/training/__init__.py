"""Engine, log, autoplay and presets built on :mod:`backpropsim.core`."""
