# spectral_density.py

import time

import numpy as np

from welchsde import Builder


def main():
    """Spectral density of a 1550 Hz tone buried in white noise."""
    n = int(1e5)
    fs = 10e3
    amp = 2.0 * np.sqrt(2.0)
    freq = 1550.0
    noise_power = 0.001 * fs / 2.0
    t = np.arange(n) / fs
    rng = np.random.default_rng()
    signal = amp * np.sin(2 * np.pi * freq * t) + rng.standard_normal(n) * np.sqrt(noise_power)

    welch = Builder.for_spectral_density(signal, fs).n_segment(8).build()
    print(welch)

    t0 = time.perf_counter()
    sd = welch.spectral_density_periodogram()
    print(f"Spectral density estimated in {1e3 * (time.perf_counter() - t0):.1f}ms")

    h = len(sd) // 2
    noise_floor = 2.0 * np.sum(sd.values[h:]) / h
    print(f"Noise floor: {noise_floor:.3e}")
    print(f"Peak at    : {sd.f[np.argmax(sd.values)]:.1f} Hz")

    print(sd.to_dataframe().head())


if __name__ == "__main__":
    main()
