# white_noise.py

import time

import numpy as np

from welchsde import Builder


def main():
    """Power spectrum of unit white noise: 2 * sum(ps) recovers the variance."""
    n = int(1e5)
    signal = np.random.default_rng().standard_normal(n)

    welch = Builder.for_power_spectrum(signal).build()
    print(welch)

    t0 = time.perf_counter()
    ps = welch.power_periodogram()
    print(f"Power spectrum estimated in {1e3 * (time.perf_counter() - t0):.1f}ms")

    print(f"mean    : {ps[0]:.3e}")
    print(f"variance: {2.0 * np.sum(ps.values):.3e}")


if __name__ == "__main__":
    main()
