# profile_welchsde.py

import numpy as np
import cProfile
import pstats

from welchsde import spectral_density


def main():
    """Sets up and runs the profiling task."""
    print("Setting up profiling workload...")

    N = int(1e7)
    fs = 2.0
    data = np.random.randn(N)

    print(f"Profiling spectral_density on a time series of length {N}...")

    command = "spectral_density(data, fs, win='hann', n_segment=4, olap=0.5)"
    profiler_context = {"spectral_density": spectral_density, "data": data, "fs": fs}

    cProfile.runctx(
        command, globals=profiler_context, locals={}, filename="welchsde_profile.prof"
    )

    print("Profiling complete. Stats saved to 'welchsde_profile.prof'")

    print("\n--- Top 10 Functions by Cumulative Time ---")
    stats = pstats.Stats("welchsde_profile.prof")
    stats.sort_stats("cumulative").print_stats(10)


if __name__ == "__main__":
    main()
