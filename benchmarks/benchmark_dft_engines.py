#!/usr/bin/env python3
"""
benchmark_dft_engines.py

Benchmarks the Welch periodogram with the SciPy and NumPy DFT engines for
several signal lengths and both floating point precisions.

Output:
    - Prints timing statistics for each engine
    - Prints a summary table
"""

import numpy as np
import time
from welchsde import Builder, scipy_dft, numpy_dft


def report_stats(name, times):
    """Print timing statistics for a set of runs."""
    if len(times) == 0:
        print(f"{name}: No runs completed")
        return
    print(
        f"{name}: mean={np.mean(times):.4f}s, median={np.median(times):.4f}s, "
        f"std={np.std(times):.4f}s, min={np.min(times):.4f}s, max={np.max(times):.4f}s"
    )


def benchmark_engine(data, fs, dft, n_runs=5):
    """
    Time repeated spectral density periodograms on one estimator.

    Parameters
    ----------
    data : np.ndarray
        Input time-series data
    fs : float
        Sampling frequency
    dft : callable
        DFT engine injected into the estimator
    n_runs : int
        Number of benchmark runs

    Returns
    -------
    np.ndarray
        Array of timing results in seconds
    """
    welch = Builder(data).sampling_frequency(fs).dft(dft).build()
    welch.spectral_density_periodogram()  # JIT warm-up

    times = []
    for _ in range(n_runs):
        t0 = time.perf_counter()
        welch.spectral_density_periodogram()
        times.append(time.perf_counter() - t0)
    return np.array(times)


def main():
    """Main benchmark function."""
    fs = 2.0
    n_runs = 5
    sizes = [100_000, 1_000_000, 10_000_000]
    engines = {"scipy": scipy_dft, "numpy": numpy_dft}
    rng = np.random.default_rng(0)

    print("=" * 80)
    print("DFT Engine Benchmark")
    print("=" * 80)
    print(f"Number of runs per engine: {n_runs}")

    results_summary = []
    for N in sizes:
        for dtype in (np.float64, np.float32):
            print(f"\n--- N = {N:,} samples, {np.dtype(dtype).name} ---")
            y = rng.standard_normal(N).astype(dtype)
            row = {"N": N, "dtype": np.dtype(dtype).name}
            for name, dft in engines.items():
                times = benchmark_engine(y, fs, dft, n_runs)
                report_stats(f"  {name}", times)
                row[name] = np.mean(times)
            results_summary.append(row)

    print("\n" + "=" * 80)
    print("Summary Table (mean time in seconds)")
    print("=" * 80)
    print(f"{'N':>12} {'dtype':>10} " + " ".join(f"{name:>12}" for name in engines))
    print("-" * 80)
    for row in results_summary:
        print(
            f"{row['N']:>12,} {row['dtype']:>10} "
            + " ".join(f"{row[name]:>12.4f}" for name in engines)
        )

    print("\nDone.")


if __name__ == "__main__":
    main()
