# BSD 3-Clause License

# Copyright (c) 2025, Miguel Dovale

# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:

# 1. Redistributions of source code must retain the above copyright notice, this
#    list of conditions and the following disclaimer.

# 2. Redistributions in binary form must reproduce the above copyright notice,
#    this list of conditions and the following disclaimer in the documentation
#    and/or other materials provided with the distribution.

# 3. Neither the name of the copyright holder nor the names of its
#    contributors may be used to endorse or promote products derived from
#    this software without specific prior written permission.

# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE
# DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE
# FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL
# DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR
# SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY,
# OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
# OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

# This software may be subject to U.S. export control laws. By accepting this
# software, the user agrees to comply with all applicable U.S. export laws and
# regulations. User has the responsibility to obtain export licenses, or other
# export authority as may be required before exporting such information to
# foreign countries or providing access to foreign persons.
#
import time
import logging
from typing import List, Any, Callable, Optional, Tuple, Union

import numpy as np
import pandas as pd

from ._config import (
    DEFAULT_N_SEGMENT,
    DEFAULT_OLAP,
    DEFAULT_DFT_LOG2_MAX_SIZE,
    DEFAULT_FS,
)
from .core import scipy_dft, segment_dfts, fold_power
from .dsp import integral_rms
from .schedulers import SegmentPlan, segment_size, welch_plan
from .utils import as_signal
from .windows import Window, resolve_window

logger = logging.getLogger(__name__)

_KINDS = ("density", "power")


def _check_fs(fs) -> float:
    try:
        fs = float(fs)
    except (TypeError, ValueError) as exc:
        raise TypeError(f"`fs` must be a positive finite float, got {fs!r}.") from exc
    if not np.isfinite(fs) or fs <= 0:
        raise ValueError(f"`fs` must be a positive finite float, got {fs!r}.")
    return fs


class Periodogram:
    """
    An immutable one-sided periodogram.

    Holds the sampling frequency and the `m/2` estimated values; behaves as a
    read-only sequence (len, indexing, iteration, `np.asarray`).

    Attributes
    ----------
    fs : float
        Sampling frequency in Hz.
    values : np.ndarray
        Periodogram values (read-only).
    kind : str
        'density' (signal units^2/Hz) or 'power' (signal units^2).
    f : np.ndarray
        Frequency axis in Hz, see `frequency()`.
    psd, asd : np.ndarray or None
        Power and amplitude spectral density (density kind only).
    ps : np.ndarray or None
        Power spectrum (power kind only).
    """

    def __init__(self, fs: float, values, kind: str = "density"):
        if kind not in _KINDS:
            raise ValueError(f"`kind` must be one of {_KINDS}, got {kind!r}.")
        v = np.array(values, copy=True)
        if v.ndim != 1:
            raise ValueError(f"Periodogram values must be 1D, got shape {v.shape}.")
        v.flags.writeable = False
        self.fs = float(fs)
        self.kind = kind
        self._values = v
        self._cache = {}

    @property
    def values(self) -> np.ndarray:
        return self._values

    def frequency(self) -> np.ndarray:
        """
        Returns the frequency vector in Hz.

        Bin i maps to i * fs * 0.5 / (N - 1), so the axis spans [0, fs/2].
        """
        n = self._values.shape[0]
        if n < 2:
            raise ValueError(f"A frequency axis needs at least 2 bins, got {n}.")
        dtype = self._values.dtype if np.issubdtype(self._values.dtype, np.floating) else np.dtype(np.float64)
        f = np.arange(n, dtype=dtype) * dtype.type(self.fs * 0.5) / dtype.type(n - 1)
        f.flags.writeable = False
        return f

    def __getattr__(self, name: str) -> Any:
        """Lazy computation and caching of derived quantities."""
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._cache:
            return self._cache[name]

        if name == "f":
            val = self.frequency()
        elif name == "psd":
            val = self._values if self.kind == "density" else None
        elif name == "asd":
            val = np.sqrt(self._values) if self.kind == "density" else None
        elif name == "ps":
            val = self._values if self.kind == "power" else None
        else:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{name}'"
            )

        self._cache[name] = val
        return val

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | {"f", "psd", "asd", "ps"})

    def __len__(self):
        return self._values.shape[0]

    def __getitem__(self, index):
        return self._values[index]

    def __iter__(self):
        return iter(self._values)

    def __array__(self, dtype=None, copy=None):
        if copy or (dtype is not None and np.dtype(dtype) != self._values.dtype):
            return np.array(self._values, dtype=dtype, copy=True)
        return self._values

    def __repr__(self):
        return f"Periodogram(kind={self.kind!r}, fs={self.fs:g}, n={len(self)})"

    def get_measurement(self, freq: Union[float, np.ndarray], which: str = "values") -> Union[float, np.ndarray]:
        """
        Evaluates a quantity at given frequencies via linear interpolation.

        Parameters
        ----------
        freq : float or np.ndarray
            The frequency or frequencies in Hz.
        which : str, optional
            'values' (default), 'psd', 'asd' or 'ps'.
        """
        target = self._values if which == "values" else getattr(self, which)
        if target is None:
            raise ValueError(f"'{which}' is not available for a {self.kind} periodogram.")
        return np.interp(freq, self.f, target)

    def get_rms(self, pass_band: Optional[Tuple[float, float]] = None) -> float:
        """
        Computes the RMS of the signal by integrating the ASD.

        The values hold the positive-frequency half of the power only, so the
        integrand is 2 * psd.

        Parameters
        ----------
        pass_band : tuple of (float, float), optional
            The frequency band `(f_min, f_max)` over which to compute the RMS.
            If None, the entire frequency range is used.
        """
        if self.kind != "density":
            raise NotImplementedError(
                "RMS calculation is only available for spectral densities."
            )
        return integral_rms(self.f, np.sqrt(2.0 * self._values), pass_band)

    def to_dataframe(self) -> pd.DataFrame:
        """Exports the periodogram to a DataFrame indexed by frequency."""
        if self.kind == "density":
            df_dict = {"f": self.f, "psd": self.psd, "asd": self.asd}
        else:
            df_dict = {"f": self.f, "ps": self.ps}
        return pd.DataFrame(df_dict).set_index("f")


class Welch:
    """
    Welch spectral density and power spectrum estimator.

    Immutable once built: holds the segmentation plan, the window, the
    sampling frequency and a read-only view of the signal (never copied for
    float32/float64 input). Periodograms can be requested any number of times
    and in either mode.

    Parameters
    ----------
    signal : array-like
        1D real time series.
    plan : SegmentPlan
        Segmentation, usually from `welch_plan`.
    window : Window
        Window of length `plan.segment_size`.
    fs : float, optional
        Sampling frequency in Hz (> 0). Defaults to 1.
    dft : callable, optional
        Forward DFT over the rows of a complex (k, m) buffer. Defaults to
        `scipy_dft`.
    verbose : bool, optional
        If True, logs a summary and timings.
    """

    def __init__(
        self,
        signal,
        plan: SegmentPlan,
        window: Window,
        fs: Optional[float] = None,
        dft: Optional[Callable] = None,
        verbose: bool = False,
    ):
        x = as_signal(signal)
        if not isinstance(plan, SegmentPlan):
            raise TypeError(f"`plan` must be a SegmentPlan, got {type(plan).__name__}.")
        if not isinstance(window, Window):
            raise TypeError(f"`window` must be a Window, got {type(window).__name__}.")
        if dft is not None and not callable(dft):
            raise TypeError("`dft` must be a callable.")

        fs = DEFAULT_FS if fs is None else _check_fs(fs)

        if window.length != plan.segment_size:
            raise ValueError(
                f"Window length {window.length} != segment size {plan.segment_size}."
            )
        if window.sqr_sum() == 0 or window.sum_sqr() == 0:
            raise ValueError("Window weights are all zero; the periodogram scaling is undefined.")
        if plan.dft_size < plan.segment_size or plan.n_segment < 1 or plan.stride < 1:
            raise ValueError(f"Inconsistent segmentation plan: {plan}.")
        if plan.required_length > x.shape[0]:
            raise ValueError(
                f"Signal of length {x.shape[0]} is shorter than the {plan.required_length} "
                f"samples required by the segmentation plan."
            )

        if not np.all(np.isfinite(x)):
            logger.warning("Input signal contains NaN/Inf; results may be undefined.")

        self._signal = x
        self._plan = plan
        self._window = window
        self._w = np.ascontiguousarray(window.weights, dtype=x.dtype)
        self._starts = plan.starts()
        self._fs = fs
        self._dft = dft if dft is not None else scipy_dft
        self._verbose = bool(verbose)

        if self._verbose:
            logger.info(
                f"Welch: fs={self._fs:g} Hz | N={x.shape[0]} | k={plan.n_segment} | "
                f"l={plan.segment_size} | d={plan.stride} | m={plan.dft_size} | "
                f"win={window.name}"
            )

    @classmethod
    def builder(cls, signal, **kwargs) -> "Builder":
        """Returns a Builder for `signal` with k=4 and a=0.5."""
        return Builder(signal, **kwargs)

    @property
    def plan(self) -> SegmentPlan:
        return self._plan

    @property
    def window(self) -> Window:
        return self._window

    @property
    def signal(self) -> np.ndarray:
        return self._signal

    @property
    def fs(self) -> float:
        return self._fs

    @property
    def n_segment(self) -> int:
        return self._plan.n_segment

    @property
    def segment_size(self) -> int:
        return self._plan.segment_size

    @property
    def dft_size(self) -> int:
        return self._plan.dft_size

    @property
    def stride(self) -> int:
        return self._plan.stride

    def __str__(self):
        return "\n".join([
            "Welch spectral density estimator:",
            f" - number of segment: {self.n_segment:>6}",
            f" - segment size     : {self.segment_size:>6}",
            f" - overlap size     : {self._plan.overlap_size:>6}",
            f" - dft size         : {self.dft_size:>6}",
        ])

    def __repr__(self):
        return (
            f"Welch(n_segment={self.n_segment}, segment_size={self.segment_size}, "
            f"stride={self.stride}, dft_size={self.dft_size}, fs={self._fs:g}, "
            f"window={self._window.name!r})"
        )

    def spectral_density_periodogram(self) -> Periodogram:
        """Returns the signal spectral density (signal unit squared per Hertz)."""
        u = 1.0 / (self._window.sqr_sum() * self.n_segment * self._fs)
        return self._periodogram(u, "density")

    def power_periodogram(self) -> Periodogram:
        """Returns the signal power spectrum (signal unit squared)."""
        u = 1.0 / (self._window.sum_sqr() * self.n_segment)
        return self._periodogram(u, "power")

    def periodogram(self, kind: str = "density") -> Periodogram:
        """Dispatch to the 'density' or 'power' periodogram."""
        if kind == "density":
            return self.spectral_density_periodogram()
        if kind == "power":
            return self.power_periodogram()
        raise ValueError(f"`kind` must be one of {_KINDS}, got {kind!r}.")

    def _periodogram(self, u: float, kind: str) -> Periodogram:
        if self._verbose:
            logger.info(f"Computing {kind} periodogram over {self.n_segment} segments...")
        t0 = time.perf_counter()

        spectra = segment_dfts(self._signal, self._starts, self._w, self.dft_size, self._dft)
        values = fold_power(spectra, self._plan.n_bins, dtype=self._signal.dtype)
        values *= values.dtype.type(u)

        if self._verbose:
            logger.info(f"Computation completed in {time.perf_counter() - t0:.3f} seconds.")
        return Periodogram(self._fs, values, kind=kind)


class Builder:
    """
    Mutable configuration for a `Welch` estimator.

    Starts from k=4 segments, an overlap of 0.5, a maximum DFT size of 4096
    and a Hann window. The segment length is re-derived from the signal
    length each time the number of segments or the overlap changes. Setters
    validate their argument and return the builder so calls can be chained:

    >>> welch = Builder(x).sampling_frequency(1e3).n_segment(8).build()
    """

    def __init__(self, signal, *, window: Union[str, Callable] = "hann", verbose: bool = False):
        self.signal = as_signal(signal)
        self.verbose = bool(verbose)
        self._n_segment = DEFAULT_N_SEGMENT
        self._olap = DEFAULT_OLAP
        self.segment_size = segment_size(self.signal.shape[0], self._n_segment, self._olap)
        self.dft_max_size = 2 << (DEFAULT_DFT_LOG2_MAX_SIZE - 1)
        self.fs: Optional[float] = None
        self._window_factory = resolve_window(window)
        self._dft: Callable = scipy_dft

    @classmethod
    def for_spectral_density(cls, signal, fs: float, **kwargs) -> "Builder":
        """Builder sampled at `fs` Hz with a Hann window."""
        kwargs.setdefault("window", "hann")
        return cls(signal, **kwargs).sampling_frequency(fs)

    @classmethod
    def for_power_spectrum(cls, signal, **kwargs) -> "Builder":
        """Builder with a rectangular window."""
        kwargs.setdefault("window", "one")
        return cls(signal, **kwargs)

    def __repr__(self):
        return (
            f"Builder(N={self.signal.shape[0]}, n_segment={self._n_segment}, "
            f"overlap={self._olap}, segment_size={self.segment_size}, "
            f"dft_max_size={self.dft_max_size}, fs={self.fs})"
        )

    def sampling_frequency(self, fs: float) -> "Builder":
        """Sets the signal sampling frequency in Hz (> 0)."""
        self.fs = _check_fs(fs)
        return self

    def overlap(self, overlap: float) -> "Builder":
        """Sets the segment overlapping fraction (0 <= a < 1)."""
        l = segment_size(self.signal.shape[0], self._n_segment, overlap)
        self._olap = float(overlap)
        self.segment_size = l
        return self

    def n_segment(self, n_segment: int) -> "Builder":
        """Sets the number of segments (k >= 1)."""
        if isinstance(n_segment, bool) or not isinstance(n_segment, (int, np.integer)):
            raise TypeError(f"`n_segment` must be an integer, got {n_segment!r}.")
        l = segment_size(self.signal.shape[0], n_segment, self._olap)
        self._n_segment = int(n_segment)
        self.segment_size = l
        return self

    def dft_log2_max_size(self, dft_log2_max_size: int) -> "Builder":
        """Sets the log2 of the maximum size of the discrete Fourier transform."""
        p = dft_log2_max_size
        if isinstance(p, bool) or not isinstance(p, (int, np.integer)):
            raise TypeError(f"`dft_log2_max_size` must be an integer, got {p!r}.")
        if p < 1:
            raise ValueError(f"`dft_log2_max_size` must be at least 1, got {p!r}.")
        self.dft_max_size = 2 << (int(p) - 1)
        return self

    def window(self, win: Union[str, Callable]) -> "Builder":
        """Sets the window type: a name, a Window subclass or a callable."""
        self._window_factory = resolve_window(win)
        return self

    def dft(self, dft: Callable) -> "Builder":
        """Sets the forward DFT engine applied to the (k, m) segment buffer."""
        if not callable(dft):
            raise TypeError("`dft` must be a callable.")
        self._dft = dft
        return self

    def build(self) -> Welch:
        """Plans the segmentation, builds the window and returns the estimator."""
        plan = welch_plan(
            self.signal.shape[0],
            n_segment=self._n_segment,
            olap=self._olap,
            dft_max_size=self.dft_max_size,
        )
        window = self._window_factory(plan.segment_size, dtype=self.signal.dtype)
        return Welch(self.signal, plan, window, fs=self.fs, dft=self._dft, verbose=self.verbose)


def _configure(
    builder: Builder,
    *,
    n_segment: Optional[int] = None,
    olap: Optional[float] = None,
    dft_log2_max_size: Optional[int] = None,
    dft: Optional[Callable] = None,
) -> Builder:
    if n_segment is not None:
        builder.n_segment(n_segment)
    if olap is not None:
        builder.overlap(olap)
    if dft_log2_max_size is not None:
        builder.dft_log2_max_size(dft_log2_max_size)
    if dft is not None:
        builder.dft(dft)
    return builder


def spectral_density(
    data, fs: Optional[float] = None, *, win: Union[str, Callable] = "hann", verbose: bool = False, **kwargs
) -> Periodogram:
    """
    Computes the Welch spectral density of a time series in a single call.

    Parameters
    ----------
    data : np.ndarray
        Input time series (1D, real).
    fs : float, optional
        The sampling frequency in Hz. Defaults to 1.
    win : str or callable, optional
        Window type. Defaults to 'hann'.
    verbose : bool, optional
        Enable informational logging.
    **kwargs :
        `n_segment` (int), `olap` (float), `dft_log2_max_size` (int) and
        `dft` (callable), applied to the `Builder`.

    Returns
    -------
    Periodogram
        Spectral density in signal units squared per Hz.
    """
    builder = Builder(data, window=win, verbose=verbose)
    if fs is not None:
        builder.sampling_frequency(fs)
    return _configure(builder, **kwargs).build().spectral_density_periodogram()


def power_spectrum(
    data, fs: Optional[float] = None, *, win: Union[str, Callable] = "one", verbose: bool = False, **kwargs
) -> Periodogram:
    """
    Computes the Welch power spectrum of a time series in a single call.

    Same options as `spectral_density`; the window defaults to rectangular
    and `fs` only sets the frequency axis.
    """
    builder = Builder(data, window=win, verbose=verbose)
    if fs is not None:
        builder.sampling_frequency(fs)
    return _configure(builder, **kwargs).build().power_periodogram()
