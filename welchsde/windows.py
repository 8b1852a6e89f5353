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
"""
windows.py — segment weighting functions for the Welch estimator
-----------------------------------------------------------------------------
A window is built from a segment length alone and exposes its weights plus
the two normalization sums used by the periodograms:

    sqr_sum = sum(w**2)      -> spectral density scaling
    sum_sqr = sum(w)**2      -> power spectrum scaling

Any callable `length -> Window` (or `length -> array of weights`) is a valid
window type, so new shapes plug in without touching the estimator.
-----------------------------------------------------------------------------
"""
from typing import Callable, Optional, Union

import numpy as np

__all__ = ["Window", "Hann", "One", "resolve_window", "win_dict"]


def _check_length(w: np.ndarray, length: int) -> None:
    if w.ndim != 1 or w.shape[0] != int(length):
        raise ValueError(f"Window length {w.shape} != L {int(length)}.")


class Window:
    """
    Immutable window weights and their normalization sums.

    Parameters
    ----------
    weights : array-like
        Non-negative, finite weights, one per segment sample.
    name : str, optional
        Human-readable name used in summaries.
    dtype : numpy dtype, optional
        Floating point precision of the stored weights. Defaults to float64.
    """

    def __init__(self, weights, name: Optional[str] = None, dtype=np.float64):
        w = np.array(weights, dtype=dtype, copy=True)
        if w.ndim != 1:
            raise ValueError(f"Window weights must be 1D, got shape {w.shape}.")
        if w.shape[0] < 1:
            raise ValueError("Window length must be at least 1, got 0.")
        if not np.all(np.isfinite(w)):
            raise ValueError("Window weights must be finite.")
        if np.any(w < 0):
            # round-off at the edges of cosine-sum windows (e.g. np.blackman)
            if np.any(w < -1e-12 * np.max(np.abs(w))):
                raise ValueError("Window weights must be non-negative.")
            w = np.clip(w, 0, None)
        w.flags.writeable = False
        self._weights = w
        self._sqr_sum = float(np.sum(w.astype(np.float64) ** 2))
        self._sum_sqr = float(np.sum(w, dtype=np.float64)) ** 2
        self.name = name or type(self).__name__.lower()

    @classmethod
    def from_function(cls, func: Callable, length: int, name: Optional[str] = None, dtype=np.float64):
        """
        Wrap a weight-generating callable such as `np.hanning` or
        `scipy.signal.windows.blackman`.
        """
        w = np.asarray(func(int(length)))
        _check_length(w, length)
        return cls(w, name=name or getattr(func, "__name__", "custom_win"), dtype=dtype)

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    @property
    def length(self) -> int:
        return int(self._weights.shape[0])

    def sqr_sum(self) -> float:
        """Sum of the squared weights."""
        return self._sqr_sum

    def sum_sqr(self) -> float:
        """Square of the weights sum."""
        return self._sum_sqr

    def __len__(self):
        return self.length

    def __repr__(self):
        return f"{type(self).__name__}(length={self.length}, name={self.name!r})"


class Hann(Window):
    """Hann window, w[i] = sin(pi * i / (L - 1))**2. Requires L >= 2."""

    def __init__(self, length: int, dtype=np.float64):
        length = int(length)
        if length < 2:
            raise ValueError(f"Hann window requires a length of at least 2, got {length}.")
        i = np.arange(length, dtype=np.float64)
        super().__init__(np.sin(np.pi * i / (length - 1)) ** 2, name="hann", dtype=dtype)


class One(Window):
    """Rectangular window (no weighting), for raw power spectrum estimates."""

    def __init__(self, length: int, dtype=np.float64):
        length = int(length)
        if length < 1:
            raise ValueError(f"Rectangular window requires a length of at least 1, got {length}.")
        super().__init__(np.ones(length), name="one", dtype=dtype)


win_dict = {
    "hann": Hann,
    "hanning": Hann,
    "one": One,
    "rect": One,
    "rectangular": One,
    "boxcar": One,
}


def resolve_window(win: Union[str, Callable]) -> Callable[..., Window]:
    """
    Resolve a window name, class or callable into a factory `(length, dtype) -> Window`.

    Parameters
    ----------
    win : str or callable
        A registered name (see `win_dict`), a `Window` subclass constructed
        as `cls(length, dtype=...)`, or any callable taking a length and
        returning either a `Window` or an array of weights (e.g. `np.blackman`).

    Returns
    -------
    callable
        Factory building a `Window` of the requested length and dtype.
    """
    if isinstance(win, str):
        key = win.lower()
        if key not in win_dict:
            raise ValueError(
                f"Window function '{win}' not recognized. Available: {sorted(win_dict)}"
            )
        return win_dict[key]

    if isinstance(win, type) and issubclass(win, Window):
        if win is Window:
            raise TypeError("Pass a Window subclass built from a length, e.g. Hann or One.")
        return win

    if callable(win):
        name = getattr(win, "__name__", "custom_win")

        def _factory(length, dtype=np.float64):
            w = win(int(length))
            if isinstance(w, Window):
                _check_length(w.weights, length)
                if w.weights.dtype != np.dtype(dtype):
                    return Window(w.weights, name=w.name, dtype=dtype)
                return w
            w = np.asarray(w)
            _check_length(w, length)
            return Window(w, name=name, dtype=dtype)

        return _factory

    raise TypeError("Window must be a recognized string or a callable function.")
