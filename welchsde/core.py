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
core.py — segment windowing and power folding kernels (Numba)
-----------------------------------------------------------------------------
Design notes
- Segment j covers x[j*d : j*d + l]; it is multiplied by the window and
  written into row j of a zero-initialised complex (k, m) buffer, so indices
  [l, m) are exact zeros (zero-padding).
- The DFT engine is an injected collaborator: any callable transforming every
  row of a complex (k, m) buffer in the forward direction. It may return the
  result or fill the buffer in place and return None.
- The power fold sums |X_j[i]|^2 over segments in index order for each bin, so
  results do not depend on thread scheduling.
-----------------------------------------------------------------------------
"""
__all__ = [
    "scipy_dft",
    "numpy_dft",
    "segment_dfts",
    "fold_power",
    # jitted kernels
    "_window_segments",
    "_fold_power",
]

from typing import Callable, Optional

import numpy as np
import scipy.fft as sp_fft
from numba import njit, prange


# Transform collaborators ------------------------------------------------------

def scipy_dft(buffer: np.ndarray, workers: Optional[int] = None) -> np.ndarray:
    """Forward DFT of every row of `buffer` with scipy.fft (may reuse the input)."""
    return sp_fft.fft(buffer, axis=-1, overwrite_x=True, workers=workers)


def numpy_dft(buffer: np.ndarray) -> np.ndarray:
    """Forward DFT of every row of `buffer` with numpy.fft."""
    return np.fft.fft(buffer, axis=-1)


# JIT kernels ------------------------------------------------------------------

@njit(parallel=True, cache=True)
def _window_segments(x, starts, w, out):
    """
    Window each segment of `x` into the rows of `out`.

    Parameters
    ----------
    x : (N,) ndarray
        Input time series.
    starts : (K,) ndarray
        Segment start indices.
    w : (L,) ndarray
        Window weights.
    out : (K, M) complex ndarray
        Zero-initialised buffer, M >= L.
    """
    L = w.shape[0]
    for j in prange(starts.shape[0]):
        s = starts[j]
        for n in range(L):
            out[j, n] = x[s + n] * w[n]


@njit(parallel=True, cache=True)
def _fold_power(spectra, out):
    """
    Sum the squared magnitude of the first out.shape[0] bins over all rows.
    """
    K = spectra.shape[0]
    for i in prange(out.shape[0]):
        acc = 0.0
        for j in range(K):
            z = spectra[j, i]
            acc += z.real * z.real + z.imag * z.imag
        out[i] = acc


# Pipeline steps ---------------------------------------------------------------

def segment_dfts(x: np.ndarray, starts: np.ndarray, w: np.ndarray, dft_size: int, dft: Callable) -> np.ndarray:
    """
    Windowed, zero-padded and transformed segments, one per row.

    Returns
    -------
    (K, M) complex ndarray
        Forward DFT of each windowed segment.
    """
    ctype = np.complex64 if x.dtype == np.float32 else np.complex128
    buffer = np.zeros((starts.shape[0], int(dft_size)), dtype=ctype)
    _window_segments(x, starts, w, buffer)
    spectra = dft(buffer)
    if spectra is None:
        spectra = buffer
    spectra = np.asarray(spectra)
    if spectra.shape != buffer.shape:
        raise ValueError(
            f"DFT returned shape {spectra.shape}, expected {buffer.shape}."
        )
    return spectra


def fold_power(spectra: np.ndarray, n_bins: int, dtype=np.float64) -> np.ndarray:
    """One-sided power summed across segments (first `n_bins` bins)."""
    out = np.empty(int(n_bins), dtype=dtype)
    _fold_power(np.ascontiguousarray(spectra), out)
    return out
