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
import pytest
from pytest import approx

import numpy as np
from scipy.signal import windows as sp_windows

from welchsde.windows import Window, Hann, One, resolve_window, win_dict

# --- Tests for the built-in windows ---


@pytest.mark.parametrize("L", [2, 3, 16, 1000, 4096])
def test_hann_matches_symmetric_hann(L):
    """Hann weights are sin(pi*i/(L-1))**2, i.e. SciPy's symmetric Hann."""
    w = Hann(L)
    assert len(w) == L
    assert np.allclose(w.weights, sp_windows.hann(L, sym=True), atol=1e-14)
    assert w.weights[0] == approx(0.0, abs=1e-15)


@pytest.mark.parametrize("L", [0, 1, -3])
def test_hann_rejects_short_lengths(L):
    with pytest.raises(ValueError):
        Hann(L)


def test_hann_normalization_sums():
    """sqr_sum and sum_sqr are reductions of the weights."""
    w = Hann(512)
    assert w.sqr_sum() == approx(np.sum(w.weights**2))
    assert w.sum_sqr() == approx(np.sum(w.weights) ** 2)
    # Hann: sum(w) -> (L-1)/2, sum(w^2) -> 3(L-1)/8
    assert w.sum_sqr() == approx((511 / 2) ** 2)
    assert w.sqr_sum() == approx(3 * 511 / 8)


@pytest.mark.parametrize("L", [1, 7, 1024])
def test_one_window(L):
    w = One(L)
    assert np.all(w.weights == 1.0)
    assert w.sqr_sum() == L
    assert w.sum_sqr() == L**2


def test_zero_length_window_fails():
    with pytest.raises(ValueError):
        One(0)
    with pytest.raises(ValueError):
        Window([])


# --- Tests for generic Window construction ---


def test_window_weights_are_read_only():
    w = Hann(8)
    with pytest.raises(ValueError):
        w.weights[0] = 1.0


def test_window_copies_its_weights():
    src = np.ones(4)
    w = Window(src)
    src[0] = 5.0
    assert w.weights[0] == 1.0


@pytest.mark.parametrize(
    "weights",
    [np.array([1.0, -0.5, 1.0]), np.array([1.0, np.nan]), np.ones((2, 2))],
    ids=["negative", "nan", "2d"],
)
def test_window_rejects_invalid_weights(weights):
    with pytest.raises(ValueError):
        Window(weights)


def test_all_zero_window_has_zero_sums():
    w = Window(np.zeros(16))
    assert w.sqr_sum() == 0.0
    assert w.sum_sqr() == 0.0


def test_window_dtype():
    w = Hann(64, dtype=np.float32)
    assert w.weights.dtype == np.float32
    assert w.sqr_sum() == approx(Hann(64).sqr_sum(), rel=1e-6)


def test_window_from_function():
    w = Window.from_function(np.blackman, 128)
    assert w.name == "blackman"
    assert np.allclose(w.weights, np.blackman(128))
    with pytest.raises(ValueError):
        Window.from_function(lambda n: np.ones(n + 1), 128)


# --- Tests for resolve_window ---


@pytest.mark.parametrize("name", sorted(win_dict))
def test_resolve_window_names(name):
    factory = resolve_window(name.upper())
    w = factory(32, dtype=np.float64)
    assert isinstance(w, Window)
    assert len(w) == 32


def test_resolve_window_classes_and_callables():
    assert resolve_window(Hann) is Hann
    assert resolve_window("boxcar") is One

    factory = resolve_window(np.hamming)
    w = factory(50, dtype=np.float32)
    assert w.name == "hamming"
    assert w.weights.dtype == np.float32
    assert np.allclose(w.weights, np.hamming(50), atol=1e-6)

    # Callables may also return a Window instance
    w = resolve_window(lambda n: One(n))(10, dtype=np.float32)
    assert w.weights.dtype == np.float32
    assert w.sum_sqr() == 100


def test_resolve_window_errors():
    with pytest.raises(ValueError):
        resolve_window("not-a-window")
    with pytest.raises(TypeError):
        resolve_window(42)
    with pytest.raises(TypeError):
        resolve_window(Window)
    with pytest.raises(ValueError):
        resolve_window(lambda n: np.ones(n - 1))(8)
