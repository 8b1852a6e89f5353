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
import numpy as np


@pytest.fixture
def white_noise_data():
    """Zero-mean Gaussian noise whose default plan needs no zero-padding (l = m = 1024)."""
    rng = np.random.default_rng(seed=7)
    sigma = 2.0
    N = 2560
    return {"data": sigma * rng.standard_normal(N), "fs": 1.0, "sigma": sigma, "N": N}


@pytest.fixture
def long_white_noise_data():
    """Noise long enough for the transform-size cap to apply."""
    rng = np.random.default_rng(seed=11)
    N = 65536
    return {"data": rng.standard_normal(N), "fs": 1.0, "sigma": 1.0, "N": N}


@pytest.fixture
def sine_data():
    """Sinusoid on an exact DFT bin plus weak noise."""
    rng = np.random.default_rng(seed=3)
    fs = 1e3
    f0 = 125.0
    N = 2560
    t = np.arange(N) / fs
    x = 2.0 * np.sqrt(2.0) * np.sin(2 * np.pi * f0 * t) + 0.01 * rng.standard_normal(N)
    return {"data": x, "fs": fs, "f0": f0, "N": N}
