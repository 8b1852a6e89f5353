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

from welchsde.schedulers import SegmentPlan, segment_size, welch_plan
from welchsde.utils import next_power_of_two, round_half_up

# --- Tests for helpers ---


@pytest.mark.parametrize(
    "n, expected", [(0, 1), (1, 1), (2, 2), (3, 4), (1000, 1024), (4096, 4096), (4097, 8192)]
)
def test_next_power_of_two(n, expected):
    assert next_power_of_two(n) == expected


@pytest.mark.parametrize("val, expected", [(2.5, 3), (2.4, 2), (3.5, 4), (0.5, 1), (7.0, 7)])
def test_round_half_up(val, expected):
    assert round_half_up(val) == expected


def test_segment_size_solves_length_equation():
    # N = k*l - (k-1)*l*a  ->  l = trunc(N / (k(1-a) + a))
    assert segment_size(15, 4, 0.5) == 6
    assert segment_size(1000, 8, 0.5) == 222
    assert segment_size(1000, 4, 0.0) == 250


# --- Tests for welch_plan ---


@pytest.mark.parametrize(
    "N", [13, 15, 16, 100, 1001, 2560, 4999, 10000, 10240, 10243, 20000, 65536, 1_000_003]
)
def test_default_plan_is_consistent(N):
    """k segments of length l with stride d fit in [0, N)."""
    plan = welch_plan(N)
    k, l, a, m, d = plan
    assert a == 0.5
    assert 1 <= d <= l
    assert m >= l and (m & (m - 1)) == 0
    assert m <= 4096
    assert plan.required_length <= N
    assert plan.starts()[-1] + l <= N
    if m == 4096 and l == 4096 and N / 2.5 >= 4097:
        assert k >= 4
    else:
        assert k == 4
        assert m == next_power_of_two(l)


def test_plan_small_signal():
    plan = welch_plan(15)
    assert plan == SegmentPlan(n_segment=4, segment_size=6, overlap=0.5, dft_size=8, stride=3)
    assert plan.overlap_size == 3
    assert plan.n_bins == 4
    assert np.array_equal(plan.starts(), [0, 3, 6, 9])


def test_plan_odd_segment_rounds_overlap_up():
    # l = 5, round(2.5) = 3 -> d = 2 keeps all 4 segments inside N = 13
    plan = welch_plan(13)
    assert plan.segment_size == 5
    assert plan.stride == 2
    assert plan.required_length == 11


def test_cap_branch_boundary():
    below = welch_plan(10240)
    assert (below.n_segment, below.segment_size, below.dft_size) == (4, 4096, 4096)

    above = welch_plan(20000)
    assert above.segment_size == 4096
    assert above.dft_size == 4096
    assert above.n_segment == 8
    assert above.n_segment > 4
    assert above.required_length <= 20000


def test_cap_branch_respects_custom_max():
    plan = welch_plan(10000, dft_max_size=1024)
    assert plan.segment_size == plan.dft_size == 1024
    # k = trunc((10000 - 512) / 512)
    assert plan.n_segment == 18


def test_plan_without_overlap():
    plan = welch_plan(100, n_segment=4, olap=0.0)
    assert (plan.segment_size, plan.stride, plan.dft_size) == (25, 25, 32)
    assert plan.required_length == 100


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(N=0),
        dict(N=5),
        dict(N=1000, n_segment=0),
        dict(N=1000, olap=1.0),
        dict(N=1000, olap=-0.1),
        dict(N=1000, olap=float("nan")),
        dict(N=1000, dft_max_size=3),
        dict(N=1000, dft_max_size=1),
    ],
)
def test_plan_errors(kwargs):
    with pytest.raises(ValueError):
        welch_plan(**kwargs)


def test_plan_olap_type_error():
    with pytest.raises(TypeError):
        welch_plan(1000, olap="half")
