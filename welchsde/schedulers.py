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
import math
from typing import NamedTuple

import numpy as np

import logging

from ._config import MIN_DFT_SIZE
from .utils import round_half_up, next_power_of_two, is_power_of_two

logger = logging.getLogger(__name__)


class SegmentPlan(NamedTuple):
    """
    Segmentation of a time series for Welch averaging.

    n_segment : int
        Number of segments to average (k).
    segment_size : int
        Number of signal samples per segment (l).
    overlap : float
        Requested fractional overlap between consecutive segments (a).
    dft_size : int
        Power-of-two transform size (m >= l); segments are zero-padded to it.
    stride : int
        Distance between consecutive segment starts (d = l - round(l * a)).
    """
    n_segment: int
    segment_size: int
    overlap: float
    dft_size: int
    stride: int

    @property
    def overlap_size(self) -> int:
        """Number of samples shared by consecutive segments."""
        return self.segment_size - self.stride

    @property
    def required_length(self) -> int:
        """Minimum signal length holding all segments."""
        return (self.n_segment - 1) * self.stride + self.segment_size

    @property
    def n_bins(self) -> int:
        """Length of the one-sided periodogram."""
        return self.dft_size // 2

    def starts(self) -> np.ndarray:
        """Start index of every segment."""
        return np.arange(self.n_segment, dtype=np.int64) * self.stride


def _check_olap(olap):
    try:
        a = float(olap)
    except (TypeError, ValueError) as exc:
        raise TypeError(f"`olap` must be a float in [0, 1); got {olap!r}") from exc
    if not math.isfinite(a) or not (0.0 <= a < 1.0):
        raise ValueError(f"`olap` must be in [0, 1); got {a!r}")
    return a


def segment_size(N, n_segment, olap):
    """
    Segment length solving N = k*l - (k-1)*l*a for l, truncated.

    Parameters
    ----------
    N : int
        Signal length.
    n_segment : int
        Number of segments (k >= 1).
    olap : float
        Fractional overlap (0 <= a < 1).
    """
    k = int(n_segment)
    if k < 1:
        raise ValueError(f"`n_segment` must be at least 1, got {n_segment!r}.")
    a = _check_olap(olap)
    return int(math.trunc(int(N) / (k * (1.0 - a) + a)))


def welch_plan(N, n_segment=4, olap=0.5, dft_max_size=4096):
    """
    Welch segmentation scheduler.

    Splits a time series of length N into `n_segment` overlapping segments of
    equal length, each zero-padded to the next power of two:

    [-------------------------------------------------------] total length N
    [-----------] segment 0, starting at 0                  .
    .     [-----------] segment 1, starting at d            .
    .           [-----------] segment 2, starting at 2d     .
    .                 [-----------] segment 3, starting at 3d

    If the padded size would exceed `dft_max_size`, the segment length is
    clamped to `dft_max_size` (no padding) and the number of segments grows to
    consume the full series: k = trunc((N - l*a) / (l*(1 - a))).

    Inputs:
        N (int): Total length of the input data.
        n_segment (int): Requested number of segments (k >= 1).
        olap (float): Fractional overlap between segments, 0 <= a < 1.
        dft_max_size (int): Largest transform size allowed, a power of two.

    Returns:
        SegmentPlan

    Raises:
        ValueError: on invalid inputs, or when the series is too short to hold
        the segmentation.
    """
    N = int(N)
    if N < 1:
        raise ValueError(f"Signal length must be at least 1, got {N}.")
    a = _check_olap(olap)
    l = segment_size(N, n_segment, a)
    k = int(n_segment)
    max_m = int(dft_max_size)
    if max_m < 2 or not is_power_of_two(max_m):
        raise ValueError(f"`dft_max_size` must be a power of two >= 2, got {dft_max_size!r}.")

    if l < 1:
        raise ValueError(
            f"Signal of length {N} is too short for {k} segments with overlap {a}."
        )

    m = next_power_of_two(l)
    if m > max_m:
        l = max_m
        k = int(math.trunc((N - l * a) / (l * (1.0 - a))))
        m = l
        logger.debug(f"[plan] l capped at dft_max_size={max_m}; n_segment raised to {k}.")
        if k < 1:
            raise ValueError(
                f"Signal of length {N} cannot hold one segment of {l} samples with overlap {a}."
            )

    if m < MIN_DFT_SIZE:
        raise ValueError(
            f"Signal of length {N} gives a dft size of {m}; at least {MIN_DFT_SIZE} is required."
        )

    d = l - round_half_up(l * a)
    plan = SegmentPlan(n_segment=k, segment_size=l, overlap=a, dft_size=m, stride=d)

    if not (1 <= d <= l):
        raise ValueError(f"Invalid stride d={d} for segment size l={l}.")
    if plan.required_length > N:
        raise ValueError(
            f"Signal of length {N} is shorter than the {plan.required_length} samples "
            f"required by k={k}, l={l}, d={d}."
        )
    return plan
