import os
os.environ.setdefault("NUMBA_NUM_THREADS", str(max(1, (os.cpu_count() or 1))))
os.environ.setdefault("OMP_NUM_THREADS", "1")
os.environ.setdefault("MKL_NUM_THREADS", "1")

from . import _config
from .analysis import (
    Builder,
    Welch,
    Periodogram,
    spectral_density,
    power_spectrum,
)
from .schedulers import SegmentPlan, welch_plan
from .windows import Window, Hann, One
from .core import scipy_dft, numpy_dft
