"""
Smoothing Module
================
Windowed filters for a single channel.

Windows are centred on each sample and span window_size // 2 samples on
either side. At the edges they are clipped to the series, so the first and
last outputs average fewer samples (no padding).
"""

import logging
from typing import Callable, Dict, Union

import numpy as np

from sensorcal.processing.parameters import FilterType

logger = logging.getLogger(__name__)


def _window_counts(n: int, half: int) -> np.ndarray:
    """Number of samples in each clipped window."""
    i = np.arange(n)
    return np.minimum(n - 1, i + half) - np.maximum(0, i - half) + 1


def moving_average(values: np.ndarray, window_size: int) -> np.ndarray:
    """
    Mean over [max(0, i - w//2), min(N-1, i + w//2)] for each index i.

    Args:
        values: 1-D array
        window_size: Window length (half-window is window_size // 2)

    Returns:
        Smoothed array of the same length
    """
    values = np.asarray(values, dtype=float)
    n = values.size
    if n == 0:
        return values.copy()

    half = window_size // 2
    # full[k] sums values[k - 2*half .. k]; shifting by half centres it on i
    full = np.convolve(values, np.ones(2 * half + 1), mode='full')
    sums = full[half:half + n]
    return sums / _window_counts(n, half)


def median_filter(values: np.ndarray, window_size: int) -> np.ndarray:
    """
    Median over the same clipped window as moving_average.

    The window is sorted and the element at count // 2 is taken, so even
    length windows at the edges pick the upper of the two middle values.
    """
    values = np.asarray(values, dtype=float)
    n = values.size
    half = window_size // 2
    result = np.empty(n, dtype=float)

    for i in range(n):
        start = max(0, i - half)
        end = min(n - 1, i + half)
        window = np.sort(values[start:end + 1])
        result[i] = window[window.size // 2]

    return result


def identity(values: np.ndarray, window_size: int) -> np.ndarray:
    return np.array(values, dtype=float, copy=True)


# Placeholder types resolve through FilterType.implementation before lookup
FILTER_POLICIES: Dict[FilterType, Callable[[np.ndarray, int], np.ndarray]] = {
    FilterType.MOVING_AVERAGE: moving_average,
    FilterType.MEDIAN: median_filter,
    FilterType.UNKNOWN: identity,
}


class Smoother:
    """
    Applies one of the windowed filters to a 1-D series.

    Savitzky-Golay and Butterworth are placeholders that run the moving
    average (see FilterType.is_placeholder). Unknown filter names pass the
    data through unchanged.
    """

    def __init__(
        self,
        filter_type: Union[str, FilterType] = FilterType.MOVING_AVERAGE,
        window_size: int = 5
    ):
        self.filter_type = FilterType.parse(filter_type)
        self.window_size = window_size

        if self.filter_type.is_placeholder:
            logger.debug(
                "Filter '%s' is not implemented; using %s",
                self.filter_type.value, self.filter_type.implementation.value
            )

    def smooth(self, values: np.ndarray) -> np.ndarray:
        """
        Filter a channel.

        Args:
            values: 1-D array

        Returns:
            New array of the same length
        """
        apply = FILTER_POLICIES[self.filter_type.implementation]
        return apply(values, self.window_size)


def smooth_channel(
    channel: np.ndarray,
    filter_type: Union[str, FilterType] = FilterType.MOVING_AVERAGE,
    window_size: int = 5
) -> np.ndarray:
    """Convenience function to smooth one channel."""
    return Smoother(filter_type=filter_type, window_size=window_size).smooth(channel)
