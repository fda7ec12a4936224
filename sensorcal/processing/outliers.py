"""
Outlier Rejection Module
========================
Flags outliers in a single channel (Z-score, IQR or MAD) and replaces them
with the nearest valid sample, looking forward first and then backward.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Union

import numpy as np

from sensorcal.processing.parameters import OutlierMethod

logger = logging.getLogger(__name__)

# Guards against division by a zero spread
EPSILON = 1e-10


@dataclass
class RejectionResult:
    """Results from outlier rejection on one channel."""
    original: np.ndarray
    cleaned: np.ndarray
    valid_mask: np.ndarray
    outlier_count: int
    outlier_pct: float
    outlier_indices: np.ndarray


def _finite_part(values: np.ndarray):
    """Indices and values of the non-NaN samples."""
    idx = np.flatnonzero(~np.isnan(values))
    return idx, values[idx]


def _zscore_mask(values: np.ndarray, threshold: float) -> np.ndarray:
    mask = np.zeros(values.shape, dtype=bool)
    idx, good = _finite_part(values)
    if good.size == 0:
        return mask

    mean = good.mean()
    std = good.std()  # Population std
    mask[idx] = np.abs(good - mean) / (std + EPSILON) <= threshold
    return mask


def _iqr_mask(values: np.ndarray, threshold: float) -> np.ndarray:
    # threshold is not used; the fences sit at a fixed 1.5 * IQR
    mask = np.zeros(values.shape, dtype=bool)
    idx, good = _finite_part(values)
    if good.size == 0:
        return mask

    ordered = np.sort(good)
    n = ordered.size
    q1 = ordered[int(0.25 * n)]
    q3 = ordered[int(0.75 * n)]
    iqr = q3 - q1
    lower = q1 - 1.5 * iqr
    upper = q3 + 1.5 * iqr
    mask[idx] = (good >= lower) & (good <= upper)
    return mask


def _mad_mask(values: np.ndarray, threshold: float) -> np.ndarray:
    mask = np.zeros(values.shape, dtype=bool)
    idx, good = _finite_part(values)
    if good.size == 0:
        return mask

    ordered = np.sort(good)
    n = ordered.size
    median = ordered[n // 2]
    deviations = np.sort(np.abs(ordered - median))
    mad = deviations[n // 2]
    modified_z = 0.6745 * np.abs(good - median) / (mad + EPSILON)
    mask[idx] = modified_z <= threshold
    return mask


def _no_rejection_mask(values: np.ndarray, threshold: float) -> np.ndarray:
    return ~np.isnan(values)


# Every method, including UNKNOWN, has an explicit entry
MASK_POLICIES: Dict[OutlierMethod, Callable[[np.ndarray, float], np.ndarray]] = {
    OutlierMethod.ZSCORE: _zscore_mask,
    OutlierMethod.IQR: _iqr_mask,
    OutlierMethod.MAD: _mad_mask,
    OutlierMethod.UNKNOWN: _no_rejection_mask,
}


class OutlierRejector:
    """
    Classifies samples as valid/invalid and substitutes invalid ones.

    NaN samples never contribute to the statistics and are always invalid.
    Substitution copies the first valid sample after the outlier; when there
    is none it copies the last valid sample before it; a channel with no
    valid samples at all becomes zeros. This is a directional copy, not an
    interpolation.
    """

    def __init__(
        self,
        method: Union[str, OutlierMethod] = OutlierMethod.ZSCORE,
        threshold: float = 3.0
    ):
        """
        Initialize the rejector.

        Args:
            method: Outlier method (enum member or case-insensitive name)
            threshold: Z-score / modified Z-score limit (unused by IQR)
        """
        self.method = OutlierMethod.parse(method)
        self.threshold = threshold

    def detect(self, values: np.ndarray) -> np.ndarray:
        """
        Classify samples.

        Args:
            values: 1-D array of channel samples

        Returns:
            Boolean mask where True indicates a valid sample
        """
        values = np.asarray(values, dtype=float)
        return MASK_POLICIES[self.method](values, self.threshold)

    @staticmethod
    def replace(values: np.ndarray, valid_mask: np.ndarray) -> np.ndarray:
        """
        Replace invalid samples with the nearest valid one (forward first).

        Args:
            values: Value array
            valid_mask: Boolean mask of valid samples

        Returns:
            Cleaned copy of values
        """
        cleaned = np.array(values, dtype=float, copy=True)
        bad = np.flatnonzero(~valid_mask)
        if bad.size == 0:
            return cleaned

        good = np.flatnonzero(valid_mask)
        if good.size == 0:
            cleaned[bad] = 0.0
            return cleaned

        # First valid index strictly after each outlier; past the end means
        # every valid sample lies behind it, so take the last one.
        pos = np.searchsorted(good, bad, side='right')
        pos = np.where(pos < good.size, pos, good.size - 1)
        cleaned[bad] = cleaned[good[pos]]
        return cleaned

    def reject(self, values: np.ndarray) -> RejectionResult:
        """
        Detect and replace outliers.

        Args:
            values: 1-D array of channel samples

        Returns:
            RejectionResult with cleaned data and outlier statistics
        """
        values = np.asarray(values, dtype=float)
        valid_mask = self.detect(values)
        cleaned = self.replace(values, valid_mask)

        outlier_indices = np.flatnonzero(~valid_mask)
        outlier_count = int(outlier_indices.size)
        outlier_pct = 100.0 * outlier_count / values.size if values.size > 0 else 0.0

        if outlier_count == values.size and values.size > 0:
            logger.debug("No valid samples in channel; substituting zeros")

        return RejectionResult(
            original=values,
            cleaned=cleaned,
            valid_mask=valid_mask,
            outlier_count=outlier_count,
            outlier_pct=outlier_pct,
            outlier_indices=outlier_indices
        )


def reject_outliers(
    channel: np.ndarray,
    method: Union[str, OutlierMethod] = OutlierMethod.ZSCORE,
    threshold: float = 3.0
) -> np.ndarray:
    """
    Convenience function to clean one channel.

    Args:
        channel: 1-D array of samples
        method: Outlier method
        threshold: Detection threshold

    Returns:
        Cleaned array of the same length
    """
    return OutlierRejector(method=method, threshold=threshold).reject(channel).cleaned
